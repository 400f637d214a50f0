from .loader import load_config
from .models import ConverterConfig, NoteleafConfig

__all__ = [
    "ConverterConfig",
    "NoteleafConfig",
    "load_config",
]
