from pydantic import BaseModel, Field
from typing import Literal


class ConverterConfig(BaseModel):
    note_dir: str | None = None
    code_theme: str = "catppuccin-mocha"
    resolve_images: bool = True
    max_image_size_mb: int = Field(default=10, gt=0)

    @property
    def max_image_bytes(self) -> int:
        return self.max_image_size_mb * 1024 * 1024


class NoteleafConfig(BaseModel):
    converter: ConverterConfig = Field(default_factory=ConverterConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
