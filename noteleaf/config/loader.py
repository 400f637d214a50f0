"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import NoteleafConfig

CONFIG_ENV_VAR = "NOTELEAF_CONFIG"

_ENV_REF_RE = re.compile(r"\$\{(\w+)\}")


def config_paths(cli_path: str | None = None) -> list[Path]:
    """Candidate config files, highest priority first."""
    paths = []
    if cli_path:
        paths.append(Path(cli_path))
    if os.environ.get(CONFIG_ENV_VAR):
        paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    paths.append(Path("./noteleaf.yaml"))
    paths.append(Path.home() / ".noteleaf" / "config.yaml")
    return paths


def load_config(cli_path: str | None = None) -> NoteleafConfig:
    """Load the first non-empty config file found, or defaults.

    Order: --config path, $NOTELEAF_CONFIG, ./noteleaf.yaml,
    ~/.noteleaf/config.yaml. Raises ValueError for unparseable or invalid files.
    """
    for path in config_paths(cli_path):
        if not path.is_file():
            continue
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid config in {path}: expected a mapping")
        try:
            return NoteleafConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return NoteleafConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings; unset vars become ""."""
    if isinstance(obj, str):
        return _ENV_REF_RE.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `noteleaf config init`
DEFAULT_CONFIG_TEMPLATE = """\
# noteleaf.yaml

# Markdown <-> leaflet conversion
converter:
  # note_dir: "${HOME}/notes"      # base for relative image paths
  code_theme: "catppuccin-mocha"
  resolve_images: true           # upload stand-alone local images
  max_image_size_mb: 10

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
