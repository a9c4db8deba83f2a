"""Configuration file loading."""

import logging
from pathlib import Path

import yaml

from diffguard.config.settings import Settings

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = [".diffguard.yaml", ".diffguard.yml", "diffguard.yaml", "diffguard.yml"]


def _find_config_file(config_path: Path | None = None) -> Path | None:
  """Find config file path, or None if no config exists."""
  if config_path:
    return config_path

  for filename in CONFIG_FILENAMES:
    path = Path.cwd() / filename
    if path.exists():
      return path

  return None


def load_config(config_path: Path | None = None) -> Settings:
  """Load configuration from file or defaults."""
  path = _find_config_file(config_path)
  if path:
    return _load_from_file(path)
  return Settings()


def _load_from_file(path: Path) -> Settings:
  """Load settings from a YAML file."""
  if not path.exists():
    raise FileNotFoundError(f"Config file not found: {path}")

  logger.info("Loading config from %s", path)
  with open(path) as f:
    data = yaml.safe_load(f) or {}

  if not isinstance(data, dict):
    raise ValueError(f"Config file {path} must contain a mapping")

  return _parse_config(data, base_dir=path.parent)


def _parse_config(data: dict, base_dir: Path | None = None) -> Settings:
  """Parse config dict into Settings.

  Relative paths in the config are resolved against the config file's
  directory.
  """
  data = dict(data)
  if base_dir is not None:
    for key in ("rules_file", "report_dir"):
      if data.get(key):
        value = Path(data[key]).expanduser()
        data[key] = value if value.is_absolute() else base_dir / value

  return Settings(**data)
