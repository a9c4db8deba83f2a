"""Configuration management."""

from diffguard.config.loader import load_config
from diffguard.config.settings import OUTPUT_FORMATS, Settings

__all__ = ["OUTPUT_FORMATS", "Settings", "load_config"]
