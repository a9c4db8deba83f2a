"""Application settings."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from diffguard.diff.filters import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXCLUDE_PATTERNS
from diffguard.rules.engine import DEFAULT_MAX_EXAMPLES

OUTPUT_FORMATS = ("terminal", "json", "markdown", "text")


class Settings(BaseModel):
  """Application configuration."""

  model_config = ConfigDict(extra="forbid")

  base_branch: str = "master"
  exclude_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
  exclude_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
  max_examples: int = Field(default=DEFAULT_MAX_EXAMPLES, ge=1)
  workers: int = Field(default=1, ge=1)
  rules_file: Path | None = None
  disabled_rules: list[str] = Field(default_factory=list)
  format: str = Field(default="terminal", pattern="^(terminal|json|markdown|text)$")
  report_dir: Path | None = None
