"""Output formatting."""

from diffguard.output.formatter import (
  JsonFormatter,
  MarkdownFormatter,
  OutputFormatter,
  TerminalFormatter,
  TextFormatter,
  get_formatter,
)
from diffguard.output.writer import save_report

__all__ = [
  "OutputFormatter",
  "TerminalFormatter",
  "JsonFormatter",
  "MarkdownFormatter",
  "TextFormatter",
  "get_formatter",
  "save_report",
]
