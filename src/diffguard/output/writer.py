"""Saving plain-text reports to disk."""

from datetime import datetime
from pathlib import Path

from diffguard.output.formatter import TextFormatter
from diffguard.report import Report


def report_path(report_dir: Path, name: str, now: datetime | None = None) -> Path:
  """Return REPORT_DIR/<name>/security-report_<timestamp>.txt."""
  timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
  return report_dir / name / f"security-report_{timestamp}.txt"


def save_report(
  report: Report,
  report_dir: Path,
  name: str,
  now: datetime | None = None,
) -> Path:
  """Write the plain-text report and return its path."""
  path = report_path(report_dir, name, now)
  path.parent.mkdir(parents=True, exist_ok=True)
  path.write_text(TextFormatter().format(report), encoding="utf-8")
  return path
