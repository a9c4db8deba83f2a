"""Severity counting and overall status."""

from typing import Iterable, Mapping

from diffguard.models import OverallStatus, Severity
from diffguard.rules.base import Finding


def aggregate(findings: Iterable[Finding]) -> dict[Severity, int]:
  """Count findings per severity.

  Each finding counts once, however many lines its rule matched. Every
  severity is present in the result, zero when nothing fired.
  """
  counts = {severity: 0 for severity in Severity}
  for finding in findings:
    counts[finding.rule.severity] += 1
  return counts


def overall_status(counts: Mapping[Severity, int]) -> OverallStatus:
  """Derive the overall status; REVIEW and INFO never affect it."""
  if counts.get(Severity.CRITICAL, 0) > 0:
    return OverallStatus.CRITICAL
  if counts.get(Severity.WARNING, 0) > 0:
    return OverallStatus.WARNING
  return OverallStatus.CLEAN
