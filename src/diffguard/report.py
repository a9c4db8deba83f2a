"""The structured scan report handed to presentation."""

from dataclasses import dataclass
from typing import Mapping, Sequence

from diffguard.models import ChangedPath, DiffStats, OverallStatus, Severity
from diffguard.rules.aggregate import aggregate, overall_status
from diffguard.rules.base import Finding, SkippedRule
from diffguard.rules.engine import Evaluation


@dataclass(frozen=True)
class Report:
  """Result of scanning the code added in a revision range.

  File and line statistics come from version control, not from the corpus.
  """

  findings: Sequence[Finding]
  counts: Mapping[Severity, int]
  changed_files: Sequence[ChangedPath] = ()
  included_files: Sequence[ChangedPath] = ()
  lines_added: int = 0
  lines_removed: int = 0
  skipped: Sequence[SkippedRule] = ()
  base_ref: str = ""
  target_ref: str = ""
  subtree: str = "."
  corpus_size: int = 0
  sections: Sequence[str] = ()

  @property
  def status(self) -> OverallStatus:
    return overall_status(self.counts)

  @property
  def changed_file_count(self) -> int:
    return len(self.changed_files)

  @property
  def issues_found(self) -> int:
    return len(self.findings)

  @property
  def complete(self) -> bool:
    """False when some rules failed and are missing from the findings."""
    return not self.skipped

  def count(self, severity: Severity) -> int:
    return self.counts.get(severity, 0)

  def findings_by_section(self) -> dict[str, list[Finding]]:
    """Findings grouped by section, sections in catalogue order.

    Sections without findings are omitted.
    """
    grouped: dict[str, list[Finding]] = {section: [] for section in self.sections}
    for finding in self.findings:
      grouped.setdefault(finding.rule.section, []).append(finding)
    return {section: items for section, items in grouped.items() if items}


def build_report(
  evaluation: Evaluation,
  changed_files: Sequence[ChangedPath] = (),
  included_files: Sequence[ChangedPath] = (),
  stats: DiffStats | None = None,
  base_ref: str = "",
  target_ref: str = "",
  subtree: str = ".",
  corpus_size: int = 0,
  sections: Sequence[str] = (),
) -> Report:
  """Assemble a Report; severity counts are a single reduction over findings."""
  stats = stats or DiffStats()
  return Report(
    findings=tuple(evaluation.findings),
    counts=aggregate(evaluation.findings),
    changed_files=tuple(changed_files),
    included_files=tuple(included_files),
    lines_added=stats.lines_added,
    lines_removed=stats.lines_removed,
    skipped=tuple(evaluation.skipped),
    base_ref=base_ref,
    target_ref=target_ref,
    subtree=subtree,
    corpus_size=corpus_size,
    sections=tuple(sections),
  )
