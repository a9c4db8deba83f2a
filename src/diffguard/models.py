"""Core domain models for added-code scanning."""

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
  """Rule severity levels."""

  CRITICAL = "critical"
  WARNING = "warning"
  REVIEW = "review"
  INFO = "info"

  @property
  def rank(self) -> int:
    """Emphasis order for presentation; never used to skip rules."""
    return _SEVERITY_RANKS[self]


_SEVERITY_RANKS = {
  Severity.CRITICAL: 3,
  Severity.WARNING: 2,
  Severity.REVIEW: 1,
  Severity.INFO: 0,
}


class OverallStatus(Enum):
  """Overall outcome of a scan."""

  CLEAN = "clean"
  WARNING = "warning"
  CRITICAL = "critical"


class ChangeKind(Enum):
  """How a path changed between the two revisions."""

  ADDED = "added"
  MODIFIED = "modified"
  DELETED = "deleted"
  RENAMED = "renamed"

  @classmethod
  def from_status(cls, status: str) -> "ChangeKind":
    """Map a git --name-status letter (e.g. 'M', 'R100') to a ChangeKind."""
    letter = status[:1].upper()
    if letter in ("A", "C"):
      return cls.ADDED
    if letter == "D":
      return cls.DELETED
    if letter == "R":
      return cls.RENAMED
    return cls.MODIFIED


@dataclass(frozen=True)
class ChangedPath:
  """A path that changed in the revision range."""

  path: str
  kind: ChangeKind
  old_path: str | None = None


@dataclass(frozen=True)
class CorpusLine:
  """One added line, without the diff addition marker."""

  number: int
  text: str


@dataclass(frozen=True)
class DiffStats:
  """Line-delta statistics reported by version control."""

  files_changed: int = 0
  lines_added: int = 0
  lines_removed: int = 0
