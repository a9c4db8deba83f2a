"""Rule abstractions for added-code scanning."""

import re
from dataclasses import dataclass, field
from typing import Sequence

from diffguard.models import CorpusLine, Severity


class InvalidRule(Exception):
  """A rule or catalogue definition is malformed."""


@dataclass(frozen=True)
class Rule:
  """A detection rule: a pattern, a human message and a severity.

  Rules are plain data. The pattern is compiled once, case-insensitively,
  at construction so a malformed catalogue fails before any scan starts.
  Matching is an unanchored search: a rule matches a line if its pattern
  occurs anywhere in it.

  Example:
    Rule(
      id="XSS001",
      section="Cross-Site Scripting (XSS)",
      pattern=r"echo.*\\$_(?:GET|POST|REQUEST)",
      message="Echoing user input without escaping",
      severity=Severity.CRITICAL,
    )
  """

  id: str
  section: str
  pattern: str
  message: str
  severity: Severity
  regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

  def __post_init__(self) -> None:
    if not self.id:
      raise InvalidRule("Rule id must not be empty")
    if not isinstance(self.severity, Severity):
      raise InvalidRule(f"Rule {self.id}: severity must be a Severity, got {self.severity!r}")
    try:
      compiled = re.compile(self.pattern, re.IGNORECASE)
    except (re.error, TypeError) as e:
      raise InvalidRule(f"Rule {self.id}: invalid pattern {self.pattern!r}: {e}") from e
    object.__setattr__(self, "regex", compiled)

  def matches(self, text: str) -> bool:
    """Check whether the pattern occurs anywhere in text."""
    return self.regex.search(text) is not None


@dataclass(frozen=True)
class Finding:
  """A rule that matched at least one corpus line.

  matched_lines keeps the first few matches for display; match_count is
  the true total, so truncation never hides how often a rule fired.
  """

  rule: Rule
  matched_lines: Sequence[CorpusLine]
  match_count: int

  @property
  def severity(self) -> Severity:
    return self.rule.severity

  @property
  def truncated(self) -> bool:
    return self.match_count > len(self.matched_lines)

  @property
  def hidden_count(self) -> int:
    """Number of matches not retained as examples."""
    return self.match_count - len(self.matched_lines)


@dataclass(frozen=True)
class SkippedRule:
  """A rule whose evaluation failed and was left out of the findings."""

  rule: Rule
  reason: str
