"""Building the scan corpus from unified diff text."""

import logging
import re
from dataclasses import dataclass
from typing import Iterator

from diffguard.models import CorpusLine

logger = logging.getLogger(__name__)

# Pattern to parse diff hunk headers: @@ -start,count +start,count @@
_HUNK_HEADER = re.compile(r"^@@ -\d+(?:,(\d+))? \+\d+(?:,(\d+))? @@")


@dataclass(frozen=True)
class Corpus:
  """The ordered, flattened sequence of added lines for one run."""

  lines: tuple[CorpusLine, ...] = ()

  def __iter__(self) -> Iterator[CorpusLine]:
    return iter(self.lines)

  def __len__(self) -> int:
    return len(self.lines)

  @property
  def is_empty(self) -> bool:
    return not self.lines


EMPTY_CORPUS = Corpus()


def build_corpus(diff_text: str) -> Corpus:
  """Extract added lines from unified diff text.

  Inside a hunk, the hunk header's line counts decide where the hunk ends,
  so an added line whose content starts with '++' is still kept. Outside
  hunks a '+++' line is a file header and is skipped. Text without hunk
  headers is scanned loosely: every '+' line that is not '+++' qualifies.

  Args:
    diff_text: Unified diff for the included paths only.

  Returns:
    Corpus with lines numbered from 1, or EMPTY_CORPUS if none qualify.
  """
  added: list[CorpusLine] = []
  old_left = 0
  new_left = 0

  for line in diff_text.split("\n"):
    if old_left > 0 or new_left > 0:
      if line.startswith("diff --git "):
        # Malformed hunk counts; resynchronise on the next file header
        old_left = new_left = 0
        continue
      if line.startswith("+"):
        added.append(CorpusLine(number=len(added) + 1, text=line[1:]))
        new_left -= 1
      elif line.startswith("-"):
        old_left -= 1
      elif line.startswith("\\"):
        pass
      else:
        old_left -= 1
        new_left -= 1
      continue

    hunk_match = _HUNK_HEADER.match(line)
    if hunk_match:
      old_left = _hunk_count(hunk_match.group(1))
      new_left = _hunk_count(hunk_match.group(2))
      continue

    if line.startswith("+++"):
      continue

    if line.startswith("+"):
      added.append(CorpusLine(number=len(added) + 1, text=line[1:]))

  if not added:
    logger.info("No added lines in diff; corpus is empty")
    return EMPTY_CORPUS

  logger.debug("Built corpus of %d added line(s)", len(added))
  return Corpus(lines=tuple(added))


def _hunk_count(value: str | None) -> int:
  # An omitted count means a single line
  return 1 if value is None else int(value)
