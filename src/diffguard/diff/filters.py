"""Path exclusion for changed files."""

import fnmatch
from dataclasses import dataclass
from typing import Iterable

from diffguard.models import ChangedPath

DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = (
  "node_modules",
  ".git",
  ".github",
  "vendor",
  "tests",
  "dist",
  "build",
  "gutenberg-reports",
  "security-reports",
  "qa-reports",
)

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
  "*.min.js",
  "*.min.css",
  "*.js.map",
  "*.css.map",
)


@dataclass(frozen=True)
class PathFilter:
  """Decides whether a changed path is scanned.

  A path is excluded when any of its segments equals an excluded directory
  name exactly (case-sensitive), or when its file name matches one of the
  excluded glob patterns. 'lib/vendor/a.php' is excluded by 'vendor' but
  'lib/vendored/a.php' is not.
  """

  exclude_dirs: frozenset[str] = frozenset(DEFAULT_EXCLUDE_DIRS)
  exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS

  @classmethod
  def from_config(
    cls,
    exclude_dirs: Iterable[str],
    exclude_patterns: Iterable[str],
  ) -> "PathFilter":
    return cls(
      exclude_dirs=frozenset(exclude_dirs),
      exclude_patterns=tuple(exclude_patterns),
    )

  def include(self, path: str) -> bool:
    """Check whether a path should be scanned."""
    segments = [s for s in path.replace("\\", "/").split("/") if s and s != "."]
    if not segments:
      return False

    if any(segment in self.exclude_dirs for segment in segments):
      return False

    name = segments[-1]
    return not any(fnmatch.fnmatchcase(name, pattern) for pattern in self.exclude_patterns)

  def filter(self, paths: Iterable[ChangedPath], root: str = "") -> list[ChangedPath]:
    """Keep the included paths, judged relative to root."""
    return [p for p in paths if self.include(relative_to(p.path, root))]


def relative_to(path: str, root: str) -> str:
  """Strip a leading root directory from a repository-relative path."""
  root = root.replace("\\", "/").strip("/")
  if root in ("", "."):
    return path
  prefix = root + "/"
  if path.startswith(prefix):
    return path[len(prefix):]
  return path
