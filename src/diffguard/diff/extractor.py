"""Git access: changed paths, diff text and line statistics."""

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from diffguard.models import ChangedPath, ChangeKind, DiffStats

logger = logging.getLogger(__name__)

# Paths per `git diff` invocation, to stay under argument-length limits
PATH_BATCH_SIZE = 200


class UnresolvedInputSource(Exception):
  """Version control could not produce the changed paths or diff text."""


def _sanitize_error(stderr: str) -> str:
  """Remove potentially sensitive path information from error messages."""
  lines = stderr.strip().split("\n")
  sanitized = []
  for line in lines:
    if "fatal:" in line or "error:" in line:
      sanitized.append(line.split("/")[-1] if "/" in line else line)
    else:
      sanitized.append(line)
  return "\n".join(sanitized)


def run_git(*args: str, cwd: Path | None = None) -> str:
  """Run a git command and return stdout."""
  try:
    result = subprocess.run(
      ["git", *args],
      capture_output=True,
      encoding="utf-8",
      errors="replace",
      check=True,
      cwd=cwd,
    )
    return result.stdout
  except subprocess.CalledProcessError as e:
    sanitized = _sanitize_error(e.stderr or "")
    raise UnresolvedInputSource(f"git {args[0]} failed: {sanitized}") from e
  except OSError as e:
    raise UnresolvedInputSource(f"Cannot run git: {e}") from e


def find_repo_root(path: Path) -> Path:
  """Return the top-level directory of the repository containing path."""
  if not path.is_dir():
    raise UnresolvedInputSource(f"Not a directory: {path.name}")
  return Path(run_git("rev-parse", "--show-toplevel", cwd=path).strip())


def current_branch(cwd: Path | None = None) -> str:
  """Return the checked-out branch name."""
  branch = run_git("branch", "--show-current", cwd=cwd).strip()
  if not branch:
    raise UnresolvedInputSource("HEAD is detached; pass the branch to check explicitly")
  return branch


def verify_ref(ref: str, cwd: Path | None = None) -> None:
  """Raise UnresolvedInputSource if ref does not name a revision."""
  try:
    run_git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", cwd=cwd)
  except UnresolvedInputSource as e:
    raise UnresolvedInputSource(f"Revision '{ref}' does not exist") from e


def _range(base: str, target: str) -> str:
  return f"{base}...{target}"


def list_changed_paths(
  base: str,
  target: str,
  subtree: str = ".",
  cwd: Path | None = None,
) -> list[ChangedPath]:
  """List paths changed between base and target under subtree."""
  output = run_git(
    "diff", "--no-color", "-z", "--name-status", _range(base, target), "--", subtree, cwd=cwd,
  )
  return parse_name_status(output)


def parse_name_status(output: str) -> list[ChangedPath]:
  """Parse `git diff -z --name-status` output.

  Fields are NUL-separated and paths are never quoted: a status field is
  followed by one path, or by the old and new paths for renames and copies.
  """
  fields = output.split("\0")
  paths: list[ChangedPath] = []
  i = 0
  while i < len(fields):
    status = fields[i].strip()
    i += 1
    if not status:
      continue
    if status[:1] in ("R", "C"):
      if i + 1 >= len(fields):
        logger.debug("Truncated name-status record for %r", status)
        break
      old_path, path = fields[i], fields[i + 1]
      i += 2
      kind = ChangeKind.from_status(status)
      paths.append(ChangedPath(
        path=path, kind=kind, old_path=old_path if kind == ChangeKind.RENAMED else None,
      ))
    else:
      if i >= len(fields):
        logger.debug("Truncated name-status record for %r", status)
        break
      paths.append(ChangedPath(path=fields[i], kind=ChangeKind.from_status(status)))
      i += 1
  return paths


def diff_stats(
  base: str,
  target: str,
  subtree: str = ".",
  cwd: Path | None = None,
) -> DiffStats:
  """Count changed files and added/removed lines under subtree."""
  output = run_git(
    "diff", "--no-color", "-z", "--numstat", _range(base, target), "--", subtree, cwd=cwd,
  )
  return parse_numstat(output)


def parse_numstat(output: str) -> DiffStats:
  """Parse `git diff -z --numstat` output. Binary files count as changed only.

  Each record is 'added<TAB>removed<TAB>path'; for a rename the path field
  is empty and the old and new paths follow as two extra NUL-separated
  fields.
  """
  fields = output.split("\0")
  files = added = removed = 0
  i = 0
  while i < len(fields):
    parts = fields[i].split("\t", 2)
    i += 1
    if len(parts) < 3:
      continue
    if parts[2] == "":
      i += 2
    files += 1
    if parts[0].isdigit():
      added += int(parts[0])
    if parts[1].isdigit():
      removed += int(parts[1])
  return DiffStats(files_changed=files, lines_added=added, lines_removed=removed)


def extract_diff(
  base: str,
  target: str,
  paths: Sequence[str],
  cwd: Path | None = None,
) -> str:
  """Return unified diff text for exactly the given paths.

  Returns an empty string for an empty path list; git would otherwise
  diff the whole repository. Paths are matched literally, never as globs.
  """
  if not paths:
    return ""

  chunks: list[str] = []
  for start in range(0, len(paths), PATH_BATCH_SIZE):
    batch = [f":(literal){p}" for p in paths[start:start + PATH_BATCH_SIZE]]
    chunks.append(run_git(
      "diff", "--no-color", "--no-ext-diff", "--no-textconv", _range(base, target),
      "--", *batch, cwd=cwd,
    ))
  return "".join(chunks)
