"""Diff extraction, path filtering and corpus building."""

from diffguard.diff.corpus import EMPTY_CORPUS, Corpus, build_corpus
from diffguard.diff.extractor import (
  UnresolvedInputSource,
  current_branch,
  diff_stats,
  extract_diff,
  find_repo_root,
  list_changed_paths,
  verify_ref,
)
from diffguard.diff.filters import PathFilter

__all__ = [
  "EMPTY_CORPUS",
  "Corpus",
  "PathFilter",
  "UnresolvedInputSource",
  "build_corpus",
  "current_branch",
  "diff_stats",
  "extract_diff",
  "find_repo_root",
  "list_changed_paths",
  "verify_ref",
]
