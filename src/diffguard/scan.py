"""Core scan orchestration."""

import logging
from pathlib import Path
from typing import Sequence

from diffguard.config import Settings, load_config
from diffguard.diff import (
  PathFilter,
  build_corpus,
  current_branch,
  diff_stats,
  extract_diff,
  find_repo_root,
  list_changed_paths,
  verify_ref,
)
from diffguard.models import ChangedPath, ChangeKind, DiffStats
from diffguard.report import Report, build_report
from diffguard.rules import RuleCatalogue, RuleEngine, builtin_catalogue, load_rules_file

logger = logging.getLogger(__name__)


def load_catalogue(settings: Settings) -> RuleCatalogue:
  """Build the catalogue for a run: built-ins, then user rules, minus disabled.

  Raises:
    InvalidRule: If a user rule or a disabled id is invalid.
  """
  catalogue = builtin_catalogue()
  if settings.rules_file is not None:
    catalogue = catalogue.extend(load_rules_file(settings.rules_file))
  if settings.disabled_rules:
    catalogue = catalogue.without(settings.disabled_rules)
  return catalogue


class ScanOrchestrator:
  """Orchestrates the scan of code added between two revisions."""

  def __init__(
    self,
    settings: Settings | None = None,
    catalogue: RuleCatalogue | None = None,
  ):
    self.settings = settings or Settings()
    # Resolved eagerly so a bad catalogue fails before any git access
    self.catalogue = catalogue if catalogue is not None else load_catalogue(self.settings)
    self.path_filter = PathFilter.from_config(
      self.settings.exclude_dirs, self.settings.exclude_patterns,
    )
    self.engine = RuleEngine(
      max_examples=self.settings.max_examples, workers=self.settings.workers,
    )

  def scan_branch(
    self,
    plugin_path: Path,
    current: str | None = None,
    base: str | None = None,
  ) -> Report:
    """Scan code added on current relative to base under plugin_path."""
    repo_root = find_repo_root(plugin_path)
    subtree = _subtree_of(plugin_path, repo_root)
    target = current or current_branch(repo_root)
    base = base or self.settings.base_branch
    verify_ref(target, repo_root)
    verify_ref(base, repo_root)

    logger.info("Scanning %s: %s...%s", subtree, base, target)
    changed = list_changed_paths(base, target, subtree, cwd=repo_root)
    included = self._included(changed, subtree)

    diff_paths: list[str] = []
    for p in included:
      if p.old_path:
        diff_paths.append(p.old_path)
      diff_paths.append(p.path)
    diff_text = extract_diff(base, target, diff_paths, cwd=repo_root)
    stats = diff_stats(base, target, subtree, cwd=repo_root)

    return self.scan_diff(
      changed,
      diff_text,
      stats=stats,
      base_ref=base,
      target_ref=target,
      subtree=subtree,
      included=included,
    )

  def scan_diff(
    self,
    changed: Sequence[ChangedPath],
    diff_text: str,
    stats: DiffStats | None = None,
    base_ref: str = "",
    target_ref: str = "",
    subtree: str = ".",
    included: Sequence[ChangedPath] | None = None,
  ) -> Report:
    """Scan diff text that is already restricted to the included paths."""
    if included is None:
      included = self._included(changed, subtree)

    corpus = build_corpus(diff_text)
    evaluation = self.engine.evaluate(corpus, self.catalogue)

    return build_report(
      evaluation,
      changed_files=changed,
      included_files=included,
      stats=stats,
      base_ref=base_ref,
      target_ref=target_ref,
      subtree=subtree,
      corpus_size=len(corpus),
      sections=self.catalogue.sections(),
    )

  def _included(self, changed: Sequence[ChangedPath], subtree: str) -> list[ChangedPath]:
    # Deleted files add no lines, so their diff is never requested
    kept = self.path_filter.filter(
      (p for p in changed if p.kind != ChangeKind.DELETED), root=subtree,
    )
    logger.info("Scanning %d of %d changed path(s)", len(kept), len(changed))
    return kept


def _subtree_of(plugin_path: Path, repo_root: Path) -> str:
  """Return plugin_path relative to the repository root, in posix form."""
  try:
    relative = plugin_path.resolve().relative_to(repo_root.resolve())
  except ValueError:
    return "."
  return relative.as_posix() or "."


def run_scan(
  plugin_path: Path,
  current: str | None = None,
  base: str | None = None,
  config_path: Path | None = None,
  workers: int | None = None,
  settings: Settings | None = None,
) -> Report:
  """Run a scan with the given options.

  Settings are loaded from config_path (or the default config files) unless
  given explicitly; the other arguments override them.
  """
  settings = (settings or load_config(config_path)).model_copy(deep=True)

  if base:
    settings.base_branch = base
  if workers:
    settings.workers = workers

  orchestrator = ScanOrchestrator(settings)
  return orchestrator.scan_branch(plugin_path, current=current)
