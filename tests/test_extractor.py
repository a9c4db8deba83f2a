"""Tests for git access helpers."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from diffguard.diff import extractor
from diffguard.diff.extractor import (
  PATH_BATCH_SIZE,
  UnresolvedInputSource,
  current_branch,
  extract_diff,
  find_repo_root,
  parse_name_status,
  parse_numstat,
  run_git,
  verify_ref,
)
from diffguard.models import ChangedPath, ChangeKind


class TestParseNameStatus:
  def test_simple_statuses(self) -> None:
    output = "M\0plugin/a.php\0A\0plugin/b.js\0D\0plugin/c.php\0T\0plugin/link\0"

    paths = parse_name_status(output)

    assert paths == [
      ChangedPath(path="plugin/a.php", kind=ChangeKind.MODIFIED),
      ChangedPath(path="plugin/b.js", kind=ChangeKind.ADDED),
      ChangedPath(path="plugin/c.php", kind=ChangeKind.DELETED),
      ChangedPath(path="plugin/link", kind=ChangeKind.MODIFIED),
    ]

  def test_rename_keeps_old_path(self) -> None:
    paths = parse_name_status("R087\0plugin/old.php\0plugin/new.php\0M\0plugin/a.php\0")

    assert paths == [
      ChangedPath(path="plugin/new.php", kind=ChangeKind.RENAMED, old_path="plugin/old.php"),
      ChangedPath(path="plugin/a.php", kind=ChangeKind.MODIFIED),
    ]

  def test_copy_is_an_addition(self) -> None:
    paths = parse_name_status("C100\0plugin/a.php\0plugin/a-copy.php\0")

    assert paths == [ChangedPath(path="plugin/a-copy.php", kind=ChangeKind.ADDED)]

  def test_paths_are_taken_verbatim(self) -> None:
    output = "M\0plugin/my file.php\0A\0plugin/café.php\0A\0plugin/tab\there.php\0"

    paths = parse_name_status(output)

    assert [p.path for p in paths] == [
      "plugin/my file.php", "plugin/café.php", "plugin/tab\there.php",
    ]

  def test_ignores_empty_and_truncated_records(self) -> None:
    assert parse_name_status("\0\0") == []
    assert parse_name_status("M") == []
    assert parse_name_status("R100\0plugin/old.php") == []


class TestParseNumstat:
  def test_counts_lines(self) -> None:
    stats = parse_numstat("3\t1\tplugin/a.php\x0010\t0\tplugin/b.js\0")

    assert stats.files_changed == 2
    assert stats.lines_added == 13
    assert stats.lines_removed == 1

  def test_binary_files_counted_without_lines(self) -> None:
    stats = parse_numstat("-\t-\tplugin/logo.png\x002\t2\tplugin/a.php\0")

    assert stats.files_changed == 2
    assert stats.lines_added == 2
    assert stats.lines_removed == 2

  def test_rename_paths_are_not_records(self) -> None:
    stats = parse_numstat("1\t0\t\0plugin/old.php\0plugin/new.php\x004\t2\tplugin/a.php\0")

    assert stats.files_changed == 2
    assert stats.lines_added == 5
    assert stats.lines_removed == 2

  def test_path_containing_tab(self) -> None:
    stats = parse_numstat("2\t0\tplugin/tab\there.php\0")

    assert (stats.files_changed, stats.lines_added) == (1, 2)

  def test_empty_output(self) -> None:
    stats = parse_numstat("")

    assert (stats.files_changed, stats.lines_added, stats.lines_removed) == (0, 0, 0)


class TestRunGit:
  def test_returns_stdout(self) -> None:
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="ok\n", stderr="")
    with patch("diffguard.diff.extractor.subprocess.run", return_value=completed) as run:
      assert run_git("status") == "ok\n"

    assert run.call_args.args[0] == ["git", "status"]

  def test_undecodable_output_is_replaced(self) -> None:
    with patch("diffguard.diff.extractor.subprocess.run") as run:
      run_git("diff")

    kwargs = run.call_args.kwargs
    assert kwargs["encoding"] == "utf-8"
    assert kwargs["errors"] == "replace"
    assert "text" not in kwargs

  def test_command_failure(self) -> None:
    error = subprocess.CalledProcessError(128, ["git", "diff"], stderr="fatal: bad revision")
    with patch("diffguard.diff.extractor.subprocess.run", side_effect=error):
      with pytest.raises(UnresolvedInputSource, match="git diff failed"):
        run_git("diff")

  def test_git_missing(self) -> None:
    with patch("diffguard.diff.extractor.subprocess.run", side_effect=FileNotFoundError("git")):
      with pytest.raises(UnresolvedInputSource, match="Cannot run git"):
        run_git("diff")


class TestRefs:
  def test_detached_head(self) -> None:
    with patch.object(extractor, "run_git", return_value="\n"):
      with pytest.raises(UnresolvedInputSource, match="detached"):
        current_branch()

  def test_current_branch(self) -> None:
    with patch.object(extractor, "run_git", return_value="feature/login\n"):
      assert current_branch() == "feature/login"

  def test_missing_revision(self) -> None:
    with patch.object(extractor, "run_git", side_effect=UnresolvedInputSource("failed")):
      with pytest.raises(UnresolvedInputSource, match="Revision 'nope' does not exist"):
        verify_ref("nope")

  def test_repo_root_requires_directory(self, tmp_path: Path) -> None:
    with pytest.raises(UnresolvedInputSource, match="Not a directory"):
      find_repo_root(tmp_path / "missing")


class TestExtractDiff:
  def test_no_paths_means_no_diff(self) -> None:
    with patch.object(extractor, "run_git") as run:
      assert extract_diff("master", "feature", []) == ""

    run.assert_not_called()

  def test_paths_are_literal(self) -> None:
    with patch.object(extractor, "run_git", return_value="diff\n") as run:
      extract_diff("master", "feature", ["plugin/[id].php"])

    args = run.call_args.args
    assert args[0] == "diff"
    assert "master...feature" in args
    assert "--no-ext-diff" in args
    assert "--no-textconv" in args
    assert args[-1] == ":(literal)plugin/[id].php"

  def test_batches_long_path_lists(self) -> None:
    paths = [f"plugin/f{i}.php" for i in range(PATH_BATCH_SIZE + 1)]
    with patch.object(extractor, "run_git", side_effect=["one\n", "two\n"]) as run:
      text = extract_diff("master", "feature", paths)

    assert run.call_count == 2
    assert text == "one\ntwo\n"
