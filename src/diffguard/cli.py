"""CLI interface using Typer."""

import logging
import os
import traceback
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from diffguard import __version__
from diffguard.config import OUTPUT_FORMATS, load_config
from diffguard.diff import UnresolvedInputSource
from diffguard.models import OverallStatus
from diffguard.output import get_formatter, save_report
from diffguard.output.formatter import SEVERITY_STYLES
from diffguard.rules import InvalidRule, builtin_catalogue
from diffguard.scan import run_scan

app = typer.Typer(
  name="diffguard",
  help="Security check for code added on a branch",
  no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _is_debug() -> bool:
  return os.environ.get("DIFFGUARD_DEBUG", "").lower() in ("1", "true", "yes")


def _configure_logging(verbose: bool, debug: bool) -> None:
  level = logging.WARNING
  if verbose:
    level = logging.INFO
  if debug:
    level = logging.DEBUG
  logging.basicConfig(
    level=level,
    format="%(message)s",
    handlers=[RichHandler(console=err_console, show_path=False)],
    force=True,
  )


def version_callback(value: bool) -> None:
  if value:
    console.print(f"diffguard {__version__}")
    raise typer.Exit()


def list_rules_callback(value: bool) -> None:
  if not value:
    return

  table = Table(show_header=True, header_style="bold")
  table.add_column("Section")
  table.add_column("ID")
  table.add_column("Severity")
  table.add_column("Message")
  for rule in builtin_catalogue():
    table.add_row(
      rule.section,
      rule.id,
      Text(rule.severity.value.upper(), style=SEVERITY_STYLES[rule.severity]),
      Text(rule.message),
    )
  console.print(table)
  raise typer.Exit()


@app.command()
def main(
  path: Path = typer.Argument(
    ...,
    help="Plugin directory (any subtree of a git repository)",
    exists=True,
    file_okay=False,
    dir_okay=True,
  ),
  current_branch: str = typer.Option(
    None, "--current-branch", "-b", help="Branch to check (default: current git branch)"
  ),
  base_branch: str = typer.Option(
    None, "--base-branch", help="Branch to compare against (default: master)"
  ),
  format_type: str = typer.Option(
    None, "--format", "-F", help=f"Output format: {', '.join(OUTPUT_FORMATS)}"
  ),
  config: Path = typer.Option(None, "--config", "-c", help="Config file path"),
  report_dir: Path = typer.Option(
    None, "--report-dir", help="Save a plain-text report under this directory"
  ),
  workers: int = typer.Option(
    None, "--workers", "-w", min=1, help="Threads used to evaluate rules"
  ),
  exit_code: bool = typer.Option(
    False, "--exit-code", help="Exit with 1 when critical issues are found"
  ),
  verbose: bool = typer.Option(False, "--verbose", help="Log progress to stderr"),
  debug: bool = typer.Option(False, "--debug", "-d", help="Show full traceback on errors"),
  list_rules: Optional[bool] = typer.Option(
    None, "--list-rules", callback=list_rules_callback, is_eager=True,
    help="List the built-in rules and exit",
  ),
  version: Optional[bool] = typer.Option(
    None, "--version", "-v", callback=version_callback, is_eager=True
  ),
) -> None:
  """Check code added on a branch for security issues.

  Compares the current branch with the base branch and scans only the
  added lines of files under PATH.
  """
  show_traceback = debug or _is_debug()
  _configure_logging(verbose, show_traceback)

  try:
    settings = load_config(config)
    report = run_scan(
      path,
      current=current_branch,
      base=base_branch,
      workers=workers,
      settings=settings,
    )

    formatter = get_formatter(format_type or settings.format)
    output = formatter.format(report)
    if output:
      typer.echo(output)

    target_dir = report_dir or settings.report_dir
    if target_dir:
      saved = save_report(report, target_dir, path.resolve().name)
      err_console.print(f"Report saved to: {saved}", markup=False, highlight=False)

  except (UnresolvedInputSource, InvalidRule, ValidationError, FileNotFoundError) as e:
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    raise typer.Exit(1) from None
  except Exception as e:
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    if show_traceback:
      console.print("\n[dim]Traceback:[/dim]")
      console.print(traceback.format_exc(), markup=False)
    raise typer.Exit(1) from None

  if exit_code and report.status == OverallStatus.CRITICAL:
    raise typer.Exit(1)


if __name__ == "__main__":
  app()
