"""Output formatting for scan reports."""

import json
from abc import ABC, abstractmethod
from io import StringIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from diffguard.models import OverallStatus, Severity
from diffguard.report import Report
from diffguard.rules.base import Finding

SEVERITY_STYLES = {
  Severity.CRITICAL: "bold red",
  Severity.WARNING: "yellow",
  Severity.REVIEW: "cyan",
  Severity.INFO: "green",
}

STATUS_STYLES = {
  OverallStatus.CRITICAL: "bold red",
  OverallStatus.WARNING: "yellow",
  OverallStatus.CLEAN: "green",
}

NOTE = "This is an automated check. Manual code review is still recommended."


def _example_lines(finding: Finding) -> list[str]:
  lines = [f"{line.number}:{line.text}" for line in finding.matched_lines]
  if finding.truncated:
    lines.append(f"... and {finding.hidden_count} more")
  return lines


def _status_message(report: Report) -> str:
  if report.issues_found == 0:
    return "No obvious security issues detected!"
  return f"Found {report.issues_found} potential issue(s) to review"


class OutputFormatter(ABC):
  """Base output formatter."""

  @abstractmethod
  def format(self, report: Report) -> str:
    """Format a scan report for output."""
    ...


class TerminalFormatter(OutputFormatter):
  """Rich terminal output formatter."""

  def __init__(self, console: Console | None = None):
    self.console = console or Console()

  def format(self, report: Report) -> str:
    self._print_header(report)
    self._print_changed_files(report)
    self._print_findings(report)
    self._print_skipped(report)
    self._print_summary(report)
    return ""

  def _print_header(self, report: Report) -> None:
    self.console.print()
    self.console.print(Panel(
      f"Path: {report.subtree}\n"
      f"Current branch: {report.target_ref}\n"
      f"Comparing with: {report.base_ref}",
      title="[bold]Security Check[/bold]",
      border_style="blue",
    ))

  def _print_changed_files(self, report: Report) -> None:
    if not report.changed_files:
      self.console.print("\n[dim]No changed files.[/dim]")
      return

    included = {p.path for p in report.included_files}
    table = Table(show_header=True, header_style="bold", title="Changed files")
    table.add_column("Change", width=10)
    table.add_column("File", min_width=40)
    table.add_column("Scanned", width=8)

    for changed in report.changed_files:
      path = changed.path
      if changed.old_path:
        path = f"{changed.old_path} -> {changed.path}"
      table.add_row(
        changed.kind.value,
        Text(path),
        "yes" if changed.path in included else "[dim]no[/dim]",
      )

    self.console.print()
    self.console.print(table)

  def _print_findings(self, report: Report) -> None:
    by_section = report.findings_by_section()
    if not by_section:
      self.console.print("\n[green]No rules matched the added code.[/green]")
      return

    for section, findings in by_section.items():
      self.console.print()
      self.console.print(Text(f"── {section} ──", style="bold"))
      for finding in findings:
        style = SEVERITY_STYLES.get(finding.severity, "")
        label = Text(f"{finding.severity.value.upper()}:", style=style)
        label.append(f" [{finding.rule.id}] {finding.rule.message}", style="")
        self.console.print(label)
        for example in _example_lines(finding):
          self.console.print(Text(f"  {example}", style="dim"))

  def _print_skipped(self, report: Report) -> None:
    if report.complete:
      return
    self.console.print("\n[yellow]Rules skipped after evaluation errors:[/yellow]")
    for skipped in report.skipped:
      self.console.print(f"  [{skipped.rule.id}] {skipped.reason}", markup=False)

  def _print_summary(self, report: Report) -> None:
    table = Table(show_header=False, box=None)
    table.add_column("Key")
    table.add_column("Value", justify="right")
    for severity in Severity:
      table.add_row(
        Text(severity.value.upper(), style=SEVERITY_STYLES[severity]),
        str(report.count(severity)),
      )
    table.add_row("Files changed", str(report.changed_file_count))
    table.add_row("Lines added", str(report.lines_added))
    table.add_row("Lines removed", str(report.lines_removed))

    status = report.status
    self.console.print()
    self.console.print(Panel(
      table,
      title=f"[bold]Summary[/bold] ([{STATUS_STYLES[status]}]{status.value}[/])",
      subtitle=_status_message(report),
      border_style=STATUS_STYLES[status],
    ))
    self.console.print(f"[dim]{NOTE}[/dim]")


class JsonFormatter(OutputFormatter):
  """JSON output formatter."""

  def format(self, report: Report) -> str:
    data = {
      "status": report.status.value,
      "base_ref": report.base_ref,
      "target_ref": report.target_ref,
      "path": report.subtree,
      "counts": {s.value: report.count(s) for s in Severity},
      "files_changed": report.changed_file_count,
      "lines_added": report.lines_added,
      "lines_removed": report.lines_removed,
      "changed_files": [
        {"path": p.path, "kind": p.kind.value, "old_path": p.old_path}
        for p in report.changed_files
      ],
      "findings": [
        {
          "rule": f.rule.id,
          "section": f.rule.section,
          "severity": f.severity.value,
          "message": f.rule.message,
          "match_count": f.match_count,
          "truncated": f.truncated,
          "lines": [{"number": line.number, "text": line.text} for line in f.matched_lines],
        }
        for f in report.findings
      ],
      "skipped": [
        {"rule": s.rule.id, "reason": s.reason} for s in report.skipped
      ],
    }
    return json.dumps(data, indent=2)


class MarkdownFormatter(OutputFormatter):
  """Markdown output formatter."""

  def format(self, report: Report) -> str:
    lines = [
      "# Security Check",
      "",
      f"**Path:** {report.subtree}  ",
      f"**Branches:** {report.base_ref}...{report.target_ref}",
      "",
      "## Summary",
      "",
      "| Severity | Rules |",
      "|---|---|",
    ]
    lines.extend(f"| {s.value.upper()} | {report.count(s)} |" for s in Severity)
    lines.extend([
      "",
      f"Files changed: {report.changed_file_count}, "
      f"lines added: {report.lines_added}, lines removed: {report.lines_removed}",
      "",
      f"**Status:** {report.status.value}. {_status_message(report)}",
      "",
    ])

    by_section = report.findings_by_section()
    if by_section:
      for section, findings in by_section.items():
        lines.extend([f"## {section}", ""])
        for finding in findings:
          lines.append(
            f"### [{finding.severity.value.upper()}] {finding.rule.id}: {finding.rule.message}"
          )
          lines.append("")
          lines.append("```")
          lines.extend(_example_lines(finding))
          lines.append("```")
          lines.append("")
    else:
      lines.extend(["## Findings", "", "No rules matched the added code.", ""])

    if report.skipped:
      lines.extend(["## Skipped rules", ""])
      lines.extend(f"- {s.rule.id}: {s.reason}" for s in report.skipped)
      lines.append("")

    return "\n".join(lines)


class TextFormatter(OutputFormatter):
  """Plain-text report, as saved to the report directory."""

  RULE = "=" * 42
  THIN = "-" * 42

  def format(self, report: Report) -> str:
    buffer = StringIO()

    def out(line: str = "") -> None:
      buffer.write(line + "\n")

    out(self.RULE)
    out("Security Check")
    out(self.RULE)
    out(f"Path: {report.subtree}")
    out(f"Current branch: {report.target_ref}")
    out(f"Comparing with: {report.base_ref}")
    out(self.RULE)
    out()
    out("Changed files:")
    out(self.THIN)
    for changed in report.changed_files:
      if changed.old_path:
        out(f"{changed.kind.value}\t{changed.old_path} -> {changed.path}")
      else:
        out(f"{changed.kind.value}\t{changed.path}")
    out()
    out(self.RULE)
    out("SECURITY ANALYSIS")
    out(self.RULE)
    out()

    for section, findings in report.findings_by_section().items():
      out(f"-- {section} --")
      for finding in findings:
        out(f"{finding.severity.value.upper()}: [{finding.rule.id}] {finding.rule.message}")
        for example in _example_lines(finding):
          out(example)
        out()

    if report.skipped:
      out("Skipped rules (evaluation failed):")
      for skipped in report.skipped:
        out(f"  {skipped.rule.id}: {skipped.reason}")
      out()

    out(self.RULE)
    out("SUMMARY")
    out(self.RULE)
    for severity in Severity:
      out(f"{severity.value.upper() + ':':<14} {report.count(severity)}")
    out(f"Files changed: {report.changed_file_count}")
    out(f"Lines added:   {report.lines_added}")
    out(f"Lines removed: {report.lines_removed}")
    out(self.THIN)
    out(f"Status: {report.status.value}. {_status_message(report)}")
    out(self.RULE)
    out()
    out(f"Note: {NOTE}")
    return buffer.getvalue()


def get_formatter(format_type: str) -> OutputFormatter:
  """Get formatter by type name."""
  formatters = {
    "terminal": TerminalFormatter,
    "json": JsonFormatter,
    "markdown": MarkdownFormatter,
    "text": TextFormatter,
  }
  formatter_class = formatters.get(format_type)
  if not formatter_class:
    raise ValueError(f"Unknown format: {format_type}")
  return formatter_class()
