"""Rich terminal reporter — count table, issues, verdict."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from bigdiff.compare.models import IssueKind, RunResult

_ISSUE_STYLE = {
    IssueKind.SCAN: "bold black on yellow",
    IssueKind.CLASSIFY: "bold white on dark_orange",
    IssueKind.WRITE: "bold white on red",
}


def _issue_pill(kind: IssueKind) -> Text:
    return Text(f" {kind.value.upper()} ", style=_ISSUE_STYLE.get(kind, ""))


def render(
    result: RunResult,
    output_root: str,
    *,
    show_summary: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print the run report to the terminal using Rich."""
    console = console or Console(stderr=True)

    console.print()
    if result.dry_run:
        console.print("[bold cyan]DRY RUN[/bold cyan] [dim]— nothing was written[/dim]")

    summary = result.summary
    table = Table(title="BigDiff Summary", title_style="bold", border_style="dim")
    table.add_column("Category", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Unchanged", str(summary.unchanged))
    table.add_row("New", f"[green]{summary.added}[/green]")
    table.add_row("Deleted", f"[red]{summary.deleted}[/red]")
    table.add_row("Modified text", f"[yellow]{summary.modified_text}[/yellow]")
    table.add_row("Modified binary", f"[magenta]{summary.modified_binary}[/magenta]")
    table.add_row("Deleted dirs", str(summary.deleted_dirs))
    console.print(table)

    if result.issues:
        console.print()
        issues = Table(title="Warnings", show_lines=False, title_style="bold", border_style="dim")
        issues.add_column("Kind", justify="center", width=12)
        issues.add_column("Path", style="magenta")
        issues.add_column("Message")
        for issue in result.issues:
            issues.add_row(_issue_pill(issue.kind), issue.path, issue.message)
        console.print(issues)

    if show_summary:
        _print_summary(console, result, output_root)

    console.print()
    if result.fatal:
        console.print(f"[bold red]✗ Aborted — {result.fatal}[/bold red]")
    elif result.cancelled:
        console.print("[bold yellow]⚠  Interrupted — output is incomplete.[/bold yellow]")
    elif result.issues:
        console.print(
            f"[bold yellow]⚠  Completed with {len(result.issues)} warning(s).[/bold yellow]"
        )
    elif summary.added or summary.deleted or summary.modified:
        console.print("[bold green]✓ Done.[/bold green]")
    else:
        console.print("[bold green]✓ Trees are identical.[/bold green]")


def _print_summary(console: Console, result: RunResult, output_root: str) -> None:
    console.print()
    label = "Would write to:" if result.dry_run else "Output:"
    console.print(f"[dim]{label:<15}[/dim] {output_root}")
    console.print(f"[dim]Files compared:[/dim] {result.summary.total_files}")
    console.print(f"[dim]Artifacts:[/dim]      {len(result.artifacts)}")
    console.print(f"[dim]Warnings:[/dim]       {len(result.issues)}")
    console.print(f"[dim]Duration:[/dim]       {result.duration_ms:.0f}ms")
