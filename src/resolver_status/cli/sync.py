import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from resolver_status.cli.scan import DEFAULT_RESOLVERS_DIR, DEFAULT_SNAPSHOT_PATH, scan_directory
from resolver_status.core.ports.tracker import TrackerDatabase
from resolver_status.core.reconcile import Action, ReconcileReport, run_sync

console = Console()

_ACTION_STYLES = {
    Action.UPDATED: "green",
    Action.UNCHANGED: "dim",
    Action.SKIPPED: "yellow",
    Action.FAILED: "red",
}


def _get_tracker() -> TrackerDatabase:
    from resolver_status.db.config import ConfigurationError, get_notion_config
    from resolver_status.db.notion import NotionTracker

    try:
        config = get_notion_config()
    except ConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2) from exc
    return NotionTracker(config)


def render_report(report: ReconcileReport, verbose: bool = False) -> None:
    if verbose:
        table = Table(show_lines=False)
        for header in ("page", "name", "action", "status", "detail"):
            table.add_column(header)
        for outcome in report.outcomes:
            style = _ACTION_STYLES[outcome.action]
            table.add_row(
                outcome.page_id,
                outcome.name or "",
                f"[{style}]{outcome.action}[/{style}]",
                outcome.status or "",
                outcome.detail,
            )
        console.print(table)
    console.print(
        f"[green]{report.updated} updated[/green], {report.unchanged} unchanged, "
        f"[yellow]{report.skipped} skipped[/yellow], [red]{report.failed} failed[/red]"
    )


def sync_snapshot(snapshot: Path, dry_run: bool, verbose: bool) -> None:
    tracker = _get_tracker()

    async def _run() -> ReconcileReport | None:
        try:
            return await run_sync(tracker, snapshot, dry_run=dry_run)
        finally:
            await tracker.aclose()

    report = asyncio.run(_run())
    if report is None:
        console.print("[red]Reconciliation aborted, see log for details.[/red]")
        raise typer.Exit(1)
    render_report(report, verbose)


def sync(
    snapshot: Annotated[Path, typer.Option("--snapshot", "-s", help="Status snapshot to reconcile.")] = Path(
        DEFAULT_SNAPSHOT_PATH
    ),
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report changes without writing them.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Print one row per tracker page.")] = False,
) -> None:
    """Update tracker statuses that differ from the snapshot."""
    sync_snapshot(snapshot, dry_run, verbose)


def run(
    directory: Annotated[
        Path,
        typer.Argument(help="Directory holding resolver source files.", exists=True, file_okay=False),
    ] = Path(DEFAULT_RESOLVERS_DIR),
    output: Annotated[Path, typer.Option("--output", "-o", help="Where to write the status snapshot.")] = Path(
        DEFAULT_SNAPSHOT_PATH
    ),
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report changes without writing them.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Print one row per tracker page.")] = False,
) -> None:
    """Scan resolver sources, write the snapshot, then reconcile the tracker."""
    scan_directory(directory, output, None)
    console.print(f"[green]Wrote[/green] resolver status to {output}")
    sync_snapshot(output, dry_run, verbose)
