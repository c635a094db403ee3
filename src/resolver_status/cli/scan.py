from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from resolver_status.core.registry import build_registry, write_snapshot
from resolver_status.models import StatusRegistry

console = Console()

DEFAULT_RESOLVERS_DIR = "src/resolvers/v3"
DEFAULT_SNAPSHOT_PATH = "resolver-status.json"


def render_registry(registry: StatusRegistry) -> None:
    table = Table(show_lines=False)
    for header in ("name", "category", "operation", "status"):
        table.add_column(header)
    for name in sorted(registry):
        record = registry[name]
        table.add_row(record.name, record.category, record.operation, str(record.status))
    console.print(table)
    console.print(f"({len(registry)} resolvers)")


def scan_directory(directory: Path, output: Path, extensions: list[str] | None) -> StatusRegistry:
    try:
        registry = build_registry(directory, extensions)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2) from exc
    write_snapshot(registry, output)
    return registry


def scan(
    directory: Annotated[
        Path,
        typer.Argument(help="Directory holding resolver source files.", exists=True, file_okay=False),
    ] = Path(DEFAULT_RESOLVERS_DIR),
    output: Annotated[Path, typer.Option("--output", "-o", help="Where to write the status snapshot.")] = Path(
        DEFAULT_SNAPSHOT_PATH
    ),
    extension: Annotated[
        list[str] | None,
        typer.Option("--extension", "-e", help="Source file extension to scan (repeatable, default .ts)."),
    ] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Do not print the resolver table.")] = False,
) -> None:
    """Extract resolver statuses from source files and write the snapshot."""
    registry = scan_directory(directory, output, extension)
    if not quiet:
        render_registry(registry)
    console.print(f"[green]Wrote[/green] resolver status to {output}")
