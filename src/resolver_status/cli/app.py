import logging
import os
from typing import Annotated

import typer
from rich.logging import RichHandler

from resolver_status.cli.scan import scan
from resolver_status.cli.sync import run, sync

app = typer.Typer(
    name="resolver-status",
    help="Resolver status CLI: extract resolver deployment status and sync it to Notion.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level for diagnostics (DEBUG, INFO, WARNING, ...)."),
    ] = os.getenv("RESOLVER_STATUS_LOG_LEVEL", "INFO"),
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


app.command("scan")(scan)
app.command("sync")(sync)
app.command("run")(run)


def main() -> None:
    app()
