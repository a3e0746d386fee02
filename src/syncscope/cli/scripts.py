"""Script listing: keys for ``apply`` and whether they can be bulk-edited."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..exceptions import SyncScopeError
from ..logging_config import setup_logging
from . import app
from ._common import console, open_session, resolve_config, resolve_filter


@app.command()
def scripts(
    scene: Path = typer.Argument(
        ...,
        help="Scene document (JSON)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    mode_filter: Optional[List[str]] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Sync categories to include",
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """List script groups, heaviest first."""
    logger = setup_logging(verbose=verbose)
    selected = resolve_filter(mode_filter)

    try:
        settings = resolve_config(config=config, verbose=verbose)
        _, session = open_session(scene, settings, selected)
        summaries = session.by_script()
    except SyncScopeError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not summaries:
        console.print("[dim]No scripts match the current filter.[/dim]")
        raise typer.Exit(0)

    table = Table(title="Scripts")
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Instances", justify="right")
    table.add_column("Kbps", justify="right")
    table.add_column("Bulk Edit")

    for summary in summaries:
        table.add_row(
            escape(summary.key),
            escape(summary.display_name),
            str(summary.instance_count),
            f"{summary.bandwidth_kbps:.2f}",
            "[green]yes[/green]" if session.can_bulk_edit(summary) else "[dim]no[/dim]",
        )
    console.print(table)
