"""Bulk sync-mode change for every instance of a script."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..exceptions import InvalidPathError, SyncScopeError
from ..host import save_scene
from ..logging_config import setup_logging
from ..models import ScriptSummary
from ..modes import SYNC_MODE_OPTIONS
from ..mutation import always_confirm, confirmation_message
from . import app
from ._common import console, open_session, resolve_config


@app.command()
def apply(
    scene: Path = typer.Argument(
        ...,
        help="Scene document (JSON)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    key: str = typer.Argument(..., help="Script key (see 'syncscope scripts')"),
    mode: str = typer.Option(
        SYNC_MODE_OPTIONS[0],
        "--mode",
        "-m",
        help="Target sync mode",
        click_type=click.Choice(list(SYNC_MODE_OPTIONS), case_sensitive=False),
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Write the modified scene document here",
        dir_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Set the sync mode of every instance of a script.

    Without --output the change is reported but not saved.
    """
    logger = setup_logging(verbose=verbose)

    def ask(summary: ScriptSummary, target_mode: str) -> bool:
        return typer.confirm(confirmation_message(summary, target_mode))

    try:
        if output is not None and not output.parent.is_dir():
            raise InvalidPathError(output, "parent directory does not exist")

        settings = resolve_config(config=config, verbose=verbose)
        host, session = open_session(scene, settings)
        before = session.estimate()

        target = session.select_mode(key, mode)
        report = session.apply_mode_report(key, target, confirm=always_confirm if yes else ask)

        if not report.confirmed:
            console.print("[yellow]Cancelled; nothing changed[/yellow]")
            raise typer.Exit(0)

        after = session.estimate()
        console.print(
            f"[green]Set {target}[/green] on {report.written} instance(s); "
            f"{report.skipped} skipped"
        )
        console.print(
            f"Estimated bandwidth: {before.bandwidth_kbps:.2f} -> "
            f"{after.bandwidth_kbps:.2f} kbps ({after.intensity_rating})"
        )

        if output is not None:
            save_scene(host, output)
            console.print(f"Saved to [blue]{output}[/blue]")
        elif host.dirty_scenes():
            console.print("[dim]Not saved; pass --output to write the scene document.[/dim]")

    except typer.Exit:
        raise

    except SyncScopeError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except OSError as e:
        console.print(f"[red]Error:[/red] cannot write {output}: {e}")
        raise typer.Exit(1)
