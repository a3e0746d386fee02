"""Analysis command: summary plus by-object or by-script details."""

from pathlib import Path
from typing import List, Optional

import click
import typer

from ..exceptions import SyncScopeError
from ..formatters import RichFormatter, get_formatter
from ..logging_config import setup_logging
from ..profiler import DetailsView
from . import app
from ._common import console, open_session, resolve_config, resolve_filter


@app.command()
def analyze(
    scene: Path = typer.Argument(
        ...,
        help="Scene document (JSON)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    view: str = typer.Option(
        "summary",
        "--view",
        help="Details to show: summary | objects | scripts",
        click_type=click.Choice(["summary", "objects", "scripts"], case_sensitive=False),
    ),
    mode_filter: Optional[List[str]] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Sync categories to show (continuous, manual, none, vrc-managed, built-in, unknown, all)",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        help="Output format: rich | json | csv | quiet",
        click_type=click.Choice(["rich", "json", "csv", "quiet"], case_sensitive=False),
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
):
    """
    Classify sync modes and estimate network bandwidth of a scene.

    Scene-wide totals always cover every component; --filter only narrows
    the object and script listings.
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, show_summary=output_format.lower() == "rich")
    selected = resolve_filter(mode_filter)

    try:
        settings = resolve_config(config=config, verbose=verbose, quiet=quiet)
        _, session = open_session(scene, settings, selected)

        if view.lower() == "scripts":
            session.view = DetailsView.BY_SCRIPT
        report = session.report(details=view.lower() != "summary")

        name = output_format.lower()
        formatter = RichFormatter(console) if name == "rich" else get_formatter(name)
        formatter.render(report)

    except typer.Exit:
        raise

    except SyncScopeError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
