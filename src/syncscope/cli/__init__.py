"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="syncscope",
    help="SyncScope - Network Sync Profiler for Scene Graphs",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Profile network-sync usage of the behaviours in a scene document.

    [bold cyan]Examples:[/bold cyan]

      syncscope analyze scene.json

      syncscope analyze scene.json --view scripts --filter continuous,manual

      syncscope apply scene.json DoorProgram --mode manual -o scene.json
    """
    if version:
        console.print(f"[bold cyan]SyncScope[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .scripts import scripts as _scripts  # noqa: F401, E402
from .apply import apply as _apply  # noqa: F401, E402
