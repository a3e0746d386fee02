"""Shared CLI helpers."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ..aggregation import ModeFilter, parse_filter
from ..config import ProfilerConfig, load_config
from ..host import MemoryHost, load_scene
from ..profiler import ProfilerSession

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> ProfilerConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)


def resolve_filter(names: Optional[List[str]]) -> ModeFilter:
    """Filter from ``--filter`` values; no values means every category."""
    if not names:
        return ModeFilter.ALL
    try:
        return parse_filter(names)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--filter")


def open_session(
    scene: Path, config: ProfilerConfig, mode_filter: ModeFilter = ModeFilter.ALL
) -> tuple[MemoryHost, ProfilerSession]:
    """Load a scene document and run the first scan."""
    host = load_scene(scene)
    session = ProfilerSession(host, config, mode_filter=mode_filter)
    session.analyze()
    return host, session
