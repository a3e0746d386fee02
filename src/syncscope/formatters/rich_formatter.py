"""Rich terminal formatter for SyncScope."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..modes import SyncCategory, category_of
from ..profiler import DetailsView, ProfileReport
from .base import BaseFormatter

_MODE_STYLES = {
    SyncCategory.CONTINUOUS: "red",
    SyncCategory.MANUAL: "yellow",
    SyncCategory.NONE: "dim",
    SyncCategory.VRC_MANAGED: "cyan",
    SyncCategory.BUILT_IN: "magenta",
    SyncCategory.UNKNOWN: "white",
}


def _score_style(score: float) -> str:
    if score > 75:
        return "red bold"
    elif score > 40:
        return "yellow"
    else:
        return "green"


def _mode_label(mode: str) -> str:
    style = _MODE_STYLES[category_of(mode)]
    return f"[{style}]{escape(mode)}[/{style}]"


class RichFormatter(BaseFormatter):
    """Summary panels plus the selected details table."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, report: ProfileReport) -> None:
        if report.result.is_empty:
            self.console.print("[yellow]No synced behaviours or platform components found.[/yellow]")
            return

        self._print_summary(report)
        if report.view is DetailsView.BY_OBJECT:
            self._print_objects(report)
        elif report.view is DetailsView.BY_SCRIPT:
            self._print_scripts(report)

    def format(self, report: ProfileReport) -> str:
        # Rich output goes directly to console; return empty string
        self.render(report)
        return ""

    def _print_summary(self, report: ProfileReport) -> None:
        result = report.result
        counts = result.counts

        lines = [
            f"Total behaviours: [bold]{result.total_behaviours}[/bold]",
            f"  Continuous: {counts.continuous}",
            f"  Manual: {counts.manual}",
            f"  None: {counts.none}",
            f"  VRC Managed: {counts.vrc_managed}",
            f"  Unknown: {counts.unknown}",
            f"Total synced variables: [bold]{result.total_synced_variables}[/bold]",
        ]
        self.console.print(Panel("\n".join(lines), title="[bold cyan]Behaviour Summary[/bold cyan]", expand=False))

        lines = [f"Total platform components: [bold]{result.total_platform_components}[/bold]"]
        for type_name, count in sorted(
            result.component_type_counts.items(), key=lambda kv: kv[1], reverse=True
        ):
            lines.append(f"  {escape(type_name)}: {count}")
        self.console.print(Panel("\n".join(lines), title="[bold cyan]Platform Components[/bold cyan]", expand=False))

        estimate = report.estimate
        style = _score_style(estimate.intensity_score)
        config = report.estimator.config
        lines = [
            f"[{style}]Intensity Score: {estimate.intensity_score:.1f}/100 "
            f"({estimate.intensity_rating})[/{style}]",
            f"Estimated Bandwidth: {estimate.bandwidth_kbps:.1f} kbps (approx.)",
            f"[dim]Assumes Continuous~{config.continuous_rate_hz:g}Hz, "
            f"Manual~{config.manual_rate_hz:g}Hz; {config.base_bytes_per_update:g}B base + "
            f"{config.bytes_per_synced_var:g}B/var[/dim]",
        ]
        self.console.print(Panel("\n".join(lines), title="[bold cyan]Network Intensity Estimate[/bold cyan]", expand=False))

        for advisory in estimate.advisories:
            self.console.print(f"[yellow]Warning:[/yellow] {escape(advisory)}")

    def _print_objects(self, report: ProfileReport) -> None:
        if not report.objects:
            self.console.print("[dim]No objects match the current filter.[/dim]")
            return

        table = Table(title="By Object", show_lines=False)
        table.add_column("Object", style="bold")
        table.add_column("Component")
        table.add_column("Sync Mode")
        table.add_column("Synced Variables")
        table.add_column("Score", justify="right")
        table.add_column("Kbps", justify="right")

        for row in report.objects:
            table.add_row(
                escape(row.node.path),
                f"{len(row.node.components)} component(s)",
                "",
                "",
                f"{row.intensity_score:.1f}",
                f"{row.bandwidth_kbps:.2f}",
            )
            for c in row.visible_components:
                variables = ", ".join(str(v) for v in c.synced_variables)
                table.add_row(
                    "",
                    escape(c.component_type),
                    _mode_label(c.sync_mode),
                    escape(variables) if variables else f"[dim]{c.synced_variable_count}[/dim]",
                    "",
                    f"[dim]{report.estimator.component_kbps(c):.2f}[/dim]",
                )
        self.console.print(table)

    def _print_scripts(self, report: ProfileReport) -> None:
        if not report.scripts:
            self.console.print("[dim]No scripts match the current filter.[/dim]")
            return

        table = Table(title="By Script")
        table.add_column("Script", style="bold")
        table.add_column("Instances", justify="right")
        table.add_column("Kbps", justify="right")
        table.add_column("Bulk Edit")
        table.add_column("Key", style="dim")

        for s in report.scripts:
            table.add_row(
                escape(s.display_name),
                str(s.instance_count),
                f"{s.bandwidth_kbps:.2f}",
                "[green]yes[/green]" if report.bulk_editable.get(s.key) else "[dim]no[/dim]",
                escape(s.key),
            )
        self.console.print(table)
