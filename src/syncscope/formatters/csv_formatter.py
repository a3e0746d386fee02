"""CSV formatter for SyncScope."""

import csv
import io

from ..profiler import DetailsView, ProfileReport
from .base import BaseFormatter


class CsvFormatter(BaseFormatter):
    """Render the details view as CSV.

    The by-script view gives one row per script; otherwise one row per
    visible component.
    """

    def render(self, report: ProfileReport) -> None:
        print(self.format(report), end="")

    def format(self, report: ProfileReport) -> str:
        output = io.StringIO()
        writer = csv.writer(output)

        if report.view is DetailsView.BY_SCRIPT:
            writer.writerow(["key", "name", "instances", "bandwidth_kbps", "bulk_editable"])
            for s in report.scripts:
                writer.writerow([
                    s.key, s.display_name, s.instance_count,
                    f"{s.bandwidth_kbps:.4f}",
                    "yes" if report.bulk_editable.get(s.key) else "no",
                ])
            return output.getvalue()

        writer.writerow([
            "object", "path", "component_type", "sync_mode",
            "synced_variables", "bandwidth_kbps", "program_source",
        ])
        for row in report.objects:
            for c in row.visible_components:
                writer.writerow([
                    row.node.name, row.node.path, c.component_type, c.sync_mode,
                    c.synced_variable_count,
                    f"{report.estimator.component_kbps(c):.4f}",
                    c.program_source_path,
                ])
        return output.getvalue()
