"""Quiet formatter: object paths or script keys only."""

from ..profiler import DetailsView, ProfileReport
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render one line per row of the details view."""

    def render(self, report: ProfileReport) -> None:
        text = self.format(report)
        if text:
            print(text)

    def format(self, report: ProfileReport) -> str:
        if report.view is DetailsView.BY_SCRIPT:
            return "\n".join(s.key for s in report.scripts)
        return "\n".join(row.node.path for row in report.objects)
