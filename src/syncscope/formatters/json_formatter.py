"""JSON formatter for SyncScope."""

import json
from dataclasses import asdict

from ..models import ComponentRecord
from ..profiler import ProfileReport
from .base import BaseFormatter


def _component_dict(record: ComponentRecord, report: ProfileReport) -> dict:
    return {
        "type": record.component_type,
        "sync_mode": record.sync_mode,
        "synced_variables": [str(v) for v in record.synced_variables],
        "program_source": record.program_source_path or None,
        "bandwidth_kbps": round(report.estimator.component_kbps(record), 4),
    }


def report_to_dict(report: ProfileReport) -> dict:
    """Plain-data form of a report (filtered views, unfiltered totals)."""
    result = report.result
    estimate = report.estimate
    return {
        "summary": {
            "behaviours": result.total_behaviours,
            "platform_components": result.total_platform_components,
            "synced_variables": result.total_synced_variables,
            "counts": asdict(result.counts),
            "component_types": dict(
                sorted(result.component_type_counts.items(), key=lambda kv: kv[1], reverse=True)
            ),
        },
        "estimate": {
            "bandwidth_kbps": round(estimate.bandwidth_kbps, 4),
            "intensity_score": round(estimate.intensity_score, 2),
            "intensity_rating": estimate.intensity_rating,
            "advisories": list(estimate.advisories),
        },
        "objects": [
            {
                "name": row.node.name,
                "path": row.node.path,
                "bandwidth_kbps": round(row.bandwidth_kbps, 4),
                "intensity_score": round(row.intensity_score, 2),
                "components": [_component_dict(c, report) for c in row.visible_components],
            }
            for row in report.objects
        ],
        "scripts": [
            {
                "key": summary.key,
                "name": summary.display_name,
                "source": summary.tooltip or None,
                "instances": summary.instance_count,
                "bandwidth_kbps": round(summary.bandwidth_kbps, 4),
                "bulk_editable": report.bulk_editable.get(summary.key, False),
            }
            for summary in report.scripts
        ],
    }


class JsonFormatter(BaseFormatter):
    """Render reports as JSON."""

    def render(self, report: ProfileReport) -> None:
        print(self.format(report))

    def format(self, report: ProfileReport) -> str:
        return json.dumps(report_to_dict(report), indent=2)
