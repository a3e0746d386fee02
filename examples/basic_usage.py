#!/usr/bin/env python3
"""
Example: Basic usage of SyncScope as a Python library
"""

from pathlib import Path

from syncscope import DetailsView, ProfilerSession, always_confirm
from syncscope.host import load_scene

# Profile a scene document
host = load_scene(Path(__file__).parent / "world.json")
session = ProfilerSession(host, view=DetailsView.BY_SCRIPT)

estimate = session.estimate()
print(f"Estimated bandwidth: {estimate.bandwidth_kbps:.2f} kbps "
      f"({estimate.intensity_rating}, score {estimate.intensity_score:.1f}/100)")
for advisory in estimate.advisories:
    print(f"  ! {advisory}")
print()

# Heaviest scripts first
for summary in session.by_script():
    editable = "bulk-editable" if session.can_bulk_edit(summary) else "read-only"
    print(f"{summary.display_name}: {summary.instance_count} instance(s), "
          f"{summary.bandwidth_kbps:.2f} kbps [{editable}]")

# Switch the scoreboard to manual sync, then the session re-scans
report = session.apply_mode_report("scoreboard", "Manual", confirm=always_confirm)
print(f"\nWrote {report.written} instance(s); "
      f"now {session.estimate().bandwidth_kbps:.2f} kbps")
