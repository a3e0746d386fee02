"""Scan orchestration and the interactive profiling session.

``scan`` is a pure function of the host's current state: it indexes,
classifies and counts, and returns one ScanResult. ``ProfilerSession`` keeps
the last result together with the user's preferences (filter, details view,
per-script target modes) and runs the scan, mutate, re-scan sequence.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .aggregation import ModeFilter, by_object_view, by_script_view, can_bulk_edit, find_summary
from .classification import SyncClassifier
from .config import ProfilerConfig, default_config
from .estimation import BandwidthEstimator
from .exceptions import UnknownScriptError
from .host.protocols import Host
from .indexer import index_objects
from .logging_config import get_logger
from .models import (
    ComponentKind,
    ObjectSummary,
    ScanResult,
    SceneEstimate,
    ScriptSummary,
    SyncCounts,
)
from .modes import BUILT_IN_LABEL, SYNC_MODE_OPTIONS, SyncCategory, counting_category, is_label
from .mutation import ConfirmCallback, MutationReport, MutationWorkflow

logger = get_logger(__name__)


def scan(
    host: Host,
    config: ProfilerConfig = default_config,
    classifier: Optional[SyncClassifier] = None,
) -> ScanResult:
    """Index and classify every eligible component of the host's scenes."""
    if classifier is None:
        classifier = SyncClassifier(host, config)

    index = index_objects(host.list_components(), config)

    mode_counts: Counter = Counter()
    type_counts: Counter = Counter()
    behaviours = platform = synced_vars = 0

    for node in index.objects:
        node.components = [classifier.annotate(record) for record in node.components]

        for record in node.components:
            if record.kind is ComponentKind.BEHAVIOUR:
                behaviours += 1
                mode_counts[counting_category(record.sync_mode)] += 1
                synced_vars += record.synced_variable_count
            else:
                platform += 1
                type_counts[record.component_type] += 1
                if is_label(record.sync_mode, BUILT_IN_LABEL):
                    mode_counts[SyncCategory.BUILT_IN] += 1
                else:
                    mode_counts[SyncCategory.VRC_MANAGED] += 1

    counts = SyncCounts(
        continuous=mode_counts[SyncCategory.CONTINUOUS],
        manual=mode_counts[SyncCategory.MANUAL],
        none=mode_counts[SyncCategory.NONE],
        unknown=mode_counts[SyncCategory.UNKNOWN],
        vrc_managed=mode_counts[SyncCategory.VRC_MANAGED],
        built_in=mode_counts[SyncCategory.BUILT_IN],
    )

    logger.info(
        f"{config.primary_behaviour_type}s: {behaviours} "
        f"(Cont:{counts.continuous}, Manual:{counts.manual}) | "
        f"{config.platform_type_prefix} components: {platform} | "
        f"Synced vars: {synced_vars}"
    )

    return ScanResult(
        objects=tuple(index.objects),
        by_handle=dict(index.by_handle),
        counts=counts,
        total_behaviours=behaviours,
        total_platform_components=platform,
        component_type_counts=dict(type_counts),
        total_synced_variables=synced_vars,
    )


class DetailsView(Enum):
    BY_OBJECT = "objects"
    BY_SCRIPT = "scripts"


@dataclass
class ProfileReport:
    """Everything a formatter needs for one rendering."""

    result: ScanResult
    estimate: SceneEstimate
    objects: list[ObjectSummary]
    scripts: list[ScriptSummary]
    estimator: BandwidthEstimator
    mode_filter: ModeFilter = ModeFilter.ALL
    view: Optional[DetailsView] = None
    bulk_editable: dict[str, bool] = field(default_factory=dict)


class ProfilerSession:
    """Holds the last scan and the user's view preferences.

    Views are derived from the last scan on every call. Records from a
    previous scan must not be kept across ``analyze``.
    """

    def __init__(
        self,
        host: Host,
        config: ProfilerConfig = default_config,
        mode_filter: ModeFilter = ModeFilter.ALL,
        view: DetailsView = DetailsView.BY_OBJECT,
    ):
        self.host = host
        self.config = config
        self.mode_filter = mode_filter
        self.view = view
        self.classifier = SyncClassifier(host, config)
        self.estimator = BandwidthEstimator(config.estimation, config.primary_behaviour_type)
        self.mutations = MutationWorkflow(host, config)
        self._result: Optional[ScanResult] = None
        self._selections: dict[str, int] = {}

    def analyze(self) -> ScanResult:
        """Run a full scan, replacing the previous result."""
        self._result = scan(self.host, self.config, self.classifier)
        return self._result

    @property
    def result(self) -> ScanResult:
        if self._result is None:
            return self.analyze()
        return self._result

    def by_object(self) -> list[ObjectSummary]:
        return by_object_view(self.result, self.estimator, self.mode_filter)

    def by_script(self) -> list[ScriptSummary]:
        return by_script_view(self.result, self.estimator, self.mode_filter)

    def details(self) -> Union[list[ObjectSummary], list[ScriptSummary]]:
        """The view selected by ``self.view``."""
        if self.view is DetailsView.BY_SCRIPT:
            return self.by_script()
        return self.by_object()

    def estimate(self) -> SceneEstimate:
        """Scene-wide figures; always computed over the unfiltered scan."""
        return self.estimator.estimate(self.result)

    def can_bulk_edit(self, summary: ScriptSummary) -> bool:
        return can_bulk_edit(summary, self.config.primary_behaviour_type)

    def report(self, details: bool = True) -> ProfileReport:
        """Snapshot of the current scan for a formatter.

        With ``details`` the report names the selected details view; without
        it formatters render the summary only.
        """
        scripts = self.by_script()
        return ProfileReport(
            result=self.result,
            estimate=self.estimate(),
            objects=self.by_object(),
            scripts=scripts,
            estimator=self.estimator,
            mode_filter=self.mode_filter,
            view=self.view if details else None,
            bulk_editable={s.key: self.can_bulk_edit(s) for s in scripts},
        )

    # -- per-script target mode --

    def selection_for(self, key: str) -> int:
        """Index into SYNC_MODE_OPTIONS chosen for a script; defaults to 0."""
        selection = self._selections.get(key)
        if selection is None or not 0 <= selection < len(SYNC_MODE_OPTIONS):
            selection = 0
            self._selections[key] = selection
        return selection

    def select_mode(self, key: str, mode: Union[int, str]) -> str:
        """Remember the target mode for a script. Returns the chosen label."""
        if isinstance(mode, str):
            lowered = [option.lower() for option in SYNC_MODE_OPTIONS]
            if mode.lower() not in lowered:
                raise ValueError(
                    f"Unknown sync mode: {mode!r}. Choose from: {', '.join(SYNC_MODE_OPTIONS)}"
                )
            index = lowered.index(mode.lower())
        else:
            if not 0 <= mode < len(SYNC_MODE_OPTIONS):
                raise ValueError(f"Sync mode index out of range: {mode}")
            index = mode
        self._selections[key] = index
        return SYNC_MODE_OPTIONS[index]

    def selected_mode(self, key: str) -> str:
        return SYNC_MODE_OPTIONS[self.selection_for(key)]

    # -- mutation --

    def apply_mode_report(
        self,
        key: str,
        target_mode: Optional[str] = None,
        *,
        confirm: ConfirmCallback,
    ) -> MutationReport:
        """Apply a sync mode to every instance of a script, then re-scan.

        ``target_mode`` defaults to the mode selected for the script.
        ``confirm`` is asked first; pass ``always_confirm`` to skip the
        question. A declined confirmation changes nothing and skips the
        re-scan. Once confirmed, the re-scan runs even if the apply fails.

        Raises:
            UnknownScriptError: If ``key`` is not in the current by-script view
        """
        summary = find_summary(self.by_script(), key)
        if summary is None:
            raise UnknownScriptError(key)

        if target_mode is None:
            target_mode = self.selected_mode(key)

        if not self.mutations.confirm(summary, target_mode, confirm):
            return MutationReport(summary.key, target_mode, confirmed=False)

        try:
            return self.mutations.apply(summary, target_mode)
        finally:
            self.analyze()

    def apply_mode(
        self,
        key: str,
        target_mode: Optional[str] = None,
        *,
        confirm: ConfirmCallback,
    ) -> bool:
        """Boolean form of ``apply_mode_report``.

        True whenever the confirmation was accepted, even if no component
        was written.
        """
        return self.apply_mode_report(key, target_mode, confirm=confirm).succeeded
