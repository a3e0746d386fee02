"""Bulk sync-mode mutation across a script group."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .config import ProfilerConfig, default_config
from .host.protocols import ComponentHandle, EnumProperty, Host
from .logging_config import get_logger
from .models import ScriptSummary
from .modes import CONTINUOUS_KEYWORD, MANUAL_KEYWORD, NONE_KEYWORD

logger = get_logger(__name__)

EDIT_DESCRIPTION = "Set Udon Sync Mode"

ConfirmCallback = Callable[[ScriptSummary, str], bool]


@dataclass(frozen=True)
class MutationReport:
    """Outcome of one bulk apply.

    ``confirmed`` alone decides success; ``written`` may be zero for a
    confirmed apply that found nothing to change.
    """

    script_key: str
    target_mode: str
    confirmed: bool
    written: int = 0
    skipped: int = 0

    @property
    def succeeded(self) -> bool:
        return self.confirmed


def confirmation_message(summary: ScriptSummary, target_mode: str) -> str:
    return (
        f"Set sync mode to {target_mode} for all {summary.instance_count} "
        f"instances of '{summary.display_name}' in the scene?"
    )


def has_sync_mode_options(prop: EnumProperty) -> bool:
    """True when the options cover none, manual and continuous."""
    lowered = [label.lower() for label in prop.labels if label]
    return all(
        any(keyword in label for label in lowered)
        for keyword in (NONE_KEYWORD, MANUAL_KEYWORD, CONTINUOUS_KEYWORD)
    )


def find_selector(
    component: ComponentHandle, host: Host, config: ProfilerConfig = default_config
) -> Optional[EnumProperty]:
    """Writable sync-mode selector of a component, or None.

    A property found under a known name is the selector even if it is not
    enumerated; discovery only runs when no known name is present.
    """
    prop = host.get_named_property(component, config.sync_selector_names)
    if prop is None:
        keyword = config.discovery_keyword.lower()
        for candidate in host.enumerate_properties(component):
            if (
                isinstance(candidate, EnumProperty)
                and keyword in candidate.name.lower()
                and has_sync_mode_options(candidate)
            ):
                prop = candidate
                break

    if not isinstance(prop, EnumProperty):
        return None
    return prop


def find_option_index(prop: EnumProperty, target_mode: str) -> int:
    """Index of the option matching ``target_mode``, or -1.

    A case-insensitive exact match wins over a substring match.
    """
    target = target_mode.lower()
    for i, label in enumerate(prop.labels):
        if label and label.lower() == target:
            return i
    for i, label in enumerate(prop.labels):
        if label and target in label.lower():
            return i
    return -1


class MutationWorkflow:
    """Writes a sync mode to every live primary behaviour of a script group."""

    def __init__(self, host: Host, config: ProfilerConfig = default_config):
        self.host = host
        self.config = config

    def set_mode(self, component: ComponentHandle, target_mode: str) -> bool:
        """Write ``target_mode`` to one component. False on a miss."""
        if not target_mode:
            return False

        prop = find_selector(component, self.host, self.config)
        if prop is None:
            logger.debug(f"No sync selector on {component!r}")
            return False

        index = find_option_index(prop, target_mode)
        if index < 0:
            logger.debug(f"No option matching {target_mode!r} on {component!r}")
            return False

        with self.host.reversible_edit(component, EDIT_DESCRIPTION):
            self.host.set_enumerated_value(prop, index)
            self.host.commit(component)
        return True

    def apply_to_summary(self, summary: ScriptSummary, target_mode: str) -> tuple[int, int]:
        """Returns (written, skipped).

        A component the host fails to resolve or write is logged and
        skipped; the remaining components are still tried.
        """
        written = skipped = 0
        for record in summary.components:
            if record.component_type != self.config.primary_behaviour_type or not record.is_live:
                skipped += 1
                continue
            try:
                ok = self.set_mode(record.instance, target_mode)
            except Exception as e:
                logger.warning(
                    f"Could not set sync mode on {_owner_name(record.instance)}: {e}"
                )
                ok = False
            if ok:
                written += 1
            else:
                skipped += 1
        return written, skipped

    def confirm(
        self, summary: ScriptSummary, target_mode: str, confirm: ConfirmCallback
    ) -> bool:
        if confirm(summary, target_mode):
            return True
        logger.info(f"Sync mode change for '{summary.display_name}' cancelled")
        return False

    def apply(self, summary: ScriptSummary, target_mode: str) -> MutationReport:
        """Write without asking. Callers confirm first."""
        written, skipped = self.apply_to_summary(summary, target_mode)
        logger.info(
            f"Set {target_mode} on {written}/{summary.instance_count} instance(s) "
            f"of '{summary.display_name}'"
        )
        return MutationReport(
            summary.key, target_mode, confirmed=True, written=written, skipped=skipped
        )

    def run(
        self, summary: ScriptSummary, target_mode: str, confirm: ConfirmCallback
    ) -> MutationReport:
        if not self.confirm(summary, target_mode, confirm):
            return MutationReport(summary.key, target_mode, confirmed=False)
        return self.apply(summary, target_mode)


def always_confirm(summary: ScriptSummary, target_mode: str) -> bool:
    """Confirmation callback for non-interactive callers."""
    return True


def _owner_name(component: ComponentHandle) -> str:
    owner = getattr(component, "owner", None)
    return owner.name if owner is not None else "<detached>"
