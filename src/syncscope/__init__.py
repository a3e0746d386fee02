"""
SyncScope - network-sync behaviour profiler for scene graphs

Classifies the sync mode and synced variables of every behaviour in a scene,
estimates the resulting network bandwidth, and groups the results by scene
object or by script, with bulk changes of the sync mode per script.
"""

__version__ = "0.1.0"

from .aggregation import ModeFilter, parse_filter
from .config import EstimationConfig, ProfilerConfig, load_config
from .estimation import BandwidthEstimator, intensity_rating
from .models import ComponentRecord, ScanResult, SceneEstimate, SceneObjectNode, ScriptSummary
from .mutation import MutationReport, always_confirm
from .profiler import DetailsView, ProfileReport, ProfilerSession, scan

__all__ = [
    "scan",  # One-shot scan of a host
    "ProfilerSession",  # Interactive session (views, filter, bulk apply)
    "ProfileReport",
    "DetailsView",
    "ScanResult",
    "SceneObjectNode",
    "ComponentRecord",
    "ScriptSummary",
    "SceneEstimate",
    "MutationReport",
    "always_confirm",  # Confirmation callback for scripted applies
    "BandwidthEstimator",
    "intensity_rating",
    "ModeFilter",
    "parse_filter",
    "ProfilerConfig",
    "EstimationConfig",
    "load_config",
]
