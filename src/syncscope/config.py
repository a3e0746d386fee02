"""Configuration loading and management for SyncScope.

Configuration sources are merged in priority order:
    1. Defaults (defined in ProfilerConfig)
    2. Global config (~/.syncscope.toml)
    3. Project config (./syncscope.toml)
    4. Explicit config file
    5. Environment variables (SYNCSCOPE_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True)
    >>> config.verbosity
    'verbose'
    >>> config.estimation.continuous_rate_hz
    10.0
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]


@dataclass(frozen=True)
class EstimationConfig:
    """Constants of the bandwidth model.

    The model is deliberately coarse: an estimate for prioritisation, not a
    measurement.

    Attributes:
        Update rates (Hz):
            continuous_rate_hz: Continuous-sync behaviours
            manual_rate_hz: Manual-sync behaviours (occasional explicit requests)
            built_in_rate_hz: Platform components with their own sync
            managed_rate_hz: Everything else that is not explicitly None

        Payload:
            base_bytes_per_update: Fixed header cost of one update
            bytes_per_synced_var: Cost per synced variable in one update

        Intensity:
            intensity_multiplier: kbps -> 0..100 score factor
            continuous_warning_threshold: Advisory fires above this many
                continuous behaviours
    """

    continuous_rate_hz: float = 10.0
    manual_rate_hz: float = 0.2
    built_in_rate_hz: float = 5.0
    managed_rate_hz: float = 1.0

    base_bytes_per_update: float = 24.0
    bytes_per_synced_var: float = 12.0

    intensity_multiplier: float = 2.0
    continuous_warning_threshold: int = 10

    def __post_init__(self) -> None:
        """Validate estimation constants."""
        rate_fields = [
            "continuous_rate_hz",
            "manual_rate_hz",
            "built_in_rate_hz",
            "managed_rate_hz",
        ]
        for field_name in rate_fields:
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} must be non-negative")

        if self.base_bytes_per_update < 0:
            raise ValueError("base_bytes_per_update must be non-negative")
        if self.bytes_per_synced_var < 0:
            raise ValueError("bytes_per_synced_var must be non-negative")
        if self.intensity_multiplier <= 0:
            raise ValueError("intensity_multiplier must be positive")
        if self.continuous_warning_threshold < 0:
            raise ValueError("continuous_warning_threshold must be non-negative")


DEFAULT_ESTIMATION = EstimationConfig()


@dataclass(frozen=True)
class ProfilerConfig:
    """Configuration for a profiling run.

    The name lists are ordered: the first candidate present on a component
    wins.

    Attributes:
        Component kinds:
            primary_behaviour_type: The sync-capable behaviour type
            platform_type_prefix: Type-name prefix (or namespace fragment) of
                platform components
            built_in_sync_markers: Platform type-name fragments that carry
                their own sync

        Reflection:
            sync_selector_names: Candidate names of the sync-mode selector
            discovery_keyword: Substring looked for by the discovery scan
            program_source_names: Candidate names of the program source reference
            synced_array_names: Candidate names of the serialized synced-variable list
            proxy_base_type: Base type of the authored proxy behaviour
            synced_field_tag: Tag marking a proxy field as network-synced

        Output control:
            verbosity: Logging verbosity level
    """

    primary_behaviour_type: str = "UdonBehaviour"
    platform_type_prefix: str = "VRC"
    built_in_sync_markers: tuple[str, ...] = ("Pickup", "ObjectSync", "PlayerAudio", "Station")

    sync_selector_names: tuple[str, ...] = (
        "syncMethod",
        "SyncMethod",
        "Synchronization",
        "synchronization",
    )
    discovery_keyword: str = "sync"
    program_source_names: tuple[str, ...] = (
        "programSource",
        "m_ProgramSource",
        "serializedProgramAsset",
        "m_SerializedProgramAsset",
    )
    synced_array_names: tuple[str, ...] = (
        "syncedVariables",
        "syncedVariableNames",
        "syncedVariableTable",
    )
    proxy_base_type: str = "UdonSharp.UdonSharpBehaviour"
    synced_field_tag: str = "UdonSharp.UdonSyncedAttribute"

    verbosity: Verbosity = "normal"

    estimation: EstimationConfig = field(default_factory=EstimationConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.primary_behaviour_type:
            raise ValueError("primary_behaviour_type must not be empty")
        if not self.discovery_keyword:
            raise ValueError("discovery_keyword must not be empty")

        name_lists = [
            "sync_selector_names",
            "program_source_names",
            "synced_array_names",
        ]
        for field_name in name_lists:
            if not getattr(self, field_name):
                raise ValueError(f"{field_name} must list at least one name")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")


default_config = ProfilerConfig()

_TUPLE_FIELDS = frozenset(
    f.name for f in fields(ProfilerConfig) if str(f.type).startswith("tuple")
)


def load_config(config_file: Optional[Path] = None, **overrides) -> ProfilerConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated ProfilerConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid

    Example:
        >>> config = load_config(config_file=Path("syncscope.toml"))
    """
    merged: dict = {}

    global_config = Path.home() / ".syncscope.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "syncscope.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    # [estimation] section from TOML
    estimation = merged.pop("estimation", None)
    if estimation is not None:
        if isinstance(estimation, dict):
            try:
                merged["estimation"] = EstimationConfig(**estimation)
            except (TypeError, ValueError) as e:
                raise InvalidConfigError("estimation", estimation, str(e))
        elif isinstance(estimation, EstimationConfig):
            merged["estimation"] = estimation

    for name in _TUPLE_FIELDS:
        if name in merged and isinstance(merged[name], list):
            merged[name] = tuple(merged[name])

    try:
        return ProfilerConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from SYNCSCOPE_* environment variables.

    Only scalar fields are read (e.g. SYNCSCOPE_PRIMARY_BEHAVIOUR_TYPE,
    SYNCSCOPE_VERBOSITY). Name lists and the estimation table come from
    TOML only.
    """
    type_hints = get_type_hints(ProfilerConfig)

    result: dict[str, Any] = {}

    for field_name in ProfilerConfig.__dataclass_fields__:
        env_key = f"SYNCSCOPE_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns None for types that cannot come from the environment.
    """
    origin = getattr(type_hint, "__origin__", None)

    if origin is tuple or type_hint is EstimationConfig:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file and return the parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
