"""Configuration loading and management for unsafe-census.

Configuration sources are merged in priority order:
    1. Defaults (defined in ScanConfig)
    2. Global config (~/.unsafe-census.toml)
    3. Project config (./unsafe-census.toml)
    4. Explicit config file
    5. Environment variables (UNSAFE_CENSUS_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(include_tests=False)
    >>> config.include_tests
    False
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_args, get_type_hints

from .exceptions import InvalidConfigError, UnsafeCensusError
from .regions import RegionStatsPolicy

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "UNSAFE_CENSUS_"
CONFIG_FILENAME = "unsafe-census.toml"


@dataclass(frozen=True)
class ScanConfig:
    """Settings for scanning Rust files.

    Attributes:
        include_tests: Count constructs inside #[test] functions and
            #[cfg(test)] modules
        region_stats: "slot" reproduces the classic single-record region
            statistics, "stack" keeps exact statistics per nested region
        strict_parse: Reject files that tree-sitter parses with errors
        max_file_size_mb: Largest file that will be read (MB)
        verbosity: Logging verbosity level
    """

    include_tests: bool = True
    region_stats: RegionStatsPolicy = "slot"
    strict_parse: bool = True
    max_file_size_mb: float = 10.0
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        if self.region_stats not in get_args(RegionStatsPolicy):
            raise InvalidConfigError(
                "region_stats", self.region_stats, "expected 'slot' or 'stack'"
            )
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.verbosity not in get_args(Verbosity):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "expected quiet, normal or verbose"
            )

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


def load_config(config_file: Optional[Path] = None, **overrides) -> ScanConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). `verbose`
            and `quiet` booleans are folded into `verbosity`; None values
            are ignored.

    Returns:
        Validated ScanConfig instance

    Raises:
        UnsafeCensusError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / f".{CONFIG_FILENAME}"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except UnsafeCensusError:
            raise
        except Exception as e:
            raise UnsafeCensusError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except UnsafeCensusError:
            raise
        except Exception as e:
            raise UnsafeCensusError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise UnsafeCensusError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except UnsafeCensusError:
            raise
        except Exception as e:
            raise UnsafeCensusError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ScanConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise UnsafeCensusError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from UNSAFE_CENSUS_* environment variables.

    Supported environment variables:
        UNSAFE_CENSUS_INCLUDE_TESTS: bool (true/false/1/0)
        UNSAFE_CENSUS_REGION_STATS: slot/stack
        UNSAFE_CENSUS_STRICT_PARSE: bool
        UNSAFE_CENSUS_MAX_FILE_SIZE_MB: float
        UNSAFE_CENSUS_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(ScanConfig)

    result: dict[str, Any] = {}

    for field_name in ScanConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
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
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

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

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Both a top-level table and a [unsafe-census] section are accepted.
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise UnsafeCensusError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        data = tomllib.load(f)
    section = data.get("unsafe-census")
    if isinstance(section, dict):
        return section
    return data
