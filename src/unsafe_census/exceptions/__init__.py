"""Exception hierarchy for unsafe-census."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    ParsingError,
    RegionDepthError,
    UnsupportedLanguageError,
)
from .base import UnsafeCensusError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "UnsafeCensusError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "UnsupportedLanguageError",
    "RegionDepthError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
