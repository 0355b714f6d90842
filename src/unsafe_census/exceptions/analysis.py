"""Analysis-related exceptions: file access, parsing, region accounting."""

from pathlib import Path
from typing import List

from .base import UnsafeCensusError


class AnalysisError(UnsafeCensusError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when file content cannot be parsed."""

    def __init__(self, filepath: Path, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class UnsupportedLanguageError(AnalysisError):
    """Raised when no grammar is installed for the requested language."""

    def __init__(self, language: str, supported_languages: List[str]):
        super().__init__(
            f"Unsupported language: {language}",
            details={"language": language, "supported": ", ".join(supported_languages)},
        )
        self.language = language
        self.supported_languages = supported_languages


class RegionDepthError(AnalysisError):
    """Raised when a trust region is closed that was never opened.

    This signals broken entry/exit pairing inside the visitor, not bad input.
    """

    def __init__(self, shape: str):
        super().__init__(
            "Trust region depth would drop below zero",
            details={"shape": shape},
        )
        self.shape = shape
