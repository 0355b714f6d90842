"""Base formatter interface for scan summaries."""

from abc import ABC, abstractmethod
from typing import List

from ..api import ScanResult


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, results: List[ScanResult]) -> None:
        """Render results to stderr/stdout as appropriate."""

    @abstractmethod
    def format(self, results: List[ScanResult]) -> str:
        """Return formatted string representation of results."""
