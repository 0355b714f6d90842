"""Quiet formatter: region diagnostics only, no summary."""

from typing import List

from ..api import ScanResult
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    def render(self, results: List[ScanResult]) -> None:
        pass

    def format(self, results: List[ScanResult]) -> str:
        return ""
