"""JSON formatter for scan summaries."""

import json
from typing import List

from ..api import ScanResult
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render one JSON object per scanned file, as a list."""

    def render(self, results: List[ScanResult]) -> None:
        # Runs after every file is scanned, so the list follows the last
        # diagnostic line on stdout.
        print(self.format(results))

    def format(self, results: List[ScanResult]) -> str:
        return json.dumps([r.to_dict() for r in results], indent=2)
