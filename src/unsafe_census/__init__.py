"""
unsafe-census - trust region metrics for Rust source files

Counts functions, methods, traits, impls and expressions inside and outside
`unsafe` scopes, and reports the size of every unsafe region it closes.
"""

__version__ = "0.1.0"

from .api import ScanResult, scan_file, scan_source
from .ledger import Category, Count, CounterLedger
from .regions import RegionShape, RegionStats
from .visitor import IncludeTests, RegionVisitor

__all__ = [
    "scan_source",  # Main entry points
    "scan_file",
    "ScanResult",
    "RegionVisitor",  # Direct visitor access
    "IncludeTests",
    "CounterLedger",
    "Category",
    "Count",
    "RegionShape",
    "RegionStats",
]
