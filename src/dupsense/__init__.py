"""
dupsense — duplicate file finder that recommends which copy to keep.

Core features:
- Size buckets first, full-content digest (xxHash128, MD5 or SHA-256) only inside them
- Heuristic scoring (location, naming, recency, path depth) with keep/delete advice
- Structured report with reclaimable space and corpus-level recommendations
- Optional hand-off of flagged files to the system trash (via send2trash)
- CLI interface for headless/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dupsense")
except Exception:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from dupsense.commands import DuplicateScanCommand
from dupsense.core import (
    ScanParams, GroupOrder, HashAlgorithmName, FileRecord, DuplicateGroup, DuplicateReport,
    DuplicateFinderImpl, PriorityScorer, ScanError)
from dupsense.utils.convert_utils import ConvertUtils
from dupsense.services import DuplicateService, FileService, ReportFormatter

__all__ = [
    "DuplicateScanCommand",
    "ScanParams",
    "GroupOrder",
    "HashAlgorithmName",
    "FileRecord",
    "DuplicateGroup",
    "DuplicateReport",
    "DuplicateFinderImpl",
    "PriorityScorer",
    "ScanError",
    "ConvertUtils",
    "DuplicateService",
    "FileService",
    "ReportFormatter",
    "__version__",
]
