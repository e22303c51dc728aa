"""
Core duplicate detection engine — scanner, hasher, grouper, scorer and pipeline.

This package contains the foundation of dupsense:
- FileScannerImpl: lazy stack-based directory traversal with size/extension filters
- HasherImpl + XXH128AlgorithmImpl: streamed full-content hashing (xxHash128, MD5, SHA-256)
- FileGrouperImpl: size buckets and digest grouping inside each bucket
- PriorityScorer: rule table that ranks duplicates and recommends which one to keep
- DuplicateFinderImpl: size → content hash → scoring → report pipeline
- Models: FileRecord, DuplicateGroup, DuplicateReport and configuration objects

No GUI or terminal dependencies — suitable for CLI and library usage.
"""

from .errors import (
    DupsenseError, ScanError, RootNotFoundError, RootNotADirectoryError,
    RootAccessDeniedError, HashError, ScanCancelledError)
from .scanner import FileScannerImpl
from .grouper import FileGrouperImpl
from .hasher import HasherImpl, XXH128AlgorithmImpl, MD5AlgorithmImpl, SHA256AlgorithmImpl
from .scorer import PriorityScorer, ScoringRule, ScoringConfig
from .finder import DuplicateFinderImpl
from .report import build_report, overall_recommendations
from .models import (
    FileRecord, ScoredFile, ScoreResult, Priority, DuplicateGroup, DuplicateReport,
    ScanStats, ScanParams, GroupOrder, HashAlgorithmName)

__all__ = [
    "DupsenseError",
    "ScanError",
    "RootNotFoundError",
    "RootNotADirectoryError",
    "RootAccessDeniedError",
    "HashError",
    "ScanCancelledError",
    "FileScannerImpl",
    "FileGrouperImpl",
    "HasherImpl",
    "XXH128AlgorithmImpl",
    "MD5AlgorithmImpl",
    "SHA256AlgorithmImpl",
    "PriorityScorer",
    "ScoringRule",
    "ScoringConfig",
    "DuplicateFinderImpl",
    "build_report",
    "overall_recommendations",
    "FileRecord",
    "ScoredFile",
    "ScoreResult",
    "Priority",
    "DuplicateGroup",
    "DuplicateReport",
    "ScanStats",
    "ScanParams",
    "GroupOrder",
    "HashAlgorithmName",
]
