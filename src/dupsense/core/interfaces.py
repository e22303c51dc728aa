"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate finder.
These protocols enforce structural typing using Python's `typing.Protocol` so that
scanners, hashers and scorers can be swapped (e.g. fake filesystems in tests).

Key Components:
---------------
- HashAlgorithm: Factory for incremental hash objects (xxHash128, MD5, SHA-256).
- Hasher: Computes a content digest for a scanned file.
- FileScanner: Lazily yields FileRecord objects for a directory tree.
- FileGrouper: Groups files by size and by content digest.
- SizeStage / HashStage: Individual stages of the duplicate pipeline.
- Scorer: Ranks duplicate members and recommends which one to keep.
- DuplicateFinder: Runs the whole pipeline and returns a DuplicateReport.
"""

from typing import Protocol, List, Dict, Tuple, Optional, Callable, ContextManager, Iterator, Sequence

from dupsense.core.models import (
    FileRecord,
    ScanStats,
    ScanParams,
    ScoredFile,
    DuplicateGroup,
    DuplicateReport,
)

ProgressCallback = Callable[[str, int, Optional[int]], None]
StoppedFlag = Callable[[], bool]


class IncrementalHash(Protocol):
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like SHA-256, MD5, or xxHash
    without affecting the rest of the duplicate detection logic.
    """
    name: str

    def new(self) -> IncrementalHash:
        """Returns a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    """Interface for hashing the full content of a file."""
    def compute_digest(self, file: FileRecord) -> str: ...


class FileScanner(Protocol):
    def iter_files(
        self,
        stats: ScanStats,
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> Iterator[FileRecord]:
        """
        Lazily yield every file that passes the filters.

        Args:
            stats: Counters updated while walking (scanned, skipped, unreadable).
            stopped_flag: Function that returns True if operation should be canceled.
            progress_callback: Optional callback for reporting progress (stage, current, total).
        """
        ...


class FileGrouper(Protocol):
    def group_by_size(self, files: Sequence[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Group files by their size in bytes."""
        ...

    def candidate_buckets(self, files: Sequence[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Size buckets with 2+ files."""
        ...

    def group_by_digest(
        self,
        files: Sequence[FileRecord],
        stats: ScanStats
    ) -> Dict[str, List[FileRecord]]:
        """Group same-size files by content digest, keeping groups of 2+ files."""
        ...

    def hashing_pool(self) -> ContextManager[None]:
        """Scope in which consecutive group_by_digest calls reuse one worker pool."""
        ...


# =============================
# Stage Interfaces
# =============================

class SizeStage(Protocol):
    def process(
        self,
        files: Sequence[FileRecord],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[Tuple[int, List[FileRecord]]]:
        """
        Group files by size to find initial duplicate candidates.

        Returns:
            (size, files) buckets holding 2+ files each, in discovery order.
        """
        ...


class HashStage(Protocol):
    def process(
        self,
        buckets: List[Tuple[int, List[FileRecord]]],
        stats: ScanStats,
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[Tuple[int, str, List[FileRecord]]]:
        """
        Split size buckets by content digest.

        Returns:
            (size, digest, files) hash buckets holding 2+ files each.
        """
        ...


class Scorer(Protocol):
    def score(self, file: FileRecord) -> ScoredFile: ...

    def build_group(self, digest: str, size: int, files: Sequence[FileRecord]) -> DuplicateGroup: ...


class DuplicateFinder(Protocol):
    def find_duplicates(
        self,
        params: ScanParams,
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> DuplicateReport:
        """
        Run scan → size buckets → content hashes → scoring → report.

        Raises:
            ScanError: if the root directory is missing or inaccessible.
            ScanCancelledError: if stopped_flag requested cancellation.
        """
        ...
