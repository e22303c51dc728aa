"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups FileRecord objects by size and by content digest.

Digests are only computed inside one size bucket at a time, never across the
whole file set. With workers > 1 the files of a bucket are hashed on a thread
pool shared by the whole hash stage (see hashing_pool); results are collected
in submission order so grouping stays identical to the sequential run.
"""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import List, Dict, Any, Callable, Iterator, Optional, Sequence

from dupsense.core.errors import HashError
from dupsense.core.interfaces import FileGrouper, Hasher
from dupsense.core.hasher import HasherImpl
from dupsense.core.models import FileRecord, ScanStats

logger = logging.getLogger(__name__)


class FileGrouperImpl(FileGrouper):
    """
    A concrete implementation of FileGrouper.
    Uses an injected Hasher instance for flexibility and testability.
    """

    def __init__(self, hasher: Hasher = None, workers: int = 1):
        self.hasher = hasher or HasherImpl()
        self.workers = max(1, workers)
        self._executor: Optional[ThreadPoolExecutor] = None

    @contextmanager
    def hashing_pool(self) -> Iterator[None]:
        """
        Shares one thread pool across every group_by_digest call made inside
        the block. Without it each call starts and stops its own pool.
        """
        if self.workers == 1 or self._executor is not None:
            yield
            return
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            self._executor = executor
            try:
                yield
            finally:
                self._executor = None

    def group_by_size(self, files: Sequence[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Single pass size → files mapping, singletons included."""
        return self._group_by(files, lambda f: f.size)

    def candidate_buckets(self, files: Sequence[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Size buckets that can hold duplicates (2+ files)."""
        return self._group_by(files, lambda f: f.size, min_group_size=2)

    def group_by_digest(
            self,
            files: Sequence[FileRecord],
            stats: ScanStats
    ) -> Dict[str, List[FileRecord]]:
        """
        Groups files of one size bucket by content digest.
        Unreadable files are left out and counted in stats.unreadable_files.
        """
        if len(files) < 2:
            return {}

        groups: Dict[str, List[FileRecord]] = defaultdict(list)
        for file, digest in zip(files, self._compute_digests(files)):
            if digest is None:
                stats.unreadable_files += 1
                continue
            stats.hashes_computed += 1
            groups[digest].append(file)

        return {digest: group for digest, group in groups.items() if len(group) >= 2}

    def _compute_digests(self, files: Sequence[FileRecord]) -> List[Optional[str]]:
        if self.workers == 1:
            return [self._safe_digest(f) for f in files]
        if self._executor is not None:
            return list(self._executor.map(self._safe_digest, files))
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            # map() yields results in submission order
            return list(executor.map(self._safe_digest, files))

    def _safe_digest(self, file: FileRecord) -> Optional[str]:
        try:
            return self.hasher.compute_digest(file)
        except HashError as e:
            logger.warning(f"Skipping unreadable file: {e}")
            return None

    @staticmethod
    def _group_by(
            files: Sequence[FileRecord],
            key_func: Callable[[FileRecord], Any],
            min_group_size: int = 1
    ) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group files by any computed key.
        Dict insertion order follows the first file seen for each key.
        """
        groups = defaultdict(list)
        for file in files:
            groups[key_func(file)].append(file)
        return {key: group for key, group in groups.items() if len(group) >= min_group_size}
