"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements directory scanning for the duplicate finder.
Features:
- Explicit stack-based traversal (no recursion), bounded by max_depth
- Entries are visited in sorted order so repeated scans yield the same sequence
- Applies size and extension filters, counting what was skipped
- Never follows symbolic links
- Yields FileRecord objects lazily
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Iterator, Tuple

from dupsense.core.errors import (
    RootNotFoundError,
    RootNotADirectoryError,
    RootAccessDeniedError,
    ScanCancelledError,
)
from dupsense.core.interfaces import FileScanner, ProgressCallback, StoppedFlag
from dupsense.core.models import FileRecord, ScanStats, Stage

logger = logging.getLogger(__name__)

# Progress throttling: report every N files
PROGRESS_INTERVAL = 5000


class FileScannerImpl(FileScanner):
    """
    Walks a directory tree and yields files that pass the size/extension filters.

    Attributes:
        root_dir: Root directory to scan
        workspace_root: Base for FileRecord.relative_path (defaults to root_dir)
        min_size: Minimum file size in bytes, inclusive
        max_size: Maximum file size in bytes, inclusive (optional)
        extensions: Allowed file extensions (e.g., [".txt", ".jpg"]); empty means all
        excluded_dirs: Directories whose subtrees are not visited
        max_depth: Maximum directory depth below root_dir
    """

    def __init__(
        self,
        root_dir: str,
        workspace_root: Optional[str] = None,
        min_size: int = 1024,
        max_size: Optional[int] = None,
        extensions: Optional[List[str]] = None,
        excluded_dirs: Optional[List[str]] = None,
        max_depth: int = 64
    ):
        self.root_dir = os.path.abspath(root_dir)
        self.workspace_root = os.path.abspath(workspace_root) if workspace_root else self.root_dir
        self.min_size = min_size
        self.max_size = max_size
        self.extensions = [ext.lower() for ext in extensions] if extensions else []
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []
        self.max_depth = max_depth

    def iter_files(
            self,
            stats: ScanStats,
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> Iterator[FileRecord]:
        """
        Validates the root eagerly, then returns a lazy iterator over matching files.

        Raises:
            RootNotFoundError / RootNotADirectoryError / RootAccessDeniedError
        """
        logger.debug(f"Root directory: {self.root_dir}")
        logger.debug(f"Filters: min_size={self.min_size}, max_size={self.max_size}, extensions={self.extensions}")
        self._validate_root()
        return self._walk(stats, stopped_flag, progress_callback)

    def _validate_root(self) -> None:
        root_path = Path(self.root_dir)
        if not root_path.exists():
            logger.error(f"Directory does not exist: {self.root_dir}")
            raise RootNotFoundError(self.root_dir)
        if not root_path.is_dir():
            logger.error(f"Not a directory: {self.root_dir}")
            raise RootNotADirectoryError(self.root_dir)
        if not os.access(root_path, os.R_OK | os.X_OK):
            logger.error(f"Access denied: {self.root_dir}")
            raise RootAccessDeniedError(self.root_dir)

    def _walk(
            self,
            stats: ScanStats,
            stopped_flag: Optional[StoppedFlag],
            progress_callback: Optional[ProgressCallback]
    ) -> Iterator[FileRecord]:
        stack: List[Tuple[str, int]] = [(self.root_dir, 0)]
        progress_counter = 0

        while stack:
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                raise ScanCancelledError(Stage.SCAN.value)

            current, depth = stack.pop()
            entries = self._list_dir(current, stats)
            subdirs = []

            for entry in entries:
                try:
                    if entry.is_symlink():
                        logger.debug(f"Skipping symbolic link: {entry.path}")
                        continue
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError as e:
                    logger.warning(f"Could not inspect {entry.path}: {e}")
                    stats.unreadable_files += 1
                    continue

                if is_dir:
                    if self._prefilter_dir(entry.path, depth + 1):
                        subdirs.append(entry.path)
                    continue

                record = self._process_file(entry, stats)
                progress_counter += 1
                if record is not None:
                    yield record

                if progress_callback and progress_counter >= PROGRESS_INTERVAL:
                    progress_callback(Stage.SCAN.value, stats.files_scanned, None)
                    progress_counter = 0

            # Reversed so the alphabetically first subdirectory is visited next
            for subdir in reversed(subdirs):
                stack.append((subdir, depth + 1))

        if progress_callback:
            progress_callback(Stage.SCAN.value, stats.files_scanned, stats.files_scanned)
        logger.debug(f"Scan completed. {stats.files_scanned} files seen.")

    @staticmethod
    def _list_dir(path: str, stats: ScanStats) -> List[os.DirEntry]:
        """Sorted directory entries; an unreadable directory yields nothing."""
        try:
            with os.scandir(path) as it:
                return sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.warning(f"Skipping unreadable directory {path}: {e}")
            stats.unreadable_dirs += 1
            return []

    def _prefilter_dir(self, path: str, depth: int) -> bool:
        """Skip excluded directories and anything below max_depth."""
        if depth > self.max_depth:
            logger.warning(f"Skipping {path}: deeper than {self.max_depth} levels")
            return False
        if self.excluded_dirs and self._is_excluded_directory(path):
            logger.debug(f"Skipping excluded directory: {path}")
            return False
        return True

    def _is_excluded_directory(self, path: str) -> bool:
        try:
            path_str = str(Path(path).resolve(strict=False))
        except (OSError, RuntimeError):
            return False
        for excluded_dir in self.excluded_dirs:
            if path_str == excluded_dir or path_str.startswith(excluded_dir + os.sep):
                return True
        return False

    def _process_file(self, entry: os.DirEntry, stats: ScanStats) -> Optional[FileRecord]:
        """
        Turn a directory entry into a FileRecord if it passes all filters.
        Updates the skip/unreadable counters otherwise.
        """
        try:
            if not entry.is_file(follow_symlinks=False):
                logger.debug(f"Skipping special file: {entry.path}")
                return None
            stat_result = entry.stat(follow_symlinks=False)
        except OSError as e:
            logger.warning(f"Could not stat {entry.path}: {e}")
            stats.unreadable_files += 1
            return None

        stats.files_scanned += 1
        size = stat_result.st_size

        # Zero-byte files are never reported as duplicates
        if size == 0 or not self._size_passes(size):
            logger.debug(f"Skipping {entry.path} (size {size} bytes outside range)")
            stats.skipped_by_size += 1
            return None

        if not self._extension_passes(entry.name):
            logger.debug(f"Skipping {entry.path} (extension not allowed)")
            stats.skipped_by_extension += 1
            return None

        relative_path = Path(os.path.relpath(entry.path, self.workspace_root)).as_posix()
        return FileRecord(
            path=entry.path,
            relative_path=relative_path,
            size=size,
            modified_at=stat_result.st_mtime,
            name=entry.name,
        )

    def _size_passes(self, size: int) -> bool:
        if self.min_size is not None and size < self.min_size:
            return False
        if self.max_size is not None and size > self.max_size:
            return False
        return True

    def _extension_passes(self, filename: str) -> bool:
        if not self.extensions:
            return True
        ext = os.path.splitext(filename)[1].lower()
        return ext in self.extensions
