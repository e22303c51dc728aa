"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

finder.py
Pipeline-based duplicate finder:
    scan → size buckets → content hash buckets → scoring → report
"""
import logging
import time
from typing import Iterable, List, Optional

from dupsense.core.grouper import FileGrouperImpl
from dupsense.core.hasher import HasherImpl, algorithm_for
from dupsense.core.interfaces import DuplicateFinder, Hasher, ProgressCallback, StoppedFlag
from dupsense.core.models import (
    DuplicateGroup,
    DuplicateReport,
    FileRecord,
    GroupOrder,
    ScanParams,
    ScanStats,
    Stage,
    StageTimings,
)
from dupsense.core.report import build_report
from dupsense.core.scanner import FileScannerImpl
from dupsense.core.scorer import PriorityScorer
from dupsense.core.stages import SizeStageImpl, ContentHashStage

logger = logging.getLogger(__name__)


class DuplicateFinderImpl(DuplicateFinder):
    """
    Runs the duplicate detection pipeline and collects per-stage timings.
    Every call is independent: statistics and timings are created per run.

    Args:
        hasher: Overrides the hasher built from params.algorithm
        now: Reference time for recency scoring (defaults to the start of each run)
    """
    def __init__(self, hasher: Optional[Hasher] = None, now: Optional[float] = None):
        self.hasher = hasher
        self.now = now

    def find_duplicates(
            self,
            params: ScanParams,
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> DuplicateReport:
        scanner = self._make_scanner(params)
        stats = ScanStats()
        # Root errors surface here, before any stage runs
        files = scanner.iter_files(stats, stopped_flag=stopped_flag, progress_callback=progress_callback)
        return self.analyze(
            files,
            stats,
            root=scanner.root_dir,
            order=params.order,
            grouper=self._make_grouper(params),
            stopped_flag=stopped_flag,
            progress_callback=progress_callback,
        )

    def analyze(
            self,
            files: Iterable[FileRecord],
            stats: ScanStats,
            root: str = "",
            order: GroupOrder = GroupOrder.DISCOVERY,
            grouper: Optional[FileGrouperImpl] = None,
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> DuplicateReport:
        """
        Runs the grouping, hashing and scoring stages over any FileRecord source.
        `stats` is updated in place and attached to the report.
        """
        grouper = grouper or FileGrouperImpl(self.hasher)
        scorer = PriorityScorer(now=self.now if self.now is not None else time.time())
        timings = StageTimings()
        total_start_time = time.time()

        # Size grouping consumes the whole scan first
        start_time = time.time()
        size_buckets = SizeStageImpl(grouper).process(
            files, stopped_flag=stopped_flag, progress_callback=progress_callback
        )
        timings.update_stage(
            Stage.SIZE.value,
            groups_found=len(size_buckets),
            files_processed=sum(len(b) for _, b in size_buckets),
            duration=time.time() - start_time,
        )
        logger.info(f"{stats.files_scanned} files scanned, {len(size_buckets)} size buckets with candidates")

        start_time = time.time()
        hash_buckets = ContentHashStage(grouper).process(
            size_buckets, stats, stopped_flag=stopped_flag, progress_callback=progress_callback
        )
        timings.update_stage(
            Stage.HASH.value,
            groups_found=len(hash_buckets),
            files_processed=stats.hashes_computed,
            duration=time.time() - start_time,
        )

        start_time = time.time()
        groups: List[DuplicateGroup] = [
            scorer.build_group(digest, size, bucket) for size, digest, bucket in hash_buckets
        ]
        timings.update_stage(
            Stage.SCORE.value,
            groups_found=len(groups),
            files_processed=sum(g.count for g in groups),
            duration=time.time() - start_time,
        )
        logger.info(f"{len(groups)} duplicate groups confirmed")

        timings.total_time = time.time() - total_start_time
        return build_report(root, groups, stats, order=order, timings=timings)

    @staticmethod
    def _make_scanner(params: ScanParams) -> FileScannerImpl:
        return FileScannerImpl(
            root_dir=params.root_dir,
            workspace_root=params.workspace_root,
            min_size=params.min_size_bytes,
            max_size=params.max_size_bytes,
            extensions=params.extensions,
            excluded_dirs=params.excluded_dirs,
            max_depth=params.max_depth,
        )

    def _make_grouper(self, params: ScanParams) -> FileGrouperImpl:
        hasher = self.hasher or HasherImpl(algorithm_for(params.algorithm))
        return FileGrouperImpl(hasher, workers=params.workers)
