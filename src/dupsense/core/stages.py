"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Pipeline stages of the duplicate finder.

STAGE CONTRACTS
---------------
SizeStageImpl     : Consumes the complete scan, then buckets files by size.
                    Acts as a barrier: a file found late may still join an
                    existing bucket, so no bucket is final before the scan ends.
ContentHashStage  : Splits each size bucket by full-content digest. Only files
                    in buckets of 2+ are ever read.

Each stage:
  • Reports progress via callback (stage name, processed count, total count)
  • Honors stopped_flag by raising ScanCancelledError
"""

from typing import Iterable, List, Optional, Tuple

from dupsense.core.errors import ScanCancelledError
from dupsense.core.grouper import FileGrouperImpl
from dupsense.core.interfaces import SizeStage, HashStage, ProgressCallback, StoppedFlag
from dupsense.core.models import FileRecord, ScanStats, Stage

SizeBucketList = List[Tuple[int, List[FileRecord]]]
HashBucketList = List[Tuple[int, str, List[FileRecord]]]


class SizeStageImpl(SizeStage):
    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def process(
            self,
            files: Iterable[FileRecord],
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> SizeBucketList:
        """
        Group by file size.
        Returns (size, files) buckets with 2+ files, in discovery order.
        """
        all_files = list(files)

        if stopped_flag and stopped_flag():
            raise ScanCancelledError(Stage.SIZE.value)

        buckets = list(self.grouper.candidate_buckets(all_files).items())

        if progress_callback:
            total_files = len(all_files)
            progress_callback(Stage.SIZE.value, total_files, total_files)

        return buckets


class ContentHashStage(HashStage):
    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def process(
            self,
            buckets: SizeBucketList,
            stats: ScanStats,
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> HashBucketList:
        total_files = sum(len(files) for _, files in buckets)
        processed_files = 0
        hash_buckets: HashBucketList = []

        with self.grouper.hashing_pool():
            for size, files in buckets:
                if stopped_flag and stopped_flag():
                    raise ScanCancelledError(Stage.HASH.value)

                for digest, same in self.grouper.group_by_digest(files, stats).items():
                    hash_buckets.append((size, digest, same))

                processed_files += len(files)
                if progress_callback:
                    progress_callback(Stage.HASH.value, processed_files, total_files)

        return hash_buckets
