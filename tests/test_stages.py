"""
Tests for the pipeline stages: size barrier and content hash splitting.
"""
from concurrent.futures import ThreadPoolExecutor
from unittest import mock

import pytest

from dupsense.core.errors import ScanCancelledError
from dupsense.core.grouper import FileGrouperImpl
from dupsense.core.models import FileRecord, ScanStats
from dupsense.core.stages import SizeStageImpl, ContentHashStage


def record(rel: str, size: int) -> FileRecord:
    return FileRecord(path=f"/ws/{rel}", relative_path=rel, size=size, modified_at=0.0)


class DictHasher:
    def __init__(self, digests):
        self.digests = digests
        self.calls = []

    def compute_digest(self, file):
        self.calls.append(file.relative_path)
        return self.digests[file.relative_path]


class TestSizeStage:

    def test_consumes_generator_before_bucketing(self):
        """A late file of an already seen size must land in the same bucket."""
        def late_files():
            yield record("a", 10)
            yield record("b", 20)
            yield record("late", 10)

        buckets = SizeStageImpl(FileGrouperImpl(DictHasher({}))).process(late_files())

        assert [(size, [f.relative_path for f in files]) for size, files in buckets] == [(10, ["a", "late"])]

    def test_reports_progress(self):
        calls = []
        SizeStageImpl(FileGrouperImpl(DictHasher({}))).process(
            [record("a", 1), record("b", 1)],
            progress_callback=lambda stage, cur, total: calls.append((stage, cur, total))
        )

        assert calls == [("Size grouping", 2, 2)]

    def test_cancellation(self):
        with pytest.raises(ScanCancelledError):
            SizeStageImpl(FileGrouperImpl(DictHasher({}))).process([record("a", 1)], stopped_flag=lambda: True)


class TestContentHashStage:

    def test_splits_buckets_by_digest(self):
        hasher = DictHasher({"a": "x", "b": "y", "c": "x", "d": "z", "e": "z"})
        buckets = [
            (10, [record("a", 10), record("b", 10), record("c", 10)]),
            (20, [record("d", 20), record("e", 20)]),
        ]
        stats = ScanStats()

        result = ContentHashStage(FileGrouperImpl(hasher)).process(buckets, stats)

        assert [(size, digest, [f.relative_path for f in files]) for size, digest, files in result] == [
            (10, "x", ["a", "c"]),
            (20, "z", ["d", "e"]),
        ]
        assert stats.hashes_computed == 5

    def test_only_bucket_members_are_hashed(self):
        hasher = DictHasher({"a": "x", "b": "x"})
        files = [record("a", 10), record("b", 10), record("lonely", 99)]
        grouper = FileGrouperImpl(hasher)

        buckets = SizeStageImpl(grouper).process(files)
        ContentHashStage(grouper).process(buckets, ScanStats())

        assert "lonely" not in hasher.calls

    def test_progress_and_cancellation(self):
        hasher = DictHasher({"a": "x", "b": "x"})
        buckets = [(10, [record("a", 10), record("b", 10)])]
        calls = []

        ContentHashStage(FileGrouperImpl(hasher)).process(
            buckets, ScanStats(), progress_callback=lambda s, c, t: calls.append((s, c, t))
        )
        assert calls == [("Content Hash", 2, 2)]

        with pytest.raises(ScanCancelledError):
            ContentHashStage(FileGrouperImpl(hasher)).process(buckets, ScanStats(), stopped_flag=lambda: True)

    def test_one_thread_pool_per_run(self):
        # Six buckets, each holding one duplicate pair
        digests = {f"f{i}": f"d{i // 2}" for i in range(12)}
        buckets = [(10 + i, [record(f"f{2 * i}", 10 + i), record(f"f{2 * i + 1}", 10 + i)]) for i in range(6)]
        sequential = ContentHashStage(FileGrouperImpl(DictHasher(digests))).process(buckets, ScanStats())

        with mock.patch("dupsense.core.grouper.ThreadPoolExecutor", wraps=ThreadPoolExecutor) as pool_cls:
            parallel = ContentHashStage(FileGrouperImpl(DictHasher(digests), workers=4)).process(buckets, ScanStats())

        assert pool_cls.call_count == 1
        assert len(parallel) == 6
        assert parallel == sequential
