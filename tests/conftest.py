"""
Shared fixtures for duplicate finder tests.
Creates isolated temporary directories with controlled test files.
"""
import os
import sys
import time
import tempfile
from pathlib import Path
from typing import Callable, Dict

import pytest

# Make the src/ layout importable without installing the package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

DAY = 86400.0


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def now() -> float:
    """Fixed reference time shared by file mtimes and the scorer."""
    return time.time()


@pytest.fixture
def make_file(temp_dir, now) -> Callable[..., Path]:
    """
    Factory: make_file("a/doc.txt", b"...", age_days=3) creates the file
    (and parent directories) under temp_dir with the given modification age.
    """
    def _make(relative: str, content: bytes, age_days: float = 0.0) -> Path:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        mtime = now - age_days * DAY
        os.utime(path, (mtime, mtime))
        return path
    return _make


@pytest.fixture
def test_files(make_file) -> Dict[str, Path]:
    """
    Creates controlled test files:
    - 3 identical 2KB files (one of them in a subdirectory)
    - 2 identical 4KB files
    - 1 unique 2KB file (same size as the first group, different content)
    - 1 unique 3KB file
    - 1 small file below the default 1KB threshold
    - 1 empty file
    - 1 duplicate pair with .tmp extension
    """
    content_a = b"A" * 2048
    content_b = b"B" * 4096
    return {
        "dup_a1": make_file("a1.txt", content_a),
        "dup_a2": make_file("a2.txt", content_a),
        "dup_a3": make_file("sub/a3.txt", content_a),
        "dup_b1": make_file("b1.txt", content_b),
        "dup_b2": make_file("sub/deeper/b2.txt", content_b),
        "unique_same_size": make_file("unique.txt", b"Z" * 2048),
        "unique": make_file("other.txt", b"C" * 3072),
        "small": make_file("small.txt", b"s" * 100),
        "empty": make_file("empty.txt", b""),
        "tmp1": make_file("cache1.tmp", b"T" * 1500),
        "tmp2": make_file("cache2.tmp", b"T" * 1500),
    }
