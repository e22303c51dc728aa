"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for scanning, duplicate grouping and keep/delete scoring.
"""

import os
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Dict, Optional, Tuple, Union

from dupsense.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class Priority(Enum):
    """Coarse desirability of a duplicate member to be retained."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_score(cls, score: int) -> "Priority":
        if score > 0:
            return cls.HIGH
        if score < -5:
            return cls.LOW
        return cls.MEDIUM

    def __repr__(self) -> str:
        return self.value


class GroupOrder(Enum):
    """Order of duplicate groups in the final report."""
    DISCOVERY = "discovery"
    WASTE = "waste"

    @property
    def display_name(self) -> str:
        mapping = {
            GroupOrder.DISCOVERY: "Discovery order",
            GroupOrder.WASTE: "Most wasted space first",
        }
        return mapping.get(self, self.value)


class HashAlgorithmName(Enum):
    XXH128 = "xxh128"
    MD5 = "md5"
    SHA256 = "sha256"


class Stage(str, Enum):
    SCAN = "Scanning"
    SIZE = "Size grouping"
    HASH = "Content Hash"
    SCORE = "Scoring"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """
    One scanned file. Created once by the scanner and never modified.
    `relative_path` is POSIX-style and relative to the workspace root.
    """
    path: str
    relative_path: str
    size: int  # in bytes
    modified_at: float  # POSIX timestamp
    name: str = ""
    directory: str = ""

    def __post_init__(self):
        # Frozen dataclass: derived fields are filled through object.__setattr__
        if not self.name:
            object.__setattr__(self, "name", self.relative_path.rsplit("/", 1)[-1])
        if not self.directory:
            head, sep, _ = self.relative_path.rpartition("/")
            object.__setattr__(self, "directory", head if sep else ".")

    @property
    def extension(self) -> str:
        return os.path.splitext(self.name)[1].lower()

    @property
    def path_segments(self) -> int:
        return len([part for part in self.relative_path.split("/") if part])

    def __repr__(self):
        return f"<FileRecord path={self.relative_path}, size={self.size}>"


@dataclass(frozen=True)
class ScoreResult:
    score: int
    reasons: str
    priority: Priority


@dataclass(frozen=True)
class ScoredFile:
    """A duplicate member together with its keep score."""
    file: FileRecord
    result: ScoreResult

    @property
    def score(self) -> int:
        return self.result.score

    @property
    def priority(self) -> Priority:
        return self.result.priority

    @property
    def reasons(self) -> str:
        return self.result.reasons


@dataclass(frozen=True)
class DuplicateGroup:
    """
    A confirmed set of byte-identical files.
    All members have the same size and content digest.
    """
    digest: str
    size: int
    members: Tuple[ScoredFile, ...]
    recommended_keep: ScoredFile
    suggested_action: str
    recommendations: Tuple[str, ...] = ()
    has_clear_leader: bool = False

    def __post_init__(self):
        if len(self.members) < 2:
            raise ValueError("A duplicate group needs at least two members")
        if any(m.file.size != self.size for m in self.members):
            raise ValueError("All members of a duplicate group must share the same size")
        if self.recommended_keep not in self.members:
            raise ValueError("Recommended file must be a member of the group")

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def wasted_bytes(self) -> int:
        return self.size * (self.count - 1)

    @property
    def files(self) -> List[FileRecord]:
        return [m.file for m in self.members]

    @property
    def files_to_delete(self) -> List[FileRecord]:
        """Members flagged for deletion. Empty when no member is a clear leader."""
        if not self.has_clear_leader:
            return []
        return [m.file for m in self.members if m is not self.recommended_keep]

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={self.count}>"


@dataclass
class ScanStats:
    """
    Counters gathered while scanning and hashing.
    Passed explicitly through the pipeline; a new instance per run.
    """
    files_scanned: int = 0
    skipped_by_size: int = 0
    skipped_by_extension: int = 0
    hashes_computed: int = 0
    unreadable_dirs: int = 0
    unreadable_files: int = 0

    @property
    def errors(self) -> int:
        return self.unreadable_dirs + self.unreadable_files

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class StageTimings:
    """
    Per-stage statistics: groups found, files processed and elapsed time.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def print_summary(self) -> str:
        lines = [
            "📊 Pipeline Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]
        for stage, data in self.stage_stats.items():
            lines.append(f"{stage}: {data['groups']} / {data['files']} / {data['time']:.3f}s")
        return "\n".join(lines)


@dataclass(frozen=True)
class DuplicateReport:
    """Final result of one scan: statistics, groups and corpus-level advice."""
    root: str
    stats: ScanStats
    groups: Tuple[DuplicateGroup, ...]
    recommendations: Tuple[str, ...]
    timings: Optional[StageTimings] = None

    @property
    def total_groups(self) -> int:
        return len(self.groups)

    @property
    def total_duplicate_files(self) -> int:
        return sum(g.count for g in self.groups)

    @property
    def total_wasted_bytes(self) -> int:
        return sum(g.wasted_bytes for g in self.groups)


# =============================
# Parameters
# =============================

@dataclass
class ScanParams:
    """Parameters for a duplicate scan with validation. Used by CLI and library callers."""
    root_dir: str
    workspace_root: Optional[str] = None
    min_size_bytes: int = 1024
    max_size_bytes: Optional[int] = None
    extensions: List[str] = field(default_factory=list)
    excluded_dirs: List[str] = field(default_factory=list)
    algorithm: HashAlgorithmName = HashAlgorithmName.XXH128
    order: GroupOrder = GroupOrder.DISCOVERY
    workers: int = 1
    max_depth: int = 64

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.max_size_bytes is not None and self.max_size_bytes < self.min_size_bytes:
            raise ValueError("Maximum size cannot be less than minimum size")

        if self.workers < 1:
            raise ValueError("Number of workers must be at least 1")

        if self.max_depth < 1:
            raise ValueError("Maximum depth must be at least 1")

        # Normalize extensions: ensure they start with dot and are lowercase
        normalized = []
        for ext in self.extensions:
            ext = ext.strip().lower()
            if ext and not ext.startswith('.'):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        self.extensions = normalized

    @staticmethod
    def from_human_readable(
            root_dir: str,
            min_size_str: str = "1KB",
            max_size_str: str = "",
            extensions_str: str = "",
            workspace_root: Optional[str] = None,
            excluded_dirs: Optional[List[str]] = None,
            algorithm: HashAlgorithmName = HashAlgorithmName.XXH128,
            order: GroupOrder = GroupOrder.DISCOVERY,
            workers: int = 1,
    ) -> "ScanParams":
        """
        Factory method to create params from human-readable inputs,
        e.g. "500KB" sizes and a comma-separated extension list.
        """
        min_size = ConvertUtils.human_to_bytes(min_size_str)
        max_size = ConvertUtils.human_to_bytes(max_size_str) if max_size_str else None

        ext_list = [
            ext.strip() for ext in extensions_str.split(",") if ext.strip()
        ] if extensions_str else []

        return ScanParams(
            root_dir=root_dir,
            workspace_root=workspace_root,
            min_size_bytes=min_size,
            max_size_bytes=max_size,
            extensions=ext_list,
            excluded_dirs=excluded_dirs or [],
            algorithm=algorithm,
            order=order,
            workers=workers,
        )
