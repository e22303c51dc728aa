"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scorer.py
Keep/delete recommendations for members of a duplicate group.

The heuristic is a declarative table. Each signal is a tuple of alternative
rules; the first rule of a signal whose predicate matches contributes its
weight and reason. A member's score is the sum over all signals.

    Signal      Rule                                       Weight
    location    directory contains "backup" or "temp"       -10
                directory is the workspace root             +5
    naming      name contains "copy", "backup" or "old"     -8
                name contains "original" or "master"        +8
    recency     modified less than 7 days ago               +3
                modified more than 30 days ago              -3
    depth       relative path has at most 2 segments        +2

Markers are matched case-sensitively. The scorer is advisory only and never
touches the filesystem.
"""

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from dupsense.core.interfaces import Scorer
from dupsense.core.models import (
    DuplicateGroup,
    FileRecord,
    Priority,
    ScoredFile,
    ScoreResult,
)
from dupsense.utils.convert_utils import ConvertUtils


class ScoringConfig:
    RECENT_DAYS = 7
    STALE_DAYS = 30
    SHORT_PATH_SEGMENTS = 2
    # Best score must beat every other member by more than this to be a clear leader
    CLEAR_LEADER_MARGIN = 3
    TEMPORARY_DIR_MARKERS = ("backup", "temp")
    COPY_NAME_MARKERS = ("copy", "backup", "old")
    ORIGINAL_NAME_MARKERS = ("original", "master")


@dataclass(frozen=True)
class ScoringContext:
    """Values shared by all rules during one run."""
    now: float


Predicate = Callable[[FileRecord, ScoringContext], bool]


@dataclass(frozen=True)
class ScoringRule:
    predicate: Predicate
    weight: int
    reason: str


Signal = Tuple[ScoringRule, ...]


def _contains_any(value: str, markers: Sequence[str]) -> bool:
    # Case-sensitive, so "Templates" or "TEMP_RENDER" do not match "temp"
    return any(marker in value for marker in markers)


def in_temporary_dir(file: FileRecord, ctx: ScoringContext) -> bool:
    return _contains_any(file.directory, ScoringConfig.TEMPORARY_DIR_MARKERS)


def in_root_dir(file: FileRecord, ctx: ScoringContext) -> bool:
    return file.directory in ("", ".")


def named_like_copy(file: FileRecord, ctx: ScoringContext) -> bool:
    return _contains_any(file.name, ScoringConfig.COPY_NAME_MARKERS)


def named_like_original(file: FileRecord, ctx: ScoringContext) -> bool:
    return _contains_any(file.name, ScoringConfig.ORIGINAL_NAME_MARKERS)


def recently_modified(file: FileRecord, ctx: ScoringContext) -> bool:
    return ConvertUtils.days_between(file.modified_at, ctx.now) < ScoringConfig.RECENT_DAYS


def long_unmodified(file: FileRecord, ctx: ScoringContext) -> bool:
    return ConvertUtils.days_between(file.modified_at, ctx.now) > ScoringConfig.STALE_DAYS


def short_path(file: FileRecord, ctx: ScoringContext) -> bool:
    return file.path_segments <= ScoringConfig.SHORT_PATH_SEGMENTS


DEFAULT_SIGNALS: Tuple[Signal, ...] = (
    (
        ScoringRule(in_temporary_dir, -10, "in a backup/temp directory"),
        ScoringRule(in_root_dir, 5, "in the root directory"),
    ),
    (
        ScoringRule(named_like_copy, -8, "looks like a copy"),
        ScoringRule(named_like_original, 8, "looks like an original"),
    ),
    (
        ScoringRule(recently_modified, 3, "recently modified"),
        ScoringRule(long_unmodified, -3, "not modified for a long time"),
    ),
    (
        ScoringRule(short_path, 2, "short path"),
    ),
)


class PriorityScorer(Scorer):
    """
    Scores duplicate members by folding DEFAULT_SIGNALS (or injected signals)
    over each file and builds DuplicateGroup objects with a keep recommendation.

    Pass `now` to make scores reproducible; otherwise the current time at
    construction is used for every file.
    """

    def __init__(self, signals: Optional[Sequence[Signal]] = None, now: Optional[float] = None):
        self.signals = tuple(signals) if signals is not None else DEFAULT_SIGNALS
        self.context = ScoringContext(now=time.time() if now is None else now)

    def score(self, file: FileRecord) -> ScoredFile:
        total = 0
        reasons: List[str] = []
        for signal in self.signals:
            for rule in signal:
                if rule.predicate(file, self.context):
                    total += rule.weight
                    reasons.append(rule.reason)
                    break
        result = ScoreResult(score=total, reasons=", ".join(reasons), priority=Priority.from_score(total))
        return ScoredFile(file=file, result=result)

    def rank_members(self, files: Sequence[FileRecord]) -> List[ScoredFile]:
        """Scored members, best first. Equal scores keep their input order."""
        scored = [self.score(f) for f in files]
        return sorted(scored, key=lambda m: -m.score)

    def build_group(self, digest: str, size: int, files: Sequence[FileRecord]) -> DuplicateGroup:
        """
        Scores `files` and returns a group whose members are ranked best first.
        The stable sort makes the first-encountered member win ties.
        """
        members = tuple(self.rank_members(files))
        if len(members) < 2:
            raise ValueError("A duplicate group needs at least two members")

        best, runner_up = members[0], members[1]
        clear_leader = best.score - runner_up.score > ScoringConfig.CLEAR_LEADER_MARGIN

        if clear_leader:
            action = f'Keep "{best.file.relative_path}", delete the rest'
            recommendations = [f"Keep: {best.file.relative_path} ({best.reasons or 'no signals'})"]
            recommendations.extend(
                f"Delete: {m.file.relative_path} ({m.reasons or 'no signals'})"
                for m in members if m is not best
            )
        else:
            action = "Review manually - no clear leader"
            recommendations = [
                "All files have a similar priority",
                f"Best candidate: {best.file.relative_path} ({best.reasons or 'no signals'})",
            ]

        return DuplicateGroup(
            digest=digest,
            size=size,
            members=members,
            recommended_keep=best,
            suggested_action=action,
            recommendations=tuple(recommendations),
            has_clear_leader=clear_leader,
        )
