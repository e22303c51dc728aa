"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/report.py
Pure reduction of duplicate groups and scan statistics into a DuplicateReport.
No I/O happens here.
"""

from typing import List, Optional, Sequence

from dupsense.core.models import (
    DuplicateGroup,
    DuplicateReport,
    GroupOrder,
    ScanStats,
    StageTimings,
)
from dupsense.core.scorer import ScoringConfig


class ReportConfig:
    MANY_GROUPS = 10
    SOME_GROUPS = 5
    MANY_REDUNDANT_FILES = 50
    IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp")


def order_groups(groups: Sequence[DuplicateGroup], order: GroupOrder) -> List[DuplicateGroup]:
    """DISCOVERY keeps the input order; WASTE puts the most wasted bytes first (stable)."""
    if order == GroupOrder.WASTE:
        return sorted(groups, key=lambda g: -g.wasted_bytes)
    return list(groups)


def _in_temporary_dir(directory: str) -> bool:
    return any(marker in directory for marker in ScoringConfig.TEMPORARY_DIR_MARKERS)


def overall_recommendations(groups: Sequence[DuplicateGroup], stats: ScanStats) -> List[str]:
    """Corpus-level advice derived from aggregate thresholds."""
    recommendations = []

    if stats.errors:
        recommendations.append(
            f"{stats.unreadable_dirs} directories and {stats.unreadable_files} files could not be read "
            f"- results may be incomplete"
        )

    if not groups:
        recommendations.append("No duplicates found - the directory is clean")
        return recommendations

    if len(groups) > ReportConfig.MANY_GROUPS:
        recommendations.append("Many duplicate groups - a systematic cleanup is recommended")
    elif len(groups) > ReportConfig.SOME_GROUPS:
        recommendations.append("A moderate number of duplicates - they can be cleaned up gradually")

    redundant_files = sum(g.count - 1 for g in groups)
    if redundant_files > ReportConfig.MANY_REDUNDANT_FILES:
        recommendations.append("Many redundant files - cleaning up will free significant space")

    image_groups = [
        g for g in groups
        if any(f.extension in ReportConfig.IMAGE_EXTENSIONS for f in g.files)
    ]
    if image_groups:
        recommendations.append(
            f"Duplicate images found ({len(image_groups)} groups) - check whether all copies are needed"
        )

    if any(_in_temporary_dir(f.directory) for g in groups for f in g.files):
        recommendations.append("Some duplicates live in backup/temp directories - these are safe to remove")

    recommendations.append("Always make a backup before mass deletion")
    recommendations.append("Check the contents of important documents before deleting them")
    return recommendations


def build_report(
        root: str,
        groups: Sequence[DuplicateGroup],
        stats: ScanStats,
        order: GroupOrder = GroupOrder.DISCOVERY,
        timings: Optional[StageTimings] = None
) -> DuplicateReport:
    return DuplicateReport(
        root=root,
        stats=stats,
        groups=tuple(order_groups(groups, order)),
        recommendations=tuple(overall_recommendations(groups, stats)),
        timings=timings,
    )
