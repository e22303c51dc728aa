"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_formatter.py
Presentation of a DuplicateReport: console text and a JSON-ready dict.
"""
from typing import Any, Dict, List

from dupsense.core.models import DuplicateGroup, DuplicateReport, ScoredFile
from dupsense.utils.convert_utils import ConvertUtils


class ReportFormatter:

    @staticmethod
    def member_to_dict(member: ScoredFile) -> Dict[str, Any]:
        file = member.file
        return {
            "path": file.relative_path,
            "absolute_path": file.path,
            "name": file.name,
            "directory": file.directory,
            "modified": ConvertUtils.timestamp_to_iso(file.modified_at),
            "score": member.score,
            "priority": member.priority.value,
            "reasons": member.reasons,
        }

    @classmethod
    def group_to_dict(cls, group: DuplicateGroup) -> Dict[str, Any]:
        return {
            "digest": group.digest,
            "size": group.size,
            "size_human": ConvertUtils.bytes_to_human(group.size),
            "count": group.count,
            "files": [cls.member_to_dict(m) for m in group.members],
            "recommended_keep": group.recommended_keep.file.relative_path,
            "wasted_bytes": group.wasted_bytes,
            "wasted_human": ConvertUtils.bytes_to_human(group.wasted_bytes),
            "suggested_action": group.suggested_action,
            "recommendations": list(group.recommendations),
        }

    @classmethod
    def to_dict(cls, report: DuplicateReport) -> Dict[str, Any]:
        return {
            "root": report.root,
            "stats": report.stats.as_dict(),
            "total_groups": report.total_groups,
            "total_duplicate_files": report.total_duplicate_files,
            "total_wasted_bytes": report.total_wasted_bytes,
            "total_wasted_human": ConvertUtils.bytes_to_human(report.total_wasted_bytes),
            "groups": [cls.group_to_dict(g) for g in report.groups],
            "recommendations": list(report.recommendations),
        }

    @staticmethod
    def to_text(report: DuplicateReport, max_groups: int = 5) -> str:
        """
        Human-readable summary. The size-filter count covers files below the
        minimum, above the maximum and empty files. Only the first `max_groups`
        groups are detailed; `max_groups=0` shows all of them.
        """
        stats = report.stats
        lines: List[str] = [
            "📊 Scan statistics:",
            f"   • Files scanned: {stats.files_scanned}",
            f"   • Skipped (size filter): {stats.skipped_by_size}",
            f"   • Skipped (extension): {stats.skipped_by_extension}",
            f"   • Hashes computed: {stats.hashes_computed}",
        ]
        if stats.errors:
            lines.append(f"   • Unreadable: {stats.unreadable_dirs} directories, {stats.unreadable_files} files")

        lines += [
            "",
            "🎯 Results:",
            f"   • Duplicate groups: {report.total_groups}",
            f"   • Duplicate files: {report.total_duplicate_files}",
            f"   • Reclaimable space: {ConvertUtils.bytes_to_human(report.total_wasted_bytes)}",
        ]

        shown = report.groups if max_groups <= 0 else report.groups[:max_groups]
        for idx, group in enumerate(shown, 1):
            lines.append("")
            lines.append(
                f"📁 Group {idx} | Size: {ConvertUtils.bytes_to_human(group.size)} | "
                f"Files: {group.count} | Wasted: {ConvertUtils.bytes_to_human(group.wasted_bytes)}"
            )
            for member in group.members:
                marker = "[KEEP]" if member is group.recommended_keep else "      "
                modified = ConvertUtils.timestamp_to_human(member.file.modified_at)
                lines.append(
                    f"   {marker} {member.file.relative_path} "
                    f"[{member.priority.value}, score {member.score}, modified {modified}]"
                )
            lines.append(f"   💡 {group.suggested_action}")
            for rec in group.recommendations:
                lines.append(f"      - {rec}")

        hidden = report.total_groups - len(shown)
        if hidden > 0:
            lines.append("")
            lines.append(f"... and {hidden} more groups")

        lines.append("")
        lines.append("🚀 Recommendations:")
        lines.extend(f"   • {rec}" for rec in report.recommendations)
        return "\n".join(lines)
