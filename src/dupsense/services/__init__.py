"""Trash hand-off, deletion planning and report presentation services."""

from .file_service import FileService
from .duplicate_service import DuplicateService
from .report_formatter import ReportFormatter

__all__ = ["FileService", "DuplicateService", "ReportFormatter"]
