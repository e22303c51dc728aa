"""
Unified command orchestrator for duplicate scans.
Used by the CLI and by library callers; no terminal I/O happens here.
"""
import dataclasses
import os
from typing import Optional, Callable

from dupsense.core.finder import DuplicateFinderImpl
from dupsense.core.models import DuplicateReport, ScanParams


class DuplicateScanCommand:
    """
    Orchestrates one duplicate scan:
    1. Resolve the scan directory against the workspace root
    2. Run the finder pipeline with progress/cancellation support
    3. Return the structured report

    Usage:
        params = ScanParams(root_dir="photos", workspace_root="/home/me")
        report = DuplicateScanCommand().execute(params, progress_callback=printer)
    """

    def __init__(self, finder: Optional[DuplicateFinderImpl] = None):
        self.finder = finder or DuplicateFinderImpl()
        self.report: Optional[DuplicateReport] = None

    @staticmethod
    def resolve_params(params: ScanParams) -> ScanParams:
        """Absolute root_dir; relative paths are taken from workspace_root (or the cwd)."""
        base = params.workspace_root or os.getcwd()
        root_dir = os.path.abspath(os.path.join(base, os.path.expanduser(params.root_dir)))
        workspace_root = os.path.abspath(params.workspace_root) if params.workspace_root else None
        return dataclasses.replace(params, root_dir=root_dir, workspace_root=workspace_root)

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> DuplicateReport:
        """
        Execute a duplicate scan with given parameters.

        Raises:
            ScanError: If the root directory is missing, not a directory or unreadable
            ScanCancelledError: If stopped_flag returned True
        """
        self.report = self.finder.find_duplicates(
            self.resolve_params(params),
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )
        return self.report
