#!/usr/bin/env python3
"""
dupsense CLI — find duplicate files and get a recommendation which copy to keep.
Runs the same engine as the library API with console-based interaction.
Nothing is deleted unless --trash-recommended is given, and even then files go to the system trash.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import json
import logging
import os
import sys
import time
from typing import List, Optional, NoReturn

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import send2trash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupsense.aliases import (
    HASH_ALIASES, HASH_CHOICES, HASH_HELP_TEXT,
    ORDER_ALIASES, ORDER_CHOICES, ORDER_HELP_TEXT,
    EPILOG_TEXT
)
from dupsense.commands import DuplicateScanCommand
from dupsense.core.errors import DupsenseError
from dupsense.core.models import DuplicateReport, ScanParams
from dupsense.services.duplicate_service import DuplicateService
from dupsense.services.file_service import FileService
from dupsense.services.report_formatter import ReportFormatter
from dupsense.utils.convert_utils import ConvertUtils


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupsense",
            description="dupsense — duplicate file finder with keep/delete recommendations",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            default=".",
            type=str,
            help="Directory to scan, relative to the workspace root. Default: ."
        )
        parser.add_argument(
            "--workspace", "-w",
            default=None,
            type=str,
            help="Workspace root used to resolve --input and to display relative paths.\n"
                 "Default: the scanned directory itself"
        )

        # Filtering options
        parser.add_argument(
            "--min-size", "-m",
            default="1KB",
            type=str,
            metavar='',
            help="Minimum file size (e.g., 500KB, 1MB). Default: 1KB"
        )
        parser.add_argument(
            "--max-size", "-M",
            default="",
            type=str,
            metavar='',
            help="Maximum file size (e.g., 10MB, 1GB). Default: no limit"
        )
        parser.add_argument(
            "--extensions", "-x",
            nargs="+",
            default=[],
            type=str,
            metavar='',
            help="File extensions (space separated) to include (e.g., .jpg .png)"
        )
        parser.add_argument(
            "--excluded-dirs", '-e',
            nargs="+",
            default=[],
            type=str,
            metavar='',
            dest="excluded_dirs",
            help="Excluded/ignored directories (space separated)"
        )

        # Engine options
        parser.add_argument(
            "--hash",
            choices=HASH_CHOICES,
            default="xxh128",
            type=str,
            help=HASH_HELP_TEXT
        )
        parser.add_argument(
            "--order",
            choices=ORDER_CHOICES,
            default="discovery",
            type=str,
            help=ORDER_HELP_TEXT
        )
        parser.add_argument(
            "--workers",
            default=1,
            type=int,
            metavar='',
            help="Number of threads used for hashing. Default: 1"
        )

        # Output options
        parser.add_argument(
            "--max-groups",
            default=5,
            type=int,
            metavar='',
            help="Number of groups shown in detail (0 = all). Default: 5"
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the full report as JSON"
        )

        # Actions
        parser.add_argument(
            "--trash-recommended",
            action="store_true",
            help="Move files recommended for deletion to trash.\n"
                 "Only groups with a clear leader are touched. Always shows a preview first."
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --trash-recommended (for automation/scripts)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.trash_recommended:
            self.error_exit("--force can only be used with --trash-recommended")

        if args.json and args.trash_recommended:
            self.error_exit("--json cannot be combined with --trash-recommended")

        # Prevent interactive confirmation in non-TTY environments
        if args.trash_recommended and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        if args.workers < 1:
            self.error_exit("--workers must be at least 1")

        if args.max_groups < 0:
            self.error_exit("--max-groups cannot be negative")

        if args.workspace and not os.path.isdir(args.workspace):
            self.error_exit(f"Workspace is not a directory: {args.workspace}")

        try:
            min_size = ConvertUtils.human_to_bytes(args.min_size)
            if args.max_size and ConvertUtils.human_to_bytes(args.max_size) < min_size:
                self.error_exit("Maximum size cannot be less than minimum size")
        except ValueError as e:
            self.error_exit(f"Invalid size format: {e}")

        for excl_dir in args.excluded_dirs:
            if not os.path.isdir(excl_dir):
                self.warning(f"Excluded directory not found: {excl_dir}")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams(
                root_dir=args.input,
                workspace_root=args.workspace,
                min_size_bytes=ConvertUtils.human_to_bytes(args.min_size),
                max_size_bytes=ConvertUtils.human_to_bytes(args.max_size) if args.max_size else None,
                extensions=list(args.extensions),
                excluded_dirs=[os.path.abspath(d) for d in args.excluded_dirs],
                algorithm=HASH_ALIASES[args.hash],
                order=ORDER_ALIASES[args.order],
                workers=args.workers,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def run_scan(self, params: ScanParams) -> DuplicateReport:
        """Execute the duplicate scan, turning engine errors into a single error line."""
        command = DuplicateScanCommand()
        try:
            report = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except DupsenseError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            if report.timings:
                print(report.timings.print_summary(), file=sys.stderr)
        return report

    def output_results(self, report: DuplicateReport, args: argparse.Namespace) -> None:
        if args.json:
            print(json.dumps(ReportFormatter.to_dict(report), indent=2, ensure_ascii=False))
            return

        if self.quiet:
            return

        print(ReportFormatter.to_text(report, max_groups=args.max_groups))

    def execute_trash_recommended(self, report: DuplicateReport, force: bool = False) -> None:
        """Move every file flagged for deletion to trash. Always shows preview before deletion."""
        files_to_delete = DuplicateService.files_to_delete(report.groups)
        review = DuplicateService.groups_for_review(report.groups)

        if not files_to_delete:
            if not self.quiet:
                print("\nNo files are recommended for deletion.")
                if review:
                    print(f"{len(review)} group(s) need manual review.")
            return

        space_saved_str = ConvertUtils.bytes_to_human(DuplicateService.space_to_free(report.groups))

        print()
        print("=" * 60)
        for group in report.groups:
            if not group.files_to_delete:
                continue
            print(f"   [KEEP] {group.recommended_keep.file.relative_path}")
            for file in group.files_to_delete:
                print(f"   [DEL]  {file.relative_path}")
        print("=" * 60)
        print(f"Summary: {len(files_to_delete)} files to trash, {space_saved_str} to free")
        if review:
            print(f"{len(review)} group(s) without a clear leader are left untouched.")
        print()

        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")
        else:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Lost interactive terminal during operation. "
                    "Use --force to proceed in non-interactive environments."
                )
            response = input(f"Are you sure you want to move {len(files_to_delete)} files to trash? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deletion cancelled by user.")
                return

        self._trash_files(files_to_delete, space_saved_str)

    def _trash_files(self, files_to_delete: List[str], space_saved_str: str) -> None:
        """Trash files one by one, continuing past individual errors."""
        print(f"\nMoving {len(files_to_delete)} files to trash...")
        deleted_count = 0
        failed_files = []

        for i, path in enumerate(files_to_delete, 1):
            if self.verbose:
                print(f"  [{i}/{len(files_to_delete)}] {os.path.basename(path)}")
            try:
                FileService.move_to_trash(path)
                deleted_count += 1
            except (OSError, RuntimeError) as e:
                failed_files.append((path, str(e)))
                self.warning(f"Failed to delete {path}: {e}")

        if failed_files:
            print(f"\n⚠️  Partial success: {deleted_count}/{len(files_to_delete)} files moved to trash.")
            print(f"Failed to delete {len(failed_files)} file(s):")
            for path, error in failed_files[:5]:
                print(f"  • {os.path.basename(path)}: {error.split(':')[-1].strip()}")
            if len(failed_files) > 5:
                print(f"  ...and {len(failed_files) - 5} more files")
        else:
            print(f"✅ Successfully moved {deleted_count} files to trash.")
            print(f"Total space saved: {space_saved_str}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger("dupsense").setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        if not self.quiet and not args.json:
            print(f"Scanning directory: {DuplicateScanCommand.resolve_params(params).root_dir}")

        report = self.run_scan(params)
        self.output_results(report, args)

        if args.trash_recommended:
            self.execute_trash_recommended(report, force=args.force)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds", file=sys.stderr)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
