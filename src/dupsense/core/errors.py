"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy for the duplicate scanner.

Only root-level failures propagate to the caller. Unreadable subtrees and
files are absorbed by the scanner/hasher and counted in ScanStats.
"""


class DupsenseError(Exception):
    """Base class for all dupsense errors."""


class ScanError(DupsenseError):
    """The scan root cannot be used."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class RootNotFoundError(ScanError):
    def __init__(self, path: str):
        super().__init__(path, f"Directory does not exist: {path}")


class RootNotADirectoryError(ScanError):
    def __init__(self, path: str):
        super().__init__(path, f"Not a directory: {path}")


class RootAccessDeniedError(ScanError):
    def __init__(self, path: str):
        super().__init__(path, f"Access denied: {path}")


class HashError(DupsenseError):
    """Reading a file for hashing failed."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Failed to hash {path}: {cause}")
        self.path = path
        self.cause = cause


class ScanCancelledError(DupsenseError):
    """Raised when stopped_flag requests cancellation mid-run."""

    def __init__(self, stage: str):
        super().__init__(f"Scan cancelled during: {stage}")
        self.stage = stage
