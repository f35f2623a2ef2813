"""Errors raised by the import scanner.

Only failures that make a scan meaningless are raised. Everything below the
top-level directories (unreadable files, malformed imports, unreadable
subdirectories) degrades to "no imports" instead.
"""

from pathlib import Path


class ScanError(Exception):
    """Base class for fatal scan failures."""

    def __init__(self, path: Path, message: str):
        self.path = path
        self.message = message
        super().__init__(message)


class QmlRootNotReadableError(ScanError):
    """Raised when the QML root cannot be listed."""

    def __init__(self, path: Path):
        super().__init__(path, f"QML root is not readable: {path}")


class ProjectDirNotReadableError(ScanError):
    """Raised when the top-level project directory cannot be listed."""

    def __init__(self, path: Path):
        super().__init__(path, f"Project directory is not readable: {path}")
