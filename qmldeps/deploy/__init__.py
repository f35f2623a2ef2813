"""Deploy file collection for resolved QML module directories."""

from .collector import collect_deploy_files
from .debug_filter import DEFAULT_DEBUG_PATTERNS
from .debug_filter import DebugFileFilter

__all__ = [
    "DEFAULT_DEBUG_PATTERNS",
    "DebugFileFilter",
    "collect_deploy_files",
]
