"""Debug artifact filter for deploy file collection.

Qt installations ship debug builds next to release builds inside module
directories. This filter recognises them so they can be left out of a
release bundle.

Example patterns:
- "*.pdb" - Windows debug symbols
- "*.debug" - Split Linux debug info
- "*_debug.so*" - Debug variants of Linux plugins

Windows debug DLLs are named like their release twin plus a trailing "d"
(qtquick2plugind.dll next to qtquick2plugin.dll). A name pattern alone
cannot tell Qt5Gamepad.dll from a debug build, so those are only flagged
when the release twin exists in the same directory.
"""

from __future__ import annotations

import logging
from fnmatch import fnmatchcase
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DEBUG_PATTERNS = [
    "*.pdb",
    "*.debug",
    "*.dSYM",
    "*_debug.so*",
    "*_debug.dylib",
]

_DLL_SUFFIX = ".dll"
_DEBUG_DLL_TAIL = "d"


class DebugFileFilter:
    """Predicate that flags debug artifacts.

    Contract:
    - Inputs: glob patterns, matched case-sensitively against the file name
    - Outputs: True when a path is a debug artifact
    - Side effects: None (one existence check for `*d.dll` candidates)

    Instances are callable, so they can be passed anywhere a
    `Callable[[Path], bool]` predicate is expected.
    """

    def __init__(self, patterns: list[str] | None = None, detect_debug_dlls: bool = True) -> None:
        """
        Args:
            patterns: Glob patterns; None selects DEFAULT_DEBUG_PATTERNS
            detect_debug_dlls: Flag `<name>d.dll` when `<name>.dll` sits next to it
        """
        self.patterns = list(DEFAULT_DEBUG_PATTERNS if patterns is None else patterns)
        self.detect_debug_dlls = detect_debug_dlls

    def is_debug_file(self, path: str | Path) -> bool:
        """Check whether a path is a debug artifact."""
        path = Path(path)
        if any(fnmatchcase(path.name, pattern) for pattern in self.patterns):
            return True
        return self.detect_debug_dlls and self._is_debug_dll(path)

    def _is_debug_dll(self, path: Path) -> bool:
        if path.suffix.lower() != _DLL_SUFFIX or not path.stem.endswith(_DEBUG_DLL_TAIL):
            return False
        release_twin = path.with_name(path.stem[: -len(_DEBUG_DLL_TAIL)] + path.suffix)
        return release_twin.exists()

    def __call__(self, path: str | Path) -> bool:
        return self.is_debug_file(path)

    def __repr__(self) -> str:
        return f"DebugFileFilter(patterns={self.patterns}, detect_debug_dlls={self.detect_debug_dlls})"
