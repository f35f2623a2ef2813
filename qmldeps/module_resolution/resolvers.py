"""Import token to directory resolution.

Maps import tokens onto directories below the QML root:

    QtQuick/Controls          -> <root>/QtQuick/Controls
    2#QtQuick/Controls        -> <root>/QtQuick/Controls.2   (if it exists)
                              -> <root>/QtQuick/Controls     (otherwise)
    5#QtQuick/Controls        -> <root>/QtQuick/Controls
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from .parser import VERSION_SEPARATOR
from .parser import is_versioned
from .version_table import SECOND_VERSION_MARKER

if TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Only this import major version selects `.2` directory variants
SECOND_VERSION_MAJOR = "2"

_SEGMENT_SEPARATORS = re.compile(r"[/\\]")


class ImportPathResolver:
    """Resolve import tokens against a QML root.

    The only filesystem access is the `path_exists` check used by the `.2`
    fallback, injected so resolution can be tested without a real tree.
    """

    def __init__(
        self,
        qml_root: str | Path,
        second_versions: Iterable[str] = (),
        path_exists: Callable[[Path], bool] = os.path.exists,
    ):
        """
        Args:
            qml_root: Qt `qml/` directory
            second_versions: Directory names known to have a `.2` variant
            path_exists: Existence check for versioned candidates
        """
        self.qml_root = Path(qml_root)
        self.second_versions = frozenset(second_versions)
        self.path_exists = path_exists

    def resolve(self, token: str, check_versions: bool = True) -> Path | None:
        """Resolve an import token to an absolute directory.

        Unversioned tokens always succeed and are not checked for existence.
        Versioned `2#...` tokens first try the `.2` variant of the innermost
        segment listed in `second_versions`, and fall back to the plain
        layout when that candidate does not exist.

        Args:
            token: Import token, e.g. "QtQuick" or "2#QtQuick/Controls"
            check_versions: Allow the `.2` substitution (disabled on retry)

        Returns:
            Absolute path below the root, or None for a malformed versioned
            token such as "#", "2#" or "##Foo"
        """
        if not is_versioned(token):
            return self._absolute(token)

        parts = token.split(VERSION_SEPARATOR)
        if len(parts) == 2:
            path_half = parts[1]
        elif len(parts) == 1:
            path_half = parts[0]
        else:
            path_half = ""
        if not path_half:
            logger.debug(f"[resolve] cannot resolve malformed token {token!r}")
            return None

        use_second_version = check_versions and parts[0] == SECOND_VERSION_MAJOR
        mark_pending = use_second_version

        segments: list[str] = []
        for segment in reversed(_SEGMENT_SEPARATORS.split(path_half)):
            if mark_pending and segment in self.second_versions:
                mark_pending = False
                segment += SECOND_VERSION_MARKER
            segments.insert(0, segment)

        candidate = self._absolute("/".join(segments))
        if use_second_version and not self.path_exists(candidate):
            logger.debug(f"[resolve] {token} -> {candidate} missing, retrying without {SECOND_VERSION_MARKER}")
            return self.resolve(token, check_versions=False)

        logger.debug(f"[resolve] {token} -> {candidate}")
        return candidate

    def _absolute(self, relative: str) -> Path:
        # Leading separators would make the join discard the root
        return Path(os.path.abspath(self.qml_root / relative.lstrip("/\\")))

    def __repr__(self) -> str:
        return f"ImportPathResolver({self.qml_root}, {len(self.second_versions)} versioned dirs)"
