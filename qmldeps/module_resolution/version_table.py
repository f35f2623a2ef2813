"""Discovery of legacy `.2` directory variants under the QML root.

Qt5 ships some modules twice, e.g. `QtQuick/Controls` and
`QtQuick/Controls.2`. Imports with major version 2 must prefer the `.2`
variant, so before resolving anything we record which directory names
have such a sibling.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import QmlRootNotReadableError

if TYPE_CHECKING:
    from collections.abc import Callable

    UnreadableCallback = Callable[[Path, str], None]

logger = logging.getLogger(__name__)

SECOND_VERSION_MARKER = ".2"


def scan_qml_tree(
    qml_root: Path,
    on_unreadable: UnreadableCallback | None = None,
) -> frozenset[str]:
    """Collect directory names that have a `.2` variant.

    Every directory below the root is visited, whether or not it matched.
    Symlinked directories are followed; a directory reached through more
    than one path is listed once, which also ends symlink cycles.

    Args:
        qml_root: Qt `qml/` directory
        on_unreadable: Called with (path, reason) for each subdirectory that
            could not be listed. Such subtrees are skipped.

    Returns:
        Names with the marker stripped, e.g. {"Controls"} for `Controls.2`

    Raises:
        QmlRootNotReadableError: The root itself cannot be listed
    """
    qml_root = Path(qml_root)
    try:
        pending = [entry for entry in qml_root.iterdir() if entry.is_dir()]
    except OSError as e:
        logger.debug(f"[scan:tree] cannot list root {qml_root}: {e}")
        raise QmlRootNotReadableError(qml_root) from e

    second_versions: set[str] = set()
    visited = {os.path.realpath(qml_root)}
    while pending:
        directory = pending.pop()
        name = directory.name
        if SECOND_VERSION_MARKER in name:
            second_versions.add(name[: -len(SECOND_VERSION_MARKER)])

        real = os.path.realpath(directory)
        if real in visited:
            continue
        visited.add(real)

        try:
            pending.extend(entry for entry in directory.iterdir() if entry.is_dir())
        except OSError as e:
            logger.warning(
                f"[scan:tree] skipping unreadable directory {directory}: {e}",
                extra={"path": directory, "reason": str(e)},
            )
            if on_unreadable is not None:
                on_unreadable(directory, str(e))

    logger.debug(f"[scan:tree] {len(second_versions)} directories with a {SECOND_VERSION_MARKER} variant")
    return frozenset(second_versions)
