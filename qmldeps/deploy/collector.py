"""Collect the files to deploy from resolved module directories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def collect_deploy_files(
    paths: Iterable[Path | None],
    is_debug_file: Callable[[Path], bool] | None = None,
) -> list[Path]:
    """List the direct entries of every resolved module directory.

    Entries are files and subdirectories alike; a subdirectory is deployed
    as a whole. Unresolved (None) and missing directories are skipped.

    Args:
        paths: Module directories from a scan, in order
        is_debug_file: Predicate for entries to leave out

    Returns:
        Absolute entry paths, per directory sorted by name
    """
    result: list[Path] = []
    for directory in paths:
        if directory is None:
            continue

        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name.lower())
        except OSError as e:
            logger.debug(f"[deploy] nothing to collect from {directory}: {e}")
            continue

        for entry in entries:
            if is_debug_file is not None and is_debug_file(entry):
                logger.info(f"[deploy] skipped debug file {entry}", extra={"path": entry})
                continue
            result.append(entry.absolute())

    return result
