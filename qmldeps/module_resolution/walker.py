"""Transitive QML import discovery.

Walks a project directory, collects import tokens from `.qml` files and
`qmldir` manifests, and follows every newly seen import into the module
directory it resolves to. The walk is depth-first in discovery order and
each import token is followed exactly once; two tokens that resolve to the
same directory are both followed.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ProjectDirNotReadableError
from .models import ResolvedImport
from .models import ScanResult
from .models import SkippedDirectory
from .parser import QtMajorVersion
from .resolvers import ImportPathResolver
from .scanners import QMLDIR_FILE_NAME
from .scanners import extract_imports_from_file
from .scanners import extract_imports_from_qmldir
from .scanners import is_qml_file
from .version_table import scan_qml_tree

if TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256
MAX_DEPTH_REASON = "max depth"


@dataclass
class _DirectoryListing:
    qml_files: list[Path] = field(default_factory=list)
    qmldir_files: list[Path] = field(default_factory=list)
    subdirs: list[Path] = field(default_factory=list)


@dataclass
class _ScanState:
    """Mutable state of a single scan() call."""

    resolver: ImportPathResolver
    recursive: bool
    imports: dict[str, None] = field(default_factory=dict)
    skipped: list[SkippedDirectory] = field(default_factory=list)


class QmlImportScanner:
    """Find the QML module directories a project depends on.

    Example:
        scanner = QmlImportScanner(Path("/opt/Qt/5.15.2/gcc_64/qml"))
        result = scanner.scan(Path("~/src/app/qml").expanduser())
        for path in result.paths:
            print(path)

    A scanner holds configuration only; every scan() starts from an empty
    import set, so repeated scans of an unchanged tree give identical results.
    """

    def __init__(
        self,
        qml_root: str | Path,
        qt_version: QtMajorVersion = QtMajorVersion.QT5,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        on_unreadable: Callable[[Path, str], None] | None = None,
        path_exists: Callable[[Path], bool] = os.path.exists,
    ):
        """
        Args:
            qml_root: Qt `qml/` directory holding the system modules
            qt_version: Runtime version(s), selects the import token scheme
            max_depth: Deepest directory nesting the walk will enter
            on_unreadable: Called with (path, reason) for every skipped directory
            path_exists: Existence check used by the `.2` fallback
        """
        self.qml_root = Path(qml_root)
        self.qt_version = qt_version
        self.max_depth = max_depth
        self.on_unreadable = on_unreadable
        self.path_exists = path_exists

    def set_qt_version(self, qt_version: QtMajorVersion) -> None:
        self.qt_version = qt_version

    def scan(self, project_dir: str | Path, recursive: bool = True) -> ScanResult:
        """Discover and resolve all imports reachable from a project.

        Args:
            project_dir: Root of the application's QML sources
            recursive: Also walk every subdirectory of visited directories

        Returns:
            ScanResult with tokens, resolved paths and skipped directories

        Raises:
            QmlRootNotReadableError: The QML root cannot be listed
            ProjectDirNotReadableError: The project directory cannot be listed
        """
        project_dir = Path(project_dir)
        skipped: list[SkippedDirectory] = []

        def report(path: Path, reason: str) -> None:
            skipped.append(SkippedDirectory(path=path, reason=reason))
            if self.on_unreadable is not None:
                self.on_unreadable(path, reason)

        second_versions = scan_qml_tree(self.qml_root, on_unreadable=report)
        resolver = ImportPathResolver(self.qml_root, second_versions, path_exists=self.path_exists)
        state = _ScanState(resolver=resolver, recursive=recursive, skipped=skipped)

        try:
            top = self._list_directory(project_dir)
        except OSError as e:
            raise ProjectDirNotReadableError(project_dir) from e

        self._walk(project_dir, top, state, report)

        resolved = [ResolvedImport(token=token, path=state.resolver.resolve(token)) for token in state.imports]
        result = ScanResult(resolved=resolved, skipped=state.skipped)
        logger.info(
            f"[scan] {project_dir}: {len(result.imports)} imports, {len(result.paths)} paths, "
            f"{len(result.skipped)} skipped directories"
        )
        return result

    def _walk(
        self,
        root: Path,
        listing: _DirectoryListing,
        state: _ScanState,
        report: Callable[[Path, str], None],
    ) -> None:
        """Depth-first walk with an explicit stack of directory visits.

        Each stack entry is a generator that yields the directories its
        directory wants visited next, in order. Entering a directory pushes a
        new generator, so the visit order matches plain recursion.
        """
        stack = [self._visit(root, listing, state)]
        while stack:
            try:
                directory = next(stack[-1])
            except StopIteration:
                stack.pop()
                continue

            if len(stack) >= self.max_depth:
                logger.warning(
                    f"[scan] not entering {directory}: depth limit {self.max_depth} reached",
                    extra={"path": directory, "reason": MAX_DEPTH_REASON},
                )
                report(directory, MAX_DEPTH_REASON)
                continue

            try:
                child = self._list_directory(directory)
            except OSError as e:
                if isinstance(e, FileNotFoundError):
                    logger.debug(f"[scan] resolved directory does not exist: {directory}")
                else:
                    logger.warning(
                        f"[scan] skipping unreadable directory {directory}: {e}",
                        extra={"path": directory, "reason": str(e)},
                    )
                report(directory, str(e))
                continue

            stack.append(self._visit(directory, child, state))

    def _visit(self, directory: Path, listing: _DirectoryListing, state: _ScanState) -> Iterator[Path]:
        for qml_file in listing.qml_files:
            yield from self._follow(extract_imports_from_file(qml_file, self.qt_version), state)

        for qmldir in listing.qmldir_files:
            yield from self._follow(extract_imports_from_qmldir(qmldir, self.qt_version), state)

        if state.recursive:
            yield from listing.subdirs

    def _follow(self, tokens: list[str], state: _ScanState) -> Iterator[Path]:
        for token in tokens:
            if token in state.imports:
                continue
            state.imports[token] = None
            path = state.resolver.resolve(token)
            logger.debug(f"[scan] new import {token} -> {path}", extra={"token": token, "path": path})
            if path is not None:
                yield path

    @staticmethod
    def _list_directory(directory: Path) -> _DirectoryListing:
        """List a directory, entries sorted case-insensitively by name.

        Raises:
            OSError: The directory cannot be listed
        """
        listing = _DirectoryListing()
        for entry in sorted(directory.iterdir(), key=lambda p: p.name.lower()):
            if entry.is_dir():
                listing.subdirs.append(entry)
            elif entry.is_file():
                if is_qml_file(entry):
                    listing.qml_files.append(entry)
                elif entry.name == QMLDIR_FILE_NAME:
                    listing.qmldir_files.append(entry)
        return listing

    def __repr__(self) -> str:
        return f"QmlImportScanner({self.qml_root}, {self.qt_version})"
