"""QML import discovery and module path resolution.

This package finds which QML modules a project needs:
- parser: import statement -> import token
- scanners: `.qml` / `qmldir` file -> import tokens
- version_table: QML root -> names with a `.2` directory variant
- resolvers: import token -> module directory
- walker: project directory -> every module directory, transitively
"""

from .errors import ProjectDirNotReadableError
from .errors import QmlRootNotReadableError
from .errors import ScanError
from .models import ResolvedImport
from .models import ScanResult
from .models import SkippedDirectory
from .parser import QtMajorVersion
from .parser import extract_import_line
from .resolvers import ImportPathResolver
from .scanners import extract_imports_from_file
from .scanners import extract_imports_from_qmldir
from .version_table import scan_qml_tree
from .walker import QmlImportScanner

__all__ = [
    "ImportPathResolver",
    "ProjectDirNotReadableError",
    "QmlImportScanner",
    "QmlRootNotReadableError",
    "QtMajorVersion",
    "ResolvedImport",
    "ScanError",
    "ScanResult",
    "SkippedDirectory",
    "extract_import_line",
    "extract_imports_from_file",
    "extract_imports_from_qmldir",
    "scan_qml_tree",
]
