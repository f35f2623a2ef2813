"""Import extraction from `.qml` sources and `qmldir` manifests.

Both scanners are best-effort: unreadable files and malformed statements
contribute no imports and never raise.
"""

import logging
from pathlib import Path

from .parser import QtMajorVersion
from .parser import extract_import_line

logger = logging.getLogger(__name__)

IMPORT_KEYWORD = "import"
DEPENDS_KEYWORD = "depends"
LINE_COMMENT = "//"
QMLDIR_COMMENT = "#"
QMLDIR_FILE_NAME = "qmldir"
QML_FILE_SUFFIX = ".qml"

_QUOTES = "\"'`"


def strip_blocks_and_comments(text: str) -> str:
    """Remove `{...}` bodies and comments from QML source in one pass.

    Brace depth is tracked explicitly, so nested object bodies are removed
    as a whole. Braces inside comments and string literals do not count.
    Newlines are always kept so the remaining text keeps its line layout.

    Examples:
        >>> strip_blocks_and_comments("import A 1.0\\nItem { Rectangle { } }\\n")
        'import A 1.0\\nItem \\n'
        >>> strip_blocks_and_comments("/* import B 1.0 */import C 1.0 // note")
        'import C 1.0 '
    """
    out: list[str] = []
    depth = 0
    quote = None
    i = 0
    n = len(text)

    def emit(chunk: str) -> None:
        if depth == 0:
            out.append(chunk)
        else:
            out.append("\n" * chunk.count("\n"))

    while i < n:
        ch = text[i]

        if quote:
            if ch == "\\" and i + 1 < n:
                emit(text[i : i + 2])
                i += 2
                continue
            # Plain JS strings cannot span lines; template literals can
            if ch == quote or (ch == "\n" and quote != "`"):
                quote = None
            emit(ch)
            i += 1
            continue

        if text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
            continue

        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            end = n if end == -1 else end + 2
            out.append("\n" * text.count("\n", i, end))
            i = end
            continue

        if ch in _QUOTES:
            quote = ch
        elif ch == "{":
            depth += 1
            i += 1
            continue
        elif ch == "}":
            if depth > 0:
                depth -= 1
            i += 1
            continue

        emit(ch)
        i += 1

    return "".join(out)


def _starts_with_keyword(statement: str, keyword: str) -> bool:
    words = statement.split(maxsplit=1)
    return bool(words) and words[0] == keyword


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"[scan:file] cannot read {path}: {e}")
        return None


def extract_imports_from_file(path: str | Path, qt_version: QtMajorVersion = QtMajorVersion.QT5) -> list[str]:
    """Extract import tokens declared by one `.qml` file.

    Statements may be separated by newlines or `;`. Anything inside an
    object body or a comment is ignored.

    Args:
        path: QML source file
        qt_version: Active runtime version(s)

    Returns:
        Import tokens in declaration order (duplicates kept)
    """
    content = _read_text(Path(path))
    if content is None:
        return []

    imports: list[str] = []
    for line in strip_blocks_and_comments(content).split("\n"):
        for statement in line.split(";"):
            statement = " ".join(statement.split())
            if not statement or statement.startswith(LINE_COMMENT):
                continue
            if not _starts_with_keyword(statement, IMPORT_KEYWORD):
                continue
            imports += extract_import_line(statement, qt_version)

    return imports


def extract_imports_from_qmldir(path: str | Path, qt_version: QtMajorVersion = QtMajorVersion.QT5) -> list[str]:
    """Extract `depends` tokens from a `qmldir` manifest.

    Args:
        path: qmldir file
        qt_version: Active runtime version(s)

    Returns:
        Import tokens in declaration order
    """
    content = _read_text(Path(path))
    if content is None:
        return []

    imports: list[str] = []
    for line in content.split("\n"):
        line = " ".join(line.split())
        if line.startswith(LINE_COMMENT) or line.startswith(QMLDIR_COMMENT):
            continue
        if not _starts_with_keyword(line, DEPENDS_KEYWORD):
            continue
        imports += extract_import_line(line, qt_version)

    return imports


def is_qml_file(path: Path) -> bool:
    """Match `*.qml` case-insensitively."""
    return path.suffix.lower() == QML_FILE_SUFFIX
