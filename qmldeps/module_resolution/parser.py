"""Pure text processing for QML import statements - no file I/O.

One statement maps to zero or one import token:

    import QtQuick 2.0                 -> "2#QtQuick"         (Qt5)
    import QtQuick 2.0                 -> "QtQuick"           (Qt6)
    import QtQuick.Controls 2.15 as C  -> "2#QtQuick/Controls"
    import QtQuick.Controls auto       -> "QtQuick/Controls"
    import QtQuick.Layouts             -> "QtQuick/Layouts"
"""

from enum import Flag

VERSION_SEPARATOR = "#"
AUTO_VERSION = "auto"
ALIAS_KEYWORD = "as"


class QtMajorVersion(Flag):
    """Qt major versions the parser can target.

    Kept as a flag set: a deployment may carry both runtimes, and the Qt6
    naming scheme wins whenever the Qt6 bit is present.
    """

    NONE = 0
    QT5 = 1
    QT6 = 2

    @classmethod
    def from_number(cls, major: int) -> "QtMajorVersion":
        """Map 5/6 to the matching flag.

        Raises:
            ValueError: For any other major version
        """
        if major == 5:
            return cls.QT5
        if major == 6:
            return cls.QT6
        raise ValueError(f"Unsupported Qt major version: {major}")


def module_path(dotted_name: str) -> str:
    """Convert a dotted module URI into a slash separated path."""
    return dotted_name.replace(".", "/")


def extract_import_line(line: str, qt_version: QtMajorVersion = QtMajorVersion.QT5) -> list[str]:
    """Parse a single trimmed `import`/`depends` statement.

    Args:
        line: Statement text, already known to start with the keyword
        qt_version: Active runtime version(s)

    Returns:
        A list holding the import token, or an empty list when the statement
        does not have a recognised shape.

    Examples:
        >>> extract_import_line("import QtQuick 2.0", QtMajorVersion.QT5)
        ['2#QtQuick']
        >>> extract_import_line("import QtQuick 2.0", QtMajorVersion.QT6)
        ['QtQuick']
        >>> extract_import_line("import org.example.Foo 1.0 as Foo")
        ['1#org/example/Foo']
    """
    words = line.split()

    if len(words) == 3 or (len(words) == 5 and words[3] == ALIAS_KEYWORD):
        major = words[2]
        if major == AUTO_VERSION or QtMajorVersion.QT6 in qt_version:
            return [module_path(words[1])]
        return [f"{major[0]}{VERSION_SEPARATOR}{module_path(words[1])}"]

    if len(words) == 2 or (len(words) == 4 and words[2] == ALIAS_KEYWORD):
        return [module_path(words[1])]

    return []


def is_versioned(token: str) -> bool:
    """Return True for Qt5 style `<major>#path` tokens."""
    return VERSION_SEPARATOR in token
