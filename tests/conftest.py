"""Pytest configuration and shared filesystem fixtures for qmldeps tests."""

import logging
from pathlib import Path

import pytest


def _write(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def write():
    """Write a file, creating parent directories."""
    return _write


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user settings and environment overrides out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in ("QMLDEPS_QML_ROOT", "QMLDEPS_QT_VERSION", "QT_INSTALL_QML", "QMLDEPS_LOG_PATH", "QMLDEPS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def qml_root(tmp_path):
    """A small Qt5-style qml/ tree.

    QtQuick/
      qmldir
      Controls/qmldir          (Controls 1)
      Controls.2/qmldir        depends QtQuick.Templates 2.0
      Controls.2/Material/qmldir
      Templates.2/qmldir
      Window.2/qmldir
    """
    root = tmp_path / "qt" / "qml"
    _write(root / "QtQuick" / "qmldir", "module QtQuick\nplugin qtquick2plugin\n")
    _write(root / "QtQuick" / "Controls" / "qmldir", "module QtQuick.Controls\n")
    _write(
        root / "QtQuick" / "Controls.2" / "qmldir",
        "module QtQuick.Controls\n# depends QtQuick.Dialogs 1.0\ndepends QtQuick.Templates 2.0\n",
    )
    _write(root / "QtQuick" / "Controls.2" / "Material" / "qmldir", "module QtQuick.Controls.Material\n")
    _write(root / "QtQuick" / "Templates.2" / "qmldir", "module QtQuick.Templates\n")
    _write(root / "QtQuick" / "Window.2" / "qmldir", "module QtQuick.Window\n")
    return root


@pytest.fixture
def project_dir(tmp_path):
    """An application importing QtQuick, Controls and Window.

    main.qml       import QtQuick 2.0; import QtQuick.Controls 2.15
    pages/Page.qml import QtQuick 2.0; import QtQuick.Window 2.2
    """
    root = tmp_path / "app"
    _write(
        root / "main.qml",
        "import QtQuick 2.0\n"
        "import QtQuick.Controls 2.15\n"
        "\n"
        "ApplicationWindow {\n"
        "    Item {\n"
        "        // import NotAnImport 1.0\n"
        "        property string s: 'import Fake 1.0'\n"
        "    }\n"
        "}\n",
    )
    _write(root / "pages" / "Page.qml", "import QtQuick 2.0\nimport QtQuick.Window 2.2\n\nItem {}\n")
    return root


@pytest.fixture
def restore_package_logger():
    """Drop handlers a test attaches to the qmldeps logger."""
    package_logger = logging.getLogger("qmldeps")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield package_logger
    for h in list(package_logger.handlers):
        if h not in handlers:
            package_logger.removeHandler(h)
    package_logger.setLevel(level)
