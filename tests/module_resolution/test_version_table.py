"""Tests for `.2` directory variant discovery."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from qmldeps.module_resolution.errors import QmlRootNotReadableError
from qmldeps.module_resolution.version_table import scan_qml_tree


def test_collects_names_with_second_version(qml_root):
    assert scan_qml_tree(qml_root) == frozenset({"Controls", "Templates", "Window"})


def test_descends_into_matching_and_plain_directories(tmp_path):
    (tmp_path / "Plain" / "Deep" / "Styles.2").mkdir(parents=True)
    (tmp_path / "Outer.2" / "Inner.2").mkdir(parents=True)
    assert scan_qml_tree(tmp_path) == frozenset({"Styles", "Outer", "Inner"})


def test_strips_only_the_last_two_characters(tmp_path):
    (tmp_path / "Foo.2.1").mkdir()
    assert scan_qml_tree(tmp_path) == frozenset({"Foo.2"})


def test_files_are_ignored(tmp_path):
    (tmp_path / "plugin.2").write_text("")
    assert scan_qml_tree(tmp_path) == frozenset()


def test_empty_root(tmp_path):
    assert scan_qml_tree(tmp_path) == frozenset()


def test_missing_root_raises(tmp_path):
    with pytest.raises(QmlRootNotReadableError) as exc_info:
        scan_qml_tree(tmp_path / "missing")
    assert exc_info.value.path == tmp_path / "missing"


def test_file_as_root_raises(tmp_path):
    root = tmp_path / "qml"
    root.write_text("")
    with pytest.raises(QmlRootNotReadableError):
        scan_qml_tree(root)


def symlink_or_skip(link, target):
    try:
        link.symlink_to(target, target_is_directory=True)
    except OSError:
        pytest.skip("symlinks not supported")


def test_symlinked_module_directory_is_followed(tmp_path):
    qml = tmp_path / "qml"
    qml.mkdir()
    (tmp_path / "store" / "QtQuick" / "Controls.2").mkdir(parents=True)
    symlink_or_skip(qml / "QtQuick", tmp_path / "store" / "QtQuick")

    assert scan_qml_tree(qml) == frozenset({"Controls"})


def test_symlink_cycle_terminates(tmp_path):
    (tmp_path / "Real.2").mkdir()
    symlink_or_skip(tmp_path / "Real.2" / "Loop.2", tmp_path)

    assert scan_qml_tree(tmp_path) == frozenset({"Real", "Loop"})


def test_linked_subtree_is_listed_once(tmp_path, monkeypatch):
    qml = tmp_path / "qml"
    qml.mkdir()
    store = tmp_path / "store" / "Shared"
    (store / "Styles.2").mkdir(parents=True)
    symlink_or_skip(qml / "First", store)
    symlink_or_skip(qml / "Second", store)
    listed = []
    real_iterdir = Path.iterdir

    def iterdir(self):
        listed.append(self.resolve())
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", iterdir)

    assert scan_qml_tree(qml) == frozenset({"Styles"})
    assert listed.count(store.resolve()) == 1
    assert listed.count((store / "Styles.2").resolve()) == 1


def test_unreadable_subdirectory_is_skipped_and_reported(tmp_path, monkeypatch):
    (tmp_path / "Locked" / "Hidden.2").mkdir(parents=True)
    (tmp_path / "Open.2").mkdir()
    locked = tmp_path / "Locked"
    real_iterdir = Path.iterdir

    def iterdir(self):
        if self == locked:
            raise PermissionError(13, "Permission denied", str(self))
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", iterdir)
    on_unreadable = MagicMock()

    assert scan_qml_tree(tmp_path, on_unreadable=on_unreadable) == frozenset({"Open"})
    on_unreadable.assert_called_once()
    assert on_unreadable.call_args.args[0] == locked
