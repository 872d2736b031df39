"""Tests for the file picker."""

import os

import pytest

from mdr.picker import PickerEntryKind, PickerState, list_entries


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "docs").mkdir()
    (tmp_path / "Archive").mkdir()
    (tmp_path / ".hidden").mkdir()
    (tmp_path / "zeta.md").write_text("")
    (tmp_path / "Alpha.md").write_text("")
    (tmp_path / "image.png").write_text("")
    (tmp_path / ".secret.md").write_text("")
    (tmp_path / "docs" / "guide.md").write_text("")
    return tmp_path


def test_parent_then_directories_then_files(tree):
    labels = [entry.label for entry in list_entries(tree)]
    assert labels == ["../", "Archive/", "docs/", "Alpha.md", "zeta.md"]


def test_entry_kinds(tree):
    kinds = [entry.kind for entry in list_entries(tree)]
    assert kinds == [
        PickerEntryKind.PARENT,
        PickerEntryKind.DIRECTORY,
        PickerEntryKind.DIRECTORY,
        PickerEntryKind.MARKDOWN_FILE,
        PickerEntryKind.MARKDOWN_FILE,
    ]


def test_filter_is_case_insensitive(tree):
    labels = [entry.label for entry in list_entries(tree, "ALP")]
    assert labels == ["../", "Alpha.md"]


def test_no_parent_at_root():
    entries = list_entries(os.path.abspath(os.sep))
    assert all(entry.kind != PickerEntryKind.PARENT for entry in entries)


def test_not_a_directory(tree):
    with pytest.raises(NotADirectoryError):
        list_entries(tree / "zeta.md")


def test_activate_descends_into_directories(tree):
    picker = PickerState(tree)
    picker.move(2)
    assert picker.current.label == "docs/"
    assert picker.activate() is None
    assert picker.directory == os.path.realpath(tree / "docs")
    picker.move(1)
    assert picker.activate() == str(tree.resolve() / "docs" / "guide.md")


def test_typing_filters_and_backspace_edits(tree):
    picker = PickerState(tree)
    picker.type_char("z")
    assert [e.label for e in picker.entries] == ["../", "zeta.md"]
    picker.backspace()
    assert picker.query == ""
    assert len(picker.entries) == 5


def test_backspace_with_empty_query_goes_up(tree):
    picker = PickerState(tree / "docs")
    picker.backspace()
    assert picker.directory == os.path.realpath(tree)


def test_selection_is_clamped(tree):
    picker = PickerState(tree)
    picker.move(100)
    assert picker.selected == 4
    picker.move(-100)
    assert picker.selected == 0
    picker.end()
    assert picker.current.label == "zeta.md"
    picker.home()
    assert picker.current.label == "../"


def test_unreadable_directory_sets_error(tree):
    picker = PickerState(tree)
    picker.change_directory(str(tree / "missing"))
    assert picker.entries == []
    assert picker.error
    assert picker.current is None
    assert picker.activate() is None
