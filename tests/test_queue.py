"""Tests for the document queue."""

import os

import pytest

from mdr.queue import DocumentQueue


@pytest.fixture
def paths(tmp_path):
    names = ["a.md", "b.md", "c.md"]
    for name in names:
        (tmp_path / name).write_text("# x\n")
    return [os.path.realpath(tmp_path / name) for name in names]


def test_empty_queue_is_rejected():
    with pytest.raises(ValueError):
        DocumentQueue([])


def test_next_and_prev_wrap_around(paths):
    queue = DocumentQueue(paths)
    assert queue.current == paths[0]
    assert queue.prev() == paths[2]
    assert queue.next() == paths[0]
    queue.next()
    queue.next()
    assert queue.next() == paths[0]


def test_single_document_stays_put(paths):
    queue = DocumentQueue(paths[:1])
    assert queue.next() == paths[0]
    assert queue.prev() == paths[0]


def test_open_focuses_existing_path(paths):
    queue = DocumentQueue(paths)
    assert queue.open(paths[2]) == paths[2]
    assert len(queue) == 3
    assert queue.current_index == 2


def test_open_appends_new_path(paths, tmp_path):
    extra = tmp_path / "d.md"
    extra.write_text("")
    queue = DocumentQueue(paths)
    queue.open(str(extra))
    assert len(queue) == 4
    assert queue.current == os.path.realpath(extra)


def test_relative_paths_are_normalized(paths, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    queue = DocumentQueue(["./a.md"])
    assert queue.current == paths[0]
    assert queue.index_of("b.md") is None
    assert queue.index_of(paths[0]) == 0


def test_focus_index_bounds(paths):
    queue = DocumentQueue(paths)
    assert queue.focus_index(1)
    assert not queue.focus_index(3)
    assert queue.current_index == 1


def test_title(paths):
    queue = DocumentQueue(paths)
    queue.next()
    assert queue.title() == f"[2/3] {paths[1]}"
