"""Tests for link hit-testing and nearest-link selection."""

from mdr.layout import layout
from mdr.links import LinkIndex
from mdr.model import Link, LinkOccurrence, Paragraph, Text, WrappedLine


def lines_with_links(count, links_by_row):
    return [WrappedLine(links=tuple(links_by_row.get(row, ()))) for row in range(count)]


def test_hover_is_exact():
    # Link drawn on row 4, columns 10-20 inclusive
    lines = lines_with_links(6, {4: [LinkOccurrence(10, 21, 0)]})
    index = LinkIndex(lines, ["https://example.com"])
    assert index.link_at(4, 15) == 0
    assert index.link_at(4, 10) == 0
    assert index.link_at(4, 20) == 0
    assert index.link_at(4, 21) is None
    assert index.link_at(4, 9) is None
    assert index.link_at(3, 15) is None
    assert index.link_at(99, 15) is None


def test_resolve_link():
    index = LinkIndex([], ["a", "b"])
    assert index.resolve_link(1) == "b"
    assert index.resolve_link(None) is None
    assert index.resolve_link(5) is None


def test_empty_index_is_falsy():
    assert not LinkIndex(lines_with_links(3, {}), [])
    assert LinkIndex(lines_with_links(3, {1: [LinkOccurrence(0, 1, 0)]}), ["a"])


def test_wrapped_link_is_hit_on_both_rows():
    lines = layout([Paragraph((Text("aaaa "), Link("u", "bb cc")))], 7)
    index = LinkIndex(lines, ["u"])
    assert index.link_at(0, 5) == 0
    assert index.link_at(1, 0) == 0
    assert index.link_at(0, 0) is None


def test_nearest_link_prefers_the_centre():
    lines = lines_with_links(10, {
        1: [LinkOccurrence(0, 4, 0)],
        5: [LinkOccurrence(0, 4, 1)],
        9: [LinkOccurrence(0, 4, 2)],
    })
    index = LinkIndex(lines, ["a", "b", "c"])
    # Window rows 0-7, centre 3.5; row 9 is off screen
    assert index.nearest_link(0, 8) == 1


def test_nearest_link_tie_goes_to_smaller_column():
    lines = lines_with_links(8, {
        2: [LinkOccurrence(8, 12, 0)],
        5: [LinkOccurrence(3, 6, 1)],
    })
    index = LinkIndex(lines, ["a", "b"])
    assert index.nearest_link(0, 8) == 1


def test_nearest_link_none_visible():
    lines = lines_with_links(20, {15: [LinkOccurrence(0, 4, 0)]})
    index = LinkIndex(lines, ["a"])
    assert index.nearest_link(0, 10) is None
    assert index.nearest_link(0, 0) is None
