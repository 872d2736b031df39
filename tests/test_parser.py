"""Tests for markdown parsing into blocks."""

import pytest

from mdr.model import (
    Blockquote, Code, CodeBlock, Heading, LineBreak, Link, ListItem, Paragraph, Rule,
    StyleFlags, Table, Text,
)
from mdr.parser import document_from_text, load_document, parse_markdown


def test_heading_and_emphasis():
    blocks = parse_markdown("# Title\n\nSome *em* and **bold** text.\n")
    assert blocks[0] == Heading(1, (Text("Title"),), 0)
    assert blocks[1] == Paragraph((
        Text("Some "),
        Text("em", StyleFlags.ITALIC),
        Text(" and "),
        Text("bold", StyleFlags.BOLD),
        Text(" text."),
    ), 2)


def test_nested_emphasis_combines_flags():
    blocks = parse_markdown("***both***\n")
    assert blocks[0].spans == (Text("both", StyleFlags.BOLD | StyleFlags.ITALIC),)


def test_strikethrough():
    blocks = parse_markdown("~~gone~~\n")
    assert blocks[0].spans == (Text("gone", StyleFlags.STRIKE),)


def test_soft_and_hard_breaks():
    assert parse_markdown("a\nb\n")[0].spans == (Text("a b"),)
    assert parse_markdown("a  \nb\n")[0].spans == (Text("a"), LineBreak(), Text("b"))


def test_inline_code_and_link():
    blocks = parse_markdown("Run `mdr` or see [the docs](https://x.y).\n")
    assert blocks[0].spans == (
        Text("Run "),
        Code("mdr"),
        Text(" or see "),
        Link("https://x.y", "the docs"),
        Text("."),
    )


def test_bare_urls_become_links():
    blocks = parse_markdown("see https://example.com now\n")
    links = [span for span in blocks[0].spans if isinstance(span, Link)]
    assert [link.url for link in links] == ["https://example.com"]


def test_bullet_list_depths():
    blocks = parse_markdown("- a\n- b\n  - c\n")
    assert [(b.depth, b.spans, b.ordinal) for b in blocks] == [
        (1, (Text("a"),), None),
        (1, (Text("b"),), None),
        (2, (Text("c"),), None),
    ]
    assert all(isinstance(b, ListItem) for b in blocks)


def test_ordered_list_keeps_its_start():
    blocks = parse_markdown("3. x\n4. y\n")
    assert [b.ordinal for b in blocks] == [3, 4]


def test_blockquote():
    blocks = parse_markdown("> quoted\n")
    assert blocks == [Blockquote((Text("quoted"),), 1, 0)]


def test_nested_blockquote_depth():
    blocks = parse_markdown("> > deep\n")
    assert blocks[0].depth == 2


def test_fenced_code_language():
    blocks = parse_markdown("```python extra\nprint(1)\n```\n")
    assert blocks == [CodeBlock("print(1)\n", "python", 0)]


def test_indented_code_has_no_language():
    blocks = parse_markdown("para\n\n    code here\n")
    assert blocks[1] == CodeBlock("code here\n", None, 2)


def test_rule():
    blocks = parse_markdown("para\n\n---\n")
    assert isinstance(blocks[1], Rule)


def test_table_cells():
    blocks = parse_markdown("| a | b | c |\n|---|---|---|\n| 1 | 2 |\n")
    table = blocks[0]
    assert isinstance(table, Table)
    assert table.header == ("a", "b", "c")
    assert table.rows[0][:2] == ("1", "2")


def test_html_blocks_are_dropped():
    blocks = parse_markdown("<div>\nhidden\n</div>\n\ntext\n")
    assert blocks == [Paragraph((Text("text"),), 4)]


def test_document_collects_links_in_order():
    doc = document_from_text("[a](one) and [b](two)\n\n[c](three)\n")
    assert doc.urls == ["one", "two", "three"]


def test_load_document(tmp_path):
    path = tmp_path / "doc.md"
    path.write_bytes(b"# Hi\n\nbad byte \xff here\n")
    doc = load_document(str(path))
    assert doc.path == str(path)
    assert doc.blocks[0] == Heading(1, (Text("Hi"),), 0)
    assert "�" in doc.blocks[1].spans[0].text


def test_load_missing_document_raises(tmp_path):
    with pytest.raises(OSError):
        load_document(str(tmp_path / "missing.md"))
