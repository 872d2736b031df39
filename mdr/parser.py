"""Markdown source -> blocks, using markdown-it-py.

Walks the flat token stream markdown-it produces:
- Block structure comes as ``*_open`` / ``*_close`` pairs with ``token.map``
  giving the source line range.
- Inline content lives in ``token.children`` of ``inline`` tokens.
- Code fences use the ``fence`` token type with ``token.info`` for the language.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .model import (
    Block, Blockquote, Code, CodeBlock, Heading, LineBreak, Link, ListItem,
    Paragraph, Rule, StyleFlags, Table, Text, collect_links,
)

logger = logging.getLogger(__name__)

# "gfm-like" turns on tables, strikethrough and bare-url linkify
_md_parser = MarkdownIt("gfm-like")

_STYLE_TOKENS = {
    "strong": StyleFlags.BOLD,
    "em": StyleFlags.ITALIC,
    "s": StyleFlags.STRIKE,
}


@dataclass
class Document:
    """A loaded markdown document."""
    path: Optional[str]
    source: str
    blocks: list = field(default_factory=list)
    urls: list = field(default_factory=list)


def _append_text(spans: list, text: str, flags: int) -> None:
    if not text:
        return
    if spans and isinstance(spans[-1], Text) and spans[-1].flags == flags:
        spans[-1] = Text(spans[-1].text + text, flags)
    else:
        spans.append(Text(text, flags))


def inline_spans(children: Optional[list[Token]], base_flags: int = 0) -> tuple:
    """Convert the children of an inline token into InlineSpans."""
    spans: list = []
    flag_stack: list[int] = []
    flags = base_flags
    link_url: Optional[str] = None
    link_text: list[str] = []
    link_flags = 0

    for child in children or []:
        kind = child.type
        if kind.endswith("_open") and kind[:-5] in _STYLE_TOKENS:
            flag_stack.append(flags)
            flags |= _STYLE_TOKENS[kind[:-5]]
        elif kind.endswith("_close") and kind[:-6] in _STYLE_TOKENS:
            flags = flag_stack.pop() if flag_stack else base_flags
        elif kind == "link_open":
            link_url = str(child.attrs.get("href", ""))
            link_text = []
            link_flags = flags
        elif kind == "link_close":
            if link_url is not None:
                spans.append(Link(link_url, "".join(link_text), link_flags))
            link_url = None
        elif link_url is not None:
            # Everything inside a link collapses into its display text
            if kind == "softbreak" or kind == "hardbreak":
                link_text.append(" ")
            else:
                link_text.append(child.content)
        elif kind == "text" or kind == "html_inline":
            _append_text(spans, child.content, flags)
        elif kind == "code_inline":
            spans.append(Code(child.content))
        elif kind == "softbreak":
            _append_text(spans, " ", flags)
        elif kind == "hardbreak":
            spans.append(LineBreak())
        elif kind == "image":
            _append_text(spans, child.content, flags)
    return tuple(spans)


def plain_text(children: Optional[list[Token]]) -> str:
    """Flatten inline children to their visible text (used for table cells)."""
    parts = []
    for child in children or []:
        if child.type in ("text", "code_inline", "html_inline", "image"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
    return "".join(parts)


def _source_line(token: Token) -> int:
    return token.map[0] if token.map else 0


def _parse_table(tokens: list[Token], start: int, source_line: int) -> tuple[Table, int]:
    """Collect a table starting at tokens[start] (table_open).

    Returns the table and the index just past table_close.
    """
    header: list[str] = []
    rows: list[list[str]] = []
    in_head = False
    row: Optional[list[str]] = None
    i = start + 1
    while i < len(tokens) and tokens[i].type != "table_close":
        tok = tokens[i]
        if tok.type == "thead_open":
            in_head = True
        elif tok.type == "thead_close":
            in_head = False
        elif tok.type == "tr_open":
            row = []
        elif tok.type == "tr_close":
            if row is not None:
                if in_head and not header:
                    header = row
                else:
                    rows.append(row)
            row = None
        elif tok.type == "inline" and row is not None:
            row.append(plain_text(tok.children))
        i += 1
    return Table(header=tuple(header), rows=tuple(tuple(r) for r in rows), source_line=source_line), i + 1


class _ListFrame:
    def __init__(self, ordered: bool, start: int):
        self.ordered = ordered
        self.next_ordinal = start


class _ItemFrame:
    def __init__(self, depth: int, ordinal: Optional[int], source_line: int):
        self.depth = depth
        self.ordinal = ordinal
        self.source_line = source_line
        self.emitted = False


def parse_markdown(source: str) -> list[Block]:
    """Parse markdown text into a flat list of blocks.

    Nested structure is flattened: list items carry their depth, quoted
    paragraphs carry their quote depth. Raw HTML blocks are dropped.
    """
    tokens = _md_parser.parse(source)
    blocks: list[Block] = []
    lists: list[_ListFrame] = []
    items: list[_ItemFrame] = []
    quote_depth = 0
    heading_level: Optional[int] = None
    block_line = 0

    def emit_pending_item():
        # A list item whose first child is not a paragraph still gets its marker
        if items and not items[-1].emitted:
            item = items[-1]
            blocks.append(ListItem(item.depth, (), item.ordinal, item.source_line))
            item.emitted = True

    i = 0
    while i < len(tokens):
        tok = tokens[i]
        kind = tok.type

        if kind in ("bullet_list_open", "ordered_list_open"):
            emit_pending_item()
            start = 1
            if kind == "ordered_list_open":
                try:
                    start = int(tok.attrs.get("start", 1))
                except (TypeError, ValueError):
                    start = 1
            lists.append(_ListFrame(kind == "ordered_list_open", start))
        elif kind in ("bullet_list_close", "ordered_list_close"):
            if lists:
                lists.pop()
        elif kind == "list_item_open":
            frame = lists[-1] if lists else _ListFrame(False, 1)
            ordinal = None
            if frame.ordered:
                ordinal = frame.next_ordinal
                frame.next_ordinal += 1
            items.append(_ItemFrame(max(1, len(lists)), ordinal, _source_line(tok)))
        elif kind == "list_item_close":
            emit_pending_item()
            if items:
                items.pop()
        elif kind == "blockquote_open":
            emit_pending_item()
            quote_depth += 1
        elif kind == "blockquote_close":
            quote_depth = max(0, quote_depth - 1)
        elif kind == "heading_open":
            emit_pending_item()
            heading_level = int(tok.tag[1]) if tok.tag[:1] == "h" and tok.tag[1:].isdigit() else 1
            block_line = _source_line(tok)
        elif kind == "heading_close":
            heading_level = None
        elif kind == "paragraph_open":
            block_line = _source_line(tok)
        elif kind == "inline":
            if heading_level is not None:
                if quote_depth:
                    spans = inline_spans(tok.children, StyleFlags.BOLD)
                    blocks.append(Blockquote(spans, quote_depth, block_line))
                else:
                    blocks.append(Heading(heading_level, inline_spans(tok.children), block_line))
            elif items and not items[-1].emitted:
                item = items[-1]
                blocks.append(ListItem(item.depth, inline_spans(tok.children), item.ordinal, item.source_line))
                item.emitted = True
            elif quote_depth:
                blocks.append(Blockquote(inline_spans(tok.children), quote_depth, block_line))
            else:
                blocks.append(Paragraph(inline_spans(tok.children), block_line))
        elif kind in ("fence", "code_block"):
            emit_pending_item()
            language = None
            if kind == "fence" and tok.info:
                language = tok.info.strip().split()[0] if tok.info.strip() else None
            blocks.append(CodeBlock(tok.content, language, _source_line(tok)))
        elif kind == "hr":
            emit_pending_item()
            blocks.append(Rule(_source_line(tok)))
        elif kind == "table_open":
            emit_pending_item()
            table, i = _parse_table(tokens, i, _source_line(tok))
            blocks.append(table)
            continue
        i += 1
    return blocks


def document_from_text(source: str, path: Optional[str] = None) -> Document:
    blocks = parse_markdown(source)
    return Document(path=path, source=source, blocks=blocks, urls=collect_links(blocks))


def load_document(path: str) -> Document:
    """Read and parse a markdown file.

    Raises OSError when the file cannot be read. Undecodable bytes are
    replaced rather than rejected.
    """
    source = Path(path).read_text(encoding="utf-8", errors="replace")
    logger.debug("Loaded %s (%d bytes)", path, len(source))
    return document_from_text(source, path)
