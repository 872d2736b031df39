"""Layout engine: parsed blocks -> width-aware wrapped terminal lines.

``layout`` is a pure function of its inputs. It is re-run in full whenever
the width, the document or the display mode changes.
"""

import itertools
from typing import Iterator, NamedTuple, Optional

from .constants import ViewerConstants
from .highlight import highlight_code
from .model import (
    RGB, Blockquote, Code, CodeBlock, Heading, LineBreak, Link, LinkOccurrence,
    ListItem, Paragraph, Rule, StyledRun, StyleFlags, Table, Text, WrappedLine,
    blank_line,
)
from .table import layout_table
from .text import cell_width, char_width, clip_to_width, sanitize, wrap_ranges


class _Cell(NamedTuple):
    """One character of inline content with everything needed to style it."""
    ch: str
    role: str
    flags: int
    link_id: Optional[int]


def _span_cells(spans, role: str, flags: int, link_ids: Iterator[int]) -> list[list[_Cell]]:
    """Flatten inline spans into cell segments, splitting at hard breaks."""
    segments: list[list[_Cell]] = [[]]
    for span in spans:
        if isinstance(span, LineBreak):
            segments.append([])
            continue
        if isinstance(span, Text):
            text, span_role, span_flags, link_id = span.text, role, flags | span.flags, None
        elif isinstance(span, Code):
            text, span_role, span_flags, link_id = f"`{span.text}`", "code", StyleFlags.DIM, None
        elif isinstance(span, Link):
            link_id = next(link_ids)
            text = span.text or span.url
            span_role = "link"
            span_flags = flags | span.flags | StyleFlags.UNDERLINE
        else:
            raise TypeError(f"Unknown inline span: {span!r}")
        text = sanitize(text.replace("\n", " "))
        segments[-1].extend(_Cell(ch, span_role, span_flags, link_id) for ch in text)
    return segments


def _make_line(prefix: list[StyledRun], cells: list[_Cell], block_index: int) -> WrappedLine:
    """Merge cells into styled runs and record where links landed."""
    runs = [run for run in prefix if run.text]
    column = sum(cell_width(run.text) for run in runs)
    links: list[LinkOccurrence] = []
    link_start = column
    current_link: Optional[int] = None

    for cell in cells:
        if cell.link_id != current_link:
            if current_link is not None:
                links.append(LinkOccurrence(link_start, column, current_link))
            current_link = cell.link_id
            link_start = column
        last = runs[-1] if runs else None
        if last is not None and last.role == cell.role and last.flags == cell.flags and last.color is None:
            runs[-1] = StyledRun(last.text + cell.ch, last.role, last.flags)
        else:
            runs.append(StyledRun(cell.ch, cell.role, cell.flags))
        column += char_width(cell.ch)
    if current_link is not None:
        links.append(LinkOccurrence(link_start, column, current_link))
    return WrappedLine(runs=tuple(runs), links=tuple(links), block_index=block_index)


def _wrap_inline(segments: list[list[_Cell]], width: int, block_index: int,
                 first_prefix: list[StyledRun], rest_prefix: list[StyledRun]) -> list[WrappedLine]:
    """Wrap cell segments, using first_prefix on the very first row only."""
    first_width = width - sum(cell_width(r.text) for r in first_prefix)
    rest_width = width - sum(cell_width(r.text) for r in rest_prefix)
    lines: list[WrappedLine] = []
    for segment in segments:
        chars = [cell.ch for cell in segment]
        seg_first = first_width if not lines else rest_width
        for start, end in wrap_ranges(chars, seg_first, rest_width):
            prefix = first_prefix if not lines else rest_prefix
            lines.append(_make_line(prefix, segment[start:end], block_index))
    return lines


def _list_prefixes(item: ListItem, width: int) -> tuple[list[StyledRun], list[StyledRun]]:
    marker = f"{item.ordinal}. " if item.ordinal is not None else ViewerConstants.BULLET
    indent = ViewerConstants.LIST_INDENT * max(0, item.depth - 1)
    # Keep at least two columns for text after the marker
    if indent + cell_width(marker) > width - 2:
        indent = max(0, width - 2 - cell_width(marker))
    if indent + cell_width(marker) > width - 2:
        marker = ViewerConstants.BULLET
        indent = 0
    hanging = indent + cell_width(marker)
    first = [StyledRun(" " * indent), StyledRun(marker, "bullet")]
    rest = [StyledRun(" " * hanging)]
    return first, rest


def _quote_prefix(depth: int, width: int) -> list[StyledRun]:
    prefix = ViewerConstants.QUOTE_PREFIX
    depth = max(1, min(depth, (width - 2) // cell_width(prefix)))
    return [StyledRun(prefix * depth, "quote")]


def _heading_style(level: int) -> tuple[str, int]:
    if level == 1:
        return "title", StyleFlags.BOLD | StyleFlags.UNDERLINE
    if level == 2:
        return "heading", StyleFlags.BOLD | StyleFlags.UNDERLINE
    return "heading", StyleFlags.BOLD


def _code_row(pieces: list[tuple[str, Optional[RGB]]], width: int, block_index: int) -> WrappedLine:
    indent = min(ViewerConstants.CODE_INDENT, width // 4)
    budget = width - indent
    pieces = [(sanitize(text), color) for text, color in pieces]
    total = sum(cell_width(text) for text, _ in pieces)

    runs = [StyledRun(" " * indent, "code")] if indent else []
    if total <= budget:
        runs.extend(StyledRun(text, "code", StyleFlags.DIM if color is None else 0, color)
                    for text, color in pieces)
        return WrappedLine(runs=tuple(runs), block_index=block_index)

    # Too wide: clip and say so rather than reflowing code
    room = budget - cell_width(ViewerConstants.CLIP_INDICATOR)
    for text, color in pieces:
        if room <= 0:
            break
        kept = clip_to_width(text, room)
        if kept:
            runs.append(StyledRun(kept, "code", StyleFlags.DIM if color is None else 0, color))
        room -= cell_width(kept)
        if len(kept) < len(text):
            break
    runs.append(StyledRun(ViewerConstants.CLIP_INDICATOR, "clip"))
    return WrappedLine(runs=tuple(runs), block_index=block_index)


def _layout_code(block: CodeBlock, width: int, block_index: int) -> list[WrappedLine]:
    text = block.text[:-1] if block.text.endswith("\n") else block.text
    text = text.expandtabs(ViewerConstants.TAB_SIZE)
    return [_code_row(pieces, width, block_index) for pieces in highlight_code(text, block.language)]


def _layout_block(block, block_index: int, width: int, link_ids: Iterator[int]) -> list[WrappedLine]:
    if isinstance(block, Heading):
        role, flags = _heading_style(block.level)
        segments = _span_cells(block.spans, role, flags, link_ids)
        return _wrap_inline(segments, width, block_index, [], [])
    if isinstance(block, Paragraph):
        segments = _span_cells(block.spans, "text", 0, link_ids)
        return _wrap_inline(segments, width, block_index, [], [])
    if isinstance(block, ListItem):
        first, rest = _list_prefixes(block, width)
        segments = _span_cells(block.spans, "text", 0, link_ids)
        return _wrap_inline(segments, width, block_index, first, rest)
    if isinstance(block, Blockquote):
        prefix = _quote_prefix(block.depth, width)
        segments = _span_cells(block.spans, "text", 0, link_ids)
        return _wrap_inline(segments, width, block_index, prefix, prefix)
    if isinstance(block, Rule):
        return [WrappedLine(runs=(StyledRun(ViewerConstants.RULE_CHAR * width, "rule"),),
                            block_index=block_index)]
    if isinstance(block, CodeBlock):
        return _layout_code(block, width, block_index)
    if isinstance(block, Table):
        return layout_table(block.header, block.rows, width, block_index=block_index)
    raise TypeError(f"Unknown block: {block!r}")


def _needs_gap(previous, current) -> bool:
    """Blank line between blocks, except between items of the same list."""
    return not (isinstance(previous, ListItem) and isinstance(current, ListItem))


def layout(blocks, width: int) -> list[WrappedLine]:
    """Lay out blocks as wrapped lines no wider than width.

    Assumes width >= ViewerConstants.MIN_LAYOUT_WIDTH; callers enforce it.
    A blank separator line carries the index of the block below it.
    """
    lines: list[WrappedLine] = []
    link_ids = itertools.count()
    previous = None
    for index, block in enumerate(blocks):
        if previous is not None and _needs_gap(previous, block):
            lines.append(blank_line(index))
        lines.extend(_layout_block(block, index, width, link_ids))
        previous = block
    return lines


def plain_layout(source: str, width: int) -> list[WrappedLine]:
    """Lay out raw markdown source, one source line at a time.

    Each line's ``block_index`` is its source line number. Leading
    indentation is kept on the first row of a wrapped source line.
    """
    lines: list[WrappedLine] = []
    for number, raw in enumerate(source.splitlines()):
        text = sanitize(raw.expandtabs(ViewerConstants.TAB_SIZE))
        if not text.strip():
            lines.append(blank_line(number))
            continue
        body = text.lstrip(" ")
        indent = len(text) - len(body)
        if indent > width // 2:
            indent = 0
        for i, (start, end) in enumerate(wrap_ranges(body, width - indent, width)):
            lead = " " * indent if i == 0 else ""
            lines.append(WrappedLine(runs=(StyledRun(lead + body[start:end]),), block_index=number))
    return lines
