"""Document and layout data model.

Blocks and inline spans are what the markdown parser produces; styled runs,
link occurrences and wrapped lines are what the layout engine produces. All
of them are immutable once built.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .text import cell_width


class StyleFlags:
    """Bit flags for inline emphasis."""
    BOLD = 1
    ITALIC = 2
    UNDERLINE = 4
    STRIKE = 8
    DIM = 16


RGB = tuple[int, int, int]


# --- Inline spans ---

@dataclass(frozen=True)
class Text:
    """A run of text; plain when flags is 0, emphasised otherwise."""
    text: str
    flags: int = 0


@dataclass(frozen=True)
class Code:
    """Inline code span."""
    text: str


@dataclass(frozen=True)
class Link:
    """A hyperlink with its display text."""
    url: str
    text: str
    flags: int = 0


@dataclass(frozen=True)
class LineBreak:
    """Hard line break inside a paragraph."""


InlineSpan = Union[Text, Code, Link, LineBreak]


# --- Blocks ---

@dataclass(frozen=True)
class Heading:
    level: int
    spans: tuple = ()
    source_line: int = 0


@dataclass(frozen=True)
class Paragraph:
    spans: tuple = ()
    source_line: int = 0


@dataclass(frozen=True)
class ListItem:
    """One list item; depth starts at 1, ordinal is set for ordered lists."""
    depth: int
    spans: tuple = ()
    ordinal: Optional[int] = None
    source_line: int = 0


@dataclass(frozen=True)
class Blockquote:
    spans: tuple = ()
    depth: int = 1
    source_line: int = 0


@dataclass(frozen=True)
class Rule:
    source_line: int = 0


@dataclass(frozen=True)
class CodeBlock:
    text: str
    language: Optional[str] = None
    source_line: int = 0


@dataclass(frozen=True)
class Table:
    header: tuple = ()
    rows: tuple = ()
    source_line: int = 0


Block = Union[Heading, Paragraph, ListItem, Blockquote, Rule, CodeBlock, Table]


# --- Layout output ---

@dataclass(frozen=True)
class StyledRun:
    """A piece of a wrapped line sharing one style.

    ``role`` names a theme slot; ``color`` overrides the role's foreground
    (used for syntax highlighted code).
    """
    text: str
    role: str = "text"
    flags: int = 0
    color: Optional[RGB] = None


@dataclass(frozen=True)
class LinkOccurrence:
    """Columns [column_start, column_end) of a wrapped line showing a link."""
    column_start: int
    column_end: int
    link_id: int

    def contains(self, column: int) -> bool:
        return self.column_start <= column < self.column_end


@dataclass(frozen=True)
class WrappedLine:
    """One terminal row of laid out document."""
    runs: tuple = ()
    links: tuple = ()
    block_index: int = 0

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def width(self) -> int:
        return cell_width(self.text)


def blank_line(block_index: int) -> WrappedLine:
    return WrappedLine(runs=(), links=(), block_index=block_index)


def _block_spans(block) -> tuple:
    if isinstance(block, (Heading, Paragraph, ListItem, Blockquote)):
        return block.spans
    return ()


def collect_links(blocks) -> list[str]:
    """Return link urls indexed by link id (document order)."""
    urls: list[str] = []
    for block in blocks:
        for span in _block_spans(block):
            if isinstance(span, Link):
                urls.append(span.url)
    return urls


def block_source_line(block) -> int:
    return getattr(block, "source_line", 0)


__all__ = [
    'StyleFlags', 'RGB',
    'Text', 'Code', 'Link', 'LineBreak', 'InlineSpan',
    'Heading', 'Paragraph', 'ListItem', 'Blockquote', 'Rule', 'CodeBlock', 'Table', 'Block',
    'StyledRun', 'LinkOccurrence', 'WrappedLine', 'blank_line',
    'collect_links', 'block_source_line',
]
