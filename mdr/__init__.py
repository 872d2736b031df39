"""mdr - a terminal markdown viewer."""

from .layout import layout, plain_layout
from .links import LinkIndex
from .parser import Document, parse_markdown
from .search import SearchMatch, SearchState, search
from .table import layout_table
from .viewport import ScrollbarGeometry, Viewport

__all__ = [
    'layout',
    'plain_layout',
    'layout_table',
    'LinkIndex',
    'Document',
    'parse_markdown',
    'search',
    'SearchMatch',
    'SearchState',
    'Viewport',
    'ScrollbarGeometry',
]
