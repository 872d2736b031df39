"""Constants and configuration for the mdr viewer."""

class ViewerConstants:
    """Central configuration constants for the viewer."""

    # Layout
    MIN_LAYOUT_WIDTH = 4  # Narrowest content width the layout engine accepts
    CODE_INDENT = 4  # Indent for code block rows (shrinks on narrow widths)
    TAB_SIZE = 4  # Tab expansion inside code blocks
    LIST_INDENT = 2  # Extra indent per nested list level
    BULLET = "- "
    QUOTE_PREFIX = "> "
    RULE_CHAR = "─"
    CLIP_INDICATOR = "…"  # Marks a hard-clipped code or table row
    REPLACEMENT_CHAR = "�"  # Stands in for control characters

    # Tables
    TABLE_SOFT_MIN_COLUMN = 3  # Preferred minimum column width when shrinking
    TABLE_HARD_MIN_COLUMN = 1  # No column is ever narrower than this

    # Scrolling
    WHEEL_STEP = 3  # Rows per mouse wheel notch

    # Screen layout
    TITLE_ROWS = 1  # Title line above the content
    STATUS_ROWS = 1  # Status line below the content
    SCROLLBAR_COLUMNS = 1  # Scrollbar column right of the content

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Markdown file extensions recognised by discovery and the picker
    MARKDOWN_EXTENSIONS = (".md", ".markdown", ".mdown", ".mdx")

    # Status messages
    TERMINAL_TOO_SMALL_MESSAGE = "Terminal too small! Need at least {} columns and {} rows."
    CURRENT_SIZE_MESSAGE = "Current size: {} columns, {} rows."
    STATUS_HINT = "Press h for commands • / search • q quit"
    NO_MATCHES_MESSAGE = "no matches"
    USAGE = "Usage: mdr [--no-beeline] <path-to-markdown> [more paths or directories]"
