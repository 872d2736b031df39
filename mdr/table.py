"""Table layout: column width fitting and vertical cell wrapping."""

from .constants import ViewerConstants
from .model import StyledRun, StyleFlags, WrappedLine
from .text import cell_width, char_width, clip_to_width, pad_to_width, sanitize, wrap_text


def normalize_row(row, columns: int) -> list[str]:
    """Pad with empty cells or truncate so the row has exactly `columns` cells."""
    cells = [sanitize(str(cell).replace("\n", " ")).strip() for cell in list(row)[:columns]]
    return cells + [""] * (columns - len(cells))


def fit_column_widths(natural: list[int], available: int,
                      minimum: list[int] | None = None) -> list[int]:
    """Assign column widths that fit in `available` columns.

    Natural widths are kept when they fit. Otherwise every column shrinks in
    proportion to its natural width, but not below a soft minimum (or the
    hard minimum when even the soft minimums do not fit). `minimum` raises
    the floor of individual columns, e.g. to the widest character they hold.
    Columns left over after rounding go to the columns furthest below their
    natural width.
    """
    hard = [max(ViewerConstants.TABLE_HARD_MIN_COLUMN, m) for m in (minimum or [0] * len(natural))]
    if sum(natural) <= available:
        return list(natural)

    soft = [max(min(w, ViewerConstants.TABLE_SOFT_MIN_COLUMN), h) for w, h in zip(natural, hard)]
    if sum(soft) <= available:
        floor = soft
    else:
        floor = hard
    if sum(floor) >= available:
        return floor

    desired = sum(natural)
    widths = [max(f, w * available // desired) for w, f in zip(natural, floor)]

    # Floors can push the total over budget; take back from the widest columns
    while sum(widths) > available:
        idx = max(range(len(widths)), key=lambda i: widths[i] - floor[i])
        if widths[idx] <= floor[idx]:
            break
        widths[idx] -= 1

    while sum(widths) < available:
        idx = max(range(len(widths)), key=lambda i: natural[i] - widths[i])
        if natural[idx] <= widths[idx]:
            break
        widths[idx] += 1
    return widths


def _clip_runs(runs: list[StyledRun], width: int) -> list[StyledRun]:
    """Clip runs to width, ending with the clip indicator."""
    room = width - cell_width(ViewerConstants.CLIP_INDICATOR)
    clipped: list[StyledRun] = []
    for run in runs:
        if room <= 0:
            break
        kept = clip_to_width(run.text, room)
        if kept:
            clipped.append(StyledRun(kept, run.role, run.flags, run.color))
        room -= cell_width(kept)
    clipped.append(StyledRun(ViewerConstants.CLIP_INDICATOR, "clip"))
    return clipped


class _TableFormat:
    """Border style of a table: padded '| a | b |' or compact '|a|b|'."""

    def __init__(self, padded: bool):
        self.padded = padded

    def overhead(self, columns: int) -> int:
        return 1 + (3 if self.padded else 1) * columns

    def cell(self, text: str, width: int) -> str:
        body = pad_to_width(clip_to_width(text, width), width)
        return f" {body} " if self.padded else body

    def separator(self, widths: list[int]) -> str:
        if self.padded:
            return "|" + "".join(" " + "-" * w + " |" for w in widths)
        return "|" + "".join("-" * w + "|" for w in widths)


def _row_lines(cells: list[str], widths: list[int], fmt: _TableFormat, role: str, flags: int,
               block_index: int, clip_width: int | None) -> list[WrappedLine]:
    wrapped = [wrap_text(cell, w) for cell, w in zip(cells, widths)]
    height = max(len(parts) for parts in wrapped)
    lines = []
    for k in range(height):
        runs = [StyledRun("|", "table_border")]
        for parts, w in zip(wrapped, widths):
            text = parts[k] if k < len(parts) else ""
            runs.append(StyledRun(fmt.cell(text, w), role, flags))
            runs.append(StyledRun("|", "table_border"))
        if clip_width is not None:
            runs = _clip_runs(runs, clip_width)
        lines.append(WrappedLine(runs=tuple(runs), block_index=block_index))
    return lines


def layout_table(header, rows, width: int, block_index: int = 0) -> list[WrappedLine]:
    """Lay out a table no wider than width.

    Column count is the header length; body rows are padded or truncated to
    it. Cells too wide for their column wrap onto extra sub-rows so that
    every row stays a rectangle. The header is always rendered, followed by
    a separator line.
    """
    columns = len(header)
    if columns == 0:
        return []
    head = normalize_row(header, columns)
    body = [normalize_row(row, columns) for row in rows]

    natural = [max(1, *(cell_width(row[i]) for row in [head] + body)) for i in range(columns)]
    # A column is never narrower than its widest character
    minimum = [max([1] + [char_width(ch) for row in [head] + body for ch in row[i]])
               for i in range(columns)]

    fmt = _TableFormat(padded=True)
    clip_width = None
    if width - fmt.overhead(columns) < sum(minimum):
        fmt = _TableFormat(padded=False)
        if width - fmt.overhead(columns) < sum(minimum):
            clip_width = width
    available = max(sum(minimum), width - fmt.overhead(columns))
    widths = fit_column_widths(natural, available, minimum)

    lines = _row_lines(head, widths, fmt, "table_header", StyleFlags.BOLD, block_index, clip_width)
    separator = [StyledRun(fmt.separator(widths), "table_border")]
    if clip_width is not None:
        separator = _clip_runs(separator, clip_width)
    lines.append(WrappedLine(runs=tuple(separator), block_index=block_index))
    for row in body:
        lines.extend(_row_lines(row, widths, fmt, "text", 0, block_index, clip_width))
    return lines
