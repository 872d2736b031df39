"""Frame composition: turn application state into styled screen rows.

Pure functions only; painting the rows is the terminal's job. A row is a
list of ``Segment``s whose text fills exactly the terminal width.
"""

from dataclasses import dataclass
from typing import Optional

from .beeline import beeline_level, blend, gradient_color, line_fade
from .model import RGB, StyleFlags, WrappedLine
from .modes import InteractionMode
from .text import cell_width, char_width, clip_to_width, pad_to_width
from .theme import PASTEL, Theme, role_color, role_flags

HELP_TITLE = "MDR HELP"

HELP_LINES = [
    "NAVIGATION                   SEARCH",
    "  ↑/k ↓/j   Line up/down       /         Search",
    "  PgUp PgDn Page up/down       n / N     Next / previous match",
    "  Space Tab Page down          Esc       Clear highlights",
    "  Home End  Top / bottom",
    "",
    "LINKS                        DOCUMENTS",
    "  Enter     Open nearest link  ] / [     Next / previous",
    "  Click     Open link          g         Go to document",
    "                               o         Open file picker",
    "DISPLAY",
    "  b         Toggle BeeLine     q         Quit",
    "  m         Toggle plain mode  h ? F1    This help",
]


@dataclass(frozen=True)
class CellStyle:
    fg: Optional[RGB] = None
    bg: Optional[RGB] = None
    flags: int = 0


PLAIN = CellStyle()


@dataclass(frozen=True)
class Segment:
    text: str
    style: CellStyle = PLAIN


def _merge(segments: list[Segment], text: str, style: CellStyle) -> None:
    if segments and segments[-1].style == style:
        segments[-1] = Segment(segments[-1].text + text, style)
    else:
        segments.append(Segment(text, style))


def _pad(segments: list[Segment], width: int) -> list[Segment]:
    used = sum(cell_width(s.text) for s in segments)
    if used < width:
        _merge(segments, " " * (width - used), PLAIN)
    return segments


def compose_line(line: WrappedLine, width: int, highlights=(), hover_link: Optional[int] = None,
                 beeline: Optional[float] = None, beeline_row: int = 0,
                 theme: Theme = PASTEL) -> list[Segment]:
    """Style one wrapped line.

    Precedence, lowest first: role colour or BeeLine tint, hovered link,
    search match, current search match. The BeeLine tint fades across the
    line, in the direction given by its visible row beeline_row.
    """
    line_width = line.width
    hovered = [occ for occ in line.links if hover_link is not None and occ.link_id == hover_link]

    segments: list[Segment] = []
    column = 0
    for run in line.runs:
        fixed_fg = run.color or role_color(run.role, theme)
        flags = run.flags | role_flags(run.role)
        for ch in run.text:
            w = char_width(ch)
            if column + w > width:
                break
            fg, bg = fixed_fg, None
            if fg is None and beeline is not None:
                fade = line_fade(column, line_width, beeline_row)
                fg = blend(theme.beeline_start, theme.beeline_end, beeline_level(beeline, fade))
            if any(occ.contains(column) for occ in hovered):
                fg, bg = theme.link_hover, theme.link_hover_bg
            for start, end, current in highlights:
                if start <= column < end:
                    if current:
                        fg, bg = theme.search_fg_active, theme.search_bg_active
                    else:
                        fg, bg = theme.search_fg, theme.search_bg
            _merge(segments, ch, CellStyle(fg, bg, flags))
            column += w
    return _pad(segments, width)


def scrollbar_cells(state, theme: Theme = PASTEL) -> list[Segment]:
    """One cell per content row: thumb, track, or blank without a scrollbar."""
    height = state.viewport.height
    geometry = state.viewport.scrollbar_geometry()
    if geometry is None:
        return [Segment(" ") for _ in range(height)]
    cells = []
    for row in range(height):
        if geometry.thumb_start <= row < geometry.thumb_start + geometry.thumb_size:
            cells.append(Segment("█", CellStyle(fg=theme.scrollbar_thumb)))
        else:
            cells.append(Segment("│", CellStyle(fg=theme.scrollbar_track)))
    return cells


def _bar(text: str, width: int, style: CellStyle) -> list[Segment]:
    return [Segment(pad_to_width(clip_to_width(text, width), width), style)]


def title_row(state, theme: Theme = PASTEL) -> list[Segment]:
    return _bar(f" {state.title}", state.width, CellStyle(fg=theme.title, flags=StyleFlags.BOLD))


def status_row(state, theme: Theme = PASTEL) -> list[Segment]:
    right = state.status_right() + " "
    left_width = max(0, state.width - cell_width(right))
    left = pad_to_width(clip_to_width(" " + state.status_left(), left_width), left_width)
    return _bar(left + right, state.width, CellStyle(fg=theme.footer))


def help_rows(height: int, width: int, theme: Theme = PASTEL) -> list[list[Segment]]:
    lines = [(HELP_TITLE, CellStyle(fg=theme.title, flags=StyleFlags.BOLD)), ("", PLAIN)]
    lines += [(text, PLAIN) for text in HELP_LINES]
    lines += [("", PLAIN), ("Press any key to continue", CellStyle(fg=theme.footer))]
    block_width = max(cell_width(text) for text, _ in lines)
    left = max(0, (width - block_width) // 2)
    top = max(0, (height - len(lines)) // 2)
    rows = []
    for y in range(height):
        i = y - top
        text, style = lines[i] if 0 <= i < len(lines) else ("", PLAIN)
        segments = [Segment(" " * left)] if left and text else []
        segments.append(Segment(clip_to_width(text, max(0, width - left)), style))
        rows.append(_pad(segments, width))
    return rows


def _list_rows(header: str, items: list[str], selected: int, height: int, width: int,
               theme: Theme) -> list[list[Segment]]:
    """A header line and a scrolled list keeping the selection visible."""
    rows = [_bar(f" {header}", width, CellStyle(fg=theme.title, flags=StyleFlags.BOLD))]
    visible = max(0, height - 1)
    first = 0
    if visible and selected >= visible:
        first = selected - visible + 1
    for i in range(first, first + visible):
        if i < len(items):
            if i == selected:
                style = CellStyle(fg=theme.overlay_selected_fg, bg=theme.overlay_selected_bg)
            else:
                style = PLAIN
            rows.append(_bar(f"  {items[i]}", width, style))
        else:
            rows.append(_bar("", width, PLAIN))
    return rows[:height]


def picker_rows(picker, height: int, width: int, theme: Theme = PASTEL) -> list[list[Segment]]:
    header = f"Open: {picker.directory}  filter: {picker.query}"
    if picker.error:
        items = [f"({picker.error})"]
    else:
        items = [entry.label for entry in picker.entries]
    return _list_rows(header, items, picker.selected, height, width, theme)


def goto_rows(state, height: int, width: int, theme: Theme = PASTEL) -> list[list[Segment]]:
    items = [f"{i + 1}. {path}" for i, path in enumerate(state.queue_paths)]
    return _list_rows("Go to document", items, state.goto_selected, height, width, theme)


def content_rows(state, theme: Theme = PASTEL) -> list[list[Segment]]:
    """Visible document rows, each including the scrollbar cell."""
    viewport = state.viewport
    height = viewport.height
    mode = state.mode
    if mode == InteractionMode.HELP:
        body = help_rows(height, viewport.width, theme)
    elif mode == InteractionMode.PICKER and state.picker is not None:
        body = picker_rows(state.picker, height, viewport.width, theme)
    elif mode == InteractionMode.GOTO:
        body = goto_rows(state, height, viewport.width, theme)
    else:
        beeline_on = state.beeline_enabled and not state.plain_mode
        body = []
        rows = viewport.visible_rows()
        for i in range(height):
            if i >= len(rows):
                body.append(_pad([], viewport.width))
                continue
            row = rows[i]
            tint = gradient_color(i, height, beeline_on)
            body.append(compose_line(
                state.lines[row], viewport.width,
                highlights=state.search.highlights(row),
                hover_link=state.hover_link,
                beeline=tint,
                beeline_row=i,
                theme=theme,
            ))
    bar = scrollbar_cells(state, theme)
    return [segments + [bar[i]] for i, segments in enumerate(body)]


def compose_frame(state, theme: Theme = PASTEL) -> list[list[Segment]]:
    """All terminal rows: title, content with scrollbar, status."""
    return [title_row(state, theme)] + content_rows(state, theme) + [status_row(state, theme)]
