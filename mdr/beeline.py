"""BeeLine gradient: per-row colour steps that help the eye track lines."""

from typing import Optional

from .model import RGB


def gradient_color(visible_row_index: int, visible_row_count: int, enabled: bool) -> Optional[float]:
    """Intensity in [0, 1] for a row of the visible window, or None when off.

    Depends only on the row's position in the window, so the pattern stays
    put while the document scrolls underneath it.
    """
    if not enabled or visible_row_count <= 0:
        return None
    if visible_row_count == 1:
        return 0.0
    index = max(0, min(visible_row_index, visible_row_count - 1))
    return index / (visible_row_count - 1)


def line_fade(column: int, line_width: int, visible_row_index: int) -> float:
    """Position in [0, 1] along a line, running right to left on odd rows.

    Alternating the direction carries the eye from the end of one line to
    the start of the next.
    """
    if line_width <= 1:
        t = 0.0
    else:
        t = max(0, min(column, line_width - 1)) / (line_width - 1)
    return t if visible_row_index % 2 == 0 else 1.0 - t


def beeline_level(row_intensity: float, fade: float) -> float:
    """Blend position for one cell: the row's step shifts the line's fade."""
    return (row_intensity + fade) / 2


def _lerp_channel(a: int, b: int, t: float) -> int:
    t = max(0.0, min(1.0, t))
    return max(0, min(255, round(a + (b - a) * t)))


def blend(start: RGB, end: RGB, t: float) -> RGB:
    """Linear interpolation between two colours."""
    return (
        _lerp_channel(start[0], end[0], t),
        _lerp_channel(start[1], end[1], t),
        _lerp_channel(start[2], end[2], t),
    )
