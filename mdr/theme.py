"""Pastel colour theme and the role -> style table."""

from dataclasses import dataclass
from typing import Optional

from .model import RGB, StyleFlags


@dataclass(frozen=True)
class Theme:
    border: RGB = (184, 193, 236)
    title: RGB = (132, 140, 200)
    footer: RGB = (160, 168, 210)
    heading: RGB = (140, 180, 220)
    list_bullet: RGB = (152, 210, 190)
    code: RGB = (240, 200, 170)
    quote: RGB = (190, 170, 220)
    rule: RGB = (190, 190, 200)
    link: RGB = (130, 190, 240)
    link_hover: RGB = (250, 250, 250)
    link_hover_bg: RGB = (90, 120, 170)
    scrollbar_thumb: RGB = (150, 190, 220)
    scrollbar_track: RGB = (210, 220, 230)
    beeline_start: RGB = (170, 200, 230)
    beeline_end: RGB = (230, 170, 200)
    search_bg: RGB = (255, 230, 170)
    search_fg: RGB = (60, 60, 60)
    search_bg_active: RGB = (255, 200, 120)
    search_fg_active: RGB = (40, 40, 40)
    overlay_selected_bg: RGB = (150, 190, 220)
    overlay_selected_fg: RGB = (30, 30, 40)


PASTEL = Theme()


def role_color(role: str, theme: Theme = PASTEL) -> Optional[RGB]:
    """Foreground for a run role; None means the terminal default (or BeeLine)."""
    return {
        "title": theme.title,
        "heading": theme.heading,
        "bullet": theme.list_bullet,
        "quote": theme.quote,
        "code": theme.code,
        "link": theme.link,
        "rule": theme.rule,
        "table_border": theme.border,
        "table_header": theme.heading,
        "clip": theme.rule,
    }.get(role)


def role_flags(role: str) -> int:
    """Attributes every run of a role carries in addition to its own flags."""
    if role == "clip":
        return StyleFlags.DIM
    return 0
