"""Tests for the BeeLine gradient."""

from mdr.beeline import beeline_level, blend, gradient_color, line_fade


def test_disabled_gives_no_colour():
    assert gradient_color(0, 10, False) is None
    assert gradient_color(3, 0, True) is None


def test_single_row():
    assert gradient_color(0, 1, True) == 0.0


def test_gradient_runs_from_zero_to_one():
    values = [gradient_color(i, 5, True) for i in range(5)]
    assert values == [0.0, 0.25, 0.5, 0.75, 1.0]


def test_out_of_range_rows_are_clamped():
    assert gradient_color(-2, 5, True) == 0.0
    assert gradient_color(9, 5, True) == 1.0


def test_blend():
    start, end = (170, 200, 230), (230, 170, 200)
    assert blend(start, end, 0.0) == start
    assert blend(start, end, 1.0) == end
    assert blend(start, end, 0.5) == (200, 185, 215)


def test_line_fade_runs_left_to_right_on_even_rows():
    assert [line_fade(c, 5, 0) for c in range(5)] == [0.0, 0.25, 0.5, 0.75, 1.0]


def test_line_fade_reverses_on_odd_rows():
    assert [line_fade(c, 5, 3) for c in range(5)] == [1.0, 0.75, 0.5, 0.25, 0.0]


def test_line_fade_of_a_single_cell():
    assert line_fade(0, 1, 0) == 0.0
    assert line_fade(0, 0, 1) == 1.0


def test_beeline_level_combines_row_and_fade():
    assert beeline_level(0.0, 0.0) == 0.0
    assert beeline_level(1.0, 1.0) == 1.0
    assert beeline_level(0.5, 0.0) == 0.25
