"""Tests for table layout and column fitting."""

from mdr.model import StyleFlags
from mdr.table import fit_column_widths, layout_table, normalize_row


def test_short_rows_are_padded_with_empty_cells():
    lines = layout_table(["A", "B", "C"], [["1", "2"]], 40)
    assert [line.text for line in lines] == [
        "| A | B | C |",
        "| - | - | - |",
        "| 1 | 2 |   |",
    ]


def test_long_rows_are_truncated_to_the_header():
    lines = layout_table(["A", "B", "C"], [["1", "2", "3", "4"]], 40)
    assert lines[-1].text == "| 1 | 2 | 3 |"


def test_header_is_bold():
    lines = layout_table(["Name"], [], 40)
    header_runs = [run for run in lines[0].runs if run.role == "table_header"]
    assert header_runs
    assert all(run.flags == StyleFlags.BOLD for run in header_runs)
    # Header and separator even without body rows
    assert len(lines) == 2


def test_empty_header_gives_no_lines():
    assert layout_table([], [["x"]], 40) == []


def test_normalize_row():
    assert normalize_row(["a"], 3) == ["a", "", ""]
    assert normalize_row(["a", "b", "c"], 2) == ["a", "b"]
    assert normalize_row([" a\nb "], 1) == ["a b"]


def test_natural_widths_kept_when_they_fit():
    assert fit_column_widths([5, 5], 20) == [5, 5]


def test_proportional_shrink():
    assert fit_column_widths([10, 30], 20) == [5, 15]


def test_hard_minimum_when_soft_minimums_do_not_fit():
    widths = fit_column_widths([10, 10, 10], 5)
    assert sum(widths) == 5
    assert all(w >= 1 for w in widths)


def test_narrow_table_wraps_cells_vertically():
    lines = layout_table(["Name", "Description"], [["x", "a fairly long description"]], 20)
    assert len(lines) > 3
    for line in lines:
        assert line.width <= 20
        assert line.text.startswith("|")
        assert line.text.endswith("|")
        assert line.text.count("|") == 3
    body = " ".join(line.text.split("|")[2].strip() for line in lines[2:])
    assert "fairly" in body


def test_compact_borders_when_padding_does_not_fit():
    lines = layout_table(["A", "B", "C"], [], 8)
    assert lines[0].text == "|A|B|C|"
    assert lines[1].text == "|-|-|-|"


def test_rows_are_clipped_when_nothing_else_fits():
    lines = layout_table(["A", "B", "C"], [], 5)
    assert lines[0].text == "|A|B…"
    assert lines[0].runs[-1].role == "clip"
    assert all(line.width <= 5 for line in lines)


def test_minimum_raises_a_column_floor():
    assert fit_column_widths([2, 10], 3, [2, 1]) == [2, 1]
    widths = fit_column_widths([10, 10, 10], 5, [2, 1, 1])
    assert sum(widths) == 5
    assert widths[0] >= 2


def test_wide_characters_survive_a_squeezed_column():
    lines = layout_table(["A", "B"], [["中", "xxxxxxxxxx"]], 6)
    assert lines[2].text == "|中|x|"
    assert all(line.width <= 6 for line in lines)
    body = "".join(line.text.split("|")[1] for line in lines[2:])
    assert "中" in body


def test_empty_column_does_not_break_width_fitting():
    lines = layout_table(["A", ""], [["x", ""]], 40)
    assert lines[0].text == "| A |   |"
