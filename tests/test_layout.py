import dataclasses
import math

import pytest

from braillegcode.errors import InvalidGeometry
from braillegcode.layout import layout_cells, place_cell
from braillegcode.structures import Cell, PlacedDot
from braillegcode.transliterator import transliterate

PITCH_6 = 3 * 2.54 + 5.3
PITCH_8 = 2 * 2.54 + 5.3
ADVANCE = 2.54 + 3.75


def anchors(layout):
    return [(placed.x, placed.y) for placed in layout.cells]


def test_digit_cells_are_anchored_side_by_side(six_dot, geometry):
    layout = layout_cells(transliterate("5", six_dot), geometry, six_dot)

    assert anchors(layout) == [
        (20, 20),
        (pytest.approx(20 + ADVANCE), 20),
    ]
    assert not layout.overflowed


def test_dots_are_row_major_and_flag_the_origin(six_dot):
    placed = place_cell(Cell("b", frozenset({1, 2})), 20, 20, 2.54, six_dot)

    assert placed.dots == [
        PlacedDot(20, 20, is_cell_origin=True),
        PlacedDot(20, 20 + 2.54, is_cell_origin=False),
    ]


def test_cell_without_top_left_dot_has_no_origin_dot(six_dot):
    placed = place_cell(Cell("i", frozenset({2, 4})), 20, 20, 2.54, six_dot)

    assert (placed.x, placed.y) == (20, 20)
    assert placed.dots == [
        PlacedDot(20 + 2.54, 20),
        PlacedDot(20, 20 + 2.54),
    ]
    assert not any(dot.is_cell_origin for dot in placed.dots)


def test_eight_dot_cell_uses_fourth_row(eight_dot):
    placed = place_cell(Cell("A", frozenset({1, 7})), 0, 0, 2.0, eight_dot)

    assert placed.dots == [
        PlacedDot(0, 0, is_cell_origin=True),
        PlacedDot(0, 6.0),
    ]


def test_space_cell_is_anchored_without_dots(six_dot, geometry):
    layout = layout_cells(transliterate("a b", six_dot), geometry, six_dot)

    assert len(layout.cells) == 3
    assert layout.cells[1].dots == []
    assert layout.cells[2].x == pytest.approx(20 + 2 * ADVANCE)


def test_line_break_moves_to_next_line(six_dot, geometry):
    layout = layout_cells(transliterate("ab\nc", six_dot), geometry, six_dot)

    assert anchors(layout)[2] == (20, pytest.approx(20 + PITCH_6))


def test_eight_dot_lines_are_more_compact(eight_dot, geometry):
    geometry = dataclasses.replace(geometry, language="8 dots")
    layout = layout_cells(transliterate("a\nb", eight_dot), geometry, eight_dot)

    assert anchors(layout)[1] == (20, pytest.approx(20 + PITCH_8))


def test_long_line_wraps(six_dot, geometry):
    # Three cells fit between margins on a 60 mm wide sheet.
    narrow = dataclasses.replace(geometry, paper_width=60)
    layout = layout_cells(transliterate("abcd", six_dot), narrow, six_dot)

    assert [y for _, y in anchors(layout)] == [
        20,
        20,
        20,
        pytest.approx(20 + PITCH_6),
    ]
    assert anchors(layout)[3][0] == 20


def test_page_overflow_truncates_silently(six_dot, geometry):
    short = dataclasses.replace(geometry, paper_height=60)
    layout = layout_cells(transliterate("a\nb\nc\nd", six_dot), short, six_dot)

    assert [placed.cell.char for placed in layout.cells] == ["a", "b"]
    assert layout.overflowed


def test_wrap_past_the_bottom_margin_stops_the_page(six_dot, geometry):
    small = dataclasses.replace(geometry, paper_width=60, paper_height=60)
    layout = layout_cells(transliterate("abcdefghij", six_dot), small, six_dot)

    assert [placed.cell.char for placed in layout.cells] == list("abcdef")
    assert [y for _, y in anchors(layout)] == [
        20,
        20,
        20,
        pytest.approx(20 + PITCH_6),
        pytest.approx(20 + PITCH_6),
        pytest.approx(20 + PITCH_6),
    ]
    assert layout.overflowed


def test_truncation_does_not_read_past_the_page(six_dot, geometry):
    short = dataclasses.replace(geometry, paper_height=60)

    layout = layout_cells(transliterate("a\nb\nc€", six_dot), short, six_dot)

    assert len(layout.cells) == 2


def test_sheet_smaller_than_one_line_gives_nothing(six_dot, geometry):
    tiny = dataclasses.replace(geometry, paper_height=20 + 20 + PITCH_6 - 1)
    layout = layout_cells(transliterate("abc", six_dot), tiny, six_dot)

    assert layout.cells == []
    assert layout.dots == []
    assert layout.overflowed


def test_sheet_narrower_than_one_cell_gives_nothing(six_dot, geometry):
    tiny = dataclasses.replace(geometry, paper_width=42)
    layout = layout_cells(transliterate("abc", six_dot), tiny, six_dot)

    assert layout.cells == []


def test_empty_text(six_dot, geometry):
    layout = layout_cells(transliterate("", six_dot), geometry, six_dot)

    assert layout.cells == []
    assert not layout.overflowed


@pytest.mark.parametrize(
    "change",
    [
        {"paper_height": -1},
        {"margin_width": -5},
        {"letter_width": math.nan},
        {"paper_width": math.inf},
        {"speed": -100},
    ],
)
def test_invalid_geometry_is_rejected(six_dot, geometry, change):
    bad = dataclasses.replace(geometry, **change)

    with pytest.raises(InvalidGeometry):
        layout_cells(transliterate("a", six_dot), bad, six_dot)


def test_negative_head_positions_are_allowed(six_dot, geometry):
    layout = layout_cells(
        transliterate("a", six_dot),
        dataclasses.replace(geometry, head_up_position=-1, head_down_position=-5),
        six_dot,
    )

    assert len(layout.cells) == 1
