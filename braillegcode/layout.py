"""Page layout of braille cells with line wrap and page overflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .structures import (
    Cell,
    DeviceGeometry,
    LanguageDefinition,
    LineBreak,
    PlacedCell,
    PlacedDot,
    Token,
)

logger = logging.getLogger(__name__)


@dataclass
class Layout:
    """Cells placed on one sheet.

    ``overflowed`` is set when the cursor moved past the bottom margin and
    the pass stopped there; it is a truncation, not an error.
    """

    cells: List[PlacedCell] = field(default_factory=list)
    overflowed: bool = False

    @property
    def dots(self) -> List[PlacedDot]:
        return [dot for placed in self.cells for dot in placed.dots]


def place_cell(
    cell: Cell,
    x: float,
    y: float,
    letter_width: float,
    language: LanguageDefinition,
) -> PlacedCell:
    """Anchor a cell at (x, y) and place its active dots in row-major order."""

    placed = PlacedCell(cell=cell, x=x, y=y)
    for row in range(language.rows):
        for col in range(2):
            if language.dot_map[(col, row)] in cell.dots:
                placed.dots.append(
                    PlacedDot(
                        x=x + col * letter_width,
                        y=y + row * letter_width,
                        is_cell_origin=col == 0 and row == 0,
                    )
                )
    return placed


def layout_cells(
    tokens: Iterable[Token],
    geometry: DeviceGeometry,
    language: LanguageDefinition,
) -> Layout:
    """Place a cell stream on the sheet, stopping once the page is full."""

    geometry.validate()
    layout = Layout()

    pitch = geometry.line_pitch(language.line_rows)
    advance = geometry.letter_width + geometry.letter_padding
    right = geometry.paper_width - geometry.margin_width
    bottom = geometry.paper_height - geometry.margin_height
    x, y = geometry.margin_width, geometry.margin_height

    if (
        y + pitch > bottom
        or x + geometry.letter_width + geometry.dot_radius > right
    ):
        logger.debug("Sheet is too small for a single cell; nothing is laid out.")
        layout.overflowed = True
        return layout

    for token in tokens:
        if isinstance(token, LineBreak):
            x, y = geometry.margin_width, y + pitch
            if y > bottom:
                break
            continue

        layout.cells.append(place_cell(token, x, y, geometry.letter_width, language))

        x += advance
        if x + geometry.letter_width + geometry.dot_radius > right:
            x, y = geometry.margin_width, y + pitch
            logger.debug("Line full, wrapping to y=%s.", y)
        if y > bottom:
            break
    else:
        return layout

    logger.debug(
        "Page full after %d cells; layout stopped.", len(layout.cells)
    )
    layout.overflowed = True
    return layout
