"""Core data structures for the braille G-code generator."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import FrozenSet, List, Mapping, Tuple, Union

from .errors import InvalidGeometry, UnknownCharacter

BRAILLE_BASE = 0x2800

GridPosition = Tuple[int, int]


@dataclass(frozen=True)
class LanguageDefinition:
    """One braille variant: cell layout, digit escape and character table."""

    name: str
    dot_map: Mapping[GridPosition, int]
    number_prefix: FrozenSet[int]
    char_to_dots: Mapping[str, FrozenSet[int]]

    @property
    def rows(self) -> int:
        return max(row for _, row in self.dot_map) + 1

    @property
    def is_eight_dot(self) -> bool:
        return self.rows == 4

    @property
    def applies_capital_rule(self) -> bool:
        return not self.is_eight_dot

    @property
    def line_rows(self) -> int:
        """Rows counted in the line pitch; 8-dot lines are deliberately tighter."""

        return 2 if self.is_eight_dot else 3

    def lookup(self, char: str) -> FrozenSet[int]:
        """Return the dots of a character, falling back to its lowercase form."""

        dots = self.char_to_dots.get(char)
        if dots is None:
            dots = self.char_to_dots.get(char.lower())
        if dots is None:
            raise UnknownCharacter(char, self.name)
        return dots


@dataclass(frozen=True)
class DeviceGeometry:
    """Sheet layout and embosser motion settings for one generation pass."""

    paper_width: float = 170.0
    paper_height: float = 125.0
    margin_width: float = 20.0
    margin_height: float = 20.0
    letter_width: float = 2.54
    letter_padding: float = 3.75
    line_padding: float = 5.3
    dot_radius: float = 1.25
    head_up_position: float = 10.0
    head_down_position: float = -2.0
    speed: float = 5000.0
    center_origin: bool = False
    language: str = "6 dots"
    rapid_travel: bool = True

    NON_NEGATIVE = (
        "paper_width",
        "paper_height",
        "margin_width",
        "margin_height",
        "letter_width",
        "letter_padding",
        "line_padding",
        "dot_radius",
        "speed",
    )

    def validate(self) -> None:
        problems: List[str] = []
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            if not math.isfinite(value):
                problems.append(f"{item.name} must be a finite number (got {value}).")
            elif item.name in self.NON_NEGATIVE and value < 0:
                problems.append(f"{item.name} must not be negative (got {value}).")
        if problems:
            raise InvalidGeometry(" ".join(problems))

    def line_pitch(self, line_rows: int) -> float:
        return line_rows * self.letter_width + self.line_padding


@dataclass(frozen=True)
class Cell:
    """A braille cell produced by the transliterator."""

    char: str
    dots: FrozenSet[int]
    is_escape: bool = False

    @property
    def unicode(self) -> str:
        bits = sum(1 << (dot - 1) for dot in self.dots)
        return chr(BRAILLE_BASE + bits)


@dataclass(frozen=True)
class LineBreak:
    """Marks a line break in the source text."""


LINE_BREAK = LineBreak()

Token = Union[Cell, LineBreak]


@dataclass(frozen=True)
class PlacedDot:
    """A raised dot in page space (origin top-left, Y downward)."""

    x: float
    y: float
    is_cell_origin: bool = False


@dataclass
class PlacedCell:
    """A cell anchored on the page together with its active dots."""

    cell: Cell
    x: float
    y: float
    dots: List[PlacedDot] = field(default_factory=list)
