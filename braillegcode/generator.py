"""High-level orchestration of one braille generation pass."""

from __future__ import annotations

import logging
import pathlib
import sys
import time
from dataclasses import dataclass, field
from typing import List

from .errors import BraillegcodeError, OverwriteRefusedError
from .layout import layout_cells
from .structures import DeviceGeometry, LanguageDefinition, PlacedCell, PlacedDot
from .toolpath import Instruction, emit_toolpath, to_gcode
from .transliterator import Transliteration

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Preview dots and toolpath produced by one pass."""

    cells: List[PlacedCell]
    instructions: List[Instruction]
    overflowed: bool = False
    line_pitch: float = 0.0
    top: float = 0.0

    @property
    def preview_dots(self) -> List[PlacedDot]:
        return [dot for placed in self.cells for dot in placed.dots]

    @property
    def gcode(self) -> str:
        return to_gcode(self.instructions)

    @property
    def braille(self) -> str:
        """Unicode braille of the placed cells, one line per page row."""

        rows: List[str] = []
        for placed in self.cells:
            row = round((placed.y - self.top) / self.line_pitch) if self.line_pitch else 0
            while len(rows) <= row:
                rows.append("")
            rows[row] += placed.cell.unicode
        return "\n".join(rows)


def generate(
    text: str,
    language: LanguageDefinition,
    geometry: DeviceGeometry,
) -> GenerationResult:
    """Translate, lay out and emit the toolpath for a text.

    Raises UnknownCharacter or InvalidGeometry before any result exists.
    """

    layout = layout_cells(Transliteration(text, language), geometry, language)
    instructions = emit_toolpath(layout.cells, geometry)
    logger.debug(
        "Generated %d cells, %d dots, %d instructions.",
        len(layout.cells),
        len(layout.dots),
        len(instructions),
    )
    return GenerationResult(
        cells=layout.cells,
        instructions=instructions,
        overflowed=layout.overflowed,
        line_pitch=geometry.line_pitch(language.line_rows),
        top=geometry.margin_height,
    )


@dataclass
class GenerationSummary:
    """Report returned after writing a toolpath."""

    input_path: pathlib.Path | None
    output_path: pathlib.Path | None
    language: str
    total_characters: int
    total_cells: int
    total_dots: int
    total_instructions: int
    overflowed: bool
    center_origin: bool
    elapsed_seconds: float
    braille: str = ""
    gcode: str = ""
    notes: List[str] = field(default_factory=list)


class GenerationRunner:
    """Coordinates reading the text, generating and writing the G-code."""

    def __init__(
        self,
        *,
        text: str,
        language: LanguageDefinition,
        geometry: DeviceGeometry,
        input_path: pathlib.Path | None = None,
        output_path: pathlib.Path | None = None,
        verbose: bool = False,
    ) -> None:
        self.text = text
        self.language = language
        self.geometry = geometry
        self.input_path = input_path
        self.output_path = output_path
        self.verbose = verbose

    @classmethod
    def from_file(
        cls,
        input_path: pathlib.Path,
        **kwargs,
    ) -> "GenerationRunner":
        try:
            text = input_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise BraillegcodeError(
                f"Input file {input_path} is not valid UTF-8 text."
            ) from exc
        return cls(text=text, input_path=input_path, **kwargs)

    def run(self) -> GenerationSummary:
        start_time = time.time()

        result = generate(self.text, self.language, self.geometry)
        gcode = result.gcode
        if self.verbose:
            print(
                f"Laid out {len(result.cells)} cells "
                f"({len(result.preview_dots)} dots) using '{self.language.name}'.",
                file=sys.stderr,
            )

        if self.output_path is not None:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            with self.output_path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(gcode)
            logger.debug("Wrote %d bytes of G-code to %s.", len(gcode), self.output_path)

        notes: List[str] = []
        if result.overflowed:
            notes.append(
                "The page is full: layout stopped at the bottom margin and "
                "nothing below it was embossed."
            )

        return GenerationSummary(
            input_path=self.input_path,
            output_path=self.output_path,
            language=self.language.name,
            total_characters=len(self.text),
            total_cells=len(result.cells),
            total_dots=len(result.preview_dots),
            total_instructions=len(result.instructions),
            overflowed=result.overflowed,
            center_origin=self.geometry.center_origin,
            elapsed_seconds=time.time() - start_time,
            braille=result.braille,
            gcode=gcode,
            notes=notes,
        )


def validate_paths(
    input_path: pathlib.Path | None,
    output_path: pathlib.Path,
    force_overwrite: bool,
) -> None:
    """Validate input/output path combinations and overwrite policy."""

    if input_path is not None:
        if not input_path.exists():
            raise FileNotFoundError(
                "Input file not found. Please provide a readable text file."
            )
        if not input_path.is_file():
            raise BraillegcodeError("Input path must be a file.")
        if input_path.resolve() == output_path.resolve():
            raise OverwriteRefusedError(
                "The output path matches the input text. Refusing to overwrite the source file."
            )

    if output_path.exists() and not force_overwrite:
        raise OverwriteRefusedError(
            "The output file already exists. Rename it or use the overwrite flag."
        )
