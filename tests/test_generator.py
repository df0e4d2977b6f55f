import dataclasses

import pytest

from braillegcode.errors import InvalidGeometry, OverwriteRefusedError, UnknownCharacter
from braillegcode.generator import GenerationRunner, generate, validate_paths
from braillegcode.toolpath import MoveLinear


def test_generate_preview_and_instructions(six_dot, geometry):
    result = generate("Ab", six_dot, geometry)

    assert [placed.cell.dots for placed in result.cells] == [
        frozenset({4, 6}),
        frozenset({1}),
        frozenset({1, 2}),
    ]
    assert len(result.preview_dots) == 5
    assert result.gcode.startswith("G90;\r\nG1 F5000;\r\nG1 Z10;\r\n")
    assert result.gcode.count("G1 Z-2;") == 5
    assert not result.overflowed


def test_generate_braille_preview(six_dot, geometry):
    result = generate("ab\nc", six_dot, geometry)

    assert result.braille == "⠁⠃\n⠉"


def test_braille_preview_keeps_blank_rows(six_dot, geometry):
    assert generate("a\n\nb", six_dot, geometry).braille == "⠁\n\n⠃"
    assert generate("\na", six_dot, geometry).braille == "\n⠁"


def test_unknown_character_produces_nothing(six_dot, geometry):
    with pytest.raises(UnknownCharacter):
        generate("abc{", six_dot, geometry)


def test_invalid_geometry(six_dot, geometry):
    with pytest.raises(InvalidGeometry):
        generate("a", six_dot, dataclasses.replace(geometry, paper_width=float("nan")))


def test_overflow_is_reported_not_raised(six_dot, geometry):
    short = dataclasses.replace(geometry, paper_height=60)

    result = generate("a\nb\nc", six_dot, short)

    assert result.overflowed
    assert len(result.cells) == 2


def test_generation_passes_are_independent(six_dot, geometry):
    first = generate("1", six_dot, geometry)
    second = generate("1", six_dot, geometry)

    assert first.instructions == second.instructions
    assert len(first.cells) == 2


def test_runner_writes_crlf_gcode(tmp_path, six_dot, geometry):
    source = tmp_path / "note.txt"
    source.write_text("Hi 2", encoding="utf-8")
    output = tmp_path / "out" / "note.gcode"

    summary = GenerationRunner.from_file(
        source,
        language=six_dot,
        geometry=geometry,
        output_path=output,
    ).run()

    data = output.read_bytes()
    assert data.startswith(b"G90;\r\nG1 F5000;\r\n")
    assert b"\n" not in data.replace(b"\r\n", b"")
    assert data.decode("utf-8") == summary.gcode
    assert summary.total_characters == 4
    # capital sign, h, i, space, number prefix, 2
    assert summary.total_cells == 6
    assert summary.notes == []


def test_runner_without_output_only_returns_gcode(six_dot, geometry):
    summary = GenerationRunner(text="a", language=six_dot, geometry=geometry).run()

    assert summary.output_path is None
    assert "G0 X150 Y105;" in summary.gcode


def test_runner_notes_overflow(six_dot, geometry):
    short = dataclasses.replace(geometry, paper_height=60)

    summary = GenerationRunner(text="a\nb\nc", language=six_dot, geometry=short).run()

    assert summary.overflowed
    assert summary.notes


def test_overflow_note_does_not_claim_text_was_lost(six_dot, geometry):
    short = dataclasses.replace(geometry, paper_height=60)

    summary = GenerationRunner(text="a\nb\n", language=six_dot, geometry=short).run()

    assert summary.total_cells == 2
    assert summary.notes == [
        "The page is full: layout stopped at the bottom margin and "
        "nothing below it was embossed."
    ]
    assert not any("not laid out" in note for note in summary.notes)


def test_runner_uses_center_origin(six_dot, geometry):
    delta = dataclasses.replace(geometry, center_origin=True)

    summary = GenerationRunner(text="a", language=six_dot, geometry=delta).run()

    assert summary.center_origin
    assert "G0 X65 Y42.5;" in summary.gcode


def test_validate_paths(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("a", encoding="utf-8")
    existing = tmp_path / "out.gcode"
    existing.write_text("", encoding="utf-8")

    validate_paths(source, tmp_path / "new.gcode", force_overwrite=False)
    validate_paths(source, existing, force_overwrite=True)
    validate_paths(None, tmp_path / "new.gcode", force_overwrite=False)

    with pytest.raises(OverwriteRefusedError):
        validate_paths(source, existing, force_overwrite=False)
    with pytest.raises(OverwriteRefusedError):
        validate_paths(source, source, force_overwrite=True)
    with pytest.raises(FileNotFoundError):
        validate_paths(tmp_path / "missing.txt", tmp_path / "new.gcode", force_overwrite=False)


def test_instruction_stream_is_ordered(six_dot, geometry):
    result = generate("ab", six_dot, geometry)

    anchors = [
        item.x
        for item in result.instructions
        if isinstance(item, MoveLinear) and item.x is not None
    ]
    assert anchors == sorted(anchors, reverse=True)
