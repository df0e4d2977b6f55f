"""Command line interface for the braille G-code generator."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import pathlib
import sys
from typing import Iterable, Optional

from .configuration import geometry_from_settings, get_settings, normalise_language
from .errors import (
    BraillegcodeError,
    ConfigurationError,
    InvalidGeometry,
    LanguageTableError,
    OverwriteRefusedError,
    UnknownCharacter,
    UnknownLanguageError,
)
from .generator import GenerationRunner, GenerationSummary, validate_paths
from .languages import available_languages, load_language, load_language_file
from .logging_config import setup_logging
from .structures import DeviceGeometry, LanguageDefinition

DEFAULT_OUTPUT_NAME = "braille.gcode"

# CLI flag -> DeviceGeometry field
GEOMETRY_OPTIONS = {
    "paper_width": "Sheet width in mm.",
    "paper_height": "Sheet height in mm.",
    "margin_width": "Left and right margin in mm.",
    "margin_height": "Top and bottom margin in mm.",
    "letter_width": "Distance between two dots of a cell in mm.",
    "letter_padding": "Extra space between two cells in mm.",
    "line_padding": "Extra space between two lines in mm.",
    "dot_radius": "Dot radius in mm.",
    "head_up_position": "Z position with the head raised.",
    "head_down_position": "Z position that embosses a dot.",
    "speed": "Feed rate sent with G1 F.",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="braillegcode",
        description="Translate text to braille and generate G-code for a dot embosser.",
    )
    parser.add_argument(
        "input_file",
        nargs="?",
        help="Path to a UTF-8 text file to emboss.",
    )
    parser.add_argument(
        "-t",
        "--text",
        help="Text to emboss, instead of an input file.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help=(
            "Output .gcode path. Defaults to the input file with a .gcode suffix, "
            f"or {DEFAULT_OUTPUT_NAME} for --text."
        ),
    )
    parser.add_argument(
        "-l",
        "--language",
        help="Built-in braille table (see --list-languages).",
    )
    parser.add_argument(
        "--language-file",
        help="JSON braille table to use instead of a built-in one.",
    )
    parser.add_argument(
        "--list-languages",
        action="store_true",
        help="List the built-in braille tables and exit.",
    )
    parser.add_argument(
        "--delta",
        action=argparse.BooleanOptionalAction,
        default=None,
        help=(
            "The machine origin is the center of the sheet (delta printers). "
            "--no-delta forces the corner origin over the configured value."
        ),
    )
    parser.add_argument(
        "--g1-travel",
        action="store_true",
        help="Use G1 instead of G0 for travel moves.",
    )
    for name, description in GEOMETRY_OPTIONS.items():
        parser.add_argument(
            "--" + name.replace("_", "-"),
            dest=name,
            type=float,
            help=description,
        )
    parser.add_argument(
        "--braille",
        action="store_true",
        help="Print the laid out text as Unicode braille.",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the G-code instead of writing a file (unless -o is given).",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Allow overwriting the output file if it already exists.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed progress information.",
    )
    return parser


def derive_output_path(input_path: pathlib.Path | None) -> pathlib.Path:
    if input_path is None:
        return pathlib.Path(DEFAULT_OUTPUT_NAME).resolve()
    return input_path.with_suffix(".gcode")


def apply_overrides(geometry: DeviceGeometry, args: argparse.Namespace) -> DeviceGeometry:
    """Return the geometry with every option given on the command line applied."""

    changes = {
        name: getattr(args, name)
        for name in GEOMETRY_OPTIONS
        if getattr(args, name) is not None
    }
    if args.delta is not None:
        changes["center_origin"] = args.delta
    if args.g1_travel:
        changes["rapid_travel"] = False
    if args.language:
        changes["language"] = normalise_language(args.language)
    return dataclasses.replace(geometry, **changes)


def resolve_language(name: str, language_file: str | None) -> LanguageDefinition:
    if language_file:
        return load_language_file(pathlib.Path(language_file).expanduser())
    return load_language(name)


def execute_generation(
    *,
    input_file: str | None,
    text: str | None,
    output_file: str | None,
    language: LanguageDefinition,
    geometry: DeviceGeometry,
    to_stdout: bool,
    force_overwrite: bool,
    verbose: bool,
) -> tuple[int, GenerationSummary | None, str | None]:
    """Execute a generation run and return the exit code, summary, and message."""

    input_path = (
        pathlib.Path(input_file).expanduser().resolve() if input_file else None
    )
    if output_file:
        output_path: pathlib.Path | None = pathlib.Path(output_file).expanduser().resolve()
    elif to_stdout:
        output_path = None
    else:
        output_path = derive_output_path(input_path)

    try:
        if output_path is not None:
            validate_paths(input_path, output_path, force_overwrite=force_overwrite)
        elif input_path is not None and not input_path.is_file():
            raise FileNotFoundError(
                "Input file not found. Please provide a readable text file."
            )
    except FileNotFoundError as exc:
        return 1, None, str(exc)
    except OverwriteRefusedError as exc:
        return 1, None, str(exc)
    except BraillegcodeError as exc:
        return 1, None, str(exc)

    try:
        if input_path is not None:
            runner = GenerationRunner.from_file(
                input_path,
                language=language,
                geometry=geometry,
                output_path=output_path,
                verbose=verbose,
            )
        else:
            runner = GenerationRunner(
                text=text or "",
                language=language,
                geometry=geometry,
                output_path=output_path,
                verbose=verbose,
            )
        summary = runner.run()
    except UnknownCharacter as exc:
        return 1, None, f"{exc} Nothing was written."
    except InvalidGeometry as exc:
        return 1, None, f"Invalid sheet or device settings: {exc}"
    except BraillegcodeError as exc:
        return 1, None, str(exc)
    except OSError as exc:
        return 1, None, f"Could not write the G-code file: {exc}"
    except KeyboardInterrupt:
        return 2, None, "Generation interrupted by user."

    return 0, summary, None


def print_summary(summary: GenerationSummary) -> None:
    """Output a friendly report once processing completes."""

    print("\nG-code generated.", file=sys.stderr)
    if summary.input_path:
        print(f"  Input file:      {summary.input_path}", file=sys.stderr)
    if summary.output_path:
        print(f"  Output file:     {summary.output_path}", file=sys.stderr)
    print(f"  Braille table:   {summary.language}", file=sys.stderr)
    print(
        f"  Cells:           {summary.total_cells} "
        f"from {summary.total_characters} characters",
        file=sys.stderr,
    )
    print(f"  Dots:            {summary.total_dots}", file=sys.stderr)
    print(f"  Instructions:    {summary.total_instructions}", file=sys.stderr)
    print(
        "  Machine origin:  "
        + ("sheet center" if summary.center_origin else "sheet corner"),
        file=sys.stderr,
    )
    print(f"  Elapsed time:    {summary.elapsed_seconds:.2f} seconds", file=sys.stderr)
    if summary.notes:
        print("  Notes:", file=sys.stderr)
        for message in summary.notes:
            print(f"    - {message}", file=sys.stderr)


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.list_languages:
        for name in available_languages():
            print(name)
        return 0

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(exc)
        return 1

    verbose = bool(args.verbose or settings.BRAILLE_DEBUG)
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    if args.input_file is None and args.text is None:
        parser.error("provide an input_file or -t/--text")
    if args.input_file is not None and args.text is not None:
        parser.error("input_file and -t/--text are mutually exclusive")

    geometry = apply_overrides(geometry_from_settings(settings), args)
    language_file = args.language_file or (
        None if args.language else settings.BRAILLE_LANGUAGE_FILE
    )
    try:
        language = resolve_language(geometry.language, language_file)
    except (UnknownLanguageError, LanguageTableError) as exc:
        print(exc)
        return 1

    exit_code, summary, message = execute_generation(
        input_file=args.input_file,
        text=args.text,
        output_file=args.output,
        language=language,
        geometry=geometry,
        to_stdout=args.stdout,
        force_overwrite=args.force,
        verbose=verbose,
    )

    if message:
        print(message)
    if summary:
        if args.braille:
            print(summary.braille)
        if summary.output_path is None:
            sys.stdout.write(summary.gcode)
        print_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
