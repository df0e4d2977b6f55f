"""Braille tables and their loading rules."""

from __future__ import annotations

import json
import logging
import pathlib
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from .errors import LanguageTableError, UnknownLanguageError
from .structures import GridPosition, LanguageDefinition

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "6 dots"

SIX_DOT_COLUMNS = [[1, 2, 3], [4, 5, 6]]
EIGHT_DOT_COLUMNS = [[1, 2, 3, 7], [4, 5, 6, 8]]

LETTERS: Dict[str, List[int]] = {
    "a": [1],
    "b": [1, 2],
    "c": [1, 4],
    "d": [1, 4, 5],
    "e": [1, 5],
    "f": [1, 2, 4],
    "g": [1, 2, 4, 5],
    "h": [1, 2, 5],
    "i": [2, 4],
    "j": [2, 4, 5],
    "k": [1, 3],
    "l": [1, 2, 3],
    "m": [1, 3, 4],
    "n": [1, 3, 4, 5],
    "o": [1, 3, 5],
    "p": [1, 2, 3, 4],
    "q": [1, 2, 3, 4, 5],
    "r": [1, 2, 3, 5],
    "s": [2, 3, 4],
    "t": [2, 3, 4, 5],
    "u": [1, 3, 6],
    "v": [1, 2, 3, 6],
    "w": [2, 4, 5, 6],
    "x": [1, 3, 4, 6],
    "y": [1, 3, 4, 5, 6],
    "z": [1, 3, 5, 6],
}

# Literary digits reuse the cells of a to j behind the number prefix.
LITERARY_DIGITS: Dict[str, List[int]] = {
    digit: LETTERS[letter] for digit, letter in zip("1234567890", "abcdefghij")
}

ENGLISH_PUNCTUATION: Dict[str, List[int]] = {
    " ": [],
    ",": [2],
    ";": [2, 3],
    ":": [2, 5],
    ".": [2, 5, 6],
    "!": [2, 3, 5],
    "?": [2, 3, 6],
    "'": [3],
    "-": [3, 6],
    "/": [3, 4],
    "(": [2, 3, 5, 6],
    ")": [2, 3, 5, 6],
}

FRENCH_PUNCTUATION: Dict[str, List[int]] = {
    " ": [],
    ",": [2],
    ";": [2, 3],
    ":": [2, 5],
    ".": [2, 5, 6],
    "?": [2, 6],
    "!": [2, 3, 5],
    "(": [2, 3, 6],
    ")": [3, 5, 6],
    '"': [2, 3, 5, 6],
    "'": [3],
    "-": [3, 6],
}

FRENCH_ACCENTS: Dict[str, List[int]] = {
    "é": [1, 2, 3, 4, 5, 6],
    "à": [1, 2, 3, 5, 6],
    "è": [2, 3, 4, 6],
    "ù": [2, 3, 4, 5, 6],
    "â": [1, 6],
    "ê": [1, 2, 6],
    "î": [1, 4, 6],
    "ô": [1, 4, 5, 6],
    "û": [1, 5, 6],
    "ë": [1, 2, 4, 6],
    "ï": [1, 2, 4, 5, 6],
    "ü": [1, 2, 5, 6],
    "ç": [1, 2, 3, 4, 6],
    "œ": [2, 4, 6],
}

# North American computer braille: digits and symbols have their own cells,
# capitals add dot 7.
COMPUTER_DIGITS: Dict[str, List[int]] = {
    "1": [2],
    "2": [2, 3],
    "3": [2, 5],
    "4": [2, 5, 6],
    "5": [2, 6],
    "6": [2, 3, 5],
    "7": [2, 3, 5, 6],
    "8": [2, 3, 6],
    "9": [3, 5],
    "0": [3, 5, 6],
}

COMPUTER_SYMBOLS: Dict[str, List[int]] = {
    " ": [],
    "!": [2, 3, 4, 6],
    '"': [5],
    "#": [3, 4, 5, 6],
    "$": [1, 2, 4, 6],
    "%": [1, 4, 6],
    "&": [1, 2, 3, 4, 6],
    "'": [3],
    "(": [1, 2, 3, 5, 6],
    ")": [2, 3, 4, 5, 6],
    "*": [1, 6],
    "+": [3, 4, 6],
    ",": [6],
    "-": [3, 6],
    ".": [4, 6],
    "/": [3, 4],
    ":": [1, 5, 6],
    ";": [5, 6],
    "<": [1, 2, 6],
    "=": [1, 2, 3, 4, 5, 6],
    ">": [3, 4, 5],
    "?": [1, 4, 5, 6],
    "@": [4, 7],
    "[": [2, 4, 6, 7],
    "\\": [1, 2, 5, 6, 7],
    "]": [1, 2, 4, 5, 6, 7],
    "^": [4, 5, 7],
    "_": [4, 5, 6],
}


def _computer_capitals() -> Dict[str, List[int]]:
    return {letter.upper(): dots + [7] for letter, dots in LETTERS.items()}


BUILTIN_TABLES: Dict[str, Dict[str, Any]] = {
    "6 dots": {
        "dotMap": SIX_DOT_COLUMNS,
        "numberPrefix": [3, 4, 5, 6],
        "latinToBraille": {**LETTERS, **LITERARY_DIGITS, **ENGLISH_PUNCTUATION},
    },
    "French 6 dots": {
        "dotMap": SIX_DOT_COLUMNS,
        "numberPrefix": [3, 4, 5, 6],
        "latinToBraille": {
            **LETTERS,
            **FRENCH_ACCENTS,
            **LITERARY_DIGITS,
            **FRENCH_PUNCTUATION,
        },
    },
    "8 dots": {
        "dotMap": EIGHT_DOT_COLUMNS,
        "numberPrefix": [3, 4, 5, 6],
        "latinToBraille": {
            **LETTERS,
            **_computer_capitals(),
            **COMPUTER_DIGITS,
            **COMPUTER_SYMBOLS,
        },
    },
}


def available_languages() -> List[str]:
    """Return the names of the built-in braille tables."""

    return list(BUILTIN_TABLES)


def _parse_dot_map(raw: Any) -> Dict[GridPosition, int]:
    if (
        not isinstance(raw, list)
        or len(raw) != 2
        or not all(isinstance(column, list) for column in raw)
    ):
        raise LanguageTableError("dotMap must list exactly two columns of dot indices.")
    column_heights = {len(column) for column in raw}
    if len(column_heights) != 1 or not column_heights <= {3, 4}:
        raise LanguageTableError("dotMap columns must both hold 3 or 4 dot indices.")

    dot_map: Dict[GridPosition, int] = {}
    for col, column in enumerate(raw):
        for row, index in enumerate(column):
            dot_map[(col, row)] = _as_index(index, label="dotMap")

    expected = set(range(1, len(dot_map) + 1))
    if set(dot_map.values()) != expected:
        raise LanguageTableError(
            f"dotMap must use each dot index from 1 to {len(dot_map)} exactly once."
        )
    return dot_map


def _as_index(value: Any, *, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise LanguageTableError(f"{label} must hold integer dot indices (got {value!r}).")
    return value


def _parse_indices(raw: Any, *, label: str, limit: int) -> frozenset[int]:
    if not isinstance(raw, (list, tuple)):
        raise LanguageTableError(f"{label} must be a list of dot indices.")
    indices = frozenset(_as_index(index, label=label) for index in raw)
    invalid = sorted(index for index in indices if not 1 <= index <= limit)
    if invalid:
        raise LanguageTableError(
            f"{label} uses dot indices outside 1..{limit}: "
            + ", ".join(str(index) for index in invalid)
        )
    return indices


def language_from_mapping(name: str, data: Mapping[str, Any]) -> LanguageDefinition:
    """Build an immutable language definition from its JSON-shaped description."""

    if not isinstance(data, Mapping):
        raise LanguageTableError(f"Braille table '{name}' must be a mapping.")
    missing = [
        key for key in ("dotMap", "numberPrefix", "latinToBraille") if key not in data
    ]
    if missing:
        raise LanguageTableError(
            f"Braille table '{name}' is missing: {', '.join(missing)}."
        )

    dot_map = _parse_dot_map(data["dotMap"])
    limit = len(dot_map)
    number_prefix = _parse_indices(
        data["numberPrefix"], label="numberPrefix", limit=limit
    )

    table = data["latinToBraille"]
    if not isinstance(table, Mapping):
        raise LanguageTableError("latinToBraille must map characters to dot indices.")
    char_to_dots: Dict[str, frozenset[int]] = {}
    for char, indices in table.items():
        if not isinstance(char, str) or len(char) != 1:
            raise LanguageTableError(
                f"latinToBraille keys must be single characters (got {char!r})."
            )
        char_to_dots[char] = _parse_indices(
            indices, label=f"latinToBraille[{char!r}]", limit=limit
        )

    return LanguageDefinition(
        name=name,
        dot_map=MappingProxyType(dot_map),
        number_prefix=number_prefix,
        char_to_dots=MappingProxyType(char_to_dots),
    )


def load_language(name: str) -> LanguageDefinition:
    """Load a built-in braille table by name."""

    try:
        data = BUILTIN_TABLES[name]
    except KeyError:
        raise UnknownLanguageError(
            f"Unknown braille table '{name}'. Available: "
            + ", ".join(available_languages())
        ) from None
    language = language_from_mapping(name, data)
    logger.debug(
        "Loaded braille table %r (%d characters, %d-dot cells).",
        name,
        len(language.char_to_dots),
        len(language.dot_map),
    )
    return language


def load_language_file(path: pathlib.Path) -> LanguageDefinition:
    """Load a braille table from a JSON file shaped like the built-in tables."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as exc:
        raise LanguageTableError(f"Braille table file could not be read: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise LanguageTableError(f"Braille table file {path} is not valid JSON: {exc}") from exc

    name = data.get("name", path.stem) if isinstance(data, dict) else path.stem
    language = language_from_mapping(str(name), data)
    logger.debug("Loaded braille table %r from %s.", language.name, path)
    return language
