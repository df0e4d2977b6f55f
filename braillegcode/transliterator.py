"""Character to braille cell translation with digit and capital escapes."""

from __future__ import annotations

import string
from enum import Enum, auto
from typing import Iterator

from .structures import LINE_BREAK, Cell, LanguageDefinition, Token

CAPITAL_PREFIX = frozenset({4, 6})
DIGITS = frozenset(string.digits)
LINE_BREAKS = frozenset("\r\n")


class RunState(Enum):
    """Escape state carried from one character to the next."""

    NORMAL = auto()
    IN_NUMBER_RUN = auto()


class Transliteration:
    """Restartable stream of cells and line breaks for one text.

    Every iteration starts a fresh pass in the NORMAL state, so the same
    object can be laid out twice without carrying a number run over.
    A digit opens a number run by emitting the table's number prefix; only
    a space closes it again, line breaks do not. Uppercase letters in 6-dot
    tables are preceded by the capital sign.
    """

    def __init__(self, text: str, language: LanguageDefinition) -> None:
        self.text = text
        self.language = language

    def __iter__(self) -> Iterator[Token]:
        state = RunState.NORMAL
        after_cr = False
        for char in self.text:
            if char == "\n" and after_cr:
                after_cr = False
                continue
            after_cr = char == "\r"
            if char in LINE_BREAKS:
                yield LINE_BREAK
                continue

            dots = self.language.lookup(char)

            if state is RunState.NORMAL and char in DIGITS:
                yield Cell(char, self.language.number_prefix, is_escape=True)
                state = RunState.IN_NUMBER_RUN
            elif state is RunState.IN_NUMBER_RUN and char == " ":
                state = RunState.NORMAL
            elif self.language.applies_capital_rule and char.isupper():
                yield Cell(char, CAPITAL_PREFIX, is_escape=True)
                char = char.lower()
                dots = self.language.lookup(char)

            yield Cell(char, dots)


def transliterate(text: str, language: LanguageDefinition) -> Iterator[Token]:
    """Return a fresh lazy cell stream for the text."""

    return iter(Transliteration(text, language))

