"""Error definitions for the braille G-code generator."""

from __future__ import annotations


class BraillegcodeError(Exception):
    """Base exception for all custom errors."""


class UnknownCharacter(BraillegcodeError):
    """Raised when a character has no translation in the active braille table."""

    def __init__(self, character: str, language: str | None = None) -> None:
        self.character = character
        self.language = language
        where = f" in table '{language}'" if language else ""
        super().__init__(
            f"Character {character!r} was not translated in braille{where}."
        )


class InvalidMove(BraillegcodeError):
    """Raised when a move is requested without any axis."""


class InvalidGeometry(BraillegcodeError):
    """Raised when sheet or device values are not finite and non-negative."""


class UnknownLanguageError(BraillegcodeError):
    """Raised when the requested braille table does not exist."""


class LanguageTableError(BraillegcodeError):
    """Raised when a braille table definition is malformed."""


class ConfigurationError(BraillegcodeError):
    """Raised when configuration sources cannot be read or validated."""


class OverwriteRefusedError(BraillegcodeError):
    """Raised when attempting to overwrite an output without consent."""
