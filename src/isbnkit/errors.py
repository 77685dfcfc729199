"""Error taxonomy for ISBN validation, parsing and range-data loading.

Every failure raised by the package is an ``IsbnError`` subclass with a
stable ``kind`` tag and structured context, so callers can branch on the
failure without parsing messages:

  invalid_length: normalized input is not 10 or 13 characters
  invalid_character: non-digit body character, or bad check character
  invalid_check_digit: supplied check digit differs from the computed one
  no_range_data: parse attempted with an empty range table
  range_data_load_failure: range file unreadable or structurally wrong
"""
from __future__ import annotations

from typing import Literal

type ErrorKind = Literal[
    "invalid_length",
    "invalid_character",
    "invalid_check_digit",
    "no_range_data",
    "range_data_load_failure",
]


class IsbnError(Exception):
    """Base class for all isbnkit failures."""

    kind: ErrorKind


class InvalidLengthError(IsbnError, ValueError):
    """Raised when a normalized ISBN is neither 10 nor 13 characters long."""

    kind: ErrorKind = "invalid_length"

    def __init__(self, isbn: str, length: int) -> None:
        self.isbn = isbn
        self.length = length
        super().__init__(
            f"ISBN length is incorrect: expected 10 or 13 characters, got {length}"
        )


class InvalidCharacterError(IsbnError, ValueError):
    """Raised on a non-digit body character or an invalid check character."""

    kind: ErrorKind = "invalid_character"

    def __init__(self, isbn: str, position: int, character: str) -> None:
        self.isbn = isbn
        self.position = position
        self.character = character
        where = "check digit" if position == len(isbn) - 1 else "ISBN"
        super().__init__(
            f"Invalid character {character!r} found in {where} at position {position}"
        )


class InvalidCheckDigitError(IsbnError, ValueError):
    """Raised when the supplied check digit does not match the computed one."""

    kind: ErrorKind = "invalid_check_digit"

    def __init__(self, isbn: str, expected: str, actual: str) -> None:
        self.isbn = isbn
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"ISBN check digit is incorrect: expected {expected!r}, got {actual!r}"
        )


class NoRangeDataError(IsbnError, RuntimeError):
    """Raised when parsing is attempted before any range data is loaded."""

    kind: ErrorKind = "no_range_data"

    def __init__(self) -> None:
        super().__init__(
            "No range data for parsing ISBNs (perhaps you did not load_range_data)"
        )


class RangeDataLoadError(IsbnError, RuntimeError):
    """Raised when a range-data document cannot be read or understood."""

    kind: ErrorKind = "range_data_load_failure"

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load range data from {source}: {reason}")
