"""Normalization, structural checks and check-digit arithmetic.

ISBN-10: weighted sum of the first nine digits with weights 10..2;
check digit is ``(11 - sum % 11) % 11``, rendered ``X`` for 10.

ISBN-13: alternating weights 1 and 3 over the first twelve digits;
check digit is ``(10 - sum % 10) % 10``.

The calculators read only the leading body digits, so they can be handed
either a bare body or a complete ISBN whose last character is ignored.
"""
from __future__ import annotations

import re

from isbnkit.errors import (
    InvalidCharacterError,
    InvalidLengthError,
    IsbnError,
)

ISBN10_LENGTH = 10
ISBN13_LENGTH = 13

_STRIP_RE = re.compile(r"[\s-]")
_DIGITS = frozenset("0123456789")
_CHECK_CHARS = _DIGITS | {"X"}


def normalize_isbn(isbn: str) -> str:
    """Uppercase *isbn* and drop all whitespace and hyphens."""
    return _STRIP_RE.sub("", isbn.upper())


def check_length(isbn: str) -> None:
    """Raise ``InvalidLengthError`` unless *isbn* has 10 or 13 characters."""
    if len(isbn) not in (ISBN10_LENGTH, ISBN13_LENGTH):
        raise InvalidLengthError(isbn, len(isbn))


def check_characters(isbn: str) -> None:
    """Raise ``InvalidCharacterError`` on the first character out of place.

    All characters but the last must be ASCII digits; the last may also be
    ``X``. Expects an already length-checked, normalized string.
    """
    last = len(isbn) - 1
    for position, char in enumerate(isbn[:last]):
        if char not in _DIGITS:
            raise InvalidCharacterError(isbn, position, char)
    if isbn[last] not in _CHECK_CHARS:
        raise InvalidCharacterError(isbn, last, isbn[last])


def calc_check_digit10(isbn: str) -> str:
    """Check digit over the first nine digits of *isbn*."""
    total = sum((10 - i) * int(isbn[i]) for i in range(9))
    rem = (11 - total % 11) % 11
    return "X" if rem == 10 else str(rem)


def calc_check_digit13(isbn: str) -> str:
    """Check digit over the first twelve digits of *isbn*."""
    total = sum(int(isbn[i]) + 3 * int(isbn[i + 1]) for i in range(0, 12, 2))
    return str((10 - total % 10) % 10)


def calc_check_digit(isbn: str) -> str:
    """Calculate the check digit for a 10- or 13-character ISBN.

    The input is normalized and structurally validated first; its last
    character (the existing check digit, or a placeholder) is ignored.

    Raises:
        InvalidLengthError: normalized input is not 10 or 13 characters.
        InvalidCharacterError: a body character is not a digit, or the last
            character is neither a digit nor ``X``.
    """
    isbn = normalize_isbn(isbn)
    check_length(isbn)
    check_characters(isbn)
    if len(isbn) == ISBN10_LENGTH:
        return calc_check_digit10(isbn)
    return calc_check_digit13(isbn)


def validate_check_digit(isbn: str) -> bool:
    """Return True iff the last character of *isbn* is its correct check digit.

    Malformed input is reported as ``False`` rather than raised.
    """
    isbn = normalize_isbn(isbn)
    try:
        calculated = calc_check_digit(isbn)
    except IsbnError:
        return False
    return isbn[-1] == calculated
