"""Parsed ISBN value, conversions and the ``parse_isbn`` entry point."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from isbnkit.check_digit import (
    ISBN10_LENGTH,
    calc_check_digit10,
    calc_check_digit13,
    check_characters,
    check_length,
    normalize_isbn,
)
from isbnkit.element_parser import resolve_elements
from isbnkit.errors import InvalidCheckDigitError, NoRangeDataError
from isbnkit.range_table import RangeTable

BOOKLAND_PREFIX = "978"


@dataclass(frozen=True, slots=True)
class ISBN:
    """Elements of a parsed ISBN::

        [EAN.UCC prefix]-[registration group]-[registrant]-[publication]-[check digit]

    ``check_digit10`` is empty when the ISBN has no ISBN-10 form (prefix
    other than 978). ``is_resolved`` reports whether every element was found
    in the range table; it does not affect ``is_valid``.
    """

    prefix: str = ""
    registration_group: str = ""
    registrant: str = ""
    publication: str = ""
    agency: str = ""
    check_digit10: str = ""
    check_digit13: str = ""
    is_valid: bool = False
    is_resolved: bool = False

    @property
    def has_isbn10(self) -> bool:
        return self.is_valid and self.prefix == BOOKLAND_PREFIX

    def to_isbn13(self) -> str:
        """The ISBN-13 form, or ``""`` when invalid."""
        if not self.is_valid:
            return ""
        return "".join((
            self.prefix, self.registration_group, self.registrant,
            self.publication, self.check_digit13,
        ))

    def to_isbn10(self) -> str:
        """The ISBN-10 form, or ``""`` when invalid or outside prefix 978."""
        if not self.has_isbn10:
            return ""
        return "".join((
            self.registration_group, self.registrant,
            self.publication, self.check_digit10,
        ))

    def display(self) -> str:
        """Hyphenated ISBN-13, followed by the hyphenated ISBN-10 when one exists.

        ``978-0-547-92824-1 (0-547-92824-6)``
        """
        if not self.is_valid:
            return ""
        elements = (self.registration_group, self.registrant, self.publication)
        out = "-".join(e for e in (self.prefix, *elements, self.check_digit13) if e)
        if self.has_isbn10:
            out += " (" + "-".join(e for e in (*elements, self.check_digit10) if e) + ")"
        return out

    def __str__(self) -> str:
        return self.display()

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["isbn13"] = self.to_isbn13()
        payload["isbn10"] = self.to_isbn10()
        payload["display"] = self.display()
        return payload


def parse_isbn(isbn: str, table: RangeTable) -> ISBN:
    """Validate *isbn* and split it into its elements using *table*.

    Checks run in order: length, characters, check digit, range data.

    Raises:
        InvalidLengthError: normalized input is not 10 or 13 characters.
        InvalidCharacterError: a character is out of place.
        InvalidCheckDigitError: the check digit does not match.
        NoRangeDataError: *table* has nothing loaded.
    """
    isbn = normalize_isbn(isbn)
    check_length(isbn)
    check_characters(isbn)

    is_isbn10 = len(isbn) == ISBN10_LENGTH
    supplied = isbn[-1]
    expected = calc_check_digit10(isbn) if is_isbn10 else calc_check_digit13(isbn)
    if supplied != expected:
        raise InvalidCheckDigitError(isbn, expected=expected, actual=supplied)

    snapshot = table.snapshot()
    if snapshot is None or snapshot.group_count == 0:
        raise NoRangeDataError()

    body = isbn[:-1]
    elements = resolve_elements(
        body, snapshot, prefix=BOOKLAND_PREFIX if is_isbn10 else "",
    )

    if is_isbn10:
        check_digit10 = supplied
        check_digit13 = calc_check_digit13(BOOKLAND_PREFIX + body)
    else:
        check_digit13 = supplied
        check_digit10 = ""
        if elements.prefix == BOOKLAND_PREFIX:
            check_digit10 = calc_check_digit10(
                elements.registration_group + elements.registrant + elements.publication
            )

    return ISBN(
        prefix=elements.prefix,
        registration_group=elements.registration_group,
        registrant=elements.registrant,
        publication=elements.publication,
        agency=elements.agency,
        check_digit10=check_digit10,
        check_digit13=check_digit13,
        is_valid=True,
        is_resolved=elements.is_resolved,
    )
