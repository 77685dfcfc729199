"""Validate, parse and convert ISBN-10 and ISBN-13 numbers.

Besides checking the length, characters and check digit of an ISBN, the
package splits it into prefix, registration group, registrant and
publication elements using the International ISBN Agency range data
(RangeMessage.xml).
"""

from isbnkit.check_digit import (
    calc_check_digit,
    calc_check_digit10,
    calc_check_digit13,
    normalize_isbn,
    validate_check_digit,
)
from isbnkit.element_parser import ResolvedElements, resolve_elements
from isbnkit.errors import (
    ErrorKind,
    InvalidCharacterError,
    InvalidCheckDigitError,
    InvalidLengthError,
    IsbnError,
    NoRangeDataError,
    RangeDataLoadError,
)
from isbnkit.isbn import ISBN, parse_isbn
from isbnkit.range_message import (
    RANGE_FILE_ENV,
    GroupRecord,
    RangeMessage,
    RangeMessageInfo,
    RegistrantRange,
    parse_range_message,
    range_file_from_env,
    read_range_message,
)
from isbnkit.range_table import RangeSnapshot, RangeTable, RegistrantRuleSet

__all__ = [
    "ErrorKind",
    "GroupRecord",
    "ISBN",
    "InvalidCharacterError",
    "InvalidCheckDigitError",
    "InvalidLengthError",
    "IsbnError",
    "NoRangeDataError",
    "RANGE_FILE_ENV",
    "RangeDataLoadError",
    "RangeMessage",
    "RangeMessageInfo",
    "RangeSnapshot",
    "RangeTable",
    "RegistrantRange",
    "RegistrantRuleSet",
    "ResolvedElements",
    "calc_check_digit",
    "calc_check_digit10",
    "calc_check_digit13",
    "normalize_isbn",
    "parse_isbn",
    "parse_range_message",
    "range_file_from_env",
    "read_range_message",
    "resolve_elements",
    "validate_check_digit",
]
