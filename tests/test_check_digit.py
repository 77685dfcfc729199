"""Tests for isbnkit.check_digit module."""
from __future__ import annotations

import pytest

from isbnkit.check_digit import (
    calc_check_digit,
    calc_check_digit10,
    calc_check_digit13,
    check_characters,
    check_length,
    normalize_isbn,
    validate_check_digit,
)
from isbnkit.errors import InvalidCharacterError, InvalidLengthError, IsbnError


class TestNormalizeIsbn:
    def test_strips_hyphens_and_spaces(self) -> None:
        assert normalize_isbn("978-0 547\t92824-1") == "9780547928241"

    def test_uppercases_check_character(self) -> None:
        assert normalize_isbn("089686281x") == "089686281X"

    def test_empty(self) -> None:
        assert normalize_isbn("") == ""


class TestStructuralChecks:
    def test_length_accepts_10_and_13(self) -> None:
        check_length("0547928246")
        check_length("9780547928241")

    def test_length_rejects_other(self) -> None:
        with pytest.raises(InvalidLengthError) as exc_info:
            check_length("978054792824")
        assert exc_info.value.length == 12
        assert exc_info.value.kind == "invalid_length"

    def test_body_character(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            check_characters("9780590D32053")
        assert exc_info.value.position == 7
        assert exc_info.value.character == "D"
        assert "ISBN" in str(exc_info.value)

    def test_check_character(self) -> None:
        with pytest.raises(InvalidCharacterError, match="check digit") as exc_info:
            check_characters("978059013205F")
        assert exc_info.value.position == 12

    def test_x_allowed_only_last(self) -> None:
        check_characters("089686281X")
        with pytest.raises(InvalidCharacterError):
            check_characters("08968628X1")


class TestCalcCheckDigit:
    @pytest.mark.parametrize(
        ("isbn", "expected"),
        [
            ("88 04 47328 2", "2"),
            ("978-8804473282", "2"),
            ("0547928246", "6"),
            ("978-0547928241", "1"),
            ("978 0670013951", "1"),
            ("089686281x", "X"),
            ("9780822527602", "2"),
            ("978-8891230195", "5"),
            ("9780590732053", "5"),
            ("081666303x", "3"),
        ],
    )
    def test_known_values(self, isbn: str, expected: str) -> None:
        assert calc_check_digit(isbn) == expected

    def test_ignores_supplied_check_character(self) -> None:
        assert calc_check_digit("9780547928240") == "1"
        assert calc_check_digit("054792824X") == "6"

    def test_deterministic(self) -> None:
        assert calc_check_digit("9780547928241") == calc_check_digit("9780547928241")

    def test_empty_is_invalid_length(self) -> None:
        with pytest.raises(InvalidLengthError):
            calc_check_digit("")

    def test_trailing_garbage_is_invalid_length(self) -> None:
        with pytest.raises(InvalidLengthError):
            calc_check_digit("9780590132053F")

    @pytest.mark.parametrize("isbn", ["97805S0132053", "978-059013205F"])
    def test_invalid_characters(self, isbn: str) -> None:
        with pytest.raises(InvalidCharacterError):
            calc_check_digit(isbn)

    def test_errors_share_base(self) -> None:
        with pytest.raises(IsbnError):
            calc_check_digit("123")


class TestFormulas:
    def test_isbn10_renders_x_for_ten(self) -> None:
        assert calc_check_digit10("082252760") == "X"

    def test_isbn10_zero(self) -> None:
        assert calc_check_digit10("000000000") == "0"
        assert calc_check_digit10("100000000") == "1"

    def test_isbn13_never_x(self) -> None:
        for body in ("978000000000", "979109063607", "978199999999"):
            assert calc_check_digit13(body).isdigit()

    def test_isbn13_known(self) -> None:
        assert calc_check_digit13("979109063607") == "1"
        assert calc_check_digit13("977123456700") == "3"


class TestValidateCheckDigit:
    @pytest.mark.parametrize(
        "isbn",
        ["0547928246", "978-0547928241", "089686281x", "9780822527602", "88 04 47328 2"],
    )
    def test_valid(self, isbn: str) -> None:
        assert validate_check_digit(isbn) is True

    @pytest.mark.parametrize("isbn", ["9780590732053", "081666303x", "0547928247"])
    def test_wrong_digit(self, isbn: str) -> None:
        assert validate_check_digit(isbn) is False

    @pytest.mark.parametrize("isbn", ["", "123", "9780590d32053", "9780590132053F"])
    def test_malformed_is_false(self, isbn: str) -> None:
        assert validate_check_digit(isbn) is False

    def test_matches_calc_on_last_character(self) -> None:
        for isbn in ("9780547928241", "9780547928249", "054792824X", "0547928246"):
            expected = calc_check_digit(isbn) == isbn[-1]
            assert validate_check_digit(isbn) is expected
