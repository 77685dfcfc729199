#!/usr/bin/env python3
"""Calculate ISBN check digits, or parse and validate ISBNs.

Parse mode needs the International ISBN Agency range file
(https://www.isbn-international.org/range_file_generation), given with
``--range-file`` or the ``ISBN_RANGE_FILE`` environment variable.

Usage::

    # Check digit for bodies or full ISBNs (no range data needed)
    python3 scripts/chk_isbn.py -c 054792824 978054792824

    # Parse and validate
    ISBN_RANGE_FILE=RangeMessage.xml python3 scripts/chk_isbn.py -p 978-0547928241 089686281x

    # Machine-readable output
    python3 scripts/chk_isbn.py --range-file RangeMessage.xml --json 9788891230195

Invalid inputs are logged as warnings and the rest of the batch is still
processed. Exit status: 0 all inputs ok, 1 some inputs invalid, 2 fatal.

``-c`` and ``-p`` are mutually exclusive: giving both is a usage error
(exit status 2) rather than picking whichever comes first.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from isbnkit.check_digit import calc_check_digit, normalize_isbn
from isbnkit.errors import IsbnError, RangeDataLoadError
from isbnkit.isbn import parse_isbn
from isbnkit.range_message import RANGE_FILE_ENV, range_file_from_env
from isbnkit.range_table import RangeTable

log = logging.getLogger("chk_isbn")

MODE_CHECK_DIGIT = "check_digit"
MODE_PARSE = "parse"


def _dump_json(obj: object) -> str:
    return orjson.dumps(obj, option=orjson.OPT_SORT_KEYS).decode("utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calculate ISBN check digits, or parse and validate ISBNs.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-c", dest="mode", action="store_const", const=MODE_CHECK_DIGIT,
        help="Calculate check-digit(s) (does not parse/validate)",
    )
    mode.add_argument(
        "-p", dest="mode", action="store_const", const=MODE_PARSE,
        help="Parse and validate ISBN(s) (default)",
    )
    parser.set_defaults(mode=MODE_PARSE)
    parser.add_argument("isbns", nargs="*", metavar="isbn", help="ISBN(s) to process")
    parser.add_argument(
        "--range-file", type=Path, default=None,
        help=f"RangeMessage.xml path (default: ${RANGE_FILE_ENV})",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print one JSON object per input",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def check_digit_for(value: str) -> str:
    """Check digit for a full ISBN, or for a bare 9/12-digit body."""
    normalized = normalize_isbn(value)
    if len(normalized) in (9, 12):
        normalized += "0"
    return calc_check_digit(normalized)


def run_check_digits(inputs: list[str], *, as_json: bool) -> int:
    failures = 0
    for value in inputs:
        try:
            digit = check_digit_for(value)
        except IsbnError as exc:
            log.warning("%s: %s", value, exc)
            failures += 1
            if as_json:
                print(_dump_json({"input": value, "error": exc.kind, "message": str(exc)}))
            continue
        if as_json:
            print(_dump_json({"input": value, "check_digit": digit}))
        else:
            print(f"Check-digit for {value} is {digit}")
    return 1 if failures else 0


def run_parse(inputs: list[str], table: RangeTable, *, as_json: bool) -> int:
    failures = 0
    for value in inputs:
        try:
            result = parse_isbn(value, table)
        except IsbnError as exc:
            log.warning("ISBN %s is invalid (%s)", value, exc)
            failures += 1
            if as_json:
                print(_dump_json({"input": value, "error": exc.kind, "message": str(exc)}))
            continue
        if not result.is_resolved:
            log.warning("ISBN %s: registrant not found in range data", value)
        if as_json:
            print(_dump_json({"input": value, **result.to_dict()}))
        else:
            print(f"ISBN is valid: {result}")
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.isbns:
        log.error("No ISBN supplied.")
        return 2

    if args.mode == MODE_CHECK_DIGIT:
        return run_check_digits(args.isbns, as_json=args.json)

    range_file = args.range_file or range_file_from_env()
    if range_file is None:
        log.error("%s env variable not set and no --range-file given.", RANGE_FILE_ENV)
        return 2

    table = RangeTable()
    try:
        table.load_range_data(range_file)
    except RangeDataLoadError as exc:
        log.error("%s", exc)
        return 2

    return run_parse(args.isbns, table, as_json=args.json)


if __name__ == "__main__":
    raise SystemExit(main())
