"""Reader for the International ISBN Agency range message (RangeMessage.xml).

The export is available from https://www.isbn-international.org/range_file_generation
and looks like::

    <ISBNRangeMessage>
      <MessageSource>International ISBN Agency</MessageSource>
      <MessageSerialNumber>...</MessageSerialNumber>
      <MessageDate>...</MessageDate>
      <EAN.UCCPrefixes>
        <EAN.UCC><Prefix>978</Prefix><Agency>...</Agency><Rules>...</Rules></EAN.UCC>
      </EAN.UCCPrefixes>
      <RegistrationGroups>
        <Group>
          <Prefix>978-0</Prefix>
          <Agency>English language</Agency>
          <Rules>
            <Rule><Range>0000000-1999999</Range><Length>2</Length></Rule>
            ...
          </Rules>
        </Group>
      </RegistrationGroups>
    </ISBNRangeMessage>

Parsing is lenient per rule: a malformed rule is logged and skipped so the
rest of the document still loads. Only a missing ``RegistrationGroups``
section (or an unreadable file) fails the whole load.
"""
from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from bs4.element import Tag

from isbnkit.errors import RangeDataLoadError

log = logging.getLogger(__name__)

RANGE_FILE_ENV = "ISBN_RANGE_FILE"


# ---------------------------------------------------------------------------
# Record types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RangeMessageInfo:
    """Header of a range message document."""

    source: str = ""
    serial_number: str = ""
    date: str = ""


@dataclass(frozen=True, slots=True)
class RegistrantRange:
    """Registrant values ``lower..upper`` (inclusive) of exactly ``length`` digits."""

    lower: int
    upper: int
    length: int

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError(f"length must be > 0, got {self.length}")
        if self.upper < self.lower:
            raise ValueError(
                f"upper ({self.upper}) must be >= lower ({self.lower})"
            )

    def contains(self, candidate: str) -> bool:
        return len(candidate) == self.length and self.lower <= int(candidate) <= self.upper


@dataclass(frozen=True, slots=True)
class GroupRecord:
    """One ``RegistrationGroups/Group`` entry, prefix already split."""

    prefix: str
    group: str
    agency: str
    ranges: tuple[RegistrantRange, ...] = ()


@dataclass(frozen=True, slots=True)
class RangeMessage:
    """Parsed range message: header, prefix agencies and group records."""

    info: RangeMessageInfo
    groups: tuple[GroupRecord, ...]
    prefix_agencies: dict[str, str] = field(default_factory=dict[str, str])
    skipped_rules: int = 0


# ---------------------------------------------------------------------------
# Element helpers
# ---------------------------------------------------------------------------


def _child_text(element: Tag, name: str) -> str:
    child = element.find(name, recursive=False)
    if not isinstance(child, Tag):
        return ""
    return child.get_text(strip=True)


def _rules(element: Tag) -> list[Tag]:
    rules = element.find("rules", recursive=False)
    if not isinstance(rules, Tag):
        return []
    return [r for r in rules.find_all("rule", recursive=False) if isinstance(r, Tag)]


def parse_rule(range_text: str, length_text: str) -> RegistrantRange | None:
    """Convert one ``<Range>``/``<Length>`` pair into a ``RegistrantRange``.

    Both bounds are truncated to ``length`` leading digits before integer
    conversion. Returns None for rules that mark unused space (length 0,
    or an upper bound of 0). Raises ValueError on malformed input.
    """
    length_text = length_text.strip()
    if not length_text.isdigit():
        raise ValueError(f"rule length is not a number: {length_text!r}")
    length = int(length_text)
    if length == 0:
        return None

    tokens = range_text.strip().split("-")
    if len(tokens) != 2:
        raise ValueError(f"rule range is not '<lower>-<upper>': {range_text!r}")
    lower_text, upper_text = (t.strip() for t in tokens)
    for bound in (lower_text, upper_text):
        if not bound.isdigit() or len(bound) < length:
            raise ValueError(
                f"rule range bound {bound!r} is shorter than length {length} "
                "or not numeric"
            )

    lower = int(lower_text[:length])
    upper = int(upper_text[:length])
    if upper == 0:
        return None
    return RegistrantRange(lower=lower, upper=upper, length=length)


def _parse_group(element: Tag) -> tuple[GroupRecord | None, int]:
    prefix_text = _child_text(element, "prefix")
    prefix, sep, group = prefix_text.partition("-")
    if not sep or not prefix.isdigit() or not group.isdigit():
        log.warning("Skipping group with malformed prefix %r", prefix_text)
        return None, 0

    ranges: list[RegistrantRange] = []
    skipped = 0
    for rule in _rules(element):
        range_text = _child_text(rule, "range")
        length_text = _child_text(rule, "length")
        try:
            parsed = parse_rule(range_text, length_text)
        except ValueError as exc:
            log.warning("Skipping rule in group %s: %s", prefix_text, exc)
            skipped += 1
            continue
        if parsed is not None:
            ranges.append(parsed)

    record = GroupRecord(
        prefix=prefix,
        group=group,
        agency=_child_text(element, "agency"),
        ranges=tuple(ranges),
    )
    return record, skipped


# ---------------------------------------------------------------------------
# Document parsing
# ---------------------------------------------------------------------------


def parse_range_message(text: str | bytes, *, source: str = "<string>") -> RangeMessage:
    """Parse range message markup into a ``RangeMessage``.

    Raises:
        RangeDataLoadError: the document has no ``RegistrationGroups`` section.
    """
    # html.parser lowercases tag names; the XML is flat enough for it.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(text, "html.parser")

    groups_el = soup.find("registrationgroups")
    if not isinstance(groups_el, Tag):
        raise RangeDataLoadError(source, "no RegistrationGroups section found")

    info = RangeMessageInfo()
    root = soup.find("isbnrangemessage")
    if isinstance(root, Tag):
        info = RangeMessageInfo(
            source=_child_text(root, "messagesource"),
            serial_number=_child_text(root, "messageserialnumber"),
            date=_child_text(root, "messagedate"),
        )

    prefix_agencies: dict[str, str] = {}
    prefixes_el = soup.find("ean.uccprefixes")
    if isinstance(prefixes_el, Tag):
        for ean in prefixes_el.find_all("ean.ucc", recursive=False):
            if not isinstance(ean, Tag):
                continue
            prefix = _child_text(ean, "prefix")
            if prefix.isdigit():
                prefix_agencies[prefix] = _child_text(ean, "agency")
            else:
                log.warning("Skipping EAN.UCC entry with malformed prefix %r", prefix)

    groups: list[GroupRecord] = []
    skipped_rules = 0
    for element in groups_el.find_all("group", recursive=False):
        if not isinstance(element, Tag):
            continue
        record, skipped = _parse_group(element)
        skipped_rules += skipped
        if record is not None:
            groups.append(record)

    log.debug(
        "Parsed range message from %s: %d groups, %d prefixes, %d rules skipped",
        source, len(groups), len(prefix_agencies), skipped_rules,
    )
    return RangeMessage(
        info=info,
        groups=tuple(groups),
        prefix_agencies=prefix_agencies,
        skipped_rules=skipped_rules,
    )


def read_range_message(path: str | Path) -> RangeMessage:
    """Read and parse a RangeMessage.xml file.

    Raises:
        RangeDataLoadError: the file cannot be read or has no groups section.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise RangeDataLoadError(str(path), str(exc)) from exc
    return parse_range_message(raw, source=str(path))


def range_file_from_env() -> Path | None:
    """Range file path named by ``$ISBN_RANGE_FILE``, or None when unset."""
    value = os.environ.get(RANGE_FILE_ENV, "")
    return Path(value) if value else None
