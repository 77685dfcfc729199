"""In-memory range table: prefix -> registration group -> registrant rules.

Prefixes and the groups beneath each prefix are stored in digit tries so
the element parser can advance one digit at a time without rebuilding
substrings. Registrant ranges are indexed by field length.

A ``RangeTable`` owns an immutable ``RangeSnapshot``. Loading builds a new
snapshot off to the side and swaps the reference under a writer lock;
readers grab the current reference and keep using it for the whole parse,
so a concurrent reload never exposes a half-built table.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from isbnkit.range_message import (
    GroupRecord,
    RangeMessageInfo,
    RegistrantRange,
    read_range_message,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class TrieNode[V]:
    """Digit trie node; ``value`` is set on nodes that terminate a key."""

    children: dict[str, TrieNode[V]] = field(default_factory=dict)
    value: V | None = None

    def step(self, digit: str) -> TrieNode[V] | None:
        return self.children.get(digit)

    def insert(self, key: str, value: V) -> None:
        node = self
        for digit in key:
            node = node.children.setdefault(digit, TrieNode())
        node.value = value

    def get(self, key: str) -> V | None:
        node: TrieNode[V] | None = self
        for digit in key:
            if node is None:
                return None
            node = node.step(digit)
        return node.value if node is not None else None


@dataclass(frozen=True, slots=True)
class RegistrantRuleSet:
    """Agency plus the registrant ranges assigned to one registration group."""

    agency: str
    ranges: tuple[RegistrantRange, ...]
    by_length: dict[int, tuple[RegistrantRange, ...]] = field(
        default_factory=dict[int, tuple[RegistrantRange, ...]],
        repr=False,
        compare=False,
    )

    @classmethod
    def from_ranges(cls, agency: str, ranges: Iterable[RegistrantRange]) -> RegistrantRuleSet:
        ordered = tuple(ranges)
        grouped: dict[int, list[RegistrantRange]] = {}
        for rng in ordered:
            grouped.setdefault(rng.length, []).append(rng)
        return cls(
            agency=agency,
            ranges=ordered,
            by_length={k: tuple(v) for k, v in grouped.items()},
        )

    def match(self, candidate: str) -> RegistrantRange | None:
        """First range of ``len(candidate)`` digits containing *candidate*."""
        value = int(candidate)
        for rng in self.by_length.get(len(candidate), ()):
            if rng.lower <= value <= rng.upper:
                return rng
        return None


type GroupTrie = TrieNode[RegistrantRuleSet]


@dataclass(frozen=True, slots=True)
class RangeSnapshot:
    """Immutable, fully built view of one loaded range message."""

    prefixes: TrieNode[GroupTrie]
    group_count: int
    info: RangeMessageInfo = RangeMessageInfo()
    prefix_agencies: Mapping[str, str] = field(default_factory=dict[str, str])

    def has_prefix(self, prefix: str) -> bool:
        return self.prefixes.get(prefix) is not None

    def groups(self, prefix: str) -> GroupTrie | None:
        return self.prefixes.get(prefix)

    def rule_set(self, prefix: str, group: str) -> RegistrantRuleSet | None:
        groups = self.prefixes.get(prefix)
        if groups is None:
            return None
        return groups.get(group)


def build_snapshot(
    groups: Iterable[GroupRecord],
    *,
    info: RangeMessageInfo | None = None,
    prefix_agencies: Mapping[str, str] | None = None,
) -> RangeSnapshot:
    """Build a snapshot from group records. Later duplicates replace earlier ones."""
    prefixes = TrieNode[GroupTrie]()
    seen: set[tuple[str, str]] = set()
    for record in groups:
        group_trie = prefixes.get(record.prefix)
        if group_trie is None:
            group_trie = TrieNode[RegistrantRuleSet]()
            prefixes.insert(record.prefix, group_trie)
        key = (record.prefix, record.group)
        if key in seen:
            log.debug("Duplicate group %s-%s replaces earlier entry", *key)
        seen.add(key)
        group_trie.insert(
            record.group,
            RegistrantRuleSet.from_ranges(record.agency, record.ranges),
        )
    return RangeSnapshot(
        prefixes=prefixes,
        group_count=len(seen),
        info=info or RangeMessageInfo(),
        prefix_agencies=dict(prefix_agencies or {}),
    )


class RangeTable:
    """Caller-owned range table with an explicit load/unload lifecycle.

    Usage::

        table = RangeTable()
        table.load_range_data("RangeMessage.xml")
        isbn = parse_isbn("978-0-547-92824-1", table)
    """

    def __init__(self) -> None:
        self._write_lock = threading.Lock()
        self._snapshot: RangeSnapshot | None = None

    @classmethod
    def from_file(cls, path: str | Path) -> RangeTable:
        table = cls()
        table.load_range_data(path)
        return table

    def __len__(self) -> int:
        snap = self._snapshot
        return snap.group_count if snap is not None else 0

    def snapshot(self) -> RangeSnapshot | None:
        """Current snapshot, or None when nothing is loaded."""
        return self._snapshot

    def has_range_data(self) -> bool:
        """True iff a non-empty table is loaded."""
        return len(self) > 0

    @property
    def info(self) -> RangeMessageInfo:
        snap = self._snapshot
        return snap.info if snap is not None else RangeMessageInfo()

    def prefix_agency(self, prefix: str) -> str:
        """Agency of an EAN.UCC prefix, ``""`` if unknown."""
        snap = self._snapshot
        if snap is None:
            return ""
        return snap.prefix_agencies.get(prefix, "")

    def load_range_data(self, source: str | Path) -> bool:
        """Replace the table with the contents of a RangeMessage.xml file.

        The previous table stays in place if reading or parsing fails.

        Raises:
            RangeDataLoadError: the file cannot be read or has no groups.
        """
        message = read_range_message(source)
        self.load_records(
            message.groups,
            info=message.info,
            prefix_agencies=message.prefix_agencies,
        )
        log.debug(
            "Loaded %d registration groups from %s (serial %s)",
            len(self), source, message.info.serial_number or "n/a",
        )
        return True

    def load_records(
        self,
        groups: Iterable[GroupRecord],
        *,
        info: RangeMessageInfo | None = None,
        prefix_agencies: Mapping[str, str] | None = None,
    ) -> bool:
        """Replace the table with a snapshot built from *groups*."""
        snap = build_snapshot(groups, info=info, prefix_agencies=prefix_agencies)
        with self._write_lock:
            self._snapshot = snap
        return True

    def unload_range_data(self) -> bool:
        """Discard any loaded range data."""
        with self._write_lock:
            self._snapshot = None
        return True
