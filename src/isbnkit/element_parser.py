"""Range-driven element parser: split an ISBN body into its four elements.

Element widths vary, so the body is consumed one digit at a time and each
element in turn is looked up in the range table::

    9788891230195
      978   prefix          -> key in the prefix trie
      88    group           -> "8" is not a group under 978, "88" is
      912   registrant      -> "9", "91" match no rule; "912" is in a 3-digit range
      3019  publication     -> whatever is left
      5     check digit     (not part of the body)

ISBN-10 bodies start with the prefix preassigned to ``978``.

Resolution is greedy and forward-only: an element is fixed the first time
its buffer matches and is never revisited. When the digits run out before
an element resolves, that element's buffer and everything after it become
the publication, so the four elements always partition the body.
"""
from __future__ import annotations

from dataclasses import dataclass

from isbnkit.range_table import GroupTrie, RangeSnapshot, RegistrantRuleSet, TrieNode


@dataclass(frozen=True, slots=True)
class ResolvedElements:
    """Outcome of one element scan over an ISBN body."""

    prefix: str
    registration_group: str
    registrant: str
    publication: str
    agency: str
    is_resolved: bool

    @property
    def body(self) -> str:
        return self.prefix + self.registration_group + self.registrant + self.publication


@dataclass(slots=True)
class _ScanState:
    """Buffers and cursors for the element scan."""

    prefix: str = ""
    group: str = ""
    registrant: str = ""
    publication: str = ""
    prefix_resolved: bool = False
    group_resolved: bool = False
    registrant_resolved: bool = False
    prefix_node: TrieNode[GroupTrie] | None = None
    group_node: GroupTrie | None = None
    rule_set: RegistrantRuleSet | None = None

    def feed_prefix(self, digit: str) -> None:
        self.prefix += digit
        if self.prefix_node is not None:
            self.prefix_node = self.prefix_node.step(digit)
        if self.prefix_node is not None and self.prefix_node.value is not None:
            self.prefix_resolved = True
            self.group_node = self.prefix_node.value

    def feed_group(self, digit: str) -> None:
        self.group += digit
        if self.group_node is not None:
            self.group_node = self.group_node.step(digit)
        if self.group_node is not None and self.group_node.value is not None:
            self.group_resolved = True
            self.rule_set = self.group_node.value

    def feed_registrant(self, digit: str) -> None:
        self.registrant += digit
        if self.rule_set is not None and self.rule_set.match(self.registrant) is not None:
            self.registrant_resolved = True

    def finish(self) -> ResolvedElements:
        prefix, group, registrant, publication = (
            self.prefix, self.group, self.registrant, self.publication,
        )
        # Spill the buffer of the first unresolved element into the publication.
        if not self.prefix_resolved:
            prefix, publication = "", prefix + publication
        elif not self.group_resolved:
            group, publication = "", group + publication
        elif not self.registrant_resolved:
            registrant, publication = "", registrant + publication
        return ResolvedElements(
            prefix=prefix,
            registration_group=group,
            registrant=registrant,
            publication=publication,
            agency=self.rule_set.agency if self.rule_set is not None else "",
            is_resolved=self.registrant_resolved,
        )


def resolve_elements(
    body: str,
    snapshot: RangeSnapshot,
    *,
    prefix: str = "",
) -> ResolvedElements:
    """Resolve prefix, group, registrant and publication for *body*.

    Args:
        body: Digits preceding the check digit (12 for ISBN-13, 9 for ISBN-10).
        snapshot: Loaded range data.
        prefix: Preassigned prefix; ``"978"`` for ISBN-10 bodies, otherwise
            empty so the prefix is read from *body*.

    Returns:
        ``ResolvedElements``; unresolved elements are empty strings and
        ``is_resolved`` is False.
    """
    state = _ScanState(prefix_node=snapshot.prefixes)
    if prefix:
        state.prefix = prefix
        state.prefix_resolved = True
        state.group_node = snapshot.groups(prefix)

    for digit in body:
        if not state.prefix_resolved:
            state.feed_prefix(digit)
        elif not state.group_resolved:
            state.feed_group(digit)
        elif not state.registrant_resolved:
            state.feed_registrant(digit)
        else:
            state.publication += digit

    return state.finish()
