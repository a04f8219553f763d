"""
Occurrence Stack
================
Collects citation occurrences per group in document order.

Each group keeps an ordered list of entries:
- ``AnonymousEntry``: a marker without a name, never shared
- ``NamedEntry``: one per (group, name); re-use bumps its occurrence count
- ``ContinuationEntry``: text that follows a name not yet seen in the group;
  these cluster at the head of the group in arrival order

``insertion_order`` comes from one counter shared by all groups and is never
reused within a document. Display numbers come from a per-group counter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

from loguru import logger

DEFAULT_GROUP = ""


@dataclass
class AnonymousEntry:
    order: int
    text: Optional[str]
    count: int = -1


@dataclass
class NamedEntry:
    key: str
    text: Optional[str]
    order: int
    number: int
    count: int = 0


@dataclass
class ContinuationEntry:
    follow_of: str
    text: Optional[str]
    order: int
    count: int = -1


Entry = Union[AnonymousEntry, NamedEntry, ContinuationEntry]


@dataclass(frozen=True)
class RenderToken:
    """Everything needed to render the inline link for one occurrence.

    ``key`` is the name for named entries and the insertion order for
    anonymous ones. ``occurrence`` is ``"<order>-<n>"`` for named entries.
    ``label`` is the group display number.
    """

    group: str
    key: str
    label: int
    occurrence: Optional[str] = None
    subkey: str = ""


@dataclass
class GroupRefs:
    """The ordered entries of one group plus its display-number counter."""

    name: str
    entries: List[Entry] = field(default_factory=list)
    named: Dict[str, NamedEntry] = field(default_factory=dict)
    counter: int = 0

    def next_number(self) -> int:
        self.counter += 1
        return self.counter

    def add(self, entry: Entry) -> None:
        self.entries.append(entry)
        if isinstance(entry, NamedEntry):
            self.named[entry.key] = entry

    def insert_continuation(self, entry: ContinuationEntry) -> int:
        """Insert before the first entry that is not itself a continuation."""
        position = len(self.entries)
        for index, existing in enumerate(self.entries):
            if not isinstance(existing, ContinuationEntry):
                position = index
                break
        self.entries.insert(position, entry)
        return position

    def __len__(self) -> int:
        return len(self.entries)


class OccurrenceStack:
    """Per-document mapping of group name to ``GroupRefs``."""

    def __init__(self):
        self.groups: Dict[str, GroupRefs] = {}
        self.order_counter = 0

    def _next_order(self) -> int:
        self.order_counter += 1
        return self.order_counter

    def _group(self, group: str) -> GroupRefs:
        refs = self.groups.get(group)
        if refs is None:
            refs = self.groups[group] = GroupRefs(name=group)
        return refs

    def record(
        self,
        text: Optional[str],
        key: Optional[str],
        group: str,
        follow: Optional[str] = None,
    ) -> Optional[RenderToken]:
        """Record one marker occurrence.

        Returns the token for the inline link, or ``None`` for continuations,
        which are invisible where they are used.
        """
        refs = self._group(group)

        if follow is not None:
            target = refs.named.get(follow)
            if target is not None:
                target.text = f"{target.text or ''} {text or ''}"
                logger.debug(f"Appended continuation text to '{follow}' in group '{group}'")
            else:
                entry = ContinuationEntry(follow_of=follow, text=text, order=self._next_order())
                position = refs.insert_continuation(entry)
                logger.debug(f"Queued continuation of '{follow}' at position {position} in group '{group}'")
            return None

        if key is None:
            order = self._next_order()
            refs.add(AnonymousEntry(order=order, text=text))
            return RenderToken(group=group, key=str(order), label=refs.next_number())

        entry = refs.named.get(key)
        if entry is None:
            entry = NamedEntry(key=key, text=text, order=self._next_order(), number=refs.next_number())
            refs.add(entry)
        else:
            if not entry.text and text:
                entry.text = text
            entry.count += 1

        return RenderToken(
            group=group,
            key=key,
            label=entry.number,
            occurrence=f"{entry.order}-{entry.count}",
            subkey=f"-{entry.order}",
        )

    def has_group(self, group: str) -> bool:
        return group in self.groups

    def get(self, group: str) -> Optional[GroupRefs]:
        return self.groups.get(group)

    def lookup(self, group: str, key: str) -> Optional[NamedEntry]:
        refs = self.groups.get(group)
        return refs.named.get(key) if refs is not None else None

    def define(self, group: str, key: str, text: str) -> bool:
        """Overwrite the text of an existing named entry."""
        entry = self.lookup(group, key)
        if entry is None:
            return False
        entry.text = text
        return True

    def drop(self, group: str) -> None:
        self.groups.pop(group, None)

    def pending_groups(self) -> Iterator[str]:
        """Groups that hold entries not yet rendered, in first-use order."""
        return (name for name, refs in self.groups.items() if refs.entries)

    def clear(self) -> None:
        self.groups = {}
        self.order_counter = 0
