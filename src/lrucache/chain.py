"""Recency chain and value index.

Entries live in an arena (a list of slots addressed by stable integer ids) and
are linked newest-to-oldest through those ids.  The index maps each value's
equality key to its slot id, so the chain and the index refer to the same
entry without holding references to each other.

Nothing in this module locks; callers serialize access.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

NIL = -1


@dataclass(slots=True)
class Entry(Generic[T]):
    value: T
    key: Hashable
    newer: int = NIL
    older: int = NIL


def _identity(value: object) -> Hashable:
    return value  # type: ignore[return-value]


class RecencyChain(Generic[T]):
    """Doubly linked recency order plus an O(1) value index.

    ``head`` is the most recently touched entry, ``tail`` the least recently
    touched one.  Slot ids handed out by :meth:`insert_new` stay valid until the
    entry is unlinked; freed ids are reused by later inserts.
    """

    def __init__(self, key: Callable[[T], Hashable] | None = None) -> None:
        self._key: Callable[[T], Hashable] = key if key is not None else _identity
        self._slots: list[Entry[T] | None] = []
        self._free: list[int] = []
        self._index: dict[Hashable, int] = {}
        self._head = NIL
        self._tail = NIL

    def __len__(self) -> int:
        return len(self._index)

    def _entry(self, slot: int) -> Entry[T]:
        entry = self._slots[slot]
        if entry is None:
            raise KeyError(slot)
        return entry

    def find(self, value: T) -> int | None:
        """Return the slot id of the entry equal to *value*, if any."""

        return self._index.get(self._key(value))

    def value_at(self, slot: int) -> T:
        return self._entry(slot).value

    def head(self) -> int | None:
        return None if self._head == NIL else self._head

    def tail(self) -> int | None:
        return None if self._tail == NIL else self._tail

    def _detach(self, entry: Entry[T]) -> None:
        if entry.newer == NIL:
            self._head = entry.older
        else:
            self._entry(entry.newer).older = entry.older
        if entry.older == NIL:
            self._tail = entry.newer
        else:
            self._entry(entry.older).newer = entry.newer
        entry.newer = NIL
        entry.older = NIL

    def _attach_head(self, slot: int, entry: Entry[T]) -> None:
        entry.older = self._head
        entry.newer = NIL
        if self._head != NIL:
            self._entry(self._head).newer = slot
        self._head = slot
        if self._tail == NIL:
            self._tail = slot

    def touch(self, slot: int) -> None:
        """Move the entry at *slot* to the head."""

        if slot == self._head:
            return
        entry = self._entry(slot)
        self._detach(entry)
        self._attach_head(slot, entry)

    def insert_new(self, value: T) -> int:
        """Link a new entry for *value* at the head and index it.

        The caller must have checked that no equal entry exists.
        """

        entry = Entry(value=value, key=self._key(value))
        if self._free:
            slot = self._free.pop()
            self._slots[slot] = entry
        else:
            slot = len(self._slots)
            self._slots.append(entry)
        self._attach_head(slot, entry)
        self._index[entry.key] = slot
        return slot

    def unlink(self, slot: int) -> T:
        """Remove the entry at *slot* from the chain and the index; return its value."""

        entry = self._entry(slot)
        self._detach(entry)
        del self._index[entry.key]
        self._slots[slot] = None
        self._free.append(slot)
        return entry.value

    def clear(self) -> None:
        self._slots.clear()
        self._free.clear()
        self._index.clear()
        self._head = NIL
        self._tail = NIL

    def values_oldest_first(self) -> Iterator[T]:
        slot = self._tail
        while slot != NIL:
            entry = self._entry(slot)
            yield entry.value
            slot = entry.newer

    def validate(self) -> None:
        """Check the structural invariants, raising ``RuntimeError`` on the first violation."""

        if not self._index:
            if self._head != NIL or self._tail != NIL:
                raise RuntimeError("empty chain has a head or tail")
            return

        seen: set[int] = set()
        prev = NIL
        slot = self._head
        while slot != NIL:
            if slot in seen:
                raise RuntimeError(f"cycle at slot {slot}")
            seen.add(slot)
            entry = self._entry(slot)
            if entry.newer != prev:
                raise RuntimeError(f"broken newer link at slot {slot}")
            if self._index.get(entry.key) != slot:
                raise RuntimeError(f"index does not point at slot {slot}")
            prev = slot
            slot = entry.older

        if prev != self._tail:
            raise RuntimeError("walk from head did not end at tail")
        if len(seen) != len(self._index):
            raise RuntimeError(f"chain has {len(seen)} entries, index has {len(self._index)}")
