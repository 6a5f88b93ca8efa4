"""Bounded window over the backing sequence.

A small fixed-capacity deque of ``WindowEntry`` records (backing index,
item, materialized content). The queue only ever touches it through four
moves, each O(1):

 - ``push_back``  append at the tail (commit refill); refuses when full
 - ``pop_front``  remove the front entry (commit)
 - ``push_front`` insert at the front (undo restore), evicting and
                  returning the tail entry when capacity is exceeded
 - ``replace``    swap the item and content of an entry in place (refresh)

``satisfies(cursor, count)`` states the window invariants in one place:
the length is ``min(capacity, count - cursor)`` and the entries hold the
consecutive backing indices ``cursor, cursor + 1, ...``.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from typing import Any, Deque, Iterator, Optional, Tuple

from reviewstack.design.slot_transform import SlotTransform
from reviewstack.errors import InvalidConfiguration

__all__ = ["WindowEntry", "MaterializedSlot", "ReviewWindow"]


@dataclass(frozen=True)
class WindowEntry:
    index: int  # position in the backing sequence
    item: Any
    content: Any


@dataclass(frozen=True)
class MaterializedSlot:
    """A window entry bound to its current slot and presentation parameters."""

    slot_index: int
    index: int
    item: Any
    content: Any
    transform: SlotTransform


class ReviewWindow:
    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise InvalidConfiguration(f"window capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._entries: Deque[WindowEntry] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[WindowEntry]:
        return iter(self._entries)

    @property
    def front(self) -> Optional[WindowEntry]:
        return self._entries[0] if self._entries else None

    @property
    def full(self) -> bool:
        return len(self._entries) >= self._capacity

    def entries(self) -> Tuple[WindowEntry, ...]:
        return tuple(self._entries)

    # Moves --------------------------------------------------------------
    def push_back(self, entry: WindowEntry) -> None:
        if self.full:
            raise OverflowError("window is full")
        self._entries.append(entry)

    def pop_front(self) -> WindowEntry:
        if not self._entries:
            raise IndexError("pop from an empty window")
        return self._entries.popleft()

    def push_front(self, entry: WindowEntry) -> Optional[WindowEntry]:
        self._entries.appendleft(entry)
        if len(self._entries) > self._capacity:
            return self._entries.pop()
        return None

    def position_of(self, index: int) -> Optional[int]:
        if not self._entries:
            return None
        offset = index - self._entries[0].index
        return offset if 0 <= offset < len(self._entries) else None

    def replace(self, position: int, *, item: Any, content: Any) -> WindowEntry:
        updated = replace(self._entries[position], item=item, content=content)
        self._entries[position] = updated
        return updated

    def clear(self) -> None:
        self._entries.clear()

    # Invariants ---------------------------------------------------------
    def satisfies(self, cursor: int, count: int) -> bool:
        if len(self._entries) != min(self._capacity, count - cursor):
            return False
        return all(e.index == cursor + pos for pos, e in enumerate(self._entries))
