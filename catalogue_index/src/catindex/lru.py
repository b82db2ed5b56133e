from __future__ import annotations
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Generic, Hashable, Iterator, List, Optional, TypeVar

from .models import CacheStats

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_NIL = -1


@dataclass
class CacheEntry(Generic[K, V]):
    key: K
    value: V                 # a reference to the entity, not a copy
    last_access: datetime
    prev: int = _NIL         # slot towards the MRU end
    next: int = _NIL         # slot towards the LRU end


def _now() -> datetime:
    return datetime.now(timezone.utc)


class LRUCache(Generic[K, V]):
    """
    Fixed-capacity least-recently-used cache with O(1) get/put.

    The access order is a doubly linked list laid out in an arena: entries live
    in `_slots` and link to each other by slot index, freed slots are recycled
    through `_free`. `_index` maps a key to its slot; a key is in `_index` iff
    it occupies exactly one live slot.
    """
    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"LRUCache capacity must be positive, got {capacity}")
        self._capacity = int(capacity)
        self._index: Dict[K, int] = {}
        self._slots: List[Optional[CacheEntry[K, V]]] = []
        self._free: List[int] = []
        self._head = _NIL   # most recently used
        self._tail = _NIL   # least recently used
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    # ---- Query ----
    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        with self._lock:
            slot = self._index.get(key)
            if slot is None:
                self._misses += 1
                return default
            self._hits += 1
            entry = self._entry(slot)
            entry.last_access = _now()
            self._move_to_front(slot)
            return entry.value

    def __contains__(self, key: object) -> bool:
        # membership test only: no promotion, not counted as a lookup
        with self._lock:
            return key in self._index

    def __len__(self) -> int:
        return len(self._index)

    def keys(self) -> List[K]:
        """Keys from most to least recently used."""
        with self._lock:
            return [e.key for e in self._iter_entries()]

    # ---- Mutation ----
    def put(self, key: K, value: V) -> None:
        with self._lock:
            slot = self._index.get(key)
            if slot is not None:
                entry = self._entry(slot)
                entry.value = value
                entry.last_access = _now()
                self._move_to_front(slot)
                return
            if len(self._index) >= self._capacity:
                self._evict_tail()
            slot = self._alloc(CacheEntry(key=key, value=value, last_access=_now()))
            self._link_front(slot)
            self._index[key] = slot

    def clear(self) -> None:
        """Drop every entry. Hit/miss/eviction counters are lifetime totals and survive."""
        with self._lock:
            self._index.clear()
            self._slots.clear()
            self._free.clear()
            self._head = self._tail = _NIL

    def stats(self) -> CacheStats:
        with self._lock:
            lookups = self._hits + self._misses
            return CacheStats(
                capacity=self._capacity,
                count=len(self._index),
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                hit_rate=(self._hits / lookups) if lookups else 0.0,
                oldest_access=self._entry(self._tail).last_access if self._tail != _NIL else None,
                newest_access=self._entry(self._head).last_access if self._head != _NIL else None,
            )

    # ---- arena internals (callers hold the lock) ----
    def _entry(self, slot: int) -> CacheEntry[K, V]:
        entry = self._slots[slot]
        if entry is None:
            raise RuntimeError(f"dangling cache slot {slot}")
        return entry

    def _alloc(self, entry: CacheEntry[K, V]) -> int:
        if self._free:
            slot = self._free.pop()
            self._slots[slot] = entry
            return slot
        self._slots.append(entry)
        return len(self._slots) - 1

    def _unlink(self, slot: int) -> None:
        e = self._entry(slot)
        if e.prev != _NIL:
            self._entry(e.prev).next = e.next
        else:
            self._head = e.next
        if e.next != _NIL:
            self._entry(e.next).prev = e.prev
        else:
            self._tail = e.prev
        e.prev = e.next = _NIL

    def _link_front(self, slot: int) -> None:
        e = self._entry(slot)
        e.prev = _NIL
        e.next = self._head
        if self._head != _NIL:
            self._entry(self._head).prev = slot
        self._head = slot
        if self._tail == _NIL:
            self._tail = slot

    def _move_to_front(self, slot: int) -> None:
        if slot == self._head:
            return
        self._unlink(slot)
        self._link_front(slot)

    def _evict_tail(self) -> None:
        slot = self._tail
        if slot == _NIL:
            return
        victim = self._entry(slot)
        self._unlink(slot)
        del self._index[victim.key]
        self._slots[slot] = None
        self._free.append(slot)
        self._evictions += 1

    def _iter_entries(self) -> Iterator[CacheEntry[K, V]]:
        slot = self._head
        while slot != _NIL:
            e = self._entry(slot)
            yield e
            slot = e.next
