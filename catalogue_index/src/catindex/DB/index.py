from __future__ import annotations
import bisect
import logging
from datetime import date, datetime
from typing import Any, Dict, Generic, Iterable, Iterator, List, Protocol, Tuple, TypeVar

from ..normalize import normalize_key, as_day

log = logging.getLogger(__name__)

KT = TypeVar("KT", str, date, float)


class Indexable(Protocol):
    """What the ordered indexes read from an entity."""
    name: str

    @property
    def average_rating(self) -> float: ...


class SortedMap(Generic[KT]):
    """
    Ordered key -> value map: a sorted key list (bisect) next to a dict.
    Inserting a new key is O(log n) to locate plus a list shift; lookups of an
    existing key are O(1); traversal is in key order without re-sorting.
    """
    def __init__(self) -> None:
        self._keys: List[KT] = []
        self._data: Dict[KT, Any] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def set(self, key: KT, value: Any) -> None:
        if key not in self._data:
            bisect.insort(self._keys, key)
        self._data[key] = value

    def setdefault(self, key: KT, factory) -> Any:
        if key not in self._data:
            self.set(key, factory())
        return self._data[key]

    def clear(self) -> None:
        self._keys.clear()
        self._data.clear()

    def items(self, start: int = 0) -> Iterator[Tuple[KT, Any]]:
        """Ascending (key, value) pairs, beginning at position `start`."""
        for k in self._keys[start:]:
            yield k, self._data[k]

    def items_desc(self) -> Iterator[Tuple[KT, Any]]:
        for k in reversed(self._keys):
            yield k, self._data[k]

    def bisect_left(self, key: KT) -> int:
        return bisect.bisect_left(self._keys, key)


def _add_once(bucket: List[Indexable], entity: Indexable) -> None:
    # identity, not equality: the same object is bucketed once per key
    if not any(e is entity for e in bucket):
        bucket.append(entity)


class OrderedIndexSet:
    """
    Three order-maintaining indexes over one entity class:
      * by_name   : lowercase name -> entity (unique, last write wins)
      * by_date   : calendar day   -> [entities inserted that day]
      * by_rating : rating snapshot -> [entities that had that rating when added]

    Rating buckets are snapshots; they are only corrected by a rebuild.
    Entries are never removed individually.
    """
    def __init__(self) -> None:
        self.by_name: SortedMap[str] = SortedMap()
        self.by_date: SortedMap[date] = SortedMap()
        self.by_rating: SortedMap[float] = SortedMap()

    # ---- Build ----
    def add_name(self, entity: Indexable) -> None:
        self.by_name.set(normalize_key(entity.name), entity)

    def add_to_date_bucket(self, entity: Indexable, day: date | datetime) -> None:
        _add_once(self.by_date.setdefault(as_day(day), list), entity)

    def add_to_rating_bucket(self, entity: Indexable) -> None:
        rating = float(entity.average_rating)
        if rating > 0:
            _add_once(self.by_rating.setdefault(rating, list), entity)

    def add(self, entity: Indexable, day: date | datetime) -> None:
        self.add_name(entity)
        self.add_to_date_bucket(entity, day)
        self.add_to_rating_bucket(entity)

    def add_many(self, entities: Iterable[Indexable], day: date | datetime) -> int:
        n = 0
        for e in entities:
            self.add(e, day)
            n += 1
        return n

    def clear(self) -> None:
        self.by_name.clear()
        self.by_date.clear()
        self.by_rating.clear()

    # ---- Range queries ----
    def range_by_rating(self, lo: float, hi: float) -> List[Indexable]:
        """Entities whose rating snapshot is in [lo, hi], highest rating first."""
        if lo > hi:
            return []
        hits: List[Tuple[float, Indexable]] = []
        for rating, bucket in self.by_rating.items():
            if rating > hi:
                break  # keys ascend, nothing further can match
            if rating >= lo:
                hits.extend((rating, e) for e in bucket)
        hits.sort(key=lambda t: t[0], reverse=True)  # stable within a bucket
        log.debug("rating range [%s, %s]: %d hits", lo, hi, len(hits))
        return [e for _, e in hits]

    def range_by_date(self, start: date | datetime, end: date | datetime) -> List[Indexable]:
        """Entities bucketed on a day in [start, end], oldest day first."""
        start_d, end_d = as_day(start), as_day(end)
        out: List[Indexable] = []
        if start_d > end_d:
            return out
        for day, bucket in self.by_date.items(self.by_date.bisect_left(start_d)):
            if day > end_d:
                break
            out.extend(bucket)
        log.debug("date range [%s, %s]: %d hits", start_d, end_d, len(out))
        return out

    def top_rated(self, n: int) -> List[Indexable]:
        if n <= 0:
            return []
        out: List[Indexable] = []
        for _, bucket in self.by_rating.items_desc():
            out.extend(bucket)
            if len(out) >= n:
                break
        return out[:n]

    def by_prefix(self, prefix: str) -> List[Indexable]:
        """Entities whose lowercase name starts with `prefix`, in name order."""
        p = normalize_key(prefix)
        out: List[Indexable] = []
        for key, entity in self.by_name.items(self.by_name.bisect_left(p)):
            if key.startswith(p):
                out.append(entity)
            elif key > p:
                break  # past the matching range
        return out

    # ---- Full traversals ----
    def all_sorted_by_name(self) -> List[Indexable]:
        return [e for _, e in self.by_name.items()]

    def all_by_date(self) -> List[Indexable]:
        return [e for _, bucket in self.by_date.items() for e in bucket]

    def all_by_rating(self) -> List[Indexable]:
        return [e for _, bucket in self.by_rating.items() for e in bucket]

    def counts(self) -> Tuple[int, int, int]:
        """(names, date groups, rating groups)"""
        return len(self.by_name), len(self.by_date), len(self.by_rating)
