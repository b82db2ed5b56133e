# catindex/models.py
"""
Data models for the catalogue index layer.

The index layer only reads a handful of fields from the catalogue's domain
objects (name, average rating, quantity). The classes here carry exactly that
surface plus the two statistics records reported by the layer:

- Recipe / Ingredient: the canonical entities the indexes point at.
- CacheStats: a snapshot of one LRU cache.
- IndexStats: the aggregate report produced by catindex.stats.

Entities compare by identity (eq=False): index buckets and caches hold
references to the live objects, never copies.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(eq=False)
class Ingredient:
    """
    An ingredient as seen by the index layer.

    Attributes
    ----------
    name : str
        Unique name inside the catalogue (case preserved; indexes lowercase it).
    quantity : int
        Amount in `unit`. Not used for indexing.
    unit : str
        Unit of measurement (e.g. "g", "ml").
    """
    name: str
    quantity: int = 0
    unit: str = ""

    @property
    def average_rating(self) -> float:
        # ingredients are never rated, so they never land in a rating bucket
        return 0.0


@dataclass(eq=False)
class Recipe:
    """
    A recipe as seen by the index layer.

    Attributes
    ----------
    name : str
        Unique name inside the catalogue.
    cuisine : str
        Free-form cuisine label (e.g. "Italian").
    preparation_time : int
        Minutes.
    ratings : List[int]
        Individual 1..5 ratings; the average is what the rating index snapshots.
    ingredients : List[Ingredient]
        Ingredients referenced by this recipe.
    """
    name: str
    cuisine: str = ""
    preparation_time: int = 0
    ratings: List[int] = field(default_factory=list)
    ingredients: List[Ingredient] = field(default_factory=list)

    def add_rating(self, rating: int) -> None:
        if not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5.")
        self.ratings.append(rating)

    def add_ingredient(self, ingredient: Ingredient) -> None:
        self.ingredients.append(ingredient)

    @property
    def average_rating(self) -> float:
        """Mean of all ratings, or 0.0 when the recipe is unrated."""
        if not self.ratings:
            return 0.0
        return sum(self.ratings) / len(self.ratings)


@dataclass(frozen=True, slots=True)
class CacheStats:
    """
    Snapshot of one LRU cache.

    hit_rate is hits / (hits + misses) over the cache's lifetime; 0.0 before
    the first lookup. oldest_access / newest_access are the last-access times
    of the LRU and MRU entries (None when the cache is empty).
    """
    capacity: int
    count: int
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    hit_rate: float = 0.0
    oldest_access: Optional[datetime] = None
    newest_access: Optional[datetime] = None

    def to_dict(self) -> Dict[str, object]:
        d = asdict(self)
        for k in ("oldest_access", "newest_access"):
            if d[k] is not None:
                d[k] = d[k].isoformat()
        return d

    def __str__(self) -> str:
        age = 0.0
        if self.oldest_access is not None and self.newest_access is not None:
            age = (self.newest_access - self.oldest_access).total_seconds() / 60
        return (f"Cache: {self.count}/{self.capacity} items, Hit Rate: {self.hit_rate:.2%}, "
                f"Age Range: {age:.1f} minutes")


@dataclass(frozen=True, slots=True)
class ClassStats:
    """Per entity-class counters (trie + ordered indexes)."""
    trie_nodes: int
    trie_words: int
    names: int
    date_groups: int
    rating_groups: int
    cache: CacheStats


@dataclass(frozen=True, slots=True)
class IndexStats:
    """Aggregate report returned by Engine.stats(); keyed by entity class."""
    classes: Dict[str, ClassStats]

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {}
        for name, cs in self.classes.items():
            out[name] = {
                "trie_nodes": cs.trie_nodes,
                "trie_words": cs.trie_words,
                "names": cs.names,
                "date_groups": cs.date_groups,
                "rating_groups": cs.rating_groups,
                "cache": cs.cache.to_dict(),
            }
        return out

    def __str__(self) -> str:
        parts = []
        for name, cs in self.classes.items():
            parts.append(
                f"{name}: {cs.trie_words} words/{cs.trie_nodes} nodes, "
                f"{cs.names} names, {cs.date_groups} date groups, "
                f"{cs.rating_groups} rating groups, cache {cs.cache.count}/{cs.cache.capacity}"
            )
        return " | ".join(parts)
