# catindex/engine.py
from __future__ import annotations

import os
import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional

from . import config as CFG
from .config import RECIPE, INGREDIENT, ENTITY_CLASSES
from .models import Recipe, Ingredient, IndexStats
from .normalize import normalize_key, check_entity_class
from .trie import Trie
from .lru import LRUCache
from .loader import load_catalogue
from .sync import Synchronizer
from .stats import collect_stats
from .DB.index import OrderedIndexSet, Indexable
from .DB.api import CatalogueStore, make_store

log = logging.getLogger(__name__)


@dataclass
class ClassIndex:
    """Everything derived for one entity class. `lock` guards trie + ordered."""
    trie: Trie
    ordered: OrderedIndexSet
    cache: LRUCache[str, Indexable]
    lock: threading.RLock = field(default_factory=threading.RLock)


def entity_class_of(entity: object) -> str:
    if isinstance(entity, Recipe):
        return RECIPE
    if isinstance(entity, Ingredient):
        return INGREDIENT
    raise ValueError(f"Cannot infer entity class for {type(entity).__name__}; pass entity_class=")


class Engine:
    """
    Explicit context object owning every index of the catalogue:
      - one Trie, one OrderedIndexSet and one LRUCache per entity class,
      - the Synchronizer that rebuilds them,
      - an optional canonical CatalogueStore for the cache-miss read path.

    Public API (used by the REPL and Flask):
      * build(...):       attach/seed a store -> rebuild every index
      * insert(entity):   write path for one entity
      * complete(...):    trie autocomplete
      * cache_get/cache_put/lookup: hot lookups
      * by_rating_range/by_date_range/top_rated/by_name_prefix: ordered queries
      * rebuild(...), clear_all(), stats(), shutdown()

    Index results are hints: entries for entities removed from the store stay
    visible until the next rebuild.
    """

    # ------------- lifecycle -------------

    def __init__(
        self,
        *,
        cache_capacity: int = CFG.CACHE_CAPACITY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._today = today
        self._classes: Dict[str, ClassIndex] = {
            cls: ClassIndex(trie=Trie(), ordered=OrderedIndexSet(), cache=LRUCache(cache_capacity))
            for cls in ENTITY_CLASSES
        }
        self._sync = Synchronizer(self._classes, today=today)
        self._store: Optional[CatalogueStore] = None

    # /* ~~~ Attach a canonical store (optionally seeded from a JSON catalogue) and index it ~~~ */
    def build(
        self,
        store: Optional[CatalogueStore] = None,
        *,
        db_dsn: Optional[str] = None,      # e.g. "memory://"; ignored when `store` is given
        catalogue: Optional[str] = None,   # JSON catalogue to bulk-load into the store
        verbose: bool = False,
    ) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["CATINDEX_VERBOSE"] = "1"
            CFG.VERBOSE = True

        if store is None:
            dsn = db_dsn or CFG.DEFAULT_DSN
            log.info("Initializing catalogue store: %s", dsn)
            store = make_store(dsn)

        if catalogue:
            recipes, ingredients = load_catalogue(catalogue)
            n = store.bulk_create(recipes, ingredients)
            log.info("Imported %d entities from %s", n, catalogue)

        self._store = store
        self.rebuild(store.recipes(), store.ingredients())
        log.info("Engine build() complete: entities=%d", store.count())

    @property
    def store(self) -> CatalogueStore:
        if self._store is None:
            raise RuntimeError("Engine has no store. Call build() first.")
        return self._store

    # ------------- write path -------------

    def insert(self, entity: Indexable, entity_class: Optional[str] = None) -> None:
        cls = check_entity_class(entity_class) if entity_class else entity_class_of(entity)
        bundle = self._classes[cls]
        with bundle.lock:
            bundle.trie.insert(entity.name)
            bundle.ordered.add(entity, self._today())
        log.debug("Indexed %s %r", cls, entity.name)

    # ------------- autocomplete -------------

    def complete(self, entity_class: str, prefix: str, max_results: int = CFG.MAX_SUGGESTIONS) -> List[str]:
        bundle = self._bundle(entity_class)
        with bundle.lock:
            out = bundle.trie.complete(prefix, max_results)
        log.debug("Generated %d %s suggestions for %r", len(out), entity_class, prefix)
        return out

    def word_frequency(self, entity_class: str, name: str) -> int:
        bundle = self._bundle(entity_class)
        with bundle.lock:
            return bundle.trie.word_frequency(name)

    # ------------- cache / read path -------------

    def cache_get(self, entity_class: str, name: str, default: Optional[Indexable] = None) -> Optional[Indexable]:
        return self._bundle(entity_class).cache.get(normalize_key(name), default)

    def cache_put(self, entity_class: str, name: str, entity: Indexable) -> None:
        self._bundle(entity_class).cache.put(normalize_key(name), entity)

    # /* ~~~ cache first, then the canonical store; a store hit repopulates the cache ~~~ */
    def lookup(self, entity_class: str, name: str) -> Optional[Indexable]:
        hit = self.cache_get(entity_class, name)
        if hit is not None:
            return hit
        entity = self.store.read(entity_class, name)
        if entity is not None:
            self.cache_put(entity_class, name, entity)
        return entity

    # ------------- ordered queries -------------

    def by_rating_range(self, lo: float, hi: float, entity_class: str = RECIPE) -> List[Indexable]:
        bundle = self._bundle(entity_class)
        with bundle.lock:
            return bundle.ordered.range_by_rating(lo, hi)

    def by_date_range(self, start: date | datetime, end: date | datetime,
                      entity_class: str = RECIPE) -> List[Indexable]:
        bundle = self._bundle(entity_class)
        with bundle.lock:
            return bundle.ordered.range_by_date(start, end)

    def top_rated(self, n: int = CFG.TOP_RATED, entity_class: str = RECIPE) -> List[Indexable]:
        bundle = self._bundle(entity_class)
        with bundle.lock:
            return bundle.ordered.top_rated(n)

    def by_name_prefix(self, prefix: str, entity_class: str = RECIPE) -> List[Indexable]:
        bundle = self._bundle(entity_class)
        with bundle.lock:
            out = bundle.ordered.by_prefix(prefix)
        log.debug("Found %d %s entries with prefix %r", len(out), entity_class, prefix)
        return out

    def all_sorted_by_name(self, entity_class: str = RECIPE) -> List[Indexable]:
        bundle = self._bundle(entity_class)
        with bundle.lock:
            return bundle.ordered.all_sorted_by_name()

    def all_by_date(self, entity_class: str = RECIPE) -> List[Indexable]:
        bundle = self._bundle(entity_class)
        with bundle.lock:
            return bundle.ordered.all_by_date()

    def all_by_rating(self, entity_class: str = RECIPE) -> List[Indexable]:
        bundle = self._bundle(entity_class)
        with bundle.lock:
            return bundle.ordered.all_by_rating()

    # ------------- maintenance -------------

    def rebuild(self, recipes: Iterable[Indexable], ingredients: Iterable[Indexable]) -> Dict[str, int]:
        return self._sync.rebuild(recipes, ingredients)

    def clear_all(self) -> None:
        for bundle in self._classes.values():
            with bundle.lock:
                bundle.trie.clear()
                bundle.ordered.clear()
            bundle.cache.clear()
        log.info("Cleared all tries, caches and ordered indexes")

    def stats(self) -> IndexStats:
        return collect_stats(self._classes)

    # ------------- teardown -------------

    def shutdown(self) -> None:
        try:
            if self._store:
                self._store.close()
        finally:
            self._store = None
            self.clear_all()
            log.info("Engine shutdown complete")

    # ------------- internals -------------

    def _bundle(self, entity_class: str) -> ClassIndex:
        return self._classes[check_entity_class(entity_class)]
