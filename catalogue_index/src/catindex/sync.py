from __future__ import annotations
import logging
import time
from contextlib import ExitStack
from datetime import date
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Tuple

from . import config as CFG
from .config import RECIPE, INGREDIENT, ENTITY_CLASSES
from .trie import Trie
from .DB.index import OrderedIndexSet, Indexable

if TYPE_CHECKING:  # pragma: no cover
    from .engine import ClassIndex

log = logging.getLogger(__name__)


class Synchronizer:
    """
    Rebuilds derived index state from the canonical store.

    New tries and ordered indexes are built while every class lock is held and
    then swapped into the bundles, so a rebuild never interleaves with an insert
    or a traversing read. Caches are emptied on swap because their entries may
    point at entities that left the store.
    """
    def __init__(self, classes: Dict[str, "ClassIndex"], today: Callable[[], date] = date.today) -> None:
        self._classes = classes
        self._today = today

    def rebuild(self, recipes: Iterable[Indexable], ingredients: Iterable[Indexable]) -> Dict[str, int]:
        t0 = time.perf_counter()
        day = self._today()
        sources: Dict[str, Iterable[Indexable]] = {RECIPE: recipes, INGREDIENT: ingredients}

        fresh: Dict[str, Tuple[Trie, OrderedIndexSet]] = {}
        counts: Dict[str, int] = {}
        with ExitStack() as held:
            # every class lock, always in ENTITY_CLASSES order, from reading the store to the swap:
            # an insert either lands before the read (and is rebuilt) or waits for the new structures
            for cls in ENTITY_CLASSES:
                held.enter_context(self._classes[cls].lock)

            for cls, entities in sources.items():
                trie, ordered = Trie(), OrderedIndexSet()
                items: List[Indexable] = list(entities)
                for e in items:
                    trie.insert(e.name)
                ordered.add_many(items, day)
                fresh[cls] = (trie, ordered)
                counts[cls] = len(ordered.by_name)

            for cls, (trie, ordered) in fresh.items():
                bundle = self._classes[cls]
                bundle.trie = trie
                bundle.ordered = ordered
                bundle.cache.clear()

        log.info("Synchronized %d recipes and %d ingredients in %.3fs",
                 counts[RECIPE], counts[INGREDIENT], time.perf_counter() - t0)
        if CFG.VERBOSE:
            print(f"[rebuild] recipes={counts[RECIPE]:,} ingredients={counts[INGREDIENT]:,}")
        return counts
