from __future__ import annotations
from typing import TYPE_CHECKING, Dict

from .models import ClassStats, IndexStats

if TYPE_CHECKING:  # pragma: no cover
    from .engine import ClassIndex


def collect_stats(classes: Dict[str, "ClassIndex"]) -> IndexStats:
    """
    Read-only aggregation over every class bundle. Trie counts are full
    traversals (O(nodes)); everything else is a size lookup.
    """
    out: Dict[str, ClassStats] = {}
    for name, bundle in classes.items():
        with bundle.lock:
            names, date_groups, rating_groups = bundle.ordered.counts()
            out[name] = ClassStats(
                trie_nodes=bundle.trie.node_count(),
                trie_words=bundle.trie.word_count(),
                names=names,
                date_groups=date_groups,
                rating_groups=rating_groups,
                cache=bundle.cache.stats(),
            )
    return IndexStats(classes=out)
