from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import heapq

from .normalize import normalize_key


@dataclass(slots=True)
class TrieNode:
    children: Dict[str, "TrieNode"] = field(default_factory=dict)
    is_end: bool = False
    word: Optional[str] = None   # set only on terminal nodes
    freq: int = 0                # bumped on every insert of `word`


class Trie:
    """
    Character trie over lowercased names, one instance per entity class.
    Terminal nodes remember the full word and how many times it was inserted;
    completion ranks by that frequency (desc), then alphabetically.
    """
    def __init__(self) -> None:
        self._root = TrieNode()

    # -------- Build-time API --------
    def insert(self, word: str) -> None:
        key = normalize_key(word)
        if not key:
            return
        node = self._root
        for ch in key:
            nxt = node.children.get(ch)
            if nxt is None:
                nxt = node.children[ch] = TrieNode()
            node = nxt
        node.is_end = True
        node.word = key
        node.freq += 1

    def clear(self) -> None:
        self._root = TrieNode()

    # -------- Query API --------
    def complete(self, prefix: str, max_results: int) -> List[str]:
        """
        Return up to `max_results` words starting with `prefix`, most frequent first.

        Every terminal below the prefix node is visited and a bounded heap keeps
        the best `max_results`, so a frequent word deep in the subtree is never
        pushed out by an earlier, rarer one.
        """
        if max_results <= 0:
            return []
        node = self._walk(normalize_key(prefix))
        if node is None:
            return []
        best = heapq.nsmallest(max_results, self._terminals(node), key=lambda t: (-t[1], t[0]))
        return [w for w, _ in best]

    def word_frequency(self, word: str) -> int:
        node = self._walk(normalize_key(word))
        if node is None or not node.is_end:
            return 0
        return node.freq

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.word_frequency(word) > 0

    def __len__(self) -> int:
        return self.word_count()

    # -------- Statistics (full traversals) --------
    def node_count(self) -> int:
        """Total nodes including the root."""
        return sum(1 for _ in self._iter_nodes(self._root))

    def word_count(self) -> int:
        return sum(1 for n in self._iter_nodes(self._root) if n.is_end)

    # -------- internals --------
    def _walk(self, key: str) -> Optional[TrieNode]:
        node = self._root
        for ch in key:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    @staticmethod
    def _iter_nodes(start: TrieNode) -> Iterator[TrieNode]:
        # explicit stack: long names must not hit the recursion limit
        stack = [start]
        while stack:
            n = stack.pop()
            yield n
            stack.extend(n.children.values())

    def _terminals(self, start: TrieNode) -> Iterator[Tuple[str, int]]:
        for n in self._iter_nodes(start):
            if n.is_end and n.word is not None:
                yield n.word, n.freq
