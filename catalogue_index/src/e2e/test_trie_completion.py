# src/e2e/test_trie_completion.py
import pytest

from catindex.trie import Trie


@pytest.fixture
def trie() -> Trie:
    t = Trie()
    for w in ("Spaghetti", "Spinach", "Spring Rolls", "Pasta", "Pizza"):
        t.insert(w)
    return t


def test_every_prefix_of_an_inserted_word_completes_to_it(trie):
    for word in ("spaghetti", "spinach", "pizza"):
        for i in range(1, len(word) + 1):
            assert word in trie.complete(word[:i], 10)


def test_completion_is_case_insensitive(trie):
    assert trie.complete("SP", 10) == trie.complete("sp", 10)
    assert "spring rolls" in trie.complete("Spr", 10)


def test_unknown_prefix_returns_empty(trie):
    assert trie.complete("xyz", 10) == []
    assert trie.complete("spx", 10) == []


def test_non_positive_max_results_returns_empty(trie):
    assert trie.complete("sp", 0) == []


def test_frequency_accumulates_per_insert():
    t = Trie()
    for _ in range(4):
        t.insert("Basil")
    assert t.word_frequency("basil") == 4
    assert t.word_frequency("BASIL") == 4
    assert t.word_frequency("bas") == 0      # prefix, not a word
    assert t.word_frequency("oregano") == 0


def test_ranking_is_true_top_k_not_first_collected():
    # "apple" is reached before "apricot" in insertion/traversal order but is rarer;
    # a capped-then-sorted collection would return it for k=1.
    t = Trie()
    t.insert("apple")
    t.insert("apex"); t.insert("apex")
    for _ in range(3):
        t.insert("apricot")
    assert t.complete("ap", 1) == ["apricot"]
    assert t.complete("ap", 3) == ["apricot", "apex", "apple"]


def test_equal_frequency_ties_break_alphabetically():
    t = Trie()
    for w in ("pizza", "pasta", "pesto"):
        t.insert(w)
    assert t.complete("p", 10) == ["pasta", "pesto", "pizza"]


def test_node_and_word_counts():
    t = Trie()
    assert t.node_count() == 1 and t.word_count() == 0
    t.insert("ab")
    t.insert("ac")
    t.insert("ab")
    # root + a + b + c
    assert t.node_count() == 4
    assert t.word_count() == 2
    assert len(t) == 2
    assert "AB" in t and "a" not in t


def test_empty_word_is_ignored_and_clear_resets():
    t = Trie()
    t.insert("")
    assert t.word_count() == 0
    t.insert("salt")
    t.clear()
    assert t.complete("s", 5) == []
    assert t.node_count() == 1
