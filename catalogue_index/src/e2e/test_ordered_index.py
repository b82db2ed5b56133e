# src/e2e/test_ordered_index.py
from datetime import date, datetime

import pytest

from catindex.DB.index import OrderedIndexSet
from catindex.models import Recipe, Ingredient


def _recipe(name: str, *ratings: int) -> Recipe:
    r = Recipe(name)
    for x in ratings:
        r.add_rating(x)
    return r


DAY = date(2024, 3, 1)


@pytest.fixture
def idx():
    s = OrderedIndexSet()
    for r in (_recipe("Pasta", 4), _recipe("Pizza", 5), _recipe("Risotto", 3),
              _recipe("Spaghetti", 4, 5), _recipe("Spinach Pie"), _recipe("Soup", 2)):
        s.add(r, DAY)
    return s


def _names(rows):
    return [r.name for r in rows]


def test_rating_range_contains_each_match_once_highest_first(idx):
    got = idx.range_by_rating(3, 4.5)
    assert _names(got) == ["Spaghetti", "Pasta", "Risotto"]
    assert len(set(map(id, got))) == len(got)


def test_rating_range_excludes_out_of_range_and_unrated(idx):
    names = _names(idx.range_by_rating(0, 5))
    assert "Spinach Pie" not in names      # unrated recipes are never bucketed
    assert set(names) == {"Pasta", "Pizza", "Risotto", "Spaghetti", "Soup"}
    assert idx.range_by_rating(4.6, 4.9) == []
    assert idx.range_by_rating(5, 1) == []


def test_top_rated_walks_buckets_from_the_top(idx):
    assert _names(idx.top_rated(2)) == ["Pizza", "Spaghetti"]
    assert _names(idx.top_rated(3)) == ["Pizza", "Spaghetti", "Pasta"]
    assert len(idx.top_rated(100)) == 5
    assert idx.top_rated(0) == []


def test_prefix_scan_is_case_insensitive_and_in_name_order(idx):
    assert _names(idx.by_prefix("sp")) == ["Spaghetti", "Spinach Pie"]
    assert _names(idx.by_prefix("SP")) == ["Spaghetti", "Spinach Pie"]
    assert _names(idx.by_prefix("Pi")) == ["Pizza"]
    assert idx.by_prefix("zz") == []
    assert len(idx.by_prefix("")) == 6


def test_prefix_scan_does_not_stop_inside_matching_range():
    s = OrderedIndexSet()
    for n in ("pa", "pasta", "pastry", "pb", "pasty"):
        s.add_name(Ingredient(n))
    assert _names(s.by_prefix("pas")) == ["pasta", "pastry", "pasty"]


def test_name_index_last_write_wins():
    s = OrderedIndexSet()
    first, second = Ingredient("Salt", 1), Ingredient("SALT", 2)
    s.add_name(first)
    s.add_name(second)
    assert s.all_sorted_by_name() == [second]


def test_date_range_is_inclusive_and_ordered():
    s = OrderedIndexSet()
    a, b, c = Recipe("a"), Recipe("b"), Recipe("c")
    s.add(c, date(2024, 1, 3))
    s.add(a, date(2024, 1, 1))
    s.add(b, datetime(2024, 1, 2, 23, 59))
    assert s.range_by_date(date(2024, 1, 1), date(2024, 1, 2)) == [a, b]
    assert s.range_by_date(datetime(2024, 1, 2, 8), date(2024, 1, 9)) == [b, c]
    assert s.range_by_date(date(2024, 2, 1), date(2024, 1, 1)) == []
    assert s.all_by_date() == [a, b, c]


def test_rating_bucket_is_a_snapshot():
    s = OrderedIndexSet()
    r = _recipe("Stew", 2)
    s.add(r, DAY)
    r.add_rating(5)          # live average is now 3.5
    assert s.range_by_rating(3, 5) == []
    assert s.range_by_rating(2, 2) == [r]


def test_same_entity_is_bucketed_once_per_key():
    s = OrderedIndexSet()
    r = _recipe("Curry", 4)
    s.add(r, DAY)
    s.add(r, DAY)
    assert s.range_by_rating(4, 4) == [r]
    assert s.all_by_date() == [r]


def test_full_traversals_and_counts(idx):
    assert _names(idx.all_sorted_by_name())[:3] == ["Pasta", "Pizza", "Risotto"]
    assert _names(idx.all_by_rating())[0] == "Soup"
    assert idx.counts() == (6, 1, 5)
    idx.clear()
    assert idx.counts() == (0, 0, 0)
