import threading
from datetime import date

import pytest

from catindex.engine import Engine
from catindex.models import Recipe
from catindex.DB.memory_store import MemoryStore

WRITERS = 4
PER_WRITER = 50


def _recipe(name: str, rating: int = 4) -> Recipe:
    r = Recipe(name, cuisine="Italian")
    r.add_rating(rating)
    return r


def _engine(*recipes: Recipe):
    store = MemoryStore(recipes=recipes)
    eng = Engine(cache_capacity=8, today=lambda: date(2024, 5, 1))
    eng.build(store)
    return eng, store


@pytest.mark.e2e
def test_insert_during_rebuild_survives_the_swap():
    eng, store = _engine(_recipe("Pasta"))
    try:
        lasagne = _recipe("Lasagne", 5)

        def write():
            store.put_recipe(lasagne)
            eng.insert(lasagne)

        writer = threading.Thread(target=write)

        def recipes_then_write():
            yield from store.recipes()
            # the store has been read; the insert now races the swap
            writer.start()

        eng.rebuild(recipes_then_write(), store.ingredients())
        writer.join(timeout=5)
        assert not writer.is_alive()

        assert eng.complete("recipe", "la") == ["lasagne"]
        assert [r.name for r in eng.by_name_prefix("la")] == ["Lasagne"]
    finally:
        eng.shutdown()


@pytest.mark.e2e
def test_concurrent_inserts_reads_and_rebuilds():
    eng, store = _engine(_recipe("Pasta"), _recipe("Pizza", 5))
    errors = []
    done = threading.Event()

    def names_for(w):
        return [f"w{w}-dish-{i:03d}" for i in range(PER_WRITER)]

    def write(w):
        try:
            for name in names_for(w):
                r = _recipe(name, 1 + (len(name) % 5))
                store.put_recipe(r)
                eng.insert(r)
        except Exception as ex:
            errors.append(ex)

    def read():
        try:
            while not done.is_set():
                eng.complete("recipe", "w")
                eng.by_name_prefix("w1-")
                eng.top_rated(3)
        except Exception as ex:
            errors.append(ex)

    def rebuild():
        try:
            while not done.is_set():
                eng.rebuild(store.recipes(), store.ingredients())
        except Exception as ex:
            errors.append(ex)

    writers = [threading.Thread(target=write, args=(w,)) for w in range(WRITERS)]
    others = [threading.Thread(target=read) for _ in range(3)] + [threading.Thread(target=rebuild)]
    try:
        for t in others + writers:
            t.start()
        for t in writers:
            t.join(timeout=30)
        done.set()
        for t in others:
            t.join(timeout=30)

        assert errors == []
        assert not any(t.is_alive() for t in writers + others)
        for w in range(WRITERS):
            expected = names_for(w)
            assert [r.name for r in eng.by_name_prefix(f"w{w}-")] == expected
            assert all(eng.word_frequency("recipe", n) >= 1 for n in expected)
        assert eng.complete("recipe", "pa") == ["pasta"]
        assert eng.stats().classes["recipe"].names == 2 + WRITERS * PER_WRITER
    finally:
        done.set()
        eng.shutdown()
