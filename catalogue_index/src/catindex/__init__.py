"""
Catalogue Index

Indexing and caching layer that sits in front of a recipe/ingredient
catalogue. It keeps derived, rebuildable views over the canonical store:

- a prefix trie per entity class for autocomplete, ranked by insert frequency
- a fixed-capacity LRU cache per entity class for hot lookups
- ordered indexes by name, insertion day and rating snapshot, for
  alphabetical, date-range and rating-range queries without re-sorting

Everything is owned by one Engine instance; there is no module-level state.

Example Usage:
    from catindex import Engine, Recipe

    eng = Engine()
    eng.build()                       # empty in-memory store
    pasta = Recipe("Pasta"); pasta.add_rating(4)
    eng.store.put_recipe(pasta)
    eng.insert(pasta)

    eng.complete("recipe", "pa")      # ['pasta']
    eng.top_rated(1)                  # [pasta]
    print(eng.stats())
"""

# src/catindex/__init__.py
from .engine import Engine  # re-export
from .models import Recipe, Ingredient

__version__ = "1.0.0"
__all__ = ["Engine", "Recipe", "Ingredient"]
