# catindex/DB/api.py
from __future__ import annotations
from typing import Protocol, Iterable, Iterator, Optional

from ..models import Recipe, Ingredient


class CatalogueStore(Protocol):
    """Canonical entity store. The index layer only reads from it."""
    # Create / update (last write for a name wins)
    def put_recipe(self, r: Recipe) -> None: ...
    def put_ingredient(self, i: Ingredient) -> None: ...
    def bulk_create(self, recipes: Iterable[Recipe], ingredients: Iterable[Ingredient]) -> int: ...
    # Read
    def read(self, entity_class: str, name: str) -> Optional[Recipe | Ingredient]: ...
    def recipes(self) -> Iterator[Recipe]: ...
    def ingredients(self) -> Iterator[Ingredient]: ...
    def count(self) -> int: ...
    # Delete
    def delete(self, entity_class: str, name: str) -> None: ...
    # lifecycle
    def close(self) -> None: ...


def make_store(
    dsn: str,
    *,
    recipes: Optional[Iterable[Recipe]] = None,
    ingredients: Optional[Iterable[Ingredient]] = None,
) -> CatalogueStore:
    """
    Factory:
      - memory:// -> MemoryStore, optionally seeded with recipes/ingredients
    """
    if dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        return MemoryStore(recipes=recipes, ingredients=ingredients)

    raise ValueError(f"Unsupported store DSN: {dsn}")
