# catindex/DB/memory_store.py
from __future__ import annotations
from typing import Dict, Iterable, Iterator, Optional
from .api import CatalogueStore
from ..config import RECIPE, INGREDIENT
from ..models import Recipe, Ingredient
from ..normalize import check_entity_class, normalize_key


class MemoryStore(CatalogueStore):
    """Dictionaries of named recipes and ingredients, keyed case-insensitively."""
    def __init__(self,
                 recipes: Optional[Iterable[Recipe]] = None,
                 ingredients: Optional[Iterable[Ingredient]] = None) -> None:
        self._rows: Dict[str, Dict[str, Recipe | Ingredient]] = {RECIPE: {}, INGREDIENT: {}}
        self.bulk_create(recipes or (), ingredients or ())

    # C / U
    def put_recipe(self, r: Recipe) -> None:
        self._rows[RECIPE][normalize_key(r.name)] = r

    def put_ingredient(self, i: Ingredient) -> None:
        self._rows[INGREDIENT][normalize_key(i.name)] = i

    def bulk_create(self, recipes: Iterable[Recipe], ingredients: Iterable[Ingredient]) -> int:
        n = 0
        for r in recipes:
            self.put_recipe(r); n += 1
        for i in ingredients:
            self.put_ingredient(i); n += 1
        return n

    # R
    def read(self, entity_class: str, name: str) -> Optional[Recipe | Ingredient]:
        return self._rows[check_entity_class(entity_class)].get(normalize_key(name))

    def recipes(self) -> Iterator[Recipe]:
        # snapshot: a concurrent put must not break an iteration in progress
        yield from list(self._rows[RECIPE].values())  # type: ignore[misc]

    def ingredients(self) -> Iterator[Ingredient]:
        yield from list(self._rows[INGREDIENT].values())  # type: ignore[misc]

    def count(self) -> int:
        return sum(len(rows) for rows in self._rows.values())

    # D
    def delete(self, entity_class: str, name: str) -> None:
        self._rows[check_entity_class(entity_class)].pop(normalize_key(name), None)

    def close(self) -> None:
        for rows in self._rows.values():
            rows.clear()
