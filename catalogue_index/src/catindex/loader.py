from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict, List, Tuple

from . import config as CFG
from .models import Recipe, Ingredient

log = logging.getLogger(__name__)


def _ingredient_from(name: str, raw: Dict[str, Any]) -> Ingredient:
    return Ingredient(
        name=str(raw.get("name", name)),
        quantity=int(raw.get("quantity", 0)),
        unit=str(raw.get("unit", "")),
    )


def _recipe_from(name: str, raw: Dict[str, Any]) -> Recipe:
    r = Recipe(
        name=str(raw.get("name", name)),
        cuisine=str(raw.get("cuisine", "")),
        preparation_time=int(raw.get("preparation_time", 0)),
    )
    for rating in raw.get("ratings", []):
        r.add_rating(int(rating))
    for item in raw.get("ingredients", []):
        r.add_ingredient(_ingredient_from(item.get("name", ""), item))
    return r


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    # sections are objects keyed by entity name; a plain list of objects is accepted too
    raw = data.get(key) or data.get(key.capitalize()) or {}
    if isinstance(raw, list):
        return {str(item.get("name", "")): item for item in raw}
    if not isinstance(raw, dict):
        raise ValueError(f"'{key}' must be an object or a list, got {type(raw).__name__}")
    return raw


def load_catalogue(path: str) -> Tuple[List[Recipe], List[Ingredient]]:
    """
    Read a JSON catalogue export:

        {"recipes":     {"Pasta": {"cuisine": "Italian", "ratings": [4, 5], ...}},
         "ingredients": {"Basil": {"quantity": 10, "unit": "g"}}}

    Returns the entities; the caller decides how to store and index them
    (Engine.build() rebuilds every index after the load).
    """
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object at top level")

    try:
        recipes = [_recipe_from(n, raw) for n, raw in _section(data, "recipes").items()]
        ingredients = [_ingredient_from(n, raw) for n, raw in _section(data, "ingredients").items()]
    except (TypeError, AttributeError) as exc:
        raise ValueError(f"{path}: malformed catalogue entry") from exc

    log.info("Loaded catalogue %s: recipes=%d ingredients=%d", path, len(recipes), len(ingredients))
    if CFG.VERBOSE:
        print(f"[loaded] recipes={len(recipes):,} ingredients={len(ingredients):,}")
    return recipes, ingredients
