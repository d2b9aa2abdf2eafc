from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from cookify.config import Settings
from cookify.core.models import Ingredient, Recipe
from .exceptions import CatalogError

logger = logging.getLogger(__name__)

_STEP_LABEL = re.compile(r"^(step\s*)?\d+[.):]?$", re.IGNORECASE)


def _steps(text: Optional[str]) -> List[str]:
    lines = [ln.strip() for ln in (text or "").splitlines()]
    return [ln for ln in lines if ln and not _STEP_LABEL.match(ln)]


def meal_to_recipe(meal: Dict[str, Any], match_count: int = 0, total_searched: int = 0) -> Recipe:
    """Map a TheMealDB `lookup.php` meal onto the catalog recipe shape."""
    ingredients: List[Ingredient] = []
    for n in range(1, 21):
        name = (meal.get(f"strIngredient{n}") or "").strip()
        if name:
            ingredients.append(Ingredient(name=name, measure=(meal.get(f"strMeasure{n}") or "").strip()))
    tags = [t.strip() for t in (meal.get("strTags") or "").split(",") if t.strip()]
    return Recipe(
        id=str(meal["idMeal"]),
        title=meal.get("strMeal") or "",
        image=meal.get("strMealThumb") or "",
        cuisine=meal.get("strArea") or "",
        meal_type=meal.get("strCategory") or "",
        tags=tags,
        ingredients=ingredients,
        instructions=_steps(meal.get("strInstructions")),
        match_count=match_count,
        total_searched=total_searched,
    )


class MealDBCatalog:
    """
    TheMealDB client. Search is one `filter.php` call per ingredient, then
    `lookup.php` for the best-ranked meals; rank is how many of the searched
    ingredients a meal contains.
    """

    def __init__(self, settings: Settings, http: Optional[httpx.Client] = None):
        self._http = http or httpx.Client(base_url=settings.mealdb_base_url, timeout=15.0)
        self._limit = settings.search_limit

    def close(self) -> None:
        self._http.close()

    def _get(self, path: str, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            resp = self._http.get(path, params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CatalogError(f"TheMealDB request failed: {e}") from e
        return data if isinstance(data, dict) else {}

    def search(self, ingredients: List[str]) -> List[Recipe]:
        if not ingredients:
            return []
        counts: Dict[str, int] = {}
        for ing in ingredients:
            data = self._get("/filter.php", {"i": ing.strip().lower().replace(" ", "_")})
            for meal in data.get("meals") or []:
                counts[meal["idMeal"]] = counts.get(meal["idMeal"], 0) + 1

        # sorted() is stable: ties keep first-seen order
        ranked = sorted(counts, key=lambda mid: -counts[mid])[: self._limit]
        out: List[Recipe] = []
        for mid in ranked:
            meals = self._get("/lookup.php", {"i": mid}).get("meals") or []
            if not meals:
                logger.debug("Meal %s vanished between filter and lookup", mid)
                continue
            out.append(meal_to_recipe(meals[0], counts[mid], len(ingredients)))
        return out
