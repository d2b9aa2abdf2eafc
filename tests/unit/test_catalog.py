# tests/unit/test_catalog.py
import httpx
import pytest

from cookify.config import Settings
from cookify.services.catalog import MealDBCatalog, meal_to_recipe
from cookify.services.exceptions import CatalogError

MEALS = {
    "52772": {
        "idMeal": "52772",
        "strMeal": "Teriyaki Chicken Casserole",
        "strCategory": "Chicken",
        "strArea": "Japanese",
        "strTags": "Meat,Casserole",
        "strMealThumb": "https://img/52772.jpg",
        "strInstructions": "STEP 1\r\nPreheat oven to 350F.\r\n\r\nSTEP 2\r\nCombine soy sauce.",
        "strIngredient1": "soy sauce", "strMeasure1": "3/4 cup",
        "strIngredient2": "chicken", "strMeasure2": " 2 breasts ",
        "strIngredient3": "", "strMeasure3": "",
        "strIngredient4": None, "strMeasure4": None,
    },
    "52959": {
        "idMeal": "52959",
        "strMeal": "Baked salmon with fennel",
        "strCategory": "Seafood",
        "strArea": "British",
        "strTags": None,
        "strMealThumb": "https://img/52959.jpg",
        "strInstructions": "Heat oven.",
        "strIngredient1": "salmon", "strMeasure1": "2 fillets",
    },
}

FILTER = {
    "chicken": ["52772"],
    "soy_sauce": ["52772", "52959"],
    "nothing": [],
}


def _handler(request):
    path = request.url.path
    key = request.url.params.get("i")
    if path.endswith("/filter.php"):
        ids = FILTER.get(key, [])
        return httpx.Response(200, json={"meals": [{"idMeal": i} for i in ids] or None})
    if path.endswith("/lookup.php"):
        meal = MEALS.get(key)
        return httpx.Response(200, json={"meals": [meal] if meal else None})
    return httpx.Response(404)


def _catalog(handler=_handler, limit=12):
    settings = Settings(search_limit=limit)
    http = httpx.Client(base_url=settings.mealdb_base_url, transport=httpx.MockTransport(handler))
    return MealDBCatalog(settings, http=http)


def test_meal_to_recipe_maps_fields():
    r = meal_to_recipe(MEALS["52772"], 2, 3)
    assert r.id == "52772"
    assert r.cuisine == "Japanese"
    assert r.meal_type == "Chicken"
    assert r.tags == ["Meat", "Casserole"]
    assert [(i.name, i.measure) for i in r.ingredients] == [("soy sauce", "3/4 cup"), ("chicken", "2 breasts")]
    assert r.instructions == ["Preheat oven to 350F.", "Combine soy sauce."]
    assert (r.match_count, r.total_searched) == (2, 3)


def test_search_ranks_by_matched_ingredients():
    out = _catalog().search(["Soy Sauce", "chicken"])
    assert [r.id for r in out] == ["52772", "52959"]
    assert out[0].match_count == 2
    assert out[1].match_count == 1
    assert all(r.total_searched == 2 for r in out)


def test_search_respects_limit():
    assert [r.id for r in _catalog(limit=1).search(["soy sauce"])] == ["52772"]


def test_search_with_no_hits_or_no_ingredients():
    assert _catalog().search(["nothing"]) == []
    assert _catalog().search([]) == []


def test_upstream_failure_is_catalog_error():
    with pytest.raises(CatalogError):
        _catalog(lambda request: httpx.Response(500)).search(["chicken"])
