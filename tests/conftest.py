import itertools
from typing import Callable, Dict, List

import pytest

from cookify.core.models import (
    OkResponse,
    PantryItemOut,
    PantryResponse,
    Profile,
    SavedRecipe,
    SavedRecipesResponse,
    TokenResponse,
    User,
    normalize_name,
    utcnow,
)
from cookify.services.exceptions import ApiError


class FakeStoreClient:
    """In-memory stand-in for RemoteStoreClient with per-operation failure switches."""

    def __init__(self):
        self.saved: List[SavedRecipe] = []
        self.pantry: List[PantryItemOut] = []
        self.fail: Dict[str, ApiError] = {}
        self.hooks: Dict[str, Callable[[], None]] = {}
        self.calls: List[str] = []
        self.sent: List = []
        self._ids = itertools.count(1)

    def _call(self, op: str) -> None:
        self.calls.append(op)
        if op in self.hooks:
            self.hooks[op]()
        if op in self.fail:
            raise self.fail[op]

    # auth
    def register(self, credentials):
        self._call("register")
        return User(id="u1", email=credentials.email, created_at=utcnow())

    def login(self, credentials):
        self._call("login")
        return TokenResponse(access="token-1")

    def get_profile(self):
        self._call("get_profile")
        return Profile(id="u1", email="a@b.com")

    # saved
    def get_saved_recipes(self):
        self._call("get_saved_recipes")
        return SavedRecipesResponse(items=list(self.saved))

    def save_recipe(self, recipe_id, data):
        self._call("save_recipe")
        self.sent.append(data)
        self.saved = [s for s in self.saved if s.recipe_id != recipe_id]
        self.saved.insert(0, SavedRecipe.from_request(f"srv-{next(self._ids)}", recipe_id, data))
        return OkResponse(ok=True)

    def delete_saved_recipe(self, recipe_id):
        self._call("delete_saved_recipe")
        kept = [s for s in self.saved if s.recipe_id != recipe_id]
        if len(kept) == len(self.saved):
            raise ApiError("Recipe not found in saved recipes", status_code=404)
        self.saved = kept
        return OkResponse(ok=True)

    # pantry
    def get_pantry(self):
        self._call("get_pantry")
        return PantryResponse(items=list(self.pantry))

    def upsert_pantry_item(self, item):
        self._call("upsert_pantry_item")
        self.sent.append(item)
        key = normalize_name(item.name)
        existing = next((p for p in self.pantry if normalize_name(p.name) == key), None)
        out = PantryItemOut(
            name=item.name,
            quantity=item.quantity,
            expiry_date=item.expiry_date,
            added_at=existing.added_at if existing else utcnow(),
        )
        self.pantry = [out] + [p for p in self.pantry if normalize_name(p.name) != key]
        return out

    def delete_pantry_item(self, name):
        self._call("delete_pantry_item")
        key = normalize_name(name)
        kept = [p for p in self.pantry if normalize_name(p.name) != key]
        if len(kept) == len(self.pantry):
            raise ApiError("Pantry item not found", status_code=404)
        self.pantry = kept
        return OkResponse(ok=True)


@pytest.fixture
def store():
    return FakeStoreClient()


@pytest.fixture
def catalog_recipe():
    return {
        "id": "52772",
        "title": "Teriyaki Chicken Casserole",
        "image": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
        "cuisine": "Japanese",
        "meal_type": "Chicken",
        "tags": ["Meat", "Casserole"],
        "ingredients": [{"name": "soy sauce", "measure": "3/4 cup"}],
        "instructions": ["Preheat oven to 350F."],
        "match_count": 1,
        "total_searched": 2,
    }


@pytest.fixture
def ai_recipe():
    return {
        "id": "ai-0001",
        "title": "Tomato Egg Stir-fry",
        "image": "",
        "cuisine": "Chinese",
        "meal_type": "Main",
        "tags": ["quick"],
        "ingredients": [{"name": "egg", "measure": "3"}],
        "instructions": ["Scramble eggs.", "Add tomatoes."],
        "time_minutes": 15,
        "servings": 2,
        "difficulty": "easy",
        "nutrition_summary": "~300 kcal",
        "source": "AI",
        "is_ai_generated": True,
    }
