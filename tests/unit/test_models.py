# tests/unit/test_models.py
from datetime import date, datetime, timezone

import pytest
from cookify.core.models import (
    AIRecipe,
    Credentials,
    PantryItem,
    PantryItemIn,
    PantryItemOut,
    Recipe,
    RecipeRecord,
    SaveRecipeRequest,
)


def test_catalog_payload_has_no_ai_marker(catalog_recipe):
    rec = RecipeRecord.from_any(catalog_recipe)
    assert rec.is_ai_generated is None
    assert rec.source == "TheMealDB"


def test_ai_payload_is_recognised_by_its_marker(ai_recipe):
    rec = RecipeRecord.from_any(AIRecipe(**ai_recipe))
    assert rec.is_ai_generated is True
    assert rec.source == "AI"
    assert rec.time_minutes == 15


def test_catalog_model_dump_does_not_invent_ai_fields(catalog_recipe):
    rec = RecipeRecord.from_any(Recipe(**catalog_recipe))
    assert rec.is_ai_generated is None
    assert rec.time_minutes is None


def test_save_request_copies_fields_and_defaults_flag(catalog_recipe):
    req = SaveRecipeRequest.from_record(RecipeRecord.from_any(catalog_recipe))
    assert req.source == "TheMealDB"
    assert req.is_ai_generated is False
    assert req.title == "Teriyaki Chicken Casserole"
    assert req.ingredients[0].measure == "3/4 cup"
    body = req.model_dump(mode="json")
    assert "id" not in body
    assert body["meal_type"] == "Chicken"


def test_falsy_ai_marker_saves_as_catalog(ai_recipe):
    ai_recipe["is_ai_generated"] = False
    req = SaveRecipeRequest.from_record(RecipeRecord.from_any(ai_recipe))
    assert req.source == "TheMealDB"


def test_pantry_item_truncates_expiry_to_date():
    out = PantryItemOut(
        name="Milk",
        quantity=None,
        expiry_date=datetime(2026, 10, 21, 18, 30, tzinfo=timezone.utc),
        added_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
    )
    item = PantryItem.from_out(out)
    assert item.expiry_date == date(2026, 10, 21)
    assert item.quantity == ""
    assert item.key() == "milk"


def test_pantry_item_name_cannot_be_blank():
    with pytest.raises(Exception):
        PantryItemIn(name="   ")


def test_credentials_validation():
    assert Credentials(email=" a@b.com ", password="secret1").email == "a@b.com"
    with pytest.raises(Exception):
        Credentials(email="nope", password="secret1")
    with pytest.raises(Exception):
        Credentials(email="a@b.com", password="123")


def test_camel_case_ai_payload_keeps_its_marker():
    payload = {
        "id": "ai-0002",
        "title": "Egg Fried Rice",
        "mealType": "Main",
        "timeMinutes": 20,
        "nutritionSummary": "~450 kcal",
        "isAiGenerated": True,
    }
    rec = RecipeRecord.from_any(payload)
    assert rec.source == "AI"
    assert rec.meal_type == "Main"
    req = SaveRecipeRequest.from_record(rec)
    assert req.is_ai_generated is True
    assert req.time_minutes == 20
    assert req.nutrition_summary == "~450 kcal"
