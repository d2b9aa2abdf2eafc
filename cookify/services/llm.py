from __future__ import annotations

import json
import uuid
from typing import Any, Dict, List, Optional

from openai import OpenAI
from pydantic import BaseModel

from .exceptions import LLMError
from cookify.core.models import AIRecipe, Ingredient
from cookify.config import Settings


def new_ai_id() -> str:
    """AI recipes are never stable: every generation mints fresh ids."""
    return f"ai-{uuid.uuid4().hex}"


class RecipeGenerator(BaseModel):
    def generate(self, ingredients: List[str], filters: Optional[Dict[str, Any]] = None) -> List[AIRecipe]:  # pragma: no cover
        raise NotImplementedError


def _row_to_recipe(r: Dict[str, Any]) -> AIRecipe:
    ings = []
    for i in r.get("ingredients", []):
        if isinstance(i, str):
            ings.append(Ingredient(name=i))
        else:
            ings.append(Ingredient(name=i["name"], measure=str(i.get("measure") or "")))
    return AIRecipe(
        id=new_ai_id(),
        title=r["title"],
        cuisine=r.get("cuisine") or "",
        meal_type=r.get("meal_type") or "",
        tags=list(r.get("tags", [])),
        ingredients=ings,
        instructions=list(r.get("instructions", [])),
        time_minutes=r.get("time_minutes"),
        servings=r.get("servings"),
        difficulty=r.get("difficulty"),
        nutrition_summary=r.get("nutrition_summary"),
    )


class OpenAIRecipeGenerator(RecipeGenerator):
    _client: OpenAI
    _model: str

    def __init__(self, settings: Settings):
        super().__init__()
        if not settings.openai_api_key:
            raise LLMError("OPENAI_API_KEY is not set")
        try:
            self._client = OpenAI(api_key=settings.openai_api_key)
        except Exception as e:
            raise LLMError("Could not initialize OpenAI client") from e
        self._model = settings.openai_model_recipes

    def generate(self, ingredients: List[str], filters: Optional[Dict[str, Any]] = None) -> List[AIRecipe]:
        try:
            prompt = (
                "Propose 3 home-cooking recipes that use mostly the ingredients below. "
                "Respect every filter given (cuisine, diet, time, servings). "
                "Return ONLY a strict JSON object in this format:\n"
                "Schema: {\"recipes\":[{\"title\": str, \"cuisine\": str, \"meal_type\": str, "
                "\"tags\":[str], \"ingredients\":[{\"name\": str, \"measure\": str}], "
                "\"instructions\":[str], \"time_minutes\": int?, \"servings\": int?, "
                "\"difficulty\": \"easy\"|\"medium\"|\"hard\"?, \"nutrition_summary\": str?}]}\n\n"
                f"Ingredients: {json.dumps(ingredients)}\n"
                f"Filters: {json.dumps(filters or {})}\n"
                "No commentary."
            )
            resp = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "system", "content": "You are a precise recipe generator returning strict JSON."},
                          {"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
            )
            content = resp.choices[0].message.content or "{\"recipes\":[]}"
            data = json.loads(content)
            return [_row_to_recipe(r) for r in data.get("recipes", [])]
        except Exception as e:
            raise LLMError(f"OpenAI generate failed: {e}") from e


class SimpleRecipeGenerator(RecipeGenerator):
    """Offline generator that crafts lightweight ideas from the ingredients.

    Deterministic apart from the ids, so the app keeps working without OpenAI.
    """

    def generate(self, ingredients: List[str], filters: Optional[Dict[str, Any]] = None) -> List[AIRecipe]:
        filters = filters or {}
        names = [n.strip() for n in ingredients if n and n.strip()] or ["salt", "pepper"]
        lowered = [n.lower() for n in names]
        cuisine = str(filters.get("cuisine") or "")
        servings = int(filters.get("servings") or 2)
        max_time = filters.get("max_time_minutes") or filters.get("time_minutes")
        tags = [str(t) for t in (filters.get("diet") or [])]

        def make_recipe(title: str, meal_type: str, minutes: int, steps: List[str]) -> AIRecipe:
            if max_time:
                minutes = min(minutes, int(max_time))
            return AIRecipe(
                id=new_ai_id(),
                title=title,
                cuisine=cuisine,
                meal_type=meal_type,
                tags=tags[:],
                ingredients=[Ingredient(name=n, measure="to taste") for n in names],
                instructions=steps,
                time_minutes=minutes,
                servings=servings,
                difficulty="easy",
                nutrition_summary="Estimate unavailable offline.",
            )

        base = ", ".join(names[:3])
        recipes: List[AIRecipe] = []
        if any("egg" in n for n in lowered):
            recipes.append(make_recipe(f"Quick {names[0].title()} Scramble", "Breakfast", 10, [
                "Whisk the eggs with a pinch of salt.",
                f"Soften {base} in a hot pan with a little fat.",
                "Pour in the eggs and stir gently until just set.",
            ]))
        if any(k in n for n in lowered for k in ("rice", "pasta", "noodle")):
            recipes.append(make_recipe(f"One-Pan {names[0].title()} Bowl", "Main", 25, [
                "Cook the grain or pasta until tender; drain.",
                f"Fry {base} until fragrant.",
                "Toss everything together, season and serve hot.",
            ]))
        recipes.append(make_recipe("Pantry Toss", "Side", 15, [
            "Prep ingredients (wash, chop as needed).",
            f"Saute {base} over medium heat until done to your liking.",
            "Season to taste and serve warm.",
        ]))
        return recipes
