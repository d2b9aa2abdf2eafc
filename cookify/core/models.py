# cookify/core/models.py
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Source = Literal["AI", "TheMealDB"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------- Recipes ----------

class Ingredient(BaseModel):
    name: str
    measure: str = ""


class _RecipeBase(BaseModel):
    id: str
    title: str
    tags: List[str] = Field(default_factory=list)
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)


class Recipe(_RecipeBase):
    """Catalog-sourced recipe as returned by /recipes/search."""
    image: str = ""
    cuisine: str = ""
    meal_type: str = ""
    match_count: int = 0
    total_searched: int = 0


class AIRecipe(_RecipeBase):
    """AI-sourced recipe; `id` is minted per generation call."""
    image: str = ""
    cuisine: str = ""
    meal_type: str = ""
    time_minutes: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[str] = None
    nutrition_summary: Optional[str] = None
    source: Source = "AI"
    is_ai_generated: bool = True


class RecipeRecord(_RecipeBase):
    """
    One shape for a recipe regardless of where it came from.

    The remote API never tags catalog recipes; an AI recipe is recognised by
    carrying `is_ai_generated`. A catalog payload therefore parses with
    `is_ai_generated=None`. Both snake_case and camelCase keys are accepted.
    """
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    image: Optional[str] = None
    cuisine: Optional[str] = None
    meal_type: Optional[str] = None
    time_minutes: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    nutrition_summary: Optional[str] = None
    is_ai_generated: Optional[bool] = None

    @classmethod
    def from_any(cls, recipe: BaseModel | Dict[str, Any]) -> "RecipeRecord":
        if isinstance(recipe, RecipeRecord):
            return recipe
        if isinstance(recipe, BaseModel):
            recipe = recipe.model_dump()
        return cls.model_validate(recipe)

    @property
    def source(self) -> Source:
        return "AI" if self.is_ai_generated else "TheMealDB"


class SaveRecipeRequest(BaseModel):
    title: str
    image: Optional[str] = None
    source: Source
    cuisine: Optional[str] = None
    meal_type: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    time_minutes: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    nutrition_summary: Optional[str] = None
    is_ai_generated: bool = False

    @classmethod
    def from_record(cls, record: RecipeRecord) -> "SaveRecipeRequest":
        data = record.model_dump(exclude={"id", "is_ai_generated"})
        return cls(**data, source=record.source, is_ai_generated=bool(record.is_ai_generated))


class SavedRecipe(BaseModel):
    """A saved recipe; `id` is the persistence identity, `recipe_id` the recipe's own."""
    id: str
    recipe_id: str
    title: str
    image: Optional[str] = None
    source: Source
    created_at: datetime
    cuisine: Optional[str] = None
    meal_type: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    time_minutes: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    nutrition_summary: Optional[str] = None
    is_ai_generated: bool = False

    @classmethod
    def from_request(cls, saved_id: str, recipe_id: str, req: SaveRecipeRequest,
                     created_at: Optional[datetime] = None) -> "SavedRecipe":
        return cls(id=saved_id, recipe_id=recipe_id, created_at=created_at or utcnow(), **req.model_dump())


class RecipeSearchRequest(BaseModel):
    ingredients: List[str] = Field(default_factory=list)

    @field_validator("ingredients")
    @classmethod
    def _drop_blank(cls, v: List[str]) -> List[str]:
        return [s.strip() for s in v if s and s.strip()]


class AIRecipeRequest(RecipeSearchRequest):
    filters: Optional[Dict[str, Any]] = None


class RecipeSearchResponse(BaseModel):
    items: List[Recipe]


class AIRecipeResponse(BaseModel):
    items: List[AIRecipe]


class SavedRecipesResponse(BaseModel):
    items: List[SavedRecipe]


# ---------- Pantry ----------

class PantryItemIn(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: str = ""
    expiry_date: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Pantry item name cannot be blank")
        return v


class PantryItemOut(BaseModel):
    name: str
    quantity: Optional[str] = ""
    expiry_date: Optional[datetime] = None
    added_at: datetime


class PantryResponse(BaseModel):
    items: List[PantryItemOut]


class PantryItem(BaseModel):
    """Client view of a pantry entry; expiry is a calendar date only."""
    name: str
    quantity: str = ""
    expiry_date: Optional[date] = None
    added_at: datetime

    @classmethod
    def from_out(cls, out: PantryItemOut) -> "PantryItem":
        return cls(
            name=out.name,
            quantity=out.quantity or "",
            expiry_date=out.expiry_date.date() if out.expiry_date else None,
            added_at=out.added_at,
        )

    def key(self) -> str:
        return normalize_name(self.name)


def normalize_name(name: str) -> str:
    """Pantry key: names are unique case-insensitively."""
    return name.strip().lower()


# ---------- Auth ----------

class Credentials(BaseModel):
    email: str
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("Invalid email address")
        return v


class User(BaseModel):
    id: str
    email: str
    created_at: datetime


class UserRecord(User):
    """Stored account; never leaves the server."""
    password_hash: str
    salt: str


class TokenResponse(BaseModel):
    access: str


class Profile(BaseModel):
    id: str
    email: str


class Health(BaseModel):
    status: str
    timestamp: datetime


class OkResponse(BaseModel):
    ok: bool
