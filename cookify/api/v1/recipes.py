from __future__ import annotations

import logging
import time
import uuid

from fastapi import APIRouter, Depends, HTTPException

from cookify.api.deps import get_catalog, get_current_user, get_generator, get_metrics, get_saved_repo
from cookify.core.models import (
    AIRecipeRequest,
    AIRecipeResponse,
    OkResponse,
    RecipeSearchRequest,
    RecipeSearchResponse,
    SaveRecipeRequest,
    SavedRecipe,
    UserRecord,
)
from cookify.services.catalog import MealDBCatalog
from cookify.services.exceptions import CatalogError, LLMError, RepoError
from cookify.services.llm import RecipeGenerator, SimpleRecipeGenerator
from cookify.services.metrics import MetricsLogger
from cookify.services.repo.json_repo import JSONSavedRecipeRepo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("/search", response_model=RecipeSearchResponse)
def search_recipes(
    req: RecipeSearchRequest,
    catalog: MealDBCatalog = Depends(get_catalog),
    metrics: MetricsLogger = Depends(get_metrics),
):
    t0 = time.perf_counter()
    try:
        items = catalog.search(req.ingredients)
    except CatalogError as e:
        raise HTTPException(status_code=502, detail=str(e))
    metrics.log_latency("recipe_search", (time.perf_counter() - t0) * 1000.0,
                        extra={"ingredients": len(req.ingredients), "results": len(items)})
    return RecipeSearchResponse(items=items)


@router.post("/ai", response_model=AIRecipeResponse)
def generate_ai_recipes(
    req: AIRecipeRequest,
    generator: RecipeGenerator = Depends(get_generator),
    metrics: MetricsLogger = Depends(get_metrics),
):
    t0 = time.perf_counter()
    engine = type(generator).__name__
    try:
        items = generator.generate(req.ingredients, req.filters)
    except LLMError as e:
        # Fall back to the offline generator to avoid breaking the UI
        logger.warning("AI generation failed, using offline generator: %s", e)
        engine = SimpleRecipeGenerator.__name__
        items = SimpleRecipeGenerator().generate(req.ingredients, req.filters)
    metrics.log_latency("ai_generate", (time.perf_counter() - t0) * 1000.0,
                        extra={"engine": engine, "results": len(items)})
    return AIRecipeResponse(items=items)


@router.post("/{recipe_id}/save", response_model=OkResponse)
def save_recipe(
    recipe_id: str,
    req: SaveRecipeRequest,
    user: UserRecord = Depends(get_current_user),
    repo: JSONSavedRecipeRepo = Depends(get_saved_repo),
):
    saved = SavedRecipe.from_request(uuid.uuid4().hex, recipe_id, req)
    try:
        repo.upsert(user.id, saved)
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return OkResponse(ok=True)
