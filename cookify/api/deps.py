from __future__ import annotations

from typing import Iterator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cookify.config import Settings
from cookify.core.models import UserRecord
from cookify.services.catalog import MealDBCatalog
from cookify.services.exceptions import AuthError, RepoError
from cookify.services.llm import OpenAIRecipeGenerator, RecipeGenerator, SimpleRecipeGenerator
from cookify.services.metrics import MetricsLogger
from cookify.services.repo.json_repo import JSONPantryRepo, JSONSavedRecipeRepo, JSONUserRepo
from cookify.services.security import decode_token

_bearer = HTTPBearer(auto_error=False)

# ---- DI helpers --------------------------------------------------------------

def get_settings() -> Settings:
    return Settings()

def get_user_repo(settings: Settings = Depends(get_settings)) -> JSONUserRepo:
    return JSONUserRepo(settings)

def get_saved_repo(settings: Settings = Depends(get_settings)) -> JSONSavedRecipeRepo:
    return JSONSavedRecipeRepo(settings)

def get_pantry_repo(settings: Settings = Depends(get_settings)) -> JSONPantryRepo:
    return JSONPantryRepo(settings)

def get_metrics(settings: Settings = Depends(get_settings)) -> MetricsLogger:
    return MetricsLogger(settings)

def get_catalog(settings: Settings = Depends(get_settings)) -> Iterator[MealDBCatalog]:
    catalog = MealDBCatalog(settings)
    try:
        yield catalog
    finally:
        catalog.close()

def get_generator(settings: Settings = Depends(get_settings)) -> RecipeGenerator:
    # USE_OPENAI=false (or no key) keeps generation fully offline
    if settings.use_openai and settings.openai_api_key:
        return OpenAIRecipeGenerator(settings)
    return SimpleRecipeGenerator()


def _unauthorized(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    settings: Settings = Depends(get_settings),
    users: JSONUserRepo = Depends(get_user_repo),
) -> UserRecord:
    if creds is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_token(creds.credentials, settings)
    except AuthError:
        raise _unauthorized()
    try:
        user = users.get(str(payload.get("sub", "")))
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if user is None:
        raise _unauthorized()
    return user
