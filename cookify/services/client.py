from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from cookify.config import Settings
from cookify.core.models import (
    AIRecipeRequest,
    AIRecipeResponse,
    Credentials,
    Health,
    OkResponse,
    PantryItemIn,
    PantryItemOut,
    PantryResponse,
    Profile,
    RecipeSearchRequest,
    RecipeSearchResponse,
    SaveRecipeRequest,
    SavedRecipesResponse,
    TokenResponse,
    User,
)
from cookify.services.exceptions import ApiError, NetworkError

if TYPE_CHECKING:  # pragma: no cover
    from cookify.core.session import Session

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return "Request failed"
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str) and detail:
        return detail
    if detail:
        # FastAPI validation errors come back as a list of dicts
        return str(detail)
    return "Request failed"


class RemoteStoreClient:
    """
    One method per remote operation. Failures never leak transport types:
    non-2xx responses raise ApiError with the server's `detail`, transport
    failures raise NetworkError. No retries.
    """

    def __init__(self, session: "Session", settings: Optional[Settings] = None,
                 http: Optional[httpx.Client] = None):
        self.session = session
        if http is None:
            settings = settings or Settings()
            kwargs: Dict[str, Any] = {"base_url": settings.api_url}
            if settings.http_timeout is not None:
                kwargs["timeout"] = settings.http_timeout
            http = httpx.Client(**kwargs)
        self._http = http

    def close(self) -> None:
        self._http.close()

    # ---- transport -------------------------------------------------------------

    def _request(self, method: str, path: str, model: Type[M], body: Optional[BaseModel] = None) -> M:
        headers = {"Content-Type": "application/json", **self.session.auth_headers()}
        payload = body.model_dump(mode="json") if body is not None else None
        try:
            resp = self._http.request(method, path, json=payload, headers=headers)
        except httpx.RequestError as e:
            logger.debug("%s %s failed: %s", method, path, e)
            raise NetworkError("Network error") from e

        if not resp.is_success:
            detail = _detail(resp)
            logger.debug("%s %s -> %s %s", method, path, resp.status_code, detail)
            raise ApiError(detail, status_code=resp.status_code)

        try:
            return model.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise ApiError("Malformed response", status_code=resp.status_code) from e

    # ---- auth ------------------------------------------------------------------

    def register(self, credentials: Credentials) -> User:
        return self._request("POST", "/auth/register", User, credentials)

    def login(self, credentials: Credentials) -> TokenResponse:
        return self._request("POST", "/auth/login", TokenResponse, credentials)

    def get_profile(self) -> Profile:
        return self._request("GET", "/auth/me", Profile)

    def health(self) -> Health:
        return self._request("GET", "/health", Health)

    # ---- recipes ---------------------------------------------------------------

    def search_recipes(self, ingredients: List[str]) -> RecipeSearchResponse:
        return self._request("POST", "/recipes/search", RecipeSearchResponse,
                             RecipeSearchRequest(ingredients=ingredients))

    def generate_ai_recipes(self, ingredients: List[str],
                            filters: Optional[Dict[str, Any]] = None) -> AIRecipeResponse:
        return self._request("POST", "/recipes/ai", AIRecipeResponse,
                             AIRecipeRequest(ingredients=ingredients, filters=filters))

    def save_recipe(self, recipe_id: str, data: SaveRecipeRequest) -> OkResponse:
        return self._request("POST", f"/recipes/{quote(recipe_id, safe='')}/save", OkResponse, data)

    def get_saved_recipes(self) -> SavedRecipesResponse:
        return self._request("GET", "/users/me/saved", SavedRecipesResponse)

    def delete_saved_recipe(self, recipe_id: str) -> OkResponse:
        return self._request("DELETE", f"/users/me/saved/{quote(recipe_id, safe='')}", OkResponse)

    # ---- pantry ----------------------------------------------------------------

    def get_pantry(self) -> PantryResponse:
        return self._request("GET", "/pantry", PantryResponse)

    def upsert_pantry_item(self, item: PantryItemIn) -> PantryItemOut:
        return self._request("PUT", "/pantry", PantryItemOut, item)

    def delete_pantry_item(self, name: str) -> OkResponse:
        return self._request("DELETE", f"/pantry/{quote(name, safe='')}", OkResponse)
