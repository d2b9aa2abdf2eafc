from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from cookify.config import Settings
from cookify.core.models import AIRecipe, Credentials, Recipe
from cookify.core.pantry import PantrySynchronizer
from cookify.core.saved import SavedRecipeReconciler
from cookify.core.session import Session, SessionGatekeeper
from cookify.services.client import RemoteStoreClient
from cookify.services.exceptions import AuthError
from cookify.services.repo.base import TokenStore
from cookify.services.repo.json_repo import JSONTokenRepo


def _credentials(email: str, password: str) -> Credentials:
    try:
        return Credentials(email=email, password=password)
    except ValidationError as e:
        raise AuthError(f"Invalid credentials: {e.errors()[0]['msg']}") from e


class AppController:
    """
    Top-level owner of the session and of the session-scoped collections.

    Typical use::

        app = AppController()
        app.startup()
        if not app.is_logged_in():
            app.login("a@b.com", "secret1")
        for r in app.search_recipes(["chicken", "rice"]):
            app.saved.save(r)
    """

    def __init__(self, settings: Optional[Settings] = None, http: Optional[httpx.Client] = None,
                 token_store: Optional[TokenStore] = None):
        self.settings = settings or Settings()
        self.session = Session(token_store or JSONTokenRepo(self.settings))
        self.client = RemoteStoreClient(self.session, self.settings, http=http)
        self.saved = SavedRecipeReconciler(self.client)
        self.pantry = PantrySynchronizer(self.client)
        self.gatekeeper = SessionGatekeeper(self.client, self.session, self.saved, self.pantry)

    def startup(self) -> bool:
        return self.gatekeeper.startup()

    def is_logged_in(self) -> bool:
        return self.gatekeeper.is_logged_in()

    def login(self, email: str, password: str) -> Session:
        return self.gatekeeper.login(_credentials(email, password))

    def register(self, email: str, password: str) -> Session:
        return self.gatekeeper.login(_credentials(email, password), register=True)

    def logout(self) -> None:
        self.gatekeeper.logout()

    def search_recipes(self, ingredients: List[str]) -> List[Recipe]:
        return self.client.search_recipes(ingredients).items

    def generate_ai_recipes(self, ingredients: List[str],
                            filters: Optional[Dict[str, Any]] = None) -> List[AIRecipe]:
        return self.client.generate_ai_recipes(ingredients, filters).items

    def close(self) -> None:
        self.client.close()
