# cookify/core/session.py
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Dict, FrozenSet, Optional

from .models import Credentials, Profile
from cookify.services.exceptions import ApiError, AuthError, NetworkError, RepoError, ServiceError
from cookify.services.repo.base import TokenStore

if TYPE_CHECKING:  # pragma: no cover
    from cookify.core.pantry import PantrySynchronizer
    from cookify.core.saved import SavedRecipeReconciler
    from cookify.services.client import RemoteStoreClient

logger = logging.getLogger(__name__)


class Session:
    """Bearer credential of the signed-in user, persisted through a TokenStore."""

    def __init__(self, store: TokenStore):
        self._store = store
        self._token: Optional[str] = None
        try:
            self._token = store.load()
        except RepoError as e:
            logger.info("Unreadable token store (%s); starting logged out", e)
            self.end()

    @property
    def token(self) -> Optional[str]:
        return self._token

    def start(self, token: str) -> None:
        self._store.save(token)
        self._token = token

    def end(self) -> None:
        """Forget the token; a store that cannot be cleared is logged, not raised."""
        self._token = None
        try:
            self._store.clear()
        except RepoError as e:
            logger.warning("Could not clear token store: %s", e)

    def auth_headers(self) -> Dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}


class View(str, Enum):
    AUTH = "auth"
    PROFILE = "profile"
    RECIPES = "recipes"
    INGREDIENTS = "ingredients"
    PANTRY = "pantry"
    ABOUT = "about"


PUBLIC_VIEWS: FrozenSet[View] = frozenset({View.AUTH, View.RECIPES, View.ABOUT})
MEMBER_VIEWS: FrozenSet[View] = frozenset(View) - {View.AUTH}


class SessionGatekeeper:
    """
    Owns login state. Logging in hydrates the saved recipes and the pantry;
    logging out (locally, never via the store) empties them.
    """

    def __init__(self, client: "RemoteStoreClient", session: Session,
                 saved: "SavedRecipeReconciler", pantry: "PantrySynchronizer"):
        self._client = client
        self.session = session
        self._saved = saved
        self._pantry = pantry
        self._logged_in = False
        self.active_view = View.AUTH

    def is_logged_in(self) -> bool:
        return self._logged_in

    def startup(self) -> bool:
        """Trust a persisted token only after the store vouches for it."""
        if not self.session.token:
            return False
        try:
            self._client.get_profile()
        except ServiceError as e:
            # An expired session is expected here, not a fault
            logger.info("Stored token rejected (%s); starting logged out", e)
            self.session.end()
            self._logged_in = False
            return False
        self._enter()
        return True

    def login(self, credentials: Credentials, register: bool = False) -> Session:
        try:
            if register:
                self._client.register(credentials)
            token = self._client.login(credentials)
        except NetworkError:
            raise
        except ApiError as e:
            raise AuthError.wrap(e) from e
        self.session.start(token.access)
        self._enter()
        return self.session

    def logout(self) -> None:
        self._logged_in = False
        self._saved.clear()
        self._pantry.clear()
        self.active_view = View.AUTH
        self.session.end()

    def profile(self) -> Profile:
        try:
            return self._client.get_profile()
        except ApiError as e:
            if e.status_code == 401:
                logger.info("Session rejected by store; logging out")
                self.logout()
                raise AuthError.wrap(e) from e
            raise

    # ---- view gating -----------------------------------------------------------

    def reachable_views(self) -> FrozenSet[View]:
        return MEMBER_VIEWS if self._logged_in else PUBLIC_VIEWS

    def can_view(self, view: View | str) -> bool:
        try:
            return View(view) in self.reachable_views()
        except ValueError:
            return False

    def navigate(self, view: View | str) -> bool:
        if not self.can_view(view):
            return False
        self.active_view = View(view)
        return True

    # ---- internals -------------------------------------------------------------

    def _enter(self) -> None:
        self._logged_in = True
        self.active_view = View.PROFILE
        for name, component in (("saved recipes", self._saved), ("pantry", self._pantry)):
            try:
                component.hydrate()
            except ServiceError as e:
                logger.warning("Failed to fetch %s: %s", name, e)
