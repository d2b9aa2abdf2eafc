from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional
from cookify.core.models import PantryItemIn, PantryItemOut, SavedRecipe, UserRecord


class UserRepo(ABC):
    @abstractmethod
    def get(self, user_id: str) -> Optional[UserRecord]: ...
    @abstractmethod
    def get_by_email(self, email: str) -> Optional[UserRecord]: ...
    @abstractmethod
    def add(self, user: UserRecord) -> None: ...


class SavedRecipeRepo(ABC):
    @abstractmethod
    def list(self, user_id: str) -> List[SavedRecipe]: ...
    @abstractmethod
    def upsert(self, user_id: str, recipe: SavedRecipe) -> None: ...
    @abstractmethod
    def remove(self, user_id: str, recipe_id: str) -> int: ...


class PantryRepo(ABC):
    @abstractmethod
    def list(self, user_id: str) -> List[PantryItemOut]: ...
    @abstractmethod
    def upsert(self, user_id: str, item: PantryItemIn) -> PantryItemOut: ...
    @abstractmethod
    def remove(self, user_id: str, name: str) -> bool: ...


class TokenStore(ABC):
    @abstractmethod
    def load(self) -> Optional[str]: ...
    @abstractmethod
    def save(self, token: str) -> None: ...
    @abstractmethod
    def clear(self) -> None: ...
