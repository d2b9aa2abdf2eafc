# cookify/core/saved.py
from __future__ import annotations

import itertools
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, List, Literal, Optional, Set

from pydantic import BaseModel

from .models import RecipeRecord, SaveRecipeRequest, SavedRecipe
from cookify.services.exceptions import ApiError, SaveError, UnsaveError

if TYPE_CHECKING:  # pragma: no cover
    from cookify.services.client import RemoteStoreClient

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PendingChange:
    """A local mutation waiting on the remote store."""
    action: Literal["save", "unsave"]
    recipe_id: str
    payload: Optional[SavedRecipe] = None
    status: Literal["pending", "committed", "failed"] = "pending"


class SavedRecipeReconciler:
    """
    Client view of the user's saved recipes.

    The authoritative collection is an ordered mapping keyed by `recipe_id`
    (newest first), so saving the same recipe twice keeps a single entry.
    A save is shown at once through a shadow view of pending changes and only
    enters the authoritative collection once the store acknowledges it; an
    unsave touches nothing locally until the store confirms the delete.

    AI recipes get a new id on every generation, so two saves of "the same"
    AI recipe are two distinct entries. There is no content-based dedup.
    """

    def __init__(self, client: "RemoteStoreClient"):
        self._client = client
        self._committed: "OrderedDict[str, SavedRecipe]" = OrderedDict()
        self._pending: List[PendingChange] = []
        self._ids: Set[str] = set()
        self._seq = itertools.count(1)

    # ---- views -----------------------------------------------------------------

    @property
    def saved(self) -> List[SavedRecipe]:
        """Saved recipes, newest first, including saves still in flight."""
        view: "OrderedDict[str, SavedRecipe]" = OrderedDict(self._committed)
        for change in self._pending:
            if change.action == "save" and change.status == "pending":
                view[change.recipe_id] = change.payload
                view.move_to_end(change.recipe_id, last=False)
        return list(view.values())

    @property
    def saved_ids(self) -> FrozenSet[str]:
        return frozenset(self._ids)

    @property
    def pending(self) -> List[PendingChange]:
        return list(self._pending)

    def is_saved(self, recipe_id: str) -> bool:
        return recipe_id in self._ids

    def __len__(self) -> int:
        return len(self.saved)

    # ---- sync ------------------------------------------------------------------

    def hydrate(self) -> None:
        """Replace local state with the store's; the server wins."""
        resp = self._client.get_saved_recipes()
        fresh: "OrderedDict[str, SavedRecipe]" = OrderedDict()
        for item in resp.items:
            # Listing is newest first; keep the newest copy of a duplicated recipe_id
            fresh.setdefault(item.recipe_id, item)
        if len(fresh) != len(resp.items):
            logger.warning("Store returned %d duplicate saved recipe(s)", len(resp.items) - len(fresh))
        self._committed = fresh
        self._pending.clear()
        self._ids = set(fresh)
        logger.debug("Hydrated %d saved recipe(s)", len(fresh))

    def clear(self) -> None:
        self._committed.clear()
        self._pending.clear()
        self._ids.clear()

    def save(self, recipe: BaseModel | Dict[str, Any]) -> SavedRecipe:
        """
        Save a catalog or AI recipe.

        Returns the locally synthesized record. Its `id` is a temporary
        placeholder until the next hydrate() brings the server-assigned one.
        Raises SaveError when the store rejects the save; the optimistic entry
        is rolled back first.
        """
        record = RecipeRecord.from_any(recipe)
        request = SaveRecipeRequest.from_record(record)
        optimistic = SavedRecipe.from_request(self._temp_id(), record.id, request)

        change = PendingChange("save", record.id, optimistic)
        self._pending.append(change)
        self._ids.add(record.id)
        try:
            resp = self._client.save_recipe(record.id, request)
            if not resp.ok:
                raise ApiError("Save was not acknowledged")
        except ApiError as e:
            change.status = "failed"
            if record.id not in self._committed:
                self._ids.discard(record.id)
            logger.warning("Saving recipe %s failed: %s", record.id, e)
            raise SaveError.wrap(e) from e
        finally:
            self._pending.remove(change)

        change.status = "committed"
        self._committed[record.id] = optimistic
        self._committed.move_to_end(record.id, last=False)
        return optimistic

    def unsave(self, recipe_id: str) -> None:
        """Remove every local entry for `recipe_id`, but only after the store did."""
        change = PendingChange("unsave", recipe_id)
        self._pending.append(change)
        try:
            resp = self._client.delete_saved_recipe(recipe_id)
            if not resp.ok:
                raise ApiError("Delete was not acknowledged")
        except ApiError as e:
            change.status = "failed"
            logger.warning("Unsaving recipe %s failed: %s", recipe_id, e)
            raise UnsaveError.wrap(e) from e
        finally:
            self._pending.remove(change)

        change.status = "committed"
        self._committed.pop(recipe_id, None)
        self._ids.discard(recipe_id)

    def _temp_id(self) -> str:
        return f"temp_{int(time.time() * 1000)}_{next(self._seq)}"
