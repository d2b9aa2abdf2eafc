# cookify/core/pantry.py
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, List, Optional, Set

from pydantic import ValidationError

from .models import PantryItem, PantryItemIn, normalize_name
from cookify.services.exceptions import ApiError, PantryError

if TYPE_CHECKING:  # pragma: no cover
    from cookify.services.client import RemoteStoreClient

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def _to_datetime(value: date | datetime | str | None) -> Optional[datetime]:
    """Calendar dates travel as midnight UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


class PantrySynchronizer:
    """
    Client copy of the pantry, unique by case-insensitive name.

    The store only does whole-item create-or-replace, so an upsert that leaves
    a field out fills it from the cached item first. That read-modify-write is
    refused until hydrate() has run, rather than sending blanks.
    """

    def __init__(self, client: "RemoteStoreClient"):
        self._client = client
        self._items: List[PantryItem] = []
        self._loaded = False

    @property
    def items(self) -> List[PantryItem]:
        return list(self._items)

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self, name: str) -> Optional[PantryItem]:
        key = normalize_name(name)
        return next((i for i in self._items if i.key() == key), None)

    def names(self) -> Set[str]:
        return {i.key() for i in self._items}

    def __len__(self) -> int:
        return len(self._items)

    def hydrate(self) -> None:
        try:
            resp = self._client.get_pantry()
        except ApiError as e:
            raise PantryError.wrap(e) from e
        self._items = [PantryItem.from_out(out) for out in resp.items]
        self._loaded = True
        logger.debug("Hydrated %d pantry item(s)", len(self._items))

    def clear(self) -> None:
        self._items = []
        self._loaded = False

    def add(self, name: str) -> PantryItem:
        return self.upsert(name, quantity="", expiry_date=None)

    def upsert(self, name: str, quantity: Optional[str] = None, expiry_date: Any = UNSET) -> PantryItem:
        """
        Create or replace `name`. Omitted fields (quantity=None, expiry_date
        left UNSET) keep their cached values; pass expiry_date=None to clear it.
        """
        if quantity is None or expiry_date is UNSET:
            if not self._loaded:
                raise PantryError("Pantry is not loaded yet; send quantity and expiry_date together")
            current = self.get(name)
            if quantity is None:
                quantity = current.quantity if current else ""
            if expiry_date is UNSET:
                expiry_date = current.expiry_date if current else None

        try:
            payload = PantryItemIn(name=name, quantity=quantity, expiry_date=_to_datetime(expiry_date))
        except (ValidationError, ValueError) as e:
            raise PantryError(f"Invalid pantry item: {e}") from e

        try:
            saved = self._client.upsert_pantry_item(payload)
        except ApiError as e:
            logger.warning("Upserting pantry item %r failed: %s", name, e)
            raise PantryError.wrap(e) from e

        item = PantryItem.from_out(saved)
        stale = {normalize_name(payload.name), item.key()}
        self._items = [item] + [i for i in self._items if i.key() not in stale]
        return item

    def remove(self, name: str) -> None:
        try:
            resp = self._client.delete_pantry_item(name)
            if not resp.ok:
                raise ApiError("Delete was not acknowledged")
        except ApiError as e:
            logger.warning("Removing pantry item %r failed: %s", name, e)
            raise PantryError.wrap(e) from e
        self._items = [i for i in self._items if i.name != name]
