from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager, suppress
from typing import Any, Dict, Iterator, List, Optional

from pydantic import ValidationError

from cookify.config import Settings
from cookify.core.models import (
    PantryItemIn,
    PantryItemOut,
    SavedRecipe,
    UserRecord,
    normalize_name,
    utcnow,
)
from cookify.services.exceptions import RepoError
from cookify.services.repo.base import PantryRepo, SavedRecipeRepo, TokenStore, UserRepo

# Cross-platform file lock (fcntl for *nix; msvcrt for Windows)
try:
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover
    fcntl = None
    import msvcrt  # type: ignore


@contextmanager
def _locked(path: str) -> Iterator[None]:
    """Exclusive lock on a sidecar file; the document itself is replaced atomically."""
    lock_path = path + ".lock"
    os.makedirs(os.path.dirname(lock_path) or ".", exist_ok=True)
    f = open(lock_path, "a+b")
    try:
        try:
            if fcntl is not None:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            else:  # pragma: no cover
                f.seek(0)
                msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)
        except OSError as e:
            raise RepoError(f"Could not lock file {path}: {e}") from e
        try:
            yield
        finally:
            if fcntl is not None:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
            else:  # pragma: no cover
                f.seek(0)
                msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)
    finally:
        f.close()


def _atomic_write(path: str, data: bytes) -> None:
    d = os.path.dirname(path) or "."
    os.makedirs(d, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp-", dir=d)
    try:
        with os.fdopen(fd, "wb") as w:
            w.write(data)
            w.flush()
            os.fsync(w.fileno())
        os.replace(tmp, path)
    except OSError as e:
        with suppress(OSError):
            os.remove(tmp)
        raise RepoError(f"Atomic write failed for {path}: {e}") from e


class _JSONDocument:
    """One JSON object on disk, read and rewritten whole."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "rb") as f:
                raw = f.read() or b"{}"
            return json.loads(raw.decode("utf-8"))
        except (OSError, ValueError) as e:
            raise RepoError(f"Failed to load {self.path}: {e}") from e

    def _write(self, doc: Dict[str, Any]) -> None:
        payload = json.dumps(doc, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        _atomic_write(self.path, payload)

    def _snapshot(self) -> Dict[str, Any]:
        with _locked(self.path):
            return self._read()

    @contextmanager
    def _transaction(self) -> Iterator[Dict[str, Any]]:
        # Nothing is written if the body raises
        with _locked(self.path):
            doc = self._read()
            yield doc
            self._write(doc)


class JSONUserRepo(_JSONDocument, UserRepo):
    def __init__(self, settings: Settings):
        super().__init__(settings.users_file)

    def _users(self) -> List[UserRecord]:
        try:
            return [UserRecord(**u) for u in self._snapshot().get("users", [])]
        except ValidationError as e:
            raise RepoError(f"Corrupt user record in {self.path}: {e}") from e

    def get(self, user_id: str) -> Optional[UserRecord]:
        return next((u for u in self._users() if u.id == user_id), None)

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        email = email.strip().lower()
        return next((u for u in self._users() if u.email == email), None)

    def add(self, user: UserRecord) -> None:
        with self._transaction() as doc:
            users = doc.setdefault("users", [])
            if any(u.get("email") == user.email for u in users):
                raise RepoError(f"Duplicate user {user.email}")
            users.append(user.model_dump(mode="json"))


class JSONSavedRecipeRepo(_JSONDocument, SavedRecipeRepo):
    """Saved recipes per user, newest first."""

    def __init__(self, settings: Settings):
        super().__init__(settings.saved_file)

    def list(self, user_id: str) -> List[SavedRecipe]:
        rows = self._snapshot().get("users", {}).get(user_id, [])
        try:
            return [SavedRecipe(**r) for r in rows]
        except ValidationError as e:
            raise RepoError(f"Corrupt saved recipe in {self.path}: {e}") from e

    def upsert(self, user_id: str, recipe: SavedRecipe) -> None:
        with self._transaction() as doc:
            rows = doc.setdefault("users", {}).setdefault(user_id, [])
            rows[:] = [r for r in rows if r.get("recipe_id") != recipe.recipe_id]
            rows.insert(0, recipe.model_dump(mode="json"))

    def remove(self, user_id: str, recipe_id: str) -> int:
        with self._transaction() as doc:
            rows = doc.setdefault("users", {}).setdefault(user_id, [])
            kept = [r for r in rows if r.get("recipe_id") != recipe_id]
            removed = len(rows) - len(kept)
            rows[:] = kept
        return removed


class JSONPantryRepo(_JSONDocument, PantryRepo):
    """Pantry items per user, keyed by case-insensitive name."""

    def __init__(self, settings: Settings):
        super().__init__(settings.pantry_file)

    def list(self, user_id: str) -> List[PantryItemOut]:
        rows = self._snapshot().get("users", {}).get(user_id, [])
        try:
            return [PantryItemOut(**r) for r in rows]
        except ValidationError as e:
            raise RepoError(f"Corrupt pantry item in {self.path}: {e}") from e

    def upsert(self, user_id: str, item: PantryItemIn) -> PantryItemOut:
        key = normalize_name(item.name)
        with self._transaction() as doc:
            rows = doc.setdefault("users", {}).setdefault(user_id, [])
            existing = next((r for r in rows if normalize_name(r.get("name", "")) == key), None)
            out = PantryItemOut(
                name=item.name,
                quantity=item.quantity,
                expiry_date=item.expiry_date,
                added_at=existing["added_at"] if existing else utcnow(),
            )
            rows[:] = [r for r in rows if normalize_name(r.get("name", "")) != key]
            rows.insert(0, out.model_dump(mode="json"))
        return out

    def remove(self, user_id: str, name: str) -> bool:
        key = normalize_name(name)
        with self._transaction() as doc:
            rows = doc.setdefault("users", {}).setdefault(user_id, [])
            kept = [r for r in rows if normalize_name(r.get("name", "")) != key]
            removed = len(kept) != len(rows)
            rows[:] = kept
        return removed


class JSONTokenRepo(_JSONDocument, TokenStore):
    """Client-side bearer token, kept across restarts until logout."""

    def __init__(self, settings: Optional[Settings] = None, path: Optional[str] = None):
        super().__init__(path or (settings or Settings()).token_file)

    def load(self) -> Optional[str]:
        doc = self._snapshot()
        if not isinstance(doc, dict):
            raise RepoError(f"Unexpected token document in {self.path}")
        return doc.get("token") or None

    def save(self, token: str) -> None:
        with self._transaction() as doc:
            doc["token"] = token

    def clear(self) -> None:
        with _locked(self.path):
            try:
                os.remove(self.path)
            except FileNotFoundError:
                pass
            except OSError as e:
                raise RepoError(f"Failed to remove token file {self.path}: {e}") from e
