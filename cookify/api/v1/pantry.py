from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from cookify.api.deps import get_current_user, get_pantry_repo
from cookify.core.models import OkResponse, PantryItemIn, PantryItemOut, PantryResponse, UserRecord
from cookify.services.exceptions import RepoError
from cookify.services.repo.json_repo import JSONPantryRepo

router = APIRouter(prefix="/pantry", tags=["pantry"])


@router.get("", response_model=PantryResponse)
def get_pantry(user: UserRecord = Depends(get_current_user), repo: JSONPantryRepo = Depends(get_pantry_repo)):
    try:
        return PantryResponse(items=repo.list(user.id))
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("", response_model=PantryItemOut)
@router.post("", response_model=PantryItemOut)
def upsert_item(item: PantryItemIn, user: UserRecord = Depends(get_current_user),
                repo: JSONPantryRepo = Depends(get_pantry_repo)):
    """Create or replace by case-insensitive name; the caller's casing is kept."""
    try:
        return repo.upsert(user.id, item)
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{name}", response_model=OkResponse)
def delete_item(name: str, user: UserRecord = Depends(get_current_user),
                repo: JSONPantryRepo = Depends(get_pantry_repo)):
    try:
        removed = repo.remove(user.id, name)
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail="Pantry item not found")
    return OkResponse(ok=True)
