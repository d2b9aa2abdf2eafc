from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from cookify.api.deps import get_current_user, get_saved_repo
from cookify.core.models import OkResponse, SavedRecipesResponse, UserRecord
from cookify.services.exceptions import RepoError
from cookify.services.repo.json_repo import JSONSavedRecipeRepo

router = APIRouter(prefix="/users/me/saved", tags=["saved"])


@router.get("", response_model=SavedRecipesResponse)
def list_saved(user: UserRecord = Depends(get_current_user), repo: JSONSavedRecipeRepo = Depends(get_saved_repo)):
    try:
        return SavedRecipesResponse(items=repo.list(user.id))
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{recipe_id}", response_model=OkResponse)
def remove_saved(recipe_id: str, user: UserRecord = Depends(get_current_user),
                 repo: JSONSavedRecipeRepo = Depends(get_saved_repo)):
    try:
        removed = repo.remove(user.id, recipe_id)
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail="Recipe not found in saved recipes")
    return OkResponse(ok=True)
