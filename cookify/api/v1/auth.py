from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from cookify.api.deps import get_current_user, get_settings, get_user_repo
from cookify.config import Settings
from cookify.core.models import Credentials, Profile, TokenResponse, User, UserRecord, utcnow
from cookify.services.exceptions import RepoError
from cookify.services.repo.json_repo import JSONUserRepo
from cookify.services.security import create_access_token, hash_password, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(credentials: Credentials, users: JSONUserRepo = Depends(get_user_repo)):
    email = credentials.email.lower()
    try:
        if users.get_by_email(email) is not None:
            raise HTTPException(status_code=400, detail="Email already registered")
        password_hash, salt = hash_password(credentials.password)
        record = UserRecord(
            id=uuid.uuid4().hex,
            email=email,
            created_at=utcnow(),
            password_hash=password_hash,
            salt=salt,
        )
        users.add(record)
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return User(id=record.id, email=record.email, created_at=record.created_at)


@router.post("/login", response_model=TokenResponse)
def login(
    credentials: Credentials,
    users: JSONUserRepo = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    try:
        user = users.get_by_email(credentials.email)
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if user is None or not verify_password(credentials.password, user.password_hash, user.salt):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return TokenResponse(access=create_access_token(user.id, settings))


@router.get("/me", response_model=Profile)
def me(user: UserRecord = Depends(get_current_user)):
    return Profile(id=user.id, email=user.email)
