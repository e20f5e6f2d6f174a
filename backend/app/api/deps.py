from __future__ import annotations

import httpx
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session
from starlette import status

from backend.app.config import settings
from backend.app.db import get_db
from backend.app.models.db_models import User
from backend.app.services.auth_service import user_for_token
from backend.app.services.cache_service import CacheService
from backend.app.services.document_service import DocumentService
from backend.app.services.storage_service import StorageService


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    user = None
    if scheme.lower() == "bearer" and token.strip():
        user = user_for_token(db, token.strip())
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def get_cache() -> CacheService:
    return CacheService(settings.redis_url)


def get_storage() -> StorageService:
    return StorageService(settings.storage_dir)


def get_docs() -> DocumentService:
    return DocumentService()


def get_http_client():
    with httpx.Client() as client:
        yield client
