from __future__ import annotations

import hashlib
import secrets
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.models.db_models import User


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_user(db: Session, email: str, username: Optional[str] = None) -> Tuple[User, str]:
    """Provision a user; returns the user and its (only ever shown once) access token."""
    token = secrets.token_urlsafe(32)
    user = User(email=email.strip().lower(), username=username, access_token_hash=hash_token(token))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user, token


def user_for_token(db: Session, token: str) -> Optional[User]:
    if not token:
        return None
    return db.scalar(select(User).where(User.access_token_hash == hash_token(token)))
