import json
import secrets
from typing import Any, Optional

import redis


class CacheService:
    """Small JSON-over-Redis helper; also mints short-lived opaque tokens."""

    def __init__(self, redis_url: str):
        self.client = redis.Redis.from_url(redis_url, decode_responses=True)

    def get_json(self, key: str) -> Optional[Any]:
        val = self.client.get(key)
        if val is None:
            return None
        return json.loads(val)

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        self.client.set(key, json.dumps(value), ex=ttl_seconds)

    def issue_token(self, prefix: str, value: Any, ttl_seconds: int) -> str:
        token = secrets.token_urlsafe(32)
        self.set_json(f"{prefix}{token}", value, ttl_seconds=ttl_seconds)
        return token

    def resolve_token(self, prefix: str, token: str) -> Optional[Any]:
        return self.get_json(f"{prefix}{token}")
