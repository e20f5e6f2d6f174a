from __future__ import annotations

import logging
import time
from pathlib import Path, PurePosixPath

from backend.app.services.cache_service import CacheService

logger = logging.getLogger(__name__)

SIGNED_URL_PREFIX = "cv:signed:"


class StorageError(RuntimeError):
    pass


def cv_object_path(user_id: str, filename: str) -> str:
    """Storage key for a user's CV: ``<user_id>/<epoch_ms>_<name>``."""
    name = PurePosixPath((filename or "cv.pdf").replace("\\", "/")).name or "cv.pdf"
    return f"{user_id}/{int(time.time() * 1000)}_{name}"


class StorageService:
    """
    File bucket on the local filesystem. Object paths are relative,
    slash-separated and must stay inside the bucket.
    """

    def __init__(self, root: str | Path, bucket: str = "cvs"):
        self.base = (Path(root) / bucket).resolve()

    def _resolve(self, object_path: str) -> Path:
        target = (self.base / object_path).resolve()
        if self.base not in target.parents:
            raise StorageError(f"Invalid object path: {object_path}")
        return target

    def upload(self, object_path: str, data: bytes, upsert: bool = True) -> str:
        target = self._resolve(object_path)
        if target.exists() and not upsert:
            raise StorageError(f"Object already exists: {object_path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Upload failed: {e}") from e
        logger.info(f"Stored {object_path} ({len(data)} bytes)")
        return object_path

    def download(self, object_path: str) -> bytes:
        target = self._resolve(object_path)
        if not target.is_file():
            raise FileNotFoundError(object_path)
        try:
            return target.read_bytes()
        except OSError as e:
            raise StorageError(f"Download failed: {e}") from e

    def exists(self, object_path: str) -> bool:
        try:
            return self._resolve(object_path).is_file()
        except StorageError:
            return False

    def remove(self, object_path: str) -> None:
        target = self._resolve(object_path)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Delete failed: {e}") from e

    def create_signed_token(self, cache: CacheService, object_path: str, ttl_seconds: int) -> str:
        if not self.exists(object_path):
            raise FileNotFoundError(object_path)
        return cache.issue_token(SIGNED_URL_PREFIX, {"path": object_path}, ttl_seconds)

    def resolve_signed_token(self, cache: CacheService, token: str) -> str | None:
        data = cache.resolve_token(SIGNED_URL_PREFIX, token)
        if not isinstance(data, dict):
            return None
        return data.get("path")
