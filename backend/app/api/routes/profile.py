from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session
from starlette import status

from backend.app.api.deps import get_cache, get_current_user, get_storage
from backend.app.config import settings
from backend.app.core.document_parser import is_pdf
from backend.app.db import get_db
from backend.app.models.db_models import User
from backend.app.models.schemas import (
    CVFile,
    CVFileResponse,
    CVUploadResponse,
    OnboardingStatusResponse,
    SuccessResponse,
    UserInfo,
    UserInfoResponse,
)
from backend.app.services.cache_service import CacheService
from backend.app.services.storage_service import StorageService, cv_object_path

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profile"])


def _pdf_response(data: bytes, filename: str) -> Response:
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/onboarding/status", response_model=OnboardingStatusResponse)
def onboarding_status(user: User = Depends(get_current_user)):
    return OnboardingStatusResponse(has_completed_onboarding=bool(user.has_completed_onboarding), user_id=user.id)


@router.post("/onboarding/complete", response_model=SuccessResponse)
def complete_onboarding(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    user.has_completed_onboarding = True
    db.commit()
    return SuccessResponse()


@router.get("/user/info", response_model=UserInfoResponse)
def user_info(user: User = Depends(get_current_user)):
    return UserInfoResponse(user=UserInfo(id=user.id, email=user.email, username=user.username))


@router.post("/user/cv/upload", response_model=CVUploadResponse)
def upload_cv(
    cv: Optional[UploadFile] = File(default=None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    if cv is None or not cv.filename:
        raise HTTPException(status_code=400, detail="CV file is required")

    content = cv.file.read()
    if len(content) > settings.max_cv_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large. Max size is 5MB.",
        )
    if not cv.filename.lower().endswith(".pdf") or not is_pdf(content):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only .pdf files are supported.",
        )

    previous = user.cv_file_name
    object_path = storage.upload(cv_object_path(user.id, cv.filename), content, upsert=True)
    user.cv_file_name = object_path
    db.commit()

    # one CV per user: the new upload supersedes the old file
    if previous and previous != object_path:
        storage.remove(previous)

    return CVUploadResponse(file_name=object_path)


@router.get("/user/cv/get", response_model=CVFileResponse)
def get_cv(
    request: Request,
    user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
    cache: CacheService = Depends(get_cache),
):
    if not user.cv_file_name:
        return CVFileResponse(cv_file=None)

    try:
        token = storage.create_signed_token(cache, user.cv_file_name, settings.signed_url_ttl_seconds)
    except FileNotFoundError:
        raise HTTPException(status_code=500, detail="Stored CV file is missing")

    url = str(request.url_for("download_signed_cv", token=token))
    return CVFileResponse(cv_file=CVFile(file_name=user.cv_file_name, url=url))


@router.get("/user/cv/download")
def download_cv(user: User = Depends(get_current_user), storage: StorageService = Depends(get_storage)):
    if not user.cv_file_name:
        raise HTTPException(status_code=404, detail="No CV found")
    try:
        data = storage.download(user.cv_file_name)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="No CV found")
    return _pdf_response(data, "cv.pdf")


@router.get("/user/cv/signed/{token}", name="download_signed_cv")
def download_signed_cv(
    token: str,
    storage: StorageService = Depends(get_storage),
    cache: CacheService = Depends(get_cache),
):
    object_path = storage.resolve_signed_token(cache, token)
    if not object_path:
        raise HTTPException(status_code=404, detail="Link expired or invalid")
    try:
        data = storage.download(object_path)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Link expired or invalid")
    return _pdf_response(data, "cv.pdf")
