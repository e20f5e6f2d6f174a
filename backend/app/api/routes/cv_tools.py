from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from starlette import status

from backend.app.api.deps import get_current_user, get_docs, get_storage
from backend.app.config import settings
from backend.app.core.cover_letter_gen import CoverLetterError, generate_cover_letter
from backend.app.core.cv_optimizer import CVOptimizer
from backend.app.core.document_parser import CVParseError, extract_cv_text
from backend.app.models.db_models import User
from backend.app.models.schemas import OptimizeCVResponse
from backend.app.services.document_service import DocumentService
from backend.app.services.llm_service import get_llm_service
from backend.app.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cv"])

MISSING_INPUT = "CV file and job description are required"


def _load_cv_bytes(cv: Optional[UploadFile], user: User, storage: StorageService) -> Optional[bytes]:
    if cv is not None and cv.filename:
        data = cv.file.read()
        if len(data) > settings.max_cv_size_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="File too large. Max size is 5MB.",
            )
        return data or None

    if not user.cv_file_name:
        return None
    try:
        return storage.download(user.cv_file_name)
    except FileNotFoundError:
        logger.warning(f"Stored CV {user.cv_file_name} for user {user.id} is missing")
        return None


def _cv_text_and_job(
    cv: Optional[UploadFile],
    job_description: Optional[str],
    user: User,
    storage: StorageService,
) -> tuple[str, str]:
    cv_bytes = _load_cv_bytes(cv, user, storage)
    if not cv_bytes or not job_description or not job_description.strip():
        raise HTTPException(status_code=400, detail=MISSING_INPUT)
    try:
        return extract_cv_text(cv_bytes), job_description.strip()
    except CVParseError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/optimize-cv", response_model=OptimizeCVResponse)
def optimize_cv(
    job_description: Optional[str] = Form(default=None, alias="jobDescription"),
    cv: Optional[UploadFile] = File(default=None),
    user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
    llm=Depends(get_llm_service),
):
    cv_text, jd = _cv_text_and_job(cv, job_description, user, storage)
    result = CVOptimizer(llm).optimize(cv_text=cv_text, job_description=jd)
    return OptimizeCVResponse(recommendations=result.recommendations, degraded=result.degraded)


@router.post("/generate-cover-letter")
def create_cover_letter(
    job_description: Optional[str] = Form(default=None, alias="jobDescription"),
    cv: Optional[UploadFile] = File(default=None),
    user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
    docs: DocumentService = Depends(get_docs),
    llm=Depends(get_llm_service),
):
    cv_text, jd = _cv_text_and_job(cv, job_description, user, storage)
    try:
        letter = generate_cover_letter(llm, cv_text=cv_text, job_description=jd)
    except CoverLetterError as e:
        logger.error(f"Error generating cover letter: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate cover letter")

    f = docs.cover_letter_pdf(letter, filename="cover-letter.pdf")
    return Response(
        content=f.data,
        media_type=f.content_type,
        headers={"Content-Disposition": f'attachment; filename="{f.filename}"'},
    )
