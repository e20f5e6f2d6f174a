from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, HTTPException

from backend.app.api.deps import get_current_user, get_http_client
from backend.app.config import settings
from backend.app.core.jd_extractor import JobDescriptionError, fetch_job_description
from backend.app.models.db_models import User
from backend.app.models.schemas import ExtractJobDescriptionRequest, ExtractJobDescriptionResponse

router = APIRouter(tags=["jobs"])


@router.post("/extract-job-description", response_model=ExtractJobDescriptionResponse)
def extract_job_description(
    req: ExtractJobDescriptionRequest,
    user: User = Depends(get_current_user),
    client: httpx.Client = Depends(get_http_client),
):
    try:
        text = fetch_job_description(req.url, client, timeout=settings.fetch_timeout_seconds)
    except JobDescriptionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except httpx.HTTPError as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to extract job description ({e}). Please try pasting the text directly.",
        )
    return ExtractJobDescriptionResponse(job_description=text)
