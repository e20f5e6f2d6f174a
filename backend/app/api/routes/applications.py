from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from starlette import status

from backend.app.api.deps import get_current_user
from backend.app.core.jd_analyzer import extract_job_metadata
from backend.app.db import get_db
from backend.app.models.db_models import User
from backend.app.models.schemas import (
    ApplicationCreateRequest,
    ApplicationListResponse,
    ApplicationOut,
    ApplicationResponse,
    ApplicationStatsResponse,
    ApplicationStatus,
    ApplicationStatusUpdateRequest,
    ApplicationUpdateRequest,
)
from backend.app.services.application_service import ApplicationNotFoundError, ApplicationService
from backend.app.services.llm_service import get_llm_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["applications"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")


@router.get("", response_model=ApplicationListResponse)
def list_applications(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    rows = ApplicationService(db).list_for_user(user.id)
    return ApplicationListResponse(applications=[ApplicationOut.model_validate(r) for r in rows])


@router.get("/stats", response_model=ApplicationStatsResponse)
def application_stats(
    year: Optional[int] = Query(default=None, ge=1970, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ApplicationService(db).monthly_stats(user.id, year=year, month=month)


@router.post("/create", response_model=ApplicationResponse)
def create_application(
    req: ApplicationCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    llm=Depends(get_llm_service),
):
    if not req.job_description or not req.job_description.strip():
        raise HTTPException(status_code=400, detail="Job description is required")

    meta = extract_job_metadata(llm, req.job_description)
    row = ApplicationService(db).create(user.id, job_title=meta.job_title, company_name=meta.company_name)
    return ApplicationResponse(application=ApplicationOut.model_validate(row))


@router.patch("/update-status", response_model=ApplicationResponse)
def update_application_status(
    req: ApplicationStatusUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not req.application_id:
        raise HTTPException(status_code=400, detail="Application ID is required")
    if not req.status or req.status not in ApplicationStatus.values():
        raise HTTPException(status_code=400, detail="Valid status is required")

    try:
        row = ApplicationService(db).update_status(user.id, req.application_id, ApplicationStatus(req.status))
    except ApplicationNotFoundError:
        logger.info(f"User {user.id} tried to update missing/foreign application {req.application_id}")
        raise _not_found()
    return ApplicationResponse(application=ApplicationOut.model_validate(row))


@router.patch("/update", response_model=ApplicationResponse)
def update_application(
    req: ApplicationUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not req.application_id:
        raise HTTPException(status_code=400, detail="Application ID is required")

    # only keys present in the body are touched
    fields = {
        name: getattr(req, name)
        for name in ("company_name", "job_title")
        if name in req.model_fields_set
    }
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        row = ApplicationService(db).update_fields(user.id, req.application_id, **fields)
    except ApplicationNotFoundError:
        raise _not_found()
    return ApplicationResponse(application=ApplicationOut.model_validate(row))
