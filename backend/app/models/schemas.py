from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, like the web client sends them."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    error: str


class SuccessResponse(BaseModel):
    success: bool = True


# -----------------------
# Applications
# -----------------------
class ApplicationStatus(str, Enum):
    APPLIED = "Applied"
    VIEWED = "Viewed"
    FIRST_ROUND = "1st Round Interviews"
    SECOND_ROUND = "2nd Round Interviews"
    FINAL_ROUND = "Final Round Interviews"
    REJECTED = "Rejected"
    ACCEPTED = "Accepted"

    @classmethod
    def values(cls) -> List[str]:
        return [s.value for s in cls]


class ApplicationOut(CamelModel):
    id: str
    user_id: str
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    status: str
    applied_at: datetime

    @field_validator("applied_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive values; they were written as UTC
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class ApplicationCreateRequest(CamelModel):
    job_description: Optional[str] = None


class ApplicationStatusUpdateRequest(CamelModel):
    application_id: Optional[str] = None
    status: Optional[str] = None


class ApplicationUpdateRequest(CamelModel):
    application_id: Optional[str] = None
    company_name: Optional[str] = None
    job_title: Optional[str] = None


class ApplicationResponse(CamelModel):
    success: bool = True
    application: ApplicationOut


class ApplicationListResponse(CamelModel):
    applications: List[ApplicationOut] = Field(default_factory=list)


class DailyCount(CamelModel):
    day: int
    count: int


class ApplicationStatsResponse(CamelModel):
    year: int
    month: int
    total_applications: int
    daily_counts: List[DailyCount] = Field(default_factory=list)
    status_counts: Dict[str, int] = Field(default_factory=dict)


# -----------------------
# CV optimisation
# -----------------------
class Recommendation(CamelModel):
    section: str
    location: str
    current_text: str
    suggested_text: str
    keywords: List[str] = Field(default_factory=list)
    reason: str


class OptimizeCVResponse(CamelModel):
    recommendations: List[Recommendation] = Field(default_factory=list)
    success: bool = True
    degraded: bool = False


class JobMetadata(CamelModel):
    company_name: str = "Unknown Company"
    job_title: str = "Unknown Position"


# -----------------------
# Job description scraping
# -----------------------
class ExtractJobDescriptionRequest(CamelModel):
    url: Optional[str] = None


class ExtractJobDescriptionResponse(CamelModel):
    job_description: str
    success: bool = True


# -----------------------
# Profile
# -----------------------
class UserInfo(CamelModel):
    id: str
    email: str
    username: Optional[str] = None


class UserInfoResponse(CamelModel):
    user: UserInfo


class OnboardingStatusResponse(CamelModel):
    has_completed_onboarding: bool
    user_id: str


class CVFile(CamelModel):
    file_name: str
    url: str


class CVFileResponse(CamelModel):
    cv_file: Optional[CVFile] = None


class CVUploadResponse(CamelModel):
    success: bool = True
    file_name: str
