from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from backend.app.core.prompts import Prompts, PromptVersion
from backend.app.models.schemas import JobMetadata
from backend.app.utils.llm_json import coerce_json

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_POSITION = "Unknown Position"

# A run of capitalised words ("Acme Corp", "Foo & Bar Ltd"); a full stop ends it
# unless a letter follows directly ("Booking.com")
_NAME_RUN = r"([A-Z][\w&'\-]*(?:\.[A-Za-z]+)*(?:\s+(?:&\s+)?[A-Z][\w&'\-]*(?:\.[A-Za-z]+)*)*)"

COMPANY_PATTERNS = [
    re.compile(r"(?im)^\s*company(?:\s+name)?\s*:\s*(.+?)\s*$"),
    re.compile(r"\bJoin\s+(?:the\s+team\s+at\s+)?" + _NAME_RUN),
    re.compile(r"\bat\s+" + _NAME_RUN),
]

TITLE_PATTERNS = [
    re.compile(r"(?im)^\s*(?:job\s+title|position|role|title)\s*:\s*(.+?)\s*$"),
    re.compile(r"\b(?i:as\s+(?:an?\s+|our\s+(?:next\s+)?)?)" + _NAME_RUN),
]


class _MetadataOut(BaseModel):
    model_config = ConfigDict(extra="ignore")

    companyName: Optional[str] = None
    jobTitle: Optional[str] = None


def _clean(value: Optional[str], unknown: str) -> Optional[str]:
    if not value:
        return None
    value = value.strip().rstrip(".,;:")
    if not value or value.lower() == unknown.lower():
        return None
    return value


def _first_match(patterns, text: str) -> Optional[str]:
    for pattern in patterns:
        m = pattern.search(text)
        if m:
            found = m.group(1).strip().rstrip(".,;:")
            if found:
                return found
    return None


def guess_company(job_description: str) -> str:
    return _first_match(COMPANY_PATTERNS, job_description) or UNKNOWN_COMPANY


def guess_job_title(job_description: str) -> str:
    return _first_match(TITLE_PATTERNS, job_description) or UNKNOWN_POSITION


def extract_job_metadata(llm_service: Any, job_description: str) -> JobMetadata:
    """Company name and job title for a posting.

    The model answer wins; anything it leaves unknown (or any unparseable
    answer) is filled from simple textual patterns.
    """
    jd_text = job_description.strip()

    resp = llm_service.generate_response(
        system_prompt=Prompts.get_job_metadata_system(PromptVersion.V1),
        user_prompt=f"Job Description:\n{jd_text}",
        temperature=0.1,
        max_tokens=200,
        response_format={"type": "json_object"},
    )
    raw = resp.get("content", "")

    company = title = None
    try:
        parsed = _MetadataOut.model_validate(coerce_json(raw))
        company = _clean(parsed.companyName, UNKNOWN_COMPANY)
        title = _clean(parsed.jobTitle, UNKNOWN_POSITION)
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        logger.warning(f"Error parsing job metadata response: {e}; raw: {str(raw)[:200]}")

    return JobMetadata(
        company_name=company or guess_company(jd_text),
        job_title=title or guess_job_title(jd_text),
    )
