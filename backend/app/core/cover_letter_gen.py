from __future__ import annotations

import logging
from typing import Any

from backend.app.core.prompts import Prompts, PromptVersion
from backend.app.core.text_sanitizer import sanitize_cover_letter

logger = logging.getLogger(__name__)


class CoverLetterError(RuntimeError):
    pass


def generate_cover_letter(llm_service: Any, cv_text: str, job_description: str) -> str:
    """Ask the model for a letter and return it sanitized for PDF layout."""
    resp = llm_service.generate_response(
        system_prompt=Prompts.get_cover_letter_system(PromptVersion.V1),
        user_prompt=(
            Prompts.build_cv_job_prompt(cv_text, job_description)
            + "\nWrite the cover letter now."
        ),
        temperature=0.7,
        max_tokens=1200,
    )

    raw = resp.get("content") or ""
    if not isinstance(raw, str):
        raise CoverLetterError("Unexpected LLM output type")

    letter = sanitize_cover_letter(raw)
    if not letter:
        raise CoverLetterError("Model returned an empty cover letter")

    logger.info(f"Generated cover letter ({len(letter)} chars)")
    return letter
