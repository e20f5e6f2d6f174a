"""
Filters raw CV-edit suggestions coming back from the model.

A suggestion survives only if every check passes; survivors keep their
original order and the list is capped at ``MAX_RECOMMENDATIONS``.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Optional

from backend.app.models.schemas import Recommendation

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 7
MAX_SENTENCES = 2
MAX_CHARS = 300
MIN_KEYWORD_WORD_LEN = 3

NO_CHANGE_PHRASES = (
    "nothing to change",
    "no change needed",
    "already good",
    "already optimal",
    "no changes required",
    "no modification needed",
    "is already",
    "already contains",
    "already includes",
    "no improvement needed",
)

_TEXT_FIELDS = ("section", "location", "currentText", "suggestedText", "reason")
_TERMINAL_PUNCT = re.compile(r"[.!?]+")


def count_sentences(text: str) -> int:
    """Number of non-empty segments between runs of terminal punctuation."""
    return sum(1 for seg in _TERMINAL_PUNCT.split(text) if re.search(r"\w", seg))


def keyword_in_text(keyword: str, text_lower: str) -> bool:
    kw = keyword.strip().lower()
    if not kw:
        return False
    if kw in text_lower:
        return True

    words = kw.split()
    if len(words) < 2:
        return False
    significant = [w for w in words if len(w) >= MIN_KEYWORD_WORD_LEN]
    return bool(significant) and all(w in text_lower for w in significant)


def rejection_reason(raw: Any, job_description_lower: str) -> Optional[str]:
    """Return why ``raw`` must be dropped, or None when it is acceptable."""
    if not isinstance(raw, dict):
        return "not an object"

    for field in _TEXT_FIELDS:
        if not isinstance(raw.get(field), str):
            return f"missing or non-string {field}"

    keywords = raw.get("keywords")
    if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
        return "keywords is not a list of strings"

    current = raw["currentText"].strip()
    suggested = raw["suggestedText"].strip()

    if not suggested:
        return "empty suggestedText"
    if current == suggested:
        return "suggestedText identical to currentText"

    for name, text in (("currentText", current), ("suggestedText", suggested)):
        if count_sentences(text) > MAX_SENTENCES:
            return f"{name} longer than {MAX_SENTENCES} sentences"
        if len(text) > MAX_CHARS:
            return f"{name} longer than {MAX_CHARS} characters"

    reason = raw["reason"].lower()
    for phrase in NO_CHANGE_PHRASES:
        if phrase in reason:
            return f"reason signals no change ({phrase!r})"

    if not keywords:
        return "no keywords"
    for kw in keywords:
        if not keyword_in_text(kw, job_description_lower):
            return f"keyword {kw!r} not found in job description"

    return None


def validate_recommendations(
    raw_items: Iterable[Any],
    job_description: str,
    limit: int = MAX_RECOMMENDATIONS,
) -> List[Recommendation]:
    jd_lower = job_description.lower()
    accepted: List[Recommendation] = []

    for i, raw in enumerate(raw_items):
        if len(accepted) >= limit:
            break

        reason = rejection_reason(raw, jd_lower)
        if reason:
            logger.debug(f"Dropping recommendation #{i}: {reason}")
            continue

        accepted.append(
            Recommendation(
                section=raw["section"].strip(),
                location=raw["location"].strip(),
                current_text=raw["currentText"].strip(),
                suggested_text=raw["suggestedText"].strip(),
                keywords=[k.strip() for k in raw["keywords"]],
                reason=raw["reason"].strip(),
            )
        )

    return accepted
