from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from backend.app.core.prompts import Prompts, PromptVersion
from backend.app.core.recommendation_validator import MAX_RECOMMENDATIONS, validate_recommendations
from backend.app.models.schemas import Recommendation
from backend.app.utils.llm_json import coerce_json

logger = logging.getLogger(__name__)


FALLBACK_RECOMMENDATION = Recommendation(
    section="CV",
    location="Various sections",
    current_text="See CV text above",
    suggested_text="Review the AI response for suggestions",
    keywords=[],
    reason="Could not parse structured recommendations. Please review the response manually.",
)


@dataclass
class OptimizationResult:
    recommendations: List[Recommendation] = field(default_factory=list)
    degraded: bool = False


def _as_candidate_list(data: Any) -> Optional[List[Any]]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("recommendations"), list):
        return data["recommendations"]
    return None


class CVOptimizer:
    """CV text + job description -> validated keyword-integration suggestions."""

    def __init__(self, llm_service: Any):
        self.llm = llm_service
        self.version = PromptVersion.V1

    def optimize(self, *, cv_text: str, job_description: str) -> OptimizationResult:
        # LLM failures propagate; only unparseable output is degraded
        resp = self.llm.generate_response(
            system_prompt=Prompts.get_cv_optimization_system(self.version),
            user_prompt=Prompts.build_cv_job_prompt(cv_text, job_description),
            temperature=0.2,
            max_tokens=2000,
        )
        raw = resp.get("content") or "[]"

        try:
            candidates = _as_candidate_list(coerce_json(raw))
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Failed to parse recommendations JSON: {e}")
            candidates = None

        if candidates is None:
            logger.warning(f"Returning fallback recommendation; raw response: {str(raw)[:500]}")
            return OptimizationResult(recommendations=[FALLBACK_RECOMMENDATION], degraded=True)

        accepted = validate_recommendations(candidates, job_description, limit=MAX_RECOMMENDATIONS)
        logger.info(f"Kept {len(accepted)}/{len(candidates)} recommendations")
        return OptimizationResult(recommendations=accepted)
