from __future__ import annotations

import json
import re
from typing import Any

_FENCE = re.compile(r"```(?:json)?\s*\n?", re.IGNORECASE)


def strip_code_fences(raw: str) -> str:
    """Remove markdown code fences (common with Gemini) around a JSON payload."""
    return _FENCE.sub("", raw).strip()


def coerce_json(raw: Any) -> Any:
    """Parse model output into Python data.

    Raises json.JSONDecodeError or TypeError when the output is unusable.
    """
    if isinstance(raw, (dict, list)):
        return raw
    if isinstance(raw, str):
        return json.loads(strip_code_fences(raw))
    raise TypeError("Unexpected LLM output type")
