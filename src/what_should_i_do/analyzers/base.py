"""Contract shared by every smart-analyzer backend."""

from __future__ import annotations

import json
from typing import Any, Dict, Protocol

from what_should_i_do.errors import ErrorCode, create_error

REQUIRED_FIELDS = ("actions", "deadlines", "urgency", "confusingParts", "nextStep", "summary")

SYSTEM_PROMPT = """You analyze official government announcements and confusing messages.

Your task:
1. Interpret messy, incomplete, or poorly structured input
2. Handle ambiguous, confusing, or mixed-intent messages
3. Work with grammar issues, shorthand, or informal language
4. Normalize and restructure into clear intent
5. Infer missing context when reasonable
6. Explicitly clarify assumptions before generating response

Return ONLY valid JSON with these exact fields:
{
  "actions": ["array of specific actions required"],
  "deadlines": ["array of deadlines or timeframes"],
  "urgency": "Urgent" | "Important" | "Informational",
  "confusingParts": [{"sentence": "confusing text", "explanation": "why it's confusing"}],
  "nextStep": "clear next action statement",
  "summary": "concise, decision-focused summary"
}

The summary must be concise, decision-focused, plain text, and free of headers.
Assume official announcement context when unclear."""


class RemoteAnalyzer(Protocol):
    name: str

    def analyze(self, text: str) -> Dict[str, Any]:
        """Return the raw JSON object; raise AnalysisError on any failure."""
        ...


def build_user_message(text: str) -> str:
    return f'Analyze this message: "{text}"'


def parse_payload(content: str | None) -> Dict[str, Any]:
    """
    Parse a model reply into a dict.

    The reply must be exactly one JSON object carrying every required key;
    surrounding prose, arrays, or missing keys are failures.
    """
    raw = (content or "").strip()
    if not raw:
        raise create_error("Empty response from analyzer", ErrorCode.INVALID_RESPONSE)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise create_error(f"Invalid JSON response from analyzer: {exc}", ErrorCode.INVALID_JSON) from exc
    if not isinstance(data, dict):
        raise create_error("Analyzer response is not a JSON object", ErrorCode.INVALID_RESPONSE)
    missing = [key for key in REQUIRED_FIELDS if key not in data]
    if missing:
        raise create_error(f"Analyzer response missing fields: {', '.join(missing)}", ErrorCode.INVALID_RESPONSE)
    return data
