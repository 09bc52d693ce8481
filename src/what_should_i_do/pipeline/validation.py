from __future__ import annotations

from typing import Any, List, Mapping

from what_should_i_do.config.profiles import AnalysisProfile
from what_should_i_do.extractors.highlight import strip_markup
from what_should_i_do.models import (
    NO_ACTION,
    NO_DEADLINE,
    NO_SUMMARY,
    AnalysisResult,
    ConfusingPart,
    with_sentinels,
)
from what_should_i_do.parsing.segmenter import is_header, split_sentences
from what_should_i_do.rules.classification import classify_urgency

NO_ACTION_SPECIFIED = "No action specified"


def coerce_remote_result(payload: Mapping[str, Any], text: str, profile: AnalysisProfile) -> AnalysisResult:
    """
    Force a smart-analyzer payload into the canonical shape.

    Each field is checked on its own: a field of the wrong type falls back
    to its default instead of failing the whole payload. The summary is
    returned plain; highlighting happens afterwards. The model's urgency is
    not trusted: it is derived from the input text and the deadlines.
    """
    deadlines = [d for d in _strings(payload.get("deadlines")) if d.lower() != NO_DEADLINE.lower()]
    urgency = classify_urgency(text, deadlines, profile.rules)

    next_step = payload.get("nextStep")
    if not isinstance(next_step, str) or not next_step.strip():
        next_step = NO_ACTION_SPECIFIED

    return AnalysisResult(
        actions=with_sentinels(_strings(payload.get("actions")), NO_ACTION),
        deadlines=with_sentinels(deadlines, NO_DEADLINE),
        urgency=urgency,
        confusing_parts=_confusing_parts(payload.get("confusingParts"), profile.rules.confusing_explanation),
        next_step=next_step.strip(),
        summary=clean_summary(payload.get("summary"), profile),
        source="remote",
    )


def clean_summary(summary: Any, profile: AnalysisProfile) -> str:
    if not isinstance(summary, str):
        return NO_SUMMARY
    plain = strip_markup(summary).strip()
    kept = [
        s for s in split_sentences(plain)
        if not is_header(s, profile.rules.header_prefixes, profile.rules.boilerplate_phrases)
    ]
    return " ".join(kept) or NO_SUMMARY


def _strings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _confusing_parts(value: Any, default_explanation: str) -> List[ConfusingPart]:
    if not isinstance(value, list):
        return []
    parts: List[ConfusingPart] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        sentence = item.get("sentence")
        if not isinstance(sentence, str) or not sentence.strip():
            continue
        explanation = item.get("explanation")
        if not isinstance(explanation, str) or not explanation.strip():
            explanation = default_explanation
        parts.append(ConfusingPart(sentence=sentence.strip(), explanation=explanation.strip()))
    return parts

