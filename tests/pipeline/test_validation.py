from __future__ import annotations

from what_should_i_do.config.profiles import STANDARD
from what_should_i_do.models import NO_ACTION, NO_DEADLINE, NO_SUMMARY, ConfusingPart
from what_should_i_do.pipeline.validation import NO_ACTION_SPECIFIED, coerce_remote_result

TEXT = "The library will be closed next week for repairs."


def test_valid_payload_passes_through() -> None:
    payload = {
        "actions": ["Return borrowed books"],
        "deadlines": ["next week"],
        "urgency": "Important",
        "confusingParts": [{"sentence": "Repairs may vary.", "explanation": "Unclear scope."}],
        "nextStep": "Return your books before next week.",
        "summary": "The library closes next week.",
    }
    result = coerce_remote_result(payload, TEXT, STANDARD)

    assert result.actions == ["Return borrowed books"]
    assert result.deadlines == ["next week"]
    assert result.urgency == "Important"
    assert result.confusing_parts == [ConfusingPart("Repairs may vary.", "Unclear scope.")]
    assert result.next_step == "Return your books before next week."
    assert result.summary == "The library closes next week."
    assert result.source == "remote"


def test_each_bad_field_falls_back_to_its_default() -> None:
    payload = {
        "actions": "Return books",
        "deadlines": [3, None, " "],
        "urgency": "Critical",
        "confusingParts": ["bad", {"sentence": "Odd bit."}, {"explanation": "no sentence"}],
        "nextStep": 5,
        "summary": None,
    }
    result = coerce_remote_result(payload, TEXT, STANDARD)

    assert result.actions == [NO_ACTION]
    assert result.deadlines == [NO_DEADLINE]
    assert result.urgency == "Informational"
    assert result.confusing_parts == [ConfusingPart("Odd bit.", STANDARD.rules.confusing_explanation)]
    assert result.next_step == NO_ACTION_SPECIFIED
    assert result.summary == NO_SUMMARY


def test_urgent_wording_in_text_overrides_model_urgency() -> None:
    payload = {"urgency": "Informational"}
    result = coerce_remote_result(payload, "Evacuate immediately.", STANDARD)
    assert result.urgency == "Urgent"


def test_summary_loses_markup_and_header_lines() -> None:
    payload = {"summary": "<b>Classes suspended.</b> Re: Notice."}
    result = coerce_remote_result(payload, TEXT, STANDARD)
    assert result.summary == "Classes suspended."


def test_deadlines_raise_model_urgency_to_important() -> None:
    payload = {"deadlines": ["by Friday"], "urgency": "Informational"}
    result = coerce_remote_result(payload, "Send the signed form by Friday.", STANDARD)

    assert result.deadlines == ["by Friday"]
    assert result.urgency == "Important"


def test_model_urgency_without_keyword_or_deadline_is_informational() -> None:
    payload = {"deadlines": [NO_DEADLINE], "urgency": "Urgent"}
    result = coerce_remote_result(payload, TEXT, STANDARD)

    assert result.deadlines == [NO_DEADLINE]
    assert result.urgency == "Informational"


def test_summary_keeps_comparison_signs() -> None:
    payload = {"summary": "Scores < 50 and > 20 need review."}
    result = coerce_remote_result(payload, TEXT, STANDARD)
    assert result.summary == "Scores < 50 and > 20 need review."
