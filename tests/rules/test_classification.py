from __future__ import annotations

from what_should_i_do.config.profiles import STRICT, RuleConfig
from what_should_i_do.parsing.segmenter import segment
from what_should_i_do.rules.classification import (
    classify_urgency,
    default_rules,
    derive_next_step,
    extract,
    has_urgent_keyword,
)
from what_should_i_do.models import NO_NEXT_STEP
from what_should_i_do.rules.core import RuleMatch


def run(text: str, config: RuleConfig | None = None):
    cfg = config or RuleConfig()
    return extract(segment(text, cfg), text, cfg)


def test_rules_run_in_priority_order() -> None:
    names = [r.name for r in default_rules(RuleConfig())]
    assert names == ["declaration", "action_verb", "deadline", "confusion"]


def test_immediately_is_always_urgent() -> None:
    found = run("Please respond immediately regarding the form.")

    assert found.urgency == "Urgent"
    assert found.actions == ["Please respond immediately regarding the form."]
    assert found.next_step == "Your next step is to please respond immediately regarding the form."


def test_deadline_without_urgent_keyword_is_important() -> None:
    found = run("Submit the form by Friday.")

    assert found.deadlines == ["by Friday"]
    assert found.urgency == "Important"


def test_plain_text_is_informational() -> None:
    found = run("The office will be open next week.")

    assert found.actions == []
    assert found.deadlines == []
    assert found.urgency == "Informational"
    assert found.next_step == NO_NEXT_STEP


def test_declaration_becomes_single_directive_and_stops_other_rules() -> None:
    cfg = RuleConfig()
    found = run("Suspension of face-to-face classes is hereby declared today in all levels.", cfg)

    assert found.actions == [cfg.declaration_directive]
    # The declaration sentence is not inspected for deadlines.
    assert found.deadlines == []
    assert found.urgency == "Urgent"


def test_actions_and_deadlines_are_deduplicated() -> None:
    text = "Submit the form by Friday. Also send the receipt by Friday."
    found = run(text)

    assert found.actions == ["Submit the form by Friday.", "Also send the receipt by Friday."]
    assert found.deadlines == ["by Friday"]


def test_hedging_and_long_sentences_are_confusing() -> None:
    cfg = RuleConfig()
    found = run("Schedules will be adjusted subject to approval by the board.", cfg)

    assert len(found.confusing_parts) == 1
    assert found.confusing_parts[0].sentence == "Schedules will be adjusted subject to approval by the board."
    assert found.confusing_parts[0].explanation == cfg.confusing_explanation

    long_sentence = "This notice covers " + "several related matters and " * 5 + "nothing else."
    assert len(long_sentence) > cfg.confusing_length
    assert run(long_sentence, cfg).confusing_parts[0].sentence == long_sentence


def test_urgent_keywords_match_anywhere_in_the_text() -> None:
    assert has_urgent_keyword("Report IMMEDIATELY to the office.")
    assert has_urgent_keyword("Signal raised due to a tropical cyclone.")
    assert has_urgent_keyword("Please reply urgently regarding the form.")
    assert not has_urgent_keyword("Check the lunch menu.")


def test_urgently_worded_reply_is_urgent() -> None:
    assert run("Please reply urgently regarding the form.").urgency == "Urgent"


def test_classify_urgency_levels() -> None:
    assert classify_urgency("Do it asap.", []) == "Urgent"
    assert classify_urgency("Do it soon.", ["by Friday"]) == "Important"
    assert classify_urgency("Do it soon.", []) == "Informational"


def test_next_step_styles() -> None:
    assert derive_next_step(["Pay the fee at the cashier!"]) == "Your next step is to pay the fee at the cashier."
    assert derive_next_step(["Pay the fee at the cashier!"], STRICT.rules) == "Pay the fee at the cashier!"
    assert derive_next_step([]) == NO_NEXT_STEP


def test_strict_profile_uses_calendar_deadlines() -> None:
    assert run("Submit the form by Friday.", STRICT.rules).deadlines == []

    found = run("Classes resume on March 3, 2025 for all grade levels.", STRICT.rules)
    assert found.deadlines == ["March 3, 2025"]


class ShoutingRule:
    name = "shouting"
    kind = "confusion"

    def match(self, sentence: str) -> RuleMatch | None:
        if sentence.isupper():
            return RuleMatch(kind="confusion", value=sentence, explanation="All caps.")
        return None


def test_extract_accepts_custom_rules() -> None:
    text = "READ THIS NOTICE CAREFULLY."
    found = extract([text], text, rules=[ShoutingRule()])

    assert found.actions == []
    assert found.confusing_parts[0].explanation == "All caps."
