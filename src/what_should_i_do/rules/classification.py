from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from what_should_i_do.config.profiles import RuleConfig
from what_should_i_do.models import NO_NEXT_STEP, ConfusingPart, Extraction, Urgency
from what_should_i_do.rules.BaseRule import BaseRule
from what_should_i_do.rules.core import SentenceRule
from what_should_i_do.rules.rules import ActionVerbRule, ConfusionRule, DeadlineRule, DeclarationRule


def default_rules(config: RuleConfig) -> List[BaseRule]:
    rules: List[BaseRule] = [
        DeclarationRule(config),
        ActionVerbRule(config),
        DeadlineRule(config),
        ConfusionRule(config),
    ]
    # Higher priority rules run first; a declaration stops the others.
    return sorted(rules, key=lambda r: r.priority, reverse=True)


def extract(
    sentences: Iterable[str],
    text: str,
    config: Optional[RuleConfig] = None,
    rules: Optional[Sequence[SentenceRule]] = None,
) -> Extraction:
    """
    Run the sentence rules over every sentence, then classify urgency on the
    whole text. Never fails; no matches means empty lists.
    """
    cfg = config or RuleConfig()
    active: List[SentenceRule] = list(rules) if rules is not None else default_rules(cfg)

    actions: List[str] = []
    deadlines: List[str] = []
    confusing: List[ConfusingPart] = []

    for sentence in sentences:
        for rule in active:
            found = rule.match(sentence)
            if found is None:
                continue
            if found.kind == "action":
                _append_unique(actions, found.value)
            elif found.kind == "deadline":
                _append_unique(deadlines, found.value)
            elif found.kind == "confusion":
                confusing.append(ConfusingPart(sentence=found.value, explanation=found.explanation))
            if found.stop_processing:
                break

    return Extraction(
        actions=actions,
        deadlines=deadlines,
        confusing_parts=confusing,
        urgency=classify_urgency(text, deadlines, cfg),
        next_step=derive_next_step(actions, cfg),
    )


def has_urgent_keyword(text: str, config: Optional[RuleConfig] = None) -> bool:
    cfg = config or RuleConfig()
    # Plain containment: "urgently" and "todays" count too.
    lowered = (text or "").lower()
    return any(term.lower() in lowered for term in tuple(cfg.urgent_keywords) + tuple(cfg.severity_terms))


def classify_urgency(text: str, deadlines: Sequence[str], config: Optional[RuleConfig] = None) -> Urgency:
    if has_urgent_keyword(text, config):
        return "Urgent"
    if deadlines:
        return "Important"
    return "Informational"


def derive_next_step(actions: Sequence[str], config: Optional[RuleConfig] = None) -> str:
    cfg = config or RuleConfig()
    if not actions:
        return NO_NEXT_STEP
    first = actions[0].strip()
    if not cfg.lowercase_next_step:
        return first
    step = first.rstrip(" .!?;:").lower()
    return f"Your next step is to {step}."


def _append_unique(items: List[str], value: str) -> None:
    if value.lower() not in {item.lower() for item in items}:
        items.append(value)
