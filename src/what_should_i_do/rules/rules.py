from __future__ import annotations

from typing import Optional

from what_should_i_do.rules.BaseRule import BaseRule
from what_should_i_do.rules.core import RuleMatch


class DeclarationRule(BaseRule):
    """Suspension/declaration language becomes one canonical directive."""
    name = "declaration"
    kind = "declaration"
    priority = 100

    def match(self, sentence: str) -> Optional[RuleMatch]:
        if any(self.regex(sentence, p) for p in self.config.declaration_patterns):
            return RuleMatch(
                kind="action",
                value=self.config.declaration_directive,
                stop_processing=True,
            )
        return None


class ActionVerbRule(BaseRule):
    name = "action_verb"
    kind = "action"
    priority = 50

    def match(self, sentence: str) -> Optional[RuleMatch]:
        if self.contains_any(sentence, self.config.action_verbs):
            return RuleMatch(kind="action", value=sentence)
        return None


class DeadlineRule(BaseRule):
    name = "deadline"
    kind = "deadline"
    priority = 40

    def match(self, sentence: str) -> Optional[RuleMatch]:
        # Report the matched phrase, not the whole sentence.
        found = self.search(sentence, self.config.deadline_pattern)
        if found:
            return RuleMatch(kind="deadline", value=found.group(0).strip())
        return None


class ConfusionRule(BaseRule):
    name = "confusion"
    kind = "confusion"
    priority = 10

    def match(self, sentence: str) -> Optional[RuleMatch]:
        too_long = len(sentence) > self.config.confusing_length
        if too_long or self.contains_any(sentence, self.config.hedging_phrases):
            return RuleMatch(
                kind="confusion",
                value=sentence,
                explanation=self.config.confusing_explanation,
            )
        return None
