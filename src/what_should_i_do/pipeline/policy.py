from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from what_should_i_do.config.profiles import RuleConfig
from what_should_i_do.parsing.segmenter import split_sentences
from what_should_i_do.rules.classification import has_urgent_keyword

AnalysisPath = Literal["remote", "local"]


@dataclass(frozen=True)
class RoutingPolicy:
    # Any one threshold reached sends the text to the smart analyzer.
    min_chars: int = 300
    min_sentences: int = 5
    min_words: int = 60
    escalate_on_urgent: bool = True


def choose_path(
    text: str,
    policy: Optional[RoutingPolicy] = None,
    rules: Optional[RuleConfig] = None,
    *,
    remote_available: bool = True,
) -> Tuple[AnalysisPath, str]:
    """Return the path to take and a short reason for the log."""
    # Policy layer decides; the orchestrator only executes the decision.
    pol = policy or RoutingPolicy()
    if not remote_available:
        return "local", "no smart analyzer configured"

    if len(text) >= pol.min_chars:
        return "remote", f"{len(text)} chars"
    sentence_count = len(split_sentences(text))
    if sentence_count >= pol.min_sentences:
        return "remote", f"{sentence_count} sentences"
    word_count = len(text.split())
    if word_count >= pol.min_words:
        return "remote", f"{word_count} words"
    if pol.escalate_on_urgent and has_urgent_keyword(text, rules):
        return "remote", "urgency keywords present"
    return "local", "short, simple text"
