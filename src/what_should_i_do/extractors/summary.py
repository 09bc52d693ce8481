from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple, Type

from what_should_i_do.config.profiles import RuleConfig, SummaryConfig
from what_should_i_do.parsing.segmenter import is_header


class Summarizer(ABC):
    """Pick the decision-relevant sentences of a message."""

    name: str = "base"

    def __init__(self, config: Optional[SummaryConfig] = None, rules: Optional[RuleConfig] = None):
        self.config = config or SummaryConfig()
        self.rules = rules or RuleConfig()

    @abstractmethod
    def select(self, sentences: Sequence[str]) -> List[str]:
        raise NotImplementedError

    def summarize(self, sentences: Sequence[str]) -> str:
        return " ".join(self.select(sentences))

    def fallback(self, sentences: Sequence[str]) -> List[str]:
        return list(sentences[:2])


class RankSummarizer(Summarizer):
    """
    Score every sentence and keep the top few, highest score first.

    +3 per important keyword, +1 per date keyword, +2 for a deadline
    phrase, +2 for an action verb, +1 for a readable length.
    """

    name = "rank"

    def score(self, sentence: str) -> int:
        lower = sentence.lower()
        score = 3 * sum(1 for k in self.config.important_keywords if k in lower)
        score += sum(1 for k in self.config.date_keywords if k in lower)
        if re.search(self.rules.deadline_pattern, sentence, flags=re.IGNORECASE):
            score += 2
        if any(v in lower for v in self.rules.action_verbs):
            score += 2
        low, high = self.config.readable_band
        if low < len(sentence) < high:
            score += 1
        return score

    def ranked(self, sentences: Sequence[str]) -> List[Tuple[int, str]]:
        scored = [(self.score(s), s) for s in sentences]
        return sorted((pair for pair in scored if pair[0] > 0), key=lambda pair: pair[0], reverse=True)

    def select(self, sentences: Sequence[str]) -> List[str]:
        best = [s for _, s in self.ranked(sentences)[: self.config.top_n]]
        return best or self.fallback(sentences)


class DecisionSummarizer(Summarizer):
    """
    One sentence per narrative role, in slot order: decision, reason,
    timeframe. A sentence fills at most one slot.
    """

    name = "decision"

    def slots(self) -> List[Tuple[str, Tuple[str, ...]]]:
        return [
            ("decision", self.config.decision_patterns),
            ("reason", self.config.reason_patterns),
            ("timeframe", self.config.timeframe_patterns),
        ]

    def select(self, sentences: Sequence[str]) -> List[str]:
        unique: List[str] = []
        seen: set[str] = set()
        for sentence in sentences:
            key = sentence.strip().lower()
            if not key or key in seen:
                continue
            seen.add(key)
            if is_header(sentence, self.rules.header_prefixes, self.rules.boilerplate_phrases):
                continue
            unique.append(sentence.strip())

        chosen: List[str] = []
        for _slot, patterns in self.slots():
            for sentence in unique:
                if sentence in chosen:
                    continue
                if any(re.search(p, sentence, flags=re.IGNORECASE) for p in patterns):
                    chosen.append(sentence)
                    break

        if chosen:
            return chosen
        # Nothing fits a slot: defer to salience ranking.
        return RankSummarizer(self.config, self.rules).select(unique)


SUMMARIZERS: Dict[str, Type[Summarizer]] = {
    RankSummarizer.name: RankSummarizer,
    DecisionSummarizer.name: DecisionSummarizer,
}


def build_summarizer(config: Optional[SummaryConfig] = None, rules: Optional[RuleConfig] = None) -> Summarizer:
    cfg = config or SummaryConfig()
    try:
        cls = SUMMARIZERS[cfg.strategy]
    except KeyError:
        raise ValueError(f"Unknown summary strategy {cfg.strategy!r}; expected one of {sorted(SUMMARIZERS)}") from None
    return cls(cfg, rules)
