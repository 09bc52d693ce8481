from __future__ import annotations

import re
from typing import Iterator, List, Optional, Sequence

from what_should_i_do.config.profiles import HEADER_PREFIXES, RuleConfig

_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> List[str]:
    """Split on terminal punctuation followed by whitespace; no filtering."""
    parts = _BOUNDARY.split(text or "")
    return [p.strip() for p in parts if p.strip()]


def is_header(
    sentence: str,
    header_prefixes: Sequence[str] = HEADER_PREFIXES,
    boilerplate_phrases: Sequence[str] = ("office of the", "memorandum"),
) -> bool:
    """True for routing lines ("To:", "Re:") and letterhead-style sentences."""
    lower = sentence.strip().lower()
    prefixes = "|".join(re.escape(p) for p in header_prefixes)
    if prefixes and re.match(rf"^(?:{prefixes})\s*:", lower):
        return True
    return any(phrase in lower for phrase in boilerplate_phrases)


def iter_sentences(text: str, config: Optional[RuleConfig] = None) -> Iterator[str]:
    """
    Yield usable sentences from normalized text, in order.

    Headers, boilerplate and near-duplicates are skipped. Sentences shorter
    than the profile minimum are skipped too, unless nothing else survives,
    in which case the short ones are yielded so the caller still has content.
    """
    cfg = config or RuleConfig()
    seen: set[str] = set()
    candidates: List[str] = []
    for sentence in split_sentences(text):
        if is_header(sentence, cfg.header_prefixes, cfg.boilerplate_phrases):
            continue
        key = _dedupe_key(sentence)
        if not key or key in seen:
            continue
        seen.add(key)
        candidates.append(sentence)

    long_enough = [s for s in candidates if len(s) >= cfg.min_sentence_length]
    yield from (long_enough or candidates)


def segment(text: str, config: Optional[RuleConfig] = None) -> List[str]:
    return list(iter_sentences(text, config))


def _dedupe_key(sentence: str) -> str:
    # Near-duplicates differ only in case, spacing or punctuation.
    return re.sub(r"[^a-z0-9]+", " ", sentence.lower()).strip()
