"""
Named rule-engine profiles.

Keyword lists, thresholds and regular expressions differ between the short
form used for everyday messages ("standard") and the stricter reading used
for official notices ("strict"). Both are plain data; the normalizer,
segmenter, rules and summarizers take them as arguments.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Tuple

MONTHS = (
    "january|february|march|april|may|june|july|august|september|october|november|december"
    "|jan|feb|mar|apr|jun|jul|aug|sep|sept|oct|nov|dec"
)
WEEKDAYS = "monday|tuesday|wednesday|thursday|friday|saturday|sunday"

# Everyday messages: "by Friday", "before noon", "on March 3".
STANDARD_DEADLINE_PATTERN = (
    r"\b(?:today|tomorrow|tonight"
    r"|before\s+\w+|by\s+\w+|on\s+\w+\s+\d{1,2}"
    r"|end of (?:the )?(?:week|day|month)"
    r"|until lifted"
    r"|effective\s+\d{1,2}:\d{2}(?:\s*[ap]\.?m\b\.?)?)"
)

# Official notices: explicit calendar dates and effectivity clauses only.
STRICT_DEADLINE_PATTERN = (
    r"\b(?:today|tomorrow"
    rf"|(?:{MONTHS})\.?\s+\d{{1,2}}(?:,?\s+\d{{4}})?"
    r"|\d{1,2}/\d{1,2}/\d{2,4}"
    r"|until\s+(?:further\s+notice|lifted)"
    r"|effective\s+(?:immediately|\d{1,2}:\d{2}(?:\s*[ap]\.?m\b\.?)?))"
)

SHORTHAND: Mapping[str, str] = {
    "pls": "please",
    "plz": "please",
    "u": "you",
    "ur": "your",
    "r": "are",
    "thx": "thanks",
    "thnx": "thanks",
    "tmrw": "tomorrow",
    "tmr": "tomorrow",
    "tmrow": "tomorrow",
    "b4": "before",
    "msg": "message",
    "mtg": "meeting",
    "wk": "week",
    "govt": "government",
    "dept": "department",
    "reqd": "required",
    # OCR artifacts
    "teh": "the",
    "tne": "the",
    "0f": "of",
    "wi11": "will",
    "a11": "all",
    "c1ass": "class",
    "c1asses": "classes",
    "schoo1": "school",
    "schoo1s": "schools",
    "rnay": "may",
    "frorn": "from",
    "tirne": "time",
    "faceto-face": "face-to-face",
    "face-toface": "face-to-face",
    "facetoface": "face-to-face",
}

LETTERHEAD_MARKERS = (
    "republic of",
    "department of",
    "office of",
    "division of",
    "region",
    "province of",
    "municipality of",
    "city of",
    "memorandum",
    "bureau of",
)

HEADER_PREFIXES = ("to", "from", "re", "date", "subject", "cc", "thru", "attention", "attn")

HIGHLIGHT_PHRASES = (
    "suspension of face-to-face classes",
    "both public and private schools",
    "face-to-face classes",
    "all levels",
    "effective",
    "until lifted",
    "please be advised",
    "urgent",
    "important",
    "as soon as possible",
    "deadline",
    "immediately",
    "action required",
    "notice",
    "announcement",
    "for your guidance",
    "for immediate compliance",
    "stay safe",
    "kindly",
    "thank you",
    "regards",
    "sincerely",
    "best wishes",
    "looking forward",
    "should you have any questions",
    "do not hesitate to",
    "feel free to",
    "contact us",
    "reach out",
    "take care",
    "warm regards",
    "yours faithfully",
    "yours sincerely",
    "respectfully",
    "best regards",
    "note",
)


@dataclass(frozen=True)
class NormalizerConfig:
    replacements: Mapping[str, str] = field(default_factory=lambda: dict(SHORTHAND))
    letterhead_markers: Tuple[str, ...] = LETTERHEAD_MARKERS
    # Letterhead is only stripped when the "Re:" marker appears this early.
    letterhead_window: int = 600
    min_workable_length: int = 40
    placeholder: str = "No further details were provided."


@dataclass(frozen=True)
class RuleConfig:
    action_verbs: Tuple[str, ...] = (
        "submit", "attend", "pay", "respond", "bring",
        "fill out", "register", "watch", "send", "reply",
    )
    declaration_patterns: Tuple[str, ...] = (
        r"is hereby declared",
        r"suspension of",
        r"suspend(?:ed)? face-to-face",
    )
    declaration_directive: str = (
        "Follow the declared suspension: do not report for face-to-face classes "
        "or work until it is lifted, and monitor official announcements."
    )
    deadline_pattern: str = STANDARD_DEADLINE_PATTERN
    hedging_phrases: Tuple[str, ...] = ("as necessary", "subject to", "accordingly")
    confusing_length: int = 120
    confusing_explanation: str = (
        "This sentence is long or vague and may be difficult to understand clearly."
    )
    urgent_keywords: Tuple[str, ...] = (
        "today", "immediately", "asap", "urgent", "final notice", "effective", "until lifted",
    )
    severity_terms: Tuple[str, ...] = ("tropical cyclone", "heavy rainfall")
    lowercase_next_step: bool = True
    # Segmenter settings
    min_sentence_length: int = 20
    header_prefixes: Tuple[str, ...] = HEADER_PREFIXES
    boilerplate_phrases: Tuple[str, ...] = ("office of the", "memorandum")


@dataclass(frozen=True)
class SummaryConfig:
    strategy: str = "rank"
    important_keywords: Tuple[str, ...] = (
        "suspension", "suspended", "is hereby declared", "effective", "until lifted",
        "face-to-face", "classes", "deadline", "urgent", "important", "must",
        "required", "submit",
    )
    date_keywords: Tuple[str, ...] = (
        "january", "february", "march", "april", "june", "july", "august",
        "september", "october", "november", "december", "today", "tomorrow",
        "effective", "monday", "tuesday", "wednesday", "thursday", "friday",
    )
    readable_band: Tuple[int, int] = (40, 300)
    top_n: int = 2
    decision_patterns: Tuple[str, ...] = (
        r"\bsuspen(?:d|ded|sion)\b", r"\bis hereby declared\b", r"\bcancel(?:led|ed|lation)?\b",
        r"\bpostpone(?:d|ment)?\b", r"\bclosed\b", r"\bno (?:classes|work)\b",
    )
    reason_patterns: Tuple[str, ...] = (
        r"\bdue to\b", r"\bbecause of\b", r"\btyphoon\b", r"\btropical (?:cyclone|depression|storm)\b",
        r"\bheavy rain(?:fall|s)?\b", r"\bflood(?:s|ing)?\b", r"\bstorm\b", r"\bweather\b",
        r"\bsignal no\b", r"\bearthquake\b",
    )
    timeframe_patterns: Tuple[str, ...] = (
        r"\beffective\b", r"\buntil (?:lifted|further notice)\b", r"\btoday\b", r"\btomorrow\b",
        rf"\b(?:{MONTHS})\.?\s+\d{{1,2}}\b", r"\b\d{1,2}:\d{2}\b",
    )


@dataclass(frozen=True)
class AnalysisProfile:
    name: str
    normalizer: NormalizerConfig
    rules: RuleConfig
    summary: SummaryConfig
    highlight_phrases: Tuple[str, ...] = HIGHLIGHT_PHRASES


STANDARD = AnalysisProfile(
    name="standard",
    normalizer=NormalizerConfig(),
    rules=RuleConfig(),
    summary=SummaryConfig(),
)

STRICT = AnalysisProfile(
    name="strict",
    normalizer=NormalizerConfig(min_workable_length=60),
    rules=RuleConfig(
        deadline_pattern=STRICT_DEADLINE_PATTERN,
        confusing_length=150,
        min_sentence_length=40,
        lowercase_next_step=False,
    ),
    summary=SummaryConfig(strategy="decision", readable_band=(30, 300), top_n=3),
)

PROFILES: Dict[str, AnalysisProfile] = {STANDARD.name: STANDARD, STRICT.name: STRICT}


def get_profile(name: str = "standard", *, summary_strategy: Optional[str] = None) -> AnalysisProfile:
    try:
        profile = PROFILES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown rule profile {name!r}; expected one of {sorted(PROFILES)}") from None
    if summary_strategy:
        profile = replace(profile, summary=replace(profile.summary, strategy=summary_strategy))
    return profile
