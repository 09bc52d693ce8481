from __future__ import annotations

import logging
import re
from typing import List, Optional

from what_should_i_do.config.profiles import MONTHS, WEEKDAYS, NormalizerConfig

logger = logging.getLogger(__name__)

_TYPOGRAPHIC = str.maketrans({
    "\u2018": "'", "\u2019": "'", "\u201c": '"', "\u201d": '"',
    "\u2013": "-", "\u2014": "-", "\u2026": "...", "\u00a0": " ",
})

_EMAIL = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_MEMO_HEADER = re.compile(r"^\s*(?:to|from|date|cc|thru|attention|attn)\s*:", re.IGNORECASE)
_SUBJECT_LINE = re.compile(r"^\s*(?:re|subject)\s*:", re.IGNORECASE)
_MEMO_NUMBER = re.compile(
    r"^\s*(?:(?:division|regional|office|unnumbered)\s+)?(?:memorandum|memo|advisory|order)"
    r"(?:\s*(?:no\.?|number|#)\s*[\w\-,./ ]*)?\s*$",
    re.IGNORECASE,
)
_OFFICE_HEADER = re.compile(
    r"^\s*(?:office of the|division of|department of|republic of|bureau of|schools division"
    r"|city of|municipality of|province of|region\s+[ivxlc\d]+\b)",
    re.IGNORECASE,
)
_DATE_LINE = re.compile(
    rf"^\s*(?:(?:{WEEKDAYS}),?\s*)?"
    rf"(?:(?:{MONTHS})\.?\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}}|\d{{1,2}}\s+(?:{MONTHS})\.?,?\s+\d{{4}})?"
    r"\s*$",
    re.IGNORECASE,
)
_FOOTER_LINE = re.compile(
    r"^\s*(?:sent from my \w+.*|get outlook for .*|unsubscribe.*|you are receiving this .*"
    r"|this (?:e-?mail|message)\b.*\b(?:confidential|intended)\b.*)$",
    re.IGNORECASE,
)
_SIGNATURE_DELIMITER = re.compile(r"^\s*--\s*$")
_LETTERHEAD_END = re.compile(r"\b(?:re|subject)\s*:", re.IGNORECASE)


def normalize_text(text: str, config: Optional[NormalizerConfig] = None, *, pad: bool = True) -> str:
    """
    Turn raw pasted or extracted text into one clean line of prose.

    Boilerplate (letterhead, memo headers, footers, datelines) is removed
    line by line first, then whitespace, characters, shorthand and
    punctuation are normalized. With ``pad`` the result is topped up with a
    neutral placeholder sentence when it is too short to work with.
    """
    cfg = config or NormalizerConfig()
    if not text:
        return pad_short_text("", cfg) if pad else ""

    text = text.translate(_TYPOGRAPHIC).replace("\r\n", "\n").replace("\r", "\n")
    text = _strip_letterhead(text, cfg)
    lines = _drop_boilerplate_lines(text.split("\n"))

    # Subject lines stay separate sentences so the segmenter can drop them.
    lines = [_terminate(line) if _SUBJECT_LINE.match(line) else line for line in lines]

    out = re.sub(r"\s+", " ", " ".join(lines))
    out = re.sub(r"[^\x20-\x7E]", "", out)
    out = re.sub(r"\s{2,}", " ", out).strip()
    out = apply_replacements(out, cfg)
    out = _fix_punctuation(out)

    logger.debug("normalized %d chars into %d chars", len(text), len(out))
    return pad_short_text(out, cfg) if pad else out


def pad_short_text(text: str, config: Optional[NormalizerConfig] = None) -> str:
    cfg = config or NormalizerConfig()
    if len(text) >= cfg.min_workable_length:
        return text
    if not text:
        return cfg.placeholder
    if text[-1] not in ".!?":
        text += "."
    return f"{text} {cfg.placeholder}"


def apply_replacements(text: str, config: NormalizerConfig) -> str:
    # Whole-word, case-insensitive; a capitalized source word stays capitalized.
    def swap(match: re.Match) -> str:
        word = match.group(0)
        replacement = config.replacements.get(word.lower(), word)
        if word[:1].isupper() and replacement:
            return replacement[0].upper() + replacement[1:]
        return replacement

    if not config.replacements:
        return text
    keys = sorted(config.replacements, key=len, reverse=True)
    pattern = r"(?<![\w\-.'])(?:" + "|".join(re.escape(k) for k in keys) + r")(?![\w\-']|\.\w)"
    return re.sub(pattern, swap, text, flags=re.IGNORECASE)


def _strip_letterhead(text: str, config: NormalizerConfig) -> str:
    match = _LETTERHEAD_END.search(text, 0, config.letterhead_window)
    if not match or match.start() == 0:
        return text
    head = text[: match.start()].lower()
    if any(marker in head for marker in config.letterhead_markers):
        return text[match.start():]
    return text


def _drop_boilerplate_lines(lines: List[str]) -> List[str]:
    kept: List[str] = []
    for line in lines:
        stripped = line.strip()
        if _SIGNATURE_DELIMITER.match(stripped):
            # Everything below "--" is a signature block.
            break
        if not stripped:
            continue
        if _MEMO_HEADER.match(stripped) or _MEMO_NUMBER.match(stripped) or _FOOTER_LINE.match(stripped):
            continue
        if _DATE_LINE.match(stripped):
            continue
        if _OFFICE_HEADER.match(stripped) and len(stripped) <= 80 and stripped[-1] not in ".!?":
            continue
        if _EMAIL.search(stripped) and len(stripped.split()) <= 6:
            continue
        kept.append(stripped)
    return kept


def _terminate(line: str) -> str:
    line = line.rstrip()
    return line if line.endswith((".", "!", "?")) else f"{line}."


def _fix_punctuation(text: str) -> str:
    text = re.sub(r"\s+([,.;!?])", r"\1", text)
    text = re.sub(r"([!?])\1+", r"\1", text)
    text = re.sub(r"([,;])(?=[A-Za-z])", r"\1 ", text)
    text = re.sub(r"([.!?])(?=[A-Z][a-z])", r"\1 ", text)
    return re.sub(r"\s{2,}", " ", text).strip()
