from __future__ import annotations

import html
import re
from typing import List, Optional, Sequence

from what_should_i_do.config.profiles import HIGHLIGHT_PHRASES

HIGHLIGHT_OPEN = '<mark class="wsid-highlight">'
HIGHLIGHT_CLOSE = "</mark>"

# Spans this module already produced, and entities it already escaped, are copied through.
_HIGHLIGHT_SPAN = re.compile(re.escape(HIGHLIGHT_OPEN) + r"(.*?)" + re.escape(HIGHLIGHT_CLOSE), re.DOTALL)
_ENTITY = re.compile(r"&(?:amp|lt|gt|quot|#\d+);")
# Only well-formed tags; a bare "<" or ">" in prose is text.
_TAG = re.compile(r"</?[A-Za-z][^<>]*>")


def highlight_phrases(text: str, phrases: Sequence[str] = HIGHLIGHT_PHRASES, *, whole_words: bool = True) -> str:
    """
    Wrap key phrases in highlight markup.

    Phrases are tried longest first at every position, so "face-to-face
    classes" wins over "classes". The scan never revisits characters that a
    match consumed, and everything outside a highlight is HTML-escaped.
    Running it again over its own output changes nothing.
    """
    ordered = sorted({p.lower() for p in phrases if p and p.strip()}, key=len, reverse=True)
    out: List[str] = []
    i = 0
    n = len(text or "")

    while i < n:
        rendered = _already_rendered(text, i)
        if rendered:
            out.append(rendered.group(0))
            i = rendered.end()
            continue

        for phrase in ordered:
            end = i + len(phrase)
            if text[i:end].lower() != phrase:
                continue
            if whole_words and not _on_word_boundaries(text, i, end):
                continue
            out.append(f"{HIGHLIGHT_OPEN}{html.escape(text[i:end], quote=False)}{HIGHLIGHT_CLOSE}")
            i = end
            break
        else:
            out.append(html.escape(text[i], quote=False))
            i += 1

    return "".join(out)


def strip_markup(text: str) -> str:
    """Plain text back out of highlighted output."""
    return html.unescape(_TAG.sub("", text or ""))


def _already_rendered(text: str, pos: int) -> Optional[re.Match[str]]:
    span = _HIGHLIGHT_SPAN.match(text, pos)
    if span:
        inner = span.group(1)
        # A span whose body is not already escaped did not come from us.
        return span if html.escape(html.unescape(inner), quote=False) == inner else None
    return _ENTITY.match(text, pos)


def _on_word_boundaries(text: str, start: int, end: int) -> bool:
    before = text[start - 1] if start > 0 else " "
    after = text[end] if end < len(text) else " "
    return not before.isalnum() and not after.isalnum()
