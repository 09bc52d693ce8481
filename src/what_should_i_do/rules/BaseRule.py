from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from what_should_i_do.config.profiles import RuleConfig
from what_should_i_do.rules.core import RuleKind, RuleMatch


class BaseRule(ABC):
    """
    Base class for all sentence rules.

    Design goals:
    - Provide consistent, reusable text matching helpers.
    - Keep rule logic readable and declarative.
    - Take keyword lists and patterns from a RuleConfig, never hard-code them.
    """

    # Human-/debug-friendly unique name
    name: str = "base_rule"

    kind: RuleKind = "action"

    # Higher runs earlier
    priority: int = 0

    def __init__(self, config: Optional[RuleConfig] = None):
        self.config = config or RuleConfig()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, priority={self.priority})"

    # --- Helpers (None-safe, case-insensitive) ---

    def norm(self, s: str | None) -> str:
        """Normalize text for matching (None-safe, lowercased)."""
        return (s or "").lower()

    def contains_any(self, text: str | None, needles: Sequence[str]) -> bool:
        """True if any needle is a substring of text (case-insensitive)."""
        t = self.norm(text)
        return any(n.lower() in t for n in needles)

    def regex(self, text: str | None, pattern: str) -> bool:
        """Regex search on text (case-insensitive)."""
        return bool(re.search(pattern, self.norm(text), flags=re.IGNORECASE))

    def search(self, text: str | None, pattern: str) -> Optional[re.Match]:
        """Like regex(), but on the original casing so the match can be reported."""
        return re.search(pattern, text or "", flags=re.IGNORECASE)

    # --- Rule API ---

    @abstractmethod
    def match(self, sentence: str) -> Optional[RuleMatch]:
        """Return a RuleMatch, or None when the sentence is not relevant."""
        raise NotImplementedError
