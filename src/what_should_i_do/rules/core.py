from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional, Protocol


RuleKind = Literal["declaration", "action", "deadline", "confusion"]


@dataclass(frozen=True)
class RuleMatch:
    """What a rule found in one sentence."""
    kind: RuleKind
    value: str
    explanation: str = ""
    # Declarations end evaluation of the sentence.
    stop_processing: bool = False


class SentenceRule(Protocol):
    name: str
    kind: RuleKind

    def match(self, sentence: str) -> Optional[RuleMatch]: ...
