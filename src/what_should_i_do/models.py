from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Tuple

Urgency = Literal["Urgent", "Important", "Informational"]
URGENCY_LEVELS: Tuple[str, ...] = ("Urgent", "Important", "Informational")

NO_ACTION = "No clear action mentioned"
NO_DEADLINE = "No deadline mentioned"
NO_NEXT_STEP = "No immediate action required."
NO_SUMMARY = "No summary available."


@dataclass(frozen=True)
class ConfusingPart:
    sentence: str
    explanation: str

    def to_dict(self) -> Dict[str, str]:
        return {"sentence": self.sentence, "explanation": self.explanation}


@dataclass(frozen=True)
class AnalysisResult:
    actions: List[str]
    deadlines: List[str]
    urgency: Urgency
    confusing_parts: List[ConfusingPart] = field(default_factory=list)
    next_step: str = NO_NEXT_STEP
    summary: str = ""
    # Which path produced the result ("remote" or "local"); not part of the wire shape.
    source: str = "local"

    def to_dict(self) -> Dict[str, Any]:
        # camelCase keys match the JSON shape the front-end renders.
        return {
            "actions": list(self.actions),
            "deadlines": list(self.deadlines),
            "urgency": self.urgency,
            "confusingParts": [part.to_dict() for part in self.confusing_parts],
            "nextStep": self.next_step,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class Extraction:
    """Per-sentence rule output before sentinels are applied."""
    actions: List[str]
    deadlines: List[str]
    confusing_parts: List[ConfusingPart]
    urgency: Urgency
    next_step: str


def with_sentinels(items: List[str], sentinel: str) -> List[str]:
    # Absence is reported as a sentinel string, never an empty list.
    cleaned = [item for item in items if item and item.strip()]
    return cleaned if cleaned else [sentinel]
