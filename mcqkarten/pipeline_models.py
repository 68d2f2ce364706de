from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

UNKNOWN_ANSWER = "UNKNOWN"


class LineKind(Enum):
    NOISE = "noise"
    INLINE_ANSWER = "inline_answer"
    # Option oder Antwort in Optionsschreibweise – entscheidet erst der Segmenter
    OPTION_OR_ANSWER = "option_or_answer"
    PLAIN = "plain"


@dataclass(frozen=True)
class Line:
    text: str
    kind: LineKind
    payload: Optional[str] = None

    @property
    def letter(self) -> Optional[str]:
        """Marker letter (``A``–``D``) of an option line, else ``None``."""
        if self.kind is LineKind.OPTION_OR_ANSWER:
            return self.text[0]
        return None


@dataclass(frozen=True)
class RecordDraft:
    question: str
    options: Tuple[str, ...]
    answers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Flashcard:
    question: str
    options: Tuple[str, ...] = field(default_factory=tuple)
    answer: str = UNKNOWN_ANSWER
    explanation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "answer": self.answer,
            "explanation": self.explanation,
        }
