"""Zusammenbau der fertigen Karteikarten.

`assemble` setzt aus den Rohdaten eines Segmentierungszyklus eine
unveränderliche `Flashcard` zusammen; `parse_flashcards` ist der öffentliche
Einstiegspunkt von Rohtext zu Kartenliste und wird von `pipeline` verwendet.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .line_classifier import classify_lines
from .normalizer import normalize_mcq_text
from .pipeline_models import UNKNOWN_ANSWER, Flashcard, RecordDraft
from .segmenter import iter_records


def assemble(question: str, options: Sequence[str], answers: Iterable[str]) -> Flashcard:
    # Fehlende Antwort ist kein Fehler: Karte wird mit Platzhalter ausgegeben
    answer = "\n".join(answers).strip()
    return Flashcard(
        question=question,
        options=tuple(options),
        answer=answer or UNKNOWN_ANSWER,
        explanation=None,
    )


def assemble_draft(draft: RecordDraft) -> Flashcard:
    return assemble(draft.question, draft.options, draft.answers)


def parse_flashcards(raw_text: str, normalize: bool = True) -> List[Flashcard]:
    """Parse extracted document text into flashcards in document order.

    Never raises on malformed input; an empty list means no record could be
    recovered.
    """
    text = normalize_mcq_text(raw_text) if normalize else raw_text
    lines = classify_lines(text)
    return [assemble_draft(d) for d in iter_records(lines)]
