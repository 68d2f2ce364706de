"""Zustandsautomat, der klassifizierte Zeilen in Karteikarten-Rohdaten zerlegt.

Ablauf pro Zyklus: Frage sammeln → Optionen sammeln → Antwort sammeln. Jeder
Schritt ist eine reine Funktion ``(lines, cursor) -> (neuer_cursor, ergebnis)``;
der Cursor ist der einzige Zustand. `segment_once` liefert immer einen größeren
Cursor zurück, solange noch Zeilen übrig sind, daher terminiert `iter_records`
auch bei kaputten Eingaben.

Die Grenze "hier beginnt die nächste Frage" ist in `opens_question` gebündelt
und wird von allen drei Phasen verwendet.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from .pipeline_models import Line, LineKind, RecordDraft

OPTION_LETTERS = "ABCD"
MAX_OPTIONS = 4
MIN_OPTIONS = 2


def skip_noise(lines: Sequence[Line], pos: int) -> int:
    while pos < len(lines) and lines[pos].kind is LineKind.NOISE:
        pos += 1
    return pos


def opens_question(lines: Sequence[Line], pos: int, letters: str = OPTION_LETTERS) -> bool:
    """Does the line at ``pos`` look like the first line of a new question?

    True if it is ordinary text (neither noise nor a letter-marker line) and
    the next non-noise line is a marker line whose letter is in ``letters``.
    """
    if pos >= len(lines):
        return False
    if lines[pos].kind in (LineKind.NOISE, LineKind.OPTION_OR_ANSWER):
        return False
    nxt = skip_noise(lines, pos + 1)
    return (
        nxt < len(lines)
        and lines[nxt].kind is LineKind.OPTION_OR_ANSWER
        and lines[nxt].letter in letters
    )


def _letter_rank(letter: Optional[str]) -> int:
    return OPTION_LETTERS.find(letter or "")


def scan_question(lines: Sequence[Line], cursor: int) -> Tuple[int, Optional[str]]:
    """Collect question text up to the first option line.

    Returns ``(pos_of_first_option, question)`` on success. Without an option
    boundary before the end of input the cursor jumps to the end (no later
    start could find one either); an empty question advances by one line.
    """
    start = skip_noise(lines, cursor)
    pos = start
    parts: List[str] = []
    while pos < len(lines):
        line = lines[pos]
        if line.kind is LineKind.NOISE:
            pos += 1
            continue
        if line.kind is LineKind.OPTION_OR_ANSWER:
            break
        parts.append(line.text)
        if opens_question(lines, pos):
            pos = skip_noise(lines, pos + 1)
            break
        pos += 1

    if pos >= len(lines):
        return len(lines), None
    question = " ".join(parts).strip()
    if not question:
        return start + 1, None
    return pos, question


def scan_options(lines: Sequence[Line], cursor: int) -> Tuple[int, List[str]]:
    """Collect up to four consecutively lettered options starting at ``cursor``.

    Continuation lines are appended with a space. Letters must ascend, gaps
    are allowed; a marker line that repeats or goes back ends the options and
    is left for `scan_answer`.
    """
    pos = cursor
    options: List[str] = []
    prev_letter: Optional[str] = None
    while pos < len(lines) and len(options) < MAX_OPTIONS:
        line = lines[pos]
        if line.kind is LineKind.NOISE:
            pos += 1
            continue
        if line.kind is not LineKind.OPTION_OR_ANSWER:
            break
        if prev_letter is not None and _letter_rank(line.letter) <= _letter_rank(prev_letter):
            break

        text = line.text
        pos += 1
        while pos < len(lines):
            nxt = lines[pos]
            if nxt.kind is LineKind.NOISE:
                pos += 1
                continue
            if nxt.kind in (LineKind.OPTION_OR_ANSWER, LineKind.INLINE_ANSWER):
                break
            # neue Frage mit frischer "A."-Liste – nicht als Fortsetzung schlucken
            if opens_question(lines, pos, letters=OPTION_LETTERS[0]):
                break
            text += " " + nxt.text
            pos += 1
        options.append(text)
        prev_letter = line.letter
    return pos, options


def scan_answer(lines: Sequence[Line], cursor: int) -> Tuple[int, List[str]]:
    """Collect answer entries after the last option.

    Stops after an inline answer (consumed) or in front of the first line of
    the next question (not consumed).
    """
    pos = skip_noise(lines, cursor)
    answers: List[str] = []
    while pos < len(lines):
        line = lines[pos]
        if line.kind is LineKind.NOISE:
            pos += 1
            continue
        if line.kind is LineKind.INLINE_ANSWER:
            answers.append(line.payload or "")
            pos += 1
            break
        if opens_question(lines, pos):
            break
        if line.kind is LineKind.OPTION_OR_ANSWER:
            answers.append(line.text)
        elif answers:
            answers[-1] += " " + line.text
        # sonst: Streuzeile ohne Antwortkontext, verwerfen
        pos += 1
    return pos, answers


def segment_once(lines: Sequence[Line], cursor: int) -> Tuple[int, Optional[RecordDraft]]:
    """Run one question → options → answer cycle starting at ``cursor``."""
    start = skip_noise(lines, cursor)
    if start >= len(lines):
        return len(lines), None

    pos, question = scan_question(lines, start)
    if question is None:
        return pos, None

    pos, options = scan_options(lines, pos)
    if len(options) < MIN_OPTIONS:
        return start + 1, None

    pos, answers = scan_answer(lines, pos)
    return pos, RecordDraft(question=question, options=tuple(options), answers=tuple(answers))


def iter_records(lines: Sequence[Line]) -> Iterator[RecordDraft]:
    cursor = 0
    while cursor < len(lines):
        cursor, draft = segment_once(lines, cursor)
        if draft is not None:
            yield draft
