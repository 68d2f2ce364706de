"""Zeilenklassifikation für den Segmenter.

Jede Zeile des normalisierten Texts bekommt genau eine `LineKind`. Die
Klassifikation ist zustandslos; ob eine ``OPTION_OR_ANSWER``-Zeile eine Option
oder eine Antwort ist, entscheidet erst `segmenter` anhand seines Zustands.
"""

from __future__ import annotations

import re
from typing import List

from .pipeline_models import Line, LineKind

ROMAN_NOISE = frozenset({"I", "II", "III", "IV"})

_SEPARATOR_RE = re.compile(r"^[-_=]{3,}$")
_OPTION_RE = re.compile(r"^[A-D][.)．]\s")
# "정답: C", "답: A,B", "Answer: B/D"
_INLINE_ANSWER_RE = re.compile(
    r"^(?:정답|답|Answer)\s*[:：]?\s*([A-D](?:\s*[,/]\s*[A-D])*)\s*$",
    re.IGNORECASE,
)


def is_noise(text: str) -> bool:
    t = text.strip()
    if not t:
        return True
    # Roemische Ziffern tauchen bei der DOCX-Extraktion gern als Einzelzeile auf
    if t in ROMAN_NOISE:
        return True
    return bool(_SEPARATOR_RE.match(t))


def extract_inline_answer(text: str) -> str | None:
    """Return the comma-joined answer letters of an inline answer line."""
    m = _INLINE_ANSWER_RE.match(text.strip())
    if not m:
        return None
    letters = [v.strip() for v in re.split(r"[,/]", m.group(1)) if v.strip()]
    return ", ".join(letters) or None


def classify_line(text: str) -> Line:
    t = text.strip()
    if is_noise(t):
        return Line(t, LineKind.NOISE)
    payload = extract_inline_answer(t)
    if payload:
        return Line(t, LineKind.INLINE_ANSWER, payload)
    if _OPTION_RE.match(t):
        return Line(t, LineKind.OPTION_OR_ANSWER)
    return Line(t, LineKind.PLAIN)


def classify_lines(text: str) -> List[Line]:
    """Zerlegt normalisierten Text in Zeilen und klassifiziert jede davon."""
    return [
        classify_line(raw.replace("\u00a0", " "))
        for raw in text.replace("\r", "").split("\n")
    ]
