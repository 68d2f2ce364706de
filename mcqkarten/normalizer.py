"""Normalisierung des Rohtexts vor der Segmentierung.

Die Textextraktion aus DOCX/PDF liefert oft mehrere Antwortoptionen in einer
physischen Zeile oder hängt ein "정답: C" an das Ende einer Optionszeile.
`normalize_mcq_text` bringt den Text in eine zeilenorientierte Form, die
`line_classifier` und `segmenter` direkt verarbeiten können. Die Funktion ist
idempotent.
"""

from __future__ import annotations

import re

# Horizontaler Whitespace (alles außer Zeilenumbruch)
_HWS = r"[^\S\n]"

OPTION_MARKER = r"[A-D][.)．]"

# Optionsmarker mitten in der Zeile: "... A. x B. y" -> Zeilenumbruch davor.
# Ein vorangestellter ASCII-Buchstabe ("DNA. ") zählt nicht.
_INLINE_OPTION_RE = re.compile(
    rf"(\S){_HWS}*(?<![A-Za-z])(?={OPTION_MARKER}{_HWS})"
)

_BLANK_RUN_RE = re.compile(r"\n{4,}")

ANSWER_KEYWORD = r"(?:정답|답|Answer)"
ANSWER_LETTERS = rf"[A-D](?:{_HWS}*[,/]{_HWS}*[A-D])*"

_INLINE_ANSWER_RE = re.compile(
    rf"(\S){_HWS}*(?<!\w)(?={ANSWER_KEYWORD}{_HWS}*[:：]{_HWS}*{ANSWER_LETTERS}(?![A-Za-z]))",
    re.IGNORECASE,
)

_OPTION_COUNT_RE = re.compile(rf"{OPTION_MARKER}\s")
_OPTION_COUNT_LINE_START_RE = re.compile(rf"^{OPTION_MARKER}\s", re.MULTILINE)


def normalize_mcq_text(raw: str) -> str:
    """Rewrite extracted text into one option/answer marker per line start."""

    text = raw.replace("\r", "").replace("\u00a0", " ")
    text = _INLINE_OPTION_RE.sub(r"\1\n", text)
    text = _BLANK_RUN_RE.sub("\n\n\n", text)
    text = _INLINE_ANSWER_RE.sub(r"\1\n", text)
    return text


def count_option_markers(text: str, at_line_start: bool = False) -> int:
    """Zählt "A."-artige Marker – nützlich für die Diagnose im Log."""
    pattern = _OPTION_COUNT_LINE_START_RE if at_line_start else _OPTION_COUNT_RE
    return len(pattern.findall(text))
