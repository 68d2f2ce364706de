"""Export-Routinen für die erzeugten Karteikarten.

`write_json` schreibt das Deck in dem Format, das der Kartenviewer lädt
(``flashcards.json``). Daneben gibt es einen Excel-Export über pandas sowie
eine CSV-Datei im Front/Back-Format (z. B. für Anki).
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List, Sequence, Union

import pandas as pd

from .config import get_setting
from .pipeline_models import Flashcard

PathLike = Union[str, Path]

EXCEL_COLUMNS = ["Frage", "Optionen", "Antwort", "Erklärung"]


def cards_to_json(cards: Sequence[Flashcard], indent: int | None = None) -> str:
    if indent is None:
        indent = get_setting("export", "json_indent")
    return json.dumps([c.to_dict() for c in cards], ensure_ascii=False, indent=indent)


def write_json(cards: Sequence[Flashcard], out_path: PathLike, indent: int | None = None) -> Path:
    """Schreibt ``cards`` als JSON-Array nach ``out_path`` (UTF-8)."""

    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(cards_to_json(cards, indent), encoding="utf-8")
    return path


def to_excel(cards: Sequence[Flashcard], out_path: PathLike) -> None:
    """Eine Zeile pro Karte; Optionen werden zeilenweise in eine Zelle geschrieben."""

    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if not cards:
        # leere Datei anlegen, aber nicht craschen
        path.touch()
        return

    data = [
        {
            "Frage": c.question,
            "Optionen": "\n".join(c.options),
            "Antwort": c.answer,
            "Erklärung": c.explanation or "",
        }
        for c in cards
    ]
    try:
        pd.DataFrame(data, columns=EXCEL_COLUMNS).to_excel(
            path, index=False, sheet_name="Lernkarten", engine="openpyxl"
        )
    except OSError as exc:
        raise RuntimeError(f"Excel-Datei {path} konnte nicht geschrieben werden: {exc}") from exc


def _front(card: Flashcard) -> str:
    return "\n".join([card.question, *card.options])


def to_anki_csv(
    cards: Sequence[Flashcard], out_path: PathLike, delimiter: str | None = None
) -> Path:
    if delimiter is None:
        delimiter = get_setting("export", "csv_delimiter")
    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows: List[List[str]] = [[_front(c), c.answer, c.explanation or ""] for c in cards]
    with path.open("w", newline="", encoding="utf-8") as f:
        cw = csv.writer(f, delimiter=delimiter)
        cw.writerow(["Front", "Back", "Explanation"])
        cw.writerows(rows)
    return path
