"""Laden eines Karteikarten-Decks nach den Regeln des Kartenviewers.

Der Viewer holt ``flashcards.json`` von einem festen Pfad, prüft, dass die
oberste Ebene ein Array ist, normalisiert jedes Element und verwirft Karten
ohne Frage oder Antwort. `load_deck` bildet genau diese Prüfung nach, damit
exportierte Decks vorab geprüft werden können – lokal oder per HTTP.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional, Union

import requests

from .config import get_setting
from .logging_utils import get_logger
from .pipeline_models import Flashcard

logger = get_logger(__name__)

ERROR_PREFIX = "JSON-Laden fehlgeschlagen: "


class DeckLoadError(RuntimeError):
    """Deck konnte nicht geladen oder validiert werden."""


def _reject_constant(name: str) -> Any:
    # JSON.parse kennt kein NaN/Infinity
    raise ValueError(f"Ungültiges JSON-Literal: {name}")


def _js_number(value: Union[int, float]) -> str:
    # JSON.parse liefert immer IEEE-Doubles
    try:
        value = float(value)
    except OverflowError:
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    text = repr(value)
    if "e" not in text:
        return text[:-2] if text.endswith(".0") else text
    mantissa, exp = text.split("e")
    exponent = int(exp)
    if -7 < exponent < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"


def js_string(value: Any) -> str:
    """String conversion as JavaScript's ``String(value)`` does it for JSON values."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _js_number(value)
    if isinstance(value, list):
        return ",".join("" if v is None else js_string(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def _field(item: Any, key: str) -> Any:
    return item.get(key) if isinstance(item, dict) else None


def normalize_card(item: Any) -> Flashcard:
    question = _field(item, "question")
    answer = _field(item, "answer")
    options = _field(item, "options")
    explanation = _field(item, "explanation")
    return Flashcard(
        question=js_string("" if question is None else question).strip(),
        # kein Array -> Optionen entfallen
        options=tuple(js_string(v) for v in options) if isinstance(options, list) else (),
        answer=js_string("" if answer is None else answer).strip(),
        explanation=None if explanation is None else js_string(explanation),
    )


def parse_deck(raw: str) -> List[Flashcard]:
    data = json.loads(raw, parse_constant=_reject_constant)
    if not isinstance(data, list):
        raise ValueError("Die oberste JSON-Ebene muss ein Array ([]) sein.")
    cards = [c for c in (normalize_card(x) for x in data) if c.question and c.answer]
    if not cards:
        raise ValueError("Keine gültigen Karten vorhanden. (question/answer erforderlich)")
    return cards


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_deck_text(
    source: Union[str, Path],
    session: Optional[requests.Session] = None,
    timeout: float | None = None,
) -> str:
    if isinstance(source, str) and _is_url(source):
        if timeout is None:
            timeout = get_setting("viewer", "timeout_sec")
        getter = session.get if session is not None else requests.get
        res = getter(source, headers={"Cache-Control": "no-store"}, timeout=timeout)
        if not 200 <= res.status_code < 300:
            raise ValueError(f"HTTP {res.status_code}")
        return res.content.decode("utf-8-sig")
    return Path(source).read_text(encoding="utf-8-sig")


def load_deck(
    source: Union[str, Path, None] = None,
    session: Optional[requests.Session] = None,
) -> List[Flashcard]:
    """Fetch, validate and normalize a deck.

    Any failure (transport, JSON syntax, shape, no valid card) is reported as a
    single `DeckLoadError`; there is no retry.
    """
    if source is None:
        source = get_setting("viewer", "deck_url")
    try:
        cards = parse_deck(fetch_deck_text(source, session=session))
    except (OSError, ValueError, requests.RequestException) as exc:
        logger.warning("Deck %s konnte nicht geladen werden: %s", source, exc)
        raise DeckLoadError(f"{ERROR_PREFIX}{exc}") from exc
    logger.info("%s Karten aus %s geladen", len(cards), source)
    return cards
