"""Zentrale Verarbeitungslogik für Prüfungsdokumente → Karteikarten.

Die `KartenPipeline` verbindet alle Einzelmodule: Textextraktion,
Normalisierung, Segmentierung und Export. Eine Konvertierung ist eine einmalige,
vom Benutzer ausgelöste Aktion: Extraktionsfehler werden genau einmal in eine
`ConversionError` übersetzt, ein Dokument ohne erkennbare Fragen liefert ein
leeres `ConversionResult` mit Hinweistext statt einer Exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .assembler import parse_flashcards
from .config import merged_config
from .doc_ingest import extract_text, extract_text_from_bytes
from .export import to_anki_csv, to_excel, write_json
from .logging_utils import get_logger
from .normalizer import count_option_markers, normalize_mcq_text
from .pipeline_models import UNKNOWN_ANSWER, Flashcard

logger = get_logger(__name__)

NO_CARDS_MESSAGE = "Keine Fragen gefunden. Bitte das Dateiformat prüfen."


class ConversionError(RuntimeError):
    """Das Dokument konnte nicht verarbeitet werden."""


@dataclass
class ConversionResult:
    cards: List[Flashcard] = field(default_factory=list)
    source: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return bool(self.cards)

    @property
    def unknown_answers(self) -> int:
        return sum(1 for c in self.cards if c.answer == UNKNOWN_ANSWER)


class KartenPipeline:
    def __init__(self, cfg: Optional[Dict[str, Any]] = None):
        self.cfg = merged_config(cfg)

    def load_text(self, path: Union[str, Path]) -> str:
        """Liest das Dokument ein; jeder Fehler wird zu einer `ConversionError`."""
        try:
            return extract_text(path)
        except Exception as exc:
            logger.error("Fehler bei der Dateiverarbeitung von %s: %s", path, exc)
            raise ConversionError(f"Fehler bei der Dateiverarbeitung: {exc}") from exc

    def load_bytes(self, data: bytes, suffix: str) -> str:
        try:
            return extract_text_from_bytes(data, suffix)
        except Exception as exc:
            logger.error("Fehler bei der Dateiverarbeitung (%s): %s", suffix, exc)
            raise ConversionError(f"Fehler bei der Dateiverarbeitung: {exc}") from exc

    def parse(self, raw_text: str, source: str = "") -> ConversionResult:
        normalized = normalize_mcq_text(raw_text)
        n_lines = normalized.count("\n") + 1
        if n_lines > self.cfg["parser"]["large_document_lines"]:
            logger.warning(
                "Sehr langes Dokument (%s Zeilen) – die Segmentierung kann dauern.", n_lines
            )
        logger.info(
            "Optionsmarker: %s im Rohtext, %s am Zeilenanfang nach Normalisierung",
            count_option_markers(raw_text),
            count_option_markers(normalized, at_line_start=True),
        )

        cards = parse_flashcards(normalized, normalize=False)
        if not cards:
            logger.warning("Keine Karten in %s erkannt", source or "Eingabetext")
            return ConversionResult(cards=[], source=source, message=NO_CARDS_MESSAGE)

        result = ConversionResult(
            cards=cards, source=source, message=f"{len(cards)} Karten wurden erzeugt."
        )
        logger.info(
            "%s Karten erkannt, davon %s ohne Antwort", len(cards), result.unknown_answers
        )
        return result

    def convert(self, path: Union[str, Path]) -> ConversionResult:
        return self.parse(self.load_text(path), source=str(path))

    def convert_bytes(self, data: bytes, suffix: str, source: str = "") -> ConversionResult:
        return self.parse(self.load_bytes(data, suffix), source=source)

    # === Export ===
    def export_json(self, cards: List[Flashcard], out_path: Union[str, Path, None] = None) -> Path:
        if out_path is None:
            out_path = self.cfg["export"]["json_name"]
        return write_json(cards, out_path, indent=self.cfg["export"]["json_indent"])

    def export_excel(self, cards: List[Flashcard], out_path: Union[str, Path]) -> None:
        to_excel(cards, out_path)

    def export_csv(self, cards: List[Flashcard], out_path: Union[str, Path]) -> Path:
        return to_anki_csv(cards, out_path, delimiter=self.cfg["export"]["csv_delimiter"])
