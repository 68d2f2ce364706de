"""Kommandozeilen-Einstieg.

``mcqkarten convert`` wandelt ein Prüfungsdokument (DOCX/PDF/TXT) in ein
``flashcards.json``-Deck um, ``mcqkarten check`` prüft ein vorhandenes Deck nach
den Regeln des Kartenviewers. Beide Befehle nutzen `KartenPipeline` bzw.
`deck.load_deck` und lesen ihre Standardwerte aus ``config.toml``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import load_config, merged_config, validate_config
from .deck import DeckLoadError, load_deck
from .logging_utils import get_logger
from .pipeline import ConversionError, KartenPipeline
from .pipeline_models import Flashcard

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_NO_CARDS = 1
EXIT_ERROR = 2


def format_preview(cards: Sequence[Flashcard], limit: int = 5) -> str:
    out: List[str] = []
    for idx, card in enumerate(cards[:limit], 1):
        out.append(f"Q{idx}: {card.question}")
        out.extend(f"    {opt}" for opt in card.options)
        out.append(f"  ✓ {card.answer}")
    return "\n".join(out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcqkarten",
        description="Prüfungsdokumente (DOCX/PDF/TXT) in Karteikarten-JSON umwandeln",
    )
    parser.add_argument("--config", default=None, help="Pfad zu einer config.toml")
    parser.add_argument("--verbose", action="store_true", help="Debug-Ausgaben aktivieren")
    sub = parser.add_subparsers(dest="command", required=True)

    conv = sub.add_parser("convert", help="Dokument in ein JSON-Deck umwandeln")
    conv.add_argument("input", help="DOCX-, PDF- oder TXT-Datei")
    conv.add_argument("-o", "--output", default=None, help="Zieldatei (Standard: export.json_name)")
    conv.add_argument("--excel", default=None, help="zusätzlich als Excel-Datei exportieren")
    conv.add_argument("--csv", default=None, help="zusätzlich als CSV (Front/Back) exportieren")
    conv.add_argument("--preview", type=int, default=5, help="Anzahl Karten in der Vorschau")

    chk = sub.add_parser("check", help="JSON-Deck wie der Viewer validieren")
    chk.add_argument("deck", nargs="?", default=None, help="Pfad oder URL (Standard: viewer.deck_url)")
    return parser


def _convert(args: argparse.Namespace, cfg: dict) -> int:
    pipeline = KartenPipeline(cfg)
    try:
        result = pipeline.convert(args.input)
    except ConversionError as exc:
        print(exc, file=sys.stderr)
        return EXIT_ERROR

    if not result.ok:
        print(result.message, file=sys.stderr)
        return EXIT_NO_CARDS

    out = pipeline.export_json(result.cards, args.output)
    if args.excel:
        pipeline.export_excel(result.cards, args.excel)
    if args.csv:
        pipeline.export_csv(result.cards, args.csv)

    print(f"{result.message} → {out}")
    if result.unknown_answers:
        print(f"{result.unknown_answers} Karten ohne erkannte Antwort (UNKNOWN)")
    if args.preview > 0:
        print(format_preview(result.cards, args.preview))
    return EXIT_OK


def _check(args: argparse.Namespace, cfg: dict) -> int:
    source = args.deck or cfg["viewer"]["deck_url"]
    try:
        cards = load_deck(source)
    except DeckLoadError as exc:
        print(exc, file=sys.stderr)
        return EXIT_ERROR
    print(f"{len(cards)} gültige Karten in {source}")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.config and not Path(args.config).is_file():
        print(f"Konfigurationsdatei nicht gefunden: {args.config}", file=sys.stderr)
        return EXIT_ERROR

    raw_cfg = load_config(args.config)
    try:
        # ohne lesbare Datei gelten die Standardwerte
        if raw_cfg:
            validate_config(raw_cfg)
    except ValueError as exc:
        print(f"Ungültige Konfiguration: {exc}", file=sys.stderr)
        return EXIT_ERROR
    cfg = merged_config(raw_cfg)

    level = "DEBUG" if args.verbose else str(cfg["logging"]["level"]).upper()
    logging.getLogger().setLevel(getattr(logging, level, logging.INFO))

    if args.command == "convert":
        return _convert(args, cfg)
    return _check(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
