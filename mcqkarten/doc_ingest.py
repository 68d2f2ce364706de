"""Textextraktion aus Prüfungsdokumenten.

`extract_text` liest DOCX-Dateien über ``python-docx`` und PDFs zunächst über
``pdfplumber``; ist das nicht installiert, wird auf ``pypdf`` zurückgegriffen.
Reine Textdateien werden direkt gelesen. Das Ergebnis ist bestmöglicher
Rohtext, der anschließend von `normalizer` und `segmenter` verarbeitet wird.
"""

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Iterable, List, Union

from docx import Document
from docx.table import Table

from .config import get_setting
from .logging_utils import get_logger

logger = get_logger(__name__)

Source = Union[str, Path, BinaryIO]


class UnsupportedDocumentError(ValueError):
    """Dateiendung wird von keinem Extraktor unterstützt."""


def extract_text_from_docx(source: Source) -> str:
    """Read paragraphs and table cells in body order, one block per paragraph.

    Blocks are separated by a blank line, like a raw-text export of the
    document.
    """
    document = Document(str(source) if isinstance(source, Path) else source)
    blocks: List[str] = []
    for block in document.iter_inner_content():
        if isinstance(block, Table):
            blocks.extend(_table_cells(block))
        else:
            blocks.append(block.text)
    return "\n\n".join(blocks)


def _table_cells(table: Table) -> Iterable[str]:
    for row in table.rows:
        prev = None
        for cell in row.cells:
            # verbundene Zellen liefert python-docx mehrfach
            if cell.text == prev:
                continue
            prev = cell.text
            yield cell.text


def extract_text_from_pdf(source: Source) -> str:
    try:
        import pdfplumber
    except ImportError:
        logger.warning("pdfplumber nicht verfügbar, verwende pypdf")
        return _extract_pdf_with_pypdf(source)

    pages = []
    with pdfplumber.open(source) as pdf:
        for page in pdf.pages:
            pages.append(cleanup_page_text(page.extract_text() or ""))
    return "\n\n".join(pages)


def _extract_pdf_with_pypdf(source: Source) -> str:
    try:
        from pypdf import PdfReader
        from pypdf.errors import PdfReadError
    except ImportError as ex:
        msg = "Weder pdfplumber noch pypdf sind verfügbar"
        logger.error(msg)
        raise ImportError(msg) from ex

    reader = PdfReader(source)
    pages = []
    for i, page in enumerate(reader.pages):
        try:
            t = page.extract_text() or ""
        except (PdfReadError, KeyError) as err:
            logger.warning("Text auf Seite %s konnte nicht extrahiert werden: %s", i, err)
            t = ""
        pages.append(cleanup_page_text(t))
    return "\n\n".join(pages)


_PAGE_NUMBER_RE = re.compile(r"\s*[-–]?\s*\d+\s*(?:/\s*\d+\s*)?[-–]?\s*")
# Silbentrennung: 'Beispiel-\nhaft' -> 'Beispielhaft', aber nie vor einem Optionsmarker
_HYPHENATION_RE = re.compile(r"(\w)-\n(?![A-D][.)．]\s)(\w)")


def cleanup_page_text(t: str) -> str:
    """Entfernt Seitenzahlen, konfigurierte Kopf-/Fußzeilen und Trennstriche."""

    t = t.replace("\r", "")
    if get_setting("extraction", "join_hyphenation"):
        t = _HYPHENATION_RE.sub(r"\1\2", t)
    drop = [re.compile(p) for p in get_setting("extraction", "drop_line_patterns")]
    lines = []
    for line in t.split("\n"):
        if line.strip() and _PAGE_NUMBER_RE.fullmatch(line):
            continue
        if any(p.search(line) for p in drop):
            continue
        lines.append(line.rstrip())
    return "\n".join(lines)


def _read_plain(source: Source) -> str:
    if isinstance(source, (str, Path)):
        with open(source, "r", encoding="utf-8", errors="ignore") as f:
            return f.read()
    return source.read().decode("utf-8", errors="ignore")


EXTRACTORS: Dict[str, Callable[[Source], str]] = {
    ".docx": extract_text_from_docx,
    ".pdf": extract_text_from_pdf,
    ".txt": _read_plain,
    ".md": _read_plain,
}


def _extractor_for(suffix: str) -> Callable[[Source], str]:
    suffix = suffix.lower()
    if suffix and not suffix.startswith("."):
        suffix = "." + suffix
    try:
        return EXTRACTORS[suffix]
    except KeyError:
        raise UnsupportedDocumentError(
            f"Nicht unterstütztes Dateiformat: {suffix or '(ohne Endung)'}"
        ) from None


def extract_text(path: Union[str, Path]) -> str:
    path = Path(path)
    extractor = _extractor_for(path.suffix)
    logger.info("Extrahiere Text aus %s", path.name)
    return extractor(str(path))


def extract_text_from_bytes(data: bytes, suffix: str) -> str:
    """Wie `extract_text`, aber für einen bereits geladenen Datei-Inhalt."""
    extractor = _extractor_for(suffix)
    return extractor(io.BytesIO(data))
