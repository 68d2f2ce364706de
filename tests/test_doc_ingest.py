import pytest
from docx import Document

from mcqkarten.assembler import parse_flashcards
from mcqkarten.doc_ingest import (
    UnsupportedDocumentError,
    cleanup_page_text,
    extract_text,
    extract_text_from_bytes,
    extract_text_from_pdf,
)


def test_extract_docx_paragraphs_and_tables_in_order(tmp_path):
    doc = Document()
    doc.add_paragraph("What is 2+2?")
    table = doc.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "A. 3"
    table.cell(0, 1).text = "B. 4"
    doc.add_paragraph("정답: B")
    path = tmp_path / "exam.docx"
    doc.save(str(path))

    text = extract_text(path)
    assert text.index("What is 2+2?") < text.index("A. 3") < text.index("B. 4") < text.index("정답: B")

    cards = parse_flashcards(text)
    assert len(cards) == 1
    assert cards[0].options == ("A. 3", "B. 4")
    assert cards[0].answer == "B"


def test_extract_docx_from_bytes(tmp_path):
    doc = Document()
    doc.add_paragraph("Frage A. eins B. zwei")
    path = tmp_path / "exam.docx"
    doc.save(str(path))

    text = extract_text_from_bytes(path.read_bytes(), "docx")
    assert "Frage A. eins B. zwei" in text


def test_extract_plain_text(tmp_path):
    path = tmp_path / "exam.txt"
    path.write_text("Q\nA. x\nB. y\n", encoding="utf-8")
    assert extract_text(path) == "Q\nA. x\nB. y\n"
    assert extract_text_from_bytes("Q\n정답: A".encode("utf-8"), ".txt") == "Q\n정답: A"


def test_unsupported_format(tmp_path):
    with pytest.raises(UnsupportedDocumentError, match=r"\.odt"):
        extract_text(tmp_path / "exam.odt")
    with pytest.raises(UnsupportedDocumentError, match="ohne Endung"):
        extract_text_from_bytes(b"", "")


def test_cleanup_page_text_removes_page_artifacts():
    text = "Bei-\nspiel\n12\n- 3 -\n4 / 10\nA. x  "
    assert cleanup_page_text(text) == "Beispiel\nA. x"


def test_cleanup_keeps_hyphen_before_option_marker():
    assert cleanup_page_text("x-\nA. y") == "x-\nA. y"


def test_cleanup_drops_configured_patterns(monkeypatch):
    import mcqkarten.doc_ingest as di

    settings = {"join_hyphenation": False, "drop_line_patterns": [r"^Seite \d+ von"]}
    monkeypatch.setattr(di, "get_setting", lambda section, key: settings[key])
    assert cleanup_page_text("Seite 1 von 3\nTeil-\nweise") == "Teil-\nweise"


def test_extract_text_fallback_to_pypdf(monkeypatch, caplog):
    import builtins
    import sys
    import types

    real_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "pdfplumber":
            raise ImportError("pdfplumber missing")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)

    dummy_pypdf = types.ModuleType("pypdf")
    dummy_errors = types.ModuleType("pypdf.errors")

    class DummyPage:
        def extract_text(self):
            return "Q A. x B. y\n7"

    class DummyReader:
        def __init__(self, path):
            self.pages = [DummyPage()]

    class PdfReadError(Exception):
        pass

    dummy_pypdf.PdfReader = DummyReader
    dummy_errors.PdfReadError = PdfReadError

    monkeypatch.setitem(sys.modules, "pypdf", dummy_pypdf)
    monkeypatch.setitem(sys.modules, "pypdf.errors", dummy_errors)

    with caplog.at_level("WARNING"):
        text = extract_text_from_pdf("dummy.pdf")

    assert text == "Q A. x B. y"
    assert any("pdfplumber nicht verfügbar" in r.message for r in caplog.records)


def test_pypdf_page_errors_are_skipped(monkeypatch, caplog):
    import builtins
    import sys
    import types

    real_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "pdfplumber":
            raise ImportError("pdfplumber missing")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)

    dummy_pypdf = types.ModuleType("pypdf")
    dummy_errors = types.ModuleType("pypdf.errors")

    class PdfReadError(Exception):
        pass

    class BrokenPage:
        def extract_text(self):
            raise PdfReadError("kaputt")

    class GoodPage:
        def extract_text(self):
            return "ok"

    class DummyReader:
        def __init__(self, path):
            self.pages = [BrokenPage(), GoodPage()]

    dummy_pypdf.PdfReader = DummyReader
    dummy_errors.PdfReadError = PdfReadError
    monkeypatch.setitem(sys.modules, "pypdf", dummy_pypdf)
    monkeypatch.setitem(sys.modules, "pypdf.errors", dummy_errors)

    with caplog.at_level("WARNING"):
        text = extract_text_from_pdf("dummy.pdf")

    assert text == "\n\nok"
    assert any("Seite 0" in r.message for r in caplog.records)


def test_extract_text_no_backend(monkeypatch, caplog):
    import builtins

    real_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name in ("pdfplumber", "pypdf"):
            raise ImportError(f"{name} missing")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)

    with caplog.at_level("WARNING"):
        with pytest.raises(ImportError) as excinfo:
            extract_text_from_pdf("dummy.pdf")

    assert "Weder pdfplumber noch pypdf sind verfügbar" in str(excinfo.value)
    assert any(
        "Weder pdfplumber noch pypdf sind verfügbar" in r.message and r.levelname == "ERROR"
        for r in caplog.records
    )
