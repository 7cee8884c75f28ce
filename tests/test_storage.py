"""Tests for report persistence."""

from datetime import datetime, timezone

from fluxo_ia.core.state import ReportDocument, ReportFormat
from fluxo_ia.core.storage import ReportStorage, report_filename


def make_document() -> ReportDocument:
    return ReportDocument(timestamp=datetime(2024, 5, 1, 12, 30, 5, 123456, tzinfo=timezone.utc))


def test_report_filename():
    document = make_document()

    assert report_filename(document, ReportFormat.HTML) == "relatorio-2024-05-01T12-30-05.html"
    assert report_filename(document, "json") == "relatorio-2024-05-01T12-30-05.json"


def test_save_creates_directory(tmp_path):
    target = tmp_path / "a" / "b"

    path = ReportStorage(target).save(make_document(), "{}", ReportFormat.JSON)

    assert path.parent == target
    assert path.read_text(encoding="utf-8") == "{}"


def test_save_writes_utf8(tmp_path):
    path = ReportStorage(str(tmp_path)).save(make_document(), "Relatório ✓", ReportFormat.HTML)

    assert path.read_bytes().decode("utf-8") == "Relatório ✓"
