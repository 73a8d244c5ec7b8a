"""Tests for text extraction and the extraction task."""

from unittest.mock import patch

import pytest
from pypdf import PdfWriter

from docvault.db.models import Document
from docvault.services.content_extractor import extract_text, is_extractable
from docvault.workers.tasks.extraction import (
    backfill_document_content,
    backfill_pending_content,
    extract_document_content,
    store_document_content,
)


class TestExtractText:
    def test_plain_text(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("line one\nline two")
        assert extract_text(path, "text/plain") == "line one\nline two"

    def test_json_is_text(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"vendor": "Acme"}')
        assert "Acme" in extract_text(path, "application/json")

    def test_unsupported_type(self, tmp_path):
        path = tmp_path / "image.png"
        path.write_bytes(b"\x89PNG")
        assert extract_text(path, "image/png") == ""

    def test_missing_file(self, tmp_path):
        assert extract_text(tmp_path / "nope.txt", "text/plain") == ""

    def test_corrupt_pdf(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"not really a pdf")
        assert extract_text(path, "application/pdf") == ""

    def test_blank_pdf(self, tmp_path):
        path = tmp_path / "blank.pdf"
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        with open(path, "wb") as fh:
            writer.write(fh)
        assert extract_text(path, "application/pdf") == ""


class TestExtractionTask:
    def test_persists_content(self, db, alice, make_document):
        doc = make_document(alice, "memo.txt", content="")
        with open(doc.path, "w") as fh:
            fh.write("memo body")

        with patch("docvault.workers.tasks.extraction.SessionLocal", return_value=db):
            result = store_document_content(doc.id)

        assert result == {"success": True, "characters": len("memo body")}
        assert db.get(Document, doc.id).content == "memo body"

    def test_missing_document(self, db):
        with patch("docvault.workers.tasks.extraction.SessionLocal", return_value=db):
            result = store_document_content("missing")
        assert result["success"] is False

    @pytest.mark.asyncio
    async def test_arq_task_wraps_store(self):
        with patch(
            "docvault.workers.tasks.extraction.store_document_content",
            return_value={"success": True, "characters": 3},
        ) as mock_store:
            result = await extract_document_content({}, "doc-1")

        mock_store.assert_called_once_with("doc-1")
        assert result["success"] is True


class TestBackfill:
    def test_extracts_only_pending_text_documents(self, db, alice, make_document):
        pending = make_document(alice, "pending.txt")
        make_document(alice, "done.txt", content="already extracted")
        make_document(alice, "photo.png", mime_type="image/png")

        with patch("docvault.workers.tasks.extraction.SessionLocal", return_value=db):
            result = backfill_pending_content()

        assert result == {"scanned": 1, "extracted": 1}
        assert db.get(Document, pending.id).content == "pending.txt"

    def test_respects_limit(self, db, alice, make_document):
        make_document(alice, "a.txt")
        make_document(alice, "b.txt")

        with patch("docvault.workers.tasks.extraction.SessionLocal", return_value=db):
            result = backfill_pending_content(limit=1)

        assert result["scanned"] == 1

    @pytest.mark.asyncio
    async def test_arq_task_wraps_backfill(self):
        with patch(
            "docvault.workers.tasks.extraction.backfill_pending_content",
            return_value={"scanned": 0, "extracted": 0},
        ) as mock_backfill:
            result = await backfill_document_content({}, 50)

        mock_backfill.assert_called_once_with(50)
        assert result["scanned"] == 0


def test_is_extractable():
    assert is_extractable("application/pdf")
    assert is_extractable("text/csv")
    assert is_extractable("application/json")
    assert not is_extractable("image/png")
