"""Tests for invoice records and Excel export."""

import io
from datetime import date

import pytest
from fastapi import status
from openpyxl import load_workbook

from docvault.core.exceptions import AccessDenied, ValidationError
from docvault.services.invoice_service import (
    EXPORT_COLUMNS,
    XLSX_MIME_TYPE,
    InvoiceFilters,
    InvoiceService,
)


@pytest.fixture
def invoice_doc(alice, make_document):
    return make_document(alice, "acme-invoice.pdf", mime_type="application/pdf")


@pytest.fixture
def seeded_invoices(db, alice, invoice_doc):
    service = InvoiceService(db)
    rows = [
        ("Acme Corp", date(2024, 1, 15), 1200.0, 3),
        ("Globex", date(2024, 2, 20), 450.5, 1),
        ("Acme Labs", date(2024, 3, 5), 80.0, 10),
    ]
    return [
        service.create_invoice(alice, invoice_doc.id, vendor, when, value, qty)
        for vendor, when, value, qty in rows
    ]


class TestInvoiceService:
    def test_newest_invoice_date_first(self, db, alice, seeded_invoices):
        records = InvoiceService(db).list_invoices(alice)
        assert [r.vendor_name for r in records] == ["Acme Labs", "Globex", "Acme Corp"]

    def test_vendor_filter_is_substring(self, db, alice, seeded_invoices):
        records = InvoiceService(db).list_invoices(alice, InvoiceFilters(vendor_name="acme"))
        assert {r.vendor_name for r in records} == {"Acme Corp", "Acme Labs"}

    def test_date_and_value_filters(self, db, alice, seeded_invoices):
        filters = InvoiceFilters(
            start_date=date(2024, 2, 1), end_date=date(2024, 3, 31), min_value=100
        )
        records = InvoiceService(db).list_invoices(alice, filters)
        assert [r.vendor_name for r in records] == ["Globex"]

    def test_inverted_date_range(self, db, alice):
        filters = InvoiceFilters(start_date=date(2024, 3, 1), end_date=date(2024, 1, 1))
        with pytest.raises(ValidationError):
            InvoiceService(db).list_invoices(alice, filters)

    def test_scoped_to_owner(self, db, bob, seeded_invoices):
        assert InvoiceService(db).list_invoices(bob) == []

    def test_requires_document_access(self, db, bob, invoice_doc):
        with pytest.raises(AccessDenied):
            InvoiceService(db).create_invoice(bob, invoice_doc.id, "Acme", date(2024, 1, 1), 1.0, 1)

    def test_blank_vendor_rejected(self, db, alice, invoice_doc):
        with pytest.raises(ValidationError):
            InvoiceService(db).create_invoice(alice, invoice_doc.id, "  ", date(2024, 1, 1), 1.0, 1)

    def test_export_workbook(self, db, alice, seeded_invoices):
        content = InvoiceService(db).export_xlsx(alice)

        ws = load_workbook(io.BytesIO(content)).active
        assert ws.title == "Invoice Records"
        headers = [cell.value for cell in ws[1]]
        assert headers == [name for name, _ in EXPORT_COLUMNS]
        assert ws.max_row == 4
        assert ws["A2"].value == "Acme Labs"
        assert ws["E2"].value == "acme-invoice.pdf"
        assert ws["A1"].font.bold is True


class TestInvoiceEndpoints:
    def test_create(self, client, alice, alice_headers, invoice_doc):
        response = client.post(
            "/api/invoices",
            json={
                "document_id": invoice_doc.id,
                "vendor_name": "Acme Corp",
                "invoice_date": "2024-01-15",
                "invoice_value": 99.5,
                "invoice_qty": 2,
            },
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["owner_id"] == alice.id
        assert data["document"]["original_name"] == "acme-invoice.pdf"

    def test_create_negative_value(self, client, alice_headers, invoice_doc):
        response = client.post(
            "/api/invoices",
            json={
                "document_id": invoice_doc.id,
                "vendor_name": "Acme",
                "invoice_date": "2024-01-15",
                "invoice_value": -1,
                "invoice_qty": 1,
            },
            headers=alice_headers,
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_list_with_filters(self, client, alice_headers, seeded_invoices):
        response = client.get(
            "/api/invoices", params={"vendor_name": "globex"}, headers=alice_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert [r["vendor_name"] for r in response.json()] == ["Globex"]

    def test_list_inverted_range(self, client, alice_headers):
        response = client.get(
            "/api/invoices",
            params={"start_date": "2024-03-01", "end_date": "2024-01-01"},
            headers=alice_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_export(self, client, alice_headers, seeded_invoices):
        response = client.get("/api/invoices/export", headers=alice_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"] == XLSX_MIME_TYPE
        assert "invoice-records.xlsx" in response.headers["content-disposition"]
        ws = load_workbook(io.BytesIO(response.content)).active
        assert ws.max_row == 1 + len(seeded_invoices)

    def test_invoices_document_mode(self, client, alice, alice_headers, make_document, seeded_invoices):
        make_document(alice, "unrelated.txt")

        response = client.get("/api/documents", params={"mode": "invoices"}, headers=alice_headers)

        assert [d["original_name"] for d in response.json()["documents"]] == ["acme-invoice.pdf"]
