"""Invoice records linked to documents, with spreadsheet export."""

import io
import logging
from dataclasses import dataclass
from datetime import date

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from sqlalchemy.orm import Session

from docvault.core.exceptions import ValidationError
from docvault.db.models import InvoiceRecord, User
from docvault.db.repositories import InvoiceRepository
from docvault.services.access_resolver import AccessResolver

logger = logging.getLogger(__name__)

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXPORT_FILENAME = "invoice-records.xlsx"

# (header, column width)
EXPORT_COLUMNS = [
    ("Vendor Name", 20),
    ("Invoice Date", 15),
    ("Invoice Value", 15),
    ("Invoice Qty", 15),
    ("Document Name", 30),
]

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")


@dataclass
class InvoiceFilters:
    start_date: date | None = None
    end_date: date | None = None
    vendor_name: str | None = None
    min_value: float | None = None
    max_value: float | None = None


class InvoiceService:
    def __init__(self, db: Session):
        self.db = db
        self.resolver = AccessResolver(db)
        self.invoices = InvoiceRepository(db)

    def create_invoice(
        self,
        user: User,
        document_id: str,
        vendor_name: str,
        invoice_date: date,
        invoice_value: float,
        invoice_qty: int,
    ) -> InvoiceRecord:
        """Record an invoice against a document the user can read."""
        self.resolver.require_document(user, document_id, "read")
        vendor_name = (vendor_name or "").strip()
        if not vendor_name:
            raise ValidationError("Vendor name is required")

        record = InvoiceRecord(
            document_id=document_id,
            vendor_name=vendor_name,
            invoice_date=invoice_date,
            invoice_value=invoice_value,
            invoice_qty=invoice_qty,
            owner_id=user.id,
        )
        self.invoices.add(record)
        self.db.commit()
        self.db.refresh(record)
        logger.info(
            "invoice_created",
            extra={"invoice_id": record.id, "document_id": document_id, "owner_id": user.id},
        )
        return record

    def list_invoices(self, user: User, filters: InvoiceFilters | None = None) -> list[InvoiceRecord]:
        """The user's invoice records whose document is still readable, newest first."""
        filters = filters or InvoiceFilters()
        if (
            filters.start_date
            and filters.end_date
            and filters.start_date > filters.end_date
        ):
            raise ValidationError("start_date must not be after end_date")

        conditions = [InvoiceRecord.owner_id == user.id]
        if filters.start_date:
            conditions.append(InvoiceRecord.invoice_date >= filters.start_date)
        if filters.end_date:
            conditions.append(InvoiceRecord.invoice_date <= filters.end_date)
        if filters.vendor_name:
            conditions.append(InvoiceRecord.vendor_name.ilike(f"%{filters.vendor_name}%"))
        if filters.min_value is not None:
            conditions.append(InvoiceRecord.invoice_value >= filters.min_value)
        if filters.max_value is not None:
            conditions.append(InvoiceRecord.invoice_value <= filters.max_value)

        records = self.invoices.query(*conditions)
        return [r for r in records if self.resolver.can_access_document(user, r.document, "read")]

    def export_xlsx(self, user: User, filters: InvoiceFilters | None = None) -> bytes:
        """Render the filtered invoice list as an xlsx workbook."""
        records = self.list_invoices(user, filters)

        wb = Workbook()
        ws = wb.active
        ws.title = "Invoice Records"

        for col, (header, width) in enumerate(EXPORT_COLUMNS, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            ws.column_dimensions[cell.column_letter].width = width

        for record in records:
            ws.append(
                [
                    record.vendor_name,
                    record.invoice_date,
                    record.invoice_value,
                    record.invoice_qty,
                    record.document.original_name,
                ]
            )
        ws.freeze_panes = "A2"

        buffer = io.BytesIO()
        wb.save(buffer)
        logger.info("invoices_exported", extra={"owner_id": user.id, "rows": len(records)})
        return buffer.getvalue()
