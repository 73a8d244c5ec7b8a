"""Invoice record repository."""

from sqlalchemy import delete, select
from sqlalchemy.orm import joinedload

from docvault.db.models import InvoiceRecord
from docvault.db.repositories.base import BaseRepository


class InvoiceRepository(BaseRepository[InvoiceRecord]):
    model = InvoiceRecord
    label = "Invoice record"

    def query(self, *conditions) -> list[InvoiceRecord]:
        """Invoice records matching conditions, newest invoice date first."""
        stmt = (
            select(InvoiceRecord)
            .where(*conditions)
            .options(joinedload(InvoiceRecord.document))
            .order_by(InvoiceRecord.invoice_date.desc(), InvoiceRecord.created_at.desc())
        )
        return list(self.db.scalars(stmt).all())

    def document_ids_for_owner(self, owner_id: str) -> set[str]:
        """Ids of documents the owner has recorded invoices against."""
        stmt = select(InvoiceRecord.document_id).where(InvoiceRecord.owner_id == owner_id)
        return set(self.db.scalars(stmt).all())

    def delete_for_document(self, document_id: str) -> int:
        """Delete every invoice record linked to a document."""
        result = self.db.execute(
            delete(InvoiceRecord).where(InvoiceRecord.document_id == document_id)
        )
        return result.rowcount or 0
