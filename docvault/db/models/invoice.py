"""Invoice record model."""

from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from docvault.db.database import Base
from docvault.db.models.base import TimestampMixin, generate_uuid


class InvoiceRecord(TimestampMixin, Base):
    __tablename__ = "invoice_records"

    id = Column(String, primary_key=True, default=generate_uuid)
    document_id = Column(
        String, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vendor_name = Column(String, nullable=False)
    invoice_date = Column(Date, nullable=False, index=True)
    invoice_value = Column(Float, nullable=False)
    invoice_qty = Column(Integer, nullable=False)
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    document = relationship("Document")
    owner = relationship("User")
