"""Invoice record schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class InvoiceCreate(BaseModel):
    document_id: str
    vendor_name: str = Field(min_length=1)
    invoice_date: date
    invoice_value: float = Field(ge=0)
    invoice_qty: int = Field(ge=0)


class InvoiceDocumentInfo(BaseModel):
    id: str
    original_name: str

    class Config:
        from_attributes = True


class InvoiceResponse(BaseModel):
    id: str
    document_id: str
    document: InvoiceDocumentInfo | None = None
    vendor_name: str
    invoice_date: date
    invoice_value: float
    invoice_qty: int
    owner_id: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
