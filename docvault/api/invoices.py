"""Invoice record endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from docvault.core.dependencies import get_current_user
from docvault.db.database import get_db
from docvault.db.models import User
from docvault.schemas.invoice import InvoiceCreate, InvoiceResponse
from docvault.services.invoice_service import (
    EXPORT_FILENAME,
    XLSX_MIME_TYPE,
    InvoiceFilters,
    InvoiceService,
)

router = APIRouter()


def invoice_filters(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    vendor_name: str | None = Query(None, description="Case-insensitive substring"),
    min_value: float | None = Query(None, ge=0),
    max_value: float | None = Query(None, ge=0),
) -> InvoiceFilters:
    return InvoiceFilters(
        start_date=start_date,
        end_date=end_date,
        vendor_name=vendor_name,
        min_value=min_value,
        max_value=max_value,
    )


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    data: InvoiceCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return InvoiceService(db).create_invoice(current_user, **data.model_dump())


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    filters: InvoiceFilters = Depends(invoice_filters),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the current user's invoice records, newest invoice date first."""
    return InvoiceService(db).list_invoices(current_user, filters)


@router.get("/export")
async def export_invoices(
    filters: InvoiceFilters = Depends(invoice_filters),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Download the filtered invoice list as an Excel workbook."""
    content = InvoiceService(db).export_xlsx(current_user, filters)
    return Response(
        content=content,
        media_type=XLSX_MIME_TYPE,
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
