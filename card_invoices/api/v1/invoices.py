"""GET /api/invoices/{month} - Per-card invoice totals for a month"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from card_invoices.api.v1.schemas import InvoiceListResponse, InvoiceResponse
from card_invoices.api.dependencies import card_to_schema
from card_invoices.application.invoices import get_invoices_for_month
from card_invoices.domain.exceptions import InvalidMonthError
from card_invoices.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/invoices/{month}", response_model=InvoiceListResponse)
def get_month_invoices(month: str, db: Session = Depends(get_db)):
    """
    Retrieve the invoice total of every card billed in a month.

    Returns:
        Invoices ordered by bank name, each with its card
    """
    try:
        rows = get_invoices_for_month(db, month)
    except InvalidMonthError as e:
        raise HTTPException(status_code=422, detail=str(e))

    invoices = [
        InvoiceResponse(
            invoice_id=str(invoice.id),
            month=invoice.month,
            card_id=str(invoice.card_id),
            total_value=invoice.total_value,
            card=card_to_schema(card),
        )
        for invoice, card in rows
    ]

    return InvoiceListResponse(month=month, invoices=invoices)
