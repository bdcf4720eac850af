"""Monthly invoice maintenance - recompute per-card totals from installments"""

import logging
import uuid
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.orm import Session

from card_invoices.infrastructure.database.models import Card, MonthlyInvoice
from card_invoices.infrastructure.database.repositories import MonthlyInvoiceRepository
from card_invoices.infrastructure.observability.metrics import invoice_refresh_counter
from card_invoices.utils.date_utils import parse_month


def refresh_monthly_invoice(db: Session, month: str, card_id: uuid.UUID) -> Decimal:
    """
    Recompute the invoice total for one (month, card) pair and persist it.

    The total is always summed from the installment rows, never adjusted
    incrementally, so calling this twice in a row stores the same value.
    When no installments remain the row is kept with a zero total.

    Does not commit; callers own the transaction.
    """
    total = MonthlyInvoiceRepository(db).upsert_total(month, card_id)
    invoice_refresh_counter.inc()
    logging.debug(
        "Invoice refreshed",
        extra={"month": month, "card_id": str(card_id), "total_value": str(total)},
    )
    return total


def get_invoices_for_month(db: Session, month: str) -> List[Tuple[MonthlyInvoice, Card]]:
    """
    Invoice totals of every card for a month, paired with the card.

    Raises:
        InvalidMonthError: If month is not YYYY-MM
    """
    parse_month(month)
    return MonthlyInvoiceRepository(db).get_invoices_for_month(month)
