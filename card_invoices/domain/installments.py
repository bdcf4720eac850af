"""Installment allocation across credit card invoice months"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Tuple

from card_invoices.domain.models import InstallmentRecord, PurchaseRequest
from card_invoices.utils.date_utils import add_months, format_month

CENTS = Decimal("0.01")


def first_invoice_month(purchase_date: date, closing_day: int) -> Tuple[int, int]:
    """
    Determine the invoice month that receives a purchase's first installment.

    Purchases made on or after the card's closing day roll to the next
    billing cycle. Only the (year, month) pair is shifted, so a closing day
    beyond the length of the month never pushes the purchase two months out.

    Example:
        2024-03-14, closing day 15 → (2024, 3)
        2024-03-15, closing day 15 → (2024, 4)
    """
    if purchase_date.day >= closing_day:
        return add_months(purchase_date.year, purchase_date.month, 1)
    return purchase_date.year, purchase_date.month


def split_installment_value(total_value: Decimal, total_installments: int) -> Decimal:
    """
    Equal per-installment amount, rounded to cents.

    No remainder redistribution: 100.00 over 3 installments yields 33.33
    each, so the installments sum to 99.99 (drift ≤ half a cent per installment).
    """
    return (Decimal(total_value) / total_installments).quantize(CENTS, rounding=ROUND_HALF_UP)


def allocate_installments(purchase: PurchaseRequest, closing_day: int) -> List[InstallmentRecord]:
    """
    Split a purchase into one record per installment, each tagged with the
    YYYY-MM invoice month it is billed in.

    Installment i (0-based) bills i months after the first invoice month;
    the year rolls over naturally at December.

    Example:
        2024-12-20, closing day 10, 3 installments → 2025-01, 2025-02, 2025-03
    """
    installment_value = split_installment_value(purchase.total_value, purchase.total_installments)
    first_year, first_month = first_invoice_month(purchase.purchase_date, closing_day)

    records = []
    for i in range(purchase.total_installments):
        year, month = add_months(first_year, first_month, i)
        records.append(
            InstallmentRecord(
                card_id=purchase.card_id,
                purchase_date=purchase.purchase_date,
                name=purchase.name,
                category=purchase.category,
                total_value=purchase.total_value,
                total_installments=purchase.total_installments,
                current_installment=i + 1,
                installment_value=installment_value,
                invoice_month=format_month(year, month),
            )
        )

    return records
