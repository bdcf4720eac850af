"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass
class PurchaseRequest:
    """A purchase event as submitted by the user, before allocation"""

    card_id: uuid.UUID
    purchase_date: date
    name: str
    category: str
    total_value: Decimal
    total_installments: int = 1


@dataclass
class InstallmentRecord:
    """One month's portion of a purchase, ready to be persisted"""

    card_id: uuid.UUID
    purchase_date: date
    name: str
    category: str
    total_value: Decimal
    total_installments: int
    current_installment: int  # 1-based
    installment_value: Decimal
    invoice_month: str  # YYYY-MM
