"""Purchase lifecycle - allocate installments and keep invoice totals in sync"""

import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from card_invoices.application.invoices import refresh_monthly_invoice
from card_invoices.domain.exceptions import CardNotFoundError, InvalidPurchaseDataError, PurchaseNotFoundError
from card_invoices.domain.installments import allocate_installments
from card_invoices.domain.models import PurchaseRequest
from card_invoices.infrastructure.database.models import Purchase
from card_invoices.infrastructure.database.repositories import CardRepository, PurchaseRepository
from card_invoices.infrastructure.observability.logging import log_purchase_event
from card_invoices.infrastructure.observability.metrics import purchases_deleted_counter, record_purchase_created
from card_invoices.utils.date_utils import parse_month


class PurchaseService:
    """Create and delete purchases as groups of installment records"""

    def __init__(self, db: Session):
        self.db = db
        self.cards = CardRepository(db)
        self.purchases = PurchaseRepository(db)

    def create_purchase(self, request: PurchaseRequest) -> Purchase:
        """
        Register a purchase and bill its installments.

        Flow:
        1. Lock the card row (serializes invoice refreshes for the card)
        2. Allocate one installment record per invoice month
        3. Persist all records under a shared purchase group id
        4. Recompute the invoice total of every month touched
        5. Commit, or roll back everything on failure

        Returns:
            The first installment, representing the purchase

        Raises:
            InvalidPurchaseDataError: Non-positive amount or installment count
            CardNotFoundError: Card does not exist
        """
        if request.total_installments < 1:
            raise InvalidPurchaseDataError("A purchase needs at least one installment")
        if request.total_value <= 0:
            raise InvalidPurchaseDataError("Purchase total must be positive")

        try:
            card = self.cards.get_card_for_update(request.card_id)
            if card is None:
                raise CardNotFoundError(f"Card {request.card_id} not found")

            records = allocate_installments(request, card.closing_day)
            purchase_group_id = uuid.uuid4()
            installments = [
                self.purchases.insert_installment(record, purchase_group_id) for record in records
            ]

            invoice_months = sorted({record.invoice_month for record in records})
            for month in invoice_months:
                refresh_monthly_invoice(self.db, month, card.id)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        first = installments[0]
        record_purchase_created(request.total_installments)
        log_purchase_event("created", str(first.id), str(card.id), len(installments), invoice_months)
        return first

    def delete_purchase(self, purchase_id: uuid.UUID) -> int:
        """
        Delete a purchase with all its sibling installments.

        Unknown ids are a silent no-op. Returns the number of installment
        records removed.
        """
        try:
            purchase = self.purchases.get_purchase_by_id(purchase_id)
            if purchase is None:
                return 0

            card_id = purchase.card_id
            self.cards.get_card_for_update(card_id)

            siblings = self.purchases.find_siblings(purchase)
            invoice_months = sorted({sibling.invoice_month for sibling in siblings})
            deleted = self.purchases.delete_siblings(purchase)

            for month in invoice_months:
                refresh_monthly_invoice(self.db, month, card_id)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        purchases_deleted_counter.inc()
        log_purchase_event("deleted", str(purchase_id), str(card_id), deleted, invoice_months)
        return deleted

    def update_purchase(
        self,
        purchase_id: uuid.UUID,
        name: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Purchase:
        """Update descriptive fields of a single installment record"""
        purchase = self.purchases.get_purchase_by_id(purchase_id)
        if purchase is None:
            raise PurchaseNotFoundError(f"Purchase {purchase_id} not found")

        changes = {}
        if name is not None:
            changes["name"] = name
        if category is not None:
            changes["category"] = category

        try:
            self.purchases.update_purchase(purchase, changes)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return purchase

    def list_purchases(self, month: Optional[str] = None) -> List[Purchase]:
        if month is not None:
            parse_month(month)
        return self.purchases.list_purchases(month)

    def list_purchases_by_card(self, card_id: uuid.UUID) -> List[Purchase]:
        if self.cards.get_card_by_id(card_id) is None:
            raise CardNotFoundError(f"Card {card_id} not found")
        return self.purchases.list_purchases_by_card(card_id)
