"""Data access layer for cards, installments, invoices and categories"""

import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, joinedload

from card_invoices.domain.models import InstallmentRecord
from card_invoices.infrastructure.database.models import Card, Category, MonthlyInvoice, Purchase

# Dialects that can recompute and upsert an invoice total in one statement
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CardRepository:
    """Repository for credit cards"""

    def __init__(self, db: Session):
        self.db = db

    def list_cards(self) -> List[Card]:
        return self.db.query(Card).order_by(Card.bank_name).all()

    def get_card_by_id(self, card_id: uuid.UUID) -> Optional[Card]:
        return self.db.query(Card).filter(Card.id == card_id).first()

    def get_card_for_update(self, card_id: uuid.UUID) -> Optional[Card]:
        """Fetch a card holding a row lock until the transaction ends"""
        return (
            self.db.query(Card)
            .filter(Card.id == card_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def create_card(self, **fields: Any) -> Card:
        db_card = Card(**fields)
        self.db.add(db_card)
        self.db.flush()
        return db_card

    def update_card(self, card: Card, changes: Dict[str, Any]) -> Card:
        for field, value in changes.items():
            setattr(card, field, value)
        self.db.flush()
        return card

    def delete_card(self, card: Card) -> None:
        """Delete card; ORM cascade removes its purchases and invoices"""
        self.db.delete(card)
        self.db.flush()


class PurchaseRepository:
    """Repository for installment records"""

    def __init__(self, db: Session):
        self.db = db

    def insert_installment(self, record: InstallmentRecord, purchase_group_id: uuid.UUID) -> Purchase:
        """Persist a single installment record"""
        db_purchase = Purchase(
            card_id=record.card_id,
            purchase_group_id=purchase_group_id,
            purchase_date=record.purchase_date,
            name=record.name,
            category=record.category,
            total_value=record.total_value,
            total_installments=record.total_installments,
            current_installment=record.current_installment,
            installment_value=record.installment_value,
            invoice_month=record.invoice_month,
        )
        self.db.add(db_purchase)
        self.db.flush()  # Assign id without committing
        return db_purchase

    def get_purchase_by_id(self, purchase_id: uuid.UUID) -> Optional[Purchase]:
        return self.db.query(Purchase).filter(Purchase.id == purchase_id).first()

    def list_purchases(self, invoice_month: Optional[str] = None) -> List[Purchase]:
        """Installments with their card, newest purchase first"""
        query = self.db.query(Purchase).options(joinedload(Purchase.card))
        if invoice_month is not None:
            query = query.filter(Purchase.invoice_month == invoice_month)
        return query.order_by(Purchase.purchase_date.desc(), Purchase.current_installment).all()

    def list_purchases_by_card(self, card_id: uuid.UUID) -> List[Purchase]:
        return (
            self.db.query(Purchase)
            .filter(Purchase.card_id == card_id)
            .order_by(Purchase.purchase_date.desc(), Purchase.current_installment)
            .all()
        )

    def _sibling_criteria(self, purchase: Purchase) -> list:
        """
        Match the installments belonging to the same purchase event.

        Rows written before purchase groups existed have no group id and fall
        back to value equality on (card, date, name, total, installments).
        Two identical legacy purchases are therefore indistinguishable.
        """
        if purchase.purchase_group_id is not None:
            return [Purchase.purchase_group_id == purchase.purchase_group_id]
        return [
            Purchase.purchase_group_id.is_(None),
            Purchase.card_id == purchase.card_id,
            Purchase.purchase_date == purchase.purchase_date,
            Purchase.name == purchase.name,
            Purchase.total_value == purchase.total_value,
            Purchase.total_installments == purchase.total_installments,
        ]

    def find_siblings(self, purchase: Purchase) -> List[Purchase]:
        return (
            self.db.query(Purchase)
            .filter(*self._sibling_criteria(purchase))
            .order_by(Purchase.current_installment)
            .all()
        )

    def delete_siblings(self, purchase: Purchase) -> int:
        """Delete every installment of the purchase, returns rows removed"""
        deleted = self.db.query(Purchase).filter(*self._sibling_criteria(purchase)).delete()
        self.db.flush()
        return deleted

    def update_purchase(self, purchase: Purchase, changes: Dict[str, Any]) -> Purchase:
        for field, value in changes.items():
            setattr(purchase, field, value)
        self.db.flush()
        return purchase

    def sum_installment_values(self, invoice_month: str, card_id: uuid.UUID) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(Purchase.installment_value), 0)).where(
                Purchase.invoice_month == invoice_month,
                Purchase.card_id == card_id,
            )
        ).scalar_one()
        return Decimal(str(total))


class MonthlyInvoiceRepository:
    """Repository for per-card monthly invoice totals"""

    def __init__(self, db: Session):
        self.db = db

    def get_invoice(self, month: str, card_id: uuid.UUID) -> Optional[MonthlyInvoice]:
        return (
            self.db.query(MonthlyInvoice)
            .filter(MonthlyInvoice.month == month, MonthlyInvoice.card_id == card_id)
            .populate_existing()
            .first()
        )

    def get_invoices_for_month(self, month: str) -> List[Tuple[MonthlyInvoice, Card]]:
        return (
            self.db.query(MonthlyInvoice, Card)
            .join(Card, MonthlyInvoice.card_id == Card.id)
            .filter(MonthlyInvoice.month == month)
            .order_by(Card.bank_name)
            .populate_existing()
            .all()
        )

    def upsert_total(self, month: str, card_id: uuid.UUID) -> Decimal:
        """
        Recompute the invoice total from the installment rows and store it.

        On PostgreSQL and SQLite the sum and the write are one
        INSERT ... ON CONFLICT statement; other dialects read then write.
        Returns the stored total.
        """
        self.db.flush()
        dialect = self.db.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)

        if insert is not None:
            total_query = (
                select(func.coalesce(func.sum(Purchase.installment_value), 0))
                .where(Purchase.invoice_month == month, Purchase.card_id == card_id)
                .scalar_subquery()
            )
            stmt = insert(MonthlyInvoice).values(
                id=uuid.uuid4(),
                month=month,
                card_id=card_id,
                total_value=total_query,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[MonthlyInvoice.month, MonthlyInvoice.card_id],
                set_={"total_value": stmt.excluded.total_value},
            )
            self.db.execute(stmt)
        else:
            total = PurchaseRepository(self.db).sum_installment_values(month, card_id)
            existing = self.get_invoice(month, card_id)
            if existing:
                existing.total_value = total
            else:
                self.db.add(MonthlyInvoice(month=month, card_id=card_id, total_value=total))
            self.db.flush()

        return self.get_invoice(month, card_id).total_value


class CategoryRepository:
    """Repository for category labels"""

    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.name).all()

    def get_category_by_id(self, category_id: uuid.UUID) -> Optional[Category]:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def get_category_by_name(self, name: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.name == name).first()

    def create_category(self, name: str, label: str) -> Category:
        db_category = Category(name=name, label=label)
        self.db.add(db_category)
        self.db.flush()
        return db_category

    def delete_category(self, category: Category) -> None:
        self.db.delete(category)
        self.db.flush()
