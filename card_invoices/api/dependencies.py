"""Dependency injection and conversion helpers for FastAPI endpoints"""

import uuid
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from card_invoices.api.v1.schemas import CardResponse, PurchaseResponse
from card_invoices.application.cards import CardService
from card_invoices.application.categories import CategoryService
from card_invoices.application.purchases import PurchaseService
from card_invoices.infrastructure.database.models import Card, Purchase
from card_invoices.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_card_service(db: Session = Depends(get_db)) -> CardService:
    return CardService(db)


def get_purchase_service(db: Session = Depends(get_db)) -> PurchaseService:
    return PurchaseService(db)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def parse_uuid(value: str, kind: str) -> uuid.UUID:
    """Parse a path identifier, answering 400 when malformed"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {kind} ID format")


def card_to_schema(card: Card) -> CardResponse:
    return CardResponse(
        card_id=str(card.id),
        bank_name=card.bank_name,
        logo_url=card.logo_url,
        closing_day=card.closing_day,
        due_day=card.due_day,
        created_at=card.created_at.isoformat(),
    )


def purchase_to_schema(purchase: Purchase, include_card: bool = False) -> PurchaseResponse:
    return PurchaseResponse(
        purchase_id=str(purchase.id),
        card_id=str(purchase.card_id),
        purchase_group_id=str(purchase.purchase_group_id) if purchase.purchase_group_id else None,
        purchase_date=purchase.purchase_date,
        name=purchase.name,
        category=purchase.category,
        total_value=purchase.total_value,
        total_installments=purchase.total_installments,
        current_installment=purchase.current_installment,
        installment_value=purchase.installment_value,
        invoice_month=purchase.invoice_month,
        created_at=purchase.created_at.isoformat(),
        card=card_to_schema(purchase.card) if include_card else None,
    )
