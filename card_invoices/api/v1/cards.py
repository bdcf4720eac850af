"""Card endpoints - /api/cards"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException

from card_invoices.api.v1.schemas import CardCreate, CardResponse, CardUpdate, MessageResponse, PurchaseResponse
from card_invoices.api.dependencies import (
    card_to_schema,
    get_card_service,
    get_purchase_service,
    parse_uuid,
    purchase_to_schema,
)
from card_invoices.application.cards import CardService
from card_invoices.application.purchases import PurchaseService
from card_invoices.domain.exceptions import CardNotFoundError

router = APIRouter()


@router.get("/cards", response_model=List[CardResponse])
def list_cards(service: CardService = Depends(get_card_service)):
    """List cards ordered by bank name"""
    return [card_to_schema(card) for card in service.list_cards()]


@router.post("/cards", response_model=CardResponse, status_code=201)
def create_card(request_body: CardCreate, service: CardService = Depends(get_card_service)):
    card = service.create_card(
        bank_name=request_body.bank_name,
        logo_url=request_body.logo_url,
        closing_day=request_body.closing_day,
        due_day=request_body.due_day,
    )
    return card_to_schema(card)


@router.patch("/cards/{card_id}", response_model=CardResponse)
def update_card(card_id: str, request_body: CardUpdate, service: CardService = Depends(get_card_service)):
    """
    Update card fields.

    A new closing day applies to purchases registered from now on; invoice
    months of existing installments are not recalculated.
    """
    card_uuid = parse_uuid(card_id, "card")
    # Only logo_url may be cleared with an explicit null
    changes = {
        field: value
        for field, value in request_body.model_dump(exclude_unset=True).items()
        if value is not None or field == "logo_url"
    }
    try:
        card = service.update_card(card_uuid, changes)
    except CardNotFoundError:
        raise HTTPException(status_code=404, detail="Card not found")
    return card_to_schema(card)


@router.delete("/cards/{card_id}", response_model=MessageResponse)
def delete_card(card_id: str, service: CardService = Depends(get_card_service)):
    """Delete card together with its purchases and invoices"""
    service.delete_card(parse_uuid(card_id, "card"))
    return MessageResponse(message="Card removed")


@router.get("/cards/{card_id}/purchases", response_model=List[PurchaseResponse])
def list_card_purchases(card_id: str, service: PurchaseService = Depends(get_purchase_service)):
    card_uuid = parse_uuid(card_id, "card")
    try:
        purchases = service.list_purchases_by_card(card_uuid)
    except CardNotFoundError:
        raise HTTPException(status_code=404, detail="Card not found")
    return [purchase_to_schema(p) for p in purchases]
