"""Purchase endpoints - /api/purchases"""

import logging
import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from card_invoices.api.v1.schemas import MessageResponse, PurchaseCreate, PurchaseResponse, PurchaseUpdate
from card_invoices.api.dependencies import get_purchase_service, get_request_id, parse_uuid, purchase_to_schema
from card_invoices.application.purchases import PurchaseService
from card_invoices.domain.exceptions import (
    CardNotFoundError,
    InvalidMonthError,
    InvalidPurchaseDataError,
    PurchaseNotFoundError,
)
from card_invoices.domain.models import PurchaseRequest

router = APIRouter()


@router.get("/purchases", response_model=List[PurchaseResponse])
def list_purchases(
    month: Optional[str] = Query(None, description="Invoice month (YYYY-MM)"),
    service: PurchaseService = Depends(get_purchase_service),
):
    """List installment records with their card, newest purchase first"""
    try:
        purchases = service.list_purchases(month)
    except InvalidMonthError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return [purchase_to_schema(p, include_card=True) for p in purchases]


@router.post("/purchases", response_model=PurchaseResponse, status_code=201)
def create_purchase(
    request_body: PurchaseCreate,
    request: Request,
    service: PurchaseService = Depends(get_purchase_service),
):
    """
    Register a purchase split into installments.

    Flow:
    1. Allocate each installment to an invoice month using the card's closing day
    2. Persist one record per installment
    3. Recompute the card's invoice total for every month touched
    4. Return the first installment
    """
    request_id = get_request_id(request)

    try:
        purchase = service.create_purchase(
            PurchaseRequest(
                card_id=request_body.card_id,
                purchase_date=request_body.purchase_date,
                name=request_body.name,
                category=request_body.category,
                total_value=request_body.total_value,
                total_installments=request_body.total_installments,
            )
        )
        return purchase_to_schema(purchase, include_card=True)

    except CardNotFoundError as e:
        logging.warning(f"Card not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Card not found")

    except InvalidPurchaseDataError as e:
        logging.warning(f"Invalid purchase: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/purchases/{purchase_id}", response_model=PurchaseResponse)
def update_purchase(
    purchase_id: str,
    request_body: PurchaseUpdate,
    service: PurchaseService = Depends(get_purchase_service),
):
    """Rename or recategorize a single installment record"""
    purchase_uuid = parse_uuid(purchase_id, "purchase")
    try:
        purchase = service.update_purchase(purchase_uuid, name=request_body.name, category=request_body.category)
    except PurchaseNotFoundError:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return purchase_to_schema(purchase)


@router.delete("/purchases/{purchase_id}", response_model=MessageResponse)
def delete_purchase(
    purchase_id: str,
    request: Request,
    service: PurchaseService = Depends(get_purchase_service),
):
    """Delete the purchase this installment belongs to, with all its installments"""
    try:
        purchase_uuid = uuid.UUID(purchase_id)
    except ValueError:
        # Nothing can match a malformed id
        return MessageResponse(message="Purchase removed")

    try:
        service.delete_purchase(purchase_uuid)
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    return MessageResponse(message="Purchase removed")
