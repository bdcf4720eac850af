"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import List, Optional
import uuid


class CardCreate(BaseModel):
    """Request body for POST /api/cards"""

    bank_name: str = Field(..., min_length=1, description="Issuing bank")
    logo_url: Optional[str] = None
    closing_day: int = Field(..., ge=1, le=31, description="Day of month the billing cycle closes")
    due_day: int = Field(..., ge=1, le=31, description="Day of month the invoice is due")


class CardUpdate(BaseModel):
    """Request body for PATCH /api/cards/{card_id}"""

    bank_name: Optional[str] = Field(None, min_length=1)
    logo_url: Optional[str] = None
    closing_day: Optional[int] = Field(None, ge=1, le=31)
    due_day: Optional[int] = Field(None, ge=1, le=31)


class CardResponse(BaseModel):
    card_id: str
    bank_name: str
    logo_url: Optional[str] = None
    closing_day: int
    due_day: int
    created_at: str


class PurchaseCreate(BaseModel):
    """Request body for POST /api/purchases"""

    card_id: uuid.UUID
    purchase_date: date
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    total_value: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Full purchase amount")
    total_installments: int = Field(1, ge=1, le=99)


class PurchaseUpdate(BaseModel):
    """Request body for PATCH /api/purchases/{purchase_id}"""

    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)


class PurchaseResponse(BaseModel):
    """Single installment record"""

    purchase_id: str
    card_id: str
    purchase_group_id: Optional[str] = None
    purchase_date: date
    name: str
    category: str
    total_value: Decimal
    total_installments: int
    current_installment: int
    installment_value: Decimal
    invoice_month: str
    created_at: str
    card: Optional[CardResponse] = None


class InvoiceResponse(BaseModel):
    """Monthly total of one card"""

    invoice_id: str
    month: str
    card_id: str
    total_value: Decimal
    card: CardResponse


class InvoiceListResponse(BaseModel):
    """Response for GET /api/invoices/{month}"""

    month: str
    invoices: List[InvoiceResponse]


class CategoryCreate(BaseModel):
    """Request body for POST /api/categories"""

    name: str = Field(..., min_length=1, description="Internal identifier")
    label: str = Field(..., min_length=1, description="Display label")


class CategoryResponse(BaseModel):
    category_id: str
    name: str
    label: str
    created_at: str


class MessageResponse(BaseModel):
    message: str
