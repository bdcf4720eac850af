"""Category endpoints - /api/categories"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException

from card_invoices.api.v1.schemas import CategoryCreate, CategoryResponse, MessageResponse
from card_invoices.api.dependencies import get_category_service, parse_uuid
from card_invoices.application.categories import CategoryService
from card_invoices.domain.exceptions import CategoryAlreadyExistsError
from card_invoices.infrastructure.database.models import Category

router = APIRouter()


def _to_schema(category: Category) -> CategoryResponse:
    return CategoryResponse(
        category_id=str(category.id),
        name=category.name,
        label=category.label,
        created_at=category.created_at.isoformat(),
    )


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(service: CategoryService = Depends(get_category_service)):
    return [_to_schema(c) for c in service.list_categories()]


@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(request_body: CategoryCreate, service: CategoryService = Depends(get_category_service)):
    try:
        category = service.create_category(name=request_body.name, label=request_body.label)
    except CategoryAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _to_schema(category)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
def delete_category(category_id: str, service: CategoryService = Depends(get_category_service)):
    service.delete_category(parse_uuid(category_id, "category"))
    return MessageResponse(message="Category removed")
