"""Category lookup use cases"""

import uuid
from typing import List

from sqlalchemy.orm import Session

from card_invoices.domain.exceptions import CategoryAlreadyExistsError
from card_invoices.infrastructure.database.models import Category
from card_invoices.infrastructure.database.repositories import CategoryRepository


class CategoryService:
    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryRepository(db)

    def list_categories(self) -> List[Category]:
        return self.categories.list_categories()

    def create_category(self, name: str, label: str) -> Category:
        """
        Raises:
            CategoryAlreadyExistsError: A category with this name exists
        """
        if self.categories.get_category_by_name(name) is not None:
            raise CategoryAlreadyExistsError(f"Category {name!r} already exists")
        try:
            category = self.categories.create_category(name=name, label=label)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return category

    def delete_category(self, category_id: uuid.UUID) -> None:
        category = self.categories.get_category_by_id(category_id)
        if category is None:
            return
        try:
            self.categories.delete_category(category)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
