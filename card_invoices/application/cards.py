"""Card management use cases"""

import logging
import uuid
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from card_invoices.domain.exceptions import CardNotFoundError
from card_invoices.infrastructure.database.models import Card
from card_invoices.infrastructure.database.repositories import CardRepository


class CardService:
    def __init__(self, db: Session):
        self.db = db
        self.cards = CardRepository(db)

    def list_cards(self) -> List[Card]:
        return self.cards.list_cards()

    def get_card(self, card_id: uuid.UUID) -> Card:
        card = self.cards.get_card_by_id(card_id)
        if card is None:
            raise CardNotFoundError(f"Card {card_id} not found")
        return card

    def create_card(self, bank_name: str, closing_day: int, due_day: int, logo_url: str | None = None) -> Card:
        try:
            card = self.cards.create_card(
                bank_name=bank_name,
                logo_url=logo_url,
                closing_day=closing_day,
                due_day=due_day,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logging.info("Card created", extra={"card_id": str(card.id), "closing_day": closing_day})
        return card

    def update_card(self, card_id: uuid.UUID, changes: Dict[str, Any]) -> Card:
        """
        Partially update a card.

        Changing the closing day only affects purchases registered afterwards;
        existing installments keep their invoice months.
        """
        card = self.get_card(card_id)
        try:
            self.cards.update_card(card, changes)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return card

    def delete_card(self, card_id: uuid.UUID) -> None:
        """Delete a card with all its installments and invoices; unknown ids are ignored"""
        card = self.cards.get_card_by_id(card_id)
        if card is None:
            return
        try:
            self.cards.delete_card(card)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logging.info("Card deleted", extra={"card_id": str(card_id)})
