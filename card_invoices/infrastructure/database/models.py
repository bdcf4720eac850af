"""SQLAlchemy ORM models for cards, installments, invoices and categories"""

import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Card(Base):
    """Credit card with its billing cycle days"""

    __tablename__ = "cards"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    bank_name = Column(Text, nullable=False)
    logo_url = Column(Text, nullable=True)
    closing_day = Column(Integer, nullable=False)
    due_day = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    purchases = relationship("Purchase", back_populates="card", cascade="all, delete-orphan")
    monthly_invoices = relationship("MonthlyInvoice", back_populates="card", cascade="all, delete-orphan")


class Purchase(Base):
    """One installment of a purchase, billed in a single invoice month"""

    __tablename__ = "purchases"
    __table_args__ = (
        Index("ix_purchases_card_invoice_month", "card_id", "invoice_month"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    card_id = Column(Uuid, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False)
    # Shared by every installment of the same purchase; NULL on legacy rows
    purchase_group_id = Column(Uuid, nullable=True, index=True)
    purchase_date = Column(Date, nullable=False)
    name = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    total_value = Column(Numeric(10, 2), nullable=False)
    total_installments = Column(Integer, nullable=False, default=1)
    current_installment = Column(Integer, nullable=False, default=1)
    installment_value = Column(Numeric(10, 2), nullable=False)
    invoice_month = Column(Text, nullable=False)  # YYYY-MM
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    card = relationship("Card", back_populates="purchases")


class MonthlyInvoice(Base):
    """Materialized sum of installment values for one card in one month"""

    __tablename__ = "monthly_invoices"
    __table_args__ = (
        UniqueConstraint("month", "card_id", name="uq_monthly_invoices_month_card"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    month = Column(Text, nullable=False)  # YYYY-MM
    card_id = Column(Uuid, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False)
    total_value = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    card = relationship("Card", back_populates="monthly_invoices")


class Category(Base):
    """Purchase category label lookup"""

    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    label = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
