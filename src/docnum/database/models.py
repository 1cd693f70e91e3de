"""SQLAlchemy models for docnum database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class ExactDecimal(TypeDecorator):
    """Decimal stored as text; reloaded amounts equal the computed ones exactly."""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


MONEY = ExactDecimal()


class NumberingRule(Base):
    """Numbering pattern and counter for one document type."""

    __tablename__ = "numbering_rules"

    id = Column(Integer, primary_key=True)
    document_type = Column(String, unique=True, nullable=False)
    pattern = Column(String, nullable=False)
    # Mirror of the most recently advanced counter, for display
    current_number = Column(Integer, default=0, nullable=False)
    current_period = Column(String, default="", nullable=False)
    # Optimistic concurrency check for atomic_advance
    version = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class NumberingCounter(Base):
    """Last number issued for one document type in one period."""

    __tablename__ = "numbering_counters"
    __table_args__ = (UniqueConstraint("document_type", "period"),)

    id = Column(Integer, primary_key=True)
    document_type = Column(String, nullable=False)
    # Rendered date tokens, "" for patterns without dates
    period = Column(String, nullable=False)
    current_number = Column(Integer, default=0, nullable=False)


class Document(Base):
    """Numbered document with its stored summary."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    document_type = Column(String, nullable=False, index=True)
    # Last line of defence against a duplicate allocation
    document_number = Column(String, unique=True, nullable=False)
    status = Column(String, nullable=False)
    document_date = Column(Date, nullable=False)
    parent_document_id = Column(Integer, ForeignKey("documents.id"), nullable=True, index=True)
    customer_name = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    subtotal = Column(MONEY, nullable=False)
    discount = Column(MONEY, nullable=False)
    tax = Column(MONEY, nullable=False)
    total = Column(MONEY, nullable=False)
    withholding_tax = Column(MONEY, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    cancelled_at = Column(DateTime, nullable=True)

    # Relationships
    parent = relationship("Document", remote_side=[id], backref="children")
    items = relationship(
        "DocumentItem",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentItem.position",
    )


class DocumentItem(Base):
    """Line item with inputs and calculated amounts."""

    __tablename__ = "document_items"

    id = Column(Integer, primary_key=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False)
    position = Column(Integer, nullable=False)
    description = Column(String, nullable=True)
    quantity = Column(MONEY, nullable=False)
    unit_price = Column(MONEY, nullable=False)
    price_type = Column(String, nullable=False)
    discount = Column(MONEY, nullable=False)
    discount_type = Column(String, nullable=False)
    tax_rate = Column(MONEY, nullable=False)
    withholding_rate = Column(MONEY, nullable=True)
    custom_withholding_amount = Column(MONEY, nullable=True)
    unit_price_ex_tax = Column(MONEY, nullable=False)
    subtotal = Column(MONEY, nullable=False)
    discount_amount = Column(MONEY, nullable=False)
    amount_before_tax = Column(MONEY, nullable=False)
    tax_amount = Column(MONEY, nullable=False)
    amount = Column(MONEY, nullable=False)
    withholding_amount = Column(MONEY, nullable=False)

    # Relationships
    document = relationship("Document", back_populates="items")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
