"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from docnum.domain import entities as domain
from docnum.database.models import (
    NumberingRule as ORMNumberingRule,
    Document as ORMDocument,
    DocumentItem as ORMDocumentItem,
)


def numbering_rule_to_domain(orm_rule: ORMNumberingRule) -> domain.NumberingRule:
    """Convert SQLAlchemy NumberingRule model to domain NumberingRule entity."""
    return domain.NumberingRule(
        document_type=domain.DocumentType(orm_rule.document_type),
        pattern=orm_rule.pattern,
        current_number=orm_rule.current_number,
        current_period=orm_rule.current_period or "",
        version=orm_rule.version,
        updated_at=orm_rule.updated_at,
    )


def document_item_to_domain(orm_item: ORMDocumentItem) -> domain.CalculatedLineItem:
    """Convert SQLAlchemy DocumentItem model to domain CalculatedLineItem entity."""
    return domain.CalculatedLineItem(
        quantity=orm_item.quantity,
        unit_price=orm_item.unit_price,
        price_type=domain.PriceType(orm_item.price_type),
        discount=orm_item.discount,
        discount_type=domain.DiscountType(orm_item.discount_type),
        tax_rate=orm_item.tax_rate,
        withholding_rate=orm_item.withholding_rate,
        custom_withholding_amount=orm_item.custom_withholding_amount,
        description=orm_item.description,
        unit_price_ex_tax=orm_item.unit_price_ex_tax,
        subtotal=orm_item.subtotal,
        discount_amount=orm_item.discount_amount,
        amount_before_tax=orm_item.amount_before_tax,
        tax_amount=orm_item.tax_amount,
        amount=orm_item.amount,
        withholding_amount=orm_item.withholding_amount,
    )


def document_item_from_domain(item: domain.CalculatedLineItem, position: int) -> ORMDocumentItem:
    """Build a SQLAlchemy DocumentItem from a calculated line."""
    return ORMDocumentItem(
        position=position,
        description=item.description,
        quantity=item.quantity,
        unit_price=item.unit_price,
        price_type=item.price_type.value,
        discount=item.discount,
        discount_type=item.discount_type.value,
        tax_rate=item.tax_rate,
        withholding_rate=item.withholding_rate,
        custom_withholding_amount=item.custom_withholding_amount,
        unit_price_ex_tax=item.unit_price_ex_tax,
        subtotal=item.subtotal,
        discount_amount=item.discount_amount,
        amount_before_tax=item.amount_before_tax,
        tax_amount=item.tax_amount,
        amount=item.amount,
        withholding_amount=item.withholding_amount,
    )


def document_to_domain(orm_document: ORMDocument) -> domain.Document:
    """Convert SQLAlchemy Document model to domain Document entity."""
    return domain.Document(
        id=orm_document.id,
        document_type=domain.DocumentType(orm_document.document_type),
        document_number=orm_document.document_number,
        status=domain.DocumentStatus(orm_document.status),
        document_date=orm_document.document_date,
        summary=domain.DocumentSummary(
            subtotal=orm_document.subtotal,
            discount=orm_document.discount,
            tax=orm_document.tax,
            total=orm_document.total,
            withholding_tax=orm_document.withholding_tax,
        ),
        items=tuple(document_item_to_domain(item) for item in orm_document.items),
        parent_document_id=orm_document.parent_document_id,
        customer_name=orm_document.customer_name,
        reference=orm_document.reference,
        notes=orm_document.notes,
        created_at=orm_document.created_at,
        cancelled_at=orm_document.cancelled_at,
    )
