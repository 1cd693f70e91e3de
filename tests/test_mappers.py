"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from docnum.database.models import (
    NumberingRule as ORMNumberingRule,
    Document as ORMDocument,
    DocumentItem as ORMDocumentItem,
)
from docnum.database.mappers import (
    numbering_rule_to_domain,
    document_to_domain,
    document_item_to_domain,
    document_item_from_domain,
)
from docnum.domain.calculation import compute_line_item
from docnum.domain.entities import (
    CalculatedLineItem,
    DiscountType,
    Document,
    DocumentStatus,
    DocumentType,
    LineItem,
    NumberingRule,
    PriceType,
)


class TestNumberingRuleMapper:
    """Tests for NumberingRule mapper."""

    def test_numbering_rule_to_domain(self):
        orm_rule = ORMNumberingRule(
            id=1,
            document_type="tax_invoice",
            pattern="TI-YYYY-XXX",
            current_number=67,
            current_period="2025",
            version=4,
            updated_at=datetime.now(UTC),
        )
        rule = numbering_rule_to_domain(orm_rule)

        assert isinstance(rule, NumberingRule)
        assert rule.document_type == DocumentType.TAX_INVOICE
        assert rule.pattern == "TI-YYYY-XXX"
        assert rule.current_number == 67
        assert rule.current_period == "2025"
        assert rule.version == 4

    def test_missing_period_maps_to_empty(self):
        orm_rule = ORMNumberingRule(
            document_type="invoice", pattern="INV-XXX", current_number=0, current_period=None, version=0
        )
        assert numbering_rule_to_domain(orm_rule).current_period == ""


class TestDocumentItemMapper:
    """Tests for DocumentItem mappers."""

    def test_round_trip_through_orm(self):
        line = compute_line_item(
            LineItem(
                quantity=Decimal("2"),
                unit_price=Decimal("100"),
                price_type=PriceType.EXCLUSIVE,
                discount=Decimal("10"),
                discount_type=DiscountType.PERCENTAGE,
                tax_rate=Decimal("7"),
                withholding_rate=Decimal("3"),
                description="Audit",
            )
        )
        orm_item = document_item_from_domain(line, position=3)

        assert orm_item.position == 3
        assert orm_item.price_type == "exclusive"
        assert orm_item.discount_type == "percentage"

        mapped = document_item_to_domain(orm_item)
        assert isinstance(mapped, CalculatedLineItem)
        assert mapped == line


class TestDocumentMapper:
    """Tests for Document mapper."""

    def test_document_to_domain(self):
        created = datetime.now(UTC)
        orm_document = ORMDocument(
            id=7,
            document_type="receipt",
            document_number="RC-2025-007",
            status="paid",
            document_date=date(2025, 2, 1),
            parent_document_id=3,
            customer_name="ACME",
            reference=None,
            notes=None,
            subtotal=Decimal("100"),
            discount=Decimal("0"),
            tax=Decimal("7"),
            total=Decimal("107"),
            withholding_tax=Decimal("3"),
            created_at=created,
            cancelled_at=None,
        )
        document = document_to_domain(orm_document)

        assert isinstance(document, Document)
        assert document.id == 7
        assert document.document_type == DocumentType.RECEIPT
        assert document.status == DocumentStatus.PAID
        assert document.parent_document_id == 3
        assert document.items == ()
        assert document.summary.total == Decimal("107")
        assert document.summary.net_payable == Decimal("104")
        assert document.created_at == created
