"""Domain model entities for docnum.

These are pure data classes representing business concepts, independent of
database schema. Money values are Decimals.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from docnum.domain.errors import ValidationError, unknown_document_type

ZERO = Decimal("0")


class DocumentType(str, Enum):
    """Kinds of numbered documents."""

    QUOTATION = "quotation"
    INVOICE = "invoice"
    RECEIPT = "receipt"
    TAX_INVOICE = "tax_invoice"
    CREDIT_NOTE = "credit_note"
    PURCHASE_ORDER = "purchase_order"
    BILLING_NOTE = "billing_note"

    @classmethod
    def parse(cls, value: "str | DocumentType") -> "DocumentType":
        """Resolve a document type from its value or name (case-insensitive).

        Raises:
            ValidationError: If the value matches no document type
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if normalized in (member.value, member.name.lower()):
                return member
        raise ValidationError(unknown_document_type(str(value)))


class DocumentStatus(str, Enum):
    """Document lifecycle states."""

    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    CANCELLED = "cancelled"


class PriceType(str, Enum):
    """Whether a unit price already contains tax."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"
    NONE = "none"


class DiscountType(str, Enum):
    """How a line discount is expressed."""

    # Fixed amount per unit
    THB = "thb"
    PERCENTAGE = "percentage"


# Default patterns seeded for each document type
DEFAULT_PATTERNS: dict[DocumentType, str] = {
    DocumentType.QUOTATION: "QT-YYYY-XXX",
    DocumentType.INVOICE: "INV-YYYY-XXX",
    DocumentType.RECEIPT: "RC-YYYY-XXX",
    DocumentType.TAX_INVOICE: "TI-YYYY-XXX",
    DocumentType.CREDIT_NOTE: "CN-YYYY-XXX",
    DocumentType.PURCHASE_ORDER: "PO-YYYY-XXX",
    DocumentType.BILLING_NOTE: "BL-YYYY-XXX",
}


@dataclass(frozen=True)
class NumberingRule:
    """Numbering configuration and counter for one document type."""

    document_type: DocumentType
    pattern: str
    current_number: int
    current_period: str = ""
    version: int = 0
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class LineItem:
    """Line item inputs as entered by the operator.

    withholding_rate of None means "not specified".
    """

    quantity: Decimal = ZERO
    unit_price: Decimal = ZERO
    price_type: PriceType = PriceType.EXCLUSIVE
    discount: Decimal = ZERO
    discount_type: DiscountType = DiscountType.THB
    tax_rate: Decimal = ZERO
    withholding_rate: Optional[Decimal] = None
    custom_withholding_amount: Optional[Decimal] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class CalculatedLineItem:
    """Line item inputs together with every derived amount."""

    quantity: Decimal
    unit_price: Decimal
    price_type: PriceType
    discount: Decimal
    discount_type: DiscountType
    tax_rate: Decimal
    withholding_rate: Optional[Decimal]
    custom_withholding_amount: Optional[Decimal]
    description: Optional[str]
    unit_price_ex_tax: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    amount_before_tax: Decimal
    tax_amount: Decimal
    amount: Decimal
    withholding_amount: Decimal


@dataclass(frozen=True)
class DocumentSummary:
    """Document level totals."""

    subtotal: Decimal = ZERO
    discount: Decimal = ZERO
    tax: Decimal = ZERO
    total: Decimal = ZERO
    withholding_tax: Decimal = ZERO

    @property
    def net_payable(self) -> Decimal:
        """Amount due once withholding tax is deducted."""
        return self.total - self.withholding_tax


@dataclass(frozen=True)
class Document:
    """Issued or draft document with its lines and summary."""

    id: int
    document_type: DocumentType
    document_number: str
    status: DocumentStatus
    document_date: date
    summary: DocumentSummary
    items: tuple[CalculatedLineItem, ...] = ()
    parent_document_id: Optional[int] = None
    customer_name: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


@dataclass(frozen=True)
class CancellationResult:
    """Outcome of a cascade cancellation.

    cancelled lists every document whose status changed, root first.
    cancelled_count counts the cascaded children only.
    """

    root: Document
    cancelled: tuple[Document, ...] = field(default_factory=tuple)

    @property
    def cancelled_count(self) -> int:
        return sum(1 for doc in self.cancelled if doc.id != self.root.id)
