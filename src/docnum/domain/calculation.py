"""Line item calculation.

Every caller that shows or stores line amounts goes through
``compute_line_item`` so previews and persisted documents always agree.
Calculation never raises: malformed numbers are treated as 0 so a half
filled draft can still be saved.
"""

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, TypeVar

from docnum.domain.entities import (
    ZERO,
    CalculatedLineItem,
    DiscountType,
    LineItem,
    PriceType,
)
from docnum.utils.amount_parser import to_decimal

HUNDRED = Decimal("100")

E = TypeVar("E", bound=Enum)

# Accepted keys for loosely typed input, snake_case first then the form keys
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "quantity": ("quantity", "qty"),
    "unit_price": ("unit_price", "unitPrice", "price"),
    "price_type": ("price_type", "priceType"),
    "discount": ("discount",),
    "discount_type": ("discount_type", "discountType"),
    "tax_rate": ("tax_rate", "taxRate", "tax", "vat"),
    "withholding_rate": ("withholding_rate", "withholdingRate", "withholdingTax"),
    "custom_withholding_amount": (
        "custom_withholding_amount",
        "customWithholdingTaxAmount",
        "customWithholdingTax",
    ),
    "description": ("description", "productTitle"),
}


def _coerce_enum(enum_cls: type[E], value: Any, default: E) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


def _withholding_rate(value: Any) -> Optional[Decimal]:
    """Sanitised withholding rate, None meaning not specified."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in ("", "not_specified", "custom"):
        return None
    rate = to_decimal(value)
    return rate if rate > 0 else None


def _optional_amount(value: Any) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return to_decimal(value)


def sanitize_line_item(item: LineItem) -> LineItem:
    """Return ``item`` with every input clamped to a valid value."""
    price_type = _coerce_enum(PriceType, item.price_type, PriceType.EXCLUSIVE)
    return LineItem(
        quantity=to_decimal(item.quantity),
        unit_price=to_decimal(item.unit_price),
        price_type=price_type,
        discount=to_decimal(item.discount),
        discount_type=_coerce_enum(DiscountType, item.discount_type, DiscountType.THB),
        tax_rate=ZERO if price_type == PriceType.NONE else to_decimal(item.tax_rate),
        withholding_rate=_withholding_rate(item.withholding_rate),
        custom_withholding_amount=_optional_amount(item.custom_withholding_amount),
        description=item.description,
    )


def coerce_line_item(data: Mapping[str, Any]) -> LineItem:
    """Build a sanitised LineItem from form or JSON data.

    Unknown keys are ignored; missing keys take the LineItem defaults.
    """
    values: dict[str, Any] = {}
    for field_name, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            if alias in data:
                values[field_name] = data[alias]
                break
    # Form data only honours the fixed amount when the rate field says "custom"
    if "withholdingTax" in data and str(data["withholdingTax"]).strip().lower() != "custom":
        values.pop("custom_withholding_amount", None)
    description = values.get("description")
    if description is not None:
        values["description"] = str(description)
    return sanitize_line_item(LineItem(**values))


def compute_line_item(item: LineItem) -> CalculatedLineItem:
    """Compute every derived amount of one line.

    The steps run in a fixed order:

    1. Tax rate as a fraction (0 when the price type is ``none``).
    2. Inclusive prices with a positive rate are reduced to their pre-tax
       unit price.
    3. Subtotal is quantity times the pre-tax unit price.
    4. A percentage discount applies to the subtotal; a ``thb`` discount is
       per unit and multiplies by quantity.
    5. Amount before tax is subtotal minus discount. It is not clamped, so an
       oversized discount shows up as a negative line.
    6. Tax applies to the amount before tax.
    7. Amount is amount before tax plus tax.
    8. Withholding uses the custom amount when given, otherwise the rate on
       the amount before tax. It is never taxed or discounted again.

    Args:
        item: Line inputs; invalid values are treated as 0

    Returns:
        Calculated line item
    """
    item = sanitize_line_item(item)

    rate = item.tax_rate / HUNDRED
    if item.price_type == PriceType.INCLUSIVE and rate > 0:
        unit_price_ex_tax = item.unit_price / (1 + rate)
    else:
        unit_price_ex_tax = item.unit_price

    subtotal = item.quantity * unit_price_ex_tax
    if item.discount_type == DiscountType.PERCENTAGE:
        discount_amount = subtotal * item.discount / HUNDRED
    else:
        discount_amount = item.discount * item.quantity

    amount_before_tax = subtotal - discount_amount
    tax_amount = amount_before_tax * rate if item.price_type != PriceType.NONE else ZERO
    amount = amount_before_tax + tax_amount

    if item.custom_withholding_amount is not None:
        withholding_amount = item.custom_withholding_amount
    elif item.withholding_rate is None:
        withholding_amount = ZERO
    else:
        withholding_amount = amount_before_tax * item.withholding_rate / HUNDRED

    return CalculatedLineItem(
        quantity=item.quantity,
        unit_price=item.unit_price,
        price_type=item.price_type,
        discount=item.discount,
        discount_type=item.discount_type,
        tax_rate=item.tax_rate,
        withholding_rate=item.withholding_rate,
        custom_withholding_amount=item.custom_withholding_amount,
        description=item.description,
        unit_price_ex_tax=unit_price_ex_tax,
        subtotal=subtotal,
        discount_amount=discount_amount,
        amount_before_tax=amount_before_tax,
        tax_amount=tax_amount,
        amount=amount,
        withholding_amount=withholding_amount,
    )


def line_item_inputs(calculated: CalculatedLineItem) -> LineItem:
    """Strip the derived amounts from a calculated line."""
    return LineItem(
        quantity=calculated.quantity,
        unit_price=calculated.unit_price,
        price_type=calculated.price_type,
        discount=calculated.discount,
        discount_type=calculated.discount_type,
        tax_rate=calculated.tax_rate,
        withholding_rate=calculated.withholding_rate,
        custom_withholding_amount=calculated.custom_withholding_amount,
        description=calculated.description,
    )
