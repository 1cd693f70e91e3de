"""Document summary aggregation."""

from collections.abc import Iterable, Mapping
from typing import Any, Union

from docnum.domain.calculation import coerce_line_item, compute_line_item
from docnum.domain.entities import ZERO, CalculatedLineItem, DocumentSummary, LineItem

RawLineItem = Union[LineItem, Mapping[str, Any]]


def aggregate(items: Iterable[CalculatedLineItem]) -> DocumentSummary:
    """Fold calculated lines into a document summary.

    The summary is always rebuilt from the full list; an empty list gives
    all zeros.
    """
    subtotal = discount = tax = total = withholding_tax = ZERO
    for item in items:
        subtotal += item.subtotal
        discount += item.discount_amount
        tax += item.tax_amount
        # Total is before withholding
        total += item.amount_before_tax + item.tax_amount
        withholding_tax += item.withholding_amount
    return DocumentSummary(
        subtotal=subtotal,
        discount=discount,
        tax=tax,
        total=total,
        withholding_tax=withholding_tax,
    )


def compute_summary(
    items: Iterable[RawLineItem],
) -> tuple[list[CalculatedLineItem], DocumentSummary]:
    """Calculate raw line inputs and aggregate them.

    Args:
        items: LineItem instances or mappings of form/JSON fields

    Returns:
        Tuple of (calculated lines, summary)
    """
    calculated = [
        compute_line_item(item if isinstance(item, LineItem) else coerce_line_item(item))
        for item in items
    ]
    return calculated, aggregate(calculated)
