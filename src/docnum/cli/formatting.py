"""CLI helpers for reading line items and printing amounts."""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from typing import Any

import click

from docnum.domain.entities import CalculatedLineItem, Document, DocumentSummary
from docnum.utils.date_parser import parse_date


def load_items_file(ctx: click.Context, path: str) -> list[dict[str, Any]]:
    """Read line items from a JSON file, or exit with a CLI error.

    The file holds either a list of item objects or an object with an
    "items" list.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f, parse_float=Decimal)
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"Error: Could not read items from {path}: {e}", err=True)
        ctx.exit(1)

    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        click.echo("Error: Items file must contain a list of item objects", err=True)
        ctx.exit(1)
    return data


def parse_date_or_exit(ctx: click.Context, value: str | None) -> date | None:
    """Parse an optional date option, or exit with a CLI error."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def money(value: Decimal) -> str:
    """Format an amount with two decimals and thousands separators."""
    return f"{value:,.2f}"


def echo_items(items: tuple[CalculatedLineItem, ...] | list[CalculatedLineItem]) -> None:
    """Print calculated lines as a table."""
    click.echo(f"{'#':>3} | {'Description':20s} | {'Qty':>8} | {'Subtotal':>12} | {'Discount':>10} | {'Tax':>10} | {'Amount':>12} | {'WHT':>10}")
    click.echo("-" * 110)
    for index, item in enumerate(items, start=1):
        click.echo(
            f"{index:3d} | {(item.description or '')[:20]:20s} | {item.quantity:>8,.2f} | "
            f"{money(item.subtotal):>12} | {money(item.discount_amount):>10} | "
            f"{money(item.tax_amount):>10} | {money(item.amount):>12} | {money(item.withholding_amount):>10}"
        )


def echo_summary(summary: DocumentSummary) -> None:
    """Print document totals."""
    click.echo(f"  Subtotal:        {money(summary.subtotal):>14}")
    click.echo(f"  Discount:        {money(summary.discount):>14}")
    click.echo(f"  Tax:             {money(summary.tax):>14}")
    click.echo(f"  Total:           {money(summary.total):>14}")
    click.echo(f"  Withholding tax: {money(summary.withholding_tax):>14}")
    click.echo(f"  Net payable:     {money(summary.net_payable):>14}")


def echo_document_line(document: Document) -> None:
    """Print a one-line document listing."""
    parent = f" | parent {document.parent_document_id}" if document.parent_document_id else ""
    click.echo(
        f"ID: {document.id:3d} | {document.document_number:18s} | {document.document_type.value:14s} | "
        f"{document.status.value:9s} | {document.document_date} | {money(document.summary.total):>12}{parent}"
    )
