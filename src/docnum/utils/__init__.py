"""Utility functions for docnum."""

from docnum.utils.date_parser import parse_date
from docnum.utils.amount_parser import parse_amount, to_decimal

__all__ = ["parse_date", "parse_amount", "to_decimal"]
