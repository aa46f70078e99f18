"""Utility functions for moneytrack."""

from moneytrack.utils.date_parser import parse_date, get_date_range
from moneytrack.utils.amount_parser import parse_amount

__all__ = ["parse_date", "get_date_range", "parse_amount"]
