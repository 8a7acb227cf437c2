"""Utility functions for finkeep."""

from finkeep.utils.date_parser import parse_date, parse_datetime, to_naive_utc, utcnow
from finkeep.utils.amount_parser import parse_amount, parse_decimal

__all__ = ["parse_date", "parse_datetime", "to_naive_utc", "utcnow", "parse_amount", "parse_decimal"]
