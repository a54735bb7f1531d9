"""Utility functions for ledgergrid."""

from ledgergrid.utils.date_parser import parse_date, month_bounds
from ledgergrid.utils.amount_parser import parse_amount
from ledgergrid.utils.columns import column_to_letter, letter_to_column
from ledgergrid.utils.flags import coerce_bool

__all__ = [
    "parse_date",
    "month_bounds",
    "parse_amount",
    "column_to_letter",
    "letter_to_column",
    "coerce_bool",
]
