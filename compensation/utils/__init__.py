"""Helpers for monetary arithmetic."""

from compensation.utils.money import percent_of, round_money, to_decimal


__all__ = [
    "percent_of",
    "round_money",
    "to_decimal",
]
