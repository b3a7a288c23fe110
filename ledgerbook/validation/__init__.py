"""Input validation package."""

from ledgerbook.validation.validator import EntryValidator, InvalidAmount, parse_amount

__all__ = ["EntryValidator", "InvalidAmount", "parse_amount"]
