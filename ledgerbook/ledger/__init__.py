"""Ledger aggregation package."""

from ledgerbook.ledger.aggregator import LedgerAggregator

__all__ = ["LedgerAggregator"]
