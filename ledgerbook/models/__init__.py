"""
Data Models Package

This package contains all Pydantic models used in Ledgerbook.
Everything passed between the recorder, the stores and the aggregator
conforms to these schemas.
"""

from ledgerbook.models.journal import (
    BalanceSide,
    JournalEntry,
    JournalHeader,
    JournalRecord,
    LedgerAccount,
    LedgerLine,
    SkippedRecord,
    TrialAlreadyFinalized,
    TrialBalance,
    TrialLine,
)
from ledgerbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from ledgerbook.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Journal models
    "BalanceSide",
    "JournalEntry",
    "JournalHeader",
    "JournalRecord",
    "LedgerAccount",
    "LedgerLine",
    "SkippedRecord",
    "TrialAlreadyFinalized",
    "TrialBalance",
    "TrialLine",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
