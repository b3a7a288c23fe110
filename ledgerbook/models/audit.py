"""
Audit Models for Ledgerbook

Every significant action in a bookkeeping session is logged:
entries recorded, ledgers built, records skipped, trial totals.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the record → aggregate → trial flow has its own type.
    """
    # Session
    SESSION_STARTED = "session_started"
    SESSION_FINISHED = "session_finished"

    # Recording
    JOURNAL_HEADER_WRITTEN = "journal_header_written"
    ENTRY_RECORDED = "entry_recorded"
    INVALID_AMOUNT = "invalid_amount"

    # Aggregation
    LEDGER_BUILT = "ledger_built"
    RECORD_SKIPPED = "record_skipped"

    # Trial balance
    TRIAL_STARTED = "trial_started"
    TRIAL_UPDATED = "trial_updated"
    TRIAL_FINALIZED = "trial_finalized"

    # System events
    STORE_UNAVAILABLE = "store_unavailable"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about? (an account name, a file path, ...)
    subject: Optional[str] = Field(
        default=None,
        description="Account name or store path the event relates to"
    )

    # Correlation - all events from one session share this
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one bookkeeping run)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "subject": self.subject,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_log_line(self) -> str:
        """Serialize as one JSON line for the audit file."""
        return json.dumps(self.to_log_dict(), default=str)


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_recorded(entry, correlation_id)
        event = AuditEventBuilder.ledger_built(account, correlation_id)
    """

    @staticmethod
    def session_started(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_STARTED,
            correlation_id=correlation_id,
            description="Bookkeeping session started",
            is_user_action=True,
        )

    @staticmethod
    def session_finished(
        ledger_count: int,
        skipped_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_FINISHED,
            correlation_id=correlation_id,
            description=f"Session finished with {ledger_count} ledgers",
            details={
                "ledger_count": ledger_count,
                "skipped_records": skipped_count,
            },
        )

    @staticmethod
    def journal_header_written(
        journal_name: str,
        journal_date: str,
        path: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.JOURNAL_HEADER_WRITTEN,
            subject=path,
            correlation_id=correlation_id,
            description=f"Journal started: {journal_name}",
            details={
                "journal_name": journal_name,
                "journal_date": journal_date,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_recorded(
        date: str,
        debit_account: str,
        credit_account: str,
        amount: int,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_RECORDED,
            subject=debit_account,
            correlation_id=correlation_id,
            description=f"Entry recorded: {debit_account} to {credit_account} {amount}",
            details={
                "date": date,
                "debit_account": debit_account,
                "credit_account": credit_account,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def invalid_amount(
        field: str,
        raw_value: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVALID_AMOUNT,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Rejected non-numeric {field}",
            details={
                "field": field,
                "raw_value": raw_value,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_built(
        account_name: str,
        debit_sum: int,
        credit_sum: int,
        balance_side: str,
        balance: int,
        skipped_count: int,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_BUILT,
            subject=account_name,
            correlation_id=correlation_id,
            description=f"Ledger built: {account_name} {balance_side} {balance}",
            details={
                "debit_sum": debit_sum,
                "credit_sum": credit_sum,
                "balance_side": balance_side,
                "balance": balance,
                "skipped_records": skipped_count,
            },
        )

    @staticmethod
    def record_skipped(
        line_number: int,
        reason: str,
        path: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SKIPPED,
            severity=AuditSeverity.WARNING,
            subject=path,
            correlation_id=correlation_id,
            description=f"Malformed journal record at line {line_number} skipped",
            details={
                "line_number": line_number,
                "reason": reason,
            },
        )

    @staticmethod
    def trial_started(path: str, correlation_id: Optional[UUID]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRIAL_STARTED,
            subject=path,
            correlation_id=correlation_id,
            description="Trial balance report started",
        )

    @staticmethod
    def trial_updated(
        account_name: str,
        side: str,
        amount: int,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRIAL_UPDATED,
            subject=account_name,
            correlation_id=correlation_id,
            description=f"Trial balance: {account_name} {side} {amount}",
            details={
                "side": side,
                "amount": amount,
            },
        )

    @staticmethod
    def trial_finalized(
        debit_sum: int,
        credit_sum: int,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        balanced = debit_sum == credit_sum
        return AuditEvent(
            event_type=AuditEventType.TRIAL_FINALIZED,
            severity=AuditSeverity.INFO if balanced else AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=(
                f"Trial balance finalized: DR {debit_sum} / CR {credit_sum}"
            ),
            details={
                "debit_sum": debit_sum,
                "credit_sum": credit_sum,
                "balanced": balanced,
            },
        )

    @staticmethod
    def store_unavailable(
        path: str,
        error_message: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_UNAVAILABLE,
            severity=AuditSeverity.ERROR,
            subject=path,
            correlation_id=correlation_id,
            description=f"Store unavailable: {path}",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
