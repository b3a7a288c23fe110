"""
Audit Logger

DESIGN DECISION: Every significant action in a session is logged.
This provides:
1. A trace of which entries were recorded and which ledgers were built
2. A record of every malformed journal record that was skipped
3. Debugging capability when trial totals don't balance

The audit logger:
- Gracefully handles failures (doesn't crash the session if logging fails)
- Supports correlation IDs to trace all events of one run
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledgerbook.models.audit import AuditEvent, AuditEventBuilder
from ledgerbook.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """
    Route the structured log to stderr or a file.

    Prompts share the terminal with stderr, so the default level only
    lets warnings through.
    """
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
        correlation_id: Optional[UUID] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
            correlation_id: Tags every event logged through this instance.
        """
        self._storage = storage
        self._logger = structlog.get_logger()
        self.correlation_id = correlation_id or create_correlation_id()

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_session_started(self) -> None:
        self.log(AuditEventBuilder.session_started(self.correlation_id))

    def log_session_finished(self, ledger_count: int, skipped_count: int) -> None:
        self.log(AuditEventBuilder.session_finished(
            ledger_count=ledger_count,
            skipped_count=skipped_count,
            correlation_id=self.correlation_id,
        ))

    def log_journal_header_written(
        self,
        journal_name: str,
        journal_date: str,
        path: str,
    ) -> None:
        self.log(AuditEventBuilder.journal_header_written(
            journal_name=journal_name,
            journal_date=journal_date,
            path=path,
            correlation_id=self.correlation_id,
        ))

    def log_entry_recorded(
        self,
        date: str,
        debit_account: str,
        credit_account: str,
        amount: int,
    ) -> None:
        """Log one appended journal entry."""
        self.log(AuditEventBuilder.entry_recorded(
            date=date,
            debit_account=debit_account,
            credit_account=credit_account,
            amount=amount,
            correlation_id=self.correlation_id,
        ))

    def log_invalid_amount(self, field: str, raw_value: str) -> None:
        self.log(AuditEventBuilder.invalid_amount(
            field=field,
            raw_value=raw_value,
            correlation_id=self.correlation_id,
        ))

    def log_ledger_built(
        self,
        account_name: str,
        debit_sum: int,
        credit_sum: int,
        balance_side: str,
        balance: int,
        skipped_count: int,
    ) -> None:
        """Log a completed ledger build with its totals."""
        self.log(AuditEventBuilder.ledger_built(
            account_name=account_name,
            debit_sum=debit_sum,
            credit_sum=credit_sum,
            balance_side=balance_side,
            balance=balance,
            skipped_count=skipped_count,
            correlation_id=self.correlation_id,
        ))

    def log_record_skipped(self, line_number: int, reason: str, path: str) -> None:
        self.log(AuditEventBuilder.record_skipped(
            line_number=line_number,
            reason=reason,
            path=path,
            correlation_id=self.correlation_id,
        ))

    def log_trial_started(self, path: str) -> None:
        self.log(AuditEventBuilder.trial_started(path, self.correlation_id))

    def log_trial_updated(self, account_name: str, side: str, amount: int) -> None:
        self.log(AuditEventBuilder.trial_updated(
            account_name=account_name,
            side=side,
            amount=amount,
            correlation_id=self.correlation_id,
        ))

    def log_trial_finalized(self, debit_sum: int, credit_sum: int) -> None:
        self.log(AuditEventBuilder.trial_finalized(
            debit_sum=debit_sum,
            credit_sum=credit_sum,
            correlation_id=self.correlation_id,
        ))

    def log_store_unavailable(self, path: str, error_message: str) -> None:
        self.log(AuditEventBuilder.store_unavailable(
            path=path,
            error_message=error_message,
            correlation_id=self.correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=self.correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a bookkeeping run and pass it through
    every component that logs.
    """
    return uuid4()
