"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the recorder and aggregator unaware of file layout details
2. Use in-memory doubles for testing
3. Swap the fixed-width text journal for another format later

The interface is intentionally simple. The journal is append-only and
is only ever read back by a full linear scan.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ledgerbook.models.audit import AuditEvent
from ledgerbook.models.journal import (
    JournalEntry,
    JournalHeader,
    JournalRecord,
    LedgerAccount,
    TrialBalance,
    TrialLine,
)


class JournalReaderInterface(ABC):
    """
    Sequential reader over one journal store.

    Usage:
        with store.open_reader() as reader:
            header = reader.read_header()
            while True:
                try:
                    record = reader.next_record()
                except MalformedRecord:
                    continue
                if record is None:
                    break
    """

    @abstractmethod
    def read_header(self) -> JournalHeader:
        """
        Consume the journal header block.

        Raises:
            MalformedRecord: If the header is incomplete
        """
        pass

    @abstractmethod
    def next_record(self) -> Optional[JournalRecord]:
        """
        Read the next journal record.

        Returns:
            The parsed record, or None once the store is exhausted

        Raises:
            MalformedRecord: If the record can't be parsed. The reader
                has already moved past it, so scanning can continue.
        """
        pass

    def __enter__(self) -> "JournalReaderInterface":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        pass


class JournalStoreInterface(ABC):
    """
    Abstract interface for the append-only journal store.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the store (used in messages)."""
        pass

    @abstractmethod
    def has_journal(self) -> bool:
        """Does the store already hold a journal (header written)?"""
        pass

    @abstractmethod
    def write_header(self, header: JournalHeader) -> None:
        """
        Start a new journal, discarding any previous one.

        Raises:
            StoreUnavailable: If the store can't be opened for writing
        """
        pass

    @abstractmethod
    def ensure_writable(self) -> None:
        """
        Check the store can be appended to.

        Raises:
            StoreUnavailable: If the store can't be opened for writing
        """
        pass

    @abstractmethod
    def append_entry(self, entry: JournalEntry) -> None:
        """
        Append one entry as a fixed-width record.

        Raises:
            StoreUnavailable: If the store can't be opened for writing
        """
        pass

    @abstractmethod
    def open_reader(self) -> JournalReaderInterface:
        """
        Open a fresh reader positioned at the start of the store.

        Raises:
            StoreUnavailable: If the store can't be opened for reading
        """
        pass

    @abstractmethod
    def read_text(self) -> str:
        """
        Return the raw journal text for display.

        Raises:
            StoreUnavailable: If the store can't be opened for reading
        """
        pass


class ReportStoreInterface(ABC):
    """
    Abstract interface for ledger and trial balance reports.

    Ledger reports are rewritten per account. The trial report is
    append-only across the whole run.
    """

    @property
    @abstractmethod
    def trial_location(self) -> str:
        """Human-readable location of the trial report."""
        pass

    @abstractmethod
    def write_ledger(self, account: LedgerAccount) -> Path:
        """
        Write the ledger report for one account.

        Returns:
            Where the report was written

        Raises:
            StoreUnavailable: If the report can't be created, or if the
                account name would put it outside the reports directory
                or on top of the journal or the trial report
        """
        pass

    @abstractmethod
    def read_ledger(self, path: Path) -> str:
        """Return a ledger report's text for display."""
        pass

    @abstractmethod
    def start_trial(self, header: JournalHeader) -> None:
        """Append the trial report header."""
        pass

    @abstractmethod
    def append_trial_line(self, line: TrialLine) -> None:
        """Append one account's closing balance to the trial report."""
        pass

    @abstractmethod
    def write_trial_totals(self, trial: TrialBalance) -> None:
        """Append the grand totals and close the trial report."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StoreUnavailable(StorageError):
    """A journal or report file could not be opened or created."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class MalformedRecord(StorageError):
    """A journal record failed to parse during a scan."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Malformed record at line {line_number}: {reason}")
