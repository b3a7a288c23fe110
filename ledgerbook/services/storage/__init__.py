"""
Storage Services Package

Provides abstract interfaces and concrete implementations for the
journal store, the ledger/trial reports and the audit log.
Currently implements fixed-width text files, but designed to be swappable.
"""

from ledgerbook.services.storage.interface import (
    AuditStorageInterface,
    JournalReaderInterface,
    JournalStoreInterface,
    MalformedRecord,
    ReportStoreInterface,
    StorageError,
    StoreUnavailable,
)
from ledgerbook.services.storage.text_file import (
    TextFileAuditStorage,
    TextJournalReader,
    TextJournalStore,
    TextReportStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "JournalReaderInterface",
    "JournalStoreInterface",
    "ReportStoreInterface",
    # Exceptions
    "MalformedRecord",
    "StorageError",
    "StoreUnavailable",
    # Text file implementation
    "TextFileAuditStorage",
    "TextJournalReader",
    "TextJournalStore",
    "TextReportStore",
]
