"""Services package."""

from ledgerbook.services.storage import (
    AuditStorageInterface,
    JournalReaderInterface,
    JournalStoreInterface,
    MalformedRecord,
    ReportStoreInterface,
    StorageError,
    StoreUnavailable,
    TextFileAuditStorage,
    TextJournalReader,
    TextJournalStore,
    TextReportStore,
)

__all__ = [
    "AuditStorageInterface",
    "JournalReaderInterface",
    "JournalStoreInterface",
    "MalformedRecord",
    "ReportStoreInterface",
    "StorageError",
    "StoreUnavailable",
    "TextFileAuditStorage",
    "TextJournalReader",
    "TextJournalStore",
    "TextReportStore",
]
