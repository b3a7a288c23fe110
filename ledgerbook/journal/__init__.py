"""Journal recording package."""

from ledgerbook.journal.recorder import JournalRecorder

__all__ = ["JournalRecorder"]
