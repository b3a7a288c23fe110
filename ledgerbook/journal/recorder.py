"""
Journal Recorder

Collects journal entries from the user, one debit/credit pair at a
time, and appends each one to the journal store as soon as it is
complete.

Flow:
1. Header → journal name and date (only when starting a new journal)
2. Debit → date, debit account, debit amount
3. Credit → credit account, credit amount
4. Description → free text
5. Append → fixed-width record written to the store
6. Continue? → 1 stops, 0 asks for another entry

There is no limit on the number of entries.
"""

from typing import Optional

import structlog

from ledgerbook.audit import AuditLogger
from ledgerbook.console import Console
from ledgerbook.models.journal import JournalEntry, JournalHeader
from ledgerbook.services.storage import JournalStoreInterface
from ledgerbook.validation import EntryValidator, InvalidAmount, parse_amount


logger = structlog.get_logger(__name__)


class JournalRecorder:
    """
    Interactive journal entry collection.

    Amounts are the only validated input: a non-numeric amount is
    rejected and asked for again. Everything else is written as typed,
    with a warning when it won't match later.
    """

    def __init__(
        self,
        store: JournalStoreInterface,
        console: Optional[Console] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[EntryValidator] = None,
    ):
        self._store = store
        self._console = console or Console()
        self._audit_logger = audit_logger
        self._validator = validator or EntryValidator()

    def record_session(self, start_new: bool = True) -> int:
        """
        Record entries until the user asks to stop.

        Args:
            start_new: Write a fresh header, discarding any existing
                journal. When False and a journal exists, entries are
                appended under its header.

        Returns:
            Number of entries recorded

        Raises:
            StoreUnavailable: If the journal can't be written
        """
        if start_new or not self._store.has_journal():
            header = self.ask_header()
            self._store.write_header(header)
            if self._audit_logger:
                self._audit_logger.log_journal_header_written(
                    journal_name=header.name,
                    journal_date=header.date,
                    path=self._store.location,
                )
        else:
            self._store.ensure_writable()

        count = 0
        while True:
            entry = self.ask_entry()
            self._show_warnings(entry)
            self._store.append_entry(entry)
            count += 1

            if self._audit_logger:
                self._audit_logger.log_entry_recorded(
                    date=entry.date,
                    debit_account=entry.debit_account,
                    credit_account=entry.credit_account,
                    amount=entry.amount,
                )

            if self._console.ask_yes_no("Enter 1 to exit or 0 to continue:"):
                break

        logger.info("recording_finished", entries=count, path=self._store.location)
        return count

    def ask_header(self) -> JournalHeader:
        name = self._console.ask("Enter the journal name/identifier:").strip()
        date = self._console.ask("Enter the journal date (DD/MM/YYYY):").strip()
        return JournalHeader(name=name, date=date)

    def ask_entry(self) -> JournalEntry:
        """Prompt for one complete debit/credit entry."""
        date = self._console.ask("Enter the date of the entry (DD/MM/YYYY):").strip()
        debit_account = self._console.ask("Enter the debit account name:").strip()
        amount = self._ask_amount("Enter the debit amount:", "debit amount")

        credit_account = self._console.ask("Enter the credit account name:").strip()
        credit_amount = self._ask_amount(
            f"Enter the credit amount [{amount}]:", "credit amount", default=amount
        )

        description = self._console.ask(
            "Please enter a description for the journal entry:"
        ).strip()

        return JournalEntry(
            date=date,
            debit_account=debit_account,
            credit_account=credit_account,
            amount=amount,
            credit_amount=credit_amount,
            description=description,
        )

    def _ask_amount(
        self,
        prompt: str,
        field: str,
        default: Optional[int] = None,
    ) -> int:
        while True:
            raw = self._console.ask(prompt)
            if default is not None and not raw.strip():
                return default
            try:
                return parse_amount(raw, field)
            except InvalidAmount as e:
                self._console.say(f"\t{e}. Please try again.")
                if self._audit_logger:
                    self._audit_logger.log_invalid_amount(field=field, raw_value=raw)

    def _show_warnings(self, entry: JournalEntry) -> None:
        result = self._validator.validate(entry)
        for warning in result.warnings:
            self._console.say(f"\tWarning: {warning}")
