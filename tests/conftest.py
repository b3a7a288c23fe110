"""
Shared fixtures for Ledgerbook tests.

Every test works inside its own tmp_path, so no journal or report ever
leaks between tests. Prompts are answered from a script; running out of
answers raises EOFError instead of blocking.
"""

import pytest

from ledgerbook.config import SessionSettings, StorageSettings
from ledgerbook.console import Console
from ledgerbook.models.journal import JournalEntry, JournalHeader
from ledgerbook.services.storage import (
    AuditStorageInterface,
    TextJournalStore,
    TextReportStore,
)


class ScriptedInput:
    """Stands in for input(): returns scripted answers in order."""

    def __init__(self, answers):
        self._answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self._answers:
            raise EOFError("no scripted answers left")
        return self._answers.pop(0)

    @property
    def remaining(self):
        return len(self._answers)


class MemoryAuditStorage(AuditStorageInterface):
    """Keeps audit events in a list."""

    def __init__(self):
        self.events = []

    def append_event(self, event):
        self.events.append(event)
        return True

    def types(self):
        return [event.event_type for event in self.events]


@pytest.fixture
def storage_settings(tmp_path):
    return StorageSettings(
        journal_path=str(tmp_path / "journal.txt"),
        trial_path=str(tmp_path / "Trial.txt"),
        reports_dir=str(tmp_path),
    )


@pytest.fixture
def session_settings():
    return SessionSettings(max_ledger_accounts=None)


@pytest.fixture
def journal_store(storage_settings):
    return TextJournalStore(storage_settings)


@pytest.fixture
def report_store(storage_settings):
    return TextReportStore(storage_settings)


@pytest.fixture
def audit_storage():
    return MemoryAuditStorage()


@pytest.fixture
def make_console():
    """
    Build a Console answering from a script.

    Returns (console, scripted_input, output_lines).
    """
    def _make(answers):
        scripted = ScriptedInput(answers)
        output = []
        console = Console(input_func=scripted, output_func=output.append)
        return console, scripted, output
    return _make


@pytest.fixture
def write_journal(journal_store):
    """Write a header and the given entries straight to the journal store."""
    def _write(entries, name="Shop", date="01/01/2024"):
        journal_store.write_header(JournalHeader(name=name, date=date))
        for entry in entries:
            journal_store.append_entry(entry)
        return journal_store
    return _write


@pytest.fixture
def make_entry():
    def _make(date, debit, credit, amount, credit_amount=None, description=""):
        return JournalEntry(
            date=date,
            debit_account=debit,
            credit_account=credit,
            amount=amount,
            credit_amount=credit_amount,
            description=description,
        )
    return _make
