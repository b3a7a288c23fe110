"""
Main Orchestrator for Ledgerbook

This module ties together all the components and defines the
end-to-end interactive run:
1. Record (prompts → journal store)
2. Review (optionally print the journal)
3. Aggregate (account name → ledger report → trial balance line), repeated
4. Finalize (trial totals)
5. Review (optionally print every ledger built)

DESIGN DECISION: A storage failure ends the phase it happened in, not
the session. The user is told what failed and the run moves on; the
aggregation phases are skipped only when there is no journal to read.
"""

from pathlib import Path
from typing import Optional

import structlog

from ledgerbook.audit import AuditLogger, create_correlation_id
from ledgerbook.config import (
    LoggingSettings,
    SessionSettings,
    Settings,
    StorageSettings,
    get_settings,
)
from ledgerbook.console import Console
from ledgerbook.journal import JournalRecorder
from ledgerbook.ledger import LedgerAggregator
from ledgerbook.models.journal import LedgerAccount, TrialBalance
from ledgerbook.services.storage import (
    JournalStoreInterface,
    ReportStoreInterface,
    StorageError,
    StoreUnavailable,
    TextFileAuditStorage,
    TextJournalStore,
    TextReportStore,
)


logger = structlog.get_logger(__name__)


class BookkeepingSession:
    """
    Orchestrates one interactive bookkeeping run.

    Ledger names are kept in the order they were built. The number of
    ledgers is unbounded unless max_ledger_accounts is configured.
    """

    def __init__(
        self,
        recorder: JournalRecorder,
        aggregator: LedgerAggregator,
        journal_store: JournalStoreInterface,
        report_store: ReportStoreInterface,
        console: Optional[Console] = None,
        audit_logger: Optional[AuditLogger] = None,
        session_settings: Optional[SessionSettings] = None,
    ):
        self._recorder = recorder
        self._aggregator = aggregator
        self._journal = journal_store
        self._reports = report_store
        self._console = console or Console()
        self._audit_logger = audit_logger
        self._settings = session_settings or get_settings().session

        self.ledgers: list[LedgerAccount] = []
        self.trial: Optional[TrialBalance] = None

    @property
    def ledger_names(self) -> list[str]:
        return [account.name for account in self.ledgers]

    @property
    def skipped_record_count(self) -> int:
        """Distinct malformed journal records seen across all scans."""
        return len({
            skipped.line_number
            for account in self.ledgers
            for skipped in account.skipped_records
        })

    def run(self) -> Optional[TrialBalance]:
        """
        Run the whole interactive session.

        Returns:
            The finalized trial balance, or None if no journal could be read
        """
        if self._audit_logger:
            self._audit_logger.log_session_started()

        self.record_entries()
        self.show_journal()
        trial = self.build_ledgers()
        if trial is not None:
            self.show_ledgers()

        if self._audit_logger:
            self._audit_logger.log_session_finished(
                ledger_count=len(self.ledgers),
                skipped_count=self.skipped_record_count,
            )
        return trial

    def record_entries(self) -> int:
        """Phase 1: optionally record journal entries."""
        if self._journal.has_journal():
            choice = self._console.ask_choice(
                "Press '1' to start a new journal, '2' to add entries "
                "to the existing journal, else 0:",
                {"1": "new", "2": "append", "0": "skip"},
            )
        else:
            choice = self._console.ask_choice(
                "Press '1' to enter journal entries for the first time, else 0:",
                {"1": "new", "0": "skip"},
            )

        if choice == "skip":
            return 0

        try:
            count = self._recorder.record_session(start_new=(choice == "new"))
        except StorageError as e:
            self._report_failure(e)
            return 0

        self._console.say(f"\n\t{count} journal entries recorded.")
        return count

    def show_journal(self) -> None:
        """Phase 2: optionally print the journal."""
        if not self._journal.has_journal():
            return
        if not self._console.ask_yes_no(
            "Enter 1 to display your journal entries, else 0:"
        ):
            return
        try:
            self._console.say(self._journal.read_text())
        except StorageError as e:
            self._report_failure(e)

    def build_ledgers(self) -> Optional[TrialBalance]:
        """
        Phase 3 and 4: build ledgers on request, then finalize the trial.
        """
        if not self._journal.has_journal():
            self._console.say(
                f"\n\tNo journal found at {self._journal.location}; "
                "nothing to aggregate."
            )
            return None

        try:
            trial = self._aggregator.start_trial()
        except StorageError as e:
            self._report_failure(e)
            return None
        self.trial = trial

        limit = self._settings.max_ledger_accounts
        while limit is None or len(self.ledgers) < limit:
            if not self._console.ask_yes_no(
                "Enter 1 to add a new ledger account (T-Account), else 0:"
            ):
                break
            name = self._console.ask_non_empty("Enter the ledger name:")
            try:
                account = self._aggregator.build_ledger(name, trial)
            except StorageError as e:
                self._report_failure(e)
                continue
            self.ledgers.append(account)
            self._say_ledger_summary(account)

        try:
            self._aggregator.total_trial(trial)
        except StorageError as e:
            self._report_failure(e)

        self._say_trial_summary(trial)
        return trial

    def show_ledgers(self) -> None:
        """Phase 5: optionally print every ledger report, in build order."""
        if not self.ledgers:
            return
        if not self._console.ask_yes_no(
            "Enter 1 to view your ledger accounts, else 0:"
        ):
            return
        for account in self.ledgers:
            if account.report_path is None:
                continue
            try:
                self._console.say(self._reports.read_ledger(Path(account.report_path)))
            except StorageError as e:
                self._report_failure(e)
            self._console.say()

    def _say_ledger_summary(self, account: LedgerAccount) -> None:
        self._console.say(
            f"\n\tLedger '{account.name}': DR {account.debit_sum} / "
            f"CR {account.credit_sum}, {account.balance_side.value} "
            f"balance {account.balance}"
        )
        if account.skipped_records:
            self._console.say(
                f"\t{account.skipped_count} malformed journal record(s) skipped"
            )

    def _say_trial_summary(self, trial: TrialBalance) -> None:
        self._console.say(
            f"\n\tTrial balance: DR {trial.debit_sum} / CR {trial.credit_sum}"
        )
        if trial.is_balanced:
            self._console.say("\tThe trial balance agrees.")
        else:
            self._console.say("\tWarning: the trial balance does NOT agree.")
        if self.skipped_record_count:
            self._console.say(
                f"\t{self.skipped_record_count} malformed journal record(s) "
                "were skipped during this run."
            )

    def _report_failure(self, error: StorageError) -> None:
        self._console.say(f"\n\tError: {error}")
        logger.error("storage_failure", error=str(error))
        if not self._audit_logger:
            return
        if isinstance(error, StoreUnavailable):
            self._audit_logger.log_store_unavailable(
                path=error.path, error_message=str(error)
            )
        else:
            self._audit_logger.log_error(
                error_type=type(error).__name__,
                error_message=str(error),
            )


def create_app_components(
    settings: Optional[Settings] = None,
    console: Optional[Console] = None,
    storage_settings: Optional[StorageSettings] = None,
    logging_settings: Optional[LoggingSettings] = None,
) -> BookkeepingSession:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to the cached global settings
        console: Console to prompt on; defaults to stdin/stdout
        storage_settings: Replaces settings.storage (command-line overrides)
        logging_settings: Replaces settings.logging

    Returns:
        A ready-to-run BookkeepingSession
    """
    settings = settings or get_settings()
    storage_settings = storage_settings or settings.storage
    logging_settings = logging_settings or settings.logging
    console = console or Console()

    audit_storage = None
    if logging_settings.audit_path:
        audit_storage = TextFileAuditStorage(
            logging_settings.audit_path, encoding=storage_settings.encoding
        )
    audit_logger = AuditLogger(audit_storage, correlation_id=create_correlation_id())

    journal_store = TextJournalStore(storage_settings)
    report_store = TextReportStore(storage_settings)

    recorder = JournalRecorder(
        store=journal_store,
        console=console,
        audit_logger=audit_logger,
    )
    aggregator = LedgerAggregator(
        journal_store=journal_store,
        report_store=report_store,
        audit_logger=audit_logger,
    )

    return BookkeepingSession(
        recorder=recorder,
        aggregator=aggregator,
        journal_store=journal_store,
        report_store=report_store,
        console=console,
        audit_logger=audit_logger,
        session_settings=settings.session,
    )
