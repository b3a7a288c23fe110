"""
Ledger Aggregation Engine

DESIGN DECISION: Aggregation is a full linear scan of the journal per
account. Every build re-opens the journal from the start; nothing is
cached between accounts, so a build always reflects what is on disk.

One build goes through:
    Idle → HeaderSkipped → Scanning → (Classify → Emit)* → EOF
         → Totaled → TrialUpdated → Idle
and the run ends in TrialFinalized once total_trial() is called.

Classification of a record for account A:
- debit account == A  → debit-side line, debit amount added to debit_sum
- credit account == A → credit-side line, credit amount added to credit_sum
- otherwise           → record ignored
The debit check wins when an entry names A on both sides.

GUARANTEES:
- A malformed record never stops a scan; it is skipped and counted
- A truncated trailing record ends the scan cleanly
- Trial totals only change through the TrialBalance passed in
"""

from typing import Optional

import structlog

from ledgerbook.audit import AuditLogger
from ledgerbook.models.journal import (
    BalanceSide,
    JournalHeader,
    JournalRecord,
    LedgerAccount,
    LedgerLine,
    SkippedRecord,
    TrialAlreadyFinalized,
    TrialBalance,
    TrialLine,
)
from ledgerbook.services.storage import (
    JournalStoreInterface,
    MalformedRecord,
    ReportStoreInterface,
)


logger = structlog.get_logger(__name__)


class LedgerAggregator:
    """
    Builds per-account ledgers from the journal and folds their closing
    balances into a trial balance.
    """

    def __init__(
        self,
        journal_store: JournalStoreInterface,
        report_store: ReportStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._journal = journal_store
        self._reports = report_store
        self._audit_logger = audit_logger

    def read_header(self) -> JournalHeader:
        """Read just the journal header."""
        with self._journal.open_reader() as reader:
            return reader.read_header()

    def start_trial(self) -> TrialBalance:
        """
        Append the trial report header and return an empty trial balance.

        The header repeats the journal's name and date.
        """
        header = self.read_header()
        self._reports.start_trial(header)
        if self._audit_logger:
            self._audit_logger.log_trial_started(path=self._reports.trial_location)
        return TrialBalance()

    def scan(self, account_name: str) -> LedgerAccount:
        """
        Scan the whole journal for one account, without writing anything.

        Raises:
            StoreUnavailable: If the journal can't be opened
            MalformedRecord: If the journal header itself is damaged
        """
        if not account_name:
            raise ValueError("Account name must not be empty")

        with self._journal.open_reader() as reader:
            header = reader.read_header()
            account = LedgerAccount(name=account_name, journal_name=header.name)

            while True:
                try:
                    record = reader.next_record()
                except MalformedRecord as e:
                    account.skipped_records.append(
                        SkippedRecord(line_number=e.line_number, reason=e.reason)
                    )
                    logger.warning(
                        "journal_record_skipped",
                        account=account_name,
                        line_number=e.line_number,
                        reason=e.reason,
                    )
                    if self._audit_logger:
                        self._audit_logger.log_record_skipped(
                            line_number=e.line_number,
                            reason=e.reason,
                            path=self._journal.location,
                        )
                    continue

                if record is None:
                    break
                self._classify(account, record)

        return account

    def build_ledger(self, account_name: str, trial: TrialBalance) -> LedgerAccount:
        """
        Build one account's ledger report and add it to the trial balance.

        Args:
            account_name: Exact account name as written in the journal
            trial: Running trial balance for this run

        Returns:
            The scanned account with its totals

        Raises:
            StoreUnavailable: If the journal or a report can't be opened
            TrialAlreadyFinalized: If the trial balance is already closed
        """
        if trial.finalized:
            raise TrialAlreadyFinalized(
                f"Trial balance already finalized, can't add {account_name}"
            )

        account = self.scan(account_name)
        account.report_path = str(self._reports.write_ledger(account))
        self.trial(account, trial)

        side, balance = self.total(account)
        if self._audit_logger:
            self._audit_logger.log_ledger_built(
                account_name=account.name,
                debit_sum=account.debit_sum,
                credit_sum=account.credit_sum,
                balance_side=side.value,
                balance=balance,
                skipped_count=account.skipped_count,
            )
        return account

    @staticmethod
    def total(account: LedgerAccount) -> tuple[BalanceSide, int]:
        """
        Closing balance of an account.

        Debit side only when debit_sum > credit_sum. Equal sums close
        on the credit side with a zero balance.
        """
        return account.balance_side, account.balance

    def trial(self, account: LedgerAccount, trial: TrialBalance) -> TrialLine:
        """
        Report one account on the trial balance, then fold it in.

        The sums only change once the trial line is on disk, so a failed
        write leaves the trial balance as it was.
        """
        line = trial.line_for(account)
        self._reports.append_trial_line(line)
        trial.post(line)
        if self._audit_logger:
            self._audit_logger.log_trial_updated(
                account_name=line.account_name,
                side=line.side.value,
                amount=line.amount,
            )
        return line

    def total_trial(self, trial: TrialBalance) -> TrialBalance:
        """
        Write the trial grand totals and close the trial balance.

        Raises:
            TrialAlreadyFinalized: If called twice for the same trial
        """
        trial.finalize()
        self._reports.write_trial_totals(trial)

        if not trial.is_balanced:
            logger.warning(
                "trial_not_balanced",
                debit_sum=trial.debit_sum,
                credit_sum=trial.credit_sum,
            )
        if self._audit_logger:
            self._audit_logger.log_trial_finalized(
                debit_sum=trial.debit_sum,
                credit_sum=trial.credit_sum,
            )
        return trial

    def _classify(self, account: LedgerAccount, record: JournalRecord) -> None:
        if record.debit_account == account.name:
            account.lines.append(LedgerLine(
                side=BalanceSide.DEBIT,
                date=record.date,
                particular=record.debit_account,
                amount=record.debit_amount,
            ))
            account.debit_sum += record.debit_amount
        elif record.credit_account == account.name:
            account.lines.append(LedgerLine(
                side=BalanceSide.CREDIT,
                date=record.date,
                particular=record.credit_account,
                amount=record.credit_amount,
            ))
            account.credit_sum += record.credit_amount
