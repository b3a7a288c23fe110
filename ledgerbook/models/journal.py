"""
Core Data Models for Ledgerbook

These models describe what flows between the recorder, the journal store
and the aggregator:
1. JournalEntry - what the user typed, before it is written
2. JournalRecord - what a scan of the journal store parsed back
3. LedgerAccount - one account's view of the journal, with totals
4. TrialBalance - running trial sums across all processed accounts

DESIGN DECISION: Ledger accounts are never stored. They are derived on
every scan, and only their rendered report is persisted.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class BalanceSide(str, Enum):
    """
    Which column an amount or a closing balance sits in.

    CRITICAL: An account with equal debit and credit sums carries a
    CREDIT balance of zero. Only a strictly larger debit sum puts the
    balance on the debit side.
    """
    DEBIT = "debit"
    CREDIT = "credit"


# =============================================================================
# JOURNAL MODELS
# =============================================================================

class JournalHeader(BaseModel):
    """The one-time header at the top of every journal."""

    name: str = Field(
        ...,
        description="Journal name/identifier"
    )
    date: str = Field(
        ...,
        description="Journal date, free-form"
    )


class JournalEntry(BaseModel):
    """
    A single journal entry as collected from the user.

    The same amount is posted to both sides; split entries are not
    supported. Nothing here is validated beyond types: a malformed date
    or an empty account name is written as-is and will simply fail to
    match later.
    """

    date: str = Field(
        ...,
        description="Entry date, free-form (DD/MM/YYYY by convention)"
    )
    debit_account: str
    credit_account: str
    amount: int = Field(
        ...,
        description="Amount posted to the debit side"
    )
    credit_amount: Optional[int] = Field(
        default=None,
        description="Amount posted to the credit side, defaults to amount"
    )
    description: str = ""

    @property
    def posted_credit_amount(self) -> int:
        """Credit-side amount as it will be written."""
        return self.amount if self.credit_amount is None else self.credit_amount


class JournalRecord(BaseModel):
    """
    One record parsed back from the journal store.

    Account names are compared exactly (case and inner whitespace
    matter), after stripping the fixed-width padding.
    """
    model_config = ConfigDict(frozen=True)

    date: str
    debit_account: str
    debit_amount: int
    credit_account: str
    credit_amount: int
    description: str = ""
    line_number: int = Field(
        ...,
        ge=1,
        description="Line of the journal store where this record starts"
    )


# =============================================================================
# LEDGER MODELS
# =============================================================================

class LedgerLine(BaseModel):
    """One line of a ledger report, on the debit or the credit side."""

    side: BalanceSide
    date: str
    particular: str
    amount: int


class SkippedRecord(BaseModel):
    """A journal record that could not be parsed during a scan."""

    line_number: int
    reason: str


class LedgerAccount(BaseModel):
    """
    One account's ledger, derived from a full scan of the journal.

    The closing balance is always non-negative; balance_side says which
    column it belongs to.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Account name, matched exactly against journal records"
    )
    journal_name: str = ""
    lines: list[LedgerLine] = Field(default_factory=list)
    debit_sum: int = 0
    credit_sum: int = 0
    skipped_records: list[SkippedRecord] = Field(default_factory=list)
    report_path: Optional[str] = Field(
        default=None,
        description="Where the ledger report was written, once it has been"
    )

    @property
    def balance_side(self) -> BalanceSide:
        """Debit only when the debit sum is strictly larger."""
        if self.debit_sum > self.credit_sum:
            return BalanceSide.DEBIT
        return BalanceSide.CREDIT

    @property
    def balance(self) -> int:
        """Closing balance, |debit_sum - credit_sum|."""
        return abs(self.debit_sum - self.credit_sum)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_records)


# =============================================================================
# TRIAL BALANCE MODELS
# =============================================================================

class TrialAlreadyFinalized(RuntimeError):
    """A finalized trial balance can't take more accounts."""
    pass


class TrialLine(BaseModel):
    """One account's closing balance as listed on the trial report."""

    account_name: str
    side: BalanceSide
    amount: int


class TrialBalance(BaseModel):
    """
    Running trial balance across every ledger processed in a run.

    The caller owns this object and passes it to each ledger build, so
    one run never leaks totals into another.
    """

    debit_sum: int = 0
    credit_sum: int = 0
    lines: list[TrialLine] = Field(default_factory=list)
    finalized: bool = False

    def fold(self, account: LedgerAccount) -> TrialLine:
        """Add an account's closing balance to the matching column."""
        return self.post(self.line_for(account))

    def line_for(self, account: LedgerAccount) -> TrialLine:
        """The trial line an account would add, without adding it."""
        self._check_open(account.name)
        return TrialLine(
            account_name=account.name,
            side=account.balance_side,
            amount=account.balance,
        )

    def post(self, line: TrialLine) -> TrialLine:
        """Add a prepared trial line to its column."""
        self._check_open(line.account_name)
        if line.side == BalanceSide.DEBIT:
            self.debit_sum += line.amount
        else:
            self.credit_sum += line.amount
        self.lines.append(line)
        return line

    def _check_open(self, account_name: str) -> None:
        if self.finalized:
            raise TrialAlreadyFinalized(
                f"Trial balance already finalized, can't add {account_name}"
            )

    def finalize(self) -> None:
        """Close the trial balance. No accounts can be folded afterwards."""
        if self.finalized:
            raise TrialAlreadyFinalized("Trial balance already finalized")
        self.finalized = True

    @property
    def is_balanced(self) -> bool:
        """Do both trial columns add up to the same total?"""
        return self.debit_sum == self.credit_sum

    @property
    def account_names(self) -> list[str]:
        return [line.account_name for line in self.lines]
