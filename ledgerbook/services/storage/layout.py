"""
Fixed-Width Text Layout

Renders and parses the three text formats:
1. The journal store (header + one 4-line record per entry)
2. Ledger reports (<account>.txt, debit columns left, credit columns right)
3. The trial balance report

Fields are right-aligned to fixed widths. A field that is wider than its
column still gets one separating space, so a long account name never
runs into the date or the amount.

Journal records are parsed by whitespace tokens: the date is the first
token on the debit line, the amount is the last, and the account is
whatever sits between them.
"""

from ledgerbook.models.journal import (
    BalanceSide,
    JournalEntry,
    JournalHeader,
    JournalRecord,
    LedgerAccount,
    TrialBalance,
    TrialLine,
)
from ledgerbook.services.storage.interface import MalformedRecord


JOURNAL_RULE_WIDTH = 125
LEDGER_RULE_WIDTH = 86
TRIAL_RULE_WIDTH = 50

# Lines after the journal-name line that belong to the header
HEADER_SKIP_LINES = 5

# Lines in one journal record, not counting the divider
RECORD_CONTENT_LINES = 3

CREDIT_PREFIX = "to "


def rule(width: int) -> str:
    return "-" * width


def is_rule(line: str) -> bool:
    """A divider line is made of dashes only."""
    stripped = line.strip()
    return bool(stripped) and set(stripped) == {"-"}


def _pad(text: str, width: int) -> str:
    return (" " + text).rjust(width)


# =============================================================================
# JOURNAL
# =============================================================================

def journal_header_lines(header: JournalHeader) -> list[str]:
    return [
        header.name.rjust(50),
        "JOURNAL".rjust(50),
        header.date.rjust(50),
        rule(JOURNAL_RULE_WIDTH),
        "DATE|".rjust(10) + "DESCRIPTION".rjust(25)
        + "|DEBIT".rjust(50) + "|CREDIT".rjust(20),
        rule(JOURNAL_RULE_WIDTH),
    ]


def journal_entry_lines(entry: JournalEntry) -> list[str]:
    return [
        entry.date + _pad(entry.debit_account, 20) + _pad(str(entry.amount), 70),
        "|".rjust(10) + CREDIT_PREFIX.rjust(40) + entry.credit_account
        + _pad(str(entry.posted_credit_amount), 50),
        "|(".rjust(11) + entry.description.rjust(50) + ")",
        rule(JOURNAL_RULE_WIDTH),
    ]


def _parse_amount(token: str, field: str, line_number: int) -> int:
    try:
        return int(token)
    except ValueError:
        raise MalformedRecord(line_number, f"{field} is not a number: {token!r}")


def _split_account_amount(
    text: str,
    field: str,
    line_number: int,
) -> tuple[str, int]:
    parts = text.rsplit(None, 1)
    if len(parts) != 2 or not parts[0].strip():
        raise MalformedRecord(line_number, f"missing {field} account or amount")
    return parts[0].strip(), _parse_amount(parts[1], f"{field} amount", line_number)


def parse_record(lines: list[str], line_number: int) -> JournalRecord:
    """
    Parse the content lines of one journal record (divider excluded).

    Raises:
        MalformedRecord: If any required field is missing or not numeric
    """
    if len(lines) != RECORD_CONTENT_LINES:
        raise MalformedRecord(
            line_number,
            f"expected {RECORD_CONTENT_LINES} lines, found {len(lines)}",
        )
    debit_line, credit_line, description_line = lines

    # Line 1: date, debit account, debit amount
    parts = debit_line.split(None, 1)
    if len(parts) != 2:
        raise MalformedRecord(line_number, "missing date or debit fields")
    date = parts[0]
    debit_account, debit_amount = _split_account_amount(
        parts[1], "debit", line_number
    )

    # Line 2: | to <credit account> <credit amount>
    credit = credit_line.strip()
    if not credit.startswith("|"):
        raise MalformedRecord(line_number + 1, "credit line must start with '|'")
    credit = credit[1:].lstrip()
    if not credit.startswith(CREDIT_PREFIX):
        raise MalformedRecord(line_number + 1, "credit line must start with 'to'")
    credit_account, credit_amount = _split_account_amount(
        credit[len(CREDIT_PREFIX):], "credit", line_number + 1
    )

    # Line 3: |( description )
    description = description_line.strip()
    if not (description.startswith("|(") and description.endswith(")")):
        raise MalformedRecord(line_number + 2, "description must be '|( ... )'")

    return JournalRecord(
        date=date,
        debit_account=debit_account,
        debit_amount=debit_amount,
        credit_account=credit_account,
        credit_amount=credit_amount,
        description=description[2:-1].strip(),
        line_number=line_number,
    )


# =============================================================================
# LEDGER REPORT
# =============================================================================

def ledger_report_lines(account: LedgerAccount) -> list[str]:
    lines = [
        account.journal_name.rjust(50),
        account.name.rjust(50),
        "LEDGER".rjust(50),
        rule(LEDGER_RULE_WIDTH),
        "Date" + "Particular".rjust(20) + "Amount".rjust(15)
        + "Date".rjust(10) + "Particular".rjust(20) + "Amount".rjust(15),
        rule(LEDGER_RULE_WIDTH),
    ]

    for line in account.lines:
        if line.side == BalanceSide.DEBIT:
            lines.append(
                line.date.rjust(10) + _pad(line.particular, 20)
                + _pad(str(line.amount), 10) + "|"
            )
        else:
            lines.append(
                "|".rjust(41) + line.date.rjust(9) + _pad(line.particular, 20)
                + _pad(str(line.amount), 15)
            )

    lines.append(rule(LEDGER_RULE_WIDTH))
    if account.balance_side == BalanceSide.DEBIT:
        lines.append("Total".rjust(10) + _pad(str(account.balance), 10))
    else:
        lines.append("Total ".rjust(55) + _pad(str(account.balance), 15))
    lines.append(rule(LEDGER_RULE_WIDTH))
    return lines


# =============================================================================
# TRIAL BALANCE REPORT
# =============================================================================

def trial_header_lines(header: JournalHeader) -> list[str]:
    return [
        header.name.rjust(50),
        "TRIAL".rjust(50),
        header.date.rjust(50),
        rule(TRIAL_RULE_WIDTH),
        "Ledger name".rjust(10) + "DR Amount".rjust(15) + "CR Amount".rjust(15),
        rule(TRIAL_RULE_WIDTH),
    ]


def trial_line(line: TrialLine) -> str:
    if line.side == BalanceSide.DEBIT:
        return line.account_name.rjust(10) + _pad(str(line.amount), 15)
    return line.account_name.rjust(10) + _pad(str(line.amount), 30)


def trial_total_lines(trial: TrialBalance) -> list[str]:
    return [
        rule(TRIAL_RULE_WIDTH),
        "TOTAL".rjust(10) + _pad(str(trial.debit_sum), 15)
        + _pad(str(trial.credit_sum), 15),
        rule(TRIAL_RULE_WIDTH),
    ]
