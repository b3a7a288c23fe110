"""
Entry Input Validation

DESIGN DECISION: Only amounts are enforced. A non-numeric amount is
rejected with InvalidAmount and the user is asked again, instead of
degrading to zero.

Every other field is accepted as typed. Values that won't survive the
round trip through the fixed-width journal (an empty account name, a
date with spaces in it) are reported as warnings, never corrected.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for human review.
"""

from ledgerbook.models.journal import JournalEntry
from ledgerbook.models.validation import ValidationIssue, ValidationResult


class InvalidAmount(ValueError):
    """Amount input is not an integer."""

    def __init__(self, raw_value: str, field: str = "amount"):
        self.raw_value = raw_value
        self.field = field
        super().__init__(f"{field} must be a whole number, got {raw_value!r}")


def parse_amount(raw_value: str, field: str = "amount") -> int:
    """
    Parse a typed amount.

    Raises:
        InvalidAmount: If the input is not a whole number
    """
    text = raw_value.strip().replace(",", "")
    try:
        return int(text)
    except ValueError:
        raise InvalidAmount(raw_value, field)


class EntryValidator:
    """
    Checks a journal entry for values that will not match later.
    """

    def validate(self, entry: JournalEntry) -> ValidationResult:
        issues = []

        if not entry.date.strip():
            issues.append(ValidationIssue(
                field="date",
                issue_type="empty",
                message="Date is empty; this entry can't be read back",
                severity="warning",
                suggested_fix="Enter the date as DD/MM/YYYY",
            ))
        elif len(entry.date.split()) > 1:
            issues.append(ValidationIssue(
                field="date",
                issue_type="contains_whitespace",
                message=f"Date '{entry.date}' contains spaces and won't be read back correctly",
                severity="warning",
                suggested_fix="Enter the date as DD/MM/YYYY",
            ))

        for field, value in (
            ("debit_account", entry.debit_account),
            ("credit_account", entry.credit_account),
        ):
            if not value.strip():
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="empty",
                    message=f"{field.replace('_', ' ').capitalize()} is empty",
                    severity="warning",
                    suggested_fix="Ledgers are built by exact account name",
                ))

        return ValidationResult(issues=issues)
