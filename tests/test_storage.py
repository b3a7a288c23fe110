"""
Tests for the fixed-width layout and the text file stores.
"""

import json

import pytest

from ledgerbook.config import StorageSettings
from ledgerbook.models.audit import AuditEventBuilder
from ledgerbook.models.journal import (
    BalanceSide,
    JournalHeader,
    LedgerAccount,
    LedgerLine,
    TrialBalance,
    TrialLine,
)
from ledgerbook.services.storage import (
    MalformedRecord,
    StoreUnavailable,
    TextFileAuditStorage,
    TextJournalStore,
    TextReportStore,
)
from ledgerbook.services.storage import layout


def append_raw(path, lines):
    with open(path, "a", encoding="utf-8") as handle:
        handle.write("".join(f"{line}\n" for line in lines))


class TestJournalLayout:
    """Tests for journal record rendering and parsing."""

    def test_entry_renders_four_lines(self, make_entry):
        """Test that one entry is three content lines plus a divider."""
        lines = layout.journal_entry_lines(make_entry("01/01/2024", "Cash", "Sales", 100))
        assert len(lines) == 4
        assert lines[-1] == "-" * layout.JOURNAL_RULE_WIDTH
        assert lines[0].startswith("01/01/2024")
        assert lines[0].rstrip().endswith("100")

    def test_parse_rendered_entry(self, make_entry):
        """Test that a rendered entry parses back to the same fields."""
        entry = make_entry(
            "01/01/2024", "Office Rent", "Bank Account", 2500,
            credit_amount=2400, description="March rent",
        )
        lines = layout.journal_entry_lines(entry)
        record = layout.parse_record(lines[:3], line_number=7)

        assert record.date == "01/01/2024"
        assert record.debit_account == "Office Rent"
        assert record.debit_amount == 2500
        assert record.credit_account == "Bank Account"
        assert record.credit_amount == 2400
        assert record.description == "March rent"
        assert record.line_number == 7

    def test_long_names_keep_a_separating_space(self, make_entry):
        """Test that names wider than their column don't merge with amounts."""
        long_name = "A" * 40
        entry = make_entry("01/01/2024", long_name, long_name, 7)
        record = layout.parse_record(layout.journal_entry_lines(entry)[:3], 7)
        assert record.debit_account == long_name
        assert record.credit_account == long_name
        assert record.debit_amount == 7

    def test_non_numeric_amount(self, make_entry):
        """Test that a bad debit amount is reported on the record's first line."""
        lines = layout.journal_entry_lines(make_entry("01/01/2024", "Cash", "Sales", 100))
        lines[0] = "01/01/2024 Cash abc"
        with pytest.raises(MalformedRecord) as exc_info:
            layout.parse_record(lines[:3], line_number=11)
        assert exc_info.value.line_number == 11
        assert "not a number" in exc_info.value.reason

    def test_credit_line_errors_point_at_credit_line(self, make_entry):
        """Test that a damaged credit line is reported one line down."""
        lines = layout.journal_entry_lines(make_entry("01/01/2024", "Cash", "Sales", 100))
        lines[1] = "Sales 100"
        with pytest.raises(MalformedRecord) as exc_info:
            layout.parse_record(lines[:3], line_number=11)
        assert exc_info.value.line_number == 12

    def test_wrong_line_count(self):
        """Test that a record must have exactly three content lines."""
        with pytest.raises(MalformedRecord):
            layout.parse_record(["01/01/2024 Cash 100"], line_number=7)

    def test_is_rule(self):
        """Test divider detection."""
        assert layout.is_rule("-" * 125)
        assert layout.is_rule("   -----   ")
        assert not layout.is_rule("")
        assert not layout.is_rule("- 100")


class TestReportLayout:
    """Tests for ledger and trial report rendering."""

    def test_ledger_report_debit_balance(self):
        """Test a ledger closing on the debit side."""
        account = LedgerAccount(
            name="Cash",
            journal_name="Shop",
            lines=[LedgerLine(
                side=BalanceSide.DEBIT, date="01/01/2024",
                particular="Cash", amount=100,
            )],
            debit_sum=100,
        )
        lines = layout.ledger_report_lines(account)

        assert lines[0].strip() == "Shop"
        assert lines[1].strip() == "Cash"
        assert lines[2].strip() == "LEDGER"
        assert lines[6].split() == ["01/01/2024", "Cash", "100|"]
        assert lines[-2].split() == ["Total", "100"]
        assert lines[-2].startswith("     Total")

    def test_ledger_report_credit_balance(self):
        """Test that a credit balance sits in the right-hand columns."""
        account = LedgerAccount(
            name="Sales",
            lines=[LedgerLine(
                side=BalanceSide.CREDIT, date="01/01/2024",
                particular="Sales", amount=100,
            )],
            credit_sum=100,
        )
        lines = layout.ledger_report_lines(account)

        assert lines[6].index("|") == 40
        assert lines[-2].split() == ["Total", "100"]
        assert lines[-2].index("Total") > 40

    def test_trial_lines(self):
        """Test debit and credit columns of the trial report."""
        debit = layout.trial_line(TrialLine(account_name="Cash", side=BalanceSide.DEBIT, amount=70))
        credit = layout.trial_line(TrialLine(account_name="Sales", side=BalanceSide.CREDIT, amount=100))

        assert len(debit) == 25
        assert len(credit) == 40
        assert debit.split() == ["Cash", "70"]
        assert credit.split() == ["Sales", "100"]

    def test_trial_totals(self):
        """Test the grand total line."""
        lines = layout.trial_total_lines(TrialBalance(debit_sum=100, credit_sum=100))
        assert lines[1].split() == ["TOTAL", "100", "100"]
        assert lines[0] == lines[2] == "-" * layout.TRIAL_RULE_WIDTH


class TestTextJournalStore:
    """Tests for writing and scanning the journal file."""

    def test_no_journal_yet(self, journal_store):
        """Test has_journal before anything is written."""
        assert journal_store.has_journal() is False

    def test_round_trip(self, write_journal, make_entry):
        """Test that every appended entry is read back in order."""
        store = write_journal([
            make_entry("01/01/2024", "Cash", "Sales", 100),
            make_entry("02/01/2024", "Rent", "Cash", 30),
            make_entry("03/01/2024", "Cash", "Capital", 500, description="Owner"),
        ])
        assert store.has_journal() is True

        with store.open_reader() as reader:
            header = reader.read_header()
            records = []
            while True:
                record = reader.next_record()
                if record is None:
                    break
                records.append(record)

        assert header == JournalHeader(name="Shop", date="01/01/2024")
        assert [r.debit_account for r in records] == ["Cash", "Rent", "Cash"]
        assert [r.line_number for r in records] == [7, 11, 15]
        assert records[2].description == "Owner"

    def test_header_only_journal(self, write_journal):
        """Test that a header with no entries yields no records."""
        store = write_journal([])
        with store.open_reader() as reader:
            reader.read_header()
            assert reader.next_record() is None

    def test_truncated_tail(self, write_journal, make_entry, storage_settings):
        """Test that a record without its divider is reported once, then EOF."""
        store = write_journal([make_entry("01/01/2024", "Cash", "Sales", 100)])
        partial = layout.journal_entry_lines(make_entry("02/01/2024", "Cash", "Sales", 5))
        append_raw(storage_settings.journal_path, partial[:2])

        with store.open_reader() as reader:
            reader.read_header()
            assert reader.next_record().debit_amount == 100
            with pytest.raises(MalformedRecord) as exc_info:
                reader.next_record()
            assert exc_info.value.line_number == 11
            assert reader.next_record() is None

    def test_malformed_record_does_not_shift_later_records(
        self, write_journal, make_entry, storage_settings, journal_store
    ):
        """Test that scanning resumes at the record after a damaged one."""
        write_journal([make_entry("01/01/2024", "Cash", "Sales", 100)])
        bad = layout.journal_entry_lines(make_entry("02/01/2024", "Cash", "Sales", 5))
        bad[0] = "02/01/2024 Cash five"
        append_raw(storage_settings.journal_path, bad)
        journal_store.append_entry(make_entry("03/01/2024", "Rent", "Cash", 30))

        with journal_store.open_reader() as reader:
            reader.read_header()
            first = reader.next_record()
            with pytest.raises(MalformedRecord) as exc_info:
                reader.next_record()
            last = reader.next_record()
            assert reader.next_record() is None

        assert first.debit_account == "Cash"
        assert exc_info.value.line_number == 11
        assert last.debit_account == "Rent"
        assert last.line_number == 15

    def test_undecodable_bytes_still_scan(
        self, write_journal, make_entry, storage_settings, journal_store
    ):
        """Test that a record written in another code page is still read."""
        write_journal([make_entry("01/01/2024", "Cash", "Sales", 100)])
        foreign = layout.journal_entry_lines(
            make_entry("02/01/2024", "Cash", "Sales", 20, description="Cafe")
        )
        raw = "".join(f"{line}\n" for line in foreign).replace("Cafe", "Café")
        with open(storage_settings.journal_path, "ab") as handle:
            handle.write(raw.encode("cp1252"))

        with journal_store.open_reader() as reader:
            reader.read_header()
            reader.next_record()
            record = reader.next_record()
            assert reader.next_record() is None

        assert record.debit_amount == 20
        assert record.description == "Caf\ufffd"
        assert "Caf\ufffd" in journal_store.read_text()

    def test_empty_journal_header(self, storage_settings, journal_store):
        """Test that an empty file has no header to read."""
        open(storage_settings.journal_path, "w").close()
        with journal_store.open_reader() as reader:
            with pytest.raises(MalformedRecord):
                reader.read_header()

    def test_write_header_truncates(self, write_journal, make_entry, journal_store):
        """Test that starting a new journal discards old entries."""
        write_journal([make_entry("01/01/2024", "Cash", "Sales", 100)])
        journal_store.write_header(JournalHeader(name="Fresh", date="02/02/2024"))

        with journal_store.open_reader() as reader:
            assert reader.read_header().name == "Fresh"
            assert reader.next_record() is None

    def test_missing_journal_is_unavailable(self, journal_store):
        """Test that reading a journal that doesn't exist fails clearly."""
        with pytest.raises(StoreUnavailable) as exc_info:
            journal_store.open_reader()
        assert exc_info.value.path == journal_store.location

    def test_unwritable_journal(self, tmp_path):
        """Test that a journal in a missing directory can't be written."""
        settings = StorageSettings(journal_path=str(tmp_path / "missing" / "journal.txt"))
        store = TextJournalStore(settings)
        with pytest.raises(StoreUnavailable):
            store.write_header(JournalHeader(name="Shop", date="01/01/2024"))
        with pytest.raises(StoreUnavailable):
            store.ensure_writable()


class TestTextReportStore:
    """Tests for ledger and trial report files."""

    def test_write_and_read_ledger(self, report_store, tmp_path):
        """Test that a ledger report is named after its account."""
        path = report_store.write_ledger(LedgerAccount(name="Cash", debit_sum=10))
        assert path == tmp_path / "Cash.txt"
        assert "LEDGER" in report_store.read_ledger(path)

    def test_trial_report_is_appended(self, report_store):
        """Test that two runs leave two trial reports in one file."""
        header = JournalHeader(name="Shop", date="01/01/2024")
        for _ in range(2):
            report_store.start_trial(header)
            report_store.append_trial_line(
                TrialLine(account_name="Cash", side=BalanceSide.DEBIT, amount=5)
            )
            report_store.write_trial_totals(TrialBalance(debit_sum=5))

        text = report_store.read_trial()
        assert text.count("TRIAL") == 2
        assert text.count("TOTAL") == 2

    def test_ledger_named_like_journal_is_refused(
        self, report_store, write_journal, make_entry, journal_store
    ):
        """Test that a ledger report never replaces the journal store."""
        write_journal([make_entry("01/01/2024", "Cash", "Sales", 100)])
        with pytest.raises(StoreUnavailable) as exc_info:
            report_store.write_ledger(LedgerAccount(name="journal"))
        assert "overwrite" in str(exc_info.value)

        with journal_store.open_reader() as reader:
            reader.read_header()
            assert reader.next_record().debit_amount == 100

    def test_ledger_named_like_trial_is_refused(self, report_store):
        """Test that a ledger report never replaces the trial report."""
        report_store.start_trial(JournalHeader(name="Shop", date="01/01/2024"))
        with pytest.raises(StoreUnavailable):
            report_store.write_ledger(LedgerAccount(name="Trial"))
        assert "TRIAL" in report_store.read_trial()

    @pytest.mark.parametrize("name", ["../Cash", "sub/Cash"])
    def test_ledger_name_stays_in_reports_dir(self, report_store, tmp_path, name):
        """Test that names with path parts are refused."""
        with pytest.raises(StoreUnavailable):
            report_store.write_ledger(LedgerAccount(name=name))
        assert not (tmp_path.parent / "Cash.txt").exists()

    def test_unencodable_text_leaves_ledger_untouched(self, tmp_path):
        """Test that text the encoding can't hold is refused before writing."""
        settings = StorageSettings(
            journal_path=str(tmp_path / "journal.txt"),
            reports_dir=str(tmp_path),
            encoding="ascii",
        )
        store = TextReportStore(settings)
        path = store.write_ledger(LedgerAccount(name="Cash", journal_name="Shop"))
        before = path.read_text(encoding="ascii")

        with pytest.raises(StoreUnavailable):
            store.write_ledger(LedgerAccount(name="Cash", journal_name="Café"))
        assert path.read_text(encoding="ascii") == before

    def test_missing_reports_dir(self, tmp_path):
        """Test that an unwritable ledger report raises StoreUnavailable."""
        settings = StorageSettings(
            journal_path=str(tmp_path / "journal.txt"),
            reports_dir=str(tmp_path / "missing"),
        )
        with pytest.raises(StoreUnavailable):
            TextReportStore(settings).write_ledger(LedgerAccount(name="Cash"))


class TestTextFileAuditStorage:
    """Tests for the JSON lines audit file."""

    def test_append_event(self, tmp_path):
        """Test one JSON object per line."""
        path = tmp_path / "audit.jsonl"
        storage = TextFileAuditStorage(str(path))
        assert storage.append_event(AuditEventBuilder.trial_started("Trial.txt", None))
        assert storage.append_event(AuditEventBuilder.trial_finalized(1, 1, None))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["event_type"] for line in lines] == [
            "trial_started",
            "trial_finalized",
        ]

    def test_append_failure_returns_false(self, tmp_path):
        """Test that audit failures never raise."""
        storage = TextFileAuditStorage(str(tmp_path / "missing" / "audit.jsonl"))
        assert storage.append_event(AuditEventBuilder.trial_started("Trial.txt", None)) is False
