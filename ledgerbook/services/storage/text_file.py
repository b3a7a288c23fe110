"""
Text File Storage Implementation

DESIGN DECISION: Plain fixed-width text files are the only backend because:
1. The user can open the journal and every report in any editor
2. No database setup required
3. Files stay readable by the original console program's users

TRADEOFFS:
- Every ledger build re-reads the whole journal (fine at personal scale)
- No locking: one interactive session owns the files at a time
- Parsing is token based, so a date containing spaces can't round-trip

The implementation follows the abstract interfaces, so the recorder and
the aggregator never touch file handles directly.
"""

import os
from pathlib import Path
from typing import Optional, TextIO

import structlog

from ledgerbook.config import StorageSettings, get_settings
from ledgerbook.models.audit import AuditEvent
from ledgerbook.models.journal import (
    JournalEntry,
    JournalHeader,
    JournalRecord,
    LedgerAccount,
    TrialBalance,
    TrialLine,
)
from ledgerbook.services.storage import layout
from ledgerbook.services.storage.interface import (
    AuditStorageInterface,
    JournalReaderInterface,
    JournalStoreInterface,
    MalformedRecord,
    ReportStoreInterface,
    StoreUnavailable,
)


logger = structlog.get_logger(__name__)


def _open(path: Path, mode: str, encoding: str) -> TextIO:
    """
    Open a store file, turning OS errors into StoreUnavailable.

    Reads replace undecodable bytes with U+FFFD, so a journal written in
    another code page still scans.
    """
    errors = "replace" if mode == "r" else "strict"
    try:
        return open(path, mode, encoding=encoding, errors=errors)
    except OSError as e:
        action = "read" if mode == "r" else "write"
        raise StoreUnavailable(str(path), f"Cannot open for {action} ({e.strerror})")


def _write_lines(path: Path, mode: str, encoding: str, lines: list[str]) -> None:
    text = "".join(f"{line}\n" for line in lines)
    # Checked before opening so "w" never truncates a file it can't rewrite
    try:
        text.encode(encoding)
    except UnicodeEncodeError as e:
        raise StoreUnavailable(str(path), f"Text can't be written as {encoding} ({e.reason})")

    handle = _open(path, mode, encoding)
    try:
        with handle:
            handle.write(text)
    except OSError as e:
        raise StoreUnavailable(str(path), f"Write failed ({e.strerror})")


def _same_path(a: Path, b: Path) -> bool:
    if a.resolve() == b.resolve():
        return True
    # Catches case-insensitive filesystems and links
    try:
        return a.samefile(b)
    except OSError:
        return False


class TextJournalReader(JournalReaderInterface):
    """
    Reads a fixed-width journal one record at a time.

    A record is every non-blank line up to and including the next dash
    divider. Grouping on the divider means one damaged record never
    shifts the records after it.
    """

    def __init__(self, handle: TextIO, path: str):
        self._handle = handle
        self._path = path
        self._line_number = 0

    def _readline(self) -> Optional[str]:
        line = self._handle.readline()
        if line == "":
            return None
        self._line_number += 1
        return line.rstrip("\r\n")

    def read_header(self) -> JournalHeader:
        name_line = self._readline()
        if name_line is None:
            raise MalformedRecord(1, "journal is empty, no header found")

        skipped = []
        for _ in range(layout.HEADER_SKIP_LINES):
            line = self._readline()
            if line is None:
                raise MalformedRecord(self._line_number, "journal header is incomplete")
            skipped.append(line)

        # Header layout: name, JOURNAL, date, rule, column titles, rule
        return JournalHeader(name=name_line.strip(), date=skipped[1].strip())

    def next_record(self) -> Optional[JournalRecord]:
        content: list[str] = []
        start_line = 0

        while True:
            line = self._readline()
            if line is None:
                if content:
                    raise MalformedRecord(start_line, "truncated record, divider missing")
                return None
            if not line.strip():
                continue
            if layout.is_rule(line):
                if not content:
                    # Stray divider, e.g. a doubled rule
                    continue
                return layout.parse_record(content, start_line)
            if not content:
                start_line = self._line_number
            content.append(line)

    def close(self) -> None:
        self._handle.close()


class TextJournalStore(JournalStoreInterface):
    """
    Journal store backed by one fixed-width text file.

    Every write opens and closes the file, so entries recorded before a
    crash are already on disk.
    """

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage
        self._path = Path(self._settings.journal_path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def has_journal(self) -> bool:
        try:
            return self._path.stat().st_size > 0
        except OSError:
            return False

    def write_header(self, header: JournalHeader) -> None:
        _write_lines(
            self._path, "w", self._settings.encoding,
            layout.journal_header_lines(header),
        )
        logger.info("journal_header_written", path=self.location, journal=header.name)

    def ensure_writable(self) -> None:
        _open(self._path, "a", self._settings.encoding).close()

    def append_entry(self, entry: JournalEntry) -> None:
        _write_lines(
            self._path, "a", self._settings.encoding,
            layout.journal_entry_lines(entry),
        )
        logger.debug(
            "journal_entry_appended",
            path=self.location,
            debit=entry.debit_account,
            credit=entry.credit_account,
        )

    def open_reader(self) -> TextJournalReader:
        handle = _open(self._path, "r", self._settings.encoding)
        return TextJournalReader(handle, self.location)

    def read_text(self) -> str:
        handle = _open(self._path, "r", self._settings.encoding)
        with handle:
            return handle.read()


class TextReportStore(ReportStoreInterface):
    """
    Writes ledger reports and the shared trial balance report.

    Ledger reports are named <account>.txt inside the reports directory
    and are overwritten on every build. The trial report is only ever
    appended to.
    """

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage
        self._trial_path = Path(self._settings.trial_path)

    @property
    def trial_path(self) -> Path:
        return self._trial_path

    @property
    def trial_location(self) -> str:
        return str(self._trial_path)

    def write_ledger(self, account: LedgerAccount) -> Path:
        path = self._ledger_path(account.name)
        _write_lines(
            path, "w", self._settings.encoding,
            layout.ledger_report_lines(account),
        )
        logger.info("ledger_report_written", path=str(path), account=account.name)
        return path

    def read_ledger(self, path: Path) -> str:
        handle = _open(path, "r", self._settings.encoding)
        with handle:
            return handle.read()

    def start_trial(self, header: JournalHeader) -> None:
        self._append_trial(layout.trial_header_lines(header))

    def append_trial_line(self, line: TrialLine) -> None:
        self._append_trial([layout.trial_line(line)])

    def write_trial_totals(self, trial: TrialBalance) -> None:
        self._append_trial(layout.trial_total_lines(trial))

    def read_trial(self) -> str:
        handle = _open(self._trial_path, "r", self._settings.encoding)
        with handle:
            return handle.read()

    def _append_trial(self, lines: list[str]) -> None:
        _write_lines(self._trial_path, "a", self._settings.encoding, lines)

    def _ledger_path(self, account_name: str) -> Path:
        """
        Where an account's report goes.

        Raises:
            StoreUnavailable: If the name would leave the reports directory
                or the report would replace the journal or the trial report
        """
        path = self._settings.ledger_path(account_name)
        if any(sep and sep in account_name for sep in (os.sep, os.altsep)):
            raise StoreUnavailable(str(path), "Ledger name must not contain a path separator")

        for protected in (Path(self._settings.journal_path), self._trial_path):
            if _same_path(path, protected):
                raise StoreUnavailable(
                    str(path), f"Ledger report would overwrite {protected}"
                )
        return path


class TextFileAuditStorage(AuditStorageInterface):
    """
    Audit storage appending one JSON line per event.
    """

    def __init__(self, path: str, encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding

    def append_event(self, event: AuditEvent) -> bool:
        try:
            with open(self._path, "a", encoding=self._encoding) as handle:
                handle.write(event.to_log_line() + "\n")
            return True
        except OSError as e:
            # Don't raise - audit logging should not break the main flow
            logger.error("audit_append_failed", path=str(self._path), error=str(e))
            return False
