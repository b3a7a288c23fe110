"""
Console Frontend for Ledgerbook

This is the entry point people run at the terminal.

DESIGN PRINCIPLES:
1. Every prompt says exactly what to type (1/0 choices, date format)
2. Bad amounts are asked for again, never guessed
3. Clear error messages when a file can't be opened
4. Nothing is hidden: journal and ledgers can be printed on request

File locations come from LEDGERBOOK_* environment variables (or .env)
and can be overridden per run with the flags below.
"""

import argparse
import sys
from typing import Optional

import structlog
from pydantic import ValidationError

from ledgerbook import __version__
from ledgerbook.audit import configure_logging
from ledgerbook.config import StorageSettings, get_settings
from ledgerbook.orchestrator import create_app_components


logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledgerbook",
        description="Record journal entries, then build ledgers and a trial balance.",
    )
    parser.add_argument("--journal", help="journal store file (default: journal.txt)")
    parser.add_argument("--trial", help="trial balance report file (default: Trial.txt)")
    parser.add_argument(
        "--reports-dir",
        help="directory for <account>.txt ledger reports (default: current directory)",
    )
    parser.add_argument(
        "--log-level",
        help="structured log level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    overrides = {
        "journal_path": args.journal,
        "trial_path": args.trial,
        "reports_dir": args.reports_dir,
    }
    try:
        storage_settings = StorageSettings.model_validate({
            **settings.storage.model_dump(),
            **{k: v for k, v in overrides.items() if v is not None},
        })
        logging_settings = settings.logging
        if args.log_level:
            logging_settings = logging_settings.model_validate(
                {**logging_settings.model_dump(), "level": args.log_level}
            )
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    configure_logging(logging_settings.level, logging_settings.file)

    session = create_app_components(
        settings=settings,
        storage_settings=storage_settings,
        logging_settings=logging_settings,
    )

    print("")
    print("********==================================********")
    print("   Ledgerbook - journal, ledgers and trial balance")
    print("********==================================********")

    try:
        session.run()
    except (EOFError, KeyboardInterrupt):
        logger.info("session_interrupted")
        print("\n\tSession ended.")
        return 130

    print("\n\tDone.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
