"""
Ledgerbook - Source Package

A console bookkeeping utility: record double-sided journal entries into
a fixed-width journal, then derive per-account ledgers and a trial
balance from it.

DESIGN PRINCIPLES:
1. The journal is the only source of truth
2. Ledgers are always rebuilt from a full scan, never cached
3. A damaged record is skipped and counted, never silently fixed
4. Every step is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Ledgerbook Team"
