"""Ledger sources for ledgergrid."""

from ledgergrid.ledger.base import LedgerSource, InMemoryLedgerSource
from ledgergrid.ledger.csv_source import CsvLedgerSource

__all__ = ["LedgerSource", "InMemoryLedgerSource", "CsvLedgerSource"]
