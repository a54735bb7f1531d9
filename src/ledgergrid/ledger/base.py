"""Abstract ledger source interface."""

from abc import ABC, abstractmethod
from typing import Any, Sequence


class LedgerSource(ABC):
    """Read-only access to the raw ledger grid."""

    name: str = "Transactions"

    @abstractmethod
    def get_all_rows(self) -> list[list[Any]]:
        """Get every ledger row, header row first."""
        pass


class InMemoryLedgerSource(LedgerSource):
    """Ledger held in memory as a list of rows."""

    def __init__(self, rows: Sequence[Sequence[Any]], name: str = "Transactions"):
        """Initialize in-memory ledger.

        Args:
            rows: Header row followed by data rows
            name: Ledger (sheet) name used in generated formulas
        """
        self._rows = [list(row) for row in rows]
        self.name = name

    def get_all_rows(self) -> list[list[Any]]:
        return [list(row) for row in self._rows]
