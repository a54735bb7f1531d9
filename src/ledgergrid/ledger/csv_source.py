"""CSV ledger source."""

import csv
from pathlib import Path
from typing import Any

from ledgergrid.ledger.base import LedgerSource


class CsvLedgerSource(LedgerSource):
    """Ledger exported as a CSV file with a header row."""

    def __init__(self, csv_file_path: str, name: str = "Transactions"):
        """Initialize CSV ledger source.

        Args:
            csv_file_path: Path to the CSV export
            name: Ledger (sheet) name used in generated formulas
        """
        self.csv_path = Path(csv_file_path)
        self.name = name

    def get_all_rows(self) -> list[list[Any]]:
        """Read all rows from the CSV file.

        Raises:
            FileNotFoundError: If the CSV file doesn't exist
        """
        if not self.csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {self.csv_path}")

        with open(self.csv_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                # Single-column or ambiguous samples fall back to commas
                delimiter = ","
            reader = csv.reader(f, delimiter=delimiter)
            return [row for row in reader if any(cell.strip() for cell in row)]
