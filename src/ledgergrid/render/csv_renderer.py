"""CSV grid renderer."""

import csv
from pathlib import Path

from ledgergrid.domain.entities import OverviewLayout
from ledgergrid.logging_setup import get_logger
from ledgergrid.render.base import Renderer, layout_to_grid

_logger = get_logger("ledgergrid.render")


class CsvGridRenderer(Renderer):
    """Writes the overview grid, formulas included, to a CSV file.

    Spreadsheet applications evaluate the formulas on import. Style hints
    other than cell values are not representable in CSV and are dropped.
    """

    def __init__(self, output_path: str):
        """Initialize CSV renderer.

        Args:
            output_path: Destination file, overwritten on every render
        """
        self.output_path = Path(output_path)

    def render(self, layout: OverviewLayout) -> None:
        grid = layout_to_grid(layout)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerows(grid)
        _logger.info(
            "Wrote %d overview rows to %s", len(grid), self.output_path
        )
