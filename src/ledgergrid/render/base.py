"""Abstract renderer interface."""

import re
from abc import ABC, abstractmethod

from ledgergrid.domain.entities import OverviewLayout
from ledgergrid.config import LABEL_COLUMNS
from ledgergrid.utils.columns import letter_to_column

_CELL_RE = re.compile(r"^([A-Za-z]{1,3})(\d+)$")


class Renderer(ABC):
    """Paints a complete overview layout into a grid document."""

    @abstractmethod
    def render(self, layout: OverviewLayout) -> None:
        """Render the layout. Called once per build with every row."""
        pass


def parse_cell(cell: str) -> tuple[int, int]:
    """Split an A1-style address into 1-based (row, column)."""
    match = _CELL_RE.match(cell.strip())
    if not match:
        raise ValueError(f"Invalid cell address '{cell}'")
    return int(match.group(2)), letter_to_column(match.group(1))


def layout_to_grid(layout: OverviewLayout) -> list[list[str]]:
    """Flatten a layout into a rectangular grid of cell texts.

    Row values fill from column A, formulas follow the label columns, and
    ``value``/``checkbox`` style hints that address a single cell are placed
    at that cell.
    """
    grid: list[list[str]] = []
    for row in layout.rows:
        cells = list(row.values)
        if row.cell_formulas:
            cells += [""] * (LABEL_COLUMNS - len(cells))
            cells += list(row.cell_formulas)
        grid.append(cells)

    for hint in layout.style_hints:
        if hint.directive not in ("value", "checkbox"):
            continue
        row_number, column = parse_cell(hint.target)
        if hint.directive == "checkbox":
            text = "TRUE" if hint.value else "FALSE"
        else:
            text = "" if hint.value is None else str(hint.value)
        while len(grid) < row_number:
            grid.append([])
        cells = grid[row_number - 1]
        cells += [""] * (column - len(cells))
        cells[column - 1] = text

    width = max((len(cells) for cells in grid), default=0)
    return [cells + [""] * (width - len(cells)) for cells in grid]
