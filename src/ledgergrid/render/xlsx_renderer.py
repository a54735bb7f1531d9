"""Excel workbook renderer backed by openpyxl."""

from pathlib import Path

from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.datavalidation import DataValidation

from ledgergrid.domain.entities import OverviewLayout, StyleHint
from ledgergrid.logging_setup import get_logger
from ledgergrid.render.base import Renderer, layout_to_grid

_logger = get_logger("ledgergrid.render")

CURRENCY_FORMAT = '"$"#,##0.00'
NUMBER_FORMATS = {"currency": CURRENCY_FORMAT}

# Column widths are given in pixels; Excel measures in characters
PIXELS_PER_CHARACTER = 7


def _color(value: str) -> str:
    return value.lstrip("#").upper()


def _cell_value(text: str):
    if text in ("TRUE", "FALSE"):
        return text == "TRUE"
    return text


def _cells(ws, target: str):
    selection = ws[target]
    if isinstance(selection, tuple):
        return [cell for row in selection for cell in row]
    return [selection]


class XlsxGridRenderer(Renderer):
    """Writes the overview to an .xlsx workbook with formulas and styling.

    Unlike the CSV renderer every style hint is applied: frozen header rows,
    column widths and visibility, fills, bold fonts, bottom borders, number
    formats, indents, notes and TRUE/FALSE checkbox cells.
    """

    def __init__(self, output_path: str):
        """Initialize workbook renderer.

        Args:
            output_path: Destination workbook, overwritten on every render
        """
        self.output_path = Path(output_path)

    def render(self, layout: OverviewLayout) -> None:
        wb = Workbook()
        ws = wb.active
        ws.title = layout.sheet_name

        grid = layout_to_grid(layout)
        for row_number, cells in enumerate(grid, start=1):
            for column, text in enumerate(cells, start=1):
                if text != "":
                    ws.cell(row=row_number, column=column, value=_cell_value(text))

        checkboxes = DataValidation(type="list", formula1='"TRUE,FALSE"', allow_blank=False)
        if any(hint.directive == "checkbox" for hint in layout.style_hints):
            ws.add_data_validation(checkboxes)
        for hint in layout.style_hints:
            self._apply(ws, hint, checkboxes)

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(self.output_path)
        _logger.info("Wrote %d overview rows to %s", len(grid), self.output_path)

    def _apply(self, ws, hint: StyleHint, checkboxes: DataValidation) -> None:
        directive = hint.directive
        if directive == "freeze_rows":
            ws.freeze_panes = f"A{int(hint.value) + 1}"
        elif directive == "column_width":
            if hint.value is not None:
                ws.column_dimensions[hint.target].width = hint.value / PIXELS_PER_CHARACTER
        elif directive == "hide_column":
            ws.column_dimensions[hint.target].hidden = True
        elif directive == "background":
            fill = PatternFill(
                start_color=_color(hint.value),
                end_color=_color(hint.value),
                fill_type="solid",
            )
            for cell in _cells(ws, hint.target):
                cell.fill = fill
        elif directive == "bold":
            for cell in _cells(ws, hint.target):
                cell.font = Font(bold=True)
        elif directive == "border_bottom":
            border = Border(bottom=Side(style="thin", color=_color(hint.value)))
            for cell in _cells(ws, hint.target):
                cell.border = border
        elif directive == "number_format":
            number_format = NUMBER_FORMATS.get(hint.value, hint.value)
            for cell in _cells(ws, hint.target):
                cell.number_format = number_format
        elif directive == "indent":
            for cell in _cells(ws, hint.target):
                cell.alignment = Alignment(indent=int(hint.value))
        elif directive == "note":
            ws[hint.target].comment = Comment(str(hint.value), "ledgergrid")
        elif directive == "checkbox":
            checkboxes.add(ws[hint.target])
        elif directive != "value":
            _logger.debug("Ignoring unknown style hint %r", directive)
