"""Tests for the grid renderers."""

import csv
import dataclasses

import openpyxl
import pytest

from ledgergrid.domain.entities import LayoutRow, OverviewLayout, RowKind, StyleHint
from ledgergrid.render.base import layout_to_grid, parse_cell
from ledgergrid.render.console import ConsoleRenderer
from ledgergrid.render.csv_renderer import CsvGridRenderer
from ledgergrid.render.xlsx_renderer import CURRENCY_FORMAT, XlsxGridRenderer


@pytest.fixture
def small_layout():
    return OverviewLayout(
        sheet_name="Overview",
        rows=(
            LayoutRow(1, RowKind.HEADER, "Header", values=("Type", "Category")),
            LayoutRow(
                2,
                RowKind.CATEGORY,
                "Salary",
                values=("Income", "Salary"),
                cell_formulas=("=SUM(A1:A1)",),
            ),
            LayoutRow(3, RowKind.BLANK, ""),
        ),
        style_hints=(
            StyleHint("value", "G1", "Show Sub-Categories"),
            StyleHint("checkbox", "H1", True),
            StyleHint("background", "A1:B1", "#000000"),
        ),
    )


def test_parse_cell():
    assert parse_cell("T1") == (1, 20)
    assert parse_cell("aa10") == (10, 27)
    with pytest.raises(ValueError):
        parse_cell("A1:B2")


def test_layout_to_grid_places_formulas_after_label_columns(small_layout):
    grid = layout_to_grid(small_layout)

    assert grid[1][:5] == ["Income", "Salary", "", "", "=SUM(A1:A1)"]


def test_layout_to_grid_places_control_cells(small_layout):
    grid = layout_to_grid(small_layout)

    assert grid[0] == ["Type", "Category", "", "", "", "", "Show Sub-Categories", "TRUE"]
    assert all(len(row) == 8 for row in grid)
    assert grid[2] == [""] * 8


def test_csv_renderer_writes_grid(tmp_path, small_layout):
    output = tmp_path / "out" / "overview.csv"

    CsvGridRenderer(str(output)).render(small_layout)

    with open(output, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == layout_to_grid(small_layout)


def test_console_renderer_outline(capsys, small_layout):
    ConsoleRenderer(show_formulas=True).render(small_layout)

    out = capsys.readouterr().out
    assert "Overview (3 rows)" in out
    assert "Salary" in out
    assert "=SUM(A1:A1)" in out


def test_xlsx_renderer_applies_style_hints(tmp_path, small_layout):
    layout = dataclasses.replace(
        small_layout,
        style_hints=small_layout.style_hints
        + (
            StyleHint("bold", "A1:B1"),
            StyleHint("freeze_rows", "A1", 1),
            StyleHint("note", "H1", "Toggle me"),
            StyleHint("column_width", "A", 120),
            StyleHint("hide_column", "C"),
            StyleHint("indent", "B2", 5),
            StyleHint("number_format", "E2:F2", "currency"),
            StyleHint("border_bottom", "A2:E2", "#FF8F00"),
        ),
    )
    output = tmp_path / "out" / "overview.xlsx"

    XlsxGridRenderer(str(output)).render(layout)

    ws = openpyxl.load_workbook(output)["Overview"]
    assert ws["A2"].value == "Income"
    assert ws["E2"].value == "=SUM(A1:A1)"
    assert ws["G1"].value == "Show Sub-Categories"
    assert ws["H1"].value is True
    assert "Toggle me" in ws["H1"].comment.text
    assert any("H1" in str(dv.sqref) for dv in ws.data_validations.dataValidation)

    assert ws.freeze_panes == "A2"
    assert ws.column_dimensions["A"].width == pytest.approx(120 / 7)
    assert ws.column_dimensions["C"].hidden

    assert ws["B1"].fill.fgColor.rgb == "00000000"
    assert ws["B1"].font.bold
    assert not ws["A2"].font.bold
    assert ws["B2"].alignment.indent == 5
    assert ws["F2"].number_format == CURRENCY_FORMAT
    assert ws["E2"].border.bottom.style == "thin"
    assert ws["E2"].border.bottom.color.rgb == "00FF8F00"


def test_xlsx_renderer_writes_plain_false_flags(tmp_path):
    layout = OverviewLayout(
        sheet_name="Overview",
        rows=(
            LayoutRow(1, RowKind.CATEGORY, "Food", values=("Essentials", "Food", "", "FALSE")),
        ),
    )
    output = tmp_path / "overview.xlsx"

    XlsxGridRenderer(str(output)).render(layout)

    ws = openpyxl.load_workbook(output)["Overview"]
    assert ws["D1"].value is False
    assert not ws.data_validations.dataValidation
