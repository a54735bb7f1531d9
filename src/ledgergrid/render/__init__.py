"""Renderers turning an overview layout into a grid document."""

from ledgergrid.render.base import Renderer, layout_to_grid
from ledgergrid.render.csv_renderer import CsvGridRenderer
from ledgergrid.render.console import ConsoleRenderer
from ledgergrid.render.xlsx_renderer import XlsxGridRenderer

__all__ = [
    "Renderer",
    "layout_to_grid",
    "CsvGridRenderer",
    "ConsoleRenderer",
    "XlsxGridRenderer",
]
