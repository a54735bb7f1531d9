"""Overview layout builder.

Rows are appended to an in-memory grid whose length is the single source of
row numbers. Any formula that points at other rows only uses numbers handed
out earlier in the same pass: subtotals use the block of category rows just
emitted, Total Expenses uses the recorded expense subtotal rows, and net rows
resolve their inputs through the label map filled while emitting.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import AbstractSet, Optional, Sequence

from ledgergrid.config import (
    AVERAGE_COLUMN,
    FIRST_MONTH_COLUMN,
    LABEL_COLUMNS,
    MONTH_COUNT,
    TOTAL_COLUMN,
    OverviewConfig,
)
from ledgergrid.domain.entities import (
    CategoryCombination,
    ColumnIndices,
    GroupedCombinations,
    LayoutRow,
    NetComponent,
    NetOperation,
    OverviewLayout,
    RowKind,
    StyleHint,
)
from ledgergrid.domain.formulas import CategoryTotalRequest, FormulaCompiler
from ledgergrid.utils.columns import column_to_letter

TOTAL_EXPENSES_LABEL = "Total Expenses"
NET_SECTION_LABEL = "Net Calculations"

MONTH_LETTERS = tuple(
    column_to_letter(FIRST_MONTH_COLUMN + offset) for offset in range(MONTH_COUNT)
)
TOTAL_LETTER = column_to_letter(TOTAL_COLUMN)
AVERAGE_LETTER = column_to_letter(AVERAGE_COLUMN)
VALUE_LETTERS = MONTH_LETTERS + (TOTAL_LETTER, AVERAGE_LETTER)
LAST_LETTER = AVERAGE_LETTER


def subtotal_label(type_name: str) -> str:
    return f"Total {type_name}"


def _label_values(first: str, *rest: str) -> tuple[str, ...]:
    values = (first,) + rest
    return values + ("",) * (LABEL_COLUMNS - len(values))


@dataclass
class _Grid:
    rows: list[LayoutRow] = field(default_factory=list)
    label_rows: dict[str, int] = field(default_factory=dict)
    hints: list[StyleHint] = field(default_factory=list)

    @property
    def next_row(self) -> int:
        return len(self.rows) + 1

    def emit(
        self,
        kind: RowKind,
        label: str,
        values: Sequence[str] = (),
        formulas: Sequence[str] = (),
        register: bool = False,
    ) -> int:
        row_number = self.next_row
        self.rows.append(
            LayoutRow(
                row_number=row_number,
                kind=kind,
                label=label,
                values=tuple(values),
                cell_formulas=tuple(formulas),
            )
        )
        if register:
            self.label_rows.setdefault(label, row_number)
        return row_number

    def hint(self, directive: str, target: str, value=None) -> None:
        self.hints.append(StyleHint(directive=directive, target=target, value=value))

    def row_range(self, row_number: int) -> str:
        return f"A{row_number}:{LAST_LETTER}{row_number}"


class OverviewLayoutBuilder:
    """Lays out the overview grid for a set of grouped combinations."""

    def __init__(
        self,
        config: OverviewConfig,
        compiler: FormulaCompiler,
        columns: ColumnIndices,
        transaction_sheet: Optional[str] = None,
    ):
        """Initialize layout builder.

        Args:
            config: Overview configuration
            compiler: Formula compiler
            columns: Resolved ledger column positions
            transaction_sheet: Ledger sheet name (defaults to the configured one)
        """
        self.config = config
        self.compiler = compiler
        self.columns = columns
        self.transaction_sheet = transaction_sheet or config.transactions_sheet

    def build(
        self,
        grouped: GroupedCombinations,
        show_subcategories: bool,
        shared: AbstractSet[CategoryCombination] = frozenset(),
    ) -> OverviewLayout:
        """Build the complete overview layout.

        Args:
            grouped: Combinations grouped by type
            show_subcategories: Whether subcategory rows and filters are used
            shared: Combinations whose expenses are split between co-owners

        Returns:
            OverviewLayout with every row, the label map and style hints
        """
        grid = _Grid()
        self._emit_header(grid, show_subcategories)

        expense_subtotal_rows: list[int] = []
        for type_name in self.config.type_order:
            combinations = grouped.get(type_name, ())
            if not combinations:
                continue
            subtotal_row = self._emit_type_section(
                grid, type_name, combinations, show_subcategories, shared
            )
            if self.config.is_expense_type(type_name):
                expense_subtotal_rows.append(subtotal_row)

        if expense_subtotal_rows:
            self._emit_total_expenses(grid, expense_subtotal_rows)

        self._emit_net_calculations(grid)

        return OverviewLayout(
            sheet_name=self.config.overview_sheet,
            rows=tuple(grid.rows),
            label_rows=dict(grid.label_rows),
            style_hints=tuple(grid.hints),
            show_subcategories=show_subcategories,
        )

    # Ledger column helpers

    def _ledger_letter(self, index: Optional[int]) -> Optional[str]:
        return None if index is None else column_to_letter(index + 1)

    def _value_formulas(
        self,
        row: int,
        category: str = "",
        subcategory: str = "",
        show_subcategories: bool = True,
        shared_flag_cell: Optional[str] = None,
    ) -> list[str]:
        formulas = []
        for month in range(1, MONTH_COUNT + 1):
            request = CategoryTotalRequest(
                transaction_sheet=self.transaction_sheet,
                amount_column=self._ledger_letter(self.columns.amount),
                type_column=self._ledger_letter(self.columns.type),
                category_column=self._ledger_letter(self.columns.category),
                subcategory_column=self._ledger_letter(self.columns.subcategory),
                date_column=self._ledger_letter(self.columns.date),
                month=date(self.config.year, month, 1),
                overview_sheet=self.config.overview_sheet,
                current_row=row,
                category_value=category,
                subcategory_value=subcategory,
                show_subcategories=show_subcategories,
                shared_flag_cell=shared_flag_cell,
            )
            formulas.append(self.compiler.build_category_total_formula(request))

        first, last = MONTH_LETTERS[0], MONTH_LETTERS[-1]
        formulas.append(self.compiler.build_row_total_formula(first, last, row))
        formulas.append(self.compiler.build_row_average_formula(first, last, row))
        return formulas

    # Sections

    def _emit_header(self, grid: _Grid, show_subcategories: bool) -> None:
        row = grid.emit(RowKind.HEADER, "Header", values=self.config.headers)
        style = self.config.style
        toggle = self.config.toggle

        grid.hint("background", grid.row_range(row), style.header_background)
        grid.hint("bold", grid.row_range(row))
        grid.hint("freeze_rows", "A1", row)
        grid.hint("value", toggle.label_cell, toggle.label_text)
        grid.hint("checkbox", toggle.checkbox_cell, show_subcategories)
        grid.hint("note", toggle.checkbox_cell, toggle.note_text)

        widths = style.column_widths
        for letter, key in (("A", "type"), ("B", "category"), ("C", "subcategory"), ("D", "shared")):
            grid.hint("column_width", letter, widths.get(key))
        for letter in MONTH_LETTERS:
            grid.hint("column_width", letter, widths.get("month"))
        grid.hint("column_width", TOTAL_LETTER, widths.get("average"))
        grid.hint("column_width", AVERAGE_LETTER, widths.get("average"))
        if not show_subcategories:
            grid.hint("hide_column", "C")

    def _emit_type_section(
        self,
        grid: _Grid,
        type_name: str,
        combinations: Sequence[CategoryCombination],
        show_subcategories: bool,
        shared: AbstractSet[CategoryCombination],
    ) -> int:
        """Emit type row, category rows, subtotal and separator. Returns the subtotal row."""
        is_expense = self.config.is_expense_type(type_name)
        color = self.config.style.type_colors.get(
            type_name, self.config.style.type_colors.get("default")
        )

        type_row = grid.next_row
        grid.emit(
            RowKind.HEADER,
            type_name,
            values=_label_values(type_name),
            formulas=self._value_formulas(type_row),
            register=True,
        )
        grid.hint("background", grid.row_range(type_row), color)
        grid.hint("bold", f"A{type_row}")

        first_category_row = grid.next_row
        for combination in combinations:
            row = grid.next_row
            flag_value = ""
            shared_flag_cell = None
            if is_expense:
                is_shared = combination in shared
                flag_value = "TRUE" if is_shared else "FALSE"
                # Only flagged rows divide by the flag cell, so only they get a checkbox
                if is_shared:
                    shared_flag_cell = f"{self.config.shared_column}{row}"
                    grid.hint("checkbox", shared_flag_cell, True)

            grid.emit(
                RowKind.CATEGORY,
                combination.path,
                values=(
                    combination.type,
                    combination.category,
                    combination.subcategory,
                    flag_value,
                ),
                formulas=self._value_formulas(
                    row,
                    category=combination.category,
                    subcategory=combination.subcategory,
                    show_subcategories=show_subcategories,
                    shared_flag_cell=shared_flag_cell,
                ),
            )
            if combination.subcategory:
                grid.hint("indent", f"C{row}", 5)
            grid.hint("number_format", f"{MONTH_LETTERS[0]}{row}:{LAST_LETTER}{row}", "currency")
        last_category_row = grid.next_row - 1

        label = subtotal_label(type_name)
        subtotal_row = grid.emit(
            RowKind.SUBTOTAL,
            label,
            values=_label_values(label),
            formulas=[
                self.compiler.build_column_sum_formula(
                    letter, first_category_row, last_category_row
                )
                for letter in VALUE_LETTERS
            ],
            register=True,
        )
        grid.hint("background", grid.row_range(subtotal_row), color)
        grid.hint("bold", grid.row_range(subtotal_row))
        grid.hint("border_bottom", grid.row_range(subtotal_row), self.config.style.border_color)

        grid.emit(RowKind.BLANK, "")
        return subtotal_row

    def _emit_total_expenses(self, grid: _Grid, expense_subtotal_rows: list[int]) -> None:
        formulas = [
            self.compiler.build_net_formula(
                [NetComponent(reference=f"{letter}{row}") for row in expense_subtotal_rows]
            )
            for letter in VALUE_LETTERS
        ]
        row = grid.emit(
            RowKind.SUBTOTAL,
            TOTAL_EXPENSES_LABEL,
            values=_label_values(TOTAL_EXPENSES_LABEL),
            formulas=formulas,
            register=True,
        )
        grid.hint("background", grid.row_range(row), self.config.style.total_background)
        grid.hint("bold", grid.row_range(row))
        grid.hint("border_bottom", grid.row_range(row), self.config.style.border_color)
        grid.emit(RowKind.BLANK, "")

    def _net_calculations(self, grid: _Grid) -> list[tuple[str, list[tuple[int, NetOperation]]]]:
        """Resolve the net rows whose inputs exist. Missing inputs skip the row."""
        types = self.config.types
        labels = grid.label_rows
        income = labels.get(subtotal_label(types.income))
        expenses = labels.get(TOTAL_EXPENSES_LABEL)
        essentials = labels.get(types.essentials)
        wants = labels.get(types.wants)
        savings = labels.get(types.savings)

        if income is None:
            return []

        # Signed ledgers already carry expenses as negatives, so "minus" adds
        minus = NetOperation.ADD if self.config.signed_amounts else NetOperation.SUBTRACT
        add = NetOperation.ADD

        calculations = []
        if essentials is not None and wants is not None:
            calculations.append(
                (
                    "Net (Income - Expenses before Extra)",
                    [(income, add), (essentials, minus), (wants, minus)],
                )
            )
        if expenses is not None:
            calculations.append(
                ("Net (Total Income - Expenses)", [(income, add), (expenses, minus)])
            )
        if expenses is not None and savings is not None:
            calculations.append(
                ("Total Expenses + Savings", [(expenses, add), (savings, add)])
            )
            calculations.append(
                (
                    "Net (Total Income - Expenses - Savings)",
                    [(income, add), (expenses, minus), (savings, minus)],
                )
            )
        return calculations

    def _emit_net_calculations(self, grid: _Grid) -> None:
        calculations = self._net_calculations(grid)
        if not calculations:
            return

        section_row = grid.emit(
            RowKind.HEADER, NET_SECTION_LABEL, values=_label_values(NET_SECTION_LABEL)
        )
        grid.hint("background", grid.row_range(section_row), self.config.style.net_background)
        grid.hint("bold", grid.row_range(section_row))

        row = section_row
        for label, sources in calculations:
            formulas = [
                self.compiler.build_net_formula(
                    [
                        NetComponent(reference=f"{letter}{source_row}", operation=operation)
                        for source_row, operation in sources
                    ]
                )
                for letter in VALUE_LETTERS
            ]
            row = grid.emit(RowKind.NET, label, values=_label_values(label), formulas=formulas)
            grid.hint("bold", f"A{row}")
        grid.hint("border_bottom", grid.row_range(row), self.config.style.border_color)
