"""Formula compilation for the overview grid.

Every ``build_*_formula`` method returns a complete formula starting with the
formula marker. The criterion builders and ``build_cell_reference`` are the only
fragment-level helpers: their output is meant to be embedded in a formula.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Union

from ledgergrid.domain.entities import (
    CriterionKind,
    FilterCriterion,
    NetComponent,
    NetOperation,
)
from ledgergrid.domain.errors import CompilationError
from ledgergrid.utils.date_parser import month_bounds

FORMULA_MARKER = "="

_SHEET_PREFIX = r"(?:'(?:[^']|'')+'|[A-Za-z0-9_.]+)!"
_CELL = r"\$?[A-Za-z]{1,3}\$?\d+"
_COLUMN = r"\$?[A-Za-z]{1,3}"
_CELL_REFERENCE_RE = re.compile(
    rf"^(?:{_SHEET_PREFIX})?(?:{_CELL}(?::{_CELL})?|{_COLUMN}:{_COLUMN})$"
)
_FUNCTION_CALL_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*\(.*\)$", re.DOTALL)
_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_PLAIN_SHEET_RE = re.compile(r"^[A-Za-z0-9_]+$")


def is_bare_value(value: str) -> bool:
    """Whether a criterion value can be embedded without quoting.

    Cell addresses, function calls and plain numbers are left bare;
    everything else is a string literal.
    """
    value = value.strip()
    return bool(
        _CELL_REFERENCE_RE.match(value)
        or _FUNCTION_CALL_RE.match(value)
        or _NUMBER_RE.match(value)
    )


def quote(text: str) -> str:
    """Render text as a string literal, doubling embedded quotes."""
    return '"' + text.replace('"', '""') + '"'


def sheet_prefix(sheet: str) -> str:
    """Return the ``Sheet!`` prefix, quoting sheet names that need it."""
    if _PLAIN_SHEET_RE.match(sheet):
        return f"{sheet}!"
    return "'" + sheet.replace("'", "''") + "'!"


@dataclass(frozen=True)
class CategoryTotalRequest:
    """Inputs for one (type, category, subcategory, month) cell.

    Column arguments are ledger column letters. ``current_row`` is the overview
    row the formula is written to; its label cells (A..C) hold the values the
    criteria match against.
    """

    transaction_sheet: str
    amount_column: str
    type_column: str
    category_column: str
    date_column: str
    month: date
    overview_sheet: str
    current_row: int
    subcategory_column: Optional[str] = None
    category_value: str = ""
    subcategory_value: str = ""
    show_subcategories: bool = True
    shared_flag_cell: Optional[str] = None


class FormulaCompiler:
    """Composes formula strings. Stateless apart from the date format."""

    def __init__(self, date_format: str = "%Y-%m-%d"):
        """Initialize formula compiler.

        Args:
            date_format: strftime format used for date criteria
        """
        self.date_format = date_format

    # Criterion fragments

    def build_criterion(self, criteria_range: str, value: str) -> str:
        """Render an equality clause: ``range,value``."""
        value = str(value)
        if is_bare_value(value):
            return f"{criteria_range},{value}"
        return f"{criteria_range},{quote(value)}"

    def build_date_criterion(
        self, date_range: str, operator: str, date_value: Union[str, date]
    ) -> str:
        """Render a date comparison clause such as ``A:A,">=2024-01-01"``."""
        if isinstance(date_value, date):
            date_value = date_value.strftime(self.date_format)
        return self.build_operator_criterion(date_range, operator, date_value)

    def build_operator_criterion(
        self, criteria_range: str, operator: str, value: str
    ) -> str:
        """Render a comparison clause.

        Bare values are concatenated to the quoted operator (``">"&B2``);
        literals are folded into one quoted string (``"<>Pending"``).
        """
        value = str(value)
        if is_bare_value(value):
            return f"{criteria_range},{quote(operator)}&{value}"
        return f"{criteria_range},{quote(operator + value)}"

    def render_criterion(self, criterion: FilterCriterion) -> str:
        if criterion.kind == CriterionKind.DATE:
            return self.build_date_criterion(
                criterion.range, criterion.operator or "=", criterion.value
            )
        if criterion.kind == CriterionKind.COMPARE or criterion.operator:
            return self.build_operator_criterion(
                criterion.range, criterion.operator or "=", criterion.value
            )
        return self.build_criterion(criterion.range, criterion.value)

    def build_cell_reference(self, sheet: str, column: str, row: int) -> str:
        """Reference a cell on another sheet, e.g. ``Overview!$A5``."""
        return f"{sheet_prefix(sheet)}{column}{row}"

    # Complete formulas

    def build_monthly_sum_formula(
        self,
        sum_range: str,
        criteria: Sequence[FilterCriterion],
        shared_divisor: Optional[str] = None,
    ) -> str:
        """Join criteria into one conditional sum over ``sum_range``.

        Args:
            sum_range: Range holding the amounts
            criteria: Clauses that must all match
            shared_divisor: Optional expression the whole sum is divided by

        Returns:
            Complete formula string
        """
        if not criteria:
            raise CompilationError("A conditional sum needs at least one criterion")

        clauses = ",".join(self.render_criterion(c) for c in criteria)
        sumifs = f"SUMIFS({sum_range},{clauses})"
        if shared_divisor:
            return f"{FORMULA_MARKER}({sumifs})/{shared_divisor}"
        return f"{FORMULA_MARKER}{sumifs}"

    def build_category_total_formula(self, request: CategoryTotalRequest) -> str:
        """Build the monthly formula for one overview cell.

        The type clause always applies; category and subcategory clauses apply
        when the row carries those values (subcategory only while subcategories
        are shown). A shared flag cell halves the sum when the flag is TRUE.
        """
        prefix = sheet_prefix(request.transaction_sheet)

        def ledger_range(column: str) -> str:
            return f"{prefix}{column}:{column}"

        start_date, end_date = month_bounds(request.month.year, request.month.month)
        date_range = ledger_range(request.date_column)

        criteria = [
            FilterCriterion(
                range=ledger_range(request.type_column),
                value=self.build_cell_reference(
                    request.overview_sheet, "$A", request.current_row
                ),
            ),
            FilterCriterion(
                range=date_range,
                value=start_date.strftime(self.date_format),
                kind=CriterionKind.DATE,
                operator=">=",
            ),
            FilterCriterion(
                range=date_range,
                value=end_date.strftime(self.date_format),
                kind=CriterionKind.DATE,
                operator="<=",
            ),
        ]

        if request.category_value:
            criteria.append(
                FilterCriterion(
                    range=ledger_range(request.category_column),
                    value=self.build_cell_reference(
                        request.overview_sheet, "$B", request.current_row
                    ),
                )
            )
            if (
                request.subcategory_value
                and request.show_subcategories
                and request.subcategory_column
            ):
                criteria.append(
                    FilterCriterion(
                        range=ledger_range(request.subcategory_column),
                        value=self.build_cell_reference(
                            request.overview_sheet, "$C", request.current_row
                        ),
                    )
                )

        shared_divisor = None
        if request.shared_flag_cell:
            shared_divisor = f"IF({request.shared_flag_cell}=TRUE,2,1)"

        return self.build_monthly_sum_formula(
            sum_range=ledger_range(request.amount_column),
            criteria=criteria,
            shared_divisor=shared_divisor,
        )

    def build_row_total_formula(self, start_col: str, end_col: str, row: int) -> str:
        return f"{FORMULA_MARKER}SUM({start_col}{row}:{end_col}{row})"

    def build_row_average_formula(self, start_col: str, end_col: str, row: int) -> str:
        return f"{FORMULA_MARKER}AVERAGE({start_col}{row}:{end_col}{row})"

    def build_column_sum_formula(self, column: str, start_row: int, end_row: int) -> str:
        """Sum one column over a block of rows (used by type subtotals)."""
        return f"{FORMULA_MARKER}SUM({column}{start_row}:{column}{end_row})"

    def build_net_formula(self, components: Sequence[NetComponent]) -> str:
        """Render a signed sum of references.

        The first component is always added, whatever its declared operation.
        """
        if not components:
            raise CompilationError("A net formula needs at least one component")

        parts = [components[0].reference]
        for component in components[1:]:
            sign = "+" if component.operation == NetOperation.ADD else "-"
            parts.append(f"{sign}{component.reference}")
        return FORMULA_MARKER + "".join(parts)

    def build_percentage_formula(
        self, numerator: str, denominator: str, absolute: bool = False
    ) -> str:
        """Divide two references, yielding 0 when the denominator is 0."""
        num = f"ABS({numerator})" if absolute else numerator
        return f"{FORMULA_MARKER}IF({denominator}=0,0,{num}/{denominator})"
