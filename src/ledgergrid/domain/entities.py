"""Domain model entities for ledgergrid.

These are pure data classes describing the ledger, the derived category
combinations and the grid layout, independent of where the ledger comes from
and of how the grid is eventually painted.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class LedgerRecord:
    """One dated, typed, categorized money movement."""

    date: Optional[date]
    type: str
    category: str
    subcategory: str
    amount: Optional[Decimal]
    shared: bool = False


@dataclass(frozen=True)
class ColumnIndices:
    """Zero-based positions of the ledger columns, resolved once from the header."""

    date: int
    type: int
    category: int
    amount: int
    subcategory: Optional[int] = None
    shared: Optional[int] = None


@dataclass(frozen=True)
class CategoryCombination:
    """A unique (type, category, subcategory) triple present in the ledger."""

    type: str
    category: str
    subcategory: str = ""

    @property
    def path(self) -> str:
        """Display path, e.g. 'Food > Groceries'."""
        parts = [self.category]
        if self.subcategory:
            parts.append(self.subcategory)
        return " > ".join(parts)

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type,
            "category": self.category,
            "subcategory": self.subcategory,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CategoryCombination":
        return cls(
            type=data["type"],
            category=data["category"],
            subcategory=data.get("subcategory") or "",
        )


GroupedCombinations = dict[str, tuple[CategoryCombination, ...]]


class CriterionKind(str, Enum):
    """How a filter clause compares its range against its value."""

    EQUALS = "equals"
    DATE = "date"
    COMPARE = "compare"


@dataclass(frozen=True)
class FilterCriterion:
    """One conditional-sum clause: a range and the value it must match."""

    range: str
    value: str
    kind: CriterionKind = CriterionKind.EQUALS
    operator: Optional[str] = None


class NetOperation(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"


@dataclass(frozen=True)
class NetComponent:
    """A cell reference and the sign it contributes to a net formula."""

    reference: str
    operation: NetOperation = NetOperation.ADD


class RowKind(str, Enum):
    HEADER = "header"
    CATEGORY = "category"
    SUBTOTAL = "subtotal"
    NET = "net"
    BLANK = "blank"


@dataclass(frozen=True)
class LayoutRow:
    """One grid row.

    ``values`` fill the row from column A (the label columns A..D, or the
    whole header row) and ``cell_formulas`` the twelve month columns followed
    by total and average (E..R).
    """

    row_number: int
    kind: RowKind
    label: str
    values: tuple[str, ...] = ()
    cell_formulas: tuple[str, ...] = ()


@dataclass(frozen=True)
class StyleHint:
    """Presentation directive passed through to the renderer uninterpreted."""

    directive: str
    target: str
    value: Any = None


@dataclass(frozen=True)
class OverviewLayout:
    """A complete overview grid ready to be handed to a renderer."""

    sheet_name: str
    rows: tuple[LayoutRow, ...]
    label_rows: dict[str, int] = field(default_factory=dict)
    style_hints: tuple[StyleHint, ...] = ()
    show_subcategories: bool = True

    @property
    def last_row(self) -> int:
        return self.rows[-1].row_number if self.rows else 0

    def row(self, row_number: int) -> LayoutRow:
        """Get a row by its 1-based number."""
        return self.rows[row_number - 1]

    def rows_of_kind(self, kind: RowKind) -> list[LayoutRow]:
        return [row for row in self.rows if row.kind == kind]


@dataclass(frozen=True)
class EditEvent:
    """A single-cell edit reported by the host grid."""

    sheet_name: str
    cell: str
    value: Any


@dataclass(frozen=True)
class BuildResult:
    """Outcome of a successful overview build."""

    layout: OverviewLayout
    last_row: int
    success: bool = True
