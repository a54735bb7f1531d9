"""Ledger aggregation domain service."""

from typing import Any, Callable, Optional, Sequence

from ledgergrid.cache.store import CacheStore
from ledgergrid.config import OverviewConfig
from ledgergrid.domain.entities import (
    CategoryCombination,
    ColumnIndices,
    GroupedCombinations,
    LedgerRecord,
)
from ledgergrid.domain.errors import StructureError, missing_columns
from ledgergrid.logging_setup import get_logger
from ledgergrid.utils.amount_parser import parse_amount
from ledgergrid.utils.date_parser import parse_date
from ledgergrid.utils.flags import coerce_bool

_logger = get_logger("ledgergrid.aggregation")

DATE_HEADER = "Date"
TYPE_HEADER = "Type"
CATEGORY_HEADER = "Category"
SUBCATEGORY_HEADER = "Sub-Category"
AMOUNT_HEADER = "Amount"
SHARED_HEADER = "Shared"

REQUIRED_HEADERS = (DATE_HEADER, TYPE_HEADER, CATEGORY_HEADER, AMOUNT_HEADER)


def _text(cell: Any) -> str:
    return "" if cell is None else str(cell).strip()


def _cell(row: Sequence[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def _optional(parser: Callable[[Any], Any], cell: Any) -> Any:
    if _text(cell) == "":
        return None
    try:
        return parser(cell)
    except ValueError as e:
        _logger.debug("Keeping unparseable ledger cell %r as empty: %s", cell, e)
        return None


class LedgerAggregator:
    """Derives the category combinations an overview is laid out from."""

    def __init__(self, config: OverviewConfig, cache: CacheStore):
        """Initialize ledger aggregator.

        Args:
            config: Overview configuration
            cache: Cache store memoizing the derivations
        """
        self.config = config
        self.cache = cache

    def validate_structure(self, columns: Sequence[Any]) -> ColumnIndices:
        """Resolve ledger column positions from the header row.

        Args:
            columns: Header row cells

        Returns:
            ColumnIndices with zero-based positions

        Raises:
            StructureError: If Date, Type, Category or Amount is missing
        """
        positions: dict[str, int] = {}
        for index, cell in enumerate(columns):
            positions.setdefault(_text(cell), index)

        missing = [name for name in REQUIRED_HEADERS if name not in positions]
        if missing:
            raise StructureError(missing_columns(missing))

        return ColumnIndices(
            date=positions[DATE_HEADER],
            type=positions[TYPE_HEADER],
            category=positions[CATEGORY_HEADER],
            amount=positions[AMOUNT_HEADER],
            subcategory=positions.get(SUBCATEGORY_HEADER),
            shared=positions.get(SHARED_HEADER),
        )

    def to_records(
        self, rows: Sequence[Sequence[Any]], columns: ColumnIndices
    ) -> list[LedgerRecord]:
        """Convert raw data rows (header excluded) into ledger records."""
        return [
            LedgerRecord(
                date=_optional(parse_date, _cell(row, columns.date)),
                type=_text(_cell(row, columns.type)),
                category=_text(_cell(row, columns.category)),
                subcategory=_text(_cell(row, columns.subcategory)),
                amount=_optional(parse_amount, _cell(row, columns.amount)),
                shared=coerce_bool(_cell(row, columns.shared)),
            )
            for row in rows
        ]

    def _combination_for(
        self, record: LedgerRecord, show_subcategories: bool
    ) -> Optional[CategoryCombination]:
        if not record.type or not record.category:
            return None
        return CategoryCombination(
            type=record.type,
            category=record.category,
            subcategory=record.subcategory if show_subcategories else "",
        )

    def extract_unique_combinations(
        self, records: Sequence[LedgerRecord], show_subcategories: bool
    ) -> list[CategoryCombination]:
        """Get distinct combinations in order of first appearance.

        Rows without a type or category are skipped. When subcategories are
        hidden every combination is rolled up to an empty subcategory.
        """
        seen: set[CategoryCombination] = set()
        combinations: list[CategoryCombination] = []
        for record in records:
            combination = self._combination_for(record, show_subcategories)
            if combination is None or combination in seen:
                continue
            seen.add(combination)
            combinations.append(combination)
        return combinations

    def extract_shared_combinations(
        self, records: Sequence[LedgerRecord], show_subcategories: bool
    ) -> list[CategoryCombination]:
        """Get combinations whose records are all flagged as shared.

        A shared row divides its whole monthly sum by two, so a combination
        mixing shared and unshared records (typically a rolled-up category)
        stays unflagged.
        """
        all_shared: dict[CategoryCombination, bool] = {}
        for record in records:
            combination = self._combination_for(record, show_subcategories)
            if combination is None:
                continue
            all_shared[combination] = all_shared.get(combination, True) and record.shared
        return [combination for combination, shared in all_shared.items() if shared]

    def group_by_type(
        self, combinations: Sequence[CategoryCombination]
    ) -> GroupedCombinations:
        """Partition combinations by type, keeping their relative order."""
        grouped: dict[str, list[CategoryCombination]] = {}
        for combination in combinations:
            grouped.setdefault(combination.type, []).append(combination)
        return {type_name: tuple(combos) for type_name, combos in grouped.items()}

    # Cached variants

    def get_combinations(
        self, records: Sequence[LedgerRecord], show_subcategories: bool
    ) -> list[CategoryCombination]:
        key = self.config.cache.key_for(
            self.config.cache.category_combinations_key, show_subcategories
        )
        cached = self.cache.get(
            key,
            lambda: [
                c.to_dict()
                for c in self.extract_unique_combinations(records, show_subcategories)
            ],
        )
        return [CategoryCombination.from_dict(data) for data in cached]

    def get_grouped_combinations(
        self,
        combinations: Sequence[CategoryCombination],
        show_subcategories: bool,
    ) -> GroupedCombinations:
        key = self.config.cache.key_for(
            self.config.cache.grouped_combinations_key, show_subcategories
        )
        cached = self.cache.get(
            key,
            lambda: {
                type_name: [c.to_dict() for c in combos]
                for type_name, combos in self.group_by_type(combinations).items()
            },
        )
        # JSON objects keep key order, so first-seen type order survives a round trip
        return {
            type_name: tuple(CategoryCombination.from_dict(data) for data in combos)
            for type_name, combos in cached.items()
        }

    def get_shared_combinations(
        self, records: Sequence[LedgerRecord], show_subcategories: bool
    ) -> set[CategoryCombination]:
        key = self.config.cache.key_for(
            self.config.cache.shared_combinations_key, show_subcategories
        )
        cached = self.cache.get(
            key,
            lambda: [
                c.to_dict()
                for c in self.extract_shared_combinations(records, show_subcategories)
            ],
        )
        return {CategoryCombination.from_dict(data) for data in cached}

    def invalidate(self, show_subcategories: Optional[bool] = None) -> None:
        """Drop cached derivations for one toggle state, or both when None."""
        states = (True, False) if show_subcategories is None else (show_subcategories,)
        settings = self.config.cache
        for show in states:
            for base_key in (
                settings.category_combinations_key,
                settings.grouped_combinations_key,
                settings.shared_combinations_key,
            ):
                self.cache.invalidate(settings.key_for(base_key, show))
