"""Tests for ledger aggregation."""

from datetime import date
from decimal import Decimal

import pytest

from ledgergrid.cache.store import CacheStore
from ledgergrid.config import CacheSettings
from ledgergrid.domain.aggregation import LedgerAggregator
from ledgergrid.domain.entities import CategoryCombination, ColumnIndices, LedgerRecord
from ledgergrid.domain.errors import StructureError

from conftest import LEDGER_HEADER, DictBackend


def _record(type_, category, subcategory="", amount="-1", shared=False):
    return LedgerRecord(
        date=date(2024, 1, 1),
        type=type_,
        category=category,
        subcategory=subcategory,
        amount=Decimal(amount),
        shared=shared,
    )


@pytest.fixture
def aggregator(config, cache_store):
    return LedgerAggregator(config, cache_store)


def test_validate_structure_resolves_columns(aggregator):
    columns = aggregator.validate_structure(LEDGER_HEADER)

    assert columns == ColumnIndices(
        date=0, type=1, category=2, amount=4, subcategory=3, shared=5
    )


def test_validate_structure_optional_columns(aggregator):
    columns = aggregator.validate_structure(["Amount", " Date ", "Category", "Type"])

    assert columns.amount == 0
    assert columns.date == 1
    assert columns.subcategory is None
    assert columns.shared is None


def test_validate_structure_reports_missing_columns(aggregator):
    with pytest.raises(StructureError, match="Required columns not found: Type, Amount"):
        aggregator.validate_structure(["Date", "Category", "Sub-Category"])


def test_to_records_parses_cells(aggregator, scenario_rows):
    columns = aggregator.validate_structure(scenario_rows[0])
    records = aggregator.to_records(scenario_rows[1:], columns)

    assert records[1] == LedgerRecord(
        date=date(2024, 1, 10),
        type="Essentials",
        category="Food",
        subcategory="Groceries",
        amount=Decimal("-50"),
        shared=True,
    )
    assert records[0].shared is False


def test_to_records_tolerates_bad_and_short_rows(aggregator):
    columns = aggregator.validate_structure(LEDGER_HEADER)
    records = aggregator.to_records([["not a date", "Income", "Salary", "", "abc"], ["2024-01-01"]], columns)

    assert records[0].date is None
    assert records[0].amount is None
    assert records[1].type == ""
    assert records[1].shared is False


def test_extract_unique_combinations_keeps_first_seen_order(aggregator):
    records = [
        _record("Essentials", "Food", "Groceries"),
        _record("Income", "Salary"),
        _record("Essentials", "Food", "Groceries"),
        _record("Essentials", "Food", "Household"),
    ]

    assert aggregator.extract_unique_combinations(records, True) == [
        CategoryCombination("Essentials", "Food", "Groceries"),
        CategoryCombination("Income", "Salary", ""),
        CategoryCombination("Essentials", "Food", "Household"),
    ]


def test_extract_unique_combinations_rolls_up_subcategories(aggregator):
    records = [
        _record("Essentials", "Food", "Groceries"),
        _record("Essentials", "Food", "Household"),
    ]

    assert aggregator.extract_unique_combinations(records, False) == [
        CategoryCombination("Essentials", "Food", "")
    ]


def test_extract_unique_combinations_skips_rows_without_category(aggregator):
    records = [_record("Essentials", ""), _record("", "Food"), _record("Income", "Salary")]

    assert aggregator.extract_unique_combinations(records, True) == [
        CategoryCombination("Income", "Salary")
    ]


def test_group_by_type_preserves_order(aggregator):
    combinations = [
        CategoryCombination("Essentials", "Food"),
        CategoryCombination("Income", "Salary"),
        CategoryCombination("Essentials", "Housing"),
        CategoryCombination("Gifts", "Birthday"),
    ]

    grouped = aggregator.group_by_type(combinations)

    assert list(grouped) == ["Essentials", "Income", "Gifts"]
    assert grouped["Essentials"] == (
        CategoryCombination("Essentials", "Food"),
        CategoryCombination("Essentials", "Housing"),
    )


def test_extract_shared_combinations(aggregator):
    records = [
        _record("Essentials", "Food", "Groceries", shared=True),
        _record("Essentials", "Food", "Household"),
        _record("Essentials", "Food", "Groceries", shared=True),
    ]

    assert aggregator.extract_shared_combinations(records, True) == [
        CategoryCombination("Essentials", "Food", "Groceries")
    ]
    # Rolled up, Household is not shared, so Food is not halved
    assert aggregator.extract_shared_combinations(records, False) == []


def test_rolled_up_combination_shared_only_when_every_record_is(aggregator):
    records = [
        _record("Essentials", "Food", "Groceries", amount="-50", shared=True),
        _record("Essentials", "Food", "Household", amount="-20", shared=True),
        _record("Essentials", "Housing", "Rent", amount="-900", shared=True),
        _record("Essentials", "Housing", "Repairs", amount="-100"),
    ]

    assert aggregator.extract_shared_combinations(records, False) == [
        CategoryCombination("Essentials", "Food", "")
    ]


def test_mixed_records_of_one_subcategory_are_not_shared(aggregator):
    records = [
        _record("Extra", "Travel", "Flights", shared=True),
        _record("Extra", "Travel", "Flights"),
    ]

    assert aggregator.extract_shared_combinations(records, True) == []


def test_get_combinations_is_memoized(aggregator, monkeypatch):
    records = [_record("Income", "Salary")]
    calls = []
    original = aggregator.extract_unique_combinations

    def counting(*args):
        calls.append(args)
        return original(*args)

    monkeypatch.setattr(aggregator, "extract_unique_combinations", counting)

    first = aggregator.get_combinations(records, True)
    second = aggregator.get_combinations(records, True)

    assert first == second == [CategoryCombination("Income", "Salary")]
    assert len(calls) == 1


def test_toggle_states_use_distinct_cache_keys(aggregator, cache_store):
    records = [_record("Essentials", "Food", "Groceries", amount="-50")]

    with_sub = aggregator.get_combinations(records, True)
    without_sub = aggregator.get_combinations(records, False)

    assert with_sub == [CategoryCombination("Essentials", "Food", "Groceries")]
    assert without_sub == [CategoryCombination("Essentials", "Food", "")]
    assert "lg_finance_overview_categories_with_sub" in cache_store.memory
    assert "lg_finance_overview_categories_without_sub" in cache_store.memory


def test_grouped_combinations_cold_and_warm_agree(config, full_rows):
    durable = DictBackend()
    cold = LedgerAggregator(config, CacheStore(config.cache, durable=durable))
    columns = cold.validate_structure(full_rows[0])
    records = cold.to_records(full_rows[1:], columns)

    combinations = cold.get_combinations(records, True)
    grouped_cold = cold.get_grouped_combinations(combinations, True)

    warm = LedgerAggregator(config, CacheStore(config.cache, durable=durable))
    grouped_warm = warm.get_grouped_combinations(warm.get_combinations([], True), True)

    assert grouped_warm == grouped_cold
    assert list(grouped_warm) == ["Income", "Essentials", "Wants/Pleasure", "Extra", "Savings"]


def test_disabled_cache_gives_same_derivations(config, full_rows):
    enabled = LedgerAggregator(config, CacheStore(config.cache))
    disabled = LedgerAggregator(config, CacheStore(CacheSettings(enabled=False)))
    columns = enabled.validate_structure(full_rows[0])
    records = enabled.to_records(full_rows[1:], columns)

    for show in (True, False):
        assert enabled.get_combinations(records, show) == disabled.get_combinations(records, show)
        assert enabled.get_shared_combinations(records, show) == disabled.get_shared_combinations(records, show)


def test_invalidate_drops_both_toggle_states(aggregator, cache_store):
    records = [_record("Income", "Salary")]
    aggregator.get_combinations(records, True)
    aggregator.get_combinations(records, False)

    aggregator.invalidate()

    assert len(cache_store.memory) == 0
