"""Overview configuration.

The configuration is an immutable value built once (defaults, optionally merged
with a JSON override file) and passed explicitly to every component.
"""

import json
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ledgergrid.domain.errors import ConfigError

# Grid geometry: A..D hold labels, E..P the twelve months, Q total, R average.
LABEL_COLUMNS = 4
FIRST_MONTH_COLUMN = 5
MONTH_COUNT = 12
TOTAL_COLUMN = FIRST_MONTH_COLUMN + MONTH_COUNT
AVERAGE_COLUMN = TOTAL_COLUMN + 1


@dataclass(frozen=True)
class TransactionTypes:
    """Names of the transaction types the overview knows about."""

    income: str = "Income"
    essentials: str = "Essentials"
    wants: str = "Wants/Pleasure"
    extra: str = "Extra"
    savings: str = "Savings"


@dataclass(frozen=True)
class CacheSettings:
    """Cache switches, default TTL and the base keys used by the aggregator."""

    enabled: bool = True
    expiry_seconds: int = 21600
    namespace: str = "lg_"
    category_combinations_key: str = "finance_overview_categories"
    grouped_combinations_key: str = "finance_overview_grouped"
    shared_combinations_key: str = "finance_overview_shared"

    def key_for(self, base_key: str, show_subcategories: bool) -> str:
        """Return the toggle-specific variant of a base key."""
        suffix = "with_sub" if show_subcategories else "without_sub"
        return f"{base_key}_{suffix}"

    def known_keys(self) -> tuple[str, ...]:
        """Every key the aggregator can write, for both toggle states."""
        base_keys = (
            self.category_combinations_key,
            self.grouped_combinations_key,
            self.shared_combinations_key,
        )
        return tuple(
            self.key_for(base, show)
            for base in base_keys
            for show in (True, False)
        )


@dataclass(frozen=True)
class ToggleSettings:
    """Location and wording of the show-subcategories control."""

    label_cell: str = "S1"
    checkbox_cell: str = "T1"
    label_text: str = "Show Sub-Categories"
    note_text: str = "Toggle to show or hide sub-categories in the overview sheet"
    preference_key: str = "ShowSubCategories"
    default: bool = True


@dataclass(frozen=True)
class StyleSettings:
    """Opaque presentation values handed to the renderer."""

    column_widths: Mapping[str, int] = field(
        default_factory=lambda: {
            "type": 120,
            "category": 120,
            "subcategory": 150,
            "shared": 60,
            "month": 60,
            "average": 80,
        }
    )
    type_colors: Mapping[str, str] = field(
        default_factory=lambda: {
            "Income": "#2E7D32",
            "Essentials": "#1976D2",
            "Wants/Pleasure": "#FFA000",
            "Extra": "#7B1FA2",
            "Savings": "#1565C0",
            "default": "#424242",
        }
    )
    header_background: str = "#C62828"
    total_background: str = "#BFBFBF"
    net_background: str = "#424242"
    border_color: str = "#FF8F00"

    def __post_init__(self):
        # Frozen dataclasses still hand out their dicts; expose read-only views
        for name in ("column_widths", "type_colors"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))


@dataclass(frozen=True)
class OverviewConfig:
    """Complete configuration for one overview build."""

    overview_sheet: str = "Overview"
    transactions_sheet: str = "Transactions"
    types: TransactionTypes = field(default_factory=TransactionTypes)
    type_order: tuple[str, ...] = (
        "Income",
        "Essentials",
        "Wants/Pleasure",
        "Extra",
        "Savings",
    )
    expense_types: tuple[str, ...] = ("Essentials", "Wants/Pleasure", "Extra")
    year: int = field(default_factory=lambda: date.today().year)
    date_format: str = "%Y-%m-%d"
    shared_column: str = "D"
    signed_amounts: bool = True
    cache: CacheSettings = field(default_factory=CacheSettings)
    toggle: ToggleSettings = field(default_factory=ToggleSettings)
    style: StyleSettings = field(default_factory=StyleSettings)

    @property
    def month_labels(self) -> tuple[str, ...]:
        return tuple(
            date(self.year, month, 1).strftime("%b-%y")
            for month in range(1, MONTH_COUNT + 1)
        )

    @property
    def headers(self) -> tuple[str, ...]:
        return (
            ("Type", "Category", "Sub-Category", "Shared?")
            + self.month_labels
            + ("Total", "Average")
        )

    def is_expense_type(self, type_name: str) -> bool:
        return type_name in self.expense_types


def _merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``source`` into a copy of ``target``; dicts merge, the rest replaces."""
    merged = dict(target)
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _build(cls, data: dict[str, Any]):
    known = {f.name: f for f in fields(cls)}
    unknown = set(data) - set(known)
    if unknown:
        raise ConfigError(
            f"Unknown {cls.__name__} option(s): {', '.join(sorted(unknown))}"
        )

    kwargs: dict[str, Any] = {}
    for name, value in data.items():
        field_type = known[name].type
        if is_dataclass(field_type) and isinstance(value, dict):
            kwargs[name] = _build(field_type, value)
        elif isinstance(value, list):
            kwargs[name] = tuple(value)
        else:
            kwargs[name] = value
    return cls(**kwargs)


def _as_dict(value: Any) -> Any:
    if is_dataclass(value):
        return {f.name: _as_dict(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {key: _as_dict(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return list(value)
    return value


def config_from_dict(overrides: dict[str, Any]) -> OverviewConfig:
    """Build a configuration from defaults deep-merged with ``overrides``."""
    defaults = _as_dict(OverviewConfig())
    return _build(OverviewConfig, _merge(defaults, overrides))


def load_config(path: Optional[str] = None) -> OverviewConfig:
    """Load configuration, merging a JSON override file onto the defaults.

    Args:
        path: Optional path to a JSON file. If None, defaults are returned.

    Returns:
        OverviewConfig instance

    Raises:
        ConfigError: If the file cannot be read or contains unknown options
    """
    if path is None:
        return OverviewConfig()

    config_path = Path(path)
    try:
        overrides = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read config file '{path}': {e}") from e

    if not isinstance(overrides, dict):
        raise ConfigError(f"Config file '{path}' must contain a JSON object")
    return config_from_dict(overrides)
