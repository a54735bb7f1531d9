"""Overview orchestration domain service."""

from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, Optional

from ledgergrid.cache.store import CacheStore
from ledgergrid.config import OverviewConfig
from ledgergrid.database.base import SettingsStore
from ledgergrid.domain.aggregation import LedgerAggregator
from ledgergrid.domain.entities import BuildResult, EditEvent, OverviewLayout, RowKind
from ledgergrid.domain.errors import StructureError, empty_ledger
from ledgergrid.domain.formulas import FormulaCompiler
from ledgergrid.domain.layout import OverviewLayoutBuilder
from ledgergrid.ledger.base import LedgerSource
from ledgergrid.logging_setup import get_logger
from ledgergrid.notifications import Notifier
from ledgergrid.render.base import Renderer
from ledgergrid.utils.flags import coerce_bool

_logger = get_logger("ledgergrid.overview")


class OverviewAnalyzer(ABC):
    """Downstream pass run after a layout has been rendered."""

    @abstractmethod
    def analyze(self, layout: OverviewLayout) -> None:
        pass


class SummaryAnalyzer(OverviewAnalyzer):
    """Logs what a rendered overview contains."""

    def __init__(self):
        self.last_summary: dict[str, Any] = {}

    def analyze(self, layout: OverviewLayout) -> None:
        counts = Counter(row.kind.value for row in layout.rows)
        sections = [
            row.label
            for row in layout.rows_of_kind(RowKind.SUBTOTAL)
            if row.label.startswith("Total ")
        ]
        self.last_summary = {
            "rows": layout.last_row,
            "kinds": dict(counts),
            "sections": sections,
        }
        _logger.info(
            "Overview has %d rows (%d category rows) across %s",
            layout.last_row,
            counts.get(RowKind.CATEGORY.value, 0),
            ", ".join(sections) or "no sections",
        )


class OverviewService:
    """Service driving a full overview build."""

    def __init__(
        self,
        config: OverviewConfig,
        ledger: LedgerSource,
        cache: CacheStore,
        renderer: Renderer,
        settings: SettingsStore,
        notifier: Notifier,
        analyzer: Optional[OverviewAnalyzer] = None,
    ):
        """Initialize overview service.

        Args:
            config: Overview configuration, threaded to every component
            ledger: Source of the raw ledger rows
            cache: Cache store for the combination derivations
            renderer: Target the finished layout is handed to
            settings: Preference store holding the subcategory toggle
            notifier: Progress/success/error notices
            analyzer: Optional pass run after a successful render
        """
        self.config = config
        self.ledger = ledger
        self.cache = cache
        self.renderer = renderer
        self.settings = settings
        self.notifier = notifier
        self.analyzer = analyzer
        self.aggregator = LedgerAggregator(config, cache)
        self.compiler = FormulaCompiler(config.date_format)

    def show_subcategories(self) -> bool:
        toggle = self.config.toggle
        return self.settings.get_boolean_value(toggle.preference_key, toggle.default)

    def build(self) -> BuildResult:
        """Rebuild the overview from the current ledger.

        Returns:
            BuildResult with the rendered layout

        Raises:
            StructureError: If the ledger lacks a required column
        """
        self.notifier.show_progress("Generating financial overview...")
        try:
            result = self._build()
        except Exception as e:
            _logger.exception("Failed to generate overview")
            self.notifier.show_error("Error generating overview", str(e))
            raise

        self.notifier.show_success("Financial overview generated successfully!")
        return result

    def _build(self) -> BuildResult:
        # A full rebuild always reflects the freshest ledger
        self.cache.invalidate_all()
        show_subcategories = self.show_subcategories()

        rows = self.ledger.get_all_rows()
        if not rows:
            raise StructureError(empty_ledger(self.ledger.name))

        columns = self.aggregator.validate_structure(rows[0])
        records = self.aggregator.to_records(rows[1:], columns)

        combinations = self.aggregator.get_combinations(records, show_subcategories)
        grouped = self.aggregator.get_grouped_combinations(
            combinations, show_subcategories
        )
        shared = self.aggregator.get_shared_combinations(records, show_subcategories)

        builder = OverviewLayoutBuilder(
            self.config, self.compiler, columns, transaction_sheet=self.ledger.name
        )
        layout = builder.build(grouped, show_subcategories, shared)

        self.renderer.render(layout)
        _logger.info(
            "Rendered overview: %d combinations, %d rows, subcategories %s",
            len(combinations),
            layout.last_row,
            "shown" if show_subcategories else "hidden",
        )

        if self.analyzer is not None:
            self.analyzer.analyze(layout)

        return BuildResult(layout=layout, last_row=layout.last_row)

    def on_preference_toggled(self, new_value: Any) -> BuildResult:
        """Persist the subcategory preference and rebuild."""
        toggle = self.config.toggle
        show = coerce_bool(new_value, toggle.default)
        self.settings.set_value(toggle.preference_key, show)
        _logger.info("Sub-categories %s", "shown" if show else "hidden")
        return self.build()

    def handle_edit(self, event: EditEvent) -> Optional[BuildResult]:
        """React to a cell edit. Only the toggle checkbox triggers a rebuild."""
        if event.sheet_name != self.config.overview_sheet:
            return None
        if event.cell.strip().upper() != self.config.toggle.checkbox_cell.upper():
            return None
        return self.on_preference_toggled(event.value)
