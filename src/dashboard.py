"""
Dashboard session module.
Owns the RecordStore and the live FilterState of one dashboard session and
recomputes every view after each control change or chart click.
"""

from dataclasses import replace  # detach the state copy stored in snapshots
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union  # type annotations

from loguru import logger  # simple structured logger

from .aggregations import AggregationEngine  # view reductions
from .data_loader import DataLoader, RecordStore  # record construction
from .filter_evaluator import FilterEvaluator  # predicate chain
from .models import DashboardSnapshot, FilterState, SelectionDimension, SelectionEvent  # core data classes
from . import selection  # toggle semantics and control writes


RenderAdapter = Callable[[Any], None]

# Views in the order they are handed to render adapters: counters first, then charts
VIEW_ORDER: Tuple[str, ...] = (
	"kpis",
	"country_map",
	"type_pie",
	"year_trend",
	"top_directors",
	"runtime_histogram",
	"season_distribution",
	"word_cloud",
)

# Which snapshot attribute feeds which view
_VIEW_DATA = {
	"kpis": "kpis",
	"country_map": "country_rollup",
	"type_pie": "type_rollup",
	"year_trend": "year_trend",
	"top_directors": "top_directors",
	"runtime_histogram": "runtime_histogram",
	"season_distribution": "season_distribution",
	"word_cloud": "word_frequencies",
}


class DashboardSession:
	"""
	High-level API combining the filter state, the evaluator and the aggregation engine.
	Every mutation goes through this object and ends with a full refresh.
	"""
	def __init__(
		self,
		store: RecordStore,  # immutable catalog
		state: Optional[FilterState] = None,  # defaults to the store's initial state
		evaluator: Optional[FilterEvaluator] = None,
		engine: Optional[AggregationEngine] = None,
	):
		self.store = store
		self.state = state if state is not None else store.initial_state()
		self.evaluator = evaluator or FilterEvaluator()
		self.engine = engine or AggregationEngine()
		self._adapters: Dict[str, List[RenderAdapter]] = {view: [] for view in VIEW_ORDER}
		self.last_snapshot: Optional[DashboardSnapshot] = None
		logger.info(f"[Dashboard] Session ready with {len(store)} titles; initial state {self.state}")

	@classmethod
	def from_rows(cls, raw_rows: Iterable[Dict], **kwargs) -> "DashboardSession":
		return cls(DataLoader().load(raw_rows), **kwargs)

	@classmethod
	def from_csv(cls, filepath: str, **kwargs) -> "DashboardSession":
		"""Load a CSV export and open a session over it. Load errors propagate."""
		return cls(DataLoader().load_titles_from_csv(filepath), **kwargs)

	def register(self, view: str, adapter: RenderAdapter) -> None:
		"""Attach a render adapter to a view; it receives that view's data on each refresh."""
		if view not in self._adapters:
			raise ValueError(f"Unknown view '{view}'. Expected one of: {', '.join(VIEW_ORDER)}")
		self._adapters[view].append(adapter)

	def refresh(self) -> DashboardSnapshot:
		"""Re-evaluate the filters, recompute every view and forward each to its adapters."""
		state = self.state
		subset = self.evaluator.filter(self.store, state)  # shared subset for all views but the trend
		trend_subset = self.evaluator.filter(self.store, state, ignore_year=True)  # year predicate omitted

		snapshot = DashboardSnapshot(
			state=replace(state),
			record_count=len(subset),
			kpis=self.engine.kpis(subset),
			country_rollup=self.engine.country_rollup(subset),
			type_rollup=self.engine.type_rollup(subset),
			year_trend=self.engine.year_trend(trend_subset),
			top_directors=self.engine.director_rollup(subset),
			runtime_histogram=self.engine.runtime_histogram(subset),
			season_distribution=self.engine.season_distribution(subset),
			word_frequencies=self.engine.word_frequencies(subset),
		)
		logger.debug(f"[Dashboard] Refreshed: {len(subset)} of {len(self.store)} titles match")

		for view in VIEW_ORDER:
			data = getattr(snapshot, _VIEW_DATA[view])
			for adapter in self._adapters[view]:
				adapter(data)  # empty views are forwarded too

		self.last_snapshot = snapshot
		return snapshot

	# --- click-driven selections ---

	def toggle(self, dimension: Union[SelectionDimension, str], value) -> DashboardSnapshot:
		selection.toggle(self.state, dimension, value)
		return self.refresh()

	def handle(self, event: SelectionEvent) -> DashboardSnapshot:
		"""Consume a selection event emitted by a render adapter."""
		selection.apply_event(self.state, event)
		return self.refresh()

	def clear_selections(self) -> DashboardSnapshot:
		selection.clear_selections(self.state)
		return self.refresh()

	# --- control writes ---

	def set_year(self, year) -> DashboardSnapshot:
		selection.set_year(self.state, year)
		return self.refresh()

	def set_genre(self, genre: Optional[str]) -> DashboardSnapshot:
		selection.set_genre(self.state, genre)
		return self.refresh()

	def set_rating(self, rating) -> DashboardSnapshot:
		selection.set_rating(self.state, rating)
		return self.refresh()
