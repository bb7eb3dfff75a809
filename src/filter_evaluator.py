"""
Filter evaluation module.
Applies the active FilterState predicates to the RecordStore in a fixed order.
"""

from typing import Callable, Iterable, List, Tuple  # type annotations

from loguru import logger  # console logging

from .models import ALL, FilterState, TitleRecord  # records and state


Predicate = Callable[[TitleRecord], bool]


class FilterEvaluator:
	"""
	Builds the predicate chain for a FilterState and runs it over a record collection.
	Each predicate is skipped when its filter is unset or at the ALL sentinel.
	Matching on countries, genres and directors is exact per split token.
	"""

	def predicates(self, state: FilterState, ignore_year: bool = False) -> List[Tuple[str, Predicate]]:
		"""Return the (name, predicate) pairs that are active for this state, in evaluation order."""
		active: List[Tuple[str, Predicate]] = []

		# 1) Year: single value equality or inclusive range
		if not ignore_year and state.year is not None:
			if isinstance(state.year, tuple):
				start, end = state.year
				active.append(("year", lambda r: start <= r.release_year <= end))
			else:
				year = state.year
				active.append(("year", lambda r: r.release_year == year))

		# 2) Genre membership
		if state.genre and state.genre != ALL:
			genre = state.genre
			active.append(("genre", lambda r: genre in r.genres))

		# 3) Rating equality (or membership for the multi-checkbox control)
		rating = state.rating
		if isinstance(rating, frozenset):
			if rating:
				active.append(("rating", lambda r: r.rating in rating))
		elif rating and rating != ALL:
			active.append(("rating", lambda r: r.rating == rating))

		# 4) Country membership
		if state.selected_country is not None:
			country = state.selected_country
			active.append(("country", lambda r: country in r.countries))

		# 5) Content type equality
		if state.selected_content_type is not None:
			content_type = state.selected_content_type
			active.append(("content_type", lambda r: r.content_type == content_type))

		# 6) Director membership
		if state.selected_director is not None:
			director = state.selected_director
			active.append(("director", lambda r: director in r.directors))

		return active

	def filter(self, records: Iterable[TitleRecord], state: FilterState, ignore_year: bool = False) -> List[TitleRecord]:
		"""Return the records passing every active predicate, preserving store order."""
		subset = list(records)
		for name, predicate in self.predicates(state, ignore_year=ignore_year):
			before = len(subset)
			subset = [r for r in subset if predicate(r)]
			logger.debug(f"[Filter] {name}: {before} -> {len(subset)}")
		return subset


_DEFAULT_EVALUATOR = FilterEvaluator()


def filter_records(records: Iterable[TitleRecord], state: FilterState, ignore_year: bool = False) -> List[TitleRecord]:
	"""Module-level shortcut around a shared FilterEvaluator."""
	return _DEFAULT_EVALUATOR.filter(records, state, ignore_year=ignore_year)
