"""
Selection module.
Click-to-select / click-again-to-deselect semantics for chart-driven filters,
plus the direct writes used by the year, genre and rating controls.
"""

from typing import Iterable, Optional, Tuple, Union  # type annotations

from loguru import logger  # console logging

from .models import (  # filter state and its value types
	ALL,
	ContentType,
	FilterState,
	SelectionDimension,
	SelectionEvent,
	selection_field,
)


def _coerce_value(dimension: SelectionDimension, value):
	# Content type clicks arrive as labels ("Movie", "TV Show"); store the enum
	if dimension is SelectionDimension.CONTENT_TYPE and not isinstance(value, ContentType):
		parsed = ContentType.from_label(str(value))
		if parsed is None:
			raise ValueError(f"Unknown content type: {value!r}")
		return parsed
	if isinstance(value, str):
		value = value.strip()  # record tokens are trimmed at load
	if not value:
		raise ValueError(f"Selection value for {dimension.value} cannot be empty")
	return value


def toggle(state: FilterState, dimension: Union[SelectionDimension, str], value) -> FilterState:
	"""
	Toggle a click-driven selection on the given state (mutated in place).
	Clicking the held value clears it; clicking any other value replaces it.
	"""
	dimension = SelectionDimension(dimension)  # accepts "country", etc.
	value = _coerce_value(dimension, value)
	attr = selection_field(dimension)
	current = getattr(state, attr)
	new_value = None if current == value else value
	setattr(state, attr, new_value)
	logger.debug(f"[Selection] {dimension.value}: {current!r} -> {new_value!r}")
	return state


def apply_event(state: FilterState, event: SelectionEvent) -> FilterState:
	"""Apply a SelectionEvent emitted by a render adapter."""
	return toggle(state, event.dimension, event.value)


def clear_selections(state: FilterState) -> FilterState:
	"""Drop every click-driven selection."""
	for dimension in SelectionDimension:
		setattr(state, selection_field(dimension), None)
	logger.debug("[Selection] Cleared all chart selections")
	return state


def set_year(state: FilterState, year: Optional[Union[int, Tuple[int, int]]]) -> FilterState:
	"""Write the year control: a single year, an inclusive (min, max) pair, or None."""
	if isinstance(year, (list, tuple)):
		if len(year) != 2:
			raise ValueError(f"Year range must have two bounds, got {year!r}")
		lo, hi = int(year[0]), int(year[1])
		if lo > hi:  # normalize order
			lo, hi = hi, lo
		state.year = (lo, hi)
	elif year is None:
		state.year = None
	else:
		state.year = int(year)
	return state


def set_genre(state: FilterState, genre: Optional[str]) -> FilterState:
	"""Write the genre control; None or an empty value means every genre."""
	state.genre = genre.strip() if genre and genre.strip() else ALL
	return state


def set_rating(state: FilterState, rating: Union[None, str, Iterable[str]]) -> FilterState:
	"""
	Write the rating control. Accepts a single label, the ALL sentinel,
	or the set of checked labels from the multi-checkbox control.
	"""
	if rating is None:
		state.rating = ALL
	elif isinstance(rating, str):
		state.rating = rating.strip() or ALL
	else:
		checked = frozenset(r.strip() for r in rating if r and r.strip())
		state.rating = checked if checked else ALL
	return state
