"""
Data models for the Catalog Cross-Filter Explorer.
Defines the core data structures shared by loading, filtering, aggregation and rendering.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Enum gives us a closed set of content types and selection dimensions
from enum import Enum  # string-valued enumerations
# Import typing helpers for precise and self-documenting types
from typing import Dict, FrozenSet, List, Optional, Tuple, Union  # containers and optionals


# Sentinel used by the genre and rating controls to mean "no constraint"
ALL = "All"
# Default rating label for rows that have none
UNKNOWN_RATING = "Unknown"


class ContentType(str, Enum):
	"""The two kinds of title in the catalog."""
	MOVIE = "Movie"
	SERIES = "Series"

	@classmethod
	def from_label(cls, label: Optional[str]) -> Optional["ContentType"]:
		"""Map a raw type label ("Movie", "TV Show", ...) to a ContentType, or None if unknown."""
		if not label:
			return None
		key = label.strip().lower()
		if key == "movie":
			return cls.MOVIE
		if key in ("tv show", "series", "show", "tv series"):
			return cls.SERIES
		return None


class SelectionDimension(str, Enum):
	"""Dimensions that are written only through chart clicks."""
	COUNTRY = "country"
	CONTENT_TYPE = "content_type"
	DIRECTOR = "director"


@dataclass(frozen=True)
class TitleRecord:
	"""
	Represents a single catalog title after normalization.
	Multi-valued fields are tuples so records stay hashable and immutable.
	"""
	id: str  # opaque unique identifier (show_id)
	content_type: ContentType  # Movie or Series
	title: str  # free-text title, original casing kept for display
	release_year: int  # release year as a number (e.g., 2020)
	directors: Tuple[str, ...] = ()  # director names, first-seen order
	countries: Tuple[str, ...] = ()  # country names, first-seen order
	genres: Tuple[str, ...] = ()  # genre labels from listed_in
	rating: str = UNKNOWN_RATING  # content rating label (e.g., "PG-13")
	runtime_raw: str = ""  # raw duration text ("90 min" or "2 Seasons"), parsed on demand
	cast: Tuple[str, ...] = ()  # cast members, kept for display only
	date_added: str = ""  # date the title was added to the catalog (raw text)
	description: str = ""  # synopsis text


# Year constraint: a single year, an inclusive (min, max) range, or None for no constraint
YearFilter = Optional[Union[int, Tuple[int, int]]]
# Rating constraint: a single label, the ALL sentinel, or a set of labels (multi-checkbox)
RatingFilter = Union[str, FrozenSet[str]]


@dataclass
class FilterState:
	"""
	The live filter configuration of one dashboard session.
	Year, genre and rating come from the controls; the three selected_* fields
	are only ever written by the selection toggle.
	"""
	year: YearFilter = None
	genre: str = ALL
	rating: RatingFilter = ALL
	selected_country: Optional[str] = None
	selected_content_type: Optional[ContentType] = None
	selected_director: Optional[str] = None


# Maps each click dimension onto the FilterState attribute that holds it
_SELECTION_FIELDS: Dict[SelectionDimension, str] = {
	SelectionDimension.COUNTRY: "selected_country",
	SelectionDimension.CONTENT_TYPE: "selected_content_type",
	SelectionDimension.DIRECTOR: "selected_director",
}


def selection_field(dimension: SelectionDimension) -> str:
	"""Name of the FilterState attribute backing a selection dimension."""
	return _SELECTION_FIELDS[dimension]


@dataclass(frozen=True)
class SelectionEvent:
	"""A click on a chart element: which dimension and which value was clicked."""
	dimension: SelectionDimension
	value: str


@dataclass(frozen=True)
class FilterOptions:
	"""Values used to populate the year/genre/rating controls."""
	min_year: Optional[int]
	max_year: Optional[int]
	genres: List[str]  # sorted, without the ALL sentinel
	ratings: List[str]  # sorted, without the ALL sentinel


@dataclass
class KpiSummary:
	"""Headline counters; averages are None when nothing could be parsed."""
	total: int = 0
	movies: int = 0
	series: int = 0
	avg_movie_minutes: Optional[int] = None
	avg_series_seasons: Optional[float] = None


@dataclass(frozen=True)
class RankedCount:
	"""A label with its count, used for top-N rankings."""
	label: str
	count: int


@dataclass(frozen=True)
class HistogramBin:
	"""One equal-width bin: [lower, upper), the last bin is closed on the right."""
	lower: float
	upper: float
	count: int


@dataclass
class Histogram:
	"""Binned distribution of numeric values; has_data is False for the empty case."""
	bins: List[HistogramBin] = field(default_factory=list)
	min_value: Optional[float] = None
	max_value: Optional[float] = None

	@property
	def has_data(self) -> bool:
		return bool(self.bins)

	@property
	def total(self) -> int:
		return sum(b.count for b in self.bins)

	@classmethod
	def empty(cls) -> "Histogram":
		return cls()


@dataclass
class DashboardSnapshot:
	"""All aggregate views produced by one refresh, in render order."""
	state: FilterState
	record_count: int
	kpis: KpiSummary
	country_rollup: Dict[str, int]
	type_rollup: Dict[str, int]
	year_trend: List[Tuple[int, int]]
	top_directors: List[RankedCount]
	runtime_histogram: Histogram
	season_distribution: List[Tuple[int, int]]
	word_frequencies: List[RankedCount]
