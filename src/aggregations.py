"""
Aggregation module.
Derives every dashboard view (KPIs, rollups, rankings, histograms, word counts)
from a filtered subset of TitleRecords. All functions are pure reductions:
an empty subset yields the view's empty representation, never an error.
"""

import re  # title tokenization
from collections import Counter  # insertion-ordered counting
from decimal import Decimal, ROUND_HALF_UP  # half-up rounding for averages
from typing import Dict, Iterable, List, Optional, Sequence, Tuple  # type annotations

from loguru import logger  # console logging

from .duration_parser import parse_minutes, parse_seasons  # soft duration parsing
from .models import (  # record and view types
	ContentType,
	Histogram,
	HistogramBin,
	KpiSummary,
	RankedCount,
	TitleRecord,
)


HISTOGRAM_BINS = 10  # equal-width bins for the run-time histogram
TOP_DIRECTORS = 10  # size of the director ranking
TOP_WORDS = 60  # size of the word-frequency table

# Tokens carrying no meaning on their own in a title
STOPWORDS = frozenset({
	"a", "an", "the", "and", "or", "but", "nor", "of", "in", "on", "at", "to", "for",
	"from", "by", "with", "without", "about", "into", "onto", "over", "under", "up",
	"down", "out", "off", "as", "is", "are", "was", "were", "be", "been", "am", "it",
	"its", "this", "that", "these", "those", "i", "me", "my", "you", "your", "he",
	"him", "his", "she", "her", "we", "us", "our", "they", "them", "their", "what",
	"who", "how", "why", "when", "where", "not", "no", "so", "do", "does", "did",
	"s", "t", "vs", "de", "la", "el", "le", "les", "los", "las", "del",
})

RE_NON_ALNUM = re.compile(r"[\W_]+")  # anything that is not a letter or digit


def _round_half_up(value: float, digits: int = 0):
	quantum = Decimal(1).scaleb(-digits)  # 1, 0.1, 0.01, ...
	rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
	return int(rounded) if digits == 0 else float(rounded)


def _movie_minutes(records: Iterable[TitleRecord]) -> List[int]:
	minutes = []
	for r in records:
		if r.content_type is not ContentType.MOVIE:
			continue
		value = parse_minutes(r.runtime_raw)
		if value is not None:
			minutes.append(value)
	return minutes


def _series_seasons(records: Iterable[TitleRecord]) -> List[int]:
	seasons = []
	for r in records:
		if r.content_type is not ContentType.SERIES:
			continue
		value = parse_seasons(r.runtime_raw)
		if value is not None:
			seasons.append(value)
	return seasons


def _top_n(counts: Counter, n: int) -> List[RankedCount]:
	# sorted() is stable, so equal counts keep first-encountered order
	ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
	return [RankedCount(label=label, count=count) for label, count in ranked[:n]]


def kpis(records: Sequence[TitleRecord]) -> KpiSummary:
	"""Totals per type plus average movie length and average series season count."""
	movies = sum(1 for r in records if r.content_type is ContentType.MOVIE)
	series = sum(1 for r in records if r.content_type is ContentType.SERIES)

	minutes = _movie_minutes(records)
	seasons = _series_seasons(records)

	avg_minutes: Optional[int] = _round_half_up(sum(minutes) / len(minutes)) if minutes else None
	avg_seasons: Optional[float] = _round_half_up(sum(seasons) / len(seasons), 1) if seasons else None

	return KpiSummary(
		total=len(records),
		movies=movies,
		series=series,
		avg_movie_minutes=avg_minutes,
		avg_series_seasons=avg_seasons,
	)


def type_rollup(records: Iterable[TitleRecord]) -> Dict[str, int]:
	"""Count of records per content type present in the subset."""
	return dict(Counter(r.content_type.value for r in records))


def country_rollup(records: Iterable[TitleRecord]) -> Dict[str, int]:
	"""Exploded count per country: a title listed under two countries counts once for each."""
	return dict(Counter(c for r in records for c in r.countries))


def director_rollup(records: Iterable[TitleRecord], top_n: int = TOP_DIRECTORS) -> List[RankedCount]:
	"""Exploded count per director, restricted to the top_n highest counts."""
	return _top_n(Counter(d for r in records for d in r.directors), top_n)


def runtime_histogram(records: Iterable[TitleRecord], bin_count: int = HISTOGRAM_BINS) -> Histogram:
	"""
	Bin movie lengths (minutes) into bin_count equal-width bins spanning the
	observed min and max of the subset. The last bin includes the max value.
	When every value is identical the bins are one minute wide, centered on it.
	"""
	values = _movie_minutes(records)
	if not values:
		return Histogram.empty()

	lo, hi = min(values), max(values)
	start, end = float(lo), float(hi)
	if start == end:
		start -= bin_count / 2
		end += bin_count / 2
	width = (end - start) / bin_count

	counts = [0] * bin_count
	for v in values:
		index = int((v - start) / width)
		counts[min(index, bin_count - 1)] += 1  # max value lands in the last bin

	bins = []
	for i, count in enumerate(counts):
		upper = end if i == bin_count - 1 else start + (i + 1) * width
		bins.append(HistogramBin(lower=start + i * width, upper=upper, count=count))
	return Histogram(bins=bins, min_value=lo, max_value=hi)


def season_distribution(records: Iterable[TitleRecord]) -> List[Tuple[int, int]]:
	"""(season_count, number_of_series) pairs sorted by season count."""
	return sorted(Counter(_series_seasons(records)).items())


def tokenize_title(title: str) -> List[str]:
	"""Lower-case, replace non-alphanumerics with spaces, split, drop stopwords."""
	cleaned = RE_NON_ALNUM.sub(" ", (title or "").lower())
	return [t for t in cleaned.split() if t and t not in STOPWORDS]


def word_frequencies(records: Iterable[TitleRecord], top_n: int = TOP_WORDS) -> List[RankedCount]:
	"""Most frequent title words across the subset."""
	counts: Counter = Counter()
	for r in records:
		counts.update(tokenize_title(r.title))
	return _top_n(counts, top_n)


def year_trend(records: Iterable[TitleRecord]) -> List[Tuple[int, int]]:
	"""
	(release_year, count) pairs sorted by year.
	Callers pass a subset evaluated without the year predicate.
	"""
	return sorted(Counter(r.release_year for r in records).items())


class AggregationEngine:
	"""
	Groups the aggregate functions behind one object so the dashboard can
	swap bin counts or ranking sizes without touching the functions.
	"""

	def __init__(
		self,
		histogram_bins: int = HISTOGRAM_BINS,
		top_directors: int = TOP_DIRECTORS,
		top_words: int = TOP_WORDS,
	):
		self.histogram_bins = histogram_bins
		self.top_directors = top_directors
		self.top_words = top_words

	def kpis(self, records: Sequence[TitleRecord]) -> KpiSummary:
		return kpis(records)

	def type_rollup(self, records: Sequence[TitleRecord]) -> Dict[str, int]:
		return type_rollup(records)

	def country_rollup(self, records: Sequence[TitleRecord]) -> Dict[str, int]:
		return country_rollup(records)

	def director_rollup(self, records: Sequence[TitleRecord]) -> List[RankedCount]:
		return director_rollup(records, self.top_directors)

	def runtime_histogram(self, records: Sequence[TitleRecord]) -> Histogram:
		hist = runtime_histogram(records, self.histogram_bins)
		if not hist.has_data:
			logger.debug("[Aggregations] No movie durations in subset; histogram empty")
		return hist

	def season_distribution(self, records: Sequence[TitleRecord]) -> List[Tuple[int, int]]:
		return season_distribution(records)

	def word_frequencies(self, records: Sequence[TitleRecord]) -> List[RankedCount]:
		return word_frequencies(records, self.top_words)

	def year_trend(self, records: Sequence[TitleRecord]) -> List[Tuple[int, int]]:
		return year_trend(records)
