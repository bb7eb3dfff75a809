"""
Geographic join module.
Matches country rollup keys against the region names of a boundary dataset
(GeoJSON FeatureCollection) so the map adapter knows where to draw each bubble.
Projection and path geometry stay with the map adapter.
"""

import json  # read GeoJSON
from dataclasses import dataclass  # lightweight result container
from pathlib import Path  # filesystem-safe paths
from typing import Dict, Iterable, List, Optional  # type annotations

from rapidfuzz import process, fuzz  # fuzzy name matching

from loguru import logger  # console logging

from .data_loader import DataLoadError  # shared load failure type


DEFAULT_MATCH_THRESHOLD = 85  # minimum WRatio score for a fuzzy match


@dataclass(frozen=True)
class CountryBubble:
	country: str  # rollup key; this is the value a click selects
	count: int  # titles for this country in the filtered subset
	feature: str  # matched region name in the boundary dataset


class GeoJoiner:
	"""
	Resolves catalog country names to boundary-region names.
	Exact (case-insensitive) matches win; otherwise the best fuzzy match above
	the threshold is used. Resolutions are memoized per joiner.
	"""

	def __init__(self, feature_names: Iterable[str], threshold: int = DEFAULT_MATCH_THRESHOLD):
		self.feature_names = list(dict.fromkeys(n for n in feature_names if n))  # unique, ordered
		self.threshold = threshold
		self._by_lower = {n.lower(): n for n in self.feature_names}  # exact lookup
		self._cache: Dict[str, Optional[str]] = {}
		logger.debug(f"[GeoJoin] Initialized with {len(self.feature_names)} regions")

	@classmethod
	def from_geojson(cls, filepath: str, threshold: int = DEFAULT_MATCH_THRESHOLD) -> "GeoJoiner":
		"""Build a joiner from a FeatureCollection whose features carry properties.name (or NAME)."""
		filepath = Path(filepath)
		if not filepath.exists():
			raise FileNotFoundError(f"Boundary file not found: {filepath}")
		try:
			with open(filepath, 'r', encoding='utf-8') as f:
				data = json.load(f)
		except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
			raise DataLoadError(f"Could not read boundary file {filepath}: {e}") from e

		names = []
		for feature in data.get('features', []) if isinstance(data, dict) else []:
			props = feature.get('properties') or {}
			name = props.get('name') or props.get('NAME')
			if name:
				names.append(str(name))
		logger.info(f"[GeoJoin] Loaded {len(names)} regions from {filepath}")
		return cls(names, threshold=threshold)

	def resolve(self, country: str) -> Optional[str]:
		"""Return the region name for a catalog country, or None when nothing is close enough."""
		if country in self._cache:
			return self._cache[country]

		match = self._by_lower.get(country.strip().lower())
		if match is None and self.feature_names:
			best = process.extractOne(country, self.feature_names, scorer=fuzz.WRatio)
			if best and best[1] >= self.threshold:
				match = best[0]
				logger.debug(f"[GeoJoin] Fuzzy match: '{country}' -> '{match}' (score={best[1]:.0f})")
		if match is None:
			logger.debug(f"[GeoJoin] No region for '{country}'")

		self._cache[country] = match
		return match

	def bubbles(self, country_rollup: Dict[str, int]) -> List[CountryBubble]:
		"""Bubbles for every rollup entry that resolves to a region, in rollup order."""
		out = []
		for country, count in country_rollup.items():
			feature = self.resolve(country)
			if feature is not None:
				out.append(CountryBubble(country=country, count=count, feature=feature))
		return out
