"""
Unit tests for GeoJoiner: exact and fuzzy country-to-region resolution.
Run: python tests/test_geo_join.py
"""

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

import pytest

from src.data_loader import DataLoadError
from src.geo_join import CountryBubble, GeoJoiner

REGIONS = ["United States of America", "United Kingdom", "Germany", "India", "South Africa"]


def test_exact_match_is_case_insensitive():
	joiner = GeoJoiner(REGIONS)
	assert joiner.resolve("india") == "India"
	assert joiner.resolve("Germany") == "Germany"


def test_fuzzy_match():
	joiner = GeoJoiner(REGIONS)
	assert joiner.resolve("United States") == "United States of America"


def test_unresolved_country():
	joiner = GeoJoiner(REGIONS)
	assert joiner.resolve("Atlantis") is None


def test_bubbles_keep_rollup_keys():
	joiner = GeoJoiner(REGIONS)
	bubbles = joiner.bubbles({"United States": 3, "Atlantis": 2, "India": 1})
	assert bubbles == [
		CountryBubble(country="United States", count=3, feature="United States of America"),
		CountryBubble(country="India", count=1, feature="India"),
	]


def test_empty_joiner():
	assert GeoJoiner([]).bubbles({"India": 1}) == []


def test_from_geojson(tmp_path):
	path = tmp_path / "world.geojson"
	path.write_text(json.dumps({
		"type": "FeatureCollection",
		"features": [
			{"type": "Feature", "properties": {"name": "India"}, "geometry": None},
			{"type": "Feature", "properties": {"NAME": "Germany"}, "geometry": None},
			{"type": "Feature", "properties": {}, "geometry": None},
		],
	}), encoding="utf-8")
	joiner = GeoJoiner.from_geojson(str(path))
	assert joiner.feature_names == ["India", "Germany"]


def test_from_geojson_errors(tmp_path):
	with pytest.raises(FileNotFoundError):
		GeoJoiner.from_geojson(str(tmp_path / "missing.geojson"))
	bad = tmp_path / "bad.geojson"
	bad.write_text("{not json", encoding="utf-8")
	with pytest.raises(DataLoadError):
		GeoJoiner.from_geojson(str(bad))


def main():
	print("Running GeoJoiner tests...")
	test_exact_match_is_case_insensitive()
	test_fuzzy_match()
	test_unresolved_country()
	test_bubbles_keep_rollup_keys()
	test_empty_joiner()
	print("All GeoJoiner tests passed!")


if __name__ == '__main__':
	main()
