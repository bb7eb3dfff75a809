"""
Unit tests for DataLoader: row normalization, malformed-row dropping, and file ingestion.
Run: python tests/test_data_loader.py
"""

import dataclasses
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

import pytest

from src.data_loader import DataLoader, DataLoadError, load
from src.models import ALL, ContentType

SAMPLE_CSV = ROOT / 'data' / 'sample_titles.csv'


def make_row(**overrides):
	row = {
		'show_id': 's1',
		'type': 'Movie',
		'title': 'Sample',
		'director': '',
		'cast': '',
		'country': '',
		'date_added': '',
		'release_year': '2020',
		'rating': 'PG',
		'duration': '90 min',
		'listed_in': 'Dramas',
		'description': '',
	}
	row.update(overrides)
	return row


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def test_row_normalization():
	store = load([make_row(
		director=' Alex Woo, Stanley Moore ,',
		country='United States, Ghana,, Ghana',
		listed_in='Comedies, Dramas',
		cast='A, B',
	)])
	record = store.records[0]
	assert_equal(record.directors, ('Alex Woo', 'Stanley Moore'), "directors split and trimmed")
	assert_equal(record.countries, ('United States', 'Ghana'), "countries split, empties and duplicates dropped")
	assert_equal(record.genres, ('Comedies', 'Dramas'), "genres from listed_in")
	assert_equal(record.cast, ('A', 'B'), "cast split")
	assert_equal(record.release_year, 2020, "year parsed")
	assert_equal(record.content_type, ContentType.MOVIE, "type parsed")


def test_defaults():
	store = load([make_row(rating='', duration=None, director=None, country=None, description=None)])
	record = store.records[0]
	assert_equal(record.rating, 'Unknown', "missing rating defaults to Unknown")
	assert_equal(record.runtime_raw, '', "missing duration becomes empty text")
	assert_equal(record.directors, (), "missing directors become empty")
	assert_equal(record.countries, (), "missing countries become empty")
	assert_equal(record.description, '', "missing description becomes empty text")


def test_type_labels():
	store = load([make_row(type='TV Show'), make_row(type='movie'), make_row(type='Series')])
	assert_equal([r.content_type for r in store], [ContentType.SERIES, ContentType.MOVIE, ContentType.SERIES], "type aliases")


def test_malformed_rows_dropped():
	rows = [
		make_row(show_id='ok'),
		make_row(show_id='no-title', title='  '),
		make_row(show_id='no-type', type=''),
		make_row(show_id='odd-type', type='Podcast'),
		make_row(show_id='no-year', release_year=''),
		make_row(show_id='bad-year', release_year='twenty'),
		make_row(show_id='float-year', release_year='2019.0'),
		make_row(show_id='int-year', release_year=2018),
	]
	store = load(rows)
	assert_equal([r.id for r in store], ['ok', 'float-year', 'int-year'], "only well-formed rows admitted")
	assert_equal(store.records[1].release_year, 2019, "float text year accepted")


def test_missing_show_id_gets_positional_id():
	store = load([make_row(show_id=''), make_row(show_id=None)])
	assert_equal([r.id for r in store], ['row-0', 'row-1'], "positional ids")


def test_store_is_frozen():
	store = load([make_row()])
	with pytest.raises(dataclasses.FrozenInstanceError):
		store.records[0].title = 'changed'
	assert isinstance(store.records, tuple)


def test_options_and_initial_state():
	store = load([
		make_row(release_year='2019', listed_in='Dramas', rating='PG'),
		make_row(release_year='2021', listed_in='Comedies, Dramas', rating='R'),
	])
	opts = store.options()
	assert_equal((opts.min_year, opts.max_year), (2019, 2021), "year bounds")
	assert_equal(opts.genres, ['Comedies', 'Dramas'], "sorted genres")
	assert_equal(opts.ratings, ['PG', 'R'], "sorted ratings")

	state = store.initial_state()
	assert_equal(state.year, 2021, "starts at latest year")
	assert_equal((state.genre, state.rating), (ALL, ALL), "no genre/rating constraint")
	assert state.selected_country is None and state.selected_content_type is None and state.selected_director is None


def test_empty_store_options():
	store = load([])
	opts = store.options()
	assert_equal((opts.min_year, opts.max_year), (None, None), "no bounds for empty store")
	assert_equal(store.initial_state().year, None, "no year constraint for empty store")


def test_load_sample_csv():
	store = DataLoader().load_titles_from_csv(str(SAMPLE_CSV))
	assert_equal(len(store), 13, "row without release year dropped")
	ids = [r.id for r in store]
	assert 's13' not in ids
	sankofa = next(r for r in store if r.id == 's5')
	assert_equal(len(sankofa.countries), 6, "multi-country row split")


def test_missing_file_raises():
	with pytest.raises(FileNotFoundError):
		DataLoader().load_titles_from_csv(str(ROOT / 'data' / 'does_not_exist.csv'))


def test_csv_without_required_columns(tmp_path):
	path = tmp_path / 'bad.csv'
	path.write_text("show_id,name\ns1,foo\n", encoding='utf-8')
	with pytest.raises(DataLoadError):
		DataLoader().load_titles_from_csv(str(path))


def test_load_jsonl_skips_invalid_lines(tmp_path):
	path = tmp_path / 'titles.jsonl'
	path.write_text(
		'{"show_id": "a", "type": "Movie", "title": "One", "release_year": 2020}\n'
		'not json\n'
		'\n'
		'["not", "an", "object"]\n'
		'{"show_id": "b", "type": "TV Show", "title": "Two", "release_year": "2021", "country": ["France", "Spain"]}\n',
		encoding='utf-8',
	)
	store = DataLoader().load_titles_from_jsonl(str(path))
	assert_equal([r.id for r in store], ['a', 'b'], "valid objects loaded")
	assert_equal(store.records[1].countries, ('France', 'Spain'), "list-valued field accepted")


def main():
	print("Running DataLoader tests...")
	test_row_normalization()
	test_defaults()
	test_type_labels()
	test_malformed_rows_dropped()
	test_missing_show_id_gets_positional_id()
	test_options_and_initial_state()
	test_empty_store_options()
	test_load_sample_csv()
	print("All DataLoader tests passed!")


if __name__ == '__main__':
	main()
