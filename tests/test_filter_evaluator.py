"""
Unit tests for FilterEvaluator: each predicate, pass-through sentinels, and the subset property.
Run: python tests/test_filter_evaluator.py
"""

import itertools
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from src.data_loader import load
from src.filter_evaluator import FilterEvaluator, filter_records
from src.models import ALL, ContentType, FilterState


def build_store():
	return load([
		{'show_id': 'a', 'type': 'Movie', 'title': 'A', 'release_year': '2020', 'country': 'United States, Canada', 'rating': 'PG', 'listed_in': 'Dramas', 'director': 'Ann Lee'},
		{'show_id': 'b', 'type': 'TV Show', 'title': 'B', 'release_year': '2020', 'country': 'United States', 'rating': 'PG', 'listed_in': 'TV Dramas', 'director': ''},
		{'show_id': 'c', 'type': 'Movie', 'title': 'C', 'release_year': '2019', 'country': 'India', 'rating': 'R', 'listed_in': 'Comedies, Dramas', 'director': 'Ann Lee, Bo Chan'},
		{'show_id': 'd', 'type': 'Movie', 'title': 'D', 'release_year': '2018', 'country': '', 'rating': '', 'listed_in': '', 'director': 'Ann Leeson'},
	])


def ids(records):
	return [r.id for r in records]


def passes(r, state):
	# Straightforward restatement of every predicate, used as a reference
	if isinstance(state.year, tuple) and not (state.year[0] <= r.release_year <= state.year[1]):
		return False
	if isinstance(state.year, int) and r.release_year != state.year:
		return False
	if state.genre != ALL and state.genre not in r.genres:
		return False
	if isinstance(state.rating, frozenset):
		if state.rating and r.rating not in state.rating:
			return False
	elif state.rating != ALL and r.rating != state.rating:
		return False
	if state.selected_country is not None and state.selected_country not in r.countries:
		return False
	if state.selected_content_type is not None and r.content_type != state.selected_content_type:
		return False
	if state.selected_director is not None and state.selected_director not in r.directors:
		return False
	return True


def test_no_constraints_returns_everything():
	store = build_store()
	assert ids(filter_records(store, FilterState())) == ['a', 'b', 'c', 'd']


def test_year_single_and_range():
	store = build_store()
	assert ids(filter_records(store, FilterState(year=2020))) == ['a', 'b']
	assert ids(filter_records(store, FilterState(year=(2018, 2019)))) == ['c', 'd']


def test_genre_membership():
	store = build_store()
	assert ids(filter_records(store, FilterState(genre='Dramas'))) == ['a', 'c']
	assert ids(filter_records(store, FilterState(genre=ALL))) == ['a', 'b', 'c', 'd']


def test_rating_equality_and_set():
	store = build_store()
	assert ids(filter_records(store, FilterState(rating='PG'))) == ['a', 'b']
	assert ids(filter_records(store, FilterState(rating='Unknown'))) == ['d']
	assert ids(filter_records(store, FilterState(rating=frozenset({'R', 'Unknown'})))) == ['c', 'd']
	assert ids(filter_records(store, FilterState(rating=frozenset()))) == ['a', 'b', 'c', 'd']


def test_country_exact_token():
	store = build_store()
	assert ids(filter_records(store, FilterState(selected_country='United States'))) == ['a', 'b']
	assert ids(filter_records(store, FilterState(selected_country='States'))) == []


def test_content_type():
	store = build_store()
	assert ids(filter_records(store, FilterState(selected_content_type=ContentType.SERIES))) == ['b']


def test_director_exact_token():
	store = build_store()
	# "Ann Lee" must not match "Ann Leeson"
	assert ids(filter_records(store, FilterState(selected_director='Ann Lee'))) == ['a', 'c']


def test_combined_and_empty():
	store = build_store()
	state = FilterState(year=2020, genre='Dramas', rating='PG', selected_country='Canada', selected_content_type=ContentType.MOVIE, selected_director='Ann Lee')
	assert ids(filter_records(store, state)) == ['a']
	state.selected_country = 'India'
	assert filter_records(store, state) == []


def test_ignore_year():
	store = build_store()
	state = FilterState(year=2020, genre='Dramas')
	assert ids(filter_records(store, state, ignore_year=True)) == ['a', 'c']


def test_predicate_order():
	state = FilterState(year=2020, genre='Dramas', rating='PG', selected_country='X', selected_content_type=ContentType.MOVIE, selected_director='Y')
	names = [name for name, _ in FilterEvaluator().predicates(state)]
	assert names == ['year', 'genre', 'rating', 'country', 'content_type', 'director']


def test_subset_property_over_many_states():
	store = build_store()
	years = [None, 2020, (2019, 2020)]
	genres = [ALL, 'Dramas', 'Comedies']
	ratings = [ALL, 'PG', frozenset({'R'})]
	countries = [None, 'United States', 'India']
	types = [None, ContentType.MOVIE, ContentType.SERIES]
	directors = [None, 'Ann Lee']
	for combo in itertools.product(years, genres, ratings, countries, types, directors):
		state = FilterState(*combo)
		subset = filter_records(store, state)
		expected = [r for r in store if passes(r, state)]
		assert subset == expected, state
		assert len(set(ids(subset))) == len(subset), state


def main():
	print("Running FilterEvaluator tests...")
	test_no_constraints_returns_everything()
	test_year_single_and_range()
	test_genre_membership()
	test_rating_equality_and_set()
	test_country_exact_token()
	test_content_type()
	test_director_exact_token()
	test_combined_and_empty()
	test_ignore_year()
	test_predicate_order()
	test_subset_property_over_many_states()
	print("All FilterEvaluator tests passed!")


if __name__ == '__main__':
	main()
