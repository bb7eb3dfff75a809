"""
Print a summary of the catalog under a given filter configuration.

This script:
1) Loads the catalog CSV
2) Applies year/genre/rating filters and optional chart selections
3) Logs every dashboard view computed for that state

Usage:
    python -m scripts.summarize_catalog --year 2020 --genre Dramas
    python -m scripts.summarize_catalog --year-range 2015 2020 --country "United States"
"""

import argparse  # command-line flags
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from src.dashboard import DashboardSession  # orchestrator
from src.models import SelectionDimension  # click dimensions
from src.settings import settings, setup_logging  # configuration


def parse_args(argv=None):
	parser = argparse.ArgumentParser(description="Summarize a filtered catalog")
	parser.add_argument("--data", default=settings.data_path, help="catalog CSV path")
	year = parser.add_mutually_exclusive_group()
	year.add_argument("--year", type=int, help="single release year")
	year.add_argument("--year-range", type=int, nargs=2, metavar=("MIN", "MAX"), help="inclusive year range")
	year.add_argument("--all-years", action="store_true", help="no year constraint")
	parser.add_argument("--genre", help="genre label")
	parser.add_argument("--rating", action="append", help="rating label (repeatable)")
	parser.add_argument("--country", help="select a country")
	parser.add_argument("--type", dest="content_type", help="select a content type (Movie, TV Show)")
	parser.add_argument("--director", help="select a director")
	return parser.parse_args(argv)


def main(argv=None):
	args = parse_args(argv)
	setup_logging()

	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Catalog Summary")
	logger.info("=" * 60)

	session = DashboardSession.from_csv(str(Path(args.data)))  # load errors end the run

	# Control writes
	if args.year_range:
		session.set_year(tuple(args.year_range))
	elif args.year is not None:
		session.set_year(args.year)
	elif args.all_years:
		session.set_year(None)
	if args.genre:
		session.set_genre(args.genre)
	if args.rating:
		session.set_rating(args.rating)

	# Chart selections
	if args.country:
		session.toggle(SelectionDimension.COUNTRY, args.country)
	if args.content_type:
		session.toggle(SelectionDimension.CONTENT_TYPE, args.content_type)
	if args.director:
		session.toggle(SelectionDimension.DIRECTOR, args.director)

	snap = session.refresh()
	k = snap.kpis
	logger.info(f"State: {snap.state}")
	logger.info(f"Titles: {k.total} | Movies: {k.movies} | Series: {k.series}")
	logger.info(f"Avg movie length: {k.avg_movie_minutes if k.avg_movie_minutes is not None else '–'} min | Avg seasons: {k.avg_series_seasons if k.avg_series_seasons is not None else '–'}")
	logger.info(f"Types: {snap.type_rollup}")
	logger.info(f"Countries: {dict(sorted(snap.country_rollup.items(), key=lambda kv: kv[1], reverse=True)[:10])}")
	logger.info(f"Top directors: {[(r.label, r.count) for r in snap.top_directors]}")
	if snap.runtime_histogram.has_data:
		for b in snap.runtime_histogram.bins:
			logger.info(f"  {b.lower:7.1f} - {b.upper:7.1f} min: {b.count}")
	else:
		logger.info("Run-time histogram: no data")
	logger.info(f"Seasons: {snap.season_distribution}")
	logger.info(f"Year trend: {snap.year_trend}")
	logger.info(f"Top words: {[(r.label, r.count) for r in snap.word_frequencies[:20]]}")
	logger.info("=" * 60)
	return snap


if __name__ == '__main__':
	main()  # invoke summary
