"""
Streamlit UI for the Catalog Cross-Filter Explorer.
Loads the catalog locally, keeps one FilterState per browser session, and renders
every dashboard view through render adapters registered on a DashboardSession.
Buttons under the type, country and director charts act as chart clicks.

Run UI:   streamlit run streamlit_app.py
"""

# Pandas frames feed Streamlit's built-in charts
import pandas as pd  # tabular chart data
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Path utilities to find the boundary dataset
from pathlib import Path  # path handling
# Typing to make function signatures clearer
from typing import Optional  # indicates values can be None

# Local imports for the dashboard core
from src.dashboard import DashboardSession  # orchestrator
from src.data_loader import DataLoader, DataLoadError, RecordStore  # catalog loading
from src.geo_join import GeoJoiner  # country -> map region join
from src.models import ALL, ContentType, FilterState, SelectionDimension  # state types
from src import selection  # toggle semantics and control writes
from src.settings import settings  # configuration

MAX_COUNTRY_BUTTONS = 12  # clickable countries shown under the map view

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="Catalog Explorer", layout="wide")  # wide layout

# Main page title
st.title("Catalog Cross-Filter Explorer")  # header


# Cache the catalog so we only parse it once per server process
@st.cache_resource(show_spinner=True)
def load_store(path: str) -> RecordStore:
	"""Load the catalog; errors propagate so the page can show them."""
	return DataLoader().load_titles_from_csv(path)


@st.cache_resource(show_spinner=False)
def load_geo(path: str, threshold: int) -> Optional[GeoJoiner]:
	"""Boundary dataset is optional: without it the map view falls back to a bar chart."""
	if not Path(path).exists():
		return None
	try:
		return GeoJoiner.from_geojson(path, threshold=threshold)
	except DataLoadError as e:
		st.sidebar.warning(f"Map regions unavailable: {e}")
		return None


try:
	store = load_store(settings.data_path)  # read dataset
except (FileNotFoundError, DataLoadError) as e:
	# A catalog that failed to load leaves nothing to show
	st.error(f"Failed to load catalog: {e}")
	st.stop()

geo = load_geo(settings.geo_path, settings.geo_match_threshold)
options = store.options()

# One FilterState per browser session
if "filter_state" not in st.session_state:
	st.session_state.filter_state = store.initial_state()
state: FilterState = st.session_state.filter_state


def on_click(dimension: SelectionDimension, value: str):
	"""Button callback standing in for a chart-element click."""
	selection.toggle(st.session_state.filter_state, dimension, value)


# Sidebar contains the direct controls
with st.sidebar:
	st.header("Filters")  # section label
	if options.min_year is not None and options.min_year == options.max_year:
		# Streamlit sliders need distinct bounds; a single-year catalog has nothing to slide
		st.caption(f"Release year: {options.min_year}")
		selection.set_year(state, options.min_year)
	elif options.min_year is not None:
		range_mode = st.toggle("Year range", value=isinstance(state.year, tuple))
		if range_mode:
			default = state.year if isinstance(state.year, tuple) else (options.min_year, options.max_year)
			year = st.slider("Release years", options.min_year, options.max_year, value=default)
		else:
			default = state.year if isinstance(state.year, int) else options.max_year
			year = st.slider("Release year", options.min_year, options.max_year, value=default)
		selection.set_year(state, year)

	genres = [ALL] + options.genres
	genre = st.selectbox("Genre", genres, index=genres.index(state.genre) if state.genre in genres else 0)
	selection.set_genre(state, genre)

	ratings = st.multiselect("Ratings", options.ratings, default=sorted(state.rating) if isinstance(state.rating, frozenset) else [])
	selection.set_rating(state, ratings)

	st.markdown("---")  # separator
	st.caption(f"Country: {state.selected_country or 'All countries'}")
	st.caption(f"Type: {state.selected_content_type.value if state.selected_content_type else 'All types'}")
	st.caption(f"Director: {state.selected_director or 'All directors'}")
	st.button("Clear chart selections", on_click=selection.clear_selections, args=(state,))


# Fixed layout: KPI row first, then the chart grid
kpi_cols = st.columns(5)
map_col, pie_col = st.columns([3, 2])
trend_col, directors_col = st.columns(2)
runtime_col, seasons_col = st.columns(2)
words_box = st.container()


def render_kpis(k):
	kpi_cols[0].metric("Total titles", k.total)
	kpi_cols[1].metric("Movies", k.movies)
	kpi_cols[2].metric("Series", k.series)
	kpi_cols[3].metric("Avg movie length", f"{k.avg_movie_minutes} min" if k.avg_movie_minutes is not None else "–")
	kpi_cols[4].metric("Avg seasons", f"{k.avg_series_seasons}" if k.avg_series_seasons is not None else "–")


def render_countries(rollup):
	with map_col:
		st.subheader("Titles by country")
		if not rollup:
			st.caption("No country data for current filters.")
			return
		ranked = sorted(rollup.items(), key=lambda kv: kv[1], reverse=True)
		if geo is not None:
			bubbles = geo.bubbles(dict(ranked))
			st.dataframe(pd.DataFrame([{"country": b.country, "region": b.feature, "titles": b.count} for b in bubbles]), hide_index=True)
		else:
			st.bar_chart(pd.DataFrame(ranked, columns=["country", "titles"]).set_index("country"))
		cols = st.columns(4)
		for i, (country, count) in enumerate(ranked[:MAX_COUNTRY_BUTTONS]):
			label = f"{'✓ ' if state.selected_country == country else ''}{country} ({count})"
			cols[i % 4].button(label, key=f"country-{country}", on_click=on_click, args=(SelectionDimension.COUNTRY, country))


def render_types(rollup):
	with pie_col:
		st.subheader("Type distribution")
		if not rollup:
			st.caption("No data for current filters.")
			return
		st.bar_chart(pd.DataFrame(list(rollup.items()), columns=["type", "titles"]).set_index("type"))
		for label, count in rollup.items():
			selected = state.selected_content_type is not None and state.selected_content_type.value == label
			st.button(f"{'✓ ' if selected else ''}{label}: {count}", key=f"type-{label}", on_click=on_click, args=(SelectionDimension.CONTENT_TYPE, ContentType(label)))


def render_trend(trend):
	with trend_col:
		st.subheader("Titles released over years")
		if not trend:
			st.caption("No trend data for current filters.")
			return
		st.line_chart(pd.DataFrame(trend, columns=["year", "titles"]).set_index("year"))


def render_directors(ranked):
	with directors_col:
		st.subheader("Top directors")
		if not ranked:
			st.caption("No director data for current filters.")
			return
		for r in ranked:
			label = f"{'✓ ' if state.selected_director == r.label else ''}{r.label} ({r.count})"
			st.button(label, key=f"director-{r.label}", on_click=on_click, args=(SelectionDimension.DIRECTOR, r.label))


def render_runtime(hist):
	with runtime_col:
		st.subheader("Movies (minutes)")
		if not hist.has_data:
			st.caption("No movie duration data")
			return
		rows = [{"minutes": f"{b.lower:.0f}-{b.upper:.0f}", "titles": b.count} for b in hist.bins]
		st.bar_chart(pd.DataFrame(rows).set_index("minutes"))


def render_seasons(dist):
	with seasons_col:
		st.subheader("Series (seasons)")
		if not dist:
			st.caption("No series duration data")
			return
		st.bar_chart(pd.DataFrame(dist, columns=["seasons", "titles"]).set_index("seasons"))


def render_words(words):
	with words_box:
		st.subheader("Title words")
		if not words:
			st.caption("No titles for current filters.")
			return
		st.dataframe(pd.DataFrame([{"word": w.label, "count": w.count} for w in words]), hide_index=True)


# Wire adapters and run one full refresh for this script run
session = DashboardSession(store, state=state)
session.register("kpis", render_kpis)
session.register("country_map", render_countries)
session.register("type_pie", render_types)
session.register("year_trend", render_trend)
session.register("top_directors", render_directors)
session.register("runtime_histogram", render_runtime)
session.register("season_distribution", render_seasons)
session.register("word_cloud", render_words)
snapshot = session.refresh()

st.sidebar.markdown("---")  # separator
st.sidebar.caption(f"{snapshot.record_count} of {len(store)} titles match")  # footer
