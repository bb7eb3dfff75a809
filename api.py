"""
FastAPI server exposing the catalog dashboard.
Endpoints:
- GET /health: basic health check
- GET /options: values for the year/genre/rating controls
- GET /dashboard: every view for the current filter state
- POST /filters: write year/genre/rating controls, returns the refreshed dashboard
- POST /select: toggle a chart selection (country, content_type, director)
- POST /selections/clear: drop every chart selection

Startup loads the catalog once; if that fails the dashboard endpoints answer 503
with the load error instead of serving an empty dashboard.
"""

# Import standard libraries for timing
import time  # measure startup and request latencies
from typing import Dict, List, Optional, Union  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for request/response models
from fastapi import FastAPI, HTTPException  # FastAPI primitives
from pydantic import BaseModel  # request/response schema definitions

# Import our internal modules for loading and the dashboard session
from src.dashboard import DashboardSession  # orchestrator
from src.data_loader import DataLoadError  # load failure type
from src.models import ALL, DashboardSnapshot, SelectionDimension  # core data classes
from src.settings import settings, setup_logging  # configuration

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Catalog Cross-Filter API", version="1.0.0")  # web app

# Globals that hold the single dashboard session and its startup outcome
SESSION: Optional[DashboardSession] = None  # will point to the initialized session
LOAD_ERROR: Optional[str] = None  # message of the load failure, if any
STARTUP_TIME_S: float = 0.0  # measures how long startup took


class KpiOut(BaseModel):
	total: int
	movies: int
	series: int
	avg_movie_minutes: Optional[int] = None  # None when no movie duration parses
	avg_series_seasons: Optional[float] = None


class RankedOut(BaseModel):
	label: str
	count: int


class BinOut(BaseModel):
	lower: float
	upper: float
	count: int


class HistogramOut(BaseModel):
	has_data: bool
	min_value: Optional[float] = None
	max_value: Optional[float] = None
	bins: List[BinOut]


class FilterStateOut(BaseModel):
	year: Optional[Union[int, List[int]]] = None
	genre: str
	rating: Union[str, List[str]]
	selected_country: Optional[str] = None
	selected_content_type: Optional[str] = None
	selected_director: Optional[str] = None


class DashboardOut(BaseModel):
	state: FilterStateOut
	record_count: int
	elapsed_ms: float
	kpis: KpiOut
	country_rollup: Dict[str, int]
	type_rollup: Dict[str, int]
	year_trend: List[List[int]]  # [year, count] pairs
	top_directors: List[RankedOut]
	runtime_histogram: HistogramOut
	season_distribution: List[List[int]]  # [seasons, count] pairs
	word_frequencies: List[RankedOut]


class OptionsOut(BaseModel):
	min_year: Optional[int] = None
	max_year: Optional[int] = None
	genres: List[str]
	ratings: List[str]


class FiltersIn(BaseModel):
	"""Only the fields present in the request body are written."""
	year: Optional[int] = None
	year_range: Optional[List[int]] = None
	genre: Optional[str] = None
	rating: Optional[str] = None
	ratings: Optional[List[str]] = None


class SelectionIn(BaseModel):
	dimension: SelectionDimension
	value: str


def init_session(data_path: str) -> Optional[DashboardSession]:
	"""Load the catalog and open the process-wide session; record the error on failure."""
	global SESSION, LOAD_ERROR  # refer to module-level globals
	try:
		SESSION = DashboardSession.from_csv(data_path)
		LOAD_ERROR = None
		SESSION.refresh()
	except (FileNotFoundError, DataLoadError) as e:
		SESSION = None
		LOAD_ERROR = str(e)
		logger.error(f"[API] Catalog load failed: {e}")
	return SESSION


def to_response(snapshot: DashboardSnapshot, elapsed_ms: float = 0.0) -> DashboardOut:
	"""Convert a DashboardSnapshot into the response schema."""
	state = snapshot.state
	year = list(state.year) if isinstance(state.year, tuple) else state.year
	rating = sorted(state.rating) if isinstance(state.rating, frozenset) else state.rating
	hist = snapshot.runtime_histogram
	return DashboardOut(
		state=FilterStateOut(
			year=year,
			genre=state.genre,
			rating=rating,
			selected_country=state.selected_country,
			selected_content_type=state.selected_content_type.value if state.selected_content_type else None,
			selected_director=state.selected_director,
		),
		record_count=snapshot.record_count,
		elapsed_ms=round(elapsed_ms, 2),
		kpis=KpiOut(**vars(snapshot.kpis)),
		country_rollup=snapshot.country_rollup,
		type_rollup=snapshot.type_rollup,
		year_trend=[[y, c] for y, c in snapshot.year_trend],
		top_directors=[RankedOut(label=r.label, count=r.count) for r in snapshot.top_directors],
		runtime_histogram=HistogramOut(
			has_data=hist.has_data,
			min_value=hist.min_value,
			max_value=hist.max_value,
			bins=[BinOut(lower=b.lower, upper=b.upper, count=b.count) for b in hist.bins],
		),
		season_distribution=[[s, c] for s, c in snapshot.season_distribution],
		word_frequencies=[RankedOut(label=r.label, count=r.count) for r in snapshot.word_frequencies],
	)


def require_session() -> DashboardSession:
	if SESSION is None:  # session must be ready to serve
		logger.warning("[API] Dashboard requested but catalog is not loaded")  # guard log
		raise HTTPException(status_code=503, detail=LOAD_ERROR or "Catalog not loaded")
	return SESSION


# FastAPI startup hook to load the catalog once
@app.on_event("startup")
async def startup_event():
	"""Load the catalog and log how long it took."""
	global STARTUP_TIME_S
	setup_logging()
	start = time.time()  # start timer for startup latency
	logger.info(f"[API] Startup: loading catalog from {settings.data_path}...")  # log intent
	init_session(settings.data_path)
	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s. Catalog loaded: {SESSION is not None}.")


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",  # constant indicator
		"catalog_loaded": SESSION is not None,  # True if session initialized
		"load_error": LOAD_ERROR,  # message when loading failed
		"startup_seconds": round(STARTUP_TIME_S, 2)  # startup latency
	}


@app.get("/options", response_model=OptionsOut)
async def options():
	"""Values for the year slider and the genre/rating selectors."""
	opts = require_session().store.options()
	return OptionsOut(min_year=opts.min_year, max_year=opts.max_year, genres=[ALL] + opts.genres, ratings=[ALL] + opts.ratings)


@app.get("/dashboard", response_model=DashboardOut)
async def dashboard():
	"""Every view for the current filter state."""
	session = require_session()
	start = time.time()
	snapshot = session.refresh()
	return to_response(snapshot, (time.time() - start) * 1000)


@app.post("/filters", response_model=DashboardOut)
async def update_filters(body: FiltersIn):
	"""Write the control values present in the body and refresh."""
	session = require_session()
	start = time.time()
	sent = body.model_fields_set  # distinguishes "year": null from an absent year
	logger.debug(f"[API] /filters fields={sorted(sent)}")
	try:
		if "year_range" in sent and body.year_range is not None:
			session.set_year(tuple(body.year_range))
		elif "year" in sent:
			session.set_year(body.year)
		if "genre" in sent:
			session.set_genre(body.genre)
		if "ratings" in sent:
			session.set_rating(body.ratings)
		elif "rating" in sent:
			session.set_rating(body.rating)
	except ValueError as e:
		raise HTTPException(status_code=422, detail=str(e)) from e
	snapshot = session.last_snapshot or session.refresh()
	return to_response(snapshot, (time.time() - start) * 1000)


@app.post("/select", response_model=DashboardOut)
async def select(body: SelectionIn):
	"""Toggle a chart selection: the same value twice clears it."""
	session = require_session()
	start = time.time()
	try:
		snapshot = session.toggle(body.dimension, body.value)
	except ValueError as e:
		raise HTTPException(status_code=422, detail=str(e)) from e
	logger.info(f"[API] /select {body.dimension.value}={body.value!r} -> {snapshot.record_count} titles")
	return to_response(snapshot, (time.time() - start) * 1000)


@app.post("/selections/clear", response_model=DashboardOut)
async def clear_selections():
	session = require_session()
	start = time.time()
	snapshot = session.clear_selections()
	return to_response(snapshot, (time.time() - start) * 1000)
