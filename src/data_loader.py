"""
Data loading and preprocessing module.
Builds the immutable RecordStore from raw catalog rows (CSV/JSONL) and
exposes the option lists used to seed the dashboard controls.
"""

# Standard libs for CSV/JSON parsing, typing, and paths
import csv  # read the tabular catalog export
import json  # read JSON lines
from typing import Dict, Iterable, Iterator, List, Optional, Tuple  # type hints
from pathlib import Path  # filesystem-safe paths

# Import our data classes used across the project
from .models import (  # structured records and control values
	ALL,
	UNKNOWN_RATING,
	ContentType,
	FilterOptions,
	FilterState,
	TitleRecord,
)

# Console logging
from loguru import logger  # console logger


# Columns a CSV export must carry for any row to be admitted
REQUIRED_COLUMNS = ("title", "type", "release_year")


class DataLoadError(RuntimeError):
	"""Raised when the catalog source cannot be read at all."""


class RecordStore:
	"""
	Immutable, ordered collection of TitleRecords.
	Built once per session; filtering and aggregation only ever read from it.
	"""

	def __init__(self, records: Iterable[TitleRecord]):
		self._records: Tuple[TitleRecord, ...] = tuple(records)  # frozen snapshot

	@property
	def records(self) -> Tuple[TitleRecord, ...]:
		return self._records

	def __len__(self) -> int:
		return len(self._records)

	def __iter__(self) -> Iterator[TitleRecord]:
		return iter(self._records)

	def __bool__(self) -> bool:
		return bool(self._records)

	def options(self) -> FilterOptions:
		"""Collect the year bounds, genres and ratings present in the store."""
		years = [r.release_year for r in self._records]  # every record has a year
		genres = set()  # unique genres
		ratings = set()  # unique ratings
		for record in self._records:
			genres.update(record.genres)
			ratings.add(record.rating)
		return FilterOptions(
			min_year=min(years) if years else None,
			max_year=max(years) if years else None,
			genres=sorted(genres),
			ratings=sorted(ratings),
		)

	def initial_state(self) -> FilterState:
		"""
		Starting filter configuration: the most recent release year,
		every genre and rating, and no chart selection.
		"""
		opts = self.options()
		return FilterState(year=opts.max_year, genre=ALL, rating=ALL)


class DataLoader:
	"""
	Handles loading and preprocessing of catalog rows.
	"""

	def load(self, raw_rows: Iterable[Dict]) -> RecordStore:
		"""
		Map raw rows to TitleRecords and freeze them into a RecordStore.
		Rows missing a title, a known type or a parseable release year are dropped.
		"""
		records: List[TitleRecord] = []  # admitted records
		dropped = 0  # malformed rows
		for position, row in enumerate(raw_rows):
			record = self._parse_row(row, position)  # None when malformed
			if record is None:
				dropped += 1
				continue
			records.append(record)
		logger.info(f"[DataLoader] Built record store with {len(records)} titles ({dropped} malformed rows dropped).")
		return RecordStore(records)

	def load_titles_from_csv(self, filepath: str) -> RecordStore:
		"""
		Load the catalog from a CSV export with a header row.
		Returns a RecordStore.
		"""
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Catalog file not found: {filepath}")

		logger.info(f"[DataLoader] Loading titles from {filepath}...")  # log action

		try:
			with open(filepath, 'r', encoding='utf-8-sig', newline='') as f:
				reader = csv.DictReader(f)  # header row gives field names
				header = [h.strip() for h in (reader.fieldnames or [])]
				missing = [c for c in REQUIRED_COLUMNS if c not in header]
				if missing:
					raise DataLoadError(f"Catalog file {filepath} lacks required columns: {', '.join(missing)}")
				rows = [{(k or '').strip(): v for k, v in row.items()} for row in reader]  # materialize while file is open
		except (UnicodeDecodeError, csv.Error, OSError) as e:
			raise DataLoadError(f"Could not read catalog file {filepath}: {e}") from e

		return self.load(rows)

	def load_titles_from_jsonl(self, filepath: str) -> RecordStore:
		"""
		Load the catalog from a JSON Lines (JSONL) file where each line is one JSON object.
		Returns a RecordStore.
		"""
		rows = []  # accumulator for raw dicts
		filepath = Path(filepath)  # normalize path

		if not filepath.exists():
			raise FileNotFoundError(f"Catalog file not found: {filepath}")

		logger.info(f"[DataLoader] Loading titles from {filepath}...")  # log action

		try:
			with open(filepath, 'r', encoding='utf-8') as f:
				for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
					if not line.strip():
						continue  # blank line
					try:
						data = json.loads(line.strip())  # parse JSON object per line
					except json.JSONDecodeError as e:
						logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")  # malformed line
						continue  # move on
					if isinstance(data, dict):
						rows.append(data)
					else:
						logger.warning(f"[DataLoader] Skipping non-object JSON at line {line_num}")
		except (UnicodeDecodeError, OSError) as e:
			raise DataLoadError(f"Could not read catalog file {filepath}: {e}") from e

		return self.load(rows)

	def _parse_row(self, data: Dict, position: int) -> Optional[TitleRecord]:
		"""
		Convert a raw dictionary into a TitleRecord, or None if a required field is missing.
		"""
		title = self._clean_text(data.get('title'))  # required
		content_type = ContentType.from_label(self._clean_text(data.get('type')))  # required
		release_year = self._parse_year(data.get('release_year'))  # required

		if not title or content_type is None or release_year is None:
			logger.debug(f"[DataLoader] Dropping malformed row {position}: title={title!r} type={data.get('type')!r} year={data.get('release_year')!r}")
			return None

		record_id = self._clean_text(data.get('show_id')) or f"row-{position}"  # positional fallback

		return TitleRecord(
			id=record_id,
			content_type=content_type,
			title=title,
			release_year=release_year,
			directors=self._parse_comma_separated(data.get('director')),
			countries=self._parse_comma_separated(data.get('country')),
			genres=self._parse_comma_separated(data.get('listed_in')),
			rating=self._clean_text(data.get('rating')) or UNKNOWN_RATING,
			runtime_raw=self._clean_text(data.get('duration')),
			cast=self._parse_comma_separated(data.get('cast')),
			date_added=self._clean_text(data.get('date_added')),
			description=self._clean_text(data.get('description')),
		)

	def _parse_comma_separated(self, value) -> Tuple[str, ...]:
		"""
		Normalize a value that may be None, a list, or a comma-separated string
		into a tuple of clean, unique strings in first-seen order.
		"""
		if value is None:  # missing field
			return ()
		if isinstance(value, (list, tuple)):  # already split
			items = [str(item).strip() for item in value if item is not None]
		elif isinstance(value, str):  # comma-separated string
			items = [item.strip() for item in value.split(',')]
		else:
			return ()
		# dict.fromkeys drops duplicates while keeping order
		return tuple(dict.fromkeys(item for item in items if item))

	def _clean_text(self, value) -> str:
		"""Trim whitespace; None becomes an empty string."""
		if value is None:
			return ''
		return str(value).strip()

	def _parse_year(self, value) -> Optional[int]:
		"""Parse a release year from int or text ("2020", "2020.0"); None when unparseable."""
		if isinstance(value, bool):
			return None
		if isinstance(value, int):
			return value
		if isinstance(value, float):
			return int(value) if value.is_integer() else None
		text = self._clean_text(value)
		if not text:
			return None
		try:
			return int(text)
		except ValueError:
			pass
		try:
			number = float(text)
		except ValueError:
			return None
		return int(number) if number.is_integer() else None


def load(raw_rows: Iterable[Dict]) -> RecordStore:
	"""Build a RecordStore from raw rows with a default DataLoader."""
	return DataLoader().load(raw_rows)
