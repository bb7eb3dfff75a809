"""
Duration parsing module.
The raw duration column holds either minutes ("90 min") or a season count ("2 Seasons").
Parsing never raises: text that does not match the expected shape yields None.
"""

import re  # regex for the two duration shapes
from typing import Optional  # parse results may be absent

# Pre-compiled patterns for both shapes, tolerant of spacing and casing
RE_MINUTES = re.compile(r"^\s*(\d+)\s*min(?:ute)?s?\.?\s*$", re.I)  # "90 min", "90min", "90 minutes"
RE_SEASONS = re.compile(r"^\s*(\d+)\s*seasons?\s*$", re.I)  # "1 Season", "3 Seasons"


def parse_minutes(raw: Optional[str]) -> Optional[int]:
	"""Return the number of minutes in a movie duration string, or None."""
	if not raw:
		return None
	m = RE_MINUTES.match(raw)
	if not m:
		return None
	return int(m.group(1))


def parse_seasons(raw: Optional[str]) -> Optional[int]:
	"""Return the number of seasons in a series duration string, or None."""
	if not raw:
		return None
	m = RE_SEASONS.match(raw)
	if not m:
		return None
	return int(m.group(1))
