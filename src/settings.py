"""
Configuration for the Catalog Cross-Filter Explorer.

All values can be overridden through environment variables (or a local .env file):
    CATALOG_DATA_PATH, CATALOG_GEO_PATH,
    CATALOG_LOG_LEVEL, CATALOG_GEO_MATCH_THRESHOLD

Usage:
    from src.settings import settings, setup_logging
"""

import sys  # stderr sink for loguru
from typing import Optional  # level may be omitted

from loguru import logger  # console logging
from pydantic import Field  # aliased fields
from pydantic_settings import BaseSettings, SettingsConfigDict  # env-backed settings


class DashboardSettings(BaseSettings):
	"""Data paths, map matching threshold and logging level."""

	data_path: str = Field(default="data/sample_titles.csv", alias="CATALOG_DATA_PATH")
	geo_path: str = Field(default="data/world.geojson", alias="CATALOG_GEO_PATH")
	log_level: str = Field(default="INFO", alias="CATALOG_LOG_LEVEL")
	geo_match_threshold: int = Field(default=85, alias="CATALOG_GEO_MATCH_THRESHOLD")

	model_config = SettingsConfigDict(
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)


settings = DashboardSettings()


def setup_logging(level: Optional[str] = None) -> None:
	"""Replace loguru's default sink with one at the configured level."""
	logger.remove()
	logger.add(sys.stderr, level=(level or settings.log_level).upper())
