"""Run settings and district configuration.

Output and config files live in the working directory the job is started from.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .models import DISTRICTS, District

logger = logging.getLogger(__name__)

# File names, resolved against the working directory
DATA_FILE = "data.json"
CACHE_FILE = "cache.json"
IMAGES_DIR = "images"
DISTRICTS_FILE = "districts.yaml"
ENV_FILE = ".env"

DEVELOPMENT = "development"


def _cwd_path(name: str):
    """Default factory for a path under the current working directory."""
    return lambda: Path.cwd() / name


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag such as LISTAM_USE_CACHE=0 from the environment."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Settings for one run of the index."""

    data_file: Path = field(default_factory=_cwd_path(DATA_FILE))
    cache_file: Path = field(default_factory=_cwd_path(CACHE_FILE))
    images_dir: Path = field(default_factory=_cwd_path(IMAGES_DIR))
    districts_file: Path = field(default_factory=_cwd_path(DISTRICTS_FILE))
    use_cache: bool = True
    persist_cache: bool = False
    backoff_seconds: float = 1.0
    backoff_factor: float = 1.0
    max_rate_limit_retries: int | None = 30
    max_pages: int = 250
    request_timeout: float = 30.0
    render_charts: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment and an optional .env file.

        APP_ENV=development turns on writing the listing cache.
        LISTAM_USE_CACHE and LISTAM_RENDER_CHARTS toggle cache reads and charts.
        """
        load_dotenv(Path.cwd() / ENV_FILE)

        app_env = os.environ.get("APP_ENV", "production")
        return cls(
            use_cache=_env_flag("LISTAM_USE_CACHE", True),
            persist_cache=app_env == DEVELOPMENT,
            render_charts=_env_flag("LISTAM_RENDER_CHARTS", True),
        )


def load_districts(path: Path | None = None) -> list[District]:
    """Load districts from YAML config, falling back to the built-in table."""
    path = path or Path.cwd() / DISTRICTS_FILE
    if not path.exists():
        logger.info(f"{path} not found, using built-in district table")
        return [District(code=code, name=name) for code, name in DISTRICTS.items()]

    with open(path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    districts = []
    for item in config.get("districts", []):
        districts.append(District(code=int(item["code"]), name=item["name"]))

    logger.info(f"Loaded {len(districts)} districts from config")
    return districts
