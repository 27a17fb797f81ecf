"""JSON stores: the persisted price series and the listing cache."""

import json
import logging
import os
from pathlib import Path

from .models import District, Listing, PersistedSeries, SeriesPoint

logger = logging.getLogger(__name__)


def empty_series(districts: list[District]) -> PersistedSeries:
    """One empty point list per district."""
    return {str(d.code): [] for d in districts}


def load_series(path: Path, districts: list[District]) -> PersistedSeries:
    """Load the persisted series, treating an absent or corrupt file as empty."""
    series = empty_series(districts)

    if not path.exists():
        logger.info(f"No series at {path}, starting empty")
        return series

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        loaded = {
            str(code): [SeriesPoint.from_row(row) for row in rows]
            for code, rows in raw.items()
        }
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Could not read series from {path}, starting empty: {e}")
        return series

    series.update(loaded)
    return series


def save_series(path: Path, series: PersistedSeries) -> None:
    """Rewrite the whole series file."""
    payload = {code: [point.to_row() for point in points] for code, points in series.items()}
    _write_json(path, payload)
    logger.info(f"Saved series to {path}")


def load_cache(path: Path) -> list[Listing] | None:
    """Return cached listings from a previous run, or None if unusable."""
    if not path.exists():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        listings = [Listing.from_dict(item) for item in raw]
    except (OSError, ValueError, TypeError, KeyError) as e:
        logger.warning(f"Ignoring unreadable cache {path}: {e}")
        return None

    logger.info(f"Loaded {len(listings)} listings from cache {path}")
    return listings


def save_cache(path: Path, listings: list[Listing]) -> None:
    """Write listings as a JSON array for the next run to reuse."""
    _write_json(path, [listing.to_dict() for listing in listings])
    logger.info(f"Cached {len(listings)} listings to {path}")


def _write_json(path: Path, payload) -> None:
    """Write to a temporary file and swap it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False)
    os.replace(tmp_path, path)
