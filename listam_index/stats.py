"""Per-district price/area statistics merged into the persisted series."""

import logging
from datetime import date
from pathlib import Path

from .models import DailyStats, District, Listing, PersistedSeries, SeriesPoint
from .storage import load_series, save_series

logger = logging.getLogger(__name__)


def district_stats(listings: list[Listing], district: int) -> DailyStats:
    """Average and median price per m² for one district."""
    values = sorted(item.price_per_area for item in listings if item.district == district)
    return DailyStats.from_values(values)


def upsert_point(points: list[SeriesPoint], day: str, stats: DailyStats) -> None:
    """Overwrite the point for `day` in place, or append a new one.

    Extra points for the same day (from an older, hand-edited store) are dropped.
    """
    matches = [i for i, point in enumerate(points) if point.date == day]
    if not matches:
        points.append(SeriesPoint(date=day, average=stats.average, median=stats.median))
        return

    first = points[matches[0]]
    first.average = stats.average
    first.median = stats.median
    for i in reversed(matches[1:]):
        del points[i]


class StatsAggregator:
    """Computes today's statistics and merges them into the series file."""

    def __init__(self, data_file: Path, districts: list[District]) -> None:
        self.data_file = data_file
        self.districts = districts

    def aggregate_and_merge(self, listings: list[Listing], today: date | None = None) -> PersistedSeries:
        """Upsert today's point for every district and rewrite the store."""
        day = (today or date.today()).isoformat()
        series = load_series(self.data_file, self.districts)

        for district in self.districts:
            stats = district_stats(listings, district.code)
            logger.info(
                f"Stats for {district.name}: count={stats.count}, "
                f"average={stats.average}, median={stats.median}"
            )
            upsert_point(series.setdefault(str(district.code), []), day, stats)

        save_series(self.data_file, series)
        return series
