"""Main orchestration for the Yerevan apartment price index."""

import asyncio
import logging

import httpx

from .charts import create_dashboard, create_overview
from .config import Settings, load_districts
from .currency import CurrencyRateProvider
from .models import District, PersistedSeries
from .scraper import CollectorOptions, ListingCollector
from .stats import StatsAggregator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"


def render_charts(settings: Settings, districts: list[District], series: PersistedSeries) -> None:
    """Render every district dashboard and the overview chart."""
    for district in districts:
        dashboard_path = settings.images_dir / f"{district.code}_dashboard.png"
        create_dashboard(district, series.get(str(district.code), []), dashboard_path)

    create_overview(districts, series, settings.images_dir / "overview.png")


async def run(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> PersistedSeries:
    """Collect today's listings and merge their statistics into the series."""
    districts = load_districts(settings.districts_file)
    options = CollectorOptions(
        use_cache=settings.use_cache,
        persist_cache=settings.persist_cache,
        cache_file=settings.cache_file,
        backoff_seconds=settings.backoff_seconds,
        backoff_factor=settings.backoff_factor,
        max_rate_limit_retries=settings.max_rate_limit_retries,
        max_pages=settings.max_pages,
    )

    async with httpx.AsyncClient(
        timeout=settings.request_timeout,
        headers={"User-Agent": USER_AGENT},
        transport=transport,
    ) as client:
        collector = ListingCollector(client, CurrencyRateProvider(client), districts, options)
        listings = await collector.collect_listings()

    aggregator = StatsAggregator(settings.data_file, districts)
    series = aggregator.aggregate_and_merge(listings)

    if settings.render_charts:
        render_charts(settings, districts, series)

    return series


def main() -> None:
    """Main entry point."""
    logger.info("Starting price index update")

    try:
        asyncio.run(run(Settings.from_env()))
    except Exception:
        logger.exception("Price index update failed")
        raise

    logger.info("Update complete!")


if __name__ == "__main__":
    main()
