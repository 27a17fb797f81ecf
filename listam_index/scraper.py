"""list.am listing scraper with rate-limit retry and pagination."""

import asyncio
import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path

import httpx
from bs4 import BeautifulSoup, Tag

from .currency import CurrencyRateProvider
from .errors import RateLimitExceeded
from .models import CurrencyRateSet, District, Listing
from .storage import load_cache, save_cache

logger = logging.getLogger(__name__)

LISTING_URL = "https://www.list.am/ru/category/56/{page}"

# Checked in order; a price with none of these symbols is already in USD
CURRENCY_SYMBOLS: tuple[tuple[str, str], ...] = (
    ("֏", "amd"),
    ("₽", "rub"),
    ("€", "eur"),
)

PRICE_RE = re.compile(r"\d+(?:,\d+)*(?:\.\d+)?")
LEADING_NUMBER_RE = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+))")
LEADING_INT_RE = re.compile(r"\s*([-+]?\d+)")

PAGE_INDICATOR_SELECTOR = ".dlf .pp .c"
LISTING_SELECTORS = (".gl > a", ".dl > a")


@dataclass
class CollectorOptions:
    """Scrape behaviour for one run."""

    use_cache: bool = True
    persist_cache: bool = False
    cache_file: Path = Path("cache.json")
    backoff_seconds: float = 1.0
    backoff_factor: float = 1.0
    max_rate_limit_retries: int | None = 30
    max_pages: int = 250


def parse_listing_id(href: str | None) -> int | None:
    """Leading integer of the last path segment, e.g. /ru/item/123 -> 123."""
    if not href:
        return None
    match = LEADING_INT_RE.match(href.split("/")[-1])
    if not match:
        return None
    return int(match.group(1))


def parse_price(text: str) -> float:
    """First number in the price text, thousands commas dropped; NaN if none."""
    match = PRICE_RE.search(text)
    if not match:
        return math.nan
    return float(match.group(0).replace(",", ""))


def detect_currency(text: str) -> str | None:
    """Currency code for the first known symbol in the text, None for USD."""
    for symbol, code in CURRENCY_SYMBOLS:
        if symbol in text:
            return code
    return None


def normalize_price(price: float, text: str, rates: CurrencyRateSet) -> float:
    """Convert a price to USD using the currency symbol in its text."""
    code = detect_currency(text)
    if code is not None:
        price /= rates.rate_for(code)
    return round(price, 2)


def parse_area(info_text: str) -> float:
    """Area from the third comma-separated field, e.g. "Кентрон, 3 комн., 75 кв.м., 5/9 этаж"."""
    fields = info_text.split(",")
    if len(fields) < 3:
        return math.nan
    match = LEADING_NUMBER_RE.match(fields[2])
    if not match:
        return math.nan
    return float(match.group(1))


def current_page(soup: BeautifulSoup) -> int:
    """Page number shown in the pager; 1 when it is missing."""
    node = soup.select_one(PAGE_INDICATOR_SELECTOR)
    if node is None:
        return 1
    match = LEADING_INT_RE.match(node.get_text())
    if not match or int(match.group(1)) == 0:
        return 1
    return int(match.group(1))


def _invalid(value: float) -> bool:
    """Prices and areas must be positive numbers."""
    return math.isnan(value) or value <= 0


class ListingCollector:
    """Collects apartment listings for every district, page by page."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        rate_provider: CurrencyRateProvider,
        districts: list[District],
        options: CollectorOptions | None = None,
    ) -> None:
        self.client = client
        self.rate_provider = rate_provider
        self.districts = districts
        self.options = options or CollectorOptions()

    async def collect_listings(self) -> list[Listing]:
        """Scrape all districts, or return the cached listings when allowed."""
        if self.options.use_cache:
            cached = load_cache(self.options.cache_file)
            if cached is not None:
                return cached

        rates = await self.rate_provider.fetch_rates()

        listings: list[Listing] = []
        seen_ids: set[int] = set()
        for district in self.districts:
            before = len(listings)
            await self._collect_district(district, rates, listings, seen_ids)
            logger.info(f"Collected {len(listings) - before} listings for {district.name}")

        logger.info(f"Collected {len(listings)} listings in total")

        if self.options.persist_cache:
            save_cache(self.options.cache_file, listings)

        return listings

    async def _collect_district(
        self,
        district: District,
        rates: CurrencyRateSet,
        listings: list[Listing],
        seen_ids: set[int],
    ) -> None:
        for page in range(1, self.options.max_pages + 1):
            logger.info(f"Parsing page {page} for district {district.code}")

            response = await self._fetch_page(district.code, page)
            if response.status_code != 200:
                logger.warning(
                    f"Page error {response.status_code} on page {page} "
                    f"for district {district.code}: {response.text[:200]}"
                )
                return

            soup = BeautifulSoup(response.text, "lxml")

            # list.am serves its last page for any page past the end
            if current_page(soup) != page:
                return

            for node in self._listing_nodes(soup):
                listing = self._parse_listing(node, district.code, rates, seen_ids)
                if listing is not None:
                    seen_ids.add(listing.id)
                    listings.append(listing)

    async def _fetch_page(self, district: int, page: int) -> httpx.Response:
        """GET a listing page, waiting out 429 responses on the same page."""
        url = LISTING_URL.format(page=page)
        params = {"type": 1, "n": district}
        wait_time = self.options.backoff_seconds
        attempts = 0

        while True:
            response = await self.client.get(url, params=params)
            if response.status_code != 429:
                return response

            attempts += 1
            limit = self.options.max_rate_limit_retries
            if limit is not None and attempts > limit:
                raise RateLimitExceeded(district, page, attempts)

            logger.warning(f"Rate limited on page {page}, waiting {wait_time}s...")
            await asyncio.sleep(wait_time)
            wait_time *= self.options.backoff_factor

    def _listing_nodes(self, soup: BeautifulSoup) -> list[Tag]:
        """Listing links from the gallery and list sections, in page order."""
        nodes: list[Tag] = []
        for selector in LISTING_SELECTORS:
            nodes.extend(soup.select(selector))
        return nodes

    def _parse_listing(
        self,
        node: Tag,
        district: int,
        rates: CurrencyRateSet,
        seen_ids: set[int],
    ) -> Listing | None:
        listing_id = parse_listing_id(node.get("href"))
        if not listing_id or listing_id in seen_ids:
            return None

        price_node = node.select_one(".p")
        if price_node is None:
            return None

        price_text = price_node.get_text()
        price = parse_price(price_text)
        if _invalid(price):
            logger.warning(f"Invalid price ({listing_id}): {price_text!r}")
            return None
        price = normalize_price(price, price_text, rates)

        info_node = node.select_one(".at")
        if info_node is None:
            return None

        info_text = info_node.get_text()
        area = parse_area(info_text)
        if _invalid(area):
            logger.warning(f"Invalid area ({listing_id}): {info_text!r}")
            return None

        return Listing(id=listing_id, price=price, district=district, area=area)
