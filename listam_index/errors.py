"""Exceptions raised by the price index."""


class PriceIndexError(Exception):
    """Base class for fatal price index errors."""


class RateFetchError(PriceIndexError):
    """Exchange rates could not be fetched; the run cannot continue."""


class RateLimitExceeded(PriceIndexError):
    """A listing page kept answering 429 past the retry limit."""

    def __init__(self, district: int, page: int, attempts: int) -> None:
        super().__init__(
            f"Rate limited {attempts} times on page {page} for district {district}"
        )
        self.district = district
        self.page = page
        self.attempts = attempts
