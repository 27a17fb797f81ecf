"""Data models for the Yerevan apartment price index."""

from dataclasses import dataclass, field
from statistics import mean, median

# list.am district codes for Yerevan (`n` query parameter)
DISTRICTS: dict[int, str] = {
    2: "Ajapnyak",
    3: "Arabkir",
    4: "Avan",
    5: "Davtashen",
    6: "Erebuni",
    7: "Zeytun Kanaker",
    8: "Kentron",
    9: "Malatia-Sebastia",
    10: "Nor Nork",
    13: "Shengavit",
    11: "Nork-Marash",
    12: "Nubarashen",
}


@dataclass(frozen=True)
class District:
    """A district as listed in districts.yaml."""

    code: int
    name: str


@dataclass(frozen=True)
class Listing:
    """A single list.am apartment listing, price in USD."""

    id: int
    price: float
    district: int
    area: float  # square metres

    @property
    def price_per_area(self) -> float:
        """USD per square metre."""
        return self.price / self.area

    def to_dict(self) -> dict:
        """Convert to the cache JSON shape."""
        return {"id": self.id, "price": self.price, "district": self.district, "area": self.area}

    @classmethod
    def from_dict(cls, data: dict) -> "Listing":
        """Create a Listing from a cache entry."""
        return cls(
            id=int(data["id"]),
            price=float(data["price"]),
            district=int(data["district"]),
            area=float(data["area"]),
        )


@dataclass(frozen=True)
class CurrencyRateSet:
    """Exchange rates against USD: units of each currency per 1 USD."""

    rates: dict[str, float] = field(default_factory=dict)

    def rate_for(self, code: str) -> float:
        """Units of `code` per 1 USD."""
        return self.rates[code]


@dataclass
class SeriesPoint:
    """One day of aggregated price/area statistics for a district."""

    date: str  # YYYY-MM-DD
    average: float
    median: float

    def to_row(self) -> list:
        """Convert to a [date, average, median] row."""
        return [self.date, self.average, self.median]

    @classmethod
    def from_row(cls, row: list) -> "SeriesPoint":
        """Create a SeriesPoint from a stored row."""
        day, average, median_value = row
        return cls(date=str(day), average=float(average), median=float(median_value))


# District code (stringified) -> chronological points
PersistedSeries = dict[str, list[SeriesPoint]]


@dataclass
class DailyStats:
    """Aggregated price/area statistics for a single day."""

    average: float
    median: float
    count: int

    @classmethod
    def from_values(cls, values: list[float]) -> "DailyStats":
        """Create DailyStats from price/area values; zeros when there are none."""
        if not values:
            return cls(average=0, median=0, count=0)

        return cls(
            average=round(mean(values), 2),
            median=round(median(sorted(values)), 2),
            count=len(values),
        )
