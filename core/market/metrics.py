"""
Market metrics over a set of comparable sales.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from core.numbers import Number, read_number, tidy_number
from utils.formatting import round_half_up


PRICE_FIELDS = ("price", "salePrice")
DAYS_ON_MARKET_FIELDS = ("daysOnMarket",)


@dataclass(frozen=True)
class MarketMetrics:
    """Summary statistics of sale prices and days on market."""
    count: int = 0
    avg_price: Number = 0
    median_price: Number = 0
    min_price: Number = 0
    max_price: Number = 0
    avg_days_on_market: int = 0

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "avgPrice": self.avg_price,
            "medianPrice": self.median_price,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "avgDaysOnMarket": self.avg_days_on_market,
        }


def median(values: Iterable[Number]) -> float:
    """Median; the mean of the two middle values for even counts."""
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        raise ValueError("median of empty sequence")

    middle = n // 2
    if n % 2 == 1:
        return ordered[middle]
    return (ordered[middle - 1] + ordered[middle]) / 2


def calculate_market_metrics(sales: Iterable[Mapping[str, Any]]) -> MarketMetrics:
    """
    Compute count, mean, median, min, max and mean days on market.

    Sales without a parseable price are ignored. Days on market are
    averaged over the sales that report them. No usable sales yields
    all-zero metrics rather than an error.

    Args:
        sales: Sale records with "price" (or "salePrice") and optional
            "daysOnMarket"

    Returns:
        MarketMetrics
    """
    sales = list(sales)
    prices = [p for p in (read_number(s, PRICE_FIELDS) for s in sales) if p is not None]

    if not prices:
        return MarketMetrics()

    days = [
        d for d in (read_number(s, DAYS_ON_MARKET_FIELDS) for s in sales) if d is not None
    ]
    avg_days = round_half_up(sum(days) / len(days)) if days else 0

    return MarketMetrics(
        count=len(prices),
        avg_price=round_half_up(sum(prices) / len(prices)),
        median_price=round_half_up(median(prices)),
        min_price=tidy_number(min(prices)),
        max_price=tidy_number(max(prices)),
        avg_days_on_market=avg_days,
    )
