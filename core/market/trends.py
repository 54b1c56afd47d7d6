"""
Market trend heuristic.

Derives a trend from how quickly homes sell: a market where listings
clear in under ten days scores 10, one where they sit for a hundred days
or more scores 0. The score is mapped to a simulated percent price change
of -10% .. +10%, and days-on-market and inventory changes are simulated
from that.
"""

import math
from dataclasses import dataclass

from utils.formatting import round_half_up

from .metrics import MarketMetrics


# =============================================================================
# Configuration Constants
# =============================================================================

TREND_SCORE_MIN = 0.0
TREND_SCORE_MAX = 10.0
TREND_SCORE_NEUTRAL = 5.0

# Each point of trend score above/below neutral is worth this many percent
PERCENT_PER_SCORE_POINT = 2.0

DAYS_ON_MARKET_CHANGE_FACTOR = 0.5
DAYS_ON_MARKET_CHANGE_CAP = 15
INVENTORY_CHANGE_FACTOR = 0.3
INVENTORY_CHANGE_CAP = 10

STRONG_GROWTH = "Strong growth"
MODERATE_GROWTH = "Moderate growth"
STABLE = "Stable"
SLIGHT_DECLINE = "Slight decline"
SIGNIFICANT_DECLINE = "Significant decline"
INSUFFICIENT_DATA = "Insufficient data"


@dataclass(frozen=True)
class MarketTrend:
    """Heuristic market trend."""
    score: float
    price_change: int
    percent_change: float
    days_on_market_change: int
    inventory_change: int
    trend: str

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "priceChange": self.price_change,
            "percentChange": self.percent_change,
            "daysOnMarketChange": self.days_on_market_change,
            "inventoryChange": self.inventory_change,
            "trend": self.trend,
        }


def trend_score(avg_days_on_market: float) -> float:
    """clamp(0, 10, 10 - avgDaysOnMarket / 10)."""
    raw = TREND_SCORE_MAX - avg_days_on_market / 10
    return max(TREND_SCORE_MIN, min(TREND_SCORE_MAX, raw))


def percent_change_for_score(score: float) -> float:
    return (score - TREND_SCORE_NEUTRAL) * PERCENT_PER_SCORE_POINT


def trend_label(percent_change: float) -> str:
    """Bucket a percent price change into a trend label."""
    if percent_change > 5:
        return STRONG_GROWTH
    if percent_change > 2:
        return MODERATE_GROWTH
    if percent_change >= -2:
        return STABLE
    if percent_change >= -5:
        return SLIGHT_DECLINE
    return SIGNIFICANT_DECLINE


def _simulated_change(percent_change: float, factor: float, cap: float) -> int:
    if percent_change == 0:
        return 0
    direction = -math.copysign(1, percent_change)
    return round_half_up(direction * min(abs(percent_change) * factor, cap))


def analyze_market_trends(metrics: MarketMetrics) -> MarketTrend:
    """
    Derive the market trend from market metrics.

    Args:
        metrics: Output of calculate_market_metrics

    Returns:
        MarketTrend; "Insufficient data" with zero changes when there
        are no sales
    """
    if metrics.count == 0:
        return MarketTrend(
            score=0.0,
            price_change=0,
            percent_change=0.0,
            days_on_market_change=0,
            inventory_change=0,
            trend=INSUFFICIENT_DATA,
        )

    score = trend_score(metrics.avg_days_on_market)
    percent = round(percent_change_for_score(score), 1)

    return MarketTrend(
        score=round(score, 2),
        price_change=round_half_up(metrics.avg_price * percent / 100),
        percent_change=percent,
        days_on_market_change=_simulated_change(
            percent, DAYS_ON_MARKET_CHANGE_FACTOR, DAYS_ON_MARKET_CHANGE_CAP
        ),
        inventory_change=_simulated_change(
            percent, INVENTORY_CHANGE_FACTOR, INVENTORY_CHANGE_CAP
        ),
        trend=trend_label(percent),
    )
