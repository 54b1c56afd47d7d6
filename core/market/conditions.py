"""
Market condition assessment.

Turns metrics and trend into four categorical labels:
- market type (seller's to buyer's market)
- buyer demand
- price direction
- overall condition, from the average of the three ordinal scores
"""

from dataclasses import dataclass
from typing import Dict

from .metrics import MarketMetrics
from .trends import MarketTrend


# =============================================================================
# Labels and ordinal scores (5 = strongest market)
# =============================================================================

HOT_SELLERS_MARKET = "Hot Seller's Market"
SELLERS_MARKET = "Seller's Market"
BALANCED_MARKET = "Balanced Market"
BUYERS_MARKET = "Buyer's Market"
STRONG_BUYERS_MARKET = "Strong Buyer's Market"

MARKET_TYPE_SCORES: Dict[str, int] = {
    HOT_SELLERS_MARKET: 5,
    SELLERS_MARKET: 4,
    BALANCED_MARKET: 3,
    BUYERS_MARKET: 2,
    STRONG_BUYERS_MARKET: 1,
}

DEMAND_SCORES: Dict[str, int] = {
    "Very Strong": 5,
    "Strong": 4,
    "Moderate": 3,
    "Weak": 2,
    "Very Weak": 1,
}

PRICE_DIRECTION_SCORES: Dict[str, int] = {
    "Rising Rapidly": 5,
    "Rising": 4,
    "Stable": 3,
    "Declining": 2,
    "Declining Rapidly": 1,
}

# (average score strictly above, label); below every band is "Difficult"
OVERALL_BANDS = (
    (4.5, "Excellent"),
    (3.5, "Good"),
    (2.5, "Fair"),
    (1.5, "Challenging"),
)
OVERALL_FLOOR = "Difficult"


@dataclass(frozen=True)
class MarketConditions:
    """Categorical market assessment."""
    market_type: str
    demand: str
    price_direction: str
    overall: str

    def to_dict(self) -> dict:
        return {
            "marketType": self.market_type,
            "demand": self.demand,
            "priceDirection": self.price_direction,
            "overall": self.overall,
        }


def classify_market_type(percent_change: float, days_on_market_change: float) -> str:
    if percent_change > 8 and days_on_market_change < -10:
        return HOT_SELLERS_MARKET
    if percent_change > 3 and days_on_market_change < 0:
        return SELLERS_MARKET
    if -3 < percent_change <= 3:
        return BALANCED_MARKET
    if percent_change > -8:
        return BUYERS_MARKET
    return STRONG_BUYERS_MARKET


def classify_demand(avg_days_on_market: float, days_on_market_change: float) -> str:
    if avg_days_on_market < 30 and days_on_market_change < 0:
        return "Very Strong"
    if avg_days_on_market < 45 and days_on_market_change <= 0:
        return "Strong"
    if avg_days_on_market < 60:
        return "Moderate"
    if avg_days_on_market < 90:
        return "Weak"
    return "Very Weak"


def classify_price_direction(percent_change: float) -> str:
    if percent_change > 8:
        return "Rising Rapidly"
    if percent_change > 2:
        return "Rising"
    if percent_change >= -2:
        return "Stable"
    if percent_change >= -8:
        return "Declining"
    return "Declining Rapidly"


def overall_condition(market_type: str, demand: str, price_direction: str) -> str:
    """
    Equal-weight average of the three ordinal scores, bucketed.

    Unknown labels score 1.
    """
    total = (
        MARKET_TYPE_SCORES.get(market_type, 1)
        + DEMAND_SCORES.get(demand, 1)
        + PRICE_DIRECTION_SCORES.get(price_direction, 1)
    )
    average = total / 3

    for threshold, label in OVERALL_BANDS:
        if average > threshold:
            return label
    return OVERALL_FLOOR


def assess_market_conditions(metrics: MarketMetrics, trend: MarketTrend) -> MarketConditions:
    """
    Assess market conditions from metrics and trend.

    Args:
        metrics: Market metrics
        trend: Market trend

    Returns:
        MarketConditions
    """
    market_type = classify_market_type(trend.percent_change, trend.days_on_market_change)
    demand = classify_demand(metrics.avg_days_on_market, trend.days_on_market_change)
    price_direction = classify_price_direction(trend.percent_change)

    return MarketConditions(
        market_type=market_type,
        demand=demand,
        price_direction=price_direction,
        overall=overall_condition(market_type, demand, price_direction),
    )
