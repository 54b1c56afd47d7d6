"""
Market Analyzer - metrics, trend, conditions and a plain-language summary.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

from utils.formatting import format_currency

from .conditions import MarketConditions, assess_market_conditions
from .metrics import MarketMetrics, calculate_market_metrics
from .trends import MarketTrend, analyze_market_trends


logger = logging.getLogger(__name__)


@dataclass
class MarketAnalysis:
    """Complete market analysis for one location."""
    location: dict
    metrics: MarketMetrics
    trends: MarketTrend
    conditions: MarketConditions
    summary: str
    analysis_date: datetime

    def to_dict(self) -> dict:
        return {
            "location": dict(self.location),
            "metrics": self.metrics.to_dict(),
            "trends": self.trends.to_dict(),
            "conditions": self.conditions.to_dict(),
            "summary": self.summary,
            "analysisDate": self.analysis_date.isoformat(),
        }


def describe_location(location: Mapping[str, Any]) -> str:
    city = location.get("city", "")
    state = location.get("state", "")
    zip_code = location.get("zipCode")
    place = f"{city}, {state}"
    return f"{place} {zip_code}" if zip_code else place


def generate_market_summary(
    location: Mapping[str, Any],
    metrics: MarketMetrics,
    conditions: MarketConditions,
) -> str:
    """Plain-language summary of the market."""
    return (
        f"The {describe_location(location)} real estate market is currently a "
        f"{conditions.market_type} with {conditions.demand.lower()} buyer demand. "
        f"Property values are {conditions.price_direction.lower()}, with an average "
        f"price of {format_currency(metrics.avg_price)} and a median price of "
        f"{format_currency(metrics.median_price)}. "
        f"The average property spends {metrics.avg_days_on_market} days on the "
        f"market before selling. "
        f"Overall market conditions are {conditions.overall.lower()}."
    )


def analyze_market(
    location: Mapping[str, Any],
    sales: Iterable[Mapping[str, Any]],
    analysis_date: datetime = None,
) -> MarketAnalysis:
    """
    Run the full market analysis for a location.

    Args:
        location: Mapping with city, state and optional zipCode
        sales: Sale records (price, daysOnMarket)
        analysis_date: Timestamp to stamp on the result (default: now)

    Returns:
        MarketAnalysis
    """
    metrics = calculate_market_metrics(sales)
    trends = analyze_market_trends(metrics)
    conditions = assess_market_conditions(metrics, trends)

    logger.info(
        "Market analysis for %s: %d sales, %s",
        describe_location(location),
        metrics.count,
        conditions.overall,
    )

    return MarketAnalysis(
        location=dict(location),
        metrics=metrics,
        trends=trends,
        conditions=conditions,
        summary=generate_market_summary(location, metrics, conditions),
        analysis_date=analysis_date or datetime.utcnow(),
    )
