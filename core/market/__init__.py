"""
Market analysis: metrics, trend heuristic and condition assessment.
"""

from .metrics import MarketMetrics, calculate_market_metrics, median
from .trends import MarketTrend, analyze_market_trends, trend_score, trend_label
from .conditions import (
    MarketConditions,
    assess_market_conditions,
    classify_market_type,
    classify_demand,
    classify_price_direction,
    overall_condition,
)
from .analyzer import MarketAnalysis, analyze_market, generate_market_summary

__all__ = [
    "MarketMetrics",
    "calculate_market_metrics",
    "median",
    "MarketTrend",
    "analyze_market_trends",
    "trend_score",
    "trend_label",
    "MarketConditions",
    "assess_market_conditions",
    "classify_market_type",
    "classify_demand",
    "classify_price_direction",
    "overall_condition",
    "MarketAnalysis",
    "analyze_market",
    "generate_market_summary",
]
