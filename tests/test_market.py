"""
Tests for market metrics, trend heuristic and condition assessment
"""

import pytest
from datetime import datetime

from core.market import (
    MarketMetrics,
    analyze_market,
    analyze_market_trends,
    assess_market_conditions,
    calculate_market_metrics,
    classify_demand,
    classify_market_type,
    classify_price_direction,
    median,
    overall_condition,
    trend_label,
    trend_score,
)


@pytest.fixture
def create_sales():
    """Factory fixture: sales at the given prices, all with the same days on market."""
    def _create(prices, days_on_market=30):
        return [{"price": price, "daysOnMarket": days_on_market} for price in prices]
    return _create


# =============================================================================
# Metrics
# =============================================================================

class TestMarketMetrics:

    def test_empty_input_is_all_zeros(self):
        metrics = calculate_market_metrics([])

        assert metrics == MarketMetrics(0, 0, 0, 0, 0, 0)
        assert metrics.to_dict() == {
            "count": 0,
            "avgPrice": 0,
            "medianPrice": 0,
            "minPrice": 0,
            "maxPrice": 0,
            "avgDaysOnMarket": 0,
        }

    def test_even_count_median(self):
        assert median([100000, 200000, 300000, 400000]) == 250000

    def test_odd_count_median(self):
        assert median([300000, 100000, 200000]) == 200000

    def test_summary_statistics(self, create_sales):
        metrics = calculate_market_metrics(create_sales([100000, 200000, 300000, 400000], 45))

        assert metrics.count == 4
        assert metrics.avg_price == 250000
        assert metrics.median_price == 250000
        assert metrics.min_price == 100000
        assert metrics.max_price == 400000
        assert metrics.avg_days_on_market == 45

    def test_unpriced_sales_are_ignored(self):
        sales = [{"price": "200000", "daysOnMarket": 20}, {"price": None, "daysOnMarket": 40}]

        metrics = calculate_market_metrics(sales)

        assert metrics.count == 1
        assert metrics.avg_price == 200000

    def test_sale_price_alias(self):
        assert calculate_market_metrics([{"salePrice": 310000}]).avg_price == 310000

    def test_missing_days_on_market_averages_zero(self):
        assert calculate_market_metrics([{"price": 100000}]).avg_days_on_market == 0


# =============================================================================
# Trends
# =============================================================================

class TestMarketTrends:

    @pytest.mark.parametrize("days,expected", [
        (0, 10.0),
        (50, 5.0),
        (100, 0.0),
        (150, 0.0),
    ])
    def test_trend_score_is_clamped(self, days, expected):
        assert trend_score(days) == expected

    @pytest.mark.parametrize("days,label", [
        (24, "Strong growth"),
        (25, "Moderate growth"),
        (35, "Moderate growth"),
        (40, "Stable"),
        (60, "Stable"),
        (61, "Slight decline"),
        (75, "Slight decline"),
        (76, "Significant decline"),
    ])
    def test_label_thresholds_by_days_on_market(self, days, label):
        metrics = MarketMetrics(count=3, avg_price=300000, median_price=300000,
                                min_price=250000, max_price=350000, avg_days_on_market=days)

        assert analyze_market_trends(metrics).trend == label

    def test_no_sales_is_insufficient_data(self):
        trend = analyze_market_trends(calculate_market_metrics([]))

        assert trend.trend == "Insufficient data"
        assert trend.percent_change == 0.0
        assert trend.price_change == 0

    def test_fast_market_simulation(self, create_sales):
        trend = analyze_market_trends(calculate_market_metrics(create_sales([300000], 20)))

        assert trend.score == 8.0
        assert trend.percent_change == 6.0
        assert trend.price_change == 18000
        assert trend.days_on_market_change == -3
        assert trend.inventory_change == -2

    def test_simulated_changes_are_capped(self, create_sales):
        trend = analyze_market_trends(calculate_market_metrics(create_sales([300000], 300)))

        assert trend.percent_change == -10.0
        assert trend.days_on_market_change == 5
        assert trend.inventory_change == 3

    @pytest.mark.parametrize("percent,label", [
        (5.1, "Strong growth"),
        (5.0, "Moderate growth"),
        (2.0, "Stable"),
        (-2.0, "Stable"),
        (-5.0, "Slight decline"),
        (-5.1, "Significant decline"),
    ])
    def test_trend_label(self, percent, label):
        assert trend_label(percent) == label


# =============================================================================
# Conditions
# =============================================================================

class TestMarketConditions:

    @pytest.mark.parametrize("percent,dom_change,label", [
        (9.0, -11, "Hot Seller's Market"),
        (9.0, -10, "Seller's Market"),
        (4.0, -1, "Seller's Market"),
        (4.0, 0, "Buyer's Market"),
        (3.0, 5, "Balanced Market"),
        (-2.9, 0, "Balanced Market"),
        (-3.0, 0, "Buyer's Market"),
        (-7.9, 0, "Buyer's Market"),
        (-8.0, 0, "Strong Buyer's Market"),
    ])
    def test_market_type(self, percent, dom_change, label):
        assert classify_market_type(percent, dom_change) == label

    @pytest.mark.parametrize("days,dom_change,label", [
        (29, -1, "Very Strong"),
        (29, 0, "Strong"),
        (44, 0, "Strong"),
        (44, 1, "Moderate"),
        (59, 1, "Moderate"),
        (60, 0, "Weak"),
        (89, 0, "Weak"),
        (90, 0, "Very Weak"),
    ])
    def test_demand(self, days, dom_change, label):
        assert classify_demand(days, dom_change) == label

    @pytest.mark.parametrize("percent,label", [
        (8.1, "Rising Rapidly"),
        (8.0, "Rising"),
        (2.1, "Rising"),
        (2.0, "Stable"),
        (-2.0, "Stable"),
        (-8.0, "Declining"),
        (-8.1, "Declining Rapidly"),
    ])
    def test_price_direction(self, percent, label):
        assert classify_price_direction(percent) == label

    def test_overall_bands(self):
        assert overall_condition("Hot Seller's Market", "Very Strong", "Rising Rapidly") == "Excellent"
        assert overall_condition("Seller's Market", "Strong", "Rising") == "Good"
        assert overall_condition("Balanced Market", "Moderate", "Stable") == "Fair"
        assert overall_condition("Buyer's Market", "Weak", "Declining") == "Challenging"
        assert overall_condition("Strong Buyer's Market", "Very Weak", "Declining Rapidly") == "Difficult"

    def test_overall_mixed_scores(self):
        # (5 + 4 + 4) / 3 = 4.33, (4 + 4 + 3) / 3 = 3.67, (4 + 3 + 3) / 3 = 3.33
        assert overall_condition("Hot Seller's Market", "Strong", "Rising") == "Good"
        assert overall_condition("Balanced Market", "Strong", "Rising") == "Good"
        assert overall_condition("Balanced Market", "Moderate", "Rising") == "Fair"

    def test_unknown_labels_score_lowest(self):
        assert overall_condition("?", "?", "?") == "Difficult"

    def test_assessment_from_fast_market(self, create_sales):
        metrics = calculate_market_metrics(create_sales([300000], 20))
        conditions = assess_market_conditions(metrics, analyze_market_trends(metrics))

        assert conditions.market_type == "Seller's Market"
        assert conditions.demand == "Very Strong"
        assert conditions.price_direction == "Rising"
        assert conditions.overall == "Good"


# =============================================================================
# Full analysis
# =============================================================================

class TestAnalyzeMarket:

    def test_full_analysis(self, create_sales):
        location = {"city": "Austin", "state": "TX", "zipCode": "78701"}
        analysis_date = datetime(2024, 6, 1)

        result = analyze_market(location, create_sales([280000, 300000, 320000], 20), analysis_date)
        data = result.to_dict()

        assert data["metrics"]["medianPrice"] == 300000
        assert data["trends"]["trend"] == "Strong growth"
        assert data["conditions"]["overall"] == "Good"
        assert "Austin" in data["summary"]
        assert "$300,000" in data["summary"]

    def test_empty_sales(self):
        result = analyze_market({"city": "Nowhere", "state": "KS"}, [])

        assert result.metrics.count == 0
        assert result.trends.trend == "Insufficient data"
