"""
Tests for the analysis agents and their dispatcher
"""

import pytest
from datetime import date, datetime

from core.agents import (
    AgentInputError,
    AgentType,
    UnknownAgentError,
    review_report,
    run_agent,
    validate_property_data,
)


@pytest.fixture
def complete_property():
    return {
        "address": "12 Oak Lane",
        "city": "Austin",
        "state": "TX",
        "zipCode": "78701",
        "propertyType": "residential",
        "bedrooms": 3,
        "bathrooms": 2,
        "yearBuilt": 2005,
        "description": "Single-family home on a quiet street, updated kitchen and new roof.",
        "features": {"pool": True, "garage": 2, "fireplace": True},
    }


@pytest.fixture
def create_comp():
    """Factory fixture for adjusted comparables that reconcile."""
    def _create(sale_price=400000, adjustments=None):
        adjustments = adjustments if adjustments is not None else {"bedrooms": 5000}
        total = sum(adjustments.values())
        return {
            "address": f"{sale_price} Elm St",
            "salePrice": sale_price,
            "adjustments": adjustments,
            "totalAdjustment": total,
            "adjustedPrice": sale_price + total,
        }
    return _create


@pytest.fixture
def strong_report():
    description = (
        "This property sits in a desirable location near schools. Its condition is "
        "excellent throughout: each bedroom was repainted, every bathroom was "
        "renovated in 2021 and the kitchen has new appliances. The lot is level "
        "and fully fenced with mature landscaping."
    )
    return {
        "description": description,
        "propertyFeatures": {"pool": 1, "garage": 2, "fireplace": 1, "deck": 1, "shed": 1},
        "photos": ["front.jpg", "rear.jpg", "kitchen.jpg", "street.jpg"],
        "valueJustification": "x" * 120,
        "purpose": "Purchase",
        "value": 405000,
        "effectiveDate": "2024-05-01T00:00:00",
    }


# =============================================================================
# Data Validator
# =============================================================================

class TestDataValidator:

    def test_complete_record(self, complete_property):
        result = validate_property_data(complete_property, reference_date=date(2024, 6, 1))

        assert result.is_valid
        assert result.score == 1.0
        assert result.warnings == []

    def test_missing_required_fields(self, complete_property):
        del complete_property["city"]
        complete_property["zipCode"] = ""

        result = validate_property_data(complete_property, reference_date=date(2024, 6, 1))

        assert not result.is_valid
        assert {e.field for e in result.errors} == {"city", "zipCode"}
        assert result.score == 0.6

    def test_out_of_range_values_warn(self, complete_property):
        complete_property.update({"bedrooms": 40, "yearBuilt": 2030, "email": "not-an-email"})

        result = validate_property_data(complete_property, reference_date=date(2024, 6, 1))

        assert result.is_valid
        assert {w.field for w in result.warnings} == {"bedrooms", "yearBuilt", "email"}
        assert result.score == 0.85

    def test_bad_zip_format(self, complete_property):
        complete_property["zipCode"] = "7870"

        result = validate_property_data(complete_property, reference_date=date(2024, 6, 1))

        assert [w.field for w in result.warnings] == ["zipCode"]

    def test_thin_record_gets_suggestions(self, complete_property):
        complete_property.update({"description": "Nice", "features": {}})

        result = validate_property_data(complete_property)

        assert {s.field for s in result.suggestions} == {"description", "features"}

    def test_score_floor(self):
        result = validate_property_data({"bedrooms": "many", "zipCode": "x"})

        assert result.score >= 0.0


# =============================================================================
# QC Reviewer
# =============================================================================

class TestQCReviewer:

    def test_strong_report_is_approved(self, strong_report, create_comp):
        comps = [create_comp(400000), create_comp(395000), create_comp(410000)]

        result = review_report(strong_report, comps, now=datetime(2024, 6, 1))

        assert result.score == 1.0
        assert result.status == "approved"
        assert result.issues == []

    def test_thin_report_needs_revision(self):
        result = review_report({}, [], now=datetime(2024, 6, 1))

        assert result.status == "needs_revision"
        assert result.high_severity_issues
        assert result.completeness["comparablesAdequate"] is False

    def test_mismatched_math_is_flagged(self, strong_report, create_comp):
        broken = create_comp(400000)
        broken["adjustedPrice"] = 450000
        comps = [broken, create_comp(395000), create_comp(410000)]

        result = review_report(strong_report, comps, now=datetime(2024, 6, 1))

        assert result.calculations["mathAccurate"] is False
        assert result.status == "needs_revision"

    def test_value_outside_comparable_range(self, strong_report, create_comp):
        strong_report["value"] = 600000
        comps = [create_comp(400000), create_comp(395000), create_comp(410000)]

        result = review_report(strong_report, comps, now=datetime(2024, 6, 1))

        assert result.calculations["priceInMarketRange"] is False

    def test_future_effective_date(self, strong_report, create_comp):
        strong_report["effectiveDate"] = "2025-01-01T00:00:00"
        comps = [create_comp(400000), create_comp(395000), create_comp(410000)]

        result = review_report(strong_report, comps, now=datetime(2024, 6, 1))

        assert result.compliance["datesCurrent"] is False

    def test_features_fall_back_to_property(self, strong_report, create_comp):
        del strong_report["propertyFeatures"]
        comps = [create_comp(400000), create_comp(395000), create_comp(410000)]

        result = review_report(
            strong_report, comps, property_record={"features": {"a": 1}}, now=datetime(2024, 6, 1)
        )

        assert result.completeness["propertyFeaturesComplete"] is False


# =============================================================================
# Dispatch
# =============================================================================

class TestRunAgent:

    def test_unknown_agent(self):
        with pytest.raises(UnknownAgentError):
            run_agent("appraisal-writer", {})

    def test_accepts_enum(self, complete_property):
        result = run_agent(AgentType.DATA_VALIDATOR, complete_property)

        assert result["isValid"] is True

    def test_comp_selector(self):
        subject = {"buildingSize": 2000, "bedrooms": 3, "zipCode": "78701"}
        comps = [
            {"buildingSize": 1900, "bedrooms": 3, "zipCode": "78701", "salePrice": 300000},
            {"buildingSize": 2000, "bedrooms": 2, "zipCode": "78702", "salePrice": 290000},
        ]

        result = run_agent("comp-selector", {"subject": subject, "comparables": comps}, {"maxResults": 1})

        assert len(result["comparables"]) == 1
        assert result["candidatesConsidered"] == 2
        assert "analysisDate" in result

    def test_comp_selector_custom_rates(self):
        result = run_agent(
            "comp-selector",
            {"subject": {"bedrooms": 3}, "comparables": [{"bedrooms": 2, "salePrice": 100000}]},
            {"adjustments": {"bedroomValue": 8000}},
        )

        assert result["recommendedValue"] == 108000

    def test_comp_selector_requires_comparables(self):
        with pytest.raises(AgentInputError):
            run_agent("comp-selector", {"subject": {}})

    @pytest.mark.parametrize("max_results", [0, "ten"])
    def test_comp_selector_rejects_bad_max_results(self, max_results):
        with pytest.raises(AgentInputError):
            run_agent("comp-selector", {"subject": {}, "comparables": []}, {"maxResults": max_results})

    def test_market_analyzer(self):
        result = run_agent(
            "market-analyzer",
            {"location": {"city": "Austin", "state": "TX"}, "salesData": [{"price": 300000, "daysOnMarket": 50}]},
        )

        assert result["trends"]["trend"] == "Stable"

    def test_market_analyzer_requires_list(self):
        with pytest.raises(AgentInputError):
            run_agent("market-analyzer", {"location": {}, "salesData": "none"})

    def test_qc_reviewer(self, strong_report, create_comp):
        result = run_agent("qc-reviewer", {"report": strong_report, "comparables": [create_comp()]})

        assert result["completeness"]["comparablesAdequate"] is False
        assert result["status"] == "needs_revision"

    def test_payload_must_be_object(self):
        with pytest.raises(AgentInputError):
            run_agent("data-validator", ["not", "a", "dict"])

    @pytest.mark.parametrize("agent_type,data", [
        ("market-analyzer", {"location": "Austin", "salesData": []}),
        ("market-analyzer", {"location": {}, "salesData": [300000]}),
        ("comp-selector", {"subject": "12 Oak Lane", "comparables": []}),
        ("comp-selector", {"subject": {}, "comparables": ["x"]}),
        ("qc-reviewer", {"report": [], "comparables": []}),
        ("qc-reviewer", {"report": {"photos": 3}, "comparables": []}),
        ("qc-reviewer", {"report": {}, "comparables": [{"adjustments": 5000}]}),
        ("data-validator", {"features": 4}),
        ("data-validator", {"description": 12}),
    ])
    def test_malformed_payload_types(self, agent_type, data):
        with pytest.raises(AgentInputError):
            run_agent(agent_type, data)

    @pytest.mark.parametrize("options", [
        {"adjustments": {"bedroomValue": "abc"}},
        {"adjustments": "cheap"},
        {"weights": {"size": None}},
    ])
    def test_comp_selector_rejects_non_numeric_options(self, options):
        with pytest.raises(AgentInputError):
            run_agent("comp-selector", {"subject": {}, "comparables": []}, options)

    def test_comp_selector_numeric_string_rate(self):
        result = run_agent(
            "comp-selector",
            {"subject": {"bedrooms": 3}, "comparables": [{"bedrooms": 2, "salePrice": 100000}]},
            {"adjustments": {"bedroomValue": "8,000"}},
        )

        assert result["recommendedValue"] == 108000
