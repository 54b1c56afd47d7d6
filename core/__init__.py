"""
TerraFusionPro Appraisal Engine - Core Business Logic

This package provides the appraisal pipeline:
1. Records (users, properties, reports, comparables, forms)
2. Comparable adjustment and selection (comp_engine)
3. Market metrics, trend heuristic and condition assessment (market)
4. Report status workflow (reports)
5. Form validation and completion (forms)
6. Analysis agents (agents)
"""

from .models import (
    User,
    UserRole,
    Property,
    PropertyType,
    AppraisalReport,
    ReportStatus,
    Comparable,
    Form,
    FormType,
    FormSubmission,
)

from .comp_engine import (
    AdjustmentCalculator,
    AdjustmentRates,
    AdjustmentResult,
    CompSelector,
    CompSelectionResult,
)

from .market import (
    MarketMetrics,
    MarketTrend,
    MarketConditions,
    MarketAnalysis,
    calculate_market_metrics,
    analyze_market_trends,
    assess_market_conditions,
    analyze_market,
)

from .reports import (
    InvalidStatusTransition,
    is_allowed,
    apply_status_change,
)

from .storage import Storage, get_storage, set_storage, RecordNotFoundError

__all__ = [
    # Models
    "User",
    "UserRole",
    "Property",
    "PropertyType",
    "AppraisalReport",
    "ReportStatus",
    "Comparable",
    "Form",
    "FormType",
    "FormSubmission",
    # Comp Engine
    "AdjustmentCalculator",
    "AdjustmentRates",
    "AdjustmentResult",
    "CompSelector",
    "CompSelectionResult",
    # Market
    "MarketMetrics",
    "MarketTrend",
    "MarketConditions",
    "MarketAnalysis",
    "calculate_market_metrics",
    "analyze_market_trends",
    "assess_market_conditions",
    "analyze_market",
    # Reports
    "InvalidStatusTransition",
    "is_allowed",
    "apply_status_change",
    # Storage
    "Storage",
    "get_storage",
    "set_storage",
    "RecordNotFoundError",
]
