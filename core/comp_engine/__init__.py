"""
Comp Engine

Comparable sales adjustment and selection for appraisal reports.
"""

from .models import (
    AdjustmentResult,
    SimilarityScores,
    ScoredComparable,
    CompSelectionResult,
)
from .adjustments import (
    AdjustmentCalculator,
    AdjustmentRates,
    DEFAULT_RATES,
    compute_adjustments,
    adjusted_price,
)
from .similarity import score_similarity, DEFAULT_WEIGHTS
from .selection import CompSelector, recommended_value

__all__ = [
    # Models
    "AdjustmentResult",
    "SimilarityScores",
    "ScoredComparable",
    "CompSelectionResult",
    # Adjustments
    "AdjustmentCalculator",
    "AdjustmentRates",
    "DEFAULT_RATES",
    "compute_adjustments",
    "adjusted_price",
    # Selection
    "score_similarity",
    "DEFAULT_WEIGHTS",
    "CompSelector",
    "recommended_value",
]
