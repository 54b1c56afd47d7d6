"""
Result models for the comparable-sales engine.

Inputs are plain record mappings (subject property and comparables as
JSON objects); these dataclasses describe what the engine hands back.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class AdjustmentResult:
    """
    Adjustments for one comparable against the subject.

    adjustments maps category -> signed dollar amount (subject - comp).
    adjusted_price is None when the comparable has no usable sale price.
    """
    adjustments: Dict[str, int]
    total_adjustment: int
    adjusted_price: Optional[int]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "adjustments": dict(self.adjustments),
            "totalAdjustment": self.total_adjustment,
            "adjustedPrice": self.adjusted_price,
        }


@dataclass
class SimilarityScores:
    """Per-dimension similarity of a comparable to the subject (0.0 - 1.0)."""
    location: float
    size: float
    age: float
    features: float
    total: float

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "size": self.size,
            "age": self.age,
            "features": self.features,
            "total": self.total,
        }


@dataclass
class ScoredComparable:
    """A comparable record with its similarity scores and adjustments."""
    record: Dict[str, Any]
    scores: SimilarityScores
    adjustment: AdjustmentResult

    @property
    def adjusted_price(self) -> Optional[int]:
        return self.adjustment.adjusted_price

    def to_dict(self) -> dict:
        """Flatten back into the comparable record shape."""
        result = dict(self.record)
        result["scores"] = self.scores.to_dict()
        result["adjustments"] = dict(self.adjustment.adjustments)
        result["totalAdjustment"] = self.adjustment.total_adjustment
        result["adjustedPrice"] = self.adjustment.adjusted_price
        return result


@dataclass
class CompSelectionResult:
    """
    Result of comp selection.

    Comparables are ordered best match first.
    """
    subject: Dict[str, Any]
    comparables: List[ScoredComparable] = field(default_factory=list)
    recommended_value: Optional[int] = None
    candidates_considered: int = 0

    @property
    def comp_count(self) -> int:
        """Number of comps kept after ranking."""
        return len(self.comparables)

    def to_dict(self) -> dict:
        return {
            "subject": dict(self.subject),
            "comparables": [c.to_dict() for c in self.comparables],
            "recommendedValue": self.recommended_value,
            "candidatesConsidered": self.candidates_considered,
        }
