"""
Comparable Selection

Ranks candidate comparables by similarity to the subject, attaches
adjustments to each, and derives a recommended value from the adjusted
prices of the best matches.

Pipeline order:
1. SCORE - similarity on location, size, age, features
2. ADJUST - category adjustments and adjusted price
3. RANK - best total score first (ties keep input order)
4. RECOMMEND - rounded mean of adjusted prices
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from utils.formatting import round_half_up

from .adjustments import AdjustmentCalculator
from .models import CompSelectionResult, ScoredComparable
from .similarity import score_similarity


logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10


class CompSelector:
    """Scores, adjusts and ranks comparable sales for a subject property."""

    def __init__(
        self,
        calculator: Optional[AdjustmentCalculator] = None,
        weights: Optional[Mapping[str, float]] = None,
    ):
        self._calculator = calculator or AdjustmentCalculator()
        self._weights = dict(weights) if weights else None

    def score(
        self,
        subject: Mapping[str, Any],
        comp: Mapping[str, Any],
    ) -> ScoredComparable:
        """Score and adjust a single comparable."""
        return ScoredComparable(
            record=dict(comp),
            scores=score_similarity(subject, comp, self._weights),
            adjustment=self._calculator.calculate(subject, comp),
        )

    def select(
        self,
        subject: Mapping[str, Any],
        comparables: Sequence[Mapping[str, Any]],
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> CompSelectionResult:
        """
        Rank comparables and compute a recommended value.

        Args:
            subject: Subject property record
            comparables: Candidate comparable records
            max_results: How many of the best matches to keep

        Returns:
            CompSelectionResult, best match first
        """
        if max_results < 1:
            raise ValueError("max_results must be at least 1")

        scored = [self.score(subject, comp) for comp in comparables]
        ranked = sorted(scored, key=lambda c: c.scores.total, reverse=True)
        kept = ranked[:max_results]

        result = CompSelectionResult(
            subject=dict(subject),
            comparables=kept,
            recommended_value=recommended_value(kept),
            candidates_considered=len(comparables),
        )

        logger.info(
            "Selected %d of %d comparables (recommended value %s)",
            result.comp_count,
            result.candidates_considered,
            result.recommended_value,
        )
        return result


def recommended_value(comparables: List[ScoredComparable]) -> Optional[int]:
    """Rounded mean of the adjusted prices, or None if none are usable."""
    prices = [c.adjusted_price for c in comparables if c.adjusted_price is not None]
    if not prices:
        return None
    return round_half_up(sum(prices) / len(prices))
