"""
Similarity scoring between a subject property and a comparable.

Four dimensions, each scored 0.0 - 1.0 and combined with fixed weights:
- location: city/state/zip agreement
- size: building size, bedroom and bathroom gaps
- age: year-built gap
- features: property type match
"""

from typing import Any, Dict, Mapping, Optional

from core.numbers import read_number

from .adjustments import BATHROOM_FIELDS, BEDROOM_FIELDS, SIZE_FIELDS, YEAR_FIELDS
from .models import SimilarityScores


# =============================================================================
# Configuration Constants
# =============================================================================

DEFAULT_WEIGHTS: Dict[str, float] = {
    "location": 0.35,
    "size": 0.25,
    "age": 0.2,
    "features": 0.2,
}

LOCATION_BASE_SCORE = 0.7
SAME_ZIP_BONUS = 0.2
SAME_CITY_BONUS = 0.1

# (relative size difference above which, penalty)
SIZE_PENALTY_BANDS = ((0.3, 0.5), (0.2, 0.3), (0.1, 0.1))

# (max year gap, score); anything beyond the last band scores AGE_FLOOR_SCORE
AGE_BANDS = ((5, 1.0), (10, 0.8), (20, 0.6), (30, 0.4))
AGE_FLOOR_SCORE = 0.2
AGE_UNKNOWN_SCORE = 0.5

SAME_TYPE_SCORE = 1.0
DIFFERENT_TYPE_SCORE = 0.3


def _same_text(a: Any, b: Any) -> bool:
    if not a or not b:
        return False
    return str(a).strip().lower() == str(b).strip().lower()


def location_score(subject: Mapping[str, Any], comp: Mapping[str, Any]) -> float:
    score = LOCATION_BASE_SCORE
    if _same_text(subject.get("zipCode"), comp.get("zipCode")):
        score += SAME_ZIP_BONUS
    if _same_text(subject.get("city"), comp.get("city")) and _same_text(
        subject.get("state"), comp.get("state")
    ):
        score += SAME_CITY_BONUS
    return round(min(score, 1.0), 4)


def _room_penalty(subject: Mapping[str, Any], comp: Mapping[str, Any], fields) -> float:
    subject_rooms = read_number(subject, fields)
    comp_rooms = read_number(comp, fields)
    if subject_rooms is None or comp_rooms is None:
        return 0.0
    gap = abs(subject_rooms - comp_rooms)
    if gap >= 2:
        return 0.2
    if gap >= 1:
        return 0.1
    return 0.0


def size_score(subject: Mapping[str, Any], comp: Mapping[str, Any]) -> float:
    score = 1.0

    subject_size = read_number(subject, SIZE_FIELDS)
    comp_size = read_number(comp, SIZE_FIELDS)
    if subject_size is not None and comp_size is not None and subject_size > 0:
        relative = abs(subject_size - comp_size) / subject_size
        for threshold, penalty in SIZE_PENALTY_BANDS:
            if relative > threshold:
                score -= penalty
                break

    score -= _room_penalty(subject, comp, BEDROOM_FIELDS)
    score -= _room_penalty(subject, comp, BATHROOM_FIELDS)

    return round(max(score, 0.0), 4)


def age_score(subject: Mapping[str, Any], comp: Mapping[str, Any]) -> float:
    subject_year = read_number(subject, YEAR_FIELDS)
    comp_year = read_number(comp, YEAR_FIELDS)
    if subject_year is None or comp_year is None:
        return AGE_UNKNOWN_SCORE

    gap = abs(subject_year - comp_year)
    for max_gap, score in AGE_BANDS:
        if gap <= max_gap:
            return score
    return AGE_FLOOR_SCORE


def feature_score(subject: Mapping[str, Any], comp: Mapping[str, Any]) -> float:
    if subject.get("propertyType") == comp.get("propertyType"):
        return SAME_TYPE_SCORE
    return DIFFERENT_TYPE_SCORE


def score_similarity(
    subject: Mapping[str, Any],
    comp: Mapping[str, Any],
    weights: Optional[Mapping[str, float]] = None,
) -> SimilarityScores:
    """
    Score how closely a comparable matches the subject.

    Args:
        subject: Subject property record
        comp: Comparable record
        weights: Dimension weights (defaults to DEFAULT_WEIGHTS)

    Returns:
        SimilarityScores with the weighted total
    """
    weights = {**DEFAULT_WEIGHTS, **(weights or {})}

    location = location_score(subject, comp)
    size = size_score(subject, comp)
    age = age_score(subject, comp)
    features = feature_score(subject, comp)

    total = (
        location * weights["location"]
        + size * weights["size"]
        + age * weights["age"]
        + features * weights["features"]
    )

    return SimilarityScores(
        location=location,
        size=size,
        age=age,
        features=features,
        total=round(total, 4),
    )
