"""
Comparable Adjustment Calculator

Computes signed dollar adjustments that bring a comparable sale in line
with the subject property:

- Building size: $100 per square foot
- Bedrooms: $5,000 per bedroom
- Bathrooms: $7,500 per bathroom
- Age: $1,000 per year beyond a 5-year deadband
- Lot size: $2 per unit of lot size
- Parking: $5,000 per space

Every difference is subject - comparable: a subject that is larger, newer
or better equipped than the comparable produces a positive adjustment.
A category whose field is missing or unparseable on either side is
skipped silently.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from core.numbers import Number, read_number
from utils.formatting import round_half_up

from .models import AdjustmentResult


# =============================================================================
# Configuration Constants
# =============================================================================

PRICE_PER_SQFT = 100
BEDROOM_VALUE = 5000
BATHROOM_VALUE = 7500
AGE_VALUE_PER_YEAR = 1000
LOT_VALUE_PER_UNIT = 2
PARKING_SPACE_VALUE = 5000

# Years of age difference absorbed before any age adjustment applies
AGE_DEADBAND_YEARS = 5

# Record fields per category (first name is canonical, the rest are aliases)
SIZE_FIELDS: Tuple[str, ...] = ("buildingSize", "squareFeet")
BEDROOM_FIELDS: Tuple[str, ...] = ("bedrooms",)
BATHROOM_FIELDS: Tuple[str, ...] = ("bathrooms",)
YEAR_FIELDS: Tuple[str, ...] = ("yearBuilt",)
LOT_FIELDS: Tuple[str, ...] = ("lotSize",)
PARKING_FIELDS: Tuple[str, ...] = ("parkingSpaces", "garage")
SALE_PRICE_FIELDS: Tuple[str, ...] = ("salePrice", "price")


@dataclass(frozen=True)
class AdjustmentRates:
    """Per-unit dollar rates used by the calculator."""
    price_per_sqft: Number = PRICE_PER_SQFT
    bedroom_value: Number = BEDROOM_VALUE
    bathroom_value: Number = BATHROOM_VALUE
    age_value_per_year: Number = AGE_VALUE_PER_YEAR
    lot_value_per_unit: Number = LOT_VALUE_PER_UNIT
    parking_space_value: Number = PARKING_SPACE_VALUE
    age_deadband_years: Number = AGE_DEADBAND_YEARS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AdjustmentRates":
        """Build rates from a camelCase override mapping."""
        defaults = cls()
        return cls(
            price_per_sqft=data.get("pricePerSqFt", defaults.price_per_sqft),
            bedroom_value=data.get("bedroomValue", defaults.bedroom_value),
            bathroom_value=data.get("bathroomValue", defaults.bathroom_value),
            age_value_per_year=data.get("ageValuePerYear", defaults.age_value_per_year),
            lot_value_per_unit=data.get("lotValuePerUnit", defaults.lot_value_per_unit),
            parking_space_value=data.get("parkingSpaceValue", defaults.parking_space_value),
            age_deadband_years=data.get("ageDeadbandYears", defaults.age_deadband_years),
        )


DEFAULT_RATES = AdjustmentRates()


def _difference(
    subject: Mapping[str, Any],
    comp: Mapping[str, Any],
    fields: Tuple[str, ...],
) -> Optional[Number]:
    """subject - comp for a field, or None if either side is unusable."""
    subject_value = read_number(subject, fields)
    comp_value = read_number(comp, fields)
    if subject_value is None or comp_value is None:
        return None
    return subject_value - comp_value


def _age_adjustment(diff: Number, rates: AdjustmentRates) -> Optional[int]:
    deadband = rates.age_deadband_years
    if abs(diff) <= deadband:
        return None
    beyond = diff - deadband if diff > deadband else diff + deadband
    return round_half_up(beyond * rates.age_value_per_year)


def compute_adjustments(
    subject: Mapping[str, Any],
    comp: Mapping[str, Any],
    rates: AdjustmentRates = DEFAULT_RATES,
) -> Dict[str, int]:
    """
    Compute category adjustments for one comparable.

    Args:
        subject: Subject property record
        comp: Comparable sale record
        rates: Per-unit rates (defaults to the standard schedule)

    Returns:
        Mapping of category -> signed whole-dollar amount. Categories with
        no difference, or with missing data on either side, are absent.
    """
    adjustments: Dict[str, int] = {}

    linear_categories = (
        ("buildingSize", SIZE_FIELDS, rates.price_per_sqft),
        ("bedrooms", BEDROOM_FIELDS, rates.bedroom_value),
        ("bathrooms", BATHROOM_FIELDS, rates.bathroom_value),
    )
    for category, fields, rate in linear_categories:
        diff = _difference(subject, comp, fields)
        if diff:
            adjustments[category] = round_half_up(diff * rate)

    year_diff = _difference(subject, comp, YEAR_FIELDS)
    if year_diff is not None:
        age = _age_adjustment(year_diff, rates)
        if age is not None:
            adjustments["age"] = age

    trailing_categories = (
        ("lotSize", LOT_FIELDS, rates.lot_value_per_unit),
        ("parking", PARKING_FIELDS, rates.parking_space_value),
    )
    for category, fields, rate in trailing_categories:
        diff = _difference(subject, comp, fields)
        if diff:
            adjustments[category] = round_half_up(diff * rate)

    return adjustments


def adjusted_price(
    comp: Mapping[str, Any],
    adjustments: Mapping[str, int],
) -> Optional[int]:
    """
    Comparable sale price plus the sum of its adjustments.

    Returns None when the comparable carries no parseable sale price.
    """
    sale_price = read_number(comp, SALE_PRICE_FIELDS)
    if sale_price is None:
        return None
    return round_half_up(sale_price + sum(adjustments.values()))


class AdjustmentCalculator:
    """
    Applies an adjustment rate schedule to subject/comparable pairs.

    Pure and side-effect free; one instance can be shared freely.
    """

    def __init__(self, rates: Optional[AdjustmentRates] = None):
        self._rates = rates or DEFAULT_RATES

    @property
    def rates(self) -> AdjustmentRates:
        return self._rates

    def calculate(
        self,
        subject: Mapping[str, Any],
        comp: Mapping[str, Any],
    ) -> AdjustmentResult:
        """
        Compute adjustments, their total, and the adjusted price.

        Args:
            subject: Subject property record
            comp: Comparable sale record

        Returns:
            AdjustmentResult
        """
        adjustments = compute_adjustments(subject, comp, self._rates)
        return AdjustmentResult(
            adjustments=adjustments,
            total_adjustment=sum(adjustments.values()),
            adjusted_price=adjusted_price(comp, adjustments),
        )
