"""
Data Validator Agent - property record quality checks

Grades a property record on three levels:
- errors: required fields missing (record is invalid)
- warnings: numeric fields out of range, malformed zip or email
- suggestions: thin description or feature list

score = max(0, 1 - 0.2 * errors - 0.05 * warnings)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Final, Mapping, Optional

from core.numbers import parse_number


REQUIRED_PROPERTY_FIELDS: Final[tuple[str, ...]] = (
    "address",
    "city",
    "state",
    "zipCode",
    "propertyType",
)

ZIP_CODE_REGEX: Final = re.compile(r"^\d{5}(-\d{4})?$")
EMAIL_REGEX: Final = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_DESCRIPTION_LENGTH: Final[int] = 50
MIN_FEATURE_COUNT: Final[int] = 3

ERROR_PENALTY: Final[float] = 0.2
WARNING_PENALTY: Final[float] = 0.05


@dataclass
class ValidationIssue:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


@dataclass
class DataValidationResult:
    """Outcome of the data validator."""

    is_valid: bool
    score: float
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
    suggestions: list[ValidationIssue] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "score": self.score,
            "errors": [i.to_dict() for i in self.errors],
            "warnings": [i.to_dict() for i in self.warnings],
            "suggestions": [i.to_dict() for i in self.suggestions],
        }


def _numeric_ranges(reference_year: int) -> tuple[tuple[str, int, int], ...]:
    return (
        ("bedrooms", 0, 20),
        ("bathrooms", 0, 20),
        ("yearBuilt", 1800, reference_year),
    )


def _present(value: Any) -> bool:
    return value is not None and value != ""


def validate_property_data(
    data: Mapping[str, Any],
    reference_date: Optional[date] = None,
) -> DataValidationResult:
    """
    Check a property record for completeness and plausibility.

    Args:
        data: Property record
        reference_date: Date used for the year-built ceiling (default: today)

    Returns:
        DataValidationResult
    """
    reference_year = (reference_date or date.today()).year
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    suggestions: list[ValidationIssue] = []

    for name in REQUIRED_PROPERTY_FIELDS:
        if not _present(data.get(name)):
            errors.append(ValidationIssue(name, f"Required field {name} is missing"))

    for name, low, high in _numeric_ranges(reference_year):
        raw = data.get(name)
        if not _present(raw):
            continue
        value = parse_number(raw)
        if value is None:
            warnings.append(ValidationIssue(name, f"Field {name} should be a number"))
        elif value < low or value > high:
            warnings.append(
                ValidationIssue(name, f"Field {name} should be between {low} and {high}")
            )

    zip_code = data.get("zipCode")
    if _present(zip_code) and not ZIP_CODE_REGEX.match(str(zip_code)):
        warnings.append(
            ValidationIssue("zipCode", "ZIP code should be in format XXXXX or XXXXX-XXXX")
        )

    email = data.get("email")
    if _present(email) and not EMAIL_REGEX.match(str(email)):
        warnings.append(ValidationIssue("email", "Email should be in a valid format"))

    description = data.get("description") or ""
    if len(description) < MIN_DESCRIPTION_LENGTH:
        suggestions.append(ValidationIssue(
            "description",
            f"Add a more detailed property description "
            f"(at least {MIN_DESCRIPTION_LENGTH} characters)",
        ))

    features = data.get("features") or {}
    if len(features) < MIN_FEATURE_COUNT:
        suggestions.append(ValidationIssue(
            "features", f"Add more property features (at least {MIN_FEATURE_COUNT})"
        ))

    score = max(0.0, 1 - len(errors) * ERROR_PENALTY - len(warnings) * WARNING_PENALTY)

    return DataValidationResult(
        is_valid=not errors,
        score=round(score, 2),
        errors=errors,
        warnings=warnings,
        suggestions=suggestions,
    )
