"""
QC Reviewer Agent - appraisal report quality control

Reviews a report and its comparables in three groups of checks:
- completeness: description, features, comparables, photos, justification
- calculations: comparable adjustments reconcile with adjusted prices,
  concluded value sits inside the adjusted comparable range
- compliance: purpose stated, comparables adjusted, effective date current

Group pass rates are weighted 0.4 / 0.3 / 0.3. A report is approved when
the score is at least 0.9 and there are no high-severity issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Final, Mapping, Optional, Sequence

from core.numbers import read_number
from utils.formatting import round_half_up


MIN_DESCRIPTION_LENGTH: Final[int] = 200
DESCRIPTION_KEYWORDS: Final[tuple[str, ...]] = (
    "property",
    "location",
    "condition",
    "bedroom",
    "bathroom",
    "kitchen",
)
MAX_MISSING_KEYWORDS: Final[int] = 1
MIN_FEATURES: Final[int] = 5
MIN_COMPARABLES: Final[int] = 3
MIN_PHOTOS: Final[int] = 4
MIN_JUSTIFICATION_LENGTH: Final[int] = 100

COMPLETENESS_WEIGHT: Final[float] = 0.4
CALCULATIONS_WEIGHT: Final[float] = 0.3
COMPLIANCE_WEIGHT: Final[float] = 0.3
APPROVAL_SCORE: Final[float] = 0.9

APPROVED: Final = "approved"
NEEDS_REVISION: Final = "needs_revision"


@dataclass
class QCIssue:
    severity: str  # high, medium
    type: str  # completeness, calculations, compliance
    message: str

    def to_dict(self) -> dict:
        return {"severity": self.severity, "type": self.type, "message": self.message}


@dataclass
class QCReviewResult:
    """Outcome of a QC review."""

    score: float
    status: str
    completeness: dict[str, bool]
    calculations: dict[str, bool]
    compliance: dict[str, bool]
    issues: list[QCIssue] = field(default_factory=list)
    review_date: Optional[datetime] = None

    @property
    def high_severity_issues(self) -> list[QCIssue]:
        return [i for i in self.issues if i.severity == "high"]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "status": self.status,
            "completeness": dict(self.completeness),
            "calculations": dict(self.calculations),
            "compliance": dict(self.compliance),
            "issues": [i.to_dict() for i in self.issues],
            "reviewDate": self.review_date.isoformat() if self.review_date else None,
        }


# Check name -> (issue type, severity, message) raised when the check fails
ISSUE_CATALOGUE: Final[dict[str, tuple[str, str, str]]] = {
    "propertyDescriptionComplete": ("completeness", "high", "Property description needs more detail"),
    "propertyFeaturesComplete": ("completeness", "medium", "Add more property features"),
    "comparablesAdequate": ("completeness", "high", "Need at least 3 comparables"),
    "photosAdequate": ("completeness", "medium", "Need more property photos"),
    "valuesJustified": ("completeness", "high", "Value conclusion needs better justification"),
    "adjustmentsConsistent": ("calculations", "medium", "Comparable adjustment totals do not match their line items"),
    "mathAccurate": ("calculations", "high", "Comparable adjusted prices do not reconcile with sale price plus adjustments"),
    "priceInMarketRange": ("calculations", "high", "Concluded value falls outside the adjusted comparable range"),
    "meetsStandards": ("compliance", "high", "Report does not state its purpose"),
    "followsMethodology": ("compliance", "medium", "Every comparable must be adjusted before review"),
    "datesCurrent": ("compliance", "high", "Report dates are not current"),
}


def has_minimal_description(description: Optional[str]) -> bool:
    """Long enough and covers all but one of the key topics."""
    if not description or len(description) < MIN_DESCRIPTION_LENGTH:
        return False
    lowered = description.lower()
    missing = [k for k in DESCRIPTION_KEYWORDS if k not in lowered]
    return len(missing) <= MAX_MISSING_KEYWORDS


def _adjustment_sum(comp: Mapping[str, Any]) -> Optional[float]:
    adjustments = comp.get("adjustments") or {}
    values = [read_number(adjustments, key) for key in adjustments]
    if any(v is None for v in values):
        return None
    return sum(values)


def _totals_match(comp: Mapping[str, Any]) -> bool:
    total = read_number(comp, "totalAdjustment")
    if total is None:
        return True
    line_items = _adjustment_sum(comp)
    return line_items is not None and line_items == total


def _adjusted_price_reconciles(comp: Mapping[str, Any]) -> bool:
    sale_price = read_number(comp, ("salePrice", "price"))
    adjusted = read_number(comp, "adjustedPrice")
    line_items = _adjustment_sum(comp)
    if sale_price is None or adjusted is None or line_items is None:
        return False
    return round_half_up(sale_price + line_items) == adjusted


def _value_in_range(report: Mapping[str, Any], comparables: Sequence[Mapping[str, Any]]) -> bool:
    value = read_number(report, "value")
    adjusted = [p for p in (read_number(c, "adjustedPrice") for c in comparables) if p is not None]
    if value is None or not adjusted:
        return True
    return min(adjusted) <= value <= max(adjusted)


def _effective_date_current(report: Mapping[str, Any], now: datetime) -> bool:
    raw = report.get("effectiveDate")
    if not raw:
        return False
    try:
        effective = raw if isinstance(raw, datetime) else datetime.fromisoformat(str(raw))
    except ValueError:
        return False
    if effective.tzinfo is not None:
        effective = effective.replace(tzinfo=None)
    return effective <= now


def _pass_rate(checks: Mapping[str, bool]) -> float:
    return sum(1 for passed in checks.values() if passed) / len(checks)


def review_report(
    report: Mapping[str, Any],
    comparables: Sequence[Mapping[str, Any]],
    property_record: Optional[Mapping[str, Any]] = None,
    now: Optional[datetime] = None,
) -> QCReviewResult:
    """
    Run quality control over a report.

    Args:
        report: Report record (description, photos, valueJustification,
            purpose, value, effectiveDate ...)
        comparables: The report's comparable records
        property_record: Subject property, used for feature counts when
            the report does not carry its own
        now: Reference time (default: utcnow)

    Returns:
        QCReviewResult
    """
    now = now or datetime.utcnow()
    features = report.get("propertyFeatures")
    if features is None and property_record is not None:
        features = property_record.get("features")

    completeness = {
        "propertyDescriptionComplete": has_minimal_description(report.get("description")),
        "propertyFeaturesComplete": len(features or {}) >= MIN_FEATURES,
        "comparablesAdequate": len(comparables) >= MIN_COMPARABLES,
        "photosAdequate": len(report.get("photos") or []) >= MIN_PHOTOS,
        "valuesJustified": len(report.get("valueJustification") or "") >= MIN_JUSTIFICATION_LENGTH,
    }
    calculations = {
        "adjustmentsConsistent": all(_totals_match(c) for c in comparables),
        "mathAccurate": all(_adjusted_price_reconciles(c) for c in comparables),
        "priceInMarketRange": _value_in_range(report, comparables),
    }
    compliance = {
        "meetsStandards": bool(report.get("purpose")),
        "followsMethodology": bool(comparables) and all(
            c.get("adjustedPrice") is not None for c in comparables
        ),
        "datesCurrent": _effective_date_current(report, now),
    }

    issues = []
    for group in (completeness, calculations, compliance):
        for check, passed in group.items():
            if not passed:
                issue_type, severity, message = ISSUE_CATALOGUE[check]
                issues.append(QCIssue(severity=severity, type=issue_type, message=message))

    weighted = (
        _pass_rate(completeness) * COMPLETENESS_WEIGHT
        + _pass_rate(calculations) * CALCULATIONS_WEIGHT
        + _pass_rate(compliance) * COMPLIANCE_WEIGHT
    )
    score = round_half_up(weighted * 100) / 100

    has_high = any(i.severity == "high" for i in issues)
    status = APPROVED if score >= APPROVAL_SCORE and not has_high else NEEDS_REVISION

    return QCReviewResult(
        score=score,
        status=status,
        completeness=completeness,
        calculations=calculations,
        compliance=compliance,
        issues=issues,
        review_date=now,
    )
