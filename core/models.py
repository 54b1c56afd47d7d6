"""
Data models for the appraisal engine.

Records travel as camelCase JSON objects (the storage layer and the HTTP
surface both speak that shape). Each dataclass converts to and from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


# =============================================================================
# Enums
# =============================================================================


class UserRole(Enum):
    """Role of a platform user. Gates endpoints and status transitions."""

    ADMIN = "admin"
    APPRAISER = "appraiser"
    REVIEWER = "reviewer"
    CLIENT = "client"
    FIELD_AGENT = "field_agent"

    @classmethod
    def from_string(cls, value: str) -> Optional["UserRole"]:
        """Convert string to UserRole, case-insensitive."""
        if not isinstance(value, str):
            return None
        normalised = value.lower().strip().replace("-", "_")
        for member in cls:
            if member.value == normalised:
                return member
        return None


class PropertyType(Enum):
    """Property type classification."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    LAND = "land"
    MIXED_USE = "mixed_use"

    @classmethod
    def from_string(cls, value: str) -> Optional["PropertyType"]:
        """Convert string to PropertyType, case-insensitive."""
        if not isinstance(value, str):
            return None
        normalised = value.lower().strip().replace("-", "_").replace(" ", "_")
        for member in cls:
            if member.value == normalised:
                return member
        return None


class ReportStatus(Enum):
    """Lifecycle status of an appraisal report."""

    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    FINALIZED = "finalized"
    ARCHIVED = "archived"

    @classmethod
    def from_string(cls, value: str) -> Optional["ReportStatus"]:
        """Convert string to ReportStatus, case-insensitive."""
        if not isinstance(value, str):
            return None
        normalised = value.lower().strip().replace("-", "_")
        for member in cls:
            if member.value == normalised:
                return member
        return None


class FormType(Enum):
    """Kinds of data-collection forms."""

    PROPERTY_DETAILS = "property_details"
    SITE_INSPECTION = "site_inspection"
    VALUATION = "valuation"
    COMPARABLE = "comparable"
    ENVIRONMENTAL = "environmental"


# =============================================================================
# Serialisation helpers
# =============================================================================


def _dt_to_str(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _str_to_dt(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


# =============================================================================
# Records
# =============================================================================


@dataclass
class User:
    """A platform user. Authentication lives upstream; only identity is kept."""

    email: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.APPRAISER
    id: Optional[int] = None
    organization: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value,
            "organization": self.organization,
            "phone": self.phone,
            "isActive": self.is_active,
            "createdAt": _dt_to_str(self.created_at),
            "updatedAt": _dt_to_str(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=data.get("id"),
            email=data["email"],
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            role=UserRole(_enum_value(data.get("role", "appraiser"))),
            organization=data.get("organization"),
            phone=data.get("phone"),
            is_active=data.get("isActive", True),
            created_at=_str_to_dt(data.get("createdAt")),
            updated_at=_str_to_dt(data.get("updatedAt")),
        )


@dataclass
class Property:
    """
    A subject property.

    Identity (id) is immutable; every other attribute may be edited.
    Size and lot fields are kept as given, since upstream forms send them
    as strings; the adjustment engine parses them on use.
    """

    address: str
    city: str
    state: str
    zip_code: str
    property_type: PropertyType
    id: Optional[int] = None
    year_built: Optional[int] = None
    lot_size: Any = None
    building_size: Any = None
    bedrooms: Any = None
    bathrooms: Any = None
    parking_spaces: Any = None
    features: dict = field(default_factory=dict)
    description: Optional[str] = None
    created_by_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "propertyType": self.property_type.value,
            "yearBuilt": self.year_built,
            "lotSize": self.lot_size,
            "buildingSize": self.building_size,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "parkingSpaces": self.parking_spaces,
            "features": dict(self.features),
            "description": self.description,
            "createdById": self.created_by_id,
            "createdAt": _dt_to_str(self.created_at),
            "updatedAt": _dt_to_str(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Property":
        return cls(
            id=data.get("id"),
            address=data["address"],
            city=data["city"],
            state=data["state"],
            zip_code=data["zipCode"],
            property_type=PropertyType(_enum_value(data["propertyType"])),
            year_built=data.get("yearBuilt"),
            lot_size=data.get("lotSize"),
            building_size=data.get("buildingSize"),
            bedrooms=data.get("bedrooms"),
            bathrooms=data.get("bathrooms"),
            parking_spaces=data.get("parkingSpaces"),
            features=dict(data.get("features") or {}),
            description=data.get("description"),
            created_by_id=data.get("createdById"),
            created_at=_str_to_dt(data.get("createdAt")),
            updated_at=_str_to_dt(data.get("updatedAt")),
        )


@dataclass
class AppraisalReport:
    """
    An appraisal report for one subject property.

    Status only moves through the report status machine
    (see core.reports.status).
    """

    property_id: int
    appraiser_id: int
    id: Optional[int] = None
    status: ReportStatus = ReportStatus.DRAFT
    reviewer_id: Optional[int] = None
    client_id: Optional[int] = None
    purpose: Optional[str] = None
    value: Optional[int] = None
    notes: Optional[str] = None
    effective_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    finalized_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "propertyId": self.property_id,
            "appraiserId": self.appraiser_id,
            "reviewerId": self.reviewer_id,
            "clientId": self.client_id,
            "status": self.status.value,
            "purpose": self.purpose,
            "value": self.value,
            "notes": self.notes,
            "effectiveDate": _dt_to_str(self.effective_date),
            "createdAt": _dt_to_str(self.created_at),
            "updatedAt": _dt_to_str(self.updated_at),
            "submittedAt": _dt_to_str(self.submitted_at),
            "approvedAt": _dt_to_str(self.approved_at),
            "finalizedAt": _dt_to_str(self.finalized_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppraisalReport":
        return cls(
            id=data.get("id"),
            property_id=data["propertyId"],
            appraiser_id=data["appraiserId"],
            reviewer_id=data.get("reviewerId"),
            client_id=data.get("clientId"),
            status=ReportStatus(_enum_value(data.get("status", "draft"))),
            purpose=data.get("purpose"),
            value=data.get("value"),
            notes=data.get("notes"),
            effective_date=_str_to_dt(data.get("effectiveDate")),
            created_at=_str_to_dt(data.get("createdAt")),
            updated_at=_str_to_dt(data.get("updatedAt")),
            submitted_at=_str_to_dt(data.get("submittedAt")),
            approved_at=_str_to_dt(data.get("approvedAt")),
            finalized_at=_str_to_dt(data.get("finalizedAt")),
        )


@dataclass
class Comparable:
    """
    A comparable sale attached to exactly one report.

    Adjustments are stored as computed (subject minus comparable) at
    creation time; adjusted_price = sale_price + total_adjustment.
    """

    report_id: int
    address: str
    sale_price: int
    id: Optional[int] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    property_type: Optional[PropertyType] = None
    year_built: Optional[int] = None
    lot_size: Any = None
    building_size: Any = None
    bedrooms: Any = None
    bathrooms: Any = None
    parking_spaces: Any = None
    sale_date: Optional[str] = None
    days_on_market: Optional[int] = None
    adjustments: dict = field(default_factory=dict)
    total_adjustment: int = 0
    adjusted_price: Optional[int] = None
    source: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "reportId": self.report_id,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "propertyType": _enum_value(self.property_type),
            "yearBuilt": self.year_built,
            "lotSize": self.lot_size,
            "buildingSize": self.building_size,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "parkingSpaces": self.parking_spaces,
            "salePrice": self.sale_price,
            "saleDate": self.sale_date,
            "daysOnMarket": self.days_on_market,
            "adjustments": dict(self.adjustments),
            "totalAdjustment": self.total_adjustment,
            "adjustedPrice": self.adjusted_price,
            "source": self.source,
            "createdAt": _dt_to_str(self.created_at),
            "updatedAt": _dt_to_str(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Comparable":
        property_type = data.get("propertyType")
        return cls(
            id=data.get("id"),
            report_id=data["reportId"],
            address=data["address"],
            city=data.get("city"),
            state=data.get("state"),
            zip_code=data.get("zipCode"),
            property_type=PropertyType(_enum_value(property_type)) if property_type else None,
            year_built=data.get("yearBuilt"),
            lot_size=data.get("lotSize"),
            building_size=data.get("buildingSize"),
            bedrooms=data.get("bedrooms"),
            bathrooms=data.get("bathrooms"),
            parking_spaces=data.get("parkingSpaces"),
            sale_price=data["salePrice"],
            sale_date=data.get("saleDate"),
            days_on_market=data.get("daysOnMarket"),
            adjustments=dict(data.get("adjustments") or {}),
            total_adjustment=data.get("totalAdjustment", 0),
            adjusted_price=data.get("adjustedPrice"),
            source=data.get("source"),
            created_at=_str_to_dt(data.get("createdAt")),
            updated_at=_str_to_dt(data.get("updatedAt")),
        )


@dataclass
class Form:
    """A JSON-schema defined data-collection form."""

    name: str
    type: FormType
    schema: dict
    id: Optional[int] = None
    version: str = "1.0.0"
    is_active: bool = True
    created_by_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "schema": self.schema,
            "version": self.version,
            "isActive": self.is_active,
            "createdById": self.created_by_id,
            "createdAt": _dt_to_str(self.created_at),
            "updatedAt": _dt_to_str(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Form":
        return cls(
            id=data.get("id"),
            name=data["name"],
            type=FormType(_enum_value(data["type"])),
            schema=data.get("schema") or {},
            version=data.get("version", "1.0.0"),
            is_active=data.get("isActive", True),
            created_by_id=data.get("createdById"),
            created_at=_str_to_dt(data.get("createdAt")),
            updated_at=_str_to_dt(data.get("updatedAt")),
        )


@dataclass
class FormSubmission:
    """The data payload of one form for one report."""

    form_id: int
    report_id: int
    submitted_by_id: int
    data: dict
    id: Optional[int] = None
    completion_status: float = 0.0
    is_valid: bool = False
    validation_errors: list = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "formId": self.form_id,
            "reportId": self.report_id,
            "submittedById": self.submitted_by_id,
            "data": self.data,
            "completionStatus": self.completion_status,
            "isValid": self.is_valid,
            "validationErrors": list(self.validation_errors),
            "createdAt": _dt_to_str(self.created_at),
            "updatedAt": _dt_to_str(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FormSubmission":
        return cls(
            id=data.get("id"),
            form_id=data["formId"],
            report_id=data["reportId"],
            submitted_by_id=data["submittedById"],
            data=data.get("data") or {},
            completion_status=data.get("completionStatus", 0.0),
            is_valid=data.get("isValid", False),
            validation_errors=list(data.get("validationErrors") or []),
            created_at=_str_to_dt(data.get("createdAt")),
            updated_at=_str_to_dt(data.get("updatedAt")),
        )
