"""
Request bodies for the HTTP API.

Fields are snake_case in Python and camelCase on the wire, matching the
stored record shape.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.models import FormType, PropertyType, ReportStatus, UserRole


Numeric = Union[int, float, str]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self, partial: bool = False) -> dict:
        """camelCase JSON dict; partial keeps only the fields the caller sent."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=partial)


# =============================================================================
# Users
# =============================================================================


class UserCreate(ApiModel):
    email: str = Field(..., min_length=3)
    first_name: str
    last_name: str
    role: UserRole = UserRole.APPRAISER
    organization: Optional[str] = None
    phone: Optional[str] = None


class UserUpdate(ApiModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None
    organization: Optional[str] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None


# =============================================================================
# Properties
# =============================================================================


class PropertyCreate(ApiModel):
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    property_type: PropertyType
    year_built: Optional[int] = None
    lot_size: Optional[Numeric] = None
    building_size: Optional[Numeric] = None
    bedrooms: Optional[Numeric] = None
    bathrooms: Optional[Numeric] = None
    parking_spaces: Optional[Numeric] = None
    features: Dict[str, Any] = Field(default_factory=dict)
    description: Optional[str] = None


class PropertyUpdate(ApiModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    property_type: Optional[PropertyType] = None
    year_built: Optional[int] = None
    lot_size: Optional[Numeric] = None
    building_size: Optional[Numeric] = None
    bedrooms: Optional[Numeric] = None
    bathrooms: Optional[Numeric] = None
    parking_spaces: Optional[Numeric] = None
    features: Optional[Dict[str, Any]] = None
    description: Optional[str] = None


# =============================================================================
# Reports
# =============================================================================


class ReportCreate(ApiModel):
    property_id: int
    appraiser_id: Optional[int] = None
    client_id: Optional[int] = None
    purpose: Optional[str] = None
    value: Optional[int] = None
    notes: Optional[str] = None
    effective_date: Optional[datetime] = None


class ReportUpdate(ApiModel):
    reviewer_id: Optional[int] = None
    client_id: Optional[int] = None
    purpose: Optional[str] = None
    value: Optional[int] = None
    notes: Optional[str] = None
    effective_date: Optional[datetime] = None
    # Accepted only so a status change here can be rejected with a pointer
    status: Optional[str] = None


class StatusChangeRequest(ApiModel):
    status: ReportStatus


class ComparableCreate(ApiModel):
    address: str = Field(..., min_length=1)
    sale_price: int = Field(..., gt=0)
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    property_type: Optional[PropertyType] = None
    year_built: Optional[int] = None
    lot_size: Optional[Numeric] = None
    building_size: Optional[Numeric] = None
    bedrooms: Optional[Numeric] = None
    bathrooms: Optional[Numeric] = None
    parking_spaces: Optional[Numeric] = None
    sale_date: Optional[str] = None
    days_on_market: Optional[int] = None
    source: Optional[str] = None


# =============================================================================
# Forms
# =============================================================================


class FormCreate(ApiModel):
    name: str = Field(..., min_length=1)
    type: FormType
    schema_: Union[Dict[str, Any], str] = Field(..., alias="schema")
    version: str = "1.0.0"
    is_active: bool = True


class FormUpdate(ApiModel):
    name: Optional[str] = None
    schema_: Optional[Union[Dict[str, Any], str]] = Field(None, alias="schema")
    version: Optional[str] = None
    is_active: Optional[bool] = None


class FormDataRequest(ApiModel):
    data: Dict[str, Any]


class FormSubmissionRequest(ApiModel):
    report_id: int
    data: Dict[str, Any]


# =============================================================================
# Analysis
# =============================================================================


class AdjustmentRequest(ApiModel):
    subject: Dict[str, Any]
    comparable: Dict[str, Any]
    rates: Optional[Dict[str, float]] = None


class CompSelectionRequest(ApiModel):
    subject: Dict[str, Any]
    comparables: List[Dict[str, Any]]
    max_results: Optional[int] = Field(None, ge=1)
    weights: Optional[Dict[str, float]] = None
    rates: Optional[Dict[str, float]] = None


class MarketAnalysisRequest(ApiModel):
    location: Dict[str, Any]
    sales_data: List[Dict[str, Any]]


class AgentRequest(ApiModel):
    data: Dict[str, Any]
    options: Optional[Dict[str, Any]] = None
