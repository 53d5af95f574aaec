"""
YaraCheck - Report Schemas

Pydantic schemas for report submission, tracking search and admin
moderation.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from yaracheck.models.report import ReportStatus, ReportType


# ===========================================
# SUBMISSION PAYLOADS
# ===========================================

class ReporterDetails(BaseModel):
    """Contact details shared by every report payload."""
    reporter_name: Optional[str] = Field(None, max_length=255)
    reporter_email: Optional[EmailStr] = None
    reporter_phone: Optional[str] = Field(None, max_length=30)
    reporter_address: Optional[str] = None
    description: Optional[str] = None
    country_id: Optional[UUID] = None


class PersonReportCreate(ReporterDetails):
    """Missing person."""
    name: str = Field(..., min_length=1, max_length=255)
    age: int = Field(..., ge=0, le=150)
    gender: str = Field(..., max_length=20)
    location: str = Field(..., min_length=1, max_length=255)
    date_missing: date
    physical_attributes: Optional[str] = None
    contact: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = None


class ItemReportCreate(ReporterDetails):
    """Fields shared by physical-item reports."""
    type: str = Field(..., min_length=1, max_length=100, description="e.g. mobile_phone, laptop, car")
    brand: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(None, max_length=50)
    location: str = Field(..., min_length=1, max_length=255)
    contact: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = None


class DeviceReportCreate(ItemReportCreate):
    """Stolen device. `year` only affects pricing."""
    imei: Optional[str] = Field(None, max_length=64)
    year: Optional[int] = Field(None, ge=1900, le=2100)


class VehicleReportCreate(ItemReportCreate):
    """Stolen vehicle."""
    year: Optional[int] = Field(None, ge=1900, le=2100)
    chassis: Optional[str] = Field(None, max_length=64)


class BelongingReportCreate(ItemReportCreate):
    """Household item or personal belonging."""
    year: Optional[int] = Field(None, ge=1900, le=2100)
    imei: Optional[str] = Field(None, max_length=64)


class AccountReportCreate(ReporterDetails):
    """Hacked account."""
    account_type: str = Field(..., min_length=1, max_length=50)
    account_identifier: str = Field(..., min_length=1, max_length=255)
    date_compromised: date
    contact: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = None


class ReputationReportCreate(ReporterDetails):
    """Business reputation dispute."""
    reported_person_name: str = Field(..., min_length=1, max_length=255)
    reported_person_contact: str = Field(..., min_length=1, max_length=255)
    business_type: str = Field(..., min_length=1, max_length=100)
    transaction_date: date
    transaction_amount: str = Field(..., max_length=50)
    reputation_status: str = Field(..., max_length=50)
    evidence: Optional[str] = None


REPORT_CREATE_SCHEMAS: Dict[ReportType, Type[ReporterDetails]] = {
    ReportType.PERSON: PersonReportCreate,
    ReportType.DEVICE: DeviceReportCreate,
    ReportType.VEHICLE: VehicleReportCreate,
    ReportType.HOUSEHOLD: BelongingReportCreate,
    ReportType.PERSONAL: BelongingReportCreate,
    ReportType.ACCOUNT: AccountReportCreate,
    ReportType.REPUTATION: ReputationReportCreate,
}

# Payload keys that only feed pricing and have no column on the report table
PRICING_ONLY_FIELDS: Dict[ReportType, set] = {
    ReportType.DEVICE: {"year"},
}


class ReportSubmission(BaseModel):
    """A report of any category; `report` is validated against the category schema."""
    report_type: ReportType
    report: Dict[str, Any]


class ReportSubmissionResponse(BaseModel):
    """Result of a free (price 0) submission."""
    report_id: UUID
    report_type: ReportType
    tracking_code: str
    status: str


# ===========================================
# PRICING
# ===========================================

class PriceQuoteRequest(BaseModel):
    """Pricing descriptor."""
    report_type: str
    device_type: Optional[str] = None
    year: Optional[int] = None
    age: Optional[int] = None
    brand: Optional[str] = None


class PriceQuoteResponse(BaseModel):
    """Fee for a report submission."""
    report_type: str
    price_cents: int
    formatted: str
    is_free: bool


# ===========================================
# TRACKING SEARCH
# ===========================================

class TrackingSearchHit(BaseModel):
    """One tracking search result."""
    report_id: UUID
    report_type: ReportType
    report_data: Dict[str, Any]


class TrackingSearchResponse(BaseModel):
    """Tracking search results."""
    query: str
    total: int
    results: List[TrackingSearchHit]


class MarkResolvedRequest(BaseModel):
    """Mark a found report resolved."""
    report_type: ReportType


# ===========================================
# ADMIN MODERATION
# ===========================================

class VisibilityUpdate(BaseModel):
    """Show or hide a report from public search."""
    visible: bool


class StatusUpdate(BaseModel):
    """Set a report's status."""
    status: ReportStatus


class ReputationVerification(BaseModel):
    """Admin decision on a business reputation report."""
    action: ReportStatus = Field(..., description="'verified' or 'rejected'")
    notes: Optional[str] = None

    @field_validator("action")
    @classmethod
    def validate_action(cls, v: ReportStatus) -> ReportStatus:
        if v not in (ReportStatus.VERIFIED, ReportStatus.REJECTED):
            raise ValueError("action must be 'verified' or 'rejected'")
        return v


class AdminReportItem(BaseModel):
    """A report row in the admin listing."""
    report_id: UUID
    report_type: ReportType
    label: str
    tracking_code: Optional[str] = None
    status: str
    visible: Optional[bool] = None
    report_date: datetime
    country_id: Optional[UUID] = None
    data: Dict[str, Any]


class AdminReportListResponse(BaseModel):
    """Admin report listing."""
    total: int
    country_scope: Optional[UUID] = None
    reports: List[AdminReportItem]


class CountryStats(BaseModel):
    """Report counts for one country."""
    id: UUID
    name: str
    persons: int = 0
    devices: int = 0
    vehicles: int = 0
    total: int = 0


# ===========================================
# ANONYMOUS MESSAGES
# ===========================================

class AnonymousMessageCreate(BaseModel):
    """Anonymous tip about a report."""
    message: str = Field(..., min_length=1, max_length=5000)
    sender_contact: Optional[str] = Field(None, max_length=255)


class AnonymousMessageResponse(BaseModel):
    """Anonymous tip."""
    id: UUID
    report_id: UUID
    report_type: str
    message: str
    sender_contact: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
