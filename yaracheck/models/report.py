"""
YaraCheck - Report Models

The seven report tables: missing persons, stolen devices, stolen vehicles,
household items, personal belongings, hacked accounts and business
reputation disputes.

Every report carries a public tracking code, a status, a visibility flag
and an optional country for geographic scoping of admin queries.
"""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Type

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from yaracheck.models.base import BaseModel


class ReportType(str, Enum):
    """Report category label used across search, payments and pricing."""
    PERSON = "person"
    DEVICE = "device"
    VEHICLE = "vehicle"
    HOUSEHOLD = "household"
    PERSONAL = "personal"
    ACCOUNT = "account"
    REPUTATION = "reputation"


class ReportStatus(str, Enum):
    """Statuses used by the report tables."""
    MISSING = "missing"
    PENDING = "pending"
    PENDING_VERIFICATION = "pending_verification"
    VERIFIED = "verified"
    REJECTED = "rejected"
    FOUND = "found"
    RESOLVED = "resolved"


class ReportMixin:
    """Columns shared by every report table."""

    tracking_code: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        index=True,
        unique=True,
        comment="Public lookup code issued on submission",
    )
    status: Mapped[str] = mapped_column(String(32), default=ReportStatus.PENDING.value, nullable=False)
    visible: Mapped[Optional[bool]] = mapped_column(Boolean, default=True, nullable=True)
    report_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    country_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("countries.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Reporter contact details
    reporter_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    reporter_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    reporter_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    reporter_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class ItemReportMixin(ReportMixin):
    """Columns shared by physical-item reports."""

    type: Mapped[str] = mapped_column(String(100), nullable=False)
    brand: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    contact: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class PersonReport(BaseModel, ReportMixin):
    """Missing person report."""

    __tablename__ = "persons"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    gender: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    date_missing: Mapped[date] = mapped_column(Date, nullable=False)
    physical_attributes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    contact: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class DeviceReport(BaseModel, ItemReportMixin):
    """Stolen device report (phones, laptops, tablets...)."""

    __tablename__ = "devices"

    imei: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)


class VehicleReport(BaseModel, ItemReportMixin):
    """Stolen vehicle report."""

    __tablename__ = "vehicles"

    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    chassis: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)


class HouseholdItemReport(BaseModel, ItemReportMixin):
    """Stolen household item report."""

    __tablename__ = "household_items"

    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    imei: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)


class PersonalBelongingReport(BaseModel, ItemReportMixin):
    """Stolen personal belonging report."""

    __tablename__ = "personal_belongings"

    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    imei: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)


class HackedAccountReport(BaseModel, ReportMixin):
    """Compromised social media / online account report."""

    __tablename__ = "hacked_accounts"

    account_type: Mapped[str] = mapped_column(String(50), nullable=False)
    account_identifier: Mapped[str] = mapped_column(String(255), nullable=False)
    date_compromised: Mapped[date] = mapped_column(Date, nullable=False)
    contact: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class BusinessReputationReport(BaseModel, ReportMixin):
    """
    Business reputation dispute.

    Hidden until an admin verifies it; verification toggles visibility.
    """

    __tablename__ = "business_reputation_reports"

    reported_person_name: Mapped[str] = mapped_column(String(255), nullable=False)
    reported_person_contact: Mapped[str] = mapped_column(String(255), nullable=False)
    business_type: Mapped[str] = mapped_column(String(100), nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    transaction_amount: Mapped[str] = mapped_column(String(50), nullable=False)
    reputation_status: Mapped[str] = mapped_column(String(50), nullable=False)
    evidence: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    verification_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    verified_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


# ===========================================
# REPORT TYPE REGISTRY
# ===========================================

REPORT_MODELS: Dict[ReportType, Type[BaseModel]] = {
    ReportType.PERSON: PersonReport,
    ReportType.DEVICE: DeviceReport,
    ReportType.VEHICLE: VehicleReport,
    ReportType.HOUSEHOLD: HouseholdItemReport,
    ReportType.PERSONAL: PersonalBelongingReport,
    ReportType.ACCOUNT: HackedAccountReport,
    ReportType.REPUTATION: BusinessReputationReport,
}

# Status a report starts in once accepted
INITIAL_STATUS: Dict[ReportType, ReportStatus] = {
    ReportType.PERSON: ReportStatus.MISSING,
    ReportType.REPUTATION: ReportStatus.PENDING_VERIFICATION,
}

# Human-readable category labels
REPORT_TYPE_LABELS: Dict[ReportType, str] = {
    ReportType.PERSON: "Missing Person",
    ReportType.DEVICE: "Stolen Device",
    ReportType.VEHICLE: "Stolen Vehicle",
    ReportType.HOUSEHOLD: "Household Item",
    ReportType.PERSONAL: "Personal Belonging",
    ReportType.ACCOUNT: "Hacked Account",
    ReportType.REPUTATION: "Business Reputation",
}


def get_report_model(report_type: ReportType) -> Type[BaseModel]:
    """Get the model class backing a report type."""
    return REPORT_MODELS[ReportType(report_type)]


def initial_status_for(report_type: ReportType) -> str:
    """Get the status a freshly accepted report starts in."""
    return INITIAL_STATUS.get(ReportType(report_type), ReportStatus.PENDING).value
