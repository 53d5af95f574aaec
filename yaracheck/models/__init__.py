"""
YaraCheck - SQLAlchemy Models Package

This package contains all database models for the application.
"""

from yaracheck.models.base import BaseModel, TimestampMixin
from yaracheck.models.geography import Country, Province
from yaracheck.models.profile import Profile, UserRole, AdminRole
from yaracheck.models.report import (
    ReportType,
    ReportStatus,
    PersonReport,
    DeviceReport,
    VehicleReport,
    HouseholdItemReport,
    PersonalBelongingReport,
    HackedAccountReport,
    BusinessReputationReport,
    REPORT_MODELS,
    REPORT_TYPE_LABELS,
    get_report_model,
    initial_status_for,
)
from yaracheck.models.roi import (
    ROIDistribution,
    ROIWithdrawalRequest,
    PeriodType,
    WithdrawalStatus,
)
from yaracheck.models.asset import CompanyAsset
from yaracheck.models.transaction import PaymentTransaction, PaymentProvider, TransactionStatus
from yaracheck.models.support import (
    SupportTicket,
    TicketPriority,
    TicketStatus,
    LiveChatMessage,
    ChatStatus,
    AnonymousMessage,
)
from yaracheck.models.audit import AuditLog

__all__ = [
    # Base
    "BaseModel",
    "TimestampMixin",
    # Accounts & geography
    "Profile",
    "UserRole",
    "AdminRole",
    "Country",
    "Province",
    # Reports
    "ReportType",
    "ReportStatus",
    "PersonReport",
    "DeviceReport",
    "VehicleReport",
    "HouseholdItemReport",
    "PersonalBelongingReport",
    "HackedAccountReport",
    "BusinessReputationReport",
    "REPORT_MODELS",
    "REPORT_TYPE_LABELS",
    "get_report_model",
    "initial_status_for",
    # ROI
    "ROIDistribution",
    "ROIWithdrawalRequest",
    "PeriodType",
    "WithdrawalStatus",
    # Assets
    "CompanyAsset",
    # Payments
    "PaymentTransaction",
    "PaymentProvider",
    "TransactionStatus",
    # Support
    "SupportTicket",
    "TicketPriority",
    "TicketStatus",
    "LiveChatMessage",
    "ChatStatus",
    "AnonymousMessage",
    # Audit
    "AuditLog",
]
