"""
YaraCheck - Services Package

Business logic services.
"""

from yaracheck.services.admin_service import AdminService
from yaracheck.services.asset_service import AssetService
from yaracheck.services.audit_service import AuditService
from yaracheck.services.auth_service import AuthService
from yaracheck.services.payment_service import PaymentService
from yaracheck.services.report_service import ReportService
from yaracheck.services.roi_service import ROIService
from yaracheck.services.support_service import SupportService
from yaracheck.services.tracking_search_service import TrackingSearchService

__all__ = [
    "AdminService",
    "AssetService",
    "AuditService",
    "AuthService",
    "PaymentService",
    "ReportService",
    "ROIService",
    "SupportService",
    "TrackingSearchService",
]
