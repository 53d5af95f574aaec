"""
YaraCheck - Admin Reports Router

Report listing and moderation for admins. Listings and statistics are
limited to the admin's country scope.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.database import get_async_session
from yaracheck.dependencies import require_capability
from yaracheck.models.profile import Profile
from yaracheck.models.report import ReportStatus, ReportType
from yaracheck.schemas.report import (
    AdminReportItem,
    AdminReportListResponse,
    AnonymousMessageResponse,
    CountryStats,
    ReputationVerification,
    StatusUpdate,
    VisibilityUpdate,
)
from yaracheck.services.report_service import ReportService
from yaracheck.utils.permissions import AdminCapability


router = APIRouter()


@router.get(
    "",
    response_model=AdminReportListResponse,
    summary="List reports",
)
async def list_reports(
    report_type: Optional[ReportType] = Query(None),
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    admin: Profile = Depends(require_capability(AdminCapability.VIEW_REPORTS)),
    db: AsyncSession = Depends(get_async_session),
):
    """
    List reports across categories, newest first.

    Country reps see their country, province managers the country of
    their province; everyone else sees all countries.
    """
    items, country_id = await ReportService(db).list_reports(
        admin,
        report_type=report_type,
        status=status_filter.value if status_filter else None,
    )
    return AdminReportListResponse(total=len(items), country_scope=country_id, reports=items)


@router.get(
    "/country-stats",
    response_model=List[CountryStats],
    summary="Report counts per country",
)
async def country_stats(
    admin: Profile = Depends(require_capability(AdminCapability.VIEW_ANALYTICS)),
    db: AsyncSession = Depends(get_async_session),
):
    return await ReportService(db).country_stats(admin)


@router.get(
    "/anonymous-messages",
    response_model=List[AnonymousMessageResponse],
    summary="List anonymous tips",
)
async def list_anonymous_messages(
    report_type: Optional[ReportType] = Query(None),
    report_id: Optional[UUID] = Query(None),
    admin: Profile = Depends(require_capability(AdminCapability.VIEW_ANONYMOUS_MESSAGES)),
    db: AsyncSession = Depends(get_async_session),
):
    return await ReportService(db).list_anonymous_messages(report_type, report_id)


@router.patch(
    "/{report_type}/{report_id}/visibility",
    response_model=AdminReportItem,
    summary="Show or hide a report",
)
async def set_visibility(
    report_type: ReportType,
    report_id: UUID,
    request: VisibilityUpdate,
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_REPORTS)),
    db: AsyncSession = Depends(get_async_session),
):
    service = ReportService(db)
    report = await service.set_visibility(admin, report_type, report_id, request.visible)
    return service.report_item(report_type, report)


@router.patch(
    "/{report_type}/{report_id}/status",
    response_model=AdminReportItem,
    summary="Set a report's status",
)
async def set_status(
    report_type: ReportType,
    report_id: UUID,
    request: StatusUpdate,
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_REPORTS)),
    db: AsyncSession = Depends(get_async_session),
):
    service = ReportService(db)
    report = await service.set_status(admin, report_type, report_id, request.status)
    return service.report_item(report_type, report)


@router.post(
    "/reputation/{report_id}/verify",
    response_model=AdminReportItem,
    summary="Verify or reject a business reputation report",
)
async def verify_reputation_report(
    report_id: UUID,
    request: ReputationVerification,
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_REPORTS)),
    db: AsyncSession = Depends(get_async_session),
):
    """Verified reports become publicly visible; rejected ones are hidden."""
    service = ReportService(db)
    report = await service.verify_reputation_report(admin, report_id, request.action, request.notes)
    return service.report_item(ReportType.REPUTATION, report)


@router.delete(
    "/{report_type}/{report_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a report",
)
async def delete_report(
    report_type: ReportType,
    report_id: UUID,
    admin: Profile = Depends(require_capability(AdminCapability.DELETE_REPORTS)),
    db: AsyncSession = Depends(get_async_session),
):
    await ReportService(db).delete_report(admin, report_type, report_id)
