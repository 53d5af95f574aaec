"""
YaraCheck - Public Reports Router

Free submission, tracking search, "my reports", resolving found items and
anonymous tips. Paid submissions go through the payments router.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.database import get_async_session
from yaracheck.dependencies import get_current_user, get_optional_user
from yaracheck.models.profile import Profile
from yaracheck.models.report import ReportType
from yaracheck.schemas.report import (
    AdminReportItem,
    AnonymousMessageCreate,
    AnonymousMessageResponse,
    MarkResolvedRequest,
    ReportSubmission,
    ReportSubmissionResponse,
    TrackingSearchResponse,
)
from yaracheck.services.report_service import ReportService
from yaracheck.services.tracking_search_service import TrackingSearchService


router = APIRouter()


@router.post(
    "/submit",
    response_model=ReportSubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a free report",
)
async def submit_free_report(
    request: ReportSubmission,
    current_user: Optional[Profile] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Store a report whose fee is 0 (children aged 1-7).

    Reports with a fee are rejected with PAYMENT_REQUIRED; start a checkout
    for those instead.
    """
    report, tracking_code = await ReportService(db).submit_free_report(
        request.report_type,
        request.report,
        current_user,
    )
    return ReportSubmissionResponse(
        report_id=report.id,
        report_type=request.report_type,
        tracking_code=tracking_code,
        status=report.status,
    )


@router.get(
    "/track",
    response_model=TrackingSearchResponse,
    summary="Search reports by tracking code",
)
async def track_report(
    q: str = Query(..., description="Tracking code, report id, IMEI, chassis, name or brand"),
    db: AsyncSession = Depends(get_async_session),
):
    results = await TrackingSearchService(db).search(q)
    return TrackingSearchResponse(query=q.strip(), total=len(results), results=results)


@router.get(
    "/mine",
    response_model=List[AdminReportItem],
    summary="Reports filed under my email",
)
async def my_reports(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    return await ReportService(db).reports_for_email(current_user.email)


@router.post(
    "/{report_id}/resolve",
    response_model=AdminReportItem,
    summary="Mark a report resolved",
)
async def resolve_report(
    report_id: UUID,
    request: MarkResolvedRequest,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Mark a lost item or missing person found. Submitter or admin only."""
    service = ReportService(db)
    report = await service.mark_resolved(request.report_type, report_id, current_user)
    return service.report_item(request.report_type, report)


@router.post(
    "/{report_type}/{report_id}/messages",
    response_model=AnonymousMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Leave an anonymous tip on a report",
)
async def leave_anonymous_message(
    report_type: ReportType,
    report_id: UUID,
    request: AnonymousMessageCreate,
    db: AsyncSession = Depends(get_async_session),
):
    return await ReportService(db).leave_anonymous_message(
        report_type,
        report_id,
        request.message,
        request.sender_contact,
    )
