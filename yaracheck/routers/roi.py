"""
YaraCheck - ROI Router

Super admin management of ROI distributions and withdrawals, and the
shareholder's own view.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.database import get_async_session
from yaracheck.dependencies import get_current_admin, require_capability
from yaracheck.models.profile import AdminRole, Profile
from yaracheck.models.roi import WithdrawalStatus
from yaracheck.schemas.roi import (
    DistributionCreate,
    DistributionResponse,
    ShareholderSummary,
    WithdrawalCreate,
    WithdrawalProcess,
    WithdrawalResponse,
    WithdrawalToggle,
)
from yaracheck.services.roi_service import ROIService
from yaracheck.utils.permissions import AdminCapability


router = APIRouter()


async def get_current_shareholder(admin: Profile = Depends(get_current_admin)) -> Profile:
    """Require a shareholder account."""
    if admin.admin_role != AdminRole.SHAREHOLDER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Shareholder access required",
        )
    return admin


# ===========================================
# SUPER ADMIN
# ===========================================

@router.post(
    "/distributions",
    response_model=DistributionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an ROI distribution",
)
async def create_distribution(
    request: DistributionCreate,
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_ROI)),
    db: AsyncSession = Depends(get_async_session),
):
    return await ROIService(db).create_distribution(actor=admin, **request.model_dump())


@router.get(
    "/distributions",
    response_model=List[DistributionResponse],
    summary="List all ROI distributions",
)
async def list_distributions(
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_ROI)),
    db: AsyncSession = Depends(get_async_session),
):
    return await ROIService(db).list_distributions()


@router.patch(
    "/distributions/{distribution_id}/withdrawal",
    response_model=DistributionResponse,
    summary="Open or close a distribution for withdrawal",
)
async def toggle_withdrawal(
    distribution_id: UUID,
    request: WithdrawalToggle,
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_ROI)),
    db: AsyncSession = Depends(get_async_session),
):
    return await ROIService(db).set_withdrawal_enabled(admin, distribution_id, request.withdrawal_enabled)


@router.delete(
    "/distributions/{distribution_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a distribution and its withdrawal requests",
)
async def delete_distribution(
    distribution_id: UUID,
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_ROI)),
    db: AsyncSession = Depends(get_async_session),
):
    await ROIService(db).delete_distribution(admin, distribution_id)


@router.get(
    "/withdrawals",
    response_model=List[WithdrawalResponse],
    summary="List withdrawal requests",
)
async def list_withdrawals(
    status_filter: Optional[WithdrawalStatus] = Query(None, alias="status"),
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_ROI)),
    db: AsyncSession = Depends(get_async_session),
):
    return await ROIService(db).list_withdrawal_requests(status_filter)


@router.patch(
    "/withdrawals/{request_id}",
    response_model=WithdrawalResponse,
    summary="Advance a withdrawal request",
)
async def process_withdrawal(
    request_id: UUID,
    request: WithdrawalProcess,
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_ROI)),
    db: AsyncSession = Depends(get_async_session),
):
    """Move pending -> approved -> sent -> completed, one step at a time."""
    return await ROIService(db).process_withdrawal(admin, request_id, request.status, request.notes)


# ===========================================
# SHAREHOLDER
# ===========================================

@router.get(
    "/me/distributions",
    response_model=List[DistributionResponse],
    summary="My ROI distributions",
)
async def my_distributions(
    shareholder: Profile = Depends(get_current_shareholder),
    db: AsyncSession = Depends(get_async_session),
):
    return await ROIService(db).distributions_for(shareholder)


@router.get(
    "/me/withdrawals",
    response_model=List[WithdrawalResponse],
    summary="My withdrawal requests",
)
async def my_withdrawals(
    shareholder: Profile = Depends(get_current_shareholder),
    db: AsyncSession = Depends(get_async_session),
):
    return await ROIService(db).requests_for(shareholder)


@router.post(
    "/me/withdrawals",
    response_model=WithdrawalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a withdrawal",
)
async def request_withdrawal(
    request: WithdrawalCreate,
    shareholder: Profile = Depends(get_current_shareholder),
    db: AsyncSession = Depends(get_async_session),
):
    return await ROIService(db).request_withdrawal(shareholder, request.distribution_id)


@router.get(
    "/me/summary",
    response_model=ShareholderSummary,
    summary="My ROI totals",
)
async def my_summary(
    shareholder: Profile = Depends(get_current_shareholder),
    db: AsyncSession = Depends(get_async_session),
):
    return await ROIService(db).shareholder_summary(shareholder)
