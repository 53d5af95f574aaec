"""
YaraCheck - Company Assets Router
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.database import get_async_session
from yaracheck.dependencies import require_capability
from yaracheck.models.profile import Profile
from yaracheck.schemas.asset import AssetCreate, AssetResponse, AssetSummary, AssetUpdate
from yaracheck.services.asset_service import AssetService
from yaracheck.utils.permissions import AdminCapability


router = APIRouter()


@router.get(
    "",
    response_model=List[AssetResponse],
    summary="List company assets",
)
async def list_assets(
    category: Optional[str] = Query(None),
    include_inactive: bool = Query(False),
    admin: Profile = Depends(require_capability(AdminCapability.VIEW_ASSETS)),
    db: AsyncSession = Depends(get_async_session),
):
    return await AssetService(db).list_assets(category, include_inactive)


@router.get(
    "/summary",
    response_model=AssetSummary,
    summary="Asset totals per category",
)
async def asset_summary(
    admin: Profile = Depends(require_capability(AdminCapability.VIEW_ASSETS)),
    db: AsyncSession = Depends(get_async_session),
):
    return await AssetService(db).summary()


@router.get(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Get an asset",
)
async def get_asset(
    asset_id: UUID,
    admin: Profile = Depends(require_capability(AdminCapability.VIEW_ASSETS)),
    db: AsyncSession = Depends(get_async_session),
):
    return await AssetService(db).get_asset(asset_id)


@router.post(
    "",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an asset",
)
async def create_asset(
    request: AssetCreate,
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_ASSETS)),
    db: AsyncSession = Depends(get_async_session),
):
    return await AssetService(db).create_asset(admin, request.model_dump())


@router.patch(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Update an asset",
)
async def update_asset(
    asset_id: UUID,
    request: AssetUpdate,
    admin: Profile = Depends(require_capability(AdminCapability.MANAGE_ASSETS)),
    db: AsyncSession = Depends(get_async_session),
):
    return await AssetService(db).update_asset(admin, asset_id, request.model_dump(exclude_unset=True))


@router.delete(
    "/{asset_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an asset",
)
async def delete_asset(
    asset_id: UUID,
    admin: Profile = Depends(require_capability(AdminCapability.DELETE_ASSETS)),
    db: AsyncSession = Depends(get_async_session),
):
    await AssetService(db).delete_asset(admin, asset_id)
