"""
YaraCheck - Admin Accounts Router

Super admin management of staff accounts and the audit trail.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.database import get_async_session
from yaracheck.dependencies import get_current_super_admin
from yaracheck.models.profile import AdminRole, Profile
from yaracheck.schemas.admin import (
    AdminCreateRequest,
    AdminCreatedResponse,
    AdminUpdateRequest,
    AuditLogResponse,
)
from yaracheck.schemas.auth import ProfileResponse
from yaracheck.services.admin_service import AdminService
from yaracheck.services.audit_service import AuditService


router = APIRouter()


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


@router.post(
    "",
    response_model=AdminCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an admin account",
)
async def create_admin(
    request: AdminCreateRequest,
    http_request: Request,
    super_admin: Profile = Depends(get_current_super_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Create an admin with a generated temporary password.

    The password is returned once; the admin must change it on first login.
    """
    access = request.geographic_access
    admin, temp_password = await AdminService(db).create_admin(
        created_by=super_admin,
        email=request.email,
        admin_role=request.admin_role,
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
        country_id=request.country_id,
        province_id=request.province_id,
        permissions=request.permissions,
        view_all_countries=access.view_all_countries,
        allowed_countries=access.allowed_countries,
        allowed_provinces=access.allowed_provinces,
        ip_address=_client_ip(http_request),
    )
    return AdminCreatedResponse(admin=admin, temporary_password=temp_password)


@router.get(
    "",
    response_model=List[ProfileResponse],
    summary="List admin accounts",
)
async def list_admins(
    admin_role: Optional[AdminRole] = Query(None),
    include_inactive: bool = Query(True),
    super_admin: Profile = Depends(get_current_super_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await AdminService(db).list_admins(admin_role, include_inactive)


@router.get(
    "/shareholders",
    response_model=List[ProfileResponse],
    summary="List active shareholders",
)
async def list_shareholders(
    super_admin: Profile = Depends(get_current_super_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await AdminService(db).list_shareholders()


@router.get(
    "/audit-logs",
    response_model=List[AuditLogResponse],
    summary="Admin audit trail",
)
async def list_audit_logs(
    action: Optional[str] = Query(None),
    admin_id: Optional[UUID] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    super_admin: Profile = Depends(get_current_super_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await AuditService(db).list_logs(action, admin_id, limit, offset)


@router.patch(
    "/{profile_id}",
    response_model=ProfileResponse,
    summary="Update an admin's role, permissions or geography",
)
async def update_admin(
    profile_id: UUID,
    request: AdminUpdateRequest,
    http_request: Request,
    super_admin: Profile = Depends(get_current_super_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await AdminService(db).update_admin(
        super_admin,
        profile_id,
        request.model_dump(exclude_unset=True),
        ip_address=_client_ip(http_request),
    )


@router.post(
    "/{profile_id}/deactivate",
    response_model=ProfileResponse,
    summary="Deactivate an account",
)
async def deactivate_admin(
    profile_id: UUID,
    http_request: Request,
    super_admin: Profile = Depends(get_current_super_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await AdminService(db).set_active(
        super_admin, profile_id, False, ip_address=_client_ip(http_request)
    )


@router.post(
    "/{profile_id}/activate",
    response_model=ProfileResponse,
    summary="Reactivate an account",
)
async def activate_admin(
    profile_id: UUID,
    http_request: Request,
    super_admin: Profile = Depends(get_current_super_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await AdminService(db).set_active(
        super_admin, profile_id, True, ip_address=_client_ip(http_request)
    )
