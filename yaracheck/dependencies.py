"""
YaraCheck - FastAPI Dependencies

Shared dependencies for authentication, database sessions, and RBAC.

This module provides dependency injection for:
1. Current profile authentication (required and optional)
2. Admin and super admin gates
3. Capability-based access control for admin endpoints
"""

import uuid
from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.database import get_async_session
from yaracheck.models.profile import Profile
from yaracheck.utils.error_handling import InsufficientPermissionsException
from yaracheck.utils.security import decode_token
from yaracheck.utils.permissions import AdminCapability, has_capability


# HTTP Bearer token security
security = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    if credentials:
        return credentials.credentials
    # Fallback to cookie
    token = request.cookies.get("access_token")
    if token and token.startswith("Bearer "):
        token = token[7:]
    return token


async def _load_profile(token: str, db: AsyncSession) -> Profile:
    payload = decode_token(token)

    if not payload or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_uuid = uuid.UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID in token",
        )

    result = await db.execute(select(Profile).where(Profile.id == user_uuid))
    profile = result.scalar_one_or_none()

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if not profile.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated",
        )

    return profile


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_async_session),
) -> Profile:
    """
    Get the current authenticated profile from JWT token.

    Token can be provided via:
    1. Authorization: Bearer <token> header
    2. access_token cookie

    Raises:
        HTTPException: If token is invalid or profile not found
    """
    token = _extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await _load_profile(token, db)


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_async_session),
) -> Optional[Profile]:
    """
    Get the current profile if a token was sent, else None.

    Report submission and checkout accept anonymous submitters. A token
    that is present but invalid is still rejected.
    """
    token = _extract_token(request, credentials)
    if not token:
        return None
    return await _load_profile(token, db)


async def get_current_admin(
    current_user: Profile = Depends(get_current_user),
) -> Profile:
    """
    Get current profile and verify it is an admin (admin or super_admin).

    Usage:
        @router.get("/admin/endpoint")
        async def admin_endpoint(user: Profile = Depends(get_current_admin)):
            ...
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


async def get_current_super_admin(
    current_user: Profile = Depends(get_current_user),
) -> Profile:
    """Get current profile and verify it is a super admin."""
    if not current_user.is_super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin access required",
        )
    return current_user


def require_capability(capability: AdminCapability):
    """
    Require an admin capability.

    Usage:
        @router.delete("/reports/{report_type}/{report_id}")
        async def delete_report(
            admin: Profile = Depends(require_capability(AdminCapability.DELETE_REPORTS))
        ):
            ...
    """
    async def capability_checker(
        current_user: Profile = Depends(get_current_admin),
    ) -> Profile:
        if not has_capability(current_user, capability):
            raise InsufficientPermissionsException(capability.value)
        return current_user

    return capability_checker
