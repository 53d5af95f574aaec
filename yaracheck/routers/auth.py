"""
YaraCheck - Authentication Router

API endpoints for login, registration and password changes.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.config import settings
from yaracheck.database import get_async_session
from yaracheck.dependencies import get_current_user
from yaracheck.models.profile import Profile
from yaracheck.schemas.auth import (
    MessageResponse,
    PasswordChangeRequest,
    ProfileResponse,
    TokenResponse,
    UserLoginRequest,
    UserRegisterRequest,
)
from yaracheck.services.auth_service import AuthService


router = APIRouter()


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
)
async def login(
    request: UserLoginRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """Authenticate and return an access token."""
    access_token = await AuthService(db).login(request.email, request.password)
    return TokenResponse(
        access_token=access_token,
        expires_in=settings.access_token_expire_minutes * 60,
    )


@router.post(
    "/register",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user account",
)
async def register(
    request: UserRegisterRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """Register a plain user. Admin accounts are created by super admins."""
    return await AuthService(db).register_user(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
    )


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current profile",
)
async def get_me(current_user: Profile = Depends(get_current_user)):
    return current_user


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change password",
)
async def change_password(
    request: PasswordChangeRequest,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Change the current password; clears the must-change flag of new admins."""
    await AuthService(db).change_password(
        current_user,
        request.current_password,
        request.new_password,
    )
    return MessageResponse(message="Password changed successfully")
