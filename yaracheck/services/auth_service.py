"""
YaraCheck - Authentication Service

Business logic for login, registration, password changes and the
super admin seed.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.config import settings
from yaracheck.models.profile import AdminRole, Profile, UserRole
from yaracheck.utils.error_handling import (
    AuthenticationException,
    DuplicateEntryException,
    ErrorCode,
    ValidationException,
)
from yaracheck.utils.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[Profile]:
        """Get profile by email address."""
        result = await self.db.execute(
            select(Profile).where(Profile.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[Profile]:
        """Get profile by ID."""
        result = await self.db.execute(select(Profile).where(Profile.id == user_id))
        return result.scalar_one_or_none()

    async def authenticate_user(self, email: str, password: str) -> Optional[Profile]:
        """
        Authenticate with email and password.

        Returns:
            Profile if authentication successful, None otherwise
        """
        user = await self.get_user_by_email(email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    async def login(self, email: str, password: str) -> str:
        """
        Log in and issue an access token.

        Raises:
            AuthenticationException: On bad credentials or a disabled account
        """
        user = await self.authenticate_user(email, password)
        if not user:
            raise AuthenticationException("Incorrect email or password")
        if not user.is_active:
            raise AuthenticationException(
                "User account is deactivated",
                code=ErrorCode.ACCOUNT_DISABLED,
            )

        logger.info(f"User {user.id} logged in")
        return create_access_token(data={"sub": str(user.id)})

    async def register_user(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Profile:
        """Register a plain (non-admin) user account."""
        if await self.get_user_by_email(email):
            raise DuplicateEntryException("User", "email", email.lower())

        user = Profile(
            email=email.lower(),
            hashed_password=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=UserRole.USER,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user

    async def change_password(self, user: Profile, current_password: str, new_password: str) -> Profile:
        """
        Change a profile's password and clear the must-change flag.

        Raises:
            AuthenticationException: If the current password is wrong
            ValidationException: If the new password equals the old one
        """
        if not verify_password(current_password, user.hashed_password):
            raise AuthenticationException("Current password is incorrect")
        if current_password == new_password:
            raise ValidationException(
                "New password must differ from the current password",
                field="new_password",
            )

        user.hashed_password = get_password_hash(new_password)
        user.must_change_password = False
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def ensure_super_admin(self) -> Optional[Profile]:
        """
        Create the configured super admin if it does not exist yet.

        Does nothing unless both SUPER_ADMIN_EMAIL and SUPER_ADMIN_PASSWORD
        are set.
        """
        if not settings.super_admin_email or not settings.super_admin_password:
            return None

        existing = await self.get_user_by_email(settings.super_admin_email)
        if existing:
            return existing

        admin = Profile(
            email=settings.super_admin_email.lower(),
            hashed_password=get_password_hash(settings.super_admin_password),
            first_name="Super",
            last_name="Admin",
            role=UserRole.SUPER_ADMIN,
            admin_role=AdminRole.SUPER_ADMIN,
            geographic_access={"view_all_countries": True},
        )
        self.db.add(admin)
        await self.db.commit()
        await self.db.refresh(admin)

        logger.info(f"Seeded super admin {admin.email}")
        return admin
