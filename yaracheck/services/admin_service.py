"""
YaraCheck - Admin Account Management

Super admins create staff accounts with a temporary password, assign
admin roles, permissions and geography, and deactivate accounts.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.models.geography import Country, Province
from yaracheck.models.profile import AdminRole, Profile, UserRole
from yaracheck.services.audit_service import AuditService
from yaracheck.utils.error_handling import (
    BusinessRuleException,
    DuplicateEntryException,
    NotFoundException,
    UserNotFoundException,
)
from yaracheck.utils.security import generate_random_password, get_password_hash

logger = logging.getLogger(__name__)


class AdminService:
    """Service for managing admin accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def _get_profile(self, profile_id: uuid.UUID) -> Profile:
        result = await self.db.execute(select(Profile).where(Profile.id == profile_id))
        profile = result.scalar_one_or_none()
        if not profile:
            raise UserNotFoundException(profile_id)
        return profile

    async def _check_geography(
        self,
        country_id: Optional[uuid.UUID],
        province_id: Optional[uuid.UUID],
    ) -> None:
        if country_id and not await self.db.get(Country, country_id):
            raise NotFoundException("Country", country_id)
        if province_id and not await self.db.get(Province, province_id):
            raise NotFoundException("Province", province_id)

    async def create_admin(
        self,
        created_by: Profile,
        email: str,
        admin_role: AdminRole,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        country_id: Optional[uuid.UUID] = None,
        province_id: Optional[uuid.UUID] = None,
        permissions: Optional[Dict[str, bool]] = None,
        view_all_countries: bool = False,
        allowed_countries: Optional[List[str]] = None,
        allowed_provinces: Optional[List[str]] = None,
        ip_address: Optional[str] = None,
    ) -> Tuple[Profile, str]:
        """
        Create an admin account with a temporary password.

        The new admin must change the password on first login.

        Returns:
            Tuple of (Profile, temporary password)
        """
        email = email.lower().strip()
        existing = await self.db.execute(select(Profile).where(Profile.email == email))
        if existing.scalar_one_or_none():
            raise DuplicateEntryException("User", "email", email)

        await self._check_geography(country_id, province_id)

        temp_password = generate_random_password()
        geographic_access = {
            "view_all_countries": view_all_countries,
            "allowed_countries": allowed_countries or [],
            "allowed_provinces": allowed_provinces or [],
        }

        admin = Profile(
            email=email,
            hashed_password=get_password_hash(temp_password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=UserRole.ADMIN,
            admin_role=admin_role,
            permissions=permissions,
            country_id=country_id,
            province_id=province_id,
            geographic_access=geographic_access,
            must_change_password=True,
            is_active=True,
            created_by_id=created_by.id,
        )
        self.db.add(admin)
        await self.db.flush()

        await self.audit.log_action(
            action="Created new admin account",
            admin_id=created_by.id,
            details={
                "admin_email": email,
                "admin_role": admin_role.value,
                "geographic_access": geographic_access,
            },
            ip_address=ip_address,
        )
        await self.db.commit()
        await self.db.refresh(admin)

        logger.info(f"Admin {admin.id} ({admin_role.value}) created by {created_by.id}")
        return admin, temp_password

    async def list_admins(
        self,
        admin_role: Optional[AdminRole] = None,
        include_inactive: bool = True,
    ) -> List[Profile]:
        """List admin accounts, newest first."""
        query = select(Profile).where(Profile.role.in_([UserRole.ADMIN, UserRole.SUPER_ADMIN]))
        if admin_role:
            query = query.where(Profile.admin_role == admin_role)
        if not include_inactive:
            query = query.where(Profile.is_active == True)  # noqa: E712
        query = query.order_by(desc(Profile.created_at))

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_shareholders(self) -> List[Profile]:
        """List active shareholder accounts."""
        result = await self.db.execute(
            select(Profile)
            .where(Profile.admin_role == AdminRole.SHAREHOLDER, Profile.is_active == True)  # noqa: E712
            .order_by(Profile.email)
        )
        return list(result.scalars().all())

    async def update_admin(
        self,
        actor: Profile,
        profile_id: uuid.UUID,
        updates: Dict[str, Any],
        ip_address: Optional[str] = None,
    ) -> Profile:
        """
        Update an admin's role, permissions or geography.

        Only keys present in `updates` are changed.
        """
        admin = await self._get_profile(profile_id)
        if not admin.is_admin:
            raise BusinessRuleException("Profile is not an admin account", rule="ADMIN_ONLY")

        await self._check_geography(updates.get("country_id"), updates.get("province_id"))

        allowed = {"admin_role", "permissions", "country_id", "province_id", "geographic_access", "phone"}
        changed = {key: value for key, value in updates.items() if key in allowed}
        for key, value in changed.items():
            setattr(admin, key, value)

        await self.audit.log_action(
            action="Updated admin account",
            admin_id=actor.id,
            details={"target_admin": str(admin.id), "changes": jsonable_encoder(changed)},
            ip_address=ip_address,
        )
        await self.db.commit()
        await self.db.refresh(admin)
        return admin

    async def set_active(
        self,
        actor: Profile,
        profile_id: uuid.UUID,
        is_active: bool,
        ip_address: Optional[str] = None,
    ) -> Profile:
        """Deactivate or reactivate an account. Super admins cannot deactivate themselves."""
        if actor.id == profile_id and not is_active:
            raise BusinessRuleException("You cannot deactivate your own account", rule="SELF_DEACTIVATION")

        admin = await self._get_profile(profile_id)
        admin.is_active = is_active

        await self.audit.log_action(
            action="Activated admin account" if is_active else "Deactivated admin account",
            admin_id=actor.id,
            details={"target_admin": str(admin.id), "email": admin.email},
            ip_address=ip_address,
        )
        await self.db.commit()
        await self.db.refresh(admin)
        return admin
