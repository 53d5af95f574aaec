"""
YaraCheck - Profile Model

Accounts for report submitters and administrative staff.

Two role columns coexist:
1. role: coarse account type (user, admin, super_admin)
2. admin_role: fine-grained staff role, drives capability resolution
   and geographic query scoping:
   - Super Admin: Full access, creates other admins
   - Director: Sees every country, reads anonymous messages
   - Country Rep: Restricted to one country
   - Province Manager: Restricted to the country of one province
   - Shareholder: Receives ROI distributions, views assets/financials
   - Customer Support Executive: Support tickets and live chat
   - Investor: Shareholder-style dashboard

On top of both, the free-form `permissions` JSON map grants individual
capabilities (can_view_reports, can_manage_assets, ...).
"""

import uuid
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, JSON, String, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yaracheck.models.base import BaseModel

if TYPE_CHECKING:
    from yaracheck.models.geography import Country, Province


class UserRole(str, Enum):
    """Coarse account role."""
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class AdminRole(str, Enum):
    """Fine-grained staff role."""
    SUPER_ADMIN = "super_admin"
    DIRECTOR = "director"
    COUNTRY_REP = "country_rep"
    PROVINCE_MANAGER = "province_manager"
    SHAREHOLDER = "shareholder"
    CUSTOMER_SUPPORT_EXECUTIVE = "customer_support_executive"
    INVESTOR = "investor"


class Profile(BaseModel):
    """
    Account profile used for authentication and authorization.

    Plain users submit and track reports. Admins (role=admin or
    role=super_admin) carry an admin_role and optionally a permissions map.
    """

    __tablename__ = "profiles"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # ===========================================
    # RBAC FIELDS
    # ===========================================

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole),
        default=UserRole.USER,
        nullable=False,
    )
    admin_role: Mapped[Optional[AdminRole]] = mapped_column(
        SQLEnum(AdminRole),
        nullable=True,
        comment="Staff role for admins only",
    )
    permissions: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
        comment="Free-form capability grants, e.g. {'can_view_reports': true}",
    )

    # ===========================================
    # GEOGRAPHIC ASSIGNMENT
    # ===========================================

    country_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("countries.id", ondelete="SET NULL"),
        nullable=True,
    )
    province_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("provinces.id", ondelete="SET NULL"),
        nullable=True,
    )
    geographic_access: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
    )

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    must_change_password: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        comment="Super admin who created this admin",
    )

    # Relationships
    country: Mapped[Optional["Country"]] = relationship("Country", foreign_keys=[country_id])
    province: Mapped[Optional["Province"]] = relationship("Province", foreign_keys=[province_id])

    @property
    def full_name(self) -> str:
        """Get profile's full name."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def is_admin(self) -> bool:
        """Admins and super admins both count."""
        return self.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)

    @property
    def is_super_admin(self) -> bool:
        """Either role column can carry the super admin grant."""
        return self.role == UserRole.SUPER_ADMIN or self.admin_role == AdminRole.SUPER_ADMIN

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email}, role={self.role}, admin_role={self.admin_role})>"
