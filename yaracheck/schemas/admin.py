"""
YaraCheck - Admin Account Schemas
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from yaracheck.models.profile import AdminRole
from yaracheck.schemas.auth import ProfileResponse
from yaracheck.utils.permissions import PERMISSION_KEYS


class GeographicAccess(BaseModel):
    """Countries and provinces an admin may see."""
    view_all_countries: bool = False
    allowed_countries: List[str] = []
    allowed_provinces: List[str] = []


def _check_permission_keys(permissions: Optional[Dict[str, bool]]) -> Optional[Dict[str, bool]]:
    if permissions is None:
        return None
    known = set(PERMISSION_KEYS.values())
    unknown = sorted(key for key in permissions if key not in known)
    if unknown:
        raise ValueError(f"Unknown permission keys: {', '.join(unknown)}")
    return permissions


class AdminCreateRequest(BaseModel):
    """Create an admin account; a temporary password is generated."""
    email: EmailStr
    admin_role: AdminRole
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    country_id: Optional[UUID] = None
    province_id: Optional[UUID] = None
    permissions: Optional[Dict[str, bool]] = None
    geographic_access: GeographicAccess = GeographicAccess()

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v):
        return _check_permission_keys(v)


class AdminUpdateRequest(BaseModel):
    """Partial update of an admin account."""
    admin_role: Optional[AdminRole] = None
    phone: Optional[str] = Field(None, max_length=30)
    country_id: Optional[UUID] = None
    province_id: Optional[UUID] = None
    permissions: Optional[Dict[str, bool]] = None
    geographic_access: Optional[GeographicAccess] = None

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v):
        return _check_permission_keys(v)


class AdminCreatedResponse(BaseModel):
    """New admin and the one-time temporary password."""
    admin: ProfileResponse
    temporary_password: str


class AuditLogResponse(BaseModel):
    """Audit log entry."""
    id: UUID
    admin_id: Optional[UUID] = None
    action: str
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CapabilitiesResponse(BaseModel):
    """Resolved capabilities and dashboard landing for the current admin."""
    profile_id: UUID
    admin_role: Optional[AdminRole] = None
    is_super_admin: bool
    capabilities: Dict[str, bool]
    landing: str
