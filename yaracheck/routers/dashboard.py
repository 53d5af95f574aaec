"""
YaraCheck - Admin Dashboard Router
"""

from fastapi import APIRouter, Depends

from yaracheck.dependencies import get_current_admin
from yaracheck.models.profile import Profile
from yaracheck.schemas.admin import CapabilitiesResponse
from yaracheck.utils.permissions import dashboard_landing, is_super_admin, resolve_capabilities


router = APIRouter()


@router.get(
    "/capabilities",
    response_model=CapabilitiesResponse,
    summary="Capabilities of the current admin",
)
async def get_capabilities(admin: Profile = Depends(get_current_admin)):
    """
    Resolve the current admin's capabilities and landing dashboard.

    Derived from the profile on every call.
    """
    return CapabilitiesResponse(
        profile_id=admin.id,
        admin_role=admin.admin_role,
        is_super_admin=is_super_admin(admin),
        capabilities=resolve_capabilities(admin),
        landing=dashboard_landing(admin),
    )
