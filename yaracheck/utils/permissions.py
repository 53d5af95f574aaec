"""
YaraCheck - Admin Capabilities

Capabilities are resolved per request from three sources, OR-ed together:
1. Super admin override (role or admin_role is super_admin)
2. A specific admin_role grant
3. A `permissions` JSON key that is exactly True

There are no deny rules: any one source is enough.

Capability Matrix:
==================
| Capability               | admin_role grant | permissions key                |
|--------------------------|------------------|--------------------------------|
| view_analytics           |                  | can_view_analytics             |
| view_reports             |                  | can_view_reports               |
| manage_reports           |                  | can_manage_reports             |
| delete_reports           |                  | can_delete_reports             |
| view_stolen_items        |                  | can_view_stolen_items          |
| respond_to_live_chat     |                  | can_respond_to_live_chat       |
| view_support_tickets     |                  | can_view_support_tickets       |
| view_anonymous_messages  | director         | can_view_anonymous_messages    |
| view_assets              | shareholder      | can_view_assets                |
| manage_assets            |                  | can_manage_assets              |
| delete_assets            |                  | can_delete_assets              |
| view_financials          | shareholder      | can_view_financials            |
| view_countries           | director         |                                |
| manage_admins            | super admin only |                                |
| manage_roi               | super admin only |                                |
"""

from enum import Enum
from typing import Any, Dict, Optional, Set

from yaracheck.models.profile import AdminRole, Profile, UserRole


# ===========================================
# CAPABILITY ENUM
# ===========================================

class AdminCapability(str, Enum):
    """Capabilities checked by admin endpoints."""

    # Reports
    VIEW_ANALYTICS = "view_analytics"
    VIEW_REPORTS = "view_reports"
    MANAGE_REPORTS = "manage_reports"
    DELETE_REPORTS = "delete_reports"
    VIEW_STOLEN_ITEMS = "view_stolen_items"

    # Support
    RESPOND_TO_LIVE_CHAT = "respond_to_live_chat"
    VIEW_SUPPORT_TICKETS = "view_support_tickets"
    VIEW_ANONYMOUS_MESSAGES = "view_anonymous_messages"

    # Assets & finance
    VIEW_ASSETS = "view_assets"
    MANAGE_ASSETS = "manage_assets"
    DELETE_ASSETS = "delete_assets"
    VIEW_FINANCIALS = "view_financials"

    # Geography
    VIEW_COUNTRIES = "view_countries"

    # Super Admin Only
    MANAGE_ADMINS = "manage_admins"
    MANAGE_ROI = "manage_roi"


# ===========================================
# GRANT MAPPINGS
# ===========================================

# admin_role to capabilities granted by the role alone
ADMIN_ROLE_CAPABILITIES: Dict[AdminRole, Set[AdminCapability]] = {
    AdminRole.DIRECTOR: {
        AdminCapability.VIEW_ANONYMOUS_MESSAGES,
        AdminCapability.VIEW_COUNTRIES,
    },
    AdminRole.SHAREHOLDER: {
        AdminCapability.VIEW_ASSETS,
        AdminCapability.VIEW_FINANCIALS,
    },
}

# Capability to the `permissions` key that grants it
PERMISSION_KEYS: Dict[AdminCapability, str] = {
    AdminCapability.VIEW_ANALYTICS: "can_view_analytics",
    AdminCapability.VIEW_REPORTS: "can_view_reports",
    AdminCapability.MANAGE_REPORTS: "can_manage_reports",
    AdminCapability.DELETE_REPORTS: "can_delete_reports",
    AdminCapability.VIEW_STOLEN_ITEMS: "can_view_stolen_items",
    AdminCapability.RESPOND_TO_LIVE_CHAT: "can_respond_to_live_chat",
    AdminCapability.VIEW_SUPPORT_TICKETS: "can_view_support_tickets",
    AdminCapability.VIEW_ANONYMOUS_MESSAGES: "can_view_anonymous_messages",
    AdminCapability.VIEW_ASSETS: "can_view_assets",
    AdminCapability.MANAGE_ASSETS: "can_manage_assets",
    AdminCapability.DELETE_ASSETS: "can_delete_assets",
    AdminCapability.VIEW_FINANCIALS: "can_view_financials",
}

# Roles that land on the shareholder dashboard unless granted asset access
SHAREHOLDER_DASHBOARD_ROLES = {AdminRole.SHAREHOLDER, AdminRole.INVESTOR}


# ===========================================
# RESOLUTION
# ===========================================

def is_super_admin(profile: Profile) -> bool:
    """Either role column can carry the super admin grant."""
    return profile.role == UserRole.SUPER_ADMIN or profile.admin_role == AdminRole.SUPER_ADMIN


def _permission_granted(permissions: Optional[Dict[str, Any]], key: str) -> bool:
    # Only a literal True grants; "true", 1 and the like do not
    return bool(permissions) and permissions.get(key) is True


def has_capability(profile: Profile, capability: AdminCapability) -> bool:
    """Check whether a profile holds a capability."""
    if is_super_admin(profile):
        return True

    if profile.admin_role is not None:
        if capability in ADMIN_ROLE_CAPABILITIES.get(profile.admin_role, set()):
            return True

    key = PERMISSION_KEYS.get(capability)
    if key is not None and _permission_granted(profile.permissions, key):
        return True

    return False


def resolve_capabilities(profile: Profile) -> Dict[str, bool]:
    """
    Resolve every capability for a profile.

    Re-derived on each call; nothing is cached.
    """
    return {
        capability.value: has_capability(profile, capability)
        for capability in AdminCapability
    }


def dashboard_landing(profile: Profile) -> str:
    """
    Decide which dashboard an admin lands on.

    Shareholders and investors without an explicit `can_view_assets` grant
    land on the shareholder dashboard; everyone else on the admin one.
    """
    if (
        profile.admin_role in SHAREHOLDER_DASHBOARD_ROLES
        and not _permission_granted(profile.permissions, "can_view_assets")
    ):
        return "shareholder"
    return "admin"
