"""
YaraCheck - Capability Resolution Tests
"""

from yaracheck.models.profile import AdminRole, Profile, UserRole
from yaracheck.utils.permissions import (
    AdminCapability,
    dashboard_landing,
    has_capability,
    resolve_capabilities,
)


def make_profile(role=UserRole.ADMIN, admin_role=None, permissions=None) -> Profile:
    return Profile(
        email="someone@yaracheck.test",
        hashed_password="x",
        role=role,
        admin_role=admin_role,
        permissions=permissions,
    )


class TestSuperAdmin:

    def test_role_column_grants_everything(self):
        profile = make_profile(role=UserRole.SUPER_ADMIN)
        assert all(resolve_capabilities(profile).values())

    def test_admin_role_column_grants_everything(self):
        profile = make_profile(admin_role=AdminRole.SUPER_ADMIN)
        assert has_capability(profile, AdminCapability.MANAGE_ROI)
        assert has_capability(profile, AdminCapability.MANAGE_ADMINS)


class TestRoleGrants:

    def test_director(self):
        profile = make_profile(admin_role=AdminRole.DIRECTOR)
        assert has_capability(profile, AdminCapability.VIEW_ANONYMOUS_MESSAGES)
        assert has_capability(profile, AdminCapability.VIEW_COUNTRIES)
        assert not has_capability(profile, AdminCapability.VIEW_ASSETS)

    def test_shareholder(self):
        profile = make_profile(admin_role=AdminRole.SHAREHOLDER)
        assert has_capability(profile, AdminCapability.VIEW_ASSETS)
        assert has_capability(profile, AdminCapability.VIEW_FINANCIALS)
        assert not has_capability(profile, AdminCapability.MANAGE_ASSETS)

    def test_super_admin_only_capabilities(self):
        profile = make_profile(admin_role=AdminRole.DIRECTOR, permissions={"can_manage_roi": True})
        assert not has_capability(profile, AdminCapability.MANAGE_ROI)
        assert not has_capability(profile, AdminCapability.MANAGE_ADMINS)


class TestPermissionGrants:

    def test_permission_key_grants(self):
        profile = make_profile(admin_role=AdminRole.COUNTRY_REP, permissions={"can_view_reports": True})
        assert has_capability(profile, AdminCapability.VIEW_REPORTS)
        assert not has_capability(profile, AdminCapability.MANAGE_REPORTS)

    def test_grants_are_or_ed(self):
        # The role grants view_assets even though the permission map says False
        profile = make_profile(admin_role=AdminRole.SHAREHOLDER, permissions={"can_view_assets": False})
        assert has_capability(profile, AdminCapability.VIEW_ASSETS)

    def test_only_literal_true_grants(self):
        profile = make_profile(permissions={
            "can_view_reports": "true",
            "can_manage_reports": 1,
            "can_view_analytics": True,
        })
        assert not has_capability(profile, AdminCapability.VIEW_REPORTS)
        assert not has_capability(profile, AdminCapability.MANAGE_REPORTS)
        assert has_capability(profile, AdminCapability.VIEW_ANALYTICS)

    def test_no_permissions(self):
        profile = make_profile(admin_role=AdminRole.CUSTOMER_SUPPORT_EXECUTIVE)
        assert not any(resolve_capabilities(profile).values())


class TestDashboardLanding:

    def test_shareholder_lands_on_shareholder_dashboard(self):
        assert dashboard_landing(make_profile(admin_role=AdminRole.SHAREHOLDER)) == "shareholder"

    def test_investor_lands_on_shareholder_dashboard(self):
        assert dashboard_landing(make_profile(admin_role=AdminRole.INVESTOR)) == "shareholder"

    def test_asset_grant_moves_shareholder_to_admin_dashboard(self):
        profile = make_profile(admin_role=AdminRole.SHAREHOLDER, permissions={"can_view_assets": True})
        assert dashboard_landing(profile) == "admin"

    def test_other_admins_land_on_admin_dashboard(self):
        assert dashboard_landing(make_profile(admin_role=AdminRole.DIRECTOR)) == "admin"
