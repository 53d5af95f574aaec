"""
YaraCheck - Geographic Scoping

Restricts admin report queries to the country an admin is assigned to.

| admin_role        | Scope                                      |
|-------------------|--------------------------------------------|
| super admin       | all countries                              |
| director          | all countries                              |
| country_rep       | profile.country_id                         |
| province_manager  | country of profile.province_id             |
| anyone else       | all countries                              |

A country rep without a country, or a province manager whose province
cannot be found, is not restricted.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.models.geography import Province
from yaracheck.models.profile import AdminRole, Profile

logger = logging.getLogger(__name__)


async def resolve_country_scope(db: AsyncSession, profile: Profile) -> Optional[uuid.UUID]:
    """
    Resolve the country an admin's report queries are limited to.

    Returns:
        Country id to filter on, or None for no restriction.
    """
    if profile.is_super_admin:
        return None

    if profile.admin_role == AdminRole.COUNTRY_REP and profile.country_id:
        return profile.country_id

    if profile.admin_role == AdminRole.PROVINCE_MANAGER and profile.province_id:
        result = await db.execute(
            select(Province.country_id).where(Province.id == profile.province_id)
        )
        country_id = result.scalar_one_or_none()
        if country_id is None:
            logger.warning(
                f"Province {profile.province_id} for admin {profile.id} not found; "
                "report queries are not restricted"
            )
        return country_id

    return None


def apply_country_scope(query: Select, model, country_id: Optional[uuid.UUID]) -> Select:
    """Add the country filter to a report query when a scope is set."""
    if country_id is None:
        return query
    return query.where(model.country_id == country_id)
