"""
YaraCheck - Company Asset Service
"""

import logging
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.models.asset import CompanyAsset
from yaracheck.models.profile import Profile
from yaracheck.services.audit_service import AuditService
from yaracheck.utils.error_handling import NotFoundException

logger = logging.getLogger(__name__)


class AssetService:
    """Service for company asset records."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def get_asset(self, asset_id: uuid.UUID) -> CompanyAsset:
        asset = await self.db.get(CompanyAsset, asset_id)
        if not asset:
            raise NotFoundException("Asset", asset_id)
        return asset

    async def list_assets(
        self,
        category: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[CompanyAsset]:
        """List assets, newest first."""
        query = select(CompanyAsset)
        if category:
            query = query.where(CompanyAsset.category == category)
        if not include_inactive:
            query = query.where(CompanyAsset.is_active == True)  # noqa: E712
        result = await self.db.execute(query.order_by(desc(CompanyAsset.created_at)))
        return list(result.scalars().all())

    async def create_asset(self, actor: Profile, data: Dict[str, Any]) -> CompanyAsset:
        asset = CompanyAsset(**data, created_by_id=actor.id)
        self.db.add(asset)
        await self.db.flush()

        await self.audit.log_action(
            action="Created company asset",
            admin_id=actor.id,
            details={"asset_id": str(asset.id), "name": asset.name},
        )
        await self.db.commit()
        await self.db.refresh(asset)
        return asset

    async def update_asset(
        self,
        actor: Profile,
        asset_id: uuid.UUID,
        updates: Dict[str, Any],
    ) -> CompanyAsset:
        """Apply a partial update."""
        asset = await self.get_asset(asset_id)
        for key, value in updates.items():
            setattr(asset, key, value)

        await self.audit.log_action(
            action="Updated company asset",
            admin_id=actor.id,
            details={"asset_id": str(asset_id), "fields": sorted(updates.keys())},
        )
        await self.db.commit()
        await self.db.refresh(asset)
        return asset

    async def delete_asset(self, actor: Profile, asset_id: uuid.UUID) -> None:
        asset = await self.get_asset(asset_id)
        await self.db.delete(asset)
        await self.audit.log_action(
            action="Deleted company asset",
            admin_id=actor.id,
            details={"asset_id": str(asset_id), "name": asset.name},
        )
        await self.db.commit()
        logger.info(f"Asset {asset_id} deleted by {actor.id}")

    async def summary(self) -> Dict[str, Any]:
        """Count and total current value of active assets, per category."""
        result = await self.db.execute(
            select(CompanyAsset.category, func.count(CompanyAsset.id), func.sum(CompanyAsset.current_value))
            .where(CompanyAsset.is_active == True)  # noqa: E712
            .group_by(CompanyAsset.category)
        )

        by_category = {}
        total_value = Decimal("0")
        total_count = 0
        for category, count, value in result.all():
            value = Decimal(str(value or 0))
            by_category[category] = {"count": count, "value": value}
            total_value += value
            total_count += count

        return {
            "total_assets": total_count,
            "total_value": total_value,
            "by_category": by_category,
        }
