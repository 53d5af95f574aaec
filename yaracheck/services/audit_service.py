"""
YaraCheck - Admin Audit Trail Service
"""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.models.audit import AuditLog


class AuditService:
    """Service for recording administrative actions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log_action(
        self,
        action: str,
        admin_id: Optional[uuid.UUID] = None,
        details: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """
        Log an admin action.

        The entry is added to the current session and flushed; the caller's
        commit persists it together with the change it describes.
        """
        audit_log = AuditLog(
            admin_id=admin_id,
            action=action,
            details=details,
            ip_address=ip_address,
        )
        self.db.add(audit_log)
        await self.db.flush()
        return audit_log

    async def list_logs(
        self,
        action: Optional[str] = None,
        admin_id: Optional[uuid.UUID] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[AuditLog]:
        """Get audit log entries, newest first."""
        query = select(AuditLog)
        if action:
            query = query.where(AuditLog.action == action)
        if admin_id:
            query = query.where(AuditLog.admin_id == admin_id)
        query = query.order_by(desc(AuditLog.created_at)).offset(offset).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())
