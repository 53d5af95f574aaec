"""
YaraCheck - Support Service

Support tickets and live chat.

Tickets move freely between open, in_progress, resolved and closed;
moving to resolved or closed stamps resolved_at, reopening clears it.
Live chat messages are grouped by session_id; resolving a session marks
every message in it resolved.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.models.profile import Profile
from yaracheck.models.support import (
    ChatStatus,
    LiveChatMessage,
    SupportTicket,
    TicketPriority,
    TicketStatus,
)
from yaracheck.utils.error_handling import NotFoundException

logger = logging.getLogger(__name__)

CLOSED_TICKET_STATUSES = {TicketStatus.RESOLVED, TicketStatus.CLOSED}


class SupportService:
    """Service for support tickets and live chat."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ===========================================
    # TICKETS
    # ===========================================

    async def create_ticket(
        self,
        name: str,
        email: str,
        subject: str,
        message: str,
        phone: Optional[str] = None,
        priority: TicketPriority = TicketPriority.MEDIUM,
        user: Optional[Profile] = None,
    ) -> SupportTicket:
        """Open a support ticket."""
        ticket = SupportTicket(
            name=name,
            email=email.lower(),
            phone=phone,
            subject=subject,
            message=message,
            priority=priority,
            status=TicketStatus.OPEN,
            user_id=user.id if user else None,
        )
        self.db.add(ticket)
        await self.db.commit()
        await self.db.refresh(ticket)

        logger.info(f"Support ticket {ticket.id} opened ({priority.value})")
        return ticket

    async def list_tickets(
        self,
        status: Optional[TicketStatus] = None,
        priority: Optional[TicketPriority] = None,
    ) -> List[SupportTicket]:
        query = select(SupportTicket)
        if status:
            query = query.where(SupportTicket.status == status)
        if priority:
            query = query.where(SupportTicket.priority == priority)
        result = await self.db.execute(query.order_by(desc(SupportTicket.created_at)))
        return list(result.scalars().all())

    async def update_ticket(
        self,
        admin: Profile,
        ticket_id: uuid.UUID,
        status: Optional[TicketStatus] = None,
        priority: Optional[TicketPriority] = None,
        resolution_notes: Optional[str] = None,
        assign_to_self: bool = False,
    ) -> SupportTicket:
        """Update a ticket's status, priority, notes or assignee."""
        ticket = await self.db.get(SupportTicket, ticket_id)
        if not ticket:
            raise NotFoundException("Support ticket", ticket_id)

        if status is not None and status != ticket.status:
            ticket.status = status
            if status in CLOSED_TICKET_STATUSES:
                ticket.resolved_at = datetime.now(timezone.utc)
            else:
                ticket.resolved_at = None
        if priority is not None:
            ticket.priority = priority
        if resolution_notes is not None:
            ticket.resolution_notes = resolution_notes
        if assign_to_self:
            ticket.assigned_to_id = admin.id

        await self.db.commit()
        await self.db.refresh(ticket)
        return ticket

    async def ticket_stats(self) -> Dict[str, int]:
        """Ticket counts per status."""
        result = await self.db.execute(
            select(SupportTicket.status, func.count(SupportTicket.id)).group_by(SupportTicket.status)
        )
        counts = {status.value: 0 for status in TicketStatus}
        for status, count in result.all():
            counts[status.value] = count
        counts["total"] = sum(counts.values())
        return counts

    # ===========================================
    # LIVE CHAT
    # ===========================================

    async def post_message(
        self,
        session_id: str,
        message: str,
        user_email: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> LiveChatMessage:
        """Post a visitor message to a chat session."""
        chat = LiveChatMessage(
            session_id=session_id,
            user_email=user_email,
            user_name=user_name,
            message=message,
            is_admin_reply=False,
            status=ChatStatus.OPEN,
        )
        self.db.add(chat)
        await self.db.commit()
        await self.db.refresh(chat)
        return chat

    async def reply(self, admin: Profile, session_id: str, message: str) -> LiveChatMessage:
        """
        Post an admin reply.

        Raises:
            NotFoundException: If the session has no messages
        """
        await self._require_session(session_id)

        chat = LiveChatMessage(
            session_id=session_id,
            message=message,
            is_admin_reply=True,
            admin_id=admin.id,
            user_name=admin.full_name,
            status=ChatStatus.OPEN,
        )
        self.db.add(chat)
        await self.db.commit()
        await self.db.refresh(chat)
        return chat

    async def _require_session(self, session_id: str) -> None:
        result = await self.db.execute(
            select(LiveChatMessage.id).where(LiveChatMessage.session_id == session_id).limit(1)
        )
        if result.first() is None:
            raise NotFoundException("Chat session", session_id)

    async def session_messages(self, session_id: str) -> List[LiveChatMessage]:
        """Messages of one session, oldest first."""
        result = await self.db.execute(
            select(LiveChatMessage)
            .where(LiveChatMessage.session_id == session_id)
            .order_by(LiveChatMessage.created_at)
        )
        return list(result.scalars().all())

    async def list_sessions(self, status: Optional[ChatStatus] = None) -> List[Dict[str, Any]]:
        """One entry per chat session with its latest activity, most recent first."""
        query = select(
            LiveChatMessage.session_id,
            func.count(LiveChatMessage.id),
            func.max(LiveChatMessage.created_at),
        ).group_by(LiveChatMessage.session_id)
        if status:
            query = query.where(LiveChatMessage.status == status)

        result = await self.db.execute(query.order_by(desc(func.max(LiveChatMessage.created_at))))
        return [
            {"session_id": session_id, "message_count": count, "last_message_at": last}
            for session_id, count, last in result.all()
        ]

    async def resolve_session(self, admin: Profile, session_id: str) -> int:
        """
        Mark every message in a session resolved.

        Returns:
            Number of messages updated
        """
        await self._require_session(session_id)

        result = await self.db.execute(
            update(LiveChatMessage)
            .where(
                LiveChatMessage.session_id == session_id,
                LiveChatMessage.status == ChatStatus.OPEN,
            )
            .values(
                status=ChatStatus.RESOLVED,
                resolved_at=datetime.now(timezone.utc),
                resolved_by_id=admin.id,
            )
        )
        await self.db.commit()
        logger.info(f"Chat session {session_id} resolved by {admin.id}")
        return result.rowcount
