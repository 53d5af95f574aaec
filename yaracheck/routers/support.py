"""
YaraCheck - Support Router

Public ticket and chat intake; admin ticket handling and chat replies.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.database import get_async_session
from yaracheck.dependencies import get_optional_user, require_capability
from yaracheck.models.profile import Profile
from yaracheck.models.support import ChatStatus, TicketPriority, TicketStatus
from yaracheck.schemas.support import (
    ChatMessageCreate,
    ChatMessageResponse,
    ChatReply,
    ChatResolveResponse,
    ChatSessionSummary,
    TicketCreate,
    TicketResponse,
    TicketStats,
    TicketUpdate,
)
from yaracheck.services.support_service import SupportService
from yaracheck.utils.permissions import AdminCapability


router = APIRouter()


# ===========================================
# TICKETS
# ===========================================

@router.post(
    "/tickets",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a support ticket",
)
async def create_ticket(
    request: TicketCreate,
    current_user: Optional[Profile] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_session),
):
    return await SupportService(db).create_ticket(
        name=request.name,
        email=request.email,
        subject=request.subject,
        message=request.message,
        phone=request.phone,
        priority=request.priority,
        user=current_user,
    )


@router.get(
    "/tickets",
    response_model=List[TicketResponse],
    summary="List support tickets",
)
async def list_tickets(
    status_filter: Optional[TicketStatus] = Query(None, alias="status"),
    priority: Optional[TicketPriority] = Query(None),
    admin: Profile = Depends(require_capability(AdminCapability.VIEW_SUPPORT_TICKETS)),
    db: AsyncSession = Depends(get_async_session),
):
    return await SupportService(db).list_tickets(status_filter, priority)


@router.get(
    "/tickets/stats",
    response_model=TicketStats,
    summary="Ticket counts per status",
)
async def ticket_stats(
    admin: Profile = Depends(require_capability(AdminCapability.VIEW_SUPPORT_TICKETS)),
    db: AsyncSession = Depends(get_async_session),
):
    return await SupportService(db).ticket_stats()


@router.patch(
    "/tickets/{ticket_id}",
    response_model=TicketResponse,
    summary="Update a support ticket",
)
async def update_ticket(
    ticket_id: UUID,
    request: TicketUpdate,
    admin: Profile = Depends(require_capability(AdminCapability.VIEW_SUPPORT_TICKETS)),
    db: AsyncSession = Depends(get_async_session),
):
    """Resolving or closing stamps resolved_at; reopening clears it."""
    return await SupportService(db).update_ticket(
        admin,
        ticket_id,
        status=request.status,
        priority=request.priority,
        resolution_notes=request.resolution_notes,
        assign_to_self=request.assign_to_self,
    )


# ===========================================
# LIVE CHAT
# ===========================================

@router.post(
    "/chat/messages",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a live chat message",
)
async def post_chat_message(
    request: ChatMessageCreate,
    db: AsyncSession = Depends(get_async_session),
):
    return await SupportService(db).post_message(
        session_id=request.session_id,
        message=request.message,
        user_email=request.user_email,
        user_name=request.user_name,
    )


@router.get(
    "/chat/sessions/{session_id}/messages",
    response_model=List[ChatMessageResponse],
    summary="Messages of a chat session",
)
async def get_session_messages(
    session_id: str,
    db: AsyncSession = Depends(get_async_session),
):
    """Visitors poll their own session by its id."""
    return await SupportService(db).session_messages(session_id)


@router.get(
    "/chat/sessions",
    response_model=List[ChatSessionSummary],
    summary="List chat sessions",
)
async def list_chat_sessions(
    status_filter: Optional[ChatStatus] = Query(None, alias="status"),
    admin: Profile = Depends(require_capability(AdminCapability.RESPOND_TO_LIVE_CHAT)),
    db: AsyncSession = Depends(get_async_session),
):
    return await SupportService(db).list_sessions(status_filter)


@router.post(
    "/chat/sessions/{session_id}/reply",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to a chat session",
)
async def reply_to_chat(
    session_id: str,
    request: ChatReply,
    admin: Profile = Depends(require_capability(AdminCapability.RESPOND_TO_LIVE_CHAT)),
    db: AsyncSession = Depends(get_async_session),
):
    return await SupportService(db).reply(admin, session_id, request.message)


@router.post(
    "/chat/sessions/{session_id}/resolve",
    response_model=ChatResolveResponse,
    summary="Resolve a chat session",
)
async def resolve_chat(
    session_id: str,
    admin: Profile = Depends(require_capability(AdminCapability.RESPOND_TO_LIVE_CHAT)),
    db: AsyncSession = Depends(get_async_session),
):
    updated = await SupportService(db).resolve_session(admin, session_id)
    return ChatResolveResponse(session_id=session_id, resolved_messages=updated)
