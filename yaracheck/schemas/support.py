"""
YaraCheck - Support Schemas

Support tickets and live chat.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from yaracheck.models.support import ChatStatus, TicketPriority, TicketStatus


# ===========================================
# TICKETS
# ===========================================

class TicketCreate(BaseModel):
    """Open a support ticket."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=30)
    subject: str = Field(..., min_length=1, max_length=500)
    message: str = Field(..., min_length=1)
    priority: TicketPriority = TicketPriority.MEDIUM


class TicketUpdate(BaseModel):
    """Admin update of a ticket."""
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    resolution_notes: Optional[str] = None
    assign_to_self: bool = False


class TicketResponse(BaseModel):
    """Support ticket."""
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    priority: TicketPriority
    status: TicketStatus
    assigned_to_id: Optional[UUID] = None
    resolution_notes: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TicketStats(BaseModel):
    open: int = 0
    in_progress: int = 0
    resolved: int = 0
    closed: int = 0
    total: int = 0


# ===========================================
# LIVE CHAT
# ===========================================

class ChatMessageCreate(BaseModel):
    """Visitor chat message."""
    session_id: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=5000)
    user_email: Optional[EmailStr] = None
    user_name: Optional[str] = Field(None, max_length=255)


class ChatReply(BaseModel):
    """Admin reply."""
    message: str = Field(..., min_length=1, max_length=5000)


class ChatMessageResponse(BaseModel):
    """Chat message."""
    id: UUID
    session_id: str
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    message: str
    is_admin_reply: bool
    admin_id: Optional[UUID] = None
    status: ChatStatus
    resolved_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChatSessionSummary(BaseModel):
    session_id: str
    message_count: int
    last_message_at: datetime


class ChatResolveResponse(BaseModel):
    session_id: str
    resolved_messages: int
