"""
YaraCheck - ROI Models

Shareholder payout records (distributions) and the withdrawal requests
raised against them.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Numeric, String, Text, func, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yaracheck.models.base import BaseModel


class PeriodType(str, Enum):
    """Distribution period."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class WithdrawalStatus(str, Enum):
    """
    Withdrawal request status.

    Progression is linear: pending -> approved -> sent -> completed.
    """
    PENDING = "pending"
    APPROVED = "approved"
    SENT = "sent"
    COMPLETED = "completed"


WITHDRAWAL_PROGRESSION: List[WithdrawalStatus] = [
    WithdrawalStatus.PENDING,
    WithdrawalStatus.APPROVED,
    WithdrawalStatus.SENT,
    WithdrawalStatus.COMPLETED,
]

# A distribution accepts no new request while one of these is open
ACTIVE_WITHDRAWAL_STATUSES = {
    WithdrawalStatus.PENDING,
    WithdrawalStatus.APPROVED,
    WithdrawalStatus.SENT,
}


class ROIDistribution(BaseModel):
    """
    A shareholder payout record created by a super admin.

    shareholder_id NULL means the distribution is visible to every shareholder.
    """

    __tablename__ = "roi_distributions"

    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    percentage: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    period_type: Mapped[PeriodType] = mapped_column(SQLEnum(PeriodType), nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    shareholder_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    withdrawal_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    distributed_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )

    withdrawal_requests: Mapped[List["ROIWithdrawalRequest"]] = relationship(
        "ROIWithdrawalRequest",
        back_populates="distribution",
    )


class ROIWithdrawalRequest(BaseModel):
    """A shareholder's request to withdraw a distribution."""

    __tablename__ = "roi_withdrawal_requests"

    distribution_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("roi_distributions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    shareholder_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[WithdrawalStatus] = mapped_column(
        SQLEnum(WithdrawalStatus),
        default=WithdrawalStatus.PENDING,
        nullable=False,
    )
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    processed_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    distribution: Mapped["ROIDistribution"] = relationship(
        "ROIDistribution",
        back_populates="withdrawal_requests",
    )
