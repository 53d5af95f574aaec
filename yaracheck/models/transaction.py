"""
YaraCheck - Payment Transaction Model

One row per checkout attempt. The pending report travels in report_data
and is materialized into its table once the payment is verified.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from yaracheck.models.base import BaseModel


class PaymentProvider(str, Enum):
    """Supported payment gateways."""
    STRIPE = "stripe"
    PAYSTACK = "paystack"
    FLUTTERWAVE = "flutterwave"


class TransactionStatus(str, Enum):
    """Transaction status."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PaymentTransaction(BaseModel):
    """Checkout attempt for a report submission fee."""

    __tablename__ = "transactions"

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Amount in the smallest unit of `currency` (cents for USD, whole naira for NGN)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)

    payment_provider: Mapped[PaymentProvider] = mapped_column(SQLEnum(PaymentProvider), nullable=False)
    payment_reference: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    provider_reference: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Gateway-side transaction id once verified",
    )
    stripe_session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    authorization_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    report_type: Mapped[str] = mapped_column(String(32), nullable=False)
    report_data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    tracking_code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    status: Mapped[TransactionStatus] = mapped_column(
        SQLEnum(TransactionStatus),
        default=TransactionStatus.PENDING,
        nullable=False,
        index=True,
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    failure_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
