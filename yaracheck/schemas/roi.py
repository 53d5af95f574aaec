"""
YaraCheck - ROI Schemas
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from yaracheck.models.roi import PeriodType, WithdrawalStatus


class DistributionCreate(BaseModel):
    """Record an ROI payout."""
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    percentage: Decimal = Field(..., ge=0, le=100, max_digits=5, decimal_places=2)
    period_type: PeriodType
    period_start: date
    period_end: date
    shareholder_id: Optional[UUID] = Field(None, description="Omit to address every shareholder")
    notes: Optional[str] = None
    withdrawal_enabled: bool = False


class WithdrawalToggle(BaseModel):
    withdrawal_enabled: bool


class DistributionResponse(BaseModel):
    """ROI distribution."""
    id: UUID
    amount: Decimal
    percentage: Decimal
    period_type: PeriodType
    period_start: date
    period_end: date
    shareholder_id: Optional[UUID] = None
    withdrawal_enabled: bool
    notes: Optional[str] = None
    distributed_by_id: Optional[UUID] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WithdrawalProcess(BaseModel):
    """Advance a withdrawal request one step."""
    status: WithdrawalStatus
    notes: Optional[str] = None


class WithdrawalCreate(BaseModel):
    distribution_id: UUID


class WithdrawalResponse(BaseModel):
    """Withdrawal request."""
    id: UUID
    distribution_id: UUID
    shareholder_id: UUID
    amount: Decimal
    status: WithdrawalStatus
    requested_at: datetime
    processed_at: Optional[datetime] = None
    processed_by_id: Optional[UUID] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ShareholderSummary(BaseModel):
    """Shareholder dashboard totals."""
    total_earned: Decimal
    pending: Decimal
    received: Decimal
    available: Decimal
    distribution_count: int
    request_count: int
