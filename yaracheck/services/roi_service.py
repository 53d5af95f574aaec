"""
YaraCheck - ROI Distribution Service

Super admins record payouts to shareholders (distributions), open them
for withdrawal and walk each withdrawal request through
pending -> approved -> sent -> completed.

Shareholders see the distributions addressed to them plus the ones
addressed to nobody (shareholder_id NULL), and may request a withdrawal
once per distribution while no earlier request is still open.
"""

import logging
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.models.profile import AdminRole, Profile
from yaracheck.models.roi import (
    ACTIVE_WITHDRAWAL_STATUSES,
    WITHDRAWAL_PROGRESSION,
    PeriodType,
    ROIDistribution,
    ROIWithdrawalRequest,
    WithdrawalStatus,
)
from yaracheck.services.audit_service import AuditService
from yaracheck.utils.error_handling import (
    AuthorizationException,
    ConflictException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationException,
    WithdrawalNotEnabledException,
)

logger = logging.getLogger(__name__)


def next_withdrawal_status(current: WithdrawalStatus) -> Optional[WithdrawalStatus]:
    """Get the status after `current`, or None once completed."""
    index = WITHDRAWAL_PROGRESSION.index(current)
    if index + 1 < len(WITHDRAWAL_PROGRESSION):
        return WITHDRAWAL_PROGRESSION[index + 1]
    return None


class ROIService:
    """Service for ROI distributions and withdrawal requests."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    # ===========================================
    # DISTRIBUTIONS (super admin)
    # ===========================================

    async def get_distribution(self, distribution_id: uuid.UUID) -> ROIDistribution:
        """Get a distribution or raise NotFoundException."""
        distribution = await self.db.get(ROIDistribution, distribution_id)
        if not distribution:
            raise NotFoundException("ROI distribution", distribution_id)
        return distribution

    async def create_distribution(
        self,
        actor: Profile,
        amount: Decimal,
        percentage: Decimal,
        period_type: PeriodType,
        period_start: date,
        period_end: date,
        shareholder_id: Optional[uuid.UUID] = None,
        notes: Optional[str] = None,
        withdrawal_enabled: bool = False,
    ) -> ROIDistribution:
        """Record a payout for one shareholder, or for all when shareholder_id is None."""
        if period_end < period_start:
            raise ValidationException("Period end must not be before period start", field="period_end")

        if shareholder_id is not None:
            shareholder = await self.db.get(Profile, shareholder_id)
            if not shareholder or shareholder.admin_role != AdminRole.SHAREHOLDER:
                raise NotFoundException("Shareholder", shareholder_id)

        distribution = ROIDistribution(
            amount=amount,
            percentage=percentage,
            period_type=period_type,
            period_start=period_start,
            period_end=period_end,
            shareholder_id=shareholder_id,
            notes=notes,
            withdrawal_enabled=withdrawal_enabled,
            distributed_by_id=actor.id,
        )
        self.db.add(distribution)
        await self.db.flush()

        await self.audit.log_action(
            action="Created ROI distribution",
            admin_id=actor.id,
            details={
                "distribution_id": str(distribution.id),
                "amount": str(amount),
                "shareholder_id": str(shareholder_id) if shareholder_id else None,
            },
        )
        await self.db.commit()
        await self.db.refresh(distribution)

        logger.info(f"ROI distribution {distribution.id} created by {actor.id}")
        return distribution

    async def list_distributions(self) -> List[ROIDistribution]:
        """List every distribution, newest first."""
        result = await self.db.execute(
            select(ROIDistribution).order_by(desc(ROIDistribution.created_at))
        )
        return list(result.scalars().all())

    async def set_withdrawal_enabled(
        self,
        actor: Profile,
        distribution_id: uuid.UUID,
        enabled: bool,
    ) -> ROIDistribution:
        """Open or close a distribution for withdrawal."""
        distribution = await self.get_distribution(distribution_id)
        distribution.withdrawal_enabled = enabled

        await self.audit.log_action(
            action="Enabled ROI withdrawal" if enabled else "Disabled ROI withdrawal",
            admin_id=actor.id,
            details={"distribution_id": str(distribution_id)},
        )
        await self.db.commit()
        await self.db.refresh(distribution)
        return distribution

    async def delete_distribution(self, actor: Profile, distribution_id: uuid.UUID) -> None:
        """
        Delete a distribution together with its withdrawal requests.

        Both deletes and the audit entry are committed together; a failure
        rolls all of them back.
        """
        await self.get_distribution(distribution_id)

        try:
            await self.db.execute(
                delete(ROIWithdrawalRequest).where(
                    ROIWithdrawalRequest.distribution_id == distribution_id
                )
            )
            await self.db.execute(
                delete(ROIDistribution).where(ROIDistribution.id == distribution_id)
            )
            await self.audit.log_action(
                action="Deleted ROI distribution",
                admin_id=actor.id,
                details={"distribution_id": str(distribution_id)},
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to delete ROI distribution {distribution_id}", exc_info=True)
            raise

        logger.info(f"ROI distribution {distribution_id} deleted by {actor.id}")

    # ===========================================
    # WITHDRAWALS
    # ===========================================

    async def list_withdrawal_requests(
        self,
        status: Optional[WithdrawalStatus] = None,
    ) -> List[ROIWithdrawalRequest]:
        """List withdrawal requests for processing, newest first."""
        query = select(ROIWithdrawalRequest)
        if status:
            query = query.where(ROIWithdrawalRequest.status == status)
        query = query.order_by(desc(ROIWithdrawalRequest.requested_at))

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def process_withdrawal(
        self,
        actor: Profile,
        request_id: uuid.UUID,
        new_status: WithdrawalStatus,
        notes: Optional[str] = None,
    ) -> ROIWithdrawalRequest:
        """
        Advance a withdrawal request by exactly one step.

        Raises:
            InvalidStatusTransitionException: If new_status is not the next step
        """
        request = await self.db.get(ROIWithdrawalRequest, request_id)
        if not request:
            raise NotFoundException("Withdrawal request", request_id)

        expected = next_withdrawal_status(request.status)
        if new_status != expected:
            raise InvalidStatusTransitionException(
                current=request.status.value,
                requested=new_status.value,
                allowed=expected.value if expected else None,
            )

        request.status = new_status
        request.processed_at = datetime.now(timezone.utc)
        request.processed_by_id = actor.id
        if notes is not None:
            request.notes = notes

        await self.audit.log_action(
            action=f"Withdrawal request {new_status.value}",
            admin_id=actor.id,
            details={"request_id": str(request_id), "amount": str(request.amount)},
        )
        await self.db.commit()
        await self.db.refresh(request)
        return request

    # ===========================================
    # SHAREHOLDER VIEW
    # ===========================================

    async def distributions_for(self, shareholder: Profile) -> List[ROIDistribution]:
        """Distributions addressed to this shareholder or to all shareholders."""
        result = await self.db.execute(
            select(ROIDistribution)
            .where(
                or_(
                    ROIDistribution.shareholder_id.is_(None),
                    ROIDistribution.shareholder_id == shareholder.id,
                )
            )
            .order_by(desc(ROIDistribution.created_at))
        )
        return list(result.scalars().all())

    async def requests_for(self, shareholder: Profile) -> List[ROIWithdrawalRequest]:
        """A shareholder's own withdrawal requests, newest first."""
        result = await self.db.execute(
            select(ROIWithdrawalRequest)
            .where(ROIWithdrawalRequest.shareholder_id == shareholder.id)
            .order_by(desc(ROIWithdrawalRequest.requested_at))
        )
        return list(result.scalars().all())

    async def request_withdrawal(
        self,
        shareholder: Profile,
        distribution_id: uuid.UUID,
    ) -> ROIWithdrawalRequest:
        """
        Request withdrawal of a distribution's full amount.

        Raises:
            AuthorizationException: If the distribution belongs to another shareholder
            WithdrawalNotEnabledException: If the distribution is closed for withdrawal
            ConflictException: If an open request already exists
        """
        distribution = await self.get_distribution(distribution_id)

        if distribution.shareholder_id is not None and distribution.shareholder_id != shareholder.id:
            raise AuthorizationException("This distribution is not available to you")

        if not distribution.withdrawal_enabled:
            raise WithdrawalNotEnabledException(distribution_id)

        existing = await self.db.execute(
            select(ROIWithdrawalRequest.id).where(
                ROIWithdrawalRequest.distribution_id == distribution_id,
                ROIWithdrawalRequest.shareholder_id == shareholder.id,
                ROIWithdrawalRequest.status.in_(ACTIVE_WITHDRAWAL_STATUSES),
            )
        )
        if existing.first() is not None:
            raise ConflictException(
                "A withdrawal request for this distribution is already in progress",
                resource_type="ROIWithdrawalRequest",
            )

        request = ROIWithdrawalRequest(
            distribution_id=distribution_id,
            shareholder_id=shareholder.id,
            amount=distribution.amount,
            status=WithdrawalStatus.PENDING,
        )
        self.db.add(request)
        await self.db.commit()
        await self.db.refresh(request)

        logger.info(f"Shareholder {shareholder.id} requested withdrawal of {distribution_id}")
        return request

    async def shareholder_summary(self, shareholder: Profile) -> Dict[str, Any]:
        """
        Totals for the shareholder dashboard.

        - total_earned: sum of visible distributions
        - pending: requests pending or approved
        - received: requests sent or completed
        - available: withdrawable distributions without an open request
        """
        distributions = await self.distributions_for(shareholder)
        requests = await self.requests_for(shareholder)

        open_distribution_ids = {
            r.distribution_id for r in requests if r.status in ACTIVE_WITHDRAWAL_STATUSES
        }

        total_earned = sum((Decimal(d.amount) for d in distributions), Decimal("0"))
        pending = sum(
            (Decimal(r.amount) for r in requests
             if r.status in (WithdrawalStatus.PENDING, WithdrawalStatus.APPROVED)),
            Decimal("0"),
        )
        received = sum(
            (Decimal(r.amount) for r in requests
             if r.status in (WithdrawalStatus.SENT, WithdrawalStatus.COMPLETED)),
            Decimal("0"),
        )
        available = sum(
            (Decimal(d.amount) for d in distributions
             if d.withdrawal_enabled and d.id not in open_distribution_ids),
            Decimal("0"),
        )

        return {
            "total_earned": total_earned,
            "pending": pending,
            "received": received,
            "available": available,
            "distribution_count": len(distributions),
            "request_count": len(requests),
        }
