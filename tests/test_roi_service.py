"""
YaraCheck - ROI Distribution Tests
"""

import uuid
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select

from yaracheck.models.audit import AuditLog
from yaracheck.models.roi import PeriodType, ROIDistribution, ROIWithdrawalRequest, WithdrawalStatus
from yaracheck.services.roi_service import ROIService, next_withdrawal_status
from yaracheck.utils.error_handling import (
    AuthorizationException,
    ConflictException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationException,
    WithdrawalNotEnabledException,
)


async def make_distribution(db_session, actor, shareholder_id=None, amount="1500.00", withdrawal_enabled=True):
    return await ROIService(db_session).create_distribution(
        actor=actor,
        amount=Decimal(amount),
        percentage=Decimal("2.50"),
        period_type=PeriodType.QUARTERLY,
        period_start=date(2026, 7, 1),
        period_end=date(2026, 9, 30),
        shareholder_id=shareholder_id,
        withdrawal_enabled=withdrawal_enabled,
    )


class TestProgression:

    def test_next_status(self):
        assert next_withdrawal_status(WithdrawalStatus.PENDING) == WithdrawalStatus.APPROVED
        assert next_withdrawal_status(WithdrawalStatus.APPROVED) == WithdrawalStatus.SENT
        assert next_withdrawal_status(WithdrawalStatus.SENT) == WithdrawalStatus.COMPLETED
        assert next_withdrawal_status(WithdrawalStatus.COMPLETED) is None


class TestDistributions:

    @pytest.mark.asyncio
    async def test_create_is_audited(self, db_session, super_admin, shareholder):
        distribution = await make_distribution(db_session, super_admin, shareholder.id)

        assert distribution.amount == Decimal("1500.00")
        assert distribution.distributed_by_id == super_admin.id
        log = (await db_session.execute(select(AuditLog))).scalar_one()
        assert log.action == "Created ROI distribution"

    @pytest.mark.asyncio
    async def test_period_must_be_ordered(self, db_session, super_admin):
        with pytest.raises(ValidationException):
            await ROIService(db_session).create_distribution(
                actor=super_admin,
                amount=Decimal("10"),
                percentage=Decimal("1"),
                period_type=PeriodType.MONTHLY,
                period_start=date(2026, 2, 1),
                period_end=date(2026, 1, 1),
            )

    @pytest.mark.asyncio
    async def test_target_must_be_shareholder(self, db_session, super_admin, director):
        with pytest.raises(NotFoundException):
            await make_distribution(db_session, super_admin, director.id)

    @pytest.mark.asyncio
    async def test_shareholder_sees_own_and_shared(self, db_session, super_admin, shareholder):
        own = await make_distribution(db_session, super_admin, shareholder.id)
        shared = await make_distribution(db_session, super_admin, None)

        visible = await ROIService(db_session).distributions_for(shareholder)

        assert {d.id for d in visible} == {own.id, shared.id}

    @pytest.mark.asyncio
    async def test_delete_removes_requests(self, db_session, super_admin, shareholder):
        service = ROIService(db_session)
        distribution = await make_distribution(db_session, super_admin, shareholder.id)
        await service.request_withdrawal(shareholder, distribution.id)

        await service.delete_distribution(super_admin, distribution.id)

        assert (await db_session.execute(select(ROIDistribution))).scalars().all() == []
        assert (await db_session.execute(select(ROIWithdrawalRequest))).scalars().all() == []

    @pytest.mark.asyncio
    async def test_delete_unknown(self, db_session, super_admin):
        with pytest.raises(NotFoundException):
            await ROIService(db_session).delete_distribution(super_admin, uuid.uuid4())


class TestWithdrawals:

    @pytest.mark.asyncio
    async def test_request_full_amount(self, db_session, super_admin, shareholder):
        distribution = await make_distribution(db_session, super_admin, shareholder.id)

        request = await ROIService(db_session).request_withdrawal(shareholder, distribution.id)

        assert request.status == WithdrawalStatus.PENDING
        assert request.amount == Decimal("1500.00")

    @pytest.mark.asyncio
    async def test_disabled_distribution(self, db_session, super_admin, shareholder):
        distribution = await make_distribution(db_session, super_admin, shareholder.id, withdrawal_enabled=False)
        with pytest.raises(WithdrawalNotEnabledException):
            await ROIService(db_session).request_withdrawal(shareholder, distribution.id)

    @pytest.mark.asyncio
    async def test_other_shareholders_distribution(self, db_session, super_admin, shareholder, other_shareholder):
        distribution = await make_distribution(db_session, super_admin, other_shareholder.id)

        with pytest.raises(AuthorizationException):
            await ROIService(db_session).request_withdrawal(shareholder, distribution.id)

    @pytest.mark.asyncio
    async def test_one_open_request_per_distribution(self, db_session, super_admin, shareholder):
        service = ROIService(db_session)
        distribution = await make_distribution(db_session, super_admin, shareholder.id)
        await service.request_withdrawal(shareholder, distribution.id)

        with pytest.raises(ConflictException):
            await service.request_withdrawal(shareholder, distribution.id)

    @pytest.mark.asyncio
    async def test_new_request_after_completion(self, db_session, super_admin, shareholder):
        service = ROIService(db_session)
        distribution = await make_distribution(db_session, super_admin, shareholder.id)
        request = await service.request_withdrawal(shareholder, distribution.id)
        for step in (WithdrawalStatus.APPROVED, WithdrawalStatus.SENT, WithdrawalStatus.COMPLETED):
            await service.process_withdrawal(super_admin, request.id, step)

        again = await service.request_withdrawal(shareholder, distribution.id)
        assert again.id != request.id

    @pytest.mark.asyncio
    async def test_steps_one_at_a_time(self, db_session, super_admin, shareholder):
        service = ROIService(db_session)
        distribution = await make_distribution(db_session, super_admin, shareholder.id)
        request = await service.request_withdrawal(shareholder, distribution.id)

        with pytest.raises(InvalidStatusTransitionException):
            await service.process_withdrawal(super_admin, request.id, WithdrawalStatus.SENT)

        approved = await service.process_withdrawal(super_admin, request.id, WithdrawalStatus.APPROVED, "ok")
        assert approved.status == WithdrawalStatus.APPROVED
        assert approved.processed_by_id == super_admin.id
        assert approved.notes == "ok"

        with pytest.raises(InvalidStatusTransitionException):
            await service.process_withdrawal(super_admin, request.id, WithdrawalStatus.PENDING)

    @pytest.mark.asyncio
    async def test_completed_is_terminal(self, db_session, super_admin, shareholder):
        service = ROIService(db_session)
        distribution = await make_distribution(db_session, super_admin, shareholder.id)
        request = await service.request_withdrawal(shareholder, distribution.id)
        for step in (WithdrawalStatus.APPROVED, WithdrawalStatus.SENT, WithdrawalStatus.COMPLETED):
            await service.process_withdrawal(super_admin, request.id, step)

        with pytest.raises(InvalidStatusTransitionException):
            await service.process_withdrawal(super_admin, request.id, WithdrawalStatus.COMPLETED)


class TestShareholderSummary:

    @pytest.mark.asyncio
    async def test_totals(self, db_session, super_admin, shareholder):
        service = ROIService(db_session)
        first = await make_distribution(db_session, super_admin, shareholder.id, amount="1000.00")
        second = await make_distribution(db_session, super_admin, None, amount="500.00")
        await make_distribution(db_session, super_admin, shareholder.id, amount="250.00", withdrawal_enabled=False)

        done = await service.request_withdrawal(shareholder, first.id)
        for step in (WithdrawalStatus.APPROVED, WithdrawalStatus.SENT):
            await service.process_withdrawal(super_admin, done.id, step)
        await service.request_withdrawal(shareholder, second.id)

        summary = await service.shareholder_summary(shareholder)

        assert summary["total_earned"] == Decimal("1750.00")
        assert summary["received"] == Decimal("1000.00")
        assert summary["pending"] == Decimal("500.00")
        assert summary["available"] == Decimal("0")
        assert summary["distribution_count"] == 3
        assert summary["request_count"] == 2
