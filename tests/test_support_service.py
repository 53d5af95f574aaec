"""
YaraCheck - Support Tickets, Live Chat and Company Asset Tests
"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy import select

from yaracheck.models.asset import CompanyAsset
from yaracheck.models.audit import AuditLog
from yaracheck.models.support import ChatStatus, TicketPriority, TicketStatus
from yaracheck.services.asset_service import AssetService
from yaracheck.services.support_service import SupportService
from yaracheck.utils.error_handling import NotFoundException


async def open_ticket(db_session, subject="Payment went through but no tracking code", **kwargs):
    return await SupportService(db_session).create_ticket(
        name="Ada Obi",
        email="Ada@Example.com",
        subject=subject,
        message="I paid with Paystack an hour ago.",
        **kwargs,
    )


class TestTickets:

    @pytest.mark.asyncio
    async def test_create(self, db_session, test_user):
        ticket = await open_ticket(db_session, priority=TicketPriority.HIGH, user=test_user)

        assert ticket.status == TicketStatus.OPEN
        assert ticket.priority == TicketPriority.HIGH
        assert ticket.email == "ada@example.com"
        assert ticket.user_id == test_user.id

    @pytest.mark.asyncio
    async def test_resolving_stamps_resolved_at(self, db_session, support_agent):
        service = SupportService(db_session)
        ticket = await open_ticket(db_session)

        resolved = await service.update_ticket(
            support_agent,
            ticket.id,
            status=TicketStatus.RESOLVED,
            resolution_notes="Report materialized after manual verify",
            assign_to_self=True,
        )
        assert resolved.resolved_at is not None
        assert resolved.assigned_to_id == support_agent.id

        reopened = await service.update_ticket(support_agent, ticket.id, status=TicketStatus.IN_PROGRESS)
        assert reopened.resolved_at is None

    @pytest.mark.asyncio
    async def test_closing_stamps_resolved_at(self, db_session, support_agent):
        ticket = await open_ticket(db_session)
        closed = await SupportService(db_session).update_ticket(support_agent, ticket.id, status=TicketStatus.CLOSED)
        assert closed.resolved_at is not None

    @pytest.mark.asyncio
    async def test_unknown_ticket(self, db_session, support_agent):
        with pytest.raises(NotFoundException):
            await SupportService(db_session).update_ticket(support_agent, uuid.uuid4(), status=TicketStatus.CLOSED)

    @pytest.mark.asyncio
    async def test_filters_and_stats(self, db_session, support_agent):
        service = SupportService(db_session)
        first = await open_ticket(db_session, priority=TicketPriority.URGENT)
        await open_ticket(db_session, subject="Cannot log in")
        await service.update_ticket(support_agent, first.id, status=TicketStatus.RESOLVED)

        urgent = await service.list_tickets(priority=TicketPriority.URGENT)
        assert [t.id for t in urgent] == [first.id]

        stats = await service.ticket_stats()
        assert stats["open"] == 1
        assert stats["resolved"] == 1
        assert stats["in_progress"] == 0
        assert stats["total"] == 2


class TestLiveChat:

    @pytest.mark.asyncio
    async def test_conversation(self, db_session, support_agent):
        service = SupportService(db_session)
        await service.post_message("sess-1", "Hello, is anyone there?", user_email="visitor@example.com")

        reply = await service.reply(support_agent, "sess-1", "Yes, how can I help?")

        assert reply.is_admin_reply is True
        assert reply.admin_id == support_agent.id
        assert reply.user_name == "Kemi Support"

        messages = await service.session_messages("sess-1")
        assert len(messages) == 2

    @pytest.mark.asyncio
    async def test_reply_to_unknown_session(self, db_session, support_agent):
        with pytest.raises(NotFoundException):
            await SupportService(db_session).reply(support_agent, "nope", "hi")

    @pytest.mark.asyncio
    async def test_list_sessions(self, db_session):
        service = SupportService(db_session)
        await service.post_message("sess-a", "one")
        await service.post_message("sess-a", "two")
        await service.post_message("sess-b", "three")

        sessions = {s["session_id"]: s["message_count"] for s in await service.list_sessions()}

        assert sessions == {"sess-a": 2, "sess-b": 1}

    @pytest.mark.asyncio
    async def test_resolve_session(self, db_session, support_agent):
        service = SupportService(db_session)
        await service.post_message("sess-r", "one")
        await service.post_message("sess-r", "two")
        await service.post_message("sess-open", "still here")

        updated = await service.resolve_session(support_agent, "sess-r")

        assert updated == 2
        open_sessions = await service.list_sessions(ChatStatus.OPEN)
        assert [s["session_id"] for s in open_sessions] == ["sess-open"]


class TestCompanyAssets:

    @pytest.mark.asyncio
    async def test_crud_is_audited(self, db_session, super_admin):
        service = AssetService(db_session)
        asset = await service.create_asset(super_admin, {
            "name": "Office generator",
            "category": "equipment",
            "current_value": Decimal("850000.00"),
        })
        await service.update_asset(super_admin, asset.id, {"condition": "fair"})
        await service.delete_asset(super_admin, asset.id)

        assert (await db_session.execute(select(CompanyAsset))).scalars().all() == []
        actions = {log.action for log in (await db_session.execute(select(AuditLog))).scalars().all()}
        assert actions == {"Created company asset", "Updated company asset", "Deleted company asset"}

    @pytest.mark.asyncio
    async def test_get_unknown(self, db_session):
        with pytest.raises(NotFoundException):
            await AssetService(db_session).get_asset(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_summary_counts_active_assets(self, db_session, super_admin):
        service = AssetService(db_session)
        await service.create_asset(super_admin, {"name": "Laptop", "category": "it", "current_value": Decimal("1200")})
        await service.create_asset(super_admin, {"name": "Router", "category": "it", "current_value": Decimal("300")})
        await service.create_asset(super_admin, {"name": "Van", "category": "vehicle", "current_value": Decimal("9000")})
        await service.create_asset(
            super_admin,
            {"name": "Old printer", "category": "it", "current_value": Decimal("50"), "is_active": False},
        )

        summary = await service.summary()

        assert summary["total_assets"] == 3
        assert summary["total_value"] == Decimal("10500")
        assert summary["by_category"]["it"]["count"] == 2
        assert summary["by_category"]["it"]["value"] == Decimal("1500")

        assert len(await service.list_assets(category="it")) == 2
        assert len(await service.list_assets(category="it", include_inactive=True)) == 3
