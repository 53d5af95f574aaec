"""
YaraCheck - Report Service Tests
"""

import uuid

import pytest
from sqlalchemy import select

from tests.fixtures.reports import create_report, report_payload
from yaracheck.models.audit import AuditLog
from yaracheck.models.report import DeviceReport, PersonReport, ReportStatus, ReportType
from yaracheck.services.report_service import (
    ReportService,
    build_report,
    parse_report_type,
    price_for_payload,
    validate_report_payload,
)
from yaracheck.utils.error_handling import (
    AuthorizationException,
    BusinessRuleException,
    ErrorCode,
    InvalidReportTypeException,
    NotFoundException,
    ReportNotFoundException,
    ValidationException,
)


class TestPayloadHandling:

    def test_parse_report_type(self):
        assert parse_report_type("vehicle") == ReportType.VEHICLE
        with pytest.raises(InvalidReportTypeException):
            parse_report_type("boat")

    def test_validation_errors_listed(self):
        with pytest.raises(ValidationException) as exc_info:
            validate_report_payload(ReportType.PERSON, {"name": "No Age"})
        fields = [error["field"] for error in exc_info.value.details["errors"]]
        assert "age" in fields
        assert "date_missing" in fields

    def test_device_year_only_prices(self):
        payload = validate_report_payload(
            ReportType.DEVICE,
            report_payload(ReportType.DEVICE, brand="Apple", year=2022),
        )
        assert price_for_payload(ReportType.DEVICE, payload) == 500

        report = build_report(ReportType.DEVICE, payload, "YC-TEST")
        assert isinstance(report, DeviceReport)
        assert not hasattr(DeviceReport, "year")

    def test_initial_statuses(self):
        person = build_report(
            ReportType.PERSON,
            validate_report_payload(ReportType.PERSON, report_payload(ReportType.PERSON)),
            "YC-P",
        )
        reputation = build_report(
            ReportType.REPUTATION,
            validate_report_payload(ReportType.REPUTATION, report_payload(ReportType.REPUTATION)),
            "YC-R",
        )
        device = build_report(
            ReportType.DEVICE,
            validate_report_payload(ReportType.DEVICE, report_payload(ReportType.DEVICE)),
            "YC-D",
        )
        assert person.status == ReportStatus.MISSING.value
        assert reputation.status == ReportStatus.PENDING_VERIFICATION.value
        assert reputation.visible is False
        assert device.status == ReportStatus.PENDING.value


class TestFreeSubmission:

    @pytest.mark.asyncio
    async def test_child_report_stored(self, db_session, child_payload):
        report, tracking_code = await ReportService(db_session).submit_free_report(
            ReportType.PERSON, child_payload
        )

        assert tracking_code.startswith("YC-")
        stored = await db_session.get(PersonReport, report.id)
        assert stored.tracking_code == tracking_code
        assert stored.status == ReportStatus.MISSING.value

    @pytest.mark.asyncio
    async def test_paid_report_rejected(self, db_session, iphone_payload):
        with pytest.raises(BusinessRuleException) as exc_info:
            await ReportService(db_session).submit_free_report(ReportType.DEVICE, iphone_payload)
        assert exc_info.value.code == ErrorCode.PAYMENT_REQUIRED
        assert exc_info.value.details["price_cents"] == 500

        result = await db_session.execute(select(DeviceReport))
        assert result.scalars().all() == []


class TestMarkResolved:

    @pytest.mark.asyncio
    async def test_owner_by_email(self, db_session, test_user):
        report = await create_report(db_session, ReportType.DEVICE, reporter_email="Reporter@Example.com")
        resolved = await ReportService(db_session).mark_resolved(ReportType.DEVICE, report.id, test_user)
        assert resolved.status == ReportStatus.RESOLVED.value

    @pytest.mark.asyncio
    async def test_admin_may_resolve(self, db_session, director):
        report = await create_report(db_session, ReportType.VEHICLE)
        resolved = await ReportService(db_session).mark_resolved(ReportType.VEHICLE, report.id, director)
        assert resolved.status == ReportStatus.RESOLVED.value

    @pytest.mark.asyncio
    async def test_stranger_rejected(self, db_session, test_user):
        report = await create_report(db_session, ReportType.DEVICE, reporter_email="other@example.com")
        with pytest.raises(AuthorizationException):
            await ReportService(db_session).mark_resolved(ReportType.DEVICE, report.id, test_user)

    @pytest.mark.asyncio
    async def test_unknown_report(self, db_session, test_user):
        with pytest.raises(ReportNotFoundException):
            await ReportService(db_session).mark_resolved(ReportType.DEVICE, uuid.uuid4(), test_user)


class TestAdminListing:

    @pytest.mark.asyncio
    async def test_country_rep_sees_own_country(self, db_session, country_rep, nigeria, ghana):
        ng = await create_report(db_session, ReportType.DEVICE, country_id=nigeria.id)
        await create_report(db_session, ReportType.DEVICE, country_id=ghana.id)
        await create_report(db_session, ReportType.VEHICLE)

        items, scope = await ReportService(db_session).list_reports(country_rep)

        assert scope == nigeria.id
        assert [item["report_id"] for item in items] == [ng.id]

    @pytest.mark.asyncio
    async def test_director_sees_everything(self, db_session, director, nigeria, ghana):
        await create_report(db_session, ReportType.DEVICE, country_id=nigeria.id)
        await create_report(db_session, ReportType.PERSON, country_id=ghana.id)

        items, scope = await ReportService(db_session).list_reports(director)

        assert scope is None
        assert len(items) == 2

    @pytest.mark.asyncio
    async def test_filters(self, db_session, super_admin):
        await create_report(db_session, ReportType.DEVICE)
        await create_report(db_session, ReportType.PERSON)

        items, _ = await ReportService(db_session).list_reports(super_admin, report_type=ReportType.PERSON)
        assert [item["report_type"] for item in items] == [ReportType.PERSON]

        items, _ = await ReportService(db_session).list_reports(super_admin, status="missing")
        assert [item["report_type"] for item in items] == [ReportType.PERSON]

    @pytest.mark.asyncio
    async def test_reports_for_email(self, db_session):
        await create_report(db_session, ReportType.DEVICE, reporter_email="ada@example.com")
        await create_report(db_session, ReportType.ACCOUNT, reporter_email="ADA@example.com")
        await create_report(db_session, ReportType.ACCOUNT, reporter_email="bola@example.com")

        items = await ReportService(db_session).reports_for_email("ada@example.com")

        assert sorted(item["report_type"].value for item in items) == ["account", "device"]

    @pytest.mark.asyncio
    async def test_country_stats(self, db_session, super_admin, country_rep, nigeria, ghana):
        await create_report(db_session, ReportType.DEVICE, country_id=nigeria.id)
        await create_report(db_session, ReportType.PERSON, country_id=nigeria.id)
        await create_report(db_session, ReportType.VEHICLE, country_id=ghana.id)
        await create_report(db_session, ReportType.ACCOUNT, country_id=ghana.id)

        stats = await ReportService(db_session).country_stats(super_admin)
        assert [(entry["name"], entry["total"]) for entry in stats] == [("Nigeria", 2), ("Ghana", 1)]
        assert stats[0]["persons"] == 1 and stats[0]["devices"] == 1

        scoped = await ReportService(db_session).country_stats(country_rep)
        assert [entry["name"] for entry in scoped] == ["Nigeria"]


class TestModeration:

    @pytest.mark.asyncio
    async def test_visibility_is_audited(self, db_session, super_admin):
        report = await create_report(db_session, ReportType.DEVICE)

        updated = await ReportService(db_session).set_visibility(super_admin, ReportType.DEVICE, report.id, False)

        assert updated.visible is False
        logs = (await db_session.execute(select(AuditLog))).scalars().all()
        assert [log.action for log in logs] == ["Report hidden"]
        assert logs[0].admin_id == super_admin.id

    @pytest.mark.asyncio
    async def test_set_status(self, db_session, super_admin):
        report = await create_report(db_session, ReportType.PERSON)
        updated = await ReportService(db_session).set_status(
            super_admin, ReportType.PERSON, report.id, ReportStatus.FOUND
        )
        assert updated.status == "found"

        log = (await db_session.execute(select(AuditLog))).scalar_one()
        assert log.details["from"] == "missing"
        assert log.details["to"] == "found"

    @pytest.mark.asyncio
    async def test_verify_reputation_makes_visible(self, db_session, super_admin):
        report = await create_report(db_session, ReportType.REPUTATION, visible=False)

        verified = await ReportService(db_session).verify_reputation_report(
            super_admin, report.id, ReportStatus.VERIFIED, notes="Receipts checked"
        )

        assert verified.status == "verified"
        assert verified.visible is True
        assert verified.verified_by_id == super_admin.id
        assert verified.verified_at is not None

    @pytest.mark.asyncio
    async def test_reject_reputation_hides(self, db_session, super_admin):
        report = await create_report(db_session, ReportType.REPUTATION, visible=True)
        rejected = await ReportService(db_session).verify_reputation_report(
            super_admin, report.id, ReportStatus.REJECTED
        )
        assert rejected.status == "rejected"
        assert rejected.visible is False

    @pytest.mark.asyncio
    async def test_verify_reputation_rejects_other_actions(self, db_session, super_admin):
        report = await create_report(db_session, ReportType.REPUTATION)
        with pytest.raises(ValidationException):
            await ReportService(db_session).verify_reputation_report(
                super_admin, report.id, ReportStatus.FOUND
            )

    @pytest.mark.asyncio
    async def test_delete_report(self, db_session, super_admin):
        report = await create_report(db_session, ReportType.DEVICE)
        await ReportService(db_session).delete_report(super_admin, ReportType.DEVICE, report.id)
        assert await db_session.get(DeviceReport, report.id) is None


class TestAnonymousMessages:

    @pytest.mark.asyncio
    async def test_leave_and_list(self, db_session):
        report = await create_report(db_session, ReportType.PERSON)
        service = ReportService(db_session)

        await service.leave_anonymous_message(ReportType.PERSON, report.id, "Seen near the market")

        tips = await service.list_anonymous_messages(report_id=report.id)
        assert [tip.message for tip in tips] == ["Seen near the market"]
        assert tips[0].report_type == "person"

    @pytest.mark.asyncio
    async def test_hidden_report_rejects_tips(self, db_session):
        report = await create_report(db_session, ReportType.DEVICE, visible=False)
        with pytest.raises(NotFoundException):
            await ReportService(db_session).leave_anonymous_message(ReportType.DEVICE, report.id, "hello")
