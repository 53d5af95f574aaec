"""
YaraCheck - Tracking Search Tests
"""

import pytest

from tests.fixtures.reports import create_report
from yaracheck.models.report import ReportType
from yaracheck.services.tracking_search_service import TrackingSearchService, project_report
from yaracheck.utils.error_handling import ValidationException


class TestExactSearch:

    @pytest.mark.asyncio
    async def test_finds_by_tracking_code(self, db_session):
        report = await create_report(db_session, ReportType.DEVICE, tracking_code="YC-20261001-ABCDEFGH")

        hits = await TrackingSearchService(db_session).search("YC-20261001-ABCDEFGH")

        assert len(hits) == 1
        assert hits[0]["report_id"] == report.id
        assert hits[0]["report_type"] == "device"
        assert hits[0]["report_data"]["tracking_code"] == "YC-20261001-ABCDEFGH"

    @pytest.mark.asyncio
    async def test_query_is_trimmed(self, db_session):
        await create_report(db_session, ReportType.VEHICLE, tracking_code="YC-20261001-VEHICLE1")
        hits = await TrackingSearchService(db_session).search("  YC-20261001-VEHICLE1 ")
        assert len(hits) == 1

    @pytest.mark.asyncio
    async def test_finds_by_report_id(self, db_session):
        report = await create_report(db_session, ReportType.ACCOUNT)
        hits = await TrackingSearchService(db_session).search(str(report.id))
        assert [hit["report_id"] for hit in hits] == [report.id]

    @pytest.mark.asyncio
    async def test_same_code_across_tables(self, db_session):
        await create_report(db_session, ReportType.DEVICE, tracking_code="YC-SHARED")
        await create_report(db_session, ReportType.PERSONAL, tracking_code="YC-SHARED")

        hits = await TrackingSearchService(db_session).search_exact("YC-SHARED")

        assert sorted(hit["report_type"] for hit in hits) == ["device", "personal"]

    @pytest.mark.asyncio
    async def test_hidden_reports_excluded(self, db_session):
        await create_report(db_session, ReportType.DEVICE, tracking_code="YC-HIDDEN", visible=False)
        hits = await TrackingSearchService(db_session).search("YC-HIDDEN")
        assert hits == []

    @pytest.mark.asyncio
    async def test_null_visibility_counts_as_visible(self, db_session):
        await create_report(db_session, ReportType.HOUSEHOLD, tracking_code="YC-NULLVIS", visible=None)
        hits = await TrackingSearchService(db_session).search("YC-NULLVIS")
        assert len(hits) == 1

    @pytest.mark.asyncio
    async def test_blank_query_rejected(self, db_session):
        with pytest.raises(ValidationException):
            await TrackingSearchService(db_session).search("   ")


class TestFallbackSearch:

    @pytest.mark.asyncio
    async def test_imei_match(self, db_session):
        report = await create_report(db_session, ReportType.DEVICE, imei="356938035643809")
        hits = await TrackingSearchService(db_session).search("356938035643809")
        assert report.id in [hit["report_id"] for hit in hits]

    @pytest.mark.asyncio
    async def test_short_query_skips_identifier_search(self, db_session):
        await create_report(db_session, ReportType.DEVICE, imei="12345")
        hits = await TrackingSearchService(db_session).search("12345")
        assert hits == []

    @pytest.mark.asyncio
    async def test_chassis_match(self, db_session):
        report = await create_report(db_session, ReportType.VEHICLE, chassis="JTDBR32E720123456")
        hits = await TrackingSearchService(db_session).search("JTDBR32E720123456")
        assert [hit["report_id"] for hit in hits] == [report.id]

    @pytest.mark.asyncio
    async def test_person_name_partial_match(self, db_session):
        report = await create_report(db_session, ReportType.PERSON, name="Amaka Eze")
        hits = await TrackingSearchService(db_session).search("amaka")
        assert [hit["report_id"] for hit in hits] == [report.id]
        assert "name" in hits[0]["report_data"]
        assert "reporter_email" not in hits[0]["report_data"]

    @pytest.mark.asyncio
    async def test_account_identifier_match(self, db_session):
        report = await create_report(db_session, ReportType.ACCOUNT, account_identifier="@ada_obi")
        hits = await TrackingSearchService(db_session).search("ada_obi")
        assert [hit["report_id"] for hit in hits] == [report.id]

    @pytest.mark.asyncio
    async def test_results_grouped_by_category(self, db_session):
        await create_report(db_session, ReportType.PERSONAL, brand="Nokia", model="Bag")
        await create_report(db_session, ReportType.DEVICE, brand="Nokia", model="3310")

        hits = await TrackingSearchService(db_session).search("nokia")

        assert [hit["report_type"] for hit in hits] == ["device", "personal"]

    @pytest.mark.asyncio
    async def test_row_matching_two_predicates_appears_twice(self, db_session):
        await create_report(db_session, ReportType.DEVICE, brand="Pixel", model="Pixel 8")
        hits = await TrackingSearchService(db_session).search("pixel")
        assert len(hits) == 2

    @pytest.mark.asyncio
    async def test_hidden_reports_excluded(self, db_session):
        await create_report(db_session, ReportType.DEVICE, brand="Tecno", visible=False)
        hits = await TrackingSearchService(db_session).search("tecno")
        assert hits == []

    @pytest.mark.asyncio
    async def test_no_match(self, db_session):
        await create_report(db_session, ReportType.DEVICE)
        assert await TrackingSearchService(db_session).search("nothing-like-this") == []


class TestProjection:

    @pytest.mark.asyncio
    async def test_reputation_projection(self, db_session):
        report = await create_report(db_session, ReportType.REPUTATION)
        hit = project_report(ReportType.REPUTATION, report)
        assert hit["report_data"]["reported_person_name"] == "Tunde Bello"
        assert "evidence" not in hit["report_data"]
