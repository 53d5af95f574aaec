"""
YaraCheck - Tracking Code Search

Public lookup of reports across the seven report tables.

Two paths:
1. Exact match on tracking code (or row id when the query is a UUID),
   newest first.
2. When nothing matches exactly, a wider fan-out: one query per
   (table, predicate) pair on IMEI/chassis, person name, account
   identifier and item brand/model. Hits are grouped by category in a
   fixed order. A row matching several predicates appears once per
   predicate.

Hidden reports (visible = False) are never returned.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.models.report import (
    REPORT_MODELS,
    DeviceReport,
    HackedAccountReport,
    HouseholdItemReport,
    PersonReport,
    PersonalBelongingReport,
    ReportType,
    VehicleReport,
)
from yaracheck.utils.error_handling import ValidationException

logger = logging.getLogger(__name__)


# Identifier searches (IMEI, chassis) only run for queries at least this long
MIN_IDENTIFIER_QUERY_LENGTH = 10

# Category order of merged fallback results
CATEGORY_ORDER: List[ReportType] = [
    ReportType.PERSON,
    ReportType.DEVICE,
    ReportType.VEHICLE,
    ReportType.HOUSEHOLD,
    ReportType.PERSONAL,
    ReportType.ACCOUNT,
    ReportType.REPUTATION,
]

_ITEM_FIELDS = ["id", "type", "brand", "model", "imei", "location", "status", "report_date", "image_url", "tracking_code"]

# Public projection of each category
PROJECTIONS: Dict[ReportType, List[str]] = {
    ReportType.PERSON: [
        "id", "name", "age", "gender", "location", "date_missing",
        "status", "report_date", "image_url", "tracking_code",
    ],
    ReportType.DEVICE: _ITEM_FIELDS,
    ReportType.VEHICLE: [
        "id", "type", "brand", "model", "chassis", "location",
        "status", "report_date", "image_url", "tracking_code",
    ],
    ReportType.HOUSEHOLD: _ITEM_FIELDS,
    ReportType.PERSONAL: _ITEM_FIELDS,
    ReportType.ACCOUNT: [
        "id", "account_type", "account_identifier", "date_compromised",
        "status", "report_date", "description", "tracking_code",
    ],
    ReportType.REPUTATION: [
        "id", "reported_person_name", "reported_person_contact", "business_type",
        "reputation_status", "status", "report_date", "description", "tracking_code",
    ],
}


def project_report(report_type: ReportType, report) -> Dict[str, Any]:
    """Build the public search hit for a report row."""
    return {
        "report_id": report.id,
        "report_type": report_type.value,
        "report_data": {field: getattr(report, field) for field in PROJECTIONS[report_type]},
    }


def _parse_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


def _visible(model):
    return or_(model.visible.is_(None), model.visible == True)  # noqa: E712


def _exact_predicate(model, query: str):
    row_id = _parse_uuid(query)
    if row_id is None:
        return model.tracking_code == query
    return or_(model.tracking_code == query, model.id == row_id)


class TrackingSearchService:
    """Service for public tracking code lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, model, predicate) -> List[Any]:
        result = await self.db.execute(
            select(model).where(predicate, _visible(model))
        )
        return list(result.scalars().all())

    async def search(self, query: str) -> List[Dict[str, Any]]:
        """
        Search reports by tracking code, id or identifying details.

        Raises:
            ValidationException: If the query is blank
        """
        term = (query or "").strip()
        if not term:
            raise ValidationException("Please enter a tracking code", field="q")

        hits = await self.search_exact(term)
        if hits:
            return hits

        logger.info(f"No exact match for '{term}', running fallback search")
        return await self.search_fallback(term)

    async def search_exact(self, term: str) -> List[Dict[str, Any]]:
        """Exact tracking code / id match across all tables, newest first."""
        rows = []
        for report_type in CATEGORY_ORDER:
            model = REPORT_MODELS[report_type]
            for report in await self._fetch(model, _exact_predicate(model, term)):
                rows.append((report_type, report))

        rows.sort(key=lambda row: row[1].report_date, reverse=True)
        return [project_report(report_type, report) for report_type, report in rows]

    async def search_fallback(self, term: str) -> List[Dict[str, Any]]:
        """Fan-out search on identifiers and fuzzy name/brand/model matches."""
        pattern = f"%{term}%"
        long_enough = len(term) >= MIN_IDENTIFIER_QUERY_LENGTH

        predicates: Dict[ReportType, List[Any]] = {
            report_type: [_exact_predicate(REPORT_MODELS[report_type], term)]
            for report_type in CATEGORY_ORDER
        }

        if long_enough:
            predicates[ReportType.DEVICE].append(DeviceReport.imei == term)
            predicates[ReportType.VEHICLE].append(VehicleReport.chassis == term)
            predicates[ReportType.HOUSEHOLD].append(HouseholdItemReport.imei == term)
            predicates[ReportType.PERSONAL].append(PersonalBelongingReport.imei == term)

        predicates[ReportType.PERSON].append(PersonReport.name.ilike(pattern))
        predicates[ReportType.ACCOUNT].append(HackedAccountReport.account_identifier.ilike(pattern))
        for report_type, model in (
            (ReportType.DEVICE, DeviceReport),
            (ReportType.VEHICLE, VehicleReport),
            (ReportType.HOUSEHOLD, HouseholdItemReport),
            (ReportType.PERSONAL, PersonalBelongingReport),
        ):
            predicates[report_type].append(model.brand.ilike(pattern))
            predicates[report_type].append(model.model.ilike(pattern))

        hits: List[Dict[str, Any]] = []
        for report_type in CATEGORY_ORDER:
            model = REPORT_MODELS[report_type]
            for predicate in predicates[report_type]:
                for report in await self._fetch(model, predicate):
                    hits.append(project_report(report_type, report))

        logger.info(f"Fallback search for '{term}' returned {len(hits)} hit(s)")
        return hits
