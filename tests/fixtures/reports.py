"""
YaraCheck - Report Factories

Minimal valid payloads per report type and a helper that stores a report
directly, bypassing pricing and payment.
"""

from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.models.report import ReportType
from yaracheck.services.report_service import build_report, validate_report_payload
from yaracheck.utils.tracking import generate_tracking_code


def _item(**overrides) -> Dict[str, Any]:
    payload = {
        "type": "mobile_phone",
        "brand": "Samsung",
        "model": "Galaxy S21",
        "location": "Ikeja, Lagos",
    }
    payload.update(overrides)
    return payload


BASE_PAYLOADS: Dict[ReportType, Dict[str, Any]] = {
    ReportType.PERSON: {
        "name": "Amaka Eze",
        "age": 30,
        "gender": "female",
        "location": "Enugu",
        "date_missing": date(2026, 9, 12).isoformat(),
    },
    ReportType.DEVICE: _item(),
    ReportType.VEHICLE: _item(type="car", brand="Toyota", model="Camry", year=2018),
    ReportType.HOUSEHOLD: _item(type="television", brand="LG", model="OLED55"),
    ReportType.PERSONAL: _item(type="bag", brand="Gucci", model="Marmont"),
    ReportType.ACCOUNT: {
        "account_type": "instagram",
        "account_identifier": "@ada_obi",
        "date_compromised": date(2026, 8, 3).isoformat(),
    },
    ReportType.REPUTATION: {
        "reported_person_name": "Tunde Bello",
        "reported_person_contact": "+2348099999999",
        "business_type": "car sales",
        "transaction_date": date(2026, 7, 1).isoformat(),
        "transaction_amount": "NGN 2,500,000",
        "reputation_status": "scammer",
    },
}


def report_payload(report_type: ReportType, **overrides) -> Dict[str, Any]:
    payload = dict(BASE_PAYLOADS[report_type])
    payload.update(overrides)
    return payload


async def create_report(
    db_session: AsyncSession,
    report_type: ReportType,
    tracking_code: Optional[str] = None,
    visible: Optional[bool] = True,
    **overrides,
):
    """Store a report of any type and return it."""
    payload = validate_report_payload(report_type, report_payload(report_type, **overrides))
    report = build_report(report_type, payload, tracking_code or generate_tracking_code())
    report.visible = visible
    db_session.add(report)
    await db_session.commit()
    await db_session.refresh(report)
    return report
