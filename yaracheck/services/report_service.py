"""
YaraCheck - Report Service

Report intake, admin moderation and reporting views.

Paid reports wait in `transactions.report_data` until the payment is
verified (see payment_service); free reports (price 0) are stored
directly. Every stored report starts in its category's initial status:
missing for persons, pending_verification for reputation disputes,
pending for everything else.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.models.geography import Country
from yaracheck.models.profile import Profile
from yaracheck.models.report import (
    REPORT_MODELS,
    REPORT_TYPE_LABELS,
    BusinessReputationReport,
    DeviceReport,
    PersonReport,
    ReportStatus,
    ReportType,
    VehicleReport,
    initial_status_for,
)
from yaracheck.models.support import AnonymousMessage
from yaracheck.schemas.report import PRICING_ONLY_FIELDS, REPORT_CREATE_SCHEMAS
from yaracheck.services.audit_service import AuditService
from yaracheck.services.geo_scope_service import apply_country_scope, resolve_country_scope
from yaracheck.services.tracking_search_service import CATEGORY_ORDER
from yaracheck.utils.error_handling import (
    AuthorizationException,
    BusinessRuleException,
    ErrorCode,
    InvalidReportTypeException,
    NotFoundException,
    ReportNotFoundException,
    ValidationException,
)
from yaracheck.utils.pricing import calculate_price
from yaracheck.utils.tracking import generate_tracking_code

logger = logging.getLogger(__name__)


def parse_report_type(report_type: str) -> ReportType:
    """Parse a report type label or raise InvalidReportTypeException."""
    try:
        return ReportType(report_type)
    except ValueError:
        raise InvalidReportTypeException(str(report_type))


def validate_report_payload(report_type: ReportType, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a report payload against its category schema.

    Returns:
        The normalized payload (JSON-safe, ready for report_data)
    """
    schema = REPORT_CREATE_SCHEMAS[report_type]
    try:
        payload = schema.model_validate(data)
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(loc) for loc in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationException(
            f"Invalid {report_type.value} report",
            field="report",
            details={"errors": errors},
        )
    return payload.model_dump(mode="json")


def price_for_payload(report_type: ReportType, payload: Dict[str, Any]) -> int:
    """Fee in cents for a validated payload."""
    return calculate_price(
        report_type.value,
        device_type=payload.get("type"),
        year=payload.get("year"),
        age=payload.get("age"),
        brand=payload.get("brand"),
    )


def build_report(
    report_type: ReportType,
    payload: Dict[str, Any],
    tracking_code: str,
    user_id: Optional[uuid.UUID] = None,
):
    """
    Build (but do not add) the report row for a validated payload.

    Dates and ids in the payload are re-parsed through the category schema
    so JSON round-trips through transactions.report_data are lossless.
    """
    schema = REPORT_CREATE_SCHEMAS[report_type]
    values = schema.model_validate(payload).model_dump()
    for key in PRICING_ONLY_FIELDS.get(report_type, set()):
        values.pop(key, None)

    model = REPORT_MODELS[report_type]
    report = model(
        **values,
        tracking_code=tracking_code,
        status=initial_status_for(report_type),
        user_id=user_id,
    )
    if report_type == ReportType.REPUTATION:
        # Disputes stay out of public search until an admin verifies them
        report.visible = False
    return report


def serialize_report(report) -> Dict[str, Any]:
    """Column values of a report row."""
    return {column.key: getattr(report, column.key) for column in report.__table__.columns}


class ReportService:
    """Service for report intake and moderation."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def get_report(self, report_type: ReportType, report_id: uuid.UUID):
        """Get a report or raise ReportNotFoundException."""
        report = await self.db.get(REPORT_MODELS[report_type], report_id)
        if not report:
            raise ReportNotFoundException(report_type.value, report_id)
        return report

    # ===========================================
    # INTAKE
    # ===========================================

    async def submit_free_report(
        self,
        report_type: ReportType,
        data: Dict[str, Any],
        user: Optional[Profile] = None,
    ) -> Tuple[Any, str]:
        """
        Store a report whose price is 0 without a payment.

        Raises:
            BusinessRuleException: If the report is not free
        """
        payload = validate_report_payload(report_type, data)
        price = price_for_payload(report_type, payload)
        if price != 0:
            raise BusinessRuleException(
                "This report requires payment; start a checkout instead",
                rule="FREE_SUBMISSION",
                code=ErrorCode.PAYMENT_REQUIRED,
                details={"price_cents": price},
            )

        tracking_code = generate_tracking_code()
        report = build_report(report_type, payload, tracking_code, user.id if user else None)
        self.db.add(report)
        await self.db.commit()
        await self.db.refresh(report)

        logger.info(f"Free {report_type.value} report {report.id} stored ({tracking_code})")
        return report, tracking_code

    async def mark_resolved(
        self,
        report_type: ReportType,
        report_id: uuid.UUID,
        user: Profile,
    ):
        """
        Mark a found report resolved.

        Allowed for the submitter (same user_id or reporter email) and for
        admins.
        """
        report = await self.get_report(report_type, report_id)

        is_owner = (
            (report.user_id is not None and report.user_id == user.id)
            or (report.reporter_email is not None and report.reporter_email.lower() == user.email.lower())
        )
        if not (is_owner or user.is_admin):
            raise AuthorizationException("Only the submitter or an admin can resolve this report")

        report.status = ReportStatus.RESOLVED.value
        await self.db.commit()
        await self.db.refresh(report)
        return report

    async def reports_for_email(self, email: str) -> List[Dict[str, Any]]:
        """Every report filed under a reporter email, newest first."""
        rows = []
        for report_type in CATEGORY_ORDER:
            model = REPORT_MODELS[report_type]
            result = await self.db.execute(
                select(model).where(func.lower(model.reporter_email) == email.lower())
            )
            rows.extend((report_type, report) for report in result.scalars().all())

        rows.sort(key=lambda row: row[1].report_date, reverse=True)
        return [self.report_item(report_type, report) for report_type, report in rows]

    # ===========================================
    # ADMIN LISTING
    # ===========================================

    @staticmethod
    def report_item(report_type: ReportType, report) -> Dict[str, Any]:
        return {
            "report_id": report.id,
            "report_type": report_type,
            "label": REPORT_TYPE_LABELS[report_type],
            "tracking_code": report.tracking_code,
            "status": report.status,
            "visible": report.visible,
            "report_date": report.report_date,
            "country_id": report.country_id,
            "data": serialize_report(report),
        }

    async def list_reports(
        self,
        admin: Profile,
        report_type: Optional[ReportType] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[Dict[str, Any]], Optional[uuid.UUID]]:
        """
        List reports for an admin, restricted to the admin's country scope.

        Returns:
            Tuple of (report items newest first, country scope or None)
        """
        country_id = await resolve_country_scope(self.db, admin)
        types = [report_type] if report_type else CATEGORY_ORDER

        rows = []
        for kind in types:
            model = REPORT_MODELS[kind]
            query = apply_country_scope(select(model), model, country_id)
            if status:
                query = query.where(model.status == status)
            result = await self.db.execute(query.order_by(desc(model.report_date)))
            rows.extend((kind, report) for report in result.scalars().all())

        rows.sort(key=lambda row: row[1].report_date, reverse=True)
        return [self.report_item(kind, report) for kind, report in rows], country_id

    async def country_stats(self, admin: Profile) -> List[Dict[str, Any]]:
        """Person/device/vehicle report counts per country within the admin's scope."""
        country_id = await resolve_country_scope(self.db, admin)

        stats: Dict[uuid.UUID, Dict[str, Any]] = {}
        for key, model in (("persons", PersonReport), ("devices", DeviceReport), ("vehicles", VehicleReport)):
            query = (
                select(model.country_id, Country.name, func.count(model.id))
                .join(Country, Country.id == model.country_id)
                .where(model.country_id.is_not(None))
                .group_by(model.country_id, Country.name)
            )
            query = apply_country_scope(query, model, country_id)
            result = await self.db.execute(query)
            for cid, name, count in result.all():
                entry = stats.setdefault(
                    cid,
                    {"id": cid, "name": name or "Unknown", "persons": 0, "devices": 0, "vehicles": 0, "total": 0},
                )
                entry[key] += count
                entry["total"] += count

        return sorted(stats.values(), key=lambda entry: entry["total"], reverse=True)

    # ===========================================
    # MODERATION
    # ===========================================

    async def set_visibility(
        self,
        admin: Profile,
        report_type: ReportType,
        report_id: uuid.UUID,
        visible: bool,
    ):
        """Show or hide a report from public search."""
        report = await self.get_report(report_type, report_id)
        report.visible = visible

        await self.audit.log_action(
            action="Report shown" if visible else "Report hidden",
            admin_id=admin.id,
            details={"report_type": report_type.value, "report_id": str(report_id)},
        )
        await self.db.commit()
        await self.db.refresh(report)
        return report

    async def set_status(
        self,
        admin: Profile,
        report_type: ReportType,
        report_id: uuid.UUID,
        status: ReportStatus,
    ):
        """Set a report's status."""
        report = await self.get_report(report_type, report_id)
        previous = report.status
        report.status = status.value

        await self.audit.log_action(
            action="Report status changed",
            admin_id=admin.id,
            details={
                "report_type": report_type.value,
                "report_id": str(report_id),
                "from": previous,
                "to": status.value,
            },
        )
        await self.db.commit()
        await self.db.refresh(report)
        return report

    async def verify_reputation_report(
        self,
        admin: Profile,
        report_id: uuid.UUID,
        action: ReportStatus,
        notes: Optional[str] = None,
    ) -> BusinessReputationReport:
        """
        Verify or reject a business reputation report.

        Verified reports become visible, rejected ones are hidden.
        """
        if action not in (ReportStatus.VERIFIED, ReportStatus.REJECTED):
            raise ValidationException("action must be 'verified' or 'rejected'", field="action")

        report = await self.get_report(ReportType.REPUTATION, report_id)
        report.status = action.value
        report.visible = action == ReportStatus.VERIFIED
        report.verification_notes = notes
        report.verified_at = datetime.now(timezone.utc)
        report.verified_by_id = admin.id

        await self.audit.log_action(
            action=f"Reputation report {action.value}",
            admin_id=admin.id,
            details={"report_id": str(report_id)},
        )
        await self.db.commit()
        await self.db.refresh(report)
        return report

    async def delete_report(self, admin: Profile, report_type: ReportType, report_id: uuid.UUID) -> None:
        """Delete a report."""
        report = await self.get_report(report_type, report_id)
        await self.db.delete(report)
        await self.audit.log_action(
            action="Report deleted",
            admin_id=admin.id,
            details={
                "report_type": report_type.value,
                "report_id": str(report_id),
                "tracking_code": report.tracking_code,
            },
        )
        await self.db.commit()

    # ===========================================
    # ANONYMOUS MESSAGES
    # ===========================================

    async def leave_anonymous_message(
        self,
        report_type: ReportType,
        report_id: uuid.UUID,
        message: str,
        sender_contact: Optional[str] = None,
    ) -> AnonymousMessage:
        """Leave an anonymous tip against a visible report."""
        report = await self.get_report(report_type, report_id)
        if report.visible is False:
            raise NotFoundException("Report", report_id)

        tip = AnonymousMessage(
            report_id=report_id,
            report_type=report_type.value,
            message=message,
            sender_contact=sender_contact,
        )
        self.db.add(tip)
        await self.db.commit()
        await self.db.refresh(tip)
        return tip

    async def list_anonymous_messages(
        self,
        report_type: Optional[ReportType] = None,
        report_id: Optional[uuid.UUID] = None,
    ) -> List[AnonymousMessage]:
        """List anonymous tips, newest first."""
        query = select(AnonymousMessage)
        if report_type:
            query = query.where(AnonymousMessage.report_type == report_type.value)
        if report_id:
            query = query.where(AnonymousMessage.report_id == report_id)
        result = await self.db.execute(query.order_by(desc(AnonymousMessage.created_at)))
        return list(result.scalars().all())
