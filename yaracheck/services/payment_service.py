"""
YaraCheck - Payment Service

Checkout and verification for paid report submissions.

Gateways:
- Stripe Checkout Sessions (USD, amounts in cents)
- Paystack (NGN, amounts in kobo)
- Flutterwave (NGN, whole naira)

Report fees are priced in USD cents; the NGN gateways charge the fee
converted at settings.usd_to_ngn_rate. A checkout stores the validated
report in a pending transaction. Verification marks the transaction paid
and inserts the report in the same commit.
"""

import hashlib
import hmac
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

import httpx
import stripe
from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from yaracheck.config import settings
from yaracheck.models.profile import Profile
from yaracheck.models.report import REPORT_TYPE_LABELS, ReportType
from yaracheck.models.transaction import PaymentProvider, PaymentTransaction, TransactionStatus
from yaracheck.services.report_service import (
    build_report,
    parse_report_type,
    price_for_payload,
    validate_report_payload,
)
from yaracheck.utils.error_handling import (
    BusinessRuleException,
    ErrorCode,
    PaymentGatewayException,
    TransactionNotFoundException,
)
from yaracheck.utils.tracking import generate_payment_reference, generate_tracking_code

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS AND DATA CLASSES
# =============================================================================

class PaymentStatus(str, Enum):
    """Gateway-side payment status."""
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class CheckoutSession:
    """A hosted checkout page created by a gateway."""
    success: bool
    reference: str
    message: str
    authorization_url: Optional[str] = None
    provider_reference: Optional[str] = None


@dataclass
class PaymentResult:
    """Result of verifying a payment with its gateway."""
    success: bool
    reference: str
    status: PaymentStatus
    message: str
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    metadata: Optional[Dict[str, Any]] = None


def usd_cents_to_ngn(amount_cents: int) -> int:
    """Convert a USD cent amount to whole naira at the configured rate."""
    return amount_cents * settings.usd_to_ngn_rate // 100


def verify_paystack_signature(payload: bytes, signature: str, secret: str) -> bool:
    """
    Verify Paystack webhook signature using HMAC-SHA512.

    Paystack signs webhook requests with the account secret key and sends
    the hex digest in the X-Paystack-Signature header.
    """
    if not signature or not secret:
        return False

    expected = hmac.new(
        secret.encode("utf-8"),
        payload,
        hashlib.sha512,
    ).hexdigest()

    return hmac.compare_digest(expected, signature)


# =============================================================================
# ABSTRACT GATEWAY
# =============================================================================

class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    provider: PaymentProvider

    @abstractmethod
    async def create_checkout(
        self,
        reference: str,
        amount_cents: int,
        report_type: ReportType,
        email: Optional[str],
        customer_name: Optional[str],
        customer_phone: Optional[str],
        origin: str,
    ) -> CheckoutSession:
        """Create a hosted checkout page."""
        pass

    @abstractmethod
    async def verify_payment(self, reference: str) -> PaymentResult:
        """Verify a payment transaction."""
        pass


# =============================================================================
# STRIPE
# =============================================================================

class StripeGateway(PaymentGateway):
    """
    Stripe Checkout Sessions for USD card payments.

    The stripe SDK is synchronous, so calls run in the threadpool.
    """

    provider = PaymentProvider.STRIPE

    def __init__(self, secret_key: Optional[str] = None):
        self.secret_key = secret_key if secret_key is not None else settings.stripe_secret_key

    def _require_key(self) -> None:
        if not self.secret_key:
            raise PaymentGatewayException("stripe", "Stripe configuration missing")

    async def create_checkout(
        self,
        reference: str,
        amount_cents: int,
        report_type: ReportType,
        email: Optional[str],
        customer_name: Optional[str],
        customer_phone: Optional[str],
        origin: str,
    ) -> CheckoutSession:
        """
        Create a Checkout Session.

        API: POST https://api.stripe.com/v1/checkout/sessions
        """
        self._require_key()
        label = REPORT_TYPE_LABELS[report_type]

        params: Dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": "usd",
                        "product_data": {
                            "name": f"YaraCheck {label} Report Submission",
                            "description": f"Submit a {label.lower()} report to the YaraCheck database",
                        },
                        "unit_amount": amount_cents,
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "success_url": f"{origin}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{origin}/submit-report/{report_type.value}",
            "client_reference_id": reference,
            "metadata": {
                "service": f"{report_type.value}_report",
                "amount": str(amount_cents),
                "report_type": report_type.value,
                "payment_reference": reference,
            },
            "payment_intent_data": {
                "statement_descriptor": settings.stripe_statement_descriptor,
            },
        }
        if email:
            params["customer_email"] = email

        logger.info(f"Creating Stripe checkout: ref={reference}, amount={amount_cents} cents")

        try:
            session = await run_in_threadpool(
                stripe.checkout.Session.create,
                api_key=self.secret_key,
                **params,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout failed: {e}")
            return CheckoutSession(success=False, reference=reference, message=str(e))

        return CheckoutSession(
            success=True,
            reference=reference,
            message="Checkout session created",
            authorization_url=session["url"],
            provider_reference=session["id"],
        )

    async def verify_payment(self, reference: str) -> PaymentResult:
        """
        Retrieve a Checkout Session; `reference` is the session id.

        API: GET https://api.stripe.com/v1/checkout/sessions/:id
        """
        self._require_key()

        try:
            session = await run_in_threadpool(
                stripe.checkout.Session.retrieve,
                reference,
                api_key=self.secret_key,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe verification failed for {reference}: {e}")
            return PaymentResult(
                success=False,
                reference=reference,
                status=PaymentStatus.FAILED,
                message=str(e),
            )

        status_map = {
            "paid": PaymentStatus.SUCCESS,
            "no_payment_required": PaymentStatus.SUCCESS,
            "unpaid": PaymentStatus.PENDING,
        }
        payment_status = status_map.get(session["payment_status"], PaymentStatus.FAILED)
        success = payment_status == PaymentStatus.SUCCESS

        return PaymentResult(
            success=success,
            reference=reference,
            status=payment_status,
            message="Payment verified" if success else f"Payment {session['payment_status']}",
            transaction_id=session.get("payment_intent"),
            paid_at=datetime.now(timezone.utc) if success else None,
        )


# =============================================================================
# PAYSTACK
# =============================================================================

class PaystackGateway(PaymentGateway):
    """
    Paystack payments in Nigerian Naira.

    Without a secret key the gateway runs in stub mode and returns fake
    checkout URLs that always verify.

    Paystack API docs: https://paystack.com/docs/api/
    """

    provider = PaymentProvider.PAYSTACK

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.paystack_secret_key
        self.base_url = base_url or settings.paystack_base_url

        if not self.secret_key:
            logger.warning("PaystackGateway initialized without secret key - using stub mode")
            self._is_stub = True
        else:
            self._is_stub = False
            logger.info(f"PaystackGateway initialized (live={self.secret_key.startswith('sk_live_')})")

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an HTTP request to the Paystack API.

        Returns:
            Parsed JSON response, or {"status": False, "message": ...} on failure
        """
        url = f"{self.base_url}{endpoint}"

        try:
            async with httpx.AsyncClient(timeout=settings.payment_timeout_seconds) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    json=data,
                    params=params,
                )
                result = response.json()

                logger.debug(f"Paystack {method} {endpoint}: status={response.status_code}")

                if response.status_code >= 400:
                    logger.error(f"Paystack API error: {result.get('message', 'Unknown error')}")
                    return {
                        "status": False,
                        "message": result.get("message", f"HTTP {response.status_code}"),
                        "data": result.get("data"),
                    }

                return result

        except httpx.TimeoutException:
            logger.error(f"Paystack API timeout: {method} {endpoint}")
            return {"status": False, "message": "Request timed out. Please try again."}
        except httpx.RequestError as e:
            logger.error(f"Paystack API request error: {e}")
            return {"status": False, "message": f"Network error: {str(e)}"}
        except ValueError as e:
            logger.error(f"Paystack API returned invalid JSON: {e}")
            return {"status": False, "message": "Invalid response from Paystack"}

    async def create_checkout(
        self,
        reference: str,
        amount_cents: int,
        report_type: ReportType,
        email: Optional[str],
        customer_name: Optional[str],
        customer_phone: Optional[str],
        origin: str,
    ) -> CheckoutSession:
        """
        Initialize a transaction.

        API: POST https://api.paystack.co/transaction/initialize
        """
        if self._is_stub:
            logger.warning("PaystackGateway in STUB mode - returning fake checkout")
            return CheckoutSession(
                success=True,
                reference=reference,
                message="Authorization URL created (STUB MODE)",
                authorization_url=f"https://checkout.paystack.com/stub/{reference}",
                provider_reference=f"stub_access_{reference}",
            )

        amount_naira = usd_cents_to_ngn(amount_cents)
        payload = {
            "email": email,
            "amount": amount_naira * 100,  # kobo
            "currency": "NGN",
            "reference": reference,
            "callback_url": f"{origin}/payment-success-paystack?reference={reference}",
            "metadata": {
                "report_type": report_type.value,
                "custom_fields": [
                    {
                        "display_name": "Report Type",
                        "variable_name": "report_type",
                        "value": REPORT_TYPE_LABELS[report_type],
                    }
                ],
            },
        }

        logger.info(f"Initializing Paystack payment: ref={reference}, amount=NGN {amount_naira:,}")
        result = await self._make_request("POST", "/transaction/initialize", data=payload)

        if not result.get("status"):
            return CheckoutSession(
                success=False,
                reference=reference,
                message=result.get("message", "Failed to initialize payment"),
            )

        data = result.get("data") or {}
        return CheckoutSession(
            success=True,
            reference=reference,
            message=result.get("message", "Authorization URL created"),
            authorization_url=data.get("authorization_url"),
            provider_reference=data.get("access_code"),
        )

    async def verify_payment(self, reference: str) -> PaymentResult:
        """
        Verify a transaction.

        API: GET https://api.paystack.co/transaction/verify/:reference
        """
        if self._is_stub:
            logger.warning("PaystackGateway in STUB mode - returning fake verification")
            return PaymentResult(
                success=True,
                reference=reference,
                status=PaymentStatus.SUCCESS,
                message="Payment verified (STUB MODE)",
                transaction_id=f"stub_txn_{reference}",
                paid_at=datetime.now(timezone.utc),
                metadata={"stub": True},
            )

        logger.info(f"Verifying Paystack payment: {reference}")
        result = await self._make_request("GET", f"/transaction/verify/{reference}")

        if not result.get("status"):
            return PaymentResult(
                success=False,
                reference=reference,
                status=PaymentStatus.FAILED,
                message=result.get("message", "Verification failed"),
            )

        data = result.get("data") or {}
        status_map = {
            "success": PaymentStatus.SUCCESS,
            "failed": PaymentStatus.FAILED,
            "pending": PaymentStatus.PENDING,
            "ongoing": PaymentStatus.PENDING,
            "abandoned": PaymentStatus.CANCELLED,
        }
        payment_status = status_map.get(str(data.get("status", "")).lower(), PaymentStatus.FAILED)
        success = payment_status == PaymentStatus.SUCCESS

        paid_at = None
        if data.get("paid_at"):
            try:
                paid_at = datetime.fromisoformat(data["paid_at"].replace("Z", "+00:00"))
            except (ValueError, TypeError):
                paid_at = None

        return PaymentResult(
            success=success,
            reference=reference,
            status=payment_status,
            message=data.get("gateway_response") or result.get("message", ""),
            transaction_id=str(data["id"]) if data.get("id") is not None else None,
            paid_at=paid_at,
            metadata={"channel": data.get("channel"), "amount_kobo": data.get("amount")},
        )


# =============================================================================
# FLUTTERWAVE
# =============================================================================

class FlutterwaveGateway(PaymentGateway):
    """
    Flutterwave Standard payments in Nigerian Naira.

    Runs in stub mode without a secret key.

    Flutterwave API docs: https://developer.flutterwave.com/reference
    """

    provider = PaymentProvider.FLUTTERWAVE

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.flutterwave_secret_key
        self.base_url = base_url or settings.flutterwave_base_url
        self._is_stub = not self.secret_key
        if self._is_stub:
            logger.warning("FlutterwaveGateway initialized without secret key - using stub mode")

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an HTTP request to the Flutterwave API.

        Returns:
            Parsed JSON response, or {"status": "error", "message": ...} on failure
        """
        url = f"{self.base_url}{endpoint}"

        try:
            async with httpx.AsyncClient(timeout=settings.payment_timeout_seconds) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    json=data,
                    params=params,
                )
                result = response.json()

                logger.debug(f"Flutterwave {method} {endpoint}: status={response.status_code}")

                if response.status_code >= 400:
                    logger.error(f"Flutterwave API error: {result.get('message', 'Unknown error')}")
                    return {
                        "status": "error",
                        "message": result.get("message", f"HTTP {response.status_code}"),
                    }

                return result

        except httpx.TimeoutException:
            logger.error(f"Flutterwave API timeout: {method} {endpoint}")
            return {"status": "error", "message": "Request timed out. Please try again."}
        except httpx.RequestError as e:
            logger.error(f"Flutterwave API request error: {e}")
            return {"status": "error", "message": f"Network error: {str(e)}"}
        except ValueError as e:
            logger.error(f"Flutterwave API returned invalid JSON: {e}")
            return {"status": "error", "message": "Invalid response from Flutterwave"}

    async def create_checkout(
        self,
        reference: str,
        amount_cents: int,
        report_type: ReportType,
        email: Optional[str],
        customer_name: Optional[str],
        customer_phone: Optional[str],
        origin: str,
    ) -> CheckoutSession:
        """
        Create a hosted payment link.

        API: POST https://api.flutterwave.com/v3/payments
        """
        if self._is_stub:
            logger.warning("FlutterwaveGateway in STUB mode - returning fake checkout")
            return CheckoutSession(
                success=True,
                reference=reference,
                message="Hosted link created (STUB MODE)",
                authorization_url=f"https://checkout.flutterwave.com/stub/{reference}",
            )

        label = REPORT_TYPE_LABELS[report_type]
        payload = {
            "tx_ref": reference,
            "amount": usd_cents_to_ngn(amount_cents),
            "currency": "NGN",
            "redirect_url": f"{origin}/payment-success-flutterwave?tx_ref={reference}",
            "customer": {
                "email": email,
                "name": customer_name or "YaraCheck Reporter",
                "phonenumber": customer_phone or "",
            },
            "customizations": {
                "title": f"YaraCheck {label} Report",
                "description": f"Payment for {label.lower()} report submission",
            },
            "meta": {"report_type": report_type.value},
        }

        logger.info(f"Initializing Flutterwave payment: ref={reference}")
        result = await self._make_request("POST", "/v3/payments", data=payload)

        if result.get("status") != "success":
            return CheckoutSession(
                success=False,
                reference=reference,
                message=result.get("message", "Failed to create payment link"),
            )

        data = result.get("data") or {}
        return CheckoutSession(
            success=True,
            reference=reference,
            message=result.get("message", "Hosted link created"),
            authorization_url=data.get("link"),
        )

    async def verify_payment(self, reference: str) -> PaymentResult:
        """
        Verify a transaction by its tx_ref.

        API: GET https://api.flutterwave.com/v3/transactions/verify_by_reference?tx_ref=
        """
        if self._is_stub:
            logger.warning("FlutterwaveGateway in STUB mode - returning fake verification")
            return PaymentResult(
                success=True,
                reference=reference,
                status=PaymentStatus.SUCCESS,
                message="Payment verified (STUB MODE)",
                transaction_id=f"stub_txn_{reference}",
                paid_at=datetime.now(timezone.utc),
                metadata={"stub": True},
            )

        result = await self._make_request(
            "GET",
            "/v3/transactions/verify_by_reference",
            params={"tx_ref": reference},
        )

        if result.get("status") != "success":
            return PaymentResult(
                success=False,
                reference=reference,
                status=PaymentStatus.FAILED,
                message=result.get("message", "Verification failed"),
            )

        data = result.get("data") or {}
        status_map = {
            "successful": PaymentStatus.SUCCESS,
            "pending": PaymentStatus.PENDING,
            "failed": PaymentStatus.FAILED,
            "cancelled": PaymentStatus.CANCELLED,
        }
        payment_status = status_map.get(str(data.get("status", "")).lower(), PaymentStatus.FAILED)
        success = payment_status == PaymentStatus.SUCCESS

        return PaymentResult(
            success=success,
            reference=reference,
            status=payment_status,
            message=data.get("processor_response") or result.get("message", ""),
            transaction_id=str(data["id"]) if data.get("id") is not None else None,
            paid_at=datetime.now(timezone.utc) if success else None,
        )


GATEWAYS = {
    PaymentProvider.STRIPE: StripeGateway,
    PaymentProvider.PAYSTACK: PaystackGateway,
    PaymentProvider.FLUTTERWAVE: FlutterwaveGateway,
}


def get_gateway(provider: PaymentProvider) -> PaymentGateway:
    """Instantiate the gateway for a provider."""
    return GATEWAYS[provider]()


# =============================================================================
# PAYMENT SERVICE
# =============================================================================

class PaymentService:
    """Service for report checkout and payment verification."""

    def __init__(self, db: AsyncSession, gateways: Optional[Dict[PaymentProvider, PaymentGateway]] = None):
        self.db = db
        self._gateways = gateways or {}

    def gateway(self, provider: PaymentProvider) -> PaymentGateway:
        if provider not in self._gateways:
            self._gateways[provider] = get_gateway(provider)
        return self._gateways[provider]

    async def get_transaction(self, reference: str) -> PaymentTransaction:
        """Find a transaction by payment reference or Stripe session id."""
        result = await self.db.execute(
            select(PaymentTransaction).where(
                or_(
                    PaymentTransaction.payment_reference == reference,
                    PaymentTransaction.stripe_session_id == reference,
                )
            )
        )
        transaction = result.scalar_one_or_none()
        if not transaction:
            raise TransactionNotFoundException(reference)
        return transaction

    async def create_checkout(
        self,
        report_type: str,
        data: Dict[str, Any],
        provider: PaymentProvider,
        user: Optional[Profile] = None,
        origin: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Start a paid submission.

        Validates the report, prices it, stores a pending transaction holding
        the report, then asks the gateway for a checkout URL.

        Raises:
            BusinessRuleException: If the report is free
            PaymentGatewayException: If the gateway rejects the checkout
        """
        rtype = parse_report_type(report_type)
        payload = validate_report_payload(rtype, data)
        amount_cents = price_for_payload(rtype, payload)

        if amount_cents == 0:
            raise BusinessRuleException(
                "This report is free; submit it without payment",
                code=ErrorCode.PAYMENT_NOT_REQUIRED,
            )

        email = payload.get("reporter_email") or (user.email if user else None)
        reference = generate_payment_reference(provider.value, rtype.value)
        is_ngn = provider in (PaymentProvider.PAYSTACK, PaymentProvider.FLUTTERWAVE)

        transaction = PaymentTransaction(
            user_id=user.id if user else None,
            amount=usd_cents_to_ngn(amount_cents) if is_ngn else amount_cents,
            currency="NGN" if is_ngn else "USD",
            payment_provider=provider,
            payment_reference=reference,
            report_type=rtype.value,
            report_data=payload,
            tracking_code=generate_tracking_code(),
            status=TransactionStatus.PENDING,
        )
        self.db.add(transaction)
        await self.db.flush()

        checkout = await self.gateway(provider).create_checkout(
            reference=reference,
            amount_cents=amount_cents,
            report_type=rtype,
            email=email,
            customer_name=payload.get("reporter_name"),
            customer_phone=payload.get("reporter_phone"),
            origin=(origin or settings.frontend_url).rstrip("/"),
        )

        if not checkout.success:
            transaction.status = TransactionStatus.FAILED
            transaction.failure_reason = checkout.message[:500]
            await self.db.commit()
            raise PaymentGatewayException(provider.value, checkout.message)

        transaction.authorization_url = checkout.authorization_url
        if provider == PaymentProvider.STRIPE:
            transaction.stripe_session_id = checkout.provider_reference
        await self.db.commit()
        await self.db.refresh(transaction)

        logger.info(f"Checkout {reference} created via {provider.value} ({amount_cents} cents)")
        return {
            "url": checkout.authorization_url,
            "reference": reference,
            "provider": provider,
            "amount": transaction.amount,
            "currency": transaction.currency,
            "report_type": rtype,
        }

    async def _complete(
        self,
        transaction: PaymentTransaction,
        provider_reference: Optional[str],
        paid_at: Optional[datetime],
    ) -> bool:
        """
        Mark a transaction paid and insert its report in one commit.

        The transaction is claimed with a conditional UPDATE first, so when
        the browser verification and the webhook race only the caller whose
        UPDATE matched the unpaid row stores a report.

        Returns:
            True if this call completed the transaction, False if another
            caller had already done so.
        """
        claim = await self.db.execute(
            update(PaymentTransaction)
            .where(
                PaymentTransaction.id == transaction.id,
                PaymentTransaction.status != TransactionStatus.PAID,
            )
            .values(
                status=TransactionStatus.PAID,
                paid_at=paid_at or datetime.now(timezone.utc),
                provider_reference=provider_reference,
                failure_reason=None,
            )
            .execution_options(synchronize_session=False)
        )
        if claim.rowcount != 1:
            await self.db.rollback()
            await self.db.refresh(transaction)
            logger.info(f"Payment {transaction.payment_reference} already completed elsewhere")
            return False

        rtype = ReportType(transaction.report_type)
        report = build_report(
            rtype,
            transaction.report_data,
            tracking_code=transaction.tracking_code or generate_tracking_code(),
            user_id=transaction.user_id,
        )
        self.db.add(report)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            await self.db.refresh(transaction)
            if transaction.status == TransactionStatus.PAID:
                logger.info(f"Report for {transaction.payment_reference} already stored")
                return False
            logger.error(f"Failed to materialize report for {transaction.payment_reference}", exc_info=True)
            raise
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to materialize report for {transaction.payment_reference}", exc_info=True)
            raise

        await self.db.refresh(transaction)
        await self.db.refresh(report)
        logger.info(f"Payment {transaction.payment_reference} verified; {rtype.value} report {report.id} stored")
        return True

    def _verification_result(self, transaction: PaymentTransaction, already_verified: bool) -> Dict[str, Any]:
        return {
            "reference": transaction.payment_reference,
            "status": transaction.status,
            "report_type": ReportType(transaction.report_type),
            "tracking_code": transaction.tracking_code,
            "already_verified": already_verified,
        }

    async def verify_payment(self, reference: str) -> Dict[str, Any]:
        """
        Verify a payment with its gateway and materialize the report.

        Verifying an already paid transaction is a no-op.

        Raises:
            TransactionNotFoundException: Unknown reference
            BusinessRuleException: The gateway reports the payment unpaid
        """
        transaction = await self.get_transaction(reference)
        if transaction.status == TransactionStatus.PAID:
            return self._verification_result(transaction, already_verified=True)

        gateway_reference = (
            transaction.stripe_session_id
            if transaction.payment_provider == PaymentProvider.STRIPE
            else transaction.payment_reference
        )
        result = await self.gateway(transaction.payment_provider).verify_payment(gateway_reference)

        if not result.success:
            if result.status in (PaymentStatus.FAILED, PaymentStatus.CANCELLED):
                await self.db.execute(
                    update(PaymentTransaction)
                    .where(
                        PaymentTransaction.id == transaction.id,
                        PaymentTransaction.status != TransactionStatus.PAID,
                    )
                    .values(
                        status=TransactionStatus.FAILED,
                        failure_reason=result.message[:500] if result.message else None,
                    )
                    .execution_options(synchronize_session=False)
                )
                await self.db.commit()
                await self.db.refresh(transaction)
            logger.warning(f"Payment {reference} not completed: {result.status.value}")
            raise BusinessRuleException(
                "Payment has not been completed",
                rule="PAYMENT_UNVERIFIED",
                details={"gateway_status": result.status.value, "message": result.message},
            )

        completed = await self._complete(transaction, result.transaction_id, result.paid_at)
        return self._verification_result(transaction, already_verified=not completed)

    async def handle_paystack_webhook(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a signature-verified Paystack webhook event.

        Only charge.success is acted on; it completes the matching pending
        transaction without a second call to Paystack.
        """
        event_type = event.get("event")
        if not isinstance(event_type, str):
            event_type = None
        data = event.get("data")
        if not isinstance(data, dict):
            data = {}
        reference = data.get("reference")

        if event_type != "charge.success" or not reference or not isinstance(reference, str):
            logger.debug(f"Ignoring Paystack webhook event {event_type}")
            return {"handled": False, "event": event_type}

        transaction = await self.get_transaction(reference)
        if transaction.status == TransactionStatus.PAID:
            return {"handled": True, "event": event_type, "already_verified": True}

        paid_at = None
        if data.get("paid_at"):
            try:
                paid_at = datetime.fromisoformat(str(data["paid_at"]).replace("Z", "+00:00"))
            except ValueError:
                paid_at = None

        provider_reference = str(data["id"]) if data.get("id") is not None else None
        completed = await self._complete(transaction, provider_reference, paid_at)
        return {"handled": True, "event": event_type, "already_verified": not completed}
