"""
YaraCheck - Payment Gateway Tests

Gateway integrations tested against mocked HTTP APIs (respx) and a
patched stripe SDK, without real API calls.
"""

import hashlib
import hmac
import json
from unittest.mock import patch

import pytest
import stripe

from tests.fixtures.payment_mocks import MockFlutterwaveServer, MockPaystackServer
from yaracheck.models.report import ReportType
from yaracheck.models.transaction import PaymentProvider
from yaracheck.services.payment_service import (
    FlutterwaveGateway,
    PaymentStatus,
    PaystackGateway,
    StripeGateway,
    get_gateway,
    usd_cents_to_ngn,
    verify_paystack_signature,
)
from yaracheck.utils.error_handling import PaymentGatewayException

ORIGIN = "https://yaracheck.example"


def checkout_kwargs(reference: str, amount_cents: int = 500, report_type: ReportType = ReportType.DEVICE) -> dict:
    return {
        "reference": reference,
        "amount_cents": amount_cents,
        "report_type": report_type,
        "email": "reporter@example.com",
        "customer_name": "Ada Obi",
        "customer_phone": "+2348012345678",
        "origin": ORIGIN,
    }


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def paystack_server():
    return MockPaystackServer()


@pytest.fixture
def paystack_gateway(paystack_server):
    return PaystackGateway(secret_key=paystack_server.secret_key, base_url=MockPaystackServer.BASE_URL)


@pytest.fixture
def flutterwave_server():
    return MockFlutterwaveServer()


@pytest.fixture
def flutterwave_gateway(flutterwave_server):
    return FlutterwaveGateway(secret_key=flutterwave_server.secret_key, base_url=MockFlutterwaveServer.BASE_URL)


# =============================================================================
# HELPERS
# =============================================================================

class TestCurrencyConversion:

    def test_usd_cents_to_ngn(self):
        # Default rate: 1500 NGN per USD
        assert usd_cents_to_ngn(500) == 7500
        assert usd_cents_to_ngn(250) == 3750
        assert usd_cents_to_ngn(0) == 0

    def test_get_gateway(self):
        assert isinstance(get_gateway(PaymentProvider.PAYSTACK), PaystackGateway)
        assert isinstance(get_gateway(PaymentProvider.FLUTTERWAVE), FlutterwaveGateway)
        assert isinstance(get_gateway(PaymentProvider.STRIPE), StripeGateway)


class TestWebhookSignatureVerification:
    """Tests for Paystack webhook signature verification."""

    def test_valid_signature(self):
        payload = json.dumps({"event": "charge.success"}).encode()
        signature = hmac.new(b"whsec", payload, hashlib.sha512).hexdigest()
        assert verify_paystack_signature(payload, signature, "whsec") is True

    def test_tampered_payload(self):
        payload = json.dumps({"event": "charge.success"}).encode()
        signature = hmac.new(b"whsec", payload, hashlib.sha512).hexdigest()
        assert verify_paystack_signature(payload + b" ", signature, "whsec") is False

    def test_wrong_secret(self):
        payload = b"{}"
        signature = hmac.new(b"other", payload, hashlib.sha512).hexdigest()
        assert verify_paystack_signature(payload, signature, "whsec") is False

    def test_missing_signature_or_secret(self):
        assert verify_paystack_signature(b"{}", "", "whsec") is False
        assert verify_paystack_signature(b"{}", "abc", "") is False


# =============================================================================
# PAYSTACK
# =============================================================================

class TestPaystackStubMode:

    @pytest.mark.asyncio
    async def test_checkout(self):
        gateway = PaystackGateway(secret_key="")
        session = await gateway.create_checkout(**checkout_kwargs("PAYSTACK_DEVICE_1_abc"))

        assert session.success is True
        assert session.authorization_url == "https://checkout.paystack.com/stub/PAYSTACK_DEVICE_1_abc"

    @pytest.mark.asyncio
    async def test_verify_always_succeeds(self):
        result = await PaystackGateway(secret_key="").verify_payment("PAYSTACK_DEVICE_1_abc")

        assert result.success is True
        assert result.status == PaymentStatus.SUCCESS
        assert result.metadata == {"stub": True}


class TestPaystackGateway:

    @pytest.mark.asyncio
    async def test_initialize_sends_kobo(self, paystack_server, paystack_gateway):
        with paystack_server.activate():
            session = await paystack_gateway.create_checkout(**checkout_kwargs("PAYSTACK_DEVICE_2_abc"))

        assert session.success is True
        assert session.authorization_url.startswith("https://checkout.paystack.com/")
        assert session.provider_reference.startswith("ACC_")

        body = paystack_server.requests[0]
        assert body["amount"] == 750000  # $5.00 -> NGN 7,500 -> 750,000 kobo
        assert body["currency"] == "NGN"
        assert body["callback_url"] == f"{ORIGIN}/payment-success-paystack?reference=PAYSTACK_DEVICE_2_abc"
        assert body["metadata"]["report_type"] == "device"

    @pytest.mark.asyncio
    async def test_initialize_failure(self, paystack_server, paystack_gateway):
        paystack_server.set_initialization_failure("Invalid key")
        with paystack_server.activate():
            session = await paystack_gateway.create_checkout(**checkout_kwargs("PAYSTACK_DEVICE_3_abc"))

        assert session.success is False
        assert session.message == "Invalid key"

    @pytest.mark.asyncio
    async def test_verify_success(self, paystack_server, paystack_gateway):
        txn = paystack_server.create_transaction("PAYSTACK_DEVICE_4_abc", 750000, status="success")
        with paystack_server.activate():
            result = await paystack_gateway.verify_payment("PAYSTACK_DEVICE_4_abc")

        assert result.success is True
        assert result.status == PaymentStatus.SUCCESS
        assert result.transaction_id == str(txn.id)
        assert result.paid_at is not None
        assert result.metadata["amount_kobo"] == 750000

    @pytest.mark.asyncio
    @pytest.mark.parametrize("gateway_status,expected", [
        ("failed", PaymentStatus.FAILED),
        ("abandoned", PaymentStatus.CANCELLED),
        ("ongoing", PaymentStatus.PENDING),
    ])
    async def test_verify_unsuccessful(self, paystack_server, paystack_gateway, gateway_status, expected):
        paystack_server.create_transaction("PAYSTACK_DEVICE_5_abc", 750000)
        paystack_server.set_verification_status(gateway_status, gateway_response="Declined")
        with paystack_server.activate():
            result = await paystack_gateway.verify_payment("PAYSTACK_DEVICE_5_abc")

        assert result.success is False
        assert result.status == expected

    @pytest.mark.asyncio
    async def test_verify_unknown_reference(self, paystack_server, paystack_gateway):
        with paystack_server.activate():
            result = await paystack_gateway.verify_payment("missing")

        assert result.success is False
        assert result.status == PaymentStatus.FAILED
        assert result.message == "Transaction reference not found"


# =============================================================================
# FLUTTERWAVE
# =============================================================================

class TestFlutterwaveGateway:

    @pytest.mark.asyncio
    async def test_stub_mode(self):
        gateway = FlutterwaveGateway(secret_key="")
        session = await gateway.create_checkout(**checkout_kwargs("FLUTTERWAVE_VEHICLE_1_abc"))
        assert session.authorization_url == "https://checkout.flutterwave.com/stub/FLUTTERWAVE_VEHICLE_1_abc"
        assert (await gateway.verify_payment("FLUTTERWAVE_VEHICLE_1_abc")).success is True

    @pytest.mark.asyncio
    async def test_payment_link(self, flutterwave_server, flutterwave_gateway):
        with flutterwave_server.activate():
            session = await flutterwave_gateway.create_checkout(
                **checkout_kwargs("FLUTTERWAVE_VEHICLE_2_abc", amount_cents=640, report_type=ReportType.VEHICLE)
            )

        assert session.success is True
        assert session.authorization_url.startswith("https://checkout.flutterwave.com/v3/hosted/pay/")

        body = flutterwave_server.requests[0]
        assert body["amount"] == 9600
        assert body["currency"] == "NGN"
        assert body["customer"]["name"] == "Ada Obi"
        assert body["redirect_url"] == f"{ORIGIN}/payment-success-flutterwave?tx_ref=FLUTTERWAVE_VEHICLE_2_abc"

    @pytest.mark.asyncio
    async def test_verify_by_reference(self, flutterwave_server, flutterwave_gateway):
        txn = flutterwave_server.create_transaction("FLUTTERWAVE_VEHICLE_3_abc", 9600)
        with flutterwave_server.activate():
            result = await flutterwave_gateway.verify_payment("FLUTTERWAVE_VEHICLE_3_abc")

        assert result.success is True
        assert result.transaction_id == str(txn.id)

    @pytest.mark.asyncio
    async def test_verify_failed(self, flutterwave_server, flutterwave_gateway):
        flutterwave_server.create_transaction("FLUTTERWAVE_VEHICLE_4_abc", 9600, status="failed")
        with flutterwave_server.activate():
            result = await flutterwave_gateway.verify_payment("FLUTTERWAVE_VEHICLE_4_abc")

        assert result.success is False
        assert result.status == PaymentStatus.FAILED


# =============================================================================
# STRIPE
# =============================================================================

class TestStripeGateway:

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(PaymentGatewayException):
            await StripeGateway(secret_key="").create_checkout(**checkout_kwargs("STRIPE_DEVICE_1_abc"))

    @pytest.mark.asyncio
    async def test_checkout_session(self):
        fake_session = {"id": "cs_test_123", "url": "https://checkout.stripe.com/c/pay/cs_test_123"}
        with patch(
            "yaracheck.services.payment_service.stripe.checkout.Session.create",
            return_value=fake_session,
        ) as create:
            session = await StripeGateway(secret_key="sk_test_123").create_checkout(
                **checkout_kwargs("STRIPE_DEVICE_2_abc")
            )

        assert session.success is True
        assert session.authorization_url == fake_session["url"]
        assert session.provider_reference == "cs_test_123"

        params = create.call_args.kwargs
        assert params["api_key"] == "sk_test_123"
        assert params["line_items"][0]["price_data"]["unit_amount"] == 500
        assert params["line_items"][0]["price_data"]["product_data"]["name"] == (
            "YaraCheck Stolen Device Report Submission"
        )
        assert params["success_url"] == f"{ORIGIN}/payment-success?session_id={{CHECKOUT_SESSION_ID}}"
        assert params["cancel_url"] == f"{ORIGIN}/submit-report/device"
        assert params["client_reference_id"] == "STRIPE_DEVICE_2_abc"
        assert params["customer_email"] == "reporter@example.com"

    @pytest.mark.asyncio
    async def test_checkout_error(self):
        with patch(
            "yaracheck.services.payment_service.stripe.checkout.Session.create",
            side_effect=stripe.StripeError("Your card was declined"),
        ):
            session = await StripeGateway(secret_key="sk_test_123").create_checkout(
                **checkout_kwargs("STRIPE_DEVICE_3_abc")
            )

        assert session.success is False
        assert "declined" in session.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payment_status,expected", [
        ("paid", PaymentStatus.SUCCESS),
        ("unpaid", PaymentStatus.PENDING),
    ])
    async def test_verify(self, payment_status, expected):
        fake_session = {"id": "cs_test_123", "payment_status": payment_status, "payment_intent": "pi_123"}
        with patch(
            "yaracheck.services.payment_service.stripe.checkout.Session.retrieve",
            return_value=fake_session,
        ) as retrieve:
            result = await StripeGateway(secret_key="sk_test_123").verify_payment("cs_test_123")

        assert retrieve.call_args.args == ("cs_test_123",)
        assert result.status == expected
        assert result.success is (expected == PaymentStatus.SUCCESS)
        assert result.transaction_id == "pi_123"
