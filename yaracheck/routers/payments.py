"""
YaraCheck - Payments Router

Checkout for paid report submissions, payment verification and the
Paystack webhook.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from yaracheck.config import settings
from yaracheck.database import get_async_session
from yaracheck.dependencies import get_optional_user
from yaracheck.models.profile import Profile
from yaracheck.schemas.payment import (
    CheckoutRequest,
    CheckoutResponse,
    PaymentVerifyRequest,
    PaymentVerifyResponse,
    WebhookResponse,
)
from yaracheck.services.payment_service import PaymentService, verify_paystack_signature
from yaracheck.utils.error_handling import AppException, ErrorCode, TransactionNotFoundException

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/checkout",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a paid report submission",
)
async def create_checkout(
    request: CheckoutRequest,
    http_request: Request,
    current_user: Optional[Profile] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Validate and price the report, then return the gateway checkout URL.

    The report is stored once the payment is verified.
    """
    origin = request.origin or http_request.headers.get("origin")
    return await PaymentService(db).create_checkout(
        report_type=request.report_type,
        data=request.report,
        provider=request.provider,
        user=current_user,
        origin=origin,
    )


@router.post(
    "/verify",
    response_model=PaymentVerifyResponse,
    summary="Verify a payment and store its report",
)
async def verify_payment(
    request: PaymentVerifyRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Verify with the gateway. Accepts the payment reference, Flutterwave
    tx_ref or Stripe session id. Repeated calls return the same result.
    """
    return await PaymentService(db).verify_payment(request.reference)


@router.post(
    "/webhook/paystack",
    response_model=WebhookResponse,
    summary="Paystack webhook handler",
    include_in_schema=False,
)
async def paystack_webhook(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Handle Paystack webhook events.

    The X-Paystack-Signature header is an HMAC-SHA512 of the raw body keyed
    with the webhook secret (or the account secret key when no separate
    webhook secret is set).
    """
    body = await request.body()
    signature = request.headers.get("X-Paystack-Signature", "")

    secret = settings.paystack_webhook_secret or settings.paystack_secret_key
    if secret:
        if not verify_paystack_signature(body, signature, secret):
            logger.warning("Paystack webhook signature verification failed")
            raise AppException(
                code=ErrorCode.INVALID_SIGNATURE,
                message="Invalid webhook signature",
                status_code=status.HTTP_400_BAD_REQUEST,
            )
    elif settings.is_production:
        logger.warning(
            "SECURITY WARNING: Paystack webhook received but no secret is configured. "
            "Set PAYSTACK_WEBHOOK_SECRET in .env for production!"
        )
        raise AppException(
            code=ErrorCode.INVALID_SIGNATURE,
            message="Webhook signature cannot be verified",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("Paystack webhook body is not valid JSON")
        return WebhookResponse(handled=False)

    if not isinstance(payload, dict):
        logger.warning(f"Paystack webhook body is not an event object: {type(payload).__name__}")
        return WebhookResponse(handled=False)

    event_data = payload.get("data")
    if not isinstance(event_data, dict):
        event_data = {}
    logger.info(
        f"Paystack webhook received: event={payload.get('event')}, "
        f"reference={event_data.get('reference', 'N/A')}"
    )

    try:
        return await PaymentService(db).handle_paystack_webhook(payload)
    except TransactionNotFoundException:
        # Acknowledge so Paystack stops retrying events for foreign references
        logger.warning(f"Paystack webhook for unknown reference {event_data.get('reference')}")
        return WebhookResponse(handled=False, event=payload.get("event"))
