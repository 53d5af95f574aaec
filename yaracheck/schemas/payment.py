"""
YaraCheck - Payment Schemas
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel

from yaracheck.models.report import ReportType
from yaracheck.models.transaction import PaymentProvider, TransactionStatus


class CheckoutRequest(BaseModel):
    """Start a paid report submission."""
    report_type: str
    provider: PaymentProvider = PaymentProvider.STRIPE
    report: Dict[str, Any]
    origin: Optional[str] = None  # Frontend base URL for redirects


class CheckoutResponse(BaseModel):
    """Hosted checkout page for the submitter."""
    url: str
    reference: str
    provider: PaymentProvider
    amount: int
    currency: str
    report_type: ReportType


class PaymentVerifyRequest(BaseModel):
    """Payment reference, tx_ref or Stripe session id."""
    reference: str


class PaymentVerifyResponse(BaseModel):
    """Outcome of payment verification."""
    reference: str
    status: TransactionStatus
    report_type: ReportType
    tracking_code: Optional[str] = None
    already_verified: bool = False


class WebhookResponse(BaseModel):
    handled: bool
    event: Optional[str] = None
    already_verified: Optional[bool] = None
