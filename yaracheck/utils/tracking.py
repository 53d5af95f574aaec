"""
YaraCheck - Reference Generators

Public tracking codes for reports and payment references for gateways.
"""

import secrets
import string
from datetime import datetime


def generate_tracking_code(prefix: str = "YC") -> str:
    """Generate a public tracking code, e.g. YC-20260115-7K2M9QXA."""
    date_part = datetime.utcnow().strftime("%Y%m%d")
    alphabet = string.ascii_uppercase + string.digits
    random_part = "".join(secrets.choice(alphabet) for _ in range(8))
    return f"{prefix}-{date_part}-{random_part}"


def generate_payment_reference(provider: str, report_type: str) -> str:
    """
    Generate a unique payment reference.

    Format: <PROVIDER>_<REPORT TYPE>_<unix ms>_<random>, e.g.
    PAYSTACK_HOUSEHOLD_1736942400000_x8f3k2q9a
    """
    timestamp = int(datetime.utcnow().timestamp() * 1000)
    random_part = "".join(
        secrets.choice(string.ascii_lowercase + string.digits) for _ in range(9)
    )
    return f"{provider.upper()}_{report_type.upper()}_{timestamp}_{random_part}"
