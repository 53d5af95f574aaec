"""
YaraCheck - Report Submission Pricing

Fee schedule for report submissions, in USD cents.

| Report type          | Bracket                           | Fee    |
|----------------------|-----------------------------------|--------|
| person               | age 1-7 / 8-14 / other            | $0 / $4.00 / $5.00 |
| device (iPhone)      | year <2017 / 2017-2020 / 2021+    | $2.50 / $4.00 / $5.00 |
| device (other phone) | year <2017 / 2017-2020 / 2021+    | $1.50 / $2.00 / $2.50 |
| device (laptop)      | year <2015 / 2015-2020 / 2021+    | $2.00 / $3.50 / $5.00 |
| vehicle              | <2010 / 2010-15 / 2016-20 / 2021+ | $3.00 / $3.50 / $4.50 / $6.40 |
| household, personal  | year <2015 / 2015-2020 / 2021+    | $1.50 / $2.00 / $5.00 |
| account, reputation  | flat                              | $4.00 |

Missing attributes fall back to a default fee for the type, unknown types
cost $8.00. A zero age or year counts as missing.
"""

from typing import Optional

from yaracheck.models.report import ReportType


DEFAULT_PERSON_FEE = 500
DEFAULT_DEVICE_FEE = 250
DEFAULT_VEHICLE_FEE = 450
FLAT_ACCOUNT_FEE = 400
FLAT_REPUTATION_FEE = 400
UNKNOWN_TYPE_FEE = 800

MOBILE_PHONE = "mobile_phone"
LAPTOP = "laptop"


def _is_apple(brand: Optional[str]) -> bool:
    if not brand:
        return False
    lowered = brand.lower()
    return "apple" in lowered or "iphone" in lowered


def _person_fee(age: Optional[int]) -> int:
    if not age:
        return DEFAULT_PERSON_FEE
    if 1 <= age <= 7:
        return 0
    if 8 <= age <= 14:
        return 400
    return DEFAULT_PERSON_FEE


def _device_fee(device_type: Optional[str], year: Optional[int], brand: Optional[str]) -> int:
    if not device_type or not year:
        return DEFAULT_DEVICE_FEE

    if device_type == MOBILE_PHONE:
        if _is_apple(brand):
            if year < 2017:
                return 250
            if year <= 2020:
                return 400
            return 500
        if year < 2017:
            return 150
        if year <= 2020:
            return 200
        return 250

    if device_type == LAPTOP:
        if year < 2015:
            return 200
        if year <= 2020:
            return 350
        return 500

    return DEFAULT_DEVICE_FEE


def _vehicle_fee(year: Optional[int]) -> int:
    if not year:
        return DEFAULT_VEHICLE_FEE
    if year < 2010:
        return 300
    if year <= 2015:
        return 350
    if year <= 2020:
        return 450
    return 640


def _belonging_fee(device_type: Optional[str], year: Optional[int]) -> int:
    # Household items and personal belongings share one schedule
    if not device_type or not year:
        return DEFAULT_DEVICE_FEE
    if year < 2015:
        return 150
    if year <= 2020:
        return 200
    return 500


def calculate_price(
    report_type: str,
    device_type: Optional[str] = None,
    year: Optional[int] = None,
    age: Optional[int] = None,
    brand: Optional[str] = None,
) -> int:
    """
    Calculate the submission fee for a report.

    Args:
        report_type: Report category (person, device, vehicle, ...)
        device_type: Sub-type for device/household/personal reports
        year: Manufacture year of the item
        age: Age of a missing person
        brand: Item brand, used to price iPhones

    Returns:
        Fee in USD cents. Never raises.
    """
    try:
        kind = ReportType(report_type)
    except ValueError:
        return UNKNOWN_TYPE_FEE

    if kind == ReportType.PERSON:
        return _person_fee(age)
    if kind == ReportType.DEVICE:
        return _device_fee(device_type, year, brand)
    if kind == ReportType.VEHICLE:
        return _vehicle_fee(year)
    if kind == ReportType.ACCOUNT:
        return FLAT_ACCOUNT_FEE
    if kind == ReportType.REPUTATION:
        return FLAT_REPUTATION_FEE
    if kind in (ReportType.HOUSEHOLD, ReportType.PERSONAL):
        return _belonging_fee(device_type, year)
    return UNKNOWN_TYPE_FEE


def format_price(price_in_cents: int) -> str:
    """Format a fee in cents as a dollar string, e.g. 250 -> '$2.50'."""
    return f"${price_in_cents / 100:.2f}"
