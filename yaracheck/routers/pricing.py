"""
YaraCheck - Pricing Router
"""

from typing import Optional

from fastapi import APIRouter, Query

from yaracheck.schemas.report import PriceQuoteRequest, PriceQuoteResponse
from yaracheck.utils.pricing import calculate_price, format_price


router = APIRouter()


def _quote(request: PriceQuoteRequest) -> PriceQuoteResponse:
    price = calculate_price(
        request.report_type,
        device_type=request.device_type,
        year=request.year,
        age=request.age,
        brand=request.brand,
    )
    return PriceQuoteResponse(
        report_type=request.report_type,
        price_cents=price,
        formatted=format_price(price),
        is_free=price == 0,
    )


@router.post(
    "/quote",
    response_model=PriceQuoteResponse,
    summary="Quote the submission fee for a report",
)
async def quote_price(request: PriceQuoteRequest):
    """
    Fee in USD cents.

    Unknown report types are quoted at the fallback fee rather than rejected.
    """
    return _quote(request)


@router.get(
    "/quote",
    response_model=PriceQuoteResponse,
    summary="Quote the submission fee (query string)",
)
async def quote_price_get(
    report_type: str = Query(...),
    device_type: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    age: Optional[int] = Query(None),
    brand: Optional[str] = Query(None),
):
    return _quote(
        PriceQuoteRequest(
            report_type=report_type,
            device_type=device_type,
            year=year,
            age=age,
            brand=brand,
        )
    )
