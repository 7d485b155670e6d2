from typing import List, Optional
from fastapi import APIRouter, Header, Query

from sitemedic.schemas.award import (
    AwardBreakdown,
    AwardRequest,
    BookingDaySplit,
    BookingSplitRequest,
    CancellationRequest,
    CommissionSplit,
    RefundBreakdown,
)
from sitemedic.services.award import (
    calculate_award_amounts,
    calculate_cancellation_refund,
    get_commission_split,
    get_deposit_percent_for_event_type,
    split_award_across_days,
)
from sitemedic.utils.idempotency import get_idempotent, set_idempotent

router = APIRouter(prefix="/awards", tags=["awards"])


@router.post("/calc", response_model=AwardBreakdown)
async def calc_award(
    req: AwardRequest,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
):
    cached = await get_idempotent(idempotency_key)
    if cached:
        return AwardBreakdown.model_validate(cached)

    deposit_percent = req.deposit_percent or get_deposit_percent_for_event_type(req.event_type)
    result = calculate_award_amounts(
        req.total_price,
        deposit_percent,
        event_end_date=req.event_end_date,
        vat_rate=req.vat_rate,
    )

    await set_idempotent(idempotency_key, result.model_dump(mode="json"))
    return result


@router.post("/bookings", response_model=List[BookingDaySplit])
async def booking_split(req: BookingSplitRequest):
    split = get_commission_split(req.platform_fee_percent)
    return split_award_across_days(
        req.total_price,
        req.deposit_amount,
        req.remainder_amount,
        req.event_days,
        split,
    )


@router.get("/commission-split", response_model=CommissionSplit)
async def commission_split(platform_fee_percent: Optional[float] = Query(None)):
    return get_commission_split(platform_fee_percent)


@router.post("/cancellation-refund", response_model=RefundBreakdown)
async def cancellation_refund(req: CancellationRequest):
    return calculate_cancellation_refund(
        req.deposit_amount,
        req.event_date,
        req.cancelled_by,
        today=req.today,
    )
