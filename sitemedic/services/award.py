"""Award money maths: deposit/remainder, VAT, commission and refunds.

All amounts are Decimal pounds rounded half-up to the penny. Where a total
is split in two, the second part is always derived by subtraction so the
parts add back to the total exactly.
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import List, Optional, Sequence, Union

from sitemedic.core.config import settings
from sitemedic.core.enums import CancelledBy, EventType
from sitemedic.core.errors import MarketplaceError
from sitemedic.schemas.award import (
    AwardBreakdown,
    BookingDaySplit,
    CommissionBreakdown,
    CommissionSplit,
    RefundBreakdown,
)
from sitemedic.schemas.quote import EventDay
from sitemedic.services.minimum_rates import shift_hours

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal, str]

CENTS = Decimal("0.01")

DEPOSIT_PERCENT_BY_EVENT_TYPE = {
    EventType.CONSTRUCTION: 25,
    EventType.FESTIVALS: 25,
    EventType.MOTORSPORT: 25,
    EventType.SPORTS: 25,
    EventType.FAIRS_SHOWS: 25,
    EventType.CORPORATE: 50,
    EventType.PRIVATE_EVENTS: 50,
}

FULL_REFUND_DAYS = 14
PARTIAL_REFUND_DAYS = 7
PARTIAL_REFUND_PERCENT = 50


def to_money(value: Number) -> Decimal:
    value = value if isinstance(value, Decimal) else Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def get_deposit_percent_for_event_type(event_type) -> int:
    try:
        return DEPOSIT_PERCENT_BY_EVENT_TYPE.get(EventType(str(event_type)), settings.DEFAULT_DEPOSIT_PERCENT)
    except ValueError:
        return settings.DEFAULT_DEPOSIT_PERCENT


def calculate_remainder_due_date(event_end: Union[date, datetime]) -> Union[date, datetime]:
    return event_end + timedelta(days=settings.REMAINDER_DUE_DAYS)


def split_vat(total: Number, vat_rate: Optional[Number] = None) -> tuple:
    """Return (subtotal, vat) for a VAT-inclusive total."""
    total = to_money(total)
    rate = Decimal(str(settings.VAT_RATE if vat_rate is None else vat_rate))
    subtotal = to_money(total / (Decimal("1") + rate))
    return subtotal, total - subtotal


def calculate_award_amounts(
    total_price: Number,
    deposit_percent: int,
    event_end_date: Optional[datetime] = None,
    vat_rate: Optional[Number] = None,
) -> AwardBreakdown:
    if not 0 <= deposit_percent <= 100:
        raise MarketplaceError(f"Deposit percent must be between 0 and 100, got {deposit_percent}")

    total = to_money(total_price)
    deposit = to_money(total * Decimal(deposit_percent) / Decimal("100"))
    remainder = total - deposit
    rate = Decimal(str(settings.VAT_RATE if vat_rate is None else vat_rate))
    subtotal, vat = split_vat(total, rate)

    return AwardBreakdown(
        total_price=total,
        deposit_percent=deposit_percent,
        deposit_amount=deposit,
        remainder_amount=remainder,
        vat_rate=rate,
        subtotal=subtotal,
        vat_amount=vat,
        remainder_due_date=calculate_remainder_due_date(event_end_date) if event_end_date else None,
    )


def get_commission_split(platform_fee_percent: Optional[float] = None) -> CommissionSplit:
    percent = settings.DEFAULT_COMMISSION_PERCENT if platform_fee_percent is None else platform_fee_percent
    clamped = max(0.0, min(100.0, float(percent)))
    return CommissionSplit(platform_fee_percent=clamped, medic_payout_percent=100.0 - clamped)


def calculate_marketplace_commission(
    total_price: Number,
    split: Optional[CommissionSplit] = None,
    vat_rate: Optional[Number] = None,
) -> CommissionBreakdown:
    split = split or get_commission_split()
    total = to_money(total_price)
    subtotal, vat = split_vat(total, vat_rate)
    platform_fee = to_money(subtotal * Decimal(str(split.platform_fee_percent)) / Decimal("100"))

    return CommissionBreakdown(
        total=total,
        subtotal=subtotal,
        vat=vat,
        platform_fee=platform_fee,
        medic_payout=subtotal - platform_fee,
        platform_fee_percent=split.platform_fee_percent,
        medic_payout_percent=split.medic_payout_percent,
    )


def _share(amount: Decimal, count: int) -> List[Decimal]:
    """Split an amount into `count` penny-exact parts, leftover on the last part.

    Parts round down so the last part never goes negative.
    """
    part = (amount / count).quantize(CENTS, rounding=ROUND_DOWN)
    parts = [part] * (count - 1)
    parts.append(amount - part * (count - 1))
    return parts


def split_award_across_days(
    total_price: Number,
    deposit_amount: Number,
    remainder_amount: Number,
    event_days: Sequence[EventDay],
    split: Optional[CommissionSplit] = None,
) -> List[BookingDaySplit]:
    """One booking line per event day, with totals that add back exactly."""
    if not event_days:
        raise MarketplaceError("Event must have at least one day")

    split = split or get_commission_split()
    days = sorted(event_days, key=lambda d: d.event_date)
    last_day = days[-1]
    event_end = datetime.combine(last_day.event_date, last_day.end_time)
    remainder_due_at = calculate_remainder_due_date(event_end)

    count = len(days)
    totals = _share(to_money(total_price), count)
    deposits = _share(to_money(deposit_amount), count)
    remainders = _share(to_money(remainder_amount), count)

    bookings = []
    for day, total, deposit, remainder in zip(days, totals, deposits, remainders):
        commission = calculate_marketplace_commission(total, split)
        hours = max(shift_hours(day), 1.0)
        bookings.append(
            BookingDaySplit(
                shift_date=day.event_date,
                shift_hours=hours,
                base_rate=to_money(commission.subtotal / Decimal(str(hours))),
                subtotal=commission.subtotal,
                vat=commission.vat,
                total=total,
                platform_fee=commission.platform_fee,
                medic_payout=commission.medic_payout,
                deposit_amount=deposit,
                remainder_amount=remainder,
                remainder_due_at=remainder_due_at,
            )
        )

    logger.info(f"Split award of {to_money(total_price)} across {count} booking day(s)")
    return bookings


def calculate_cancellation_refund(
    deposit_amount: Number,
    event_date: date,
    cancelled_by: CancelledBy = CancelledBy.CLIENT,
    today: Optional[date] = None,
) -> RefundBreakdown:
    today = today or date.today()
    deposit = to_money(deposit_amount)
    days_until = (event_date - today).days

    if cancelled_by == CancelledBy.COMPANY:
        percent = 100
    elif days_until > FULL_REFUND_DAYS:
        percent = 100
    elif days_until >= PARTIAL_REFUND_DAYS:
        percent = PARTIAL_REFUND_PERCENT
    else:
        percent = 0

    return RefundBreakdown(
        deposit_amount=deposit,
        refund_percent=percent,
        refund_amount=to_money(deposit * percent / 100),
        days_until_event=days_until,
        cancelled_by=cancelled_by,
    )
