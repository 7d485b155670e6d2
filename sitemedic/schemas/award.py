from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from sitemedic.core.enums import CancelledBy, EventType
from sitemedic.schemas.quote import EventDay


class AwardRequest(BaseModel):
    total_price: Decimal = Field(gt=0)
    event_type: EventType = EventType.OTHER
    deposit_percent: Optional[int] = Field(default=None, ge=1, le=100)
    event_end_date: Optional[datetime] = None
    vat_rate: Optional[Decimal] = Field(default=None, ge=0, le=1)


class AwardBreakdown(BaseModel):
    total_price: Decimal
    deposit_percent: int
    deposit_amount: Decimal
    remainder_amount: Decimal
    vat_rate: Decimal
    subtotal: Decimal
    vat_amount: Decimal
    remainder_due_date: Optional[datetime] = None


class CommissionSplit(BaseModel):
    platform_fee_percent: float
    medic_payout_percent: float


class CommissionBreakdown(BaseModel):
    total: Decimal
    subtotal: Decimal
    vat: Decimal
    platform_fee: Decimal
    medic_payout: Decimal
    platform_fee_percent: float
    medic_payout_percent: float


class BookingSplitRequest(BaseModel):
    total_price: Decimal = Field(gt=0)
    deposit_amount: Decimal = Field(ge=0)
    remainder_amount: Decimal = Field(ge=0)
    event_days: List[EventDay] = Field(min_length=1)
    platform_fee_percent: Optional[float] = None


class BookingDaySplit(BaseModel):
    shift_date: date
    shift_hours: float
    base_rate: Decimal
    subtotal: Decimal
    vat: Decimal
    total: Decimal
    platform_fee: Decimal
    medic_payout: Decimal
    deposit_amount: Decimal
    remainder_amount: Decimal
    remainder_due_at: datetime


class CancellationRequest(BaseModel):
    deposit_amount: Decimal = Field(ge=0)
    event_date: date
    cancelled_by: CancelledBy = CancelledBy.CLIENT
    today: Optional[date] = None


class RefundBreakdown(BaseModel):
    deposit_amount: Decimal
    refund_percent: int
    refund_amount: Decimal
    days_until_event: int
    cancelled_by: CancelledBy
