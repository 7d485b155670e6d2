from datetime import datetime, date, time
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from sitemedic.core.enums import QuoteStatus, SortMode, StaffingRole


class Quote(BaseModel):
    id: str
    event_id: Optional[str] = None
    company_id: Optional[str] = None
    total_price: float = Field(ge=0)
    company_rating: Optional[float] = Field(default=None, ge=0, le=5)
    submitted_at: Optional[datetime] = None
    status: QuoteStatus = QuoteStatus.SUBMITTED
    qualifications: List[StaffingRole] = Field(default_factory=list)


class RankedQuote(BaseModel):
    quote: Quote
    rank: int
    best_value_score: float
    price_score: float = 0.0
    rating_score: float = 0.0


class QuoteFilters(BaseModel):
    qualification: Optional[StaffingRole] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    min_rating: Optional[float] = Field(default=None, ge=0, le=5)


class RankQuotesRequest(BaseModel):
    quotes: List[Quote]
    sort_by: SortMode = SortMode.BEST_VALUE
    filters: Optional[QuoteFilters] = None


class RankQuotesResponse(BaseModel):
    total: int
    quotes: List[RankedQuote]


class CustomLineItem(BaseModel):
    label: str = Field(min_length=1, max_length=100)
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0, le=100000)
    notes: Optional[str] = Field(default=None, max_length=500)


class PricingBreakdown(BaseModel):
    staff_cost: float = Field(default=0.0, ge=0, le=100000)
    equipment_cost: float = Field(default=0.0, ge=0, le=100000)
    transport_cost: float = Field(default=0.0, ge=0, le=100000)
    consumables_cost: float = Field(default=0.0, ge=0, le=100000)
    custom_line_items: List[CustomLineItem] = Field(default_factory=list)

    @property
    def total(self) -> float:
        fixed = self.staff_cost + self.equipment_cost + self.transport_cost + self.consumables_cost
        custom = sum(item.quantity * item.unit_price for item in self.custom_line_items)
        return fixed + custom

    @model_validator(mode="after")
    def _total_must_be_positive(self):
        if self.total <= 0:
            raise ValueError("Total quote price must be greater than £0")
        return self


class HeadcountPlan(BaseModel):
    role: StaffingRole
    quantity: int = Field(ge=1)


class NamedMedic(BaseModel):
    medic_id: str
    name: str = Field(min_length=1, max_length=200)
    qualification: StaffingRole
    notes: Optional[str] = Field(default=None, max_length=500)


class NamedMedicsPlan(BaseModel):
    type: Literal["named_medics"] = "named_medics"
    named_medics: List[NamedMedic] = Field(min_length=1)


class HeadcountAndQualsPlan(BaseModel):
    type: Literal["headcount_and_quals"] = "headcount_and_quals"
    headcount_plans: List[HeadcountPlan] = Field(min_length=1)


StaffingPlan = Annotated[
    Union[NamedMedicsPlan, HeadcountAndQualsPlan],
    Field(discriminator="type"),
]


class EventDay(BaseModel):
    event_date: date
    start_time: time
    end_time: time


class QuoteSubmission(BaseModel):
    id: Optional[str] = None
    event_id: str
    company_id: Optional[str] = None
    pricing_breakdown: PricingBreakdown
    staffing_plan: StaffingPlan
    event_days: List[EventDay] = Field(default_factory=list)
    cover_letter: Optional[str] = Field(default=None, max_length=5000)
    availability_confirmed: bool

    @model_validator(mode="after")
    def _availability_must_be_confirmed(self):
        if not self.availability_confirmed:
            raise ValueError("You must confirm availability")
        return self

    def headcount(self) -> List[HeadcountPlan]:
        if isinstance(self.staffing_plan, HeadcountAndQualsPlan):
            return list(self.staffing_plan.headcount_plans)
        return [HeadcountPlan(role=m.qualification, quantity=1) for m in self.staffing_plan.named_medics]
