from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from sitemedic.schemas.quote import HeadcountPlan


class RateViolation(BaseModel):
    role: str
    proposed_rate: Decimal
    minimum_rate: Decimal
    quantity: Optional[int] = None
    duration_hours: Optional[float] = None


class RateCheckResult(BaseModel):
    is_valid: bool
    violations: List[RateViolation]
    messages: List[str] = Field(default_factory=list)


class RateCheckRequest(BaseModel):
    """Either an hourly-rate staffing plan or a quote total with headcount."""

    staffing_plan: Optional[Dict[str, Decimal]] = None
    total_price: Optional[Decimal] = Field(default=None, ge=0)
    headcount_plans: Optional[List[HeadcountPlan]] = None
    duration_hours: Optional[float] = Field(default=None, gt=0)
