"""Minimum hourly rate enforcement for marketplace quotes.

Rates below the floor block submission outright. Every violation is
collected so the caller can show all of them at once.
"""
import logging
from datetime import datetime, date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Mapping, Union

from sitemedic.core.config import settings
from sitemedic.core.enums import StaffingRole
from sitemedic.core.errors import MarketplaceError
from sitemedic.core.metrics import rate_violations
from sitemedic.schemas.quote import EventDay, HeadcountPlan
from sitemedic.schemas.rates import RateCheckResult, RateViolation

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal, str]

# GBP per hour, NHS band equivalents
MINIMUM_RATES_PER_HOUR = {
    StaffingRole.PARAMEDIC: Decimal("45"),
    StaffingRole.EMT: Decimal("28"),
    StaffingRole.FIRST_AIDER: Decimal("18"),
    StaffingRole.NURSE: Decimal("40"),
    StaffingRole.DOCTOR: Decimal("75"),
    StaffingRole.OTHER: Decimal("15"),
}

CENTS = Decimal("0.01")


def _to_decimal(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _role_key(role) -> str:
    return role.value if isinstance(role, StaffingRole) else str(role)


def get_minimum_rate_for_role(role) -> Decimal:
    try:
        return MINIMUM_RATES_PER_HOUR[StaffingRole(_role_key(role))]
    except ValueError:
        return MINIMUM_RATES_PER_HOUR[StaffingRole.OTHER]


def _result(violations: List[RateViolation]) -> RateCheckResult:
    for violation in violations:
        rate_violations.labels(role=violation.role).inc()
    if violations:
        logger.info(f"Minimum rate check failed for roles: {[v.role for v in violations]}")
    return RateCheckResult(
        is_valid=not violations,
        violations=violations,
        messages=[format_violation(v) for v in violations],
    )


def validate_minimum_rates(staffing_plan: Mapping) -> RateCheckResult:
    """Check each role's proposed hourly rate against its floor."""
    violations = []
    for role, proposed in staffing_plan.items():
        proposed = _to_decimal(proposed)
        minimum = get_minimum_rate_for_role(role)
        if proposed < minimum:
            violations.append(
                RateViolation(role=_role_key(role), proposed_rate=proposed, minimum_rate=minimum)
            )
    return _result(violations)


def validate_quote_against_minimum_rates(
    total_price: Number,
    headcount_plans: Iterable[HeadcountPlan],
    duration_hours: float,
) -> RateCheckResult:
    """Quote-level check: the whole total spread over each role's headcount and hours."""
    total = _to_decimal(total_price)
    hours = _to_decimal(duration_hours)
    if hours <= 0:
        raise MarketplaceError("Event duration must be greater than zero hours")
    violations = []
    for plan in headcount_plans:
        minimum = get_minimum_rate_for_role(plan.role)
        quoted_rate = total / (plan.quantity * hours)
        if quoted_rate < minimum:
            violations.append(
                RateViolation(
                    role=_role_key(plan.role),
                    proposed_rate=quoted_rate.quantize(CENTS, rounding=ROUND_HALF_UP),
                    minimum_rate=minimum,
                    quantity=plan.quantity,
                    duration_hours=float(duration_hours),
                )
            )
    return _result(violations)


def shift_hours(day: EventDay) -> float:
    """Length of one event day; an end at or before the start runs past midnight."""
    start = datetime.combine(date.min, day.start_time)
    end = datetime.combine(date.min, day.end_time)
    if end <= start:
        end += timedelta(days=1)
    return (end - start).total_seconds() / 3600


def event_duration_hours(event_days: Iterable[EventDay]) -> float:
    days = list(event_days)
    if not days:
        return settings.DEFAULT_EVENT_DURATION_HOURS
    return sum(shift_hours(day) for day in days)


def format_violation(violation: RateViolation) -> str:
    label = violation.role[:1].upper() + violation.role[1:]
    proposed = _to_decimal(violation.proposed_rate).quantize(CENTS, rounding=ROUND_HALF_UP)
    return f"{label} quoted at £{proposed}/hr, minimum is £{violation.minimum_rate}/hr"
