import pytest
from datetime import date, time
from decimal import Decimal

from sitemedic.core.enums import StaffingRole
from sitemedic.core.errors import MarketplaceError
from sitemedic.schemas.quote import EventDay, HeadcountPlan
from sitemedic.schemas.rates import RateViolation
from sitemedic.services.minimum_rates import (
    MINIMUM_RATES_PER_HOUR,
    event_duration_hours,
    format_violation,
    get_minimum_rate_for_role,
    shift_hours,
    validate_minimum_rates,
    validate_quote_against_minimum_rates,
)


class TestRateTable:

    @pytest.mark.parametrize("role,expected", [
        ("paramedic", 45),
        ("emt", 28),
        ("first_aider", 18),
        ("nurse", 40),
        ("doctor", 75),
        ("other", 15),
    ])
    def test_floor_per_role(self, role, expected):
        assert get_minimum_rate_for_role(role) == Decimal(expected)

    def test_enum_and_string_roles_agree(self):
        for role in StaffingRole:
            assert get_minimum_rate_for_role(role) == get_minimum_rate_for_role(role.value)

    def test_unknown_role_falls_back_to_other(self):
        assert get_minimum_rate_for_role("ski_patrol") == MINIMUM_RATES_PER_HOUR[StaffingRole.OTHER]


class TestHourlyPlanValidation:

    def test_all_rates_at_or_above_floor(self):
        result = validate_minimum_rates({
            "paramedic": 45,
            "emt": 30,
            "doctor": "90.50",
            "first_aider": 18.0,
        })
        assert result.is_valid
        assert result.violations == []

    def test_single_violation_names_role(self):
        result = validate_minimum_rates({"paramedic": 50, "nurse": 39.99, "emt": 28})

        assert not result.is_valid
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.role == "nurse"
        assert violation.proposed_rate == Decimal("39.99")
        assert violation.minimum_rate == Decimal("40")

    def test_collects_every_violation(self):
        result = validate_minimum_rates({"paramedic": 10, "doctor": 10, "other": 10})

        assert {v.role for v in result.violations} == {"paramedic", "doctor", "other"}
        assert len(result.messages) == 3

    def test_empty_plan_is_valid(self):
        assert validate_minimum_rates({}).is_valid


class TestQuoteLevelValidation:

    def test_valid_quote(self):
        plans = [HeadcountPlan(role=StaffingRole.PARAMEDIC, quantity=2)]
        # 1000 / (2 * 8) = 62.50 per hour
        result = validate_quote_against_minimum_rates(1000, plans, 8)
        assert result.is_valid

    def test_below_floor_quote(self):
        plans = [
            HeadcountPlan(role=StaffingRole.PARAMEDIC, quantity=2),
            HeadcountPlan(role=StaffingRole.FIRST_AIDER, quantity=1),
        ]
        # paramedic: 500 / 16 = 31.25 < 45, first aider: 500 / 8 = 62.50
        result = validate_quote_against_minimum_rates(500, plans, 8)

        assert not result.is_valid
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.role == "paramedic"
        assert violation.proposed_rate == Decimal("31.25")
        assert violation.quantity == 2
        assert violation.duration_hours == 8

    def test_zero_duration_rejected(self):
        plans = [HeadcountPlan(role=StaffingRole.EMT, quantity=1)]
        with pytest.raises(MarketplaceError):
            validate_quote_against_minimum_rates(500, plans, 0)


class TestEventDuration:

    def test_no_days_defaults_to_eight_hours(self):
        assert event_duration_hours([]) == 8.0

    def test_sum_of_days(self):
        days = [
            EventDay(event_date=date(2026, 7, 4), start_time=time(9, 0), end_time=time(17, 30)),
            EventDay(event_date=date(2026, 7, 5), start_time=time(10, 0), end_time=time(14, 0)),
        ]
        assert event_duration_hours(days) == pytest.approx(12.5)

    def test_overnight_shift(self):
        day = EventDay(event_date=date(2026, 7, 4), start_time=time(20, 0), end_time=time(2, 0))
        assert shift_hours(day) == pytest.approx(6.0)


def test_format_violation():
    violation = RateViolation(role="paramedic", proposed_rate=Decimal("32"), minimum_rate=Decimal("45"))
    assert format_violation(violation) == "Paramedic quoted at £32.00/hr, minimum is £45/hr"
