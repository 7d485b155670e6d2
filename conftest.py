import pytest
import inspect
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient, ASGITransport

from sitemedic.main import app
from sitemedic.core import redis as redis_module
from sitemedic.core.security import create_access_token
from sitemedic.core.config import settings
from sitemedic.core.enums import UserRole


class FakeRedis:
    """In-memory stand-in for the handful of redis.asyncio calls the app makes."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value.encode() if isinstance(value, str) else value
        return True

    async def incr(self, key):
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value).encode()
        return value

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def aclose(self):
        self.store.clear()


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(redis_module, "redis", fake)
    yield fake


@pytest.fixture
async def test_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def company_a_token():
    return create_access_token("user_a", UserRole.COMPANY_ADMIN, company_id="company_a")


@pytest.fixture
def company_b_token():
    return create_access_token("user_b", UserRole.COMPANY_ADMIN, company_id="company_b")


@pytest.fixture
def client_token():
    return create_access_token("client_1", UserRole.CLIENT)


@pytest.fixture
def expired_token():
    from jose import jwt
    from sitemedic.core.security import JWT_ALGORITHM

    payload = {
        "sub": "user_a",
        "role": UserRole.COMPANY_ADMIN.value,
        "company_id": "company_a",
        "exp": datetime.now(timezone.utc) - timedelta(hours=1),  # Expired 1 hour ago
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=JWT_ALGORITHM)


@pytest.fixture
def three_quotes():
    """£1000/£1500/£2000 rated 5/3/4, submitted in that order."""
    base = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)
    return [
        {"id": "q1", "total_price": 1000.0, "company_rating": 5, "submitted_at": base.isoformat(), "status": "submitted"},
        {"id": "q2", "total_price": 1500.0, "company_rating": 3, "submitted_at": (base + timedelta(hours=1)).isoformat(), "status": "submitted"},
        {"id": "q3", "total_price": 2000.0, "company_rating": 4, "submitted_at": (base + timedelta(hours=2)).isoformat(), "status": "submitted"},
    ]


@pytest.fixture
def valid_submission_data():
    return {
        "event_id": "event_1",
        "company_id": "company_a",
        "pricing_breakdown": {
            "staff_cost": 800.0,
            "equipment_cost": 100.0,
            "transport_cost": 50.0,
            "consumables_cost": 50.0,
        },
        "staffing_plan": {
            "type": "headcount_and_quals",
            "headcount_plans": [{"role": "paramedic", "quantity": 2}],
        },
        "event_days": [
            {"event_date": "2026-07-04", "start_time": "09:00", "end_time": "17:00"},
        ],
        "availability_confirmed": True,
    }


@pytest.fixture
def app_settings():
    """Return application settings"""
    return settings


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "scoring: marks tests related to quote ranking"
    )
    config.addinivalue_line(
        "markers", "rates: marks tests related to minimum rates"
    )
    config.addinivalue_line(
        "markers", "award: marks tests related to award maths"
    )
    config.addinivalue_line(
        "markers", "attribution: marks tests related to attribution and pass-on"
    )
    config.addinivalue_line(
        "markers", "rate_limit: marks tests related to rate limiting"
    )
    config.addinivalue_line(
        "markers", "idempotency: marks tests related to idempotency"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to handle asyncio tests
    """
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
