from datetime import date, datetime

import pytest

from app.api.performance_utils.cache import ExpiringCache
from app.api.performance_utils.rollup_service import RollupService
from app.core.errors import UpstreamFailure
from app.models.bitrix import EmployeeProfile, ListingRecord

TODAY = date(2024, 4, 15)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBitrixClient:
    """Stands in for BitrixClient; records every upstream call."""

    def __init__(self, users=None, listings=None):
        self.users = users if users is not None else {}
        self.listings = listings if listings is not None else []
        self.user_calls = []
        self.listing_calls = []
        self.fail_months = set()

    async def fetch_user(self, user_id):
        self.user_calls.append(user_id)
        user = self.users.get(user_id)
        return EmployeeProfile.from_bitrix(user) if user else None

    async def fetch_listings(self, agent_email, year=None, month=None):
        self.listing_calls.append((agent_email, year, month))
        if (year, month) in self.fail_months:
            raise UpstreamFailure("Bitrix request failed: crm.item.list")
        return list(self.listings)


def listing(status="PUBLISHED", price=0, created="2024-03-10T09:30:00+04:00", **flags):
    return ListingRecord(status=status, price=price, created_at=created, **flags)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ExpiringCache(max_entries=100, clock=clock)


@pytest.fixture
def bitrix():
    return FakeBitrixClient(
        users={
            "7": {
                "ID": "7",
                "NAME": "Sara",
                "LAST_NAME": "Haddad",
                "WORK_POSITION": "Senior Agent",
                "PERSONAL_PHOTO": "https://cdn.example.com/7.jpg",
                "EMAIL": "sara@example.com",
                "UF_LINKEDIN": "in/sara-haddad",
            }
        },
        listings=[
            listing("PUBLISHED", 1_200_000, "2024-01-05T10:00:00+04:00", pf_enabled="Y"),
            listing("LIVE", 800_000, "2024-02-11T10:00:00+04:00"),
            listing("PUBLISHED", 500_000, "2024-03-02T10:00:00+04:00", bayut_enabled="Y"),
            listing("DRAFT", 90_000, "2024-03-20T10:00:00+04:00"),
            listing("PUBLISHED", 300_000, "2024-04-01T10:00:00+04:00", website_enabled="Y"),
        ],
    )


@pytest.fixture
def service(bitrix, cache):
    return RollupService(
        client=bitrix,
        cache=cache,
        ttl_seconds=300,
        today=lambda: TODAY,
        clock=lambda: datetime(2024, 4, 15, 12, 0).timestamp(),
    )
