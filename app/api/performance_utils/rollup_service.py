"""
Cache-aware assembly of performance rollups.

Every public method checks the process-wide cache first and only goes to the CRM
on a miss. Cached units and their keys:

    performance_{id}                         current-month snapshot
    performance_month_{id}_{year}_{month}    one month's rollup
    ranking_{id}                             ranking payload
    profile_{id}                             CRM user profile

A yearly answer is not cached as a whole. It is stitched together from the
per-month entries, so a month computed for the yearly view is reused by the
monthly view and the other way round.
"""

import logging
import time
from datetime import date
from typing import Callable, Optional

from app.core.config import CACHE_TTL_SECONDS
from app.core.errors import NotFound
from app.api.performance_utils.aggregator import aggregate
from app.api.performance_utils.bitrix_client import BitrixClient
from app.api.performance_utils.cache import (
    MISS,
    ExpiringCache,
    monthly_key,
    performance_cache,
    profile_key,
    ranking_key,
    snapshot_key,
)
from app.api.performance_utils.validation import (
    elapsed_months,
    validate_user_id,
    validate_window,
    validate_year,
)
from app.models.bitrix import EmployeeProfile
from app.models.performance import (
    MonthlyRollup,
    PerformanceSnapshot,
    YearlyPerformanceResponse,
)
from app.models.ranking.RankingResponse import RankingResponse

logger = logging.getLogger(__name__)

RANKING_MESSAGE = "Ranking data retrieved successfully."


class RollupService:
    def __init__(
        self,
        client: BitrixClient,
        cache: ExpiringCache = performance_cache,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        today: Callable[[], date] = date.today,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.today = today
        self.clock = clock

    async def get_profile(self, user_id: str) -> EmployeeProfile:
        """Profile from the cache, or from user.get on a miss. Unknown users are not cached."""
        key = profile_key(user_id)
        cached = self.cache.get(key)
        if cached is not MISS:
            return cached.model_copy(deep=True)

        profile = await self.client.fetch_user(user_id)
        if profile is None:
            raise NotFound("User not found")

        self.cache.set(key, profile, self.ttl_seconds)
        return profile.model_copy(deep=True)

    async def get_monthly(
        self,
        user_id: str,
        year: int,
        month: int,
        profile: Optional[EmployeeProfile] = None,
    ) -> MonthlyRollup:
        """
        Rollup for one calendar month.

        The profile is only looked up on a cache miss; callers that already hold
        it (yearly, snapshot) pass it in to avoid a second user.get.
        """
        user_id = validate_user_id(user_id)
        validate_window(year, month, self.today())

        key = monthly_key(user_id, year, month)
        cached = self.cache.get(key)
        if cached is not MISS:
            return cached.model_copy(deep=True)

        if profile is None:
            profile = await self.get_profile(user_id)

        if profile.email:
            records = await self.client.fetch_listings(profile.email, year, month)
        else:
            # listings are scoped by agent email; without one there is nothing to count
            logger.warning("User %s has no email, reporting an empty month", user_id)
            records = []

        rollup = aggregate(records, year, month)
        self.cache.set(key, rollup, self.ttl_seconds)
        return rollup.model_copy(deep=True)

    async def get_monthly_performance(
        self, user_id: str, year: int, month: int
    ) -> PerformanceSnapshot:
        user_id = validate_user_id(user_id)
        validate_window(year, month, self.today())
        profile = await self.get_profile(user_id)
        rollup = await self.get_monthly(user_id, year, month, profile=profile)
        return PerformanceSnapshot(profile=profile, rollup=rollup)

    async def get_yearly(self, user_id: str, year: int) -> YearlyPerformanceResponse:
        """
        One rollup per elapsed month of `year`, in ascending month order.

        Months are resolved one after another. Any failure aborts the whole
        request; months cached before the failure stay cached but nothing
        partial is returned.
        """
        user_id = validate_user_id(user_id)
        today = self.today()
        validate_year(year, today)

        profile = await self.get_profile(user_id)
        months = []
        for month in elapsed_months(year, today):
            months.append(await self.get_monthly(user_id, year, month, profile=profile))

        return YearlyPerformanceResponse(profile=profile, year=year, months=months)

    async def get_snapshot(self, user_id: str) -> PerformanceSnapshot:
        user_id = validate_user_id(user_id)

        key = snapshot_key(user_id)
        cached = self.cache.get(key)
        if cached is not MISS:
            return cached.model_copy(deep=True)

        today = self.today()
        profile = await self.get_profile(user_id)
        rollup = await self.get_monthly(user_id, today.year, today.month, profile=profile)
        snapshot = PerformanceSnapshot(profile=profile, rollup=rollup)

        self.cache.set(key, snapshot, self.ttl_seconds)
        return snapshot.model_copy(deep=True)

    async def get_ranking(self, user_id: str) -> RankingResponse:
        user_id = validate_user_id(user_id)

        key = ranking_key(user_id)
        cached = self.cache.get(key)
        if cached is not MISS:
            return cached.model_copy(deep=True)

        ranking = RankingResponse(
            id=user_id,
            message=RANKING_MESSAGE,
            timestamp=int(self.clock()),
        )
        self.cache.set(key, ranking, self.ttl_seconds)
        return ranking.model_copy(deep=True)
