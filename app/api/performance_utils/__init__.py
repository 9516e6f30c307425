"""
Performance utilities package.

Re-exports the cache, the aggregator, the CRM client and the rollup service.
"""

# Cache
from app.api.performance_utils.cache import (
    MISS,
    ExpiringCache,
    configure_cache,
    get_performance_cache,
    monthly_key,
    performance_cache,
    profile_key,
    ranking_key,
    snapshot_key,
)

# Rollups
from app.api.performance_utils.aggregator import aggregate, month_label
from app.api.performance_utils.bitrix_client import BitrixClient
from app.api.performance_utils.rollup_service import RollupService

__all__ = [
    # Cache
    "MISS",
    "ExpiringCache",
    "configure_cache",
    "get_performance_cache",
    "monthly_key",
    "performance_cache",
    "profile_key",
    "ranking_key",
    "snapshot_key",
    # Rollups
    "aggregate",
    "month_label",
    "BitrixClient",
    "RollupService",
]
