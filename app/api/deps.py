from functools import lru_cache

from fastapi import Depends

from app.api.performance_utils.bitrix_client import BitrixClient
from app.api.performance_utils.cache import ExpiringCache, get_performance_cache
from app.api.performance_utils.rollup_service import RollupService


@lru_cache
def get_bitrix_client() -> BitrixClient:
    # built lazily so the app imports without BITRIX_WEBHOOK_URL
    return BitrixClient()


def get_rollup_service(
    client: BitrixClient = Depends(get_bitrix_client),
    cache: ExpiringCache = Depends(get_performance_cache),
) -> RollupService:
    return RollupService(client=client, cache=cache)
