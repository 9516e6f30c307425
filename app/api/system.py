import time
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.performance_utils.cache import ExpiringCache, get_performance_cache
from app.models.system.HealthResponse import HealthResponse

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthResponse)
async def health_check(cache: ExpiringCache = Depends(get_performance_cache)):
    # drop dead entries so the reported size means something
    cache.sweep()
    health_status = HealthResponse(
        status="healthy",
        timestamp=time.time(),
        components={"api": "up", "cache": "up"},
        cache_entries=len(cache),
    )
    return JSONResponse(content=health_status.model_dump(mode="json"))
