from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.api.deps import get_rollup_service
from app.api.performance_utils.rollup_service import RollupService
from app.api.performance_utils.validation import validate_user_id
from app.models.performance import PerformanceSnapshot, YearlyPerformanceResponse

router = APIRouter()


class PerformanceMode(str, Enum):
    snapshot = "snapshot"
    monthly = "monthly"
    yearly = "yearly"


@router.get(
    "/performance",
    status_code=status.HTTP_200_OK,
    response_model=PerformanceSnapshot | YearlyPerformanceResponse,
)
async def get_performance(
    id: Optional[str] = Query(default=None, description="Bitrix user id"),
    mode: PerformanceMode = Query(default=PerformanceMode.snapshot),
    year: Optional[int] = Query(default=None, description="Defaults to the current year"),
    month: Optional[int] = Query(default=None, description="Defaults to the current month"),
    service: RollupService = Depends(get_rollup_service),
):
    """
    GET /performance - Listing performance for one agent.

    Modes:
        - snapshot (default): profile + current-month rollup, cached as a whole
        - monthly: profile + rollup for ?year=&month=
        - yearly: profile + one rollup per elapsed month of ?year=

    Error Handling:
        - 400: missing/non-numeric id, bad year or month
        - 404: unknown user
        - 502: the CRM could not be reached or answered garbage
    """
    user_id = validate_user_id(id)
    today = service.today()
    year = year if year is not None else today.year
    month = month if month is not None else today.month

    if mode is PerformanceMode.yearly:
        result = await service.get_yearly(user_id, year)
    elif mode is PerformanceMode.monthly:
        result = await service.get_monthly_performance(user_id, year, month)
    else:
        result = await service.get_snapshot(user_id)

    return JSONResponse(content=result.model_dump(mode="json"))
