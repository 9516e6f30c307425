from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.api.deps import get_rollup_service
from app.api.performance_utils.rollup_service import RollupService
from app.models.ranking.RankingResponse import RankingResponse

router = APIRouter()


@router.get(
    "/ranking",
    status_code=status.HTTP_200_OK,
    response_model=RankingResponse,
)
async def get_ranking(
    id: Optional[str] = Query(default=None),
    service: RollupService = Depends(get_rollup_service),
):
    ranking = await service.get_ranking(id)
    return JSONResponse(content=ranking.model_dump(mode="json"))
