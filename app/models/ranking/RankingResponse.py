from pydantic import BaseModel


class RankingResponse(BaseModel):
    id: str
    message: str
    timestamp: int
