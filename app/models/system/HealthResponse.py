from typing import Dict

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    timestamp: float
    components: Dict[str, str]
    cache_entries: int
