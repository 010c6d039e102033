from pydantic import BaseModel

from models.schemas.match_record import MatchRecord


class RecommendationResponse(BaseModel):
    count: int = 0
    degraded: bool = False  # semantic path timed out or failed; exact-only scoring
    data: list[MatchRecord] = []


class HealthResponse(BaseModel):
    status: str = "ok"
    semantic_enabled: bool = False
