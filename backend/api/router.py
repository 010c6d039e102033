from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_engine
from config import settings
from models.responses import HealthResponse, RecommendationResponse
from models.schemas.enums import ItemKind
from services.matching.engine import RecommendationEngine

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", semantic_enabled=settings.semantic_enabled)


async def _recommend(engine: RecommendationEngine, kind: ItemKind, profile_id: str) -> RecommendationResponse:
    run = await engine.run(kind, profile_id)
    return RecommendationResponse(count=len(run.records), degraded=run.degraded, data=run.records)


@router.get("/recommendations/jobs/{profile_id}", response_model=RecommendationResponse)
@limiter.limit("30/minute")
async def recommended_jobs(
    request: Request,
    profile_id: str,
    engine: RecommendationEngine = Depends(get_engine),
):
    return await _recommend(engine, ItemKind.JOB, profile_id)


@router.get("/recommendations/resources/{profile_id}", response_model=RecommendationResponse)
@limiter.limit("30/minute")
async def recommended_resources(
    request: Request,
    profile_id: str,
    engine: RecommendationEngine = Depends(get_engine),
):
    return await _recommend(engine, ItemKind.RESOURCE, profile_id)
