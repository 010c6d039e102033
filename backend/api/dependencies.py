"""Shared dependencies for API routes."""

import logging
from pathlib import Path

from config import settings
from services.json_store import stores_from_file
from services.matching.engine import RecommendationEngine
from services.matching.engine_config import EngineConfig
from services.vector_index import EmbeddingSimilarityIndex

logger = logging.getLogger(__name__)

_engine: RecommendationEngine | None = None

BACKEND_DIR = Path(__file__).resolve().parent.parent


def _data_path() -> Path:
    path = Path(settings.data_file)
    return path if path.is_absolute() else BACKEND_DIR / path


def build_engine() -> RecommendationEngine:
    """Wire the bundled JSON stores and (optionally) the embedding index."""
    profiles, catalog = stores_from_file(_data_path())

    index = None
    if settings.semantic_enabled:
        index = EmbeddingSimilarityIndex(
            backend=settings.embedding_backend,
            model_name=settings.embedding_model,
        )
        index.build(catalog.valid_items())

    return RecommendationEngine(
        profiles=profiles,
        catalog=catalog,
        similarity=index,
        config=EngineConfig.from_settings(settings),
    )


def get_engine() -> RecommendationEngine:
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine
