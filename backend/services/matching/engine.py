"""Recommendation engine: wires the matching stages together with fallbacks.

Flow:
    profile_id
      ├─ FETCHING_PROFILE     ProfileStore.get_profile + CatalogStore.list_catalog_items
      ├─ EXACT_MATCHING       exact_matcher.match_catalog → score_combiner.seed_exact_records
      ├─ SEMANTIC_ENHANCING   SemanticMatcher.find_similar (raced) → score_combiner.combine
      │    or SKIPPED         no similarity index configured
      ├─ PRIORITIZING         prioritizer.prioritize_all
      └─ RANKED               ranker.rank → explainer.annotate
           or DEGRADED        a step after exact matching failed: exact-only ranking

A semantic timeout or failure is not a call failure: the run continues with
the exact-only records and is flagged ``degraded``. Failing to fetch the
profile or the catalog yields an empty result. Nothing is raised to callers.
"""

import logging
from enum import Enum
from itertools import islice
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ValidationError

from models.schemas.catalog_item import CatalogItem
from models.schemas.enums import ItemKind
from models.schemas.match_record import MatchRecord
from models.schemas.profile import Profile
from services.collaborators import CatalogStore, ProfileStore, SimilarityIndex
from services.matching import explainer, prioritizer
from services.matching.engine_config import EngineConfig
from services.matching.exact_matcher import match_catalog
from services.matching.normalizer import attribute_set
from services.matching.ranker import rank
from services.matching.score_combiner import combine, seed_exact_records
from services.matching.semantic_matcher import SemanticMatcher

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    FETCHING_PROFILE = "fetching_profile"
    EXACT_MATCHING = "exact_matching"
    SEMANTIC_ENHANCING = "semantic_enhancing"
    SKIPPED = "skipped"
    PRIORITIZING = "prioritizing"
    RANKED = "ranked"
    DEGRADED = "degraded"


class RecommendationRun(BaseModel):
    """Outcome of one recommendation call, with the stages it went through."""
    records: list[MatchRecord] = []
    stages: list[PipelineStage] = []
    degraded: bool = False
    semantic_reason: str = "skipped"
    error: str | None = None  # set only for hard fetch failures


def profile_attributes(profile: Profile, kind: ItemKind) -> set[str]:
    """Jobs match on skills; resources match on skills and interests."""
    if kind == ItemKind.RESOURCE:
        return attribute_set(profile.skills, profile.interests)
    return attribute_set(profile.skills)


def validate_items(raw_items: Iterable[CatalogItem | Mapping[str, Any]], kind: ItemKind) -> dict[str, CatalogItem]:
    """Parse a catalog slice, skipping malformed, duplicate or wrong-kind entries."""
    items: dict[str, CatalogItem] = {}
    for entry in raw_items:
        try:
            if isinstance(entry, CatalogItem):
                item = entry
            elif isinstance(entry, Mapping):
                item = CatalogItem.model_validate({"kind": kind.value, **entry})
            else:
                raise TypeError(f"unsupported catalog entry type {type(entry).__name__}")
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed %s catalog entry: %s", kind.value, e)
            continue
        if item.kind != kind:
            logger.warning("Skipping item %s: expected kind %s, got %s", item.id, kind.value, item.kind.value)
            continue
        if item.id in items:
            continue
        items[item.id] = item
    return items


class RecommendationEngine:
    def __init__(
        self,
        profiles: ProfileStore,
        catalog: CatalogStore,
        similarity: SimilarityIndex | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._profiles = profiles
        self._catalog = catalog
        self.config = config or EngineConfig()
        self._semantic = SemanticMatcher(
            similarity,
            top_k=self.config.semantic_top_k,
            timeout=self.config.semantic_timeout,
        )

    async def recommend_jobs(self, profile_id: str) -> list[MatchRecord]:
        return (await self.run(ItemKind.JOB, profile_id)).records

    async def recommend_resources(self, profile_id: str) -> list[MatchRecord]:
        return (await self.run(ItemKind.RESOURCE, profile_id)).records

    async def run(self, kind: ItemKind, profile_id: str) -> RecommendationRun:
        run = RecommendationRun(stages=[PipelineStage.FETCHING_PROFILE])

        # --- Stage 1: Fetch profile + bounded catalog slice ---
        try:
            profile = await self._profiles.get_profile(profile_id)
        except Exception as e:
            logger.error("Failed to fetch profile %s: %s", profile_id, e)
            run.error = f"profile store: {e}"
            return run

        if profile is None:
            logger.info("Profile %s not found, no recommendations", profile_id)
            return run

        profile_set = profile_attributes(profile, kind)
        if not profile_set:
            return run

        try:
            raw_items = await self._catalog.list_catalog_items(kind, self.config.catalog_limit)
            items = validate_items(islice(raw_items, max(self.config.catalog_limit, 0)), kind)
        except Exception as e:
            logger.error("Failed to fetch %s catalog: %s", kind.value, e)
            run.error = f"catalog store: {e}"
            return run

        # --- Stage 2: Exact matching ---
        run.stages.append(PipelineStage.EXACT_MATCHING)
        exact_records = seed_exact_records(items, match_catalog(profile_set, items.values()))
        records = exact_records

        # --- Stage 3: Semantic enhancement (raced, optional) ---
        if self._semantic.enabled:
            run.stages.append(PipelineStage.SEMANTIC_ENHANCING)
            try:
                outcome = await self._semantic.find_similar(profile, kind)
                run.degraded = outcome.degraded
                run.semantic_reason = outcome.reason
                records = combine(exact_records, outcome.hits, items, profile, self.config)
            except Exception as e:
                logger.warning("Semantic enhancement failed, using exact matches only: %s", e)
                run.degraded = True
                run.semantic_reason = "error"
                records = exact_records
        else:
            run.stages.append(PipelineStage.SKIPPED)

        # --- Stage 4: Prioritize + rank ---
        run.stages.append(PipelineStage.PRIORITIZING)
        try:
            prioritized = prioritizer.prioritize_all(records, profile, self.config)
            run.records = [self._annotate(r, profile) for r in rank(prioritized, self.config.top_n)]
            run.stages.append(PipelineStage.RANKED)
        except Exception:
            logger.exception("Prioritizing failed for profile %s, returning exact-only ranking", profile_id)
            run.stages.append(PipelineStage.DEGRADED)
            run.degraded = True
            run.records = self._exact_only(exact_records)

        logger.info(
            "Recommended %d %s items for profile %s (semantic: %s)",
            len(run.records), kind.value, profile_id, run.semantic_reason,
        )
        return run

    def _annotate(self, record: MatchRecord, profile: Profile) -> MatchRecord:
        try:
            return explainer.annotate(record, profile, self.config)
        except Exception as e:
            logger.warning("Could not build reasons for item %s: %s", record.item_id, e)
            return record

    def _exact_only(self, exact_records: dict[str, MatchRecord]) -> list[MatchRecord]:
        try:
            return rank(exact_records, self.config.top_n)
        except Exception:
            logger.exception("Exact-only ranking failed")
            return []
