"""Score combiner: merges exact and semantic signals into MatchRecords.

Pure functions: inputs are never mutated, a new keyed map is returned.

    exact only      score = base
    exact+semantic  score = base * exact_weight + similarity * semantic_weight   (hybrid)
    semantic only   score = similarity * semantic_only_discount                  (semantic)

Every score is capped at 1.0.
"""

import logging
from typing import Mapping

from models.schemas.catalog_item import CatalogItem
from models.schemas.enums import MatchType
from models.schemas.match_record import MatchRecord
from models.schemas.profile import Profile
from services.matching.engine_config import EngineConfig
from services.matching.exact_matcher import ExactMatch, match_skills_substring

logger = logging.getLogger(__name__)


def _in_item_order(item: CatalogItem, attrs: set[str]) -> tuple[list[str], list[str]]:
    matched = [a for a in item.attributes if a in attrs]
    missing = [a for a in item.attributes if a not in attrs]
    return matched, missing


def seed_exact_records(
    items: Mapping[str, CatalogItem],
    exact: Mapping[str, ExactMatch],
) -> dict[str, MatchRecord]:
    """One exact MatchRecord per exact match, scored with the base score."""
    records: dict[str, MatchRecord] = {}
    for item_id, match in exact.items():
        item = items.get(item_id)
        if item is None:
            continue
        records[item_id] = MatchRecord(
            item_id=item_id,
            item=item,
            matched_attributes=list(match.matched),
            missing_attributes=list(match.missing),
            match_score=min(match.base_score, 1.0),
            match_type=MatchType.EXACT,
        )
    return records


def blend_hybrid(record: MatchRecord, similarity: float, profile: Profile, config: EngineConfig) -> MatchRecord:
    score = record.match_score * config.exact_weight + similarity * config.semantic_weight
    extra = match_skills_substring(profile.skills, record.item.attributes)
    matched, missing = _in_item_order(record.item, set(record.matched_attributes) | set(extra))
    return record.model_copy(update={
        "match_score": min(score, 1.0),
        "match_type": MatchType.HYBRID,
        "semantic_similarity": similarity,
        "matched_attributes": matched,
        "missing_attributes": missing,
    })


def semantic_only_record(item: CatalogItem, similarity: float, profile: Profile, config: EngineConfig) -> MatchRecord:
    matched, missing = _in_item_order(item, set(match_skills_substring(profile.skills, item.attributes)))
    return MatchRecord(
        item_id=item.id,
        item=item,
        matched_attributes=matched,
        missing_attributes=missing,
        match_score=min(similarity * config.semantic_only_discount, 1.0),
        match_type=MatchType.SEMANTIC,
        semantic_similarity=similarity,
    )


def combine(
    records: Mapping[str, MatchRecord],
    hits: Mapping[str, float],
    items: Mapping[str, CatalogItem],
    profile: Profile,
    config: EngineConfig,
) -> dict[str, MatchRecord]:
    """Merge semantic hits into the exact records, keyed by item id.

    Exact records keep their position; semantic-only records are appended in
    the order the index ranked them. Hits for items outside the fetched
    catalog slice, items without attributes, or below
    ``semantic_only_min_similarity`` are ignored.
    """
    combined = dict(records)
    for item_id, similarity in hits.items():
        try:
            existing = combined.get(item_id)
            if existing is not None:
                combined[item_id] = blend_hybrid(existing, similarity, profile, config)
                continue

            item = items.get(item_id)
            if item is None or not item.attributes:
                continue
            if similarity < config.semantic_only_min_similarity:
                continue
            combined[item_id] = semantic_only_record(item, similarity, profile, config)
        except Exception as e:
            logger.warning("Skipping semantic contribution for item %s: %s", item_id, e)
    return combined
