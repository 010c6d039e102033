"""Prioritizer: deterministic additive boosts on top of the combined score.

Each boost is an independent predicate over the item and the profile. Boosts
are summed with the record's score using ``math.fsum`` so the result does
not depend on the order boosts are applied in, then capped at 1.0.
"""

import logging
import math
from typing import Mapping, NamedTuple

from models.schemas.enums import CostCategory, ExperienceLevel, ItemKind
from models.schemas.match_record import MatchRecord
from models.schemas.profile import Profile
from services.matching.engine_config import EngineConfig
from services.matching.normalizer import canonical

logger = logging.getLogger(__name__)

TRACK = "track_alignment"
FREE = "free_access"
POPULAR_PLATFORM = "popular_platform"
EXPERIENCE_MEETS = "experience_meets"
EXPERIENCE_NEAR = "experience_one_below"
HIGH_SEMANTIC = "high_semantic_similarity"


class Boost(NamedTuple):
    name: str
    value: float


def is_track_aligned(record: MatchRecord, profile: Profile) -> bool:
    track = canonical(profile.preferred_track)
    if not track:
        return False
    item = record.item
    fields = [item.track or "", item.platform, item.title, *record.matched_attributes]
    return any(track in canonical(f) for f in fields)


def experience_gap(profile: Profile, record: MatchRecord) -> int:
    """Profile rank minus required rank; a job with no level counts as Fresher."""
    required = record.item.experience_level or ExperienceLevel.FRESHER
    return profile.experience_level.rank - required.rank


def compute_boosts(record: MatchRecord, profile: Profile, config: EngineConfig) -> list[Boost]:
    item = record.item
    boosts: list[Boost] = []

    if is_track_aligned(record, profile):
        value = config.boost_track_job if item.kind == ItemKind.JOB else config.boost_track_resource
        boosts.append(Boost(TRACK, value))

    if item.cost == CostCategory.FREE:
        boosts.append(Boost(FREE, config.boost_free))

    platform = canonical(item.platform)
    if platform and any(p in platform for p in config.popular_platforms):
        boosts.append(Boost(POPULAR_PLATFORM, config.boost_popular_platform))

    # Resources have no experience gate
    if item.kind == ItemKind.JOB:
        gap = experience_gap(profile, record)
        if gap >= 0:
            boosts.append(Boost(EXPERIENCE_MEETS, config.boost_experience_meets))
        elif gap == -1:
            boosts.append(Boost(EXPERIENCE_NEAR, config.boost_experience_near))

    if record.semantic_similarity is not None and record.semantic_similarity > config.high_semantic_threshold:
        boosts.append(Boost(HIGH_SEMANTIC, config.boost_high_semantic))

    return boosts


def boosted_score(base: float, boosts: list[Boost]) -> float:
    return min(math.fsum([base, *(b.value for b in boosts)]), 1.0)


def prioritize(record: MatchRecord, profile: Profile, config: EngineConfig) -> MatchRecord:
    boosts = compute_boosts(record, profile, config)
    return record.model_copy(update={
        "match_score": boosted_score(record.match_score, boosts),
        "applied_boosts": {b.name: b.value for b in boosts},
    })


def prioritize_all(
    records: Mapping[str, MatchRecord],
    profile: Profile,
    config: EngineConfig,
) -> dict[str, MatchRecord]:
    """Boost every record; a record whose boosting fails is dropped and logged."""
    result: dict[str, MatchRecord] = {}
    for item_id, record in records.items():
        try:
            result[item_id] = prioritize(record, profile, config)
        except Exception as e:
            logger.warning("Skipping item %s during prioritization: %s", item_id, e)
    return result
