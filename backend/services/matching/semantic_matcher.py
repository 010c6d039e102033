"""Semantic matcher: bounded nearest-neighbour lookup against a similarity index.

The index query is raced against a fixed deadline. If the deadline wins, the
query task is cancelled and never awaited again; whatever it eventually
produces is dropped. Timeouts, unavailable collaborators and malformed
responses all yield an empty, degraded outcome instead of an error.
"""

import asyncio
import logging
import math
from typing import Any

from models.schemas.enums import ItemKind
from models.schemas.profile import Profile
from models.schemas.semantic_outcome import SemanticOutcome
from services.collaborators import SimilarityIndex

logger = logging.getLogger(__name__)


def build_profile_text(profile: Profile) -> str:
    """Labelled text representation of a profile used as the similarity query."""
    parts = [
        f"Skills: {', '.join(profile.skills)}",
        f"Experience Level: {profile.experience_level.value}",
        f"Preferred Career Track: {profile.preferred_track}",
        f"Career Interests: {', '.join(profile.interests)}",
        f"Education Level: {profile.education_level}",
    ]
    return ". ".join(parts)


def distance_to_similarity(distance: float) -> float:
    return min(1.0, max(0.0, 1.0 - distance))


def parse_hits(raw: Any) -> dict[str, float]:
    """Convert ``[(item_id, distance), ...]`` into ``{item_id: similarity}``.

    Raises ValueError on anything that is not a sequence of id/distance
    pairs. Repeated ids keep their first (nearest) position.
    """
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"expected a list of (id, distance) pairs, got {type(raw).__name__}")

    hits: dict[str, float] = {}
    for entry in raw:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise ValueError(f"malformed similarity entry: {entry!r}")
        item_id, distance = entry
        if item_id is None or isinstance(distance, bool) or not isinstance(distance, (int, float)):
            raise ValueError(f"malformed similarity entry: {entry!r}")
        if math.isnan(distance):
            raise ValueError(f"distance is NaN for item {item_id!r}")
        key = str(item_id)
        if key not in hits:
            hits[key] = distance_to_similarity(float(distance))
    return hits


def _discard(task: asyncio.Future) -> None:
    # Retrieve the late result so it is neither used nor reported as unhandled.
    if not task.cancelled():
        task.exception()


class SemanticMatcher:
    def __init__(self, index: SimilarityIndex | None, top_k: int = 15, timeout: float = 0.3) -> None:
        self._index = index
        self.top_k = top_k
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return self._index is not None

    async def find_similar(self, profile: Profile, kind: ItemKind) -> SemanticOutcome:
        if self._index is None:
            return SemanticOutcome.skipped()

        query_text = build_profile_text(profile)
        try:
            task = asyncio.ensure_future(
                self._index.query_similar(kind, query_text, self.top_k, self.timeout)
            )
        except Exception as e:
            logger.warning("Similarity index unavailable: %s", e)
            return SemanticOutcome.failed("unavailable")

        done, _ = await asyncio.wait({task}, timeout=self.timeout)
        if task not in done:
            task.cancel()
            task.add_done_callback(_discard)
            logger.warning(
                "Semantic lookup for profile %s exceeded %.0fms, continuing exact-only",
                profile.id, self.timeout * 1000,
            )
            return SemanticOutcome.failed("timeout")

        if task.cancelled():
            logger.warning("Semantic lookup for profile %s was cancelled", profile.id)
            return SemanticOutcome.failed("unavailable")
        try:
            raw = task.result()
        except Exception as e:
            logger.warning("Similarity index unavailable: %s", e)
            return SemanticOutcome.failed("unavailable")

        try:
            hits = parse_hits(raw)
        except ValueError as e:
            logger.warning("Malformed similarity response: %s", e)
            return SemanticOutcome.failed("malformed")

        logger.debug("Semantic lookup returned %d %s hits", len(hits), kind.value)
        return SemanticOutcome(hits=hits)
