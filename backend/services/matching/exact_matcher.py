"""Exact matcher: case-insensitive, substring-tolerant attribute matching.

Each item attribute is tested first for exact membership in the profile's
canonical attribute set (O(1)), then for bidirectional substring containment
against every profile attribute, so "React" and "ReactJS" still match.
"""

import logging
from typing import Collection, Iterable, NamedTuple, Sequence

from models.schemas.catalog_item import CatalogItem
from services.matching.normalizer import attribute_set, canonical

logger = logging.getLogger(__name__)


class ExactMatch(NamedTuple):
    matched: list[str]  # item attributes, item order
    missing: list[str]  # complement, item order
    base_score: float  # |matched| / max(|attributes|, 1)


def _substring_hit(attr: str, profile_attrs: Iterable[str]) -> bool:
    return any(p in attr or attr in p for p in profile_attrs)


def attribute_matches(attr: str, profile_set: Collection[str], profile_list: Sequence[str]) -> bool:
    """Test one canonical item attribute against the profile."""
    if attr in profile_set:
        return True
    return _substring_hit(attr, profile_list)


def match_attributes(profile_set: set[str], item_attributes: Sequence[str]) -> ExactMatch:
    """Split ``item_attributes`` into matched and missing against ``profile_set``."""
    profile_list = sorted(profile_set)
    matched: list[str] = []
    missing: list[str] = []
    for attr in item_attributes:
        key = canonical(attr)
        if key and attribute_matches(key, profile_set, profile_list):
            matched.append(attr)
        else:
            missing.append(attr)
    base_score = len(matched) / max(len(item_attributes), 1)
    return ExactMatch(matched=matched, missing=missing, base_score=base_score)


def match_skills_substring(profile_skills: Iterable[str], item_attributes: Sequence[str]) -> list[str]:
    """Best-effort attribute overlap for items found only by semantic search.

    Runs against the profile's raw skills (not interests) with substring
    containment; returns item attributes in item order, possibly empty.
    """
    skills = sorted(attribute_set(profile_skills))
    if not skills:
        return []
    return [
        attr for attr in item_attributes
        if canonical(attr) and _substring_hit(canonical(attr), skills)
    ]


def match_catalog(profile_set: set[str], items: Iterable[CatalogItem]) -> dict[str, ExactMatch]:
    """Run the exact matcher over a catalog slice.

    Items with no attributes or no matched attribute are dropped. An item
    whose matching raises is logged and skipped; the rest of the batch
    continues. Keys keep catalog order.
    """
    results: dict[str, ExactMatch] = {}
    if not profile_set:
        return results

    for item in items:
        if not item.attributes or item.id in results:
            continue
        try:
            match = match_attributes(profile_set, item.attributes)
        except Exception as e:
            logger.warning("Exact matching failed for item %s: %s", item.id, e)
            continue
        if match.matched:
            results[item.id] = match
    return results
