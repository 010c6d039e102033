"""MatchRecord: one scored, explainable recommendation."""

import math

from pydantic import BaseModel, Field, computed_field

from models.schemas.application_platform import ApplicationPlatform
from models.schemas.catalog_item import CatalogItem
from models.schemas.enums import MatchType


class MatchRecord(BaseModel):
    """A catalog item matched against a profile.

    ``matched_attributes`` and ``missing_attributes`` partition the item's
    attributes and both keep the item's own order. Semantic-only records may
    have no matched attributes but always carry ``semantic_similarity``.
    """
    item_id: str
    item: CatalogItem
    matched_attributes: list[str] = []
    missing_attributes: list[str] = []
    match_score: float = Field(default=0.0, ge=0.0, le=1.0)
    match_type: MatchType = MatchType.EXACT
    semantic_similarity: float | None = Field(default=None, ge=0.0, le=1.0)
    applied_boosts: dict[str, float] = {}  # boost name -> value added by the prioritizer
    key_reasons: list[str] = []
    application_platforms: list[ApplicationPlatform] = []  # jobs only

    @computed_field
    @property
    def match_percentage(self) -> int:
        # Halves round up (12.5 -> 13)
        return math.floor(self.match_score * 100 + 0.5)
