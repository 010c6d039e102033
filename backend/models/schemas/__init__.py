"""Pydantic contracts for the matching engine."""

from models.schemas.application_platform import ApplicationPlatform
from models.schemas.enums import CostCategory, ExperienceLevel, ItemKind, MatchType
from models.schemas.profile import Profile
from models.schemas.catalog_item import CatalogItem
from models.schemas.match_record import MatchRecord
from models.schemas.semantic_outcome import SemanticOutcome

__all__ = [
    "ApplicationPlatform",
    "CostCategory",
    "ExperienceLevel",
    "ItemKind",
    "MatchType",
    "Profile",
    "CatalogItem",
    "MatchRecord",
    "SemanticOutcome",
]
