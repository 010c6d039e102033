"""Rule-based key reasons and application platforms attached to each recommendation."""

from models.schemas.application_platform import ApplicationPlatform
from models.schemas.catalog_item import CatalogItem
from models.schemas.enums import ItemKind, MatchType
from models.schemas.match_record import MatchRecord
from models.schemas.profile import Profile
from services.matching import prioritizer
from services.matching.engine_config import EngineConfig

MAX_MATCHED_LISTED = 5
MAX_MISSING_LISTED = 3

DEVELOPMENT_TRACK_KEYWORDS = ("software", "development")
DESIGN_TRACK_KEYWORDS = ("design", "ui")
REMOTE_JOB_TYPE = "remote"


def _attribute_summary(matched: list[str], missing: list[str]) -> str:
    summary = ""
    if matched:
        summary = f"Matches {', '.join(matched[:MAX_MATCHED_LISTED])}"
    if missing:
        listed = " and ".join(missing[:MAX_MISSING_LISTED])
        summary = f"{summary}; missing {listed}" if summary else f"Missing {listed}"
    return summary


def key_reasons(record: MatchRecord, profile: Profile) -> list[str]:
    """Short explanations, e.g. "Matches React, JavaScript; missing Redux and TypeScript"."""
    reasons: list[str] = []

    summary = _attribute_summary(record.matched_attributes, record.missing_attributes)
    if summary:
        reasons.append(summary)
    if record.match_type == MatchType.SEMANTIC and not record.matched_attributes:
        reasons.append("Recommended by similarity to your overall profile")

    boosts = record.applied_boosts
    if prioritizer.TRACK in boosts:
        reasons.append("Perfect alignment with your preferred career track")

    item = record.item
    if item.kind == ItemKind.JOB and item.experience_level is not None:
        user_level = profile.experience_level.value
        job_level = item.experience_level.value
        if prioritizer.EXPERIENCE_MEETS in boosts:
            reasons.append(f"Your {user_level} experience level meets the {job_level} requirement")
        else:
            reasons.append(f"Experience level: {user_level} (job requires {job_level})")

    if prioritizer.FREE in boosts:
        reasons.append("Free to access")
    if prioritizer.HIGH_SEMANTIC in boosts:
        reasons.append("Strong semantic similarity to your profile")
    return reasons


def application_platforms(item: CatalogItem, config: EngineConfig) -> list[ApplicationPlatform]:
    """Job boards to apply on: the defaults plus track and job-type extras.

    Resources get none.
    """
    if item.kind != ItemKind.JOB:
        return []

    platforms = list(config.application_platforms_default)
    track = (item.track or "").lower()
    if any(k in track for k in DEVELOPMENT_TRACK_KEYWORDS):
        platforms.extend(config.application_platforms_development)
    if any(k in track for k in DESIGN_TRACK_KEYWORDS):
        platforms.extend(config.application_platforms_design)
    if item.job_type.strip().lower() == REMOTE_JOB_TYPE:
        platforms.extend(config.application_platforms_remote)
    return platforms


def annotate(record: MatchRecord, profile: Profile, config: EngineConfig | None = None) -> MatchRecord:
    config = config or EngineConfig()
    return record.model_copy(update={
        "key_reasons": key_reasons(record, profile),
        "application_platforms": application_platforms(record.item, config),
    })
