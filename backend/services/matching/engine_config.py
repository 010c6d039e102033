"""Named scoring constants and limits used by the matching engine."""

from pydantic import BaseModel

from config import Settings
from models.schemas.application_platform import ApplicationPlatform


def _settings_default(name: str) -> tuple:
    return tuple(Settings.model_fields[name].default)


class EngineConfig(BaseModel):
    """Immutable view of the matching weights, boosts and budgets.

    Defaults mirror ``config.Settings`` so the engine can be built without
    touching the environment (tests do this).
    """
    exact_weight: float = 0.6
    semantic_weight: float = 0.4
    semantic_only_discount: float = 0.7
    semantic_only_min_similarity: float = 0.1

    boost_track_job: float = 0.2
    boost_track_resource: float = 0.15
    boost_free: float = 0.1
    boost_popular_platform: float = 0.05
    boost_experience_meets: float = 0.1
    boost_experience_near: float = 0.05
    boost_high_semantic: float = 0.1
    high_semantic_threshold: float = 0.8
    popular_platforms: tuple[str, ...] = (
        "udemy",
        "coursera",
        "freecodecamp",
        "khan academy",
        "youtube",
    )

    application_platforms_default: tuple[ApplicationPlatform, ...] = _settings_default(
        "application_platforms_default"
    )
    application_platforms_development: tuple[ApplicationPlatform, ...] = _settings_default(
        "application_platforms_development"
    )
    application_platforms_design: tuple[ApplicationPlatform, ...] = _settings_default(
        "application_platforms_design"
    )
    application_platforms_remote: tuple[ApplicationPlatform, ...] = _settings_default(
        "application_platforms_remote"
    )

    semantic_timeout_ms: int = 300
    semantic_top_k: int = 15
    catalog_limit: int = 50
    top_n: int = 20

    model_config = {"frozen": True}

    @property
    def semantic_timeout(self) -> float:
        return self.semantic_timeout_ms / 1000

    @classmethod
    def from_settings(cls, settings: Settings) -> "EngineConfig":
        fields = {name: getattr(settings, name) for name in cls.model_fields}
        fields["popular_platforms"] = tuple(p.lower() for p in settings.popular_platforms)
        return cls(**fields)
