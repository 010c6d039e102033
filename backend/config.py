import os
from pydantic_settings import BaseSettings

from models.schemas.application_platform import ApplicationPlatform


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Hybrid blend: exact weight dominates
    exact_weight: float = 0.6
    semantic_weight: float = 0.4
    semantic_only_discount: float = 0.7
    semantic_only_min_similarity: float = 0.1

    # Prioritizer boosts (additive, capped at 1.0)
    boost_track_job: float = 0.2
    boost_track_resource: float = 0.15
    boost_free: float = 0.1
    boost_popular_platform: float = 0.05
    boost_experience_meets: float = 0.1
    boost_experience_near: float = 0.05
    boost_high_semantic: float = 0.1
    high_semantic_threshold: float = 0.8
    popular_platforms: list[str] = [
        "udemy",
        "coursera",
        "freecodecamp",
        "khan academy",
        "youtube",
    ]

    # Semantic path
    semantic_enabled: bool = True
    semantic_timeout_ms: int = 300
    semantic_top_k: int = 15
    embedding_backend: str = "sbert"  # "sbert" | "tfidf"
    embedding_model: str = "TechWolf/JobBERT-v2"

    # Job boards attached to job matches; extras keyed on track / job type
    application_platforms_default: list[ApplicationPlatform] = [
        ApplicationPlatform(
            name="LinkedIn",
            url="https://www.linkedin.com/jobs",
            description="Professional networking and job search",
        ),
        ApplicationPlatform(
            name="BDjobs",
            url="https://www.bdjobs.com",
            description="Bangladesh's leading job portal",
        ),
        ApplicationPlatform(
            name="Glassdoor",
            url="https://www.glassdoor.com/Job",
            description="Company reviews and job listings",
        ),
    ]
    application_platforms_development: list[ApplicationPlatform] = [
        ApplicationPlatform(
            name="Stack Overflow Jobs",
            url="https://stackoverflow.com/jobs",
            description="Tech-focused job board",
        ),
        ApplicationPlatform(
            name="GitHub Jobs",
            url="https://jobs.github.com",
            description="Developer job opportunities",
        ),
    ]
    application_platforms_design: list[ApplicationPlatform] = [
        ApplicationPlatform(
            name="Dribbble Jobs",
            url="https://dribbble.com/jobs",
            description="Design job board",
        ),
    ]
    application_platforms_remote: list[ApplicationPlatform] = [
        ApplicationPlatform(
            name="Remote.co",
            url="https://remote.co",
            description="Remote job opportunities",
        ),
        ApplicationPlatform(
            name="We Work Remotely",
            url="https://weworkremotely.com",
            description="Remote work jobs",
        ),
    ]

    # Catalog bounds
    catalog_limit: int = 50
    top_n: int = 20

    data_file: str = "data/seed.json"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ("settings_",)}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
