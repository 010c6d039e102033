"""CatalogItem: a job posting or a learning resource."""

from pydantic import AliasChoices, BaseModel, Field, field_validator

from models.schemas.enums import CostCategory, ExperienceLevel, ItemKind
from services.matching.normalizer import strip_blank


class CatalogItem(BaseModel):
    """A matchable catalog entry.

    ``attributes`` are the job's required skills or the resource's related
    skills, in the item's own order. An item with no attributes matches
    nothing and is excluded from recommendations.
    """
    id: str
    kind: ItemKind
    title: str = ""
    attributes: list[str] = Field(
        default=[],
        validation_alias=AliasChoices("attributes", "required_skills", "related_skills"),
    )
    track: str | None = None
    experience_level: ExperienceLevel | None = None  # jobs only
    cost: CostCategory | None = None  # resources only
    platform: str = ""  # resource platform or job source label

    # Display-only fields
    company: str = ""
    location: str = ""
    job_type: str = ""
    url: str = ""
    description: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value) if value is not None else value

    @field_validator("attributes", mode="before")
    @classmethod
    def _strip_attributes(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            raise ValueError("attributes must be a list of strings")
        return strip_blank(value)

    @field_validator("track", mode="before")
    @classmethod
    def _blank_track(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("experience_level", mode="before")
    @classmethod
    def _parse_level(cls, value):
        if value is None or isinstance(value, ExperienceLevel):
            return value
        try:
            return ExperienceLevel(value)
        except ValueError:
            return None

    @field_validator("cost", mode="before")
    @classmethod
    def _parse_cost(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, str):
            return CostCategory(value)
        return value
