"""Profile: the attribute bundle matched against the catalog."""

from pydantic import AliasChoices, BaseModel, Field, field_validator

from models.schemas.enums import ExperienceLevel
from services.matching.normalizer import clean_attributes


class Profile(BaseModel):
    """A user's matchable attributes.

    Skills and interests are cleaned on validation: blanks are dropped and
    case-insensitive duplicates collapse to the first spelling.
    """
    id: str
    skills: list[str] = []
    interests: list[str] = Field(
        default=[], validation_alias=AliasChoices("interests", "career_interests")
    )
    preferred_track: str = ""
    experience_level: ExperienceLevel = ExperienceLevel.FRESHER
    education_level: str = ""  # only used to build the semantic query text

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value) if value is not None else value

    @field_validator("skills", "interests", mode="before")
    @classmethod
    def _clean(cls, value):
        if isinstance(value, str):
            raise ValueError("expected a list of strings")
        return clean_attributes(value)

    @field_validator("preferred_track", "education_level", mode="before")
    @classmethod
    def _blank_if_none(cls, value):
        return (value or "").strip() if isinstance(value, str) or value is None else value

    @field_validator("experience_level", mode="before")
    @classmethod
    def _parse_level(cls, value):
        if isinstance(value, ExperienceLevel):
            return value
        try:
            return ExperienceLevel(value)
        except ValueError:
            return ExperienceLevel.FRESHER

    @property
    def has_attributes(self) -> bool:
        return bool(self.skills or self.interests)
