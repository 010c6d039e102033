"""Enumerations shared by profiles, catalog items and match records."""

from enum import Enum


class ExperienceLevel(str, Enum):
    """Ordered career stage: Fresher < Junior < Mid < Senior."""
    FRESHER = "Fresher"
    JUNIOR = "Junior"
    MID = "Mid"
    SENIOR = "Senior"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        return None

    @property
    def rank(self) -> int:
        return _EXPERIENCE_RANK[self]


_EXPERIENCE_RANK = {
    ExperienceLevel.FRESHER: 1,
    ExperienceLevel.JUNIOR: 2,
    ExperienceLevel.MID: 3,
    ExperienceLevel.SENIOR: 4,
}


class ItemKind(str, Enum):
    JOB = "job"
    RESOURCE = "resource"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        return None


class CostCategory(str, Enum):
    FREE = "Free"
    PAID = "Paid"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        return None


class MatchType(str, Enum):
    EXACT = "exact"
    SEMANTIC = "semantic"
    HYBRID = "hybrid"
