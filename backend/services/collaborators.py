"""Interfaces for the engine's external collaborators.

The engine never talks to a database or a vector store directly: it is handed
a profile store, a catalog store and (optionally) a similarity index, all
injected at construction so tests can substitute fakes.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from models.schemas.catalog_item import CatalogItem
from models.schemas.enums import ItemKind
from models.schemas.profile import Profile


class CollaboratorError(Exception):
    """Base class for failures raised by external collaborators."""


class ProfileStoreError(CollaboratorError):
    """The profile store could not be reached or returned garbage."""


class CatalogStoreError(CollaboratorError):
    """The catalog store could not be reached."""


class SimilarityIndexError(CollaboratorError):
    """The vector-similarity index is unavailable."""


class ProfileStore(ABC):
    @abstractmethod
    async def get_profile(self, profile_id: str) -> Profile | None:
        """Return the profile, or None when it does not exist."""


class CatalogStore(ABC):
    @abstractmethod
    async def list_catalog_items(
        self, kind: ItemKind, limit: int
    ) -> Sequence[CatalogItem | Mapping[str, Any]]:
        """Return at most ``limit`` items of ``kind``.

        Entries may be raw mappings; the engine validates each one and skips
        those that do not parse.
        """


class SimilarityIndex(ABC):
    @abstractmethod
    async def query_similar(
        self, kind: ItemKind, query_text: str, top_k: int, timeout: float
    ) -> Sequence[tuple[str, float]]:
        """Return up to ``top_k`` ``(item_id, distance)`` pairs, nearest first.

        Distances are cosine-style in [0, 2]. ``timeout`` is the caller's
        budget in seconds; the caller enforces it regardless.
        """
