"""In-memory profile and catalog stores loaded from a seed JSON file.

File layout::

    {
      "profiles":  [{"id": "...", "skills": [...], ...}],
      "jobs":      [{"id": "...", "title": "...", "required_skills": [...], ...}],
      "resources": [{"id": "...", "title": "...", "related_skills": [...], ...}]
    }

Catalog entries are handed to the engine as raw mappings; validation (and
skipping of malformed entries) happens there.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from models.schemas.catalog_item import CatalogItem
from models.schemas.enums import ItemKind
from models.schemas.profile import Profile
from services.collaborators import (
    CatalogStore,
    CatalogStoreError,
    ProfileStore,
    ProfileStoreError,
)

logger = logging.getLogger(__name__)

_KIND_KEYS = {ItemKind.JOB: "jobs", ItemKind.RESOURCE: "resources"}


def load_seed(path: str | Path) -> dict[str, list[dict[str, Any]]]:
    """Read the seed file. A missing file yields an empty dataset."""
    path = Path(path)
    if not path.exists():
        logger.warning("Seed file %s not found, starting with empty stores", path)
        return {"profiles": [], "jobs": [], "resources": []}
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Seed file {path} must contain a JSON object")
    return {key: list(data.get(key) or []) for key in ("profiles", "jobs", "resources")}


class JsonProfileStore(ProfileStore):
    def __init__(self, profiles: list[dict[str, Any]]) -> None:
        self._profiles = {str(p.get("id")): p for p in profiles if isinstance(p, dict)}

    async def get_profile(self, profile_id: str) -> Profile | None:
        raw = self._profiles.get(str(profile_id))
        if raw is None:
            return None
        try:
            return Profile.model_validate(raw)
        except ValidationError as e:
            raise ProfileStoreError(f"profile {profile_id} is malformed: {e}") from e


class JsonCatalogStore(CatalogStore):
    def __init__(self, jobs: list[dict[str, Any]], resources: list[dict[str, Any]]) -> None:
        self._entries = {ItemKind.JOB: list(jobs), ItemKind.RESOURCE: list(resources)}

    async def list_catalog_items(self, kind: ItemKind, limit: int) -> list[dict[str, Any]]:
        if kind not in self._entries:
            raise CatalogStoreError(f"unknown catalog kind {kind!r}")
        return [dict(e, kind=kind.value) for e in self._entries[kind][:max(limit, 0)] if isinstance(e, dict)]

    def valid_items(self) -> list[CatalogItem]:
        """Every parseable item across kinds, for building a similarity index."""
        items: list[CatalogItem] = []
        for kind, entries in self._entries.items():
            for entry in entries:
                try:
                    items.append(CatalogItem.model_validate({**entry, "kind": kind.value}))
                except (ValidationError, TypeError) as e:
                    logger.warning("Not indexing malformed %s entry: %s", kind.value, e)
        return items


def stores_from_file(path: str | Path) -> tuple[JsonProfileStore, JsonCatalogStore]:
    data = load_seed(path)
    return JsonProfileStore(data["profiles"]), JsonCatalogStore(data["jobs"], data["resources"])
