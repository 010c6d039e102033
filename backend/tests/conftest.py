"""Shared test configuration, fakes for the engine's collaborators, and fixtures."""

import asyncio

import pytest

from models.schemas.catalog_item import CatalogItem
from models.schemas.enums import ItemKind
from models.schemas.profile import Profile
from services.collaborators import (
    CatalogStore,
    CatalogStoreError,
    ProfileStore,
    ProfileStoreError,
    SimilarityIndex,
    SimilarityIndexError,
)
from services.matching.engine import RecommendationEngine
from services.matching.engine_config import EngineConfig


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: loads real ML models (slow, needs GPU/CPU)"
    )


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------

class FakeProfileStore(ProfileStore):
    def __init__(self, profiles=(), fail=False):
        self.profiles = {p.id: p for p in profiles}
        self.fail = fail
        self.calls = 0

    async def get_profile(self, profile_id):
        self.calls += 1
        if self.fail:
            raise ProfileStoreError("profile store offline")
        return self.profiles.get(profile_id)


class FakeCatalogStore(CatalogStore):
    def __init__(self, jobs=(), resources=(), fail=False):
        self.entries = {ItemKind.JOB: list(jobs), ItemKind.RESOURCE: list(resources)}
        self.fail = fail
        self.calls = 0
        self.limits = []

    async def list_catalog_items(self, kind, limit):
        self.calls += 1
        self.limits.append(limit)
        if self.fail:
            raise CatalogStoreError("catalog offline")
        return self.entries[kind][:limit]


class FakeSimilarityIndex(SimilarityIndex):
    """Returns canned ``(item_id, distance)`` pairs, optionally slowly or failing."""

    def __init__(self, results=(), delay=0.0, error=None):
        self.results = list(results)
        self.delay = delay
        self.error = error
        self.calls = []
        self.finished = False

    async def query_similar(self, kind, query_text, top_k, timeout):
        self.calls.append((kind, query_text, top_k))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.finished = True
        return self.results[:top_k]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def config():
    return EngineConfig(semantic_timeout_ms=100)


@pytest.fixture
def frontend_profile():
    return Profile(
        id="u1",
        skills=["JavaScript", "React"],
        interests=["Frontend Development"],
        preferred_track="Web Development",
        experience_level="Junior",
        education_level="BSc Computer Science",
    )


@pytest.fixture
def empty_profile():
    return Profile(id="u0", skills=[], interests=[])


@pytest.fixture
def jobs():
    return [
        CatalogItem(
            id="j1", kind="job", title="Frontend Developer",
            attributes=["JavaScript", "React", "TypeScript", "HTML"],
            track="Frontend", experience_level="Junior", platform="manual",
        ),
        CatalogItem(
            id="j2", kind="job", title="Python Developer",
            attributes=["Python", "Django"],
            track="Backend Development", experience_level="Junior", platform="manual",
        ),
        CatalogItem(
            id="j3", kind="job", title="Senior UI Engineer",
            attributes=["ReactJS", "CSS"],
            track="Web Development", experience_level="Senior", platform="manual",
        ),
        CatalogItem(
            id="j4", kind="job", title="Ghost Posting", attributes=[],
            track="Web Development", platform="manual",
        ),
    ]


@pytest.fixture
def resources():
    return [
        CatalogItem(
            id="r1", kind="resource", title="React - The Complete Guide",
            attributes=["React", "JavaScript", "Frontend Development"],
            cost="Paid", platform="Udemy",
        ),
        CatalogItem(
            id="r2", kind="resource", title="MongoDB University",
            attributes=["MongoDB", "Database", "NoSQL"],
            cost="Free", platform="MongoDB",
        ),
        CatalogItem(
            id="r3", kind="resource", title="Frontend Development Libraries",
            attributes=["HTML", "CSS", "Frontend Development"],
            cost="Free", platform="freeCodeCamp",
        ),
    ]


@pytest.fixture
def make_engine(frontend_profile, empty_profile, jobs, resources, config):
    """Factory: build an engine over the fixture data with a chosen similarity index."""

    def _make(similarity=None, profiles=None, catalog=None, engine_config=None):
        return RecommendationEngine(
            profiles=profiles or FakeProfileStore([frontend_profile, empty_profile]),
            catalog=catalog or FakeCatalogStore(jobs=jobs, resources=resources),
            similarity=similarity,
            config=engine_config or config,
        )

    return _make


@pytest.fixture
def fake_index():
    return FakeSimilarityIndex


@pytest.fixture
def fake_profiles():
    return FakeProfileStore


@pytest.fixture
def fake_catalog():
    return FakeCatalogStore


@pytest.fixture
def index_error():
    return SimilarityIndexError
