"""End-to-end tests for the recommendation engine with fake collaborators."""

import asyncio
import time

import pytest

from models.schemas.enums import ItemKind, MatchType
from services.collaborators import CatalogStore
from services.matching import prioritizer
from services.matching.engine import PipelineStage, RecommendationEngine, validate_items
from services.matching.engine_config import EngineConfig


def _ids(records):
    return [r.item_id for r in records]


def _dump(records):
    return [r.model_dump() for r in records]


class TestEmptyResults:
    @pytest.mark.asyncio
    async def test_empty_profile_never_reads_catalog(self, fake_profiles, fake_catalog, empty_profile, jobs):
        catalog = fake_catalog(jobs=jobs)
        engine = RecommendationEngine(fake_profiles([empty_profile]), catalog)

        assert await engine.recommend_jobs("u0") == []
        assert await engine.recommend_resources("u0") == []
        assert catalog.calls == 0

    @pytest.mark.asyncio
    async def test_unknown_profile(self, make_engine):
        run = await make_engine().run(ItemKind.JOB, "nobody")
        assert run.records == []
        assert run.error is None

    @pytest.mark.asyncio
    async def test_profile_store_failure(self, make_engine, fake_profiles):
        run = await make_engine(profiles=fake_profiles(fail=True)).run(ItemKind.JOB, "u1")
        assert run.records == []
        assert "profile store" in run.error

    @pytest.mark.asyncio
    async def test_catalog_store_failure(self, make_engine, fake_catalog):
        engine = make_engine(catalog=fake_catalog(fail=True))
        run = await engine.run(ItemKind.RESOURCE, "u1")
        assert run.records == []
        assert "catalog store" in run.error
        assert await engine.recommend_resources("u1") == []

    @pytest.mark.asyncio
    async def test_no_matches(self, make_engine, fake_catalog, jobs):
        engine = make_engine(catalog=fake_catalog(jobs=[jobs[1]]))
        assert await engine.recommend_jobs("u1") == []


class TestCatalogValidation:
    def test_skips_malformed_entries(self):
        raw = [
            {"id": "j1", "required_skills": ["JavaScript"]},
            {"id": "bad-attrs", "required_skills": "JavaScript"},
            {"id": "bad-cost", "required_skills": ["React"], "cost": "Expensive"},
            {"title": "no id", "required_skills": ["React"]},
            42,
            {"id": "j1", "required_skills": ["Duplicate"]},
        ]
        items = validate_items(raw, ItemKind.JOB)
        assert list(items) == ["j1"]
        assert items["j1"].attributes == ["JavaScript"]

    def test_skips_wrong_kind(self, resources):
        assert validate_items(resources, ItemKind.JOB) == {}

    @pytest.mark.asyncio
    async def test_malformed_entries_do_not_fail_the_call(self, make_engine, fake_catalog):
        catalog = fake_catalog(jobs=[
            {"id": "ok", "required_skills": ["React"], "experience_level": "Junior"},
            {"id": "broken", "required_skills": None, "cost": 12},
        ])
        records = await make_engine(catalog=catalog).recommend_jobs("u1")
        assert _ids(records) == ["ok"]


class TestExactOnly:
    @pytest.mark.asyncio
    async def test_job_ranking(self, make_engine):
        run = await make_engine().run(ItemKind.JOB, "u1")

        assert _ids(run.records) == ["j3", "j1"]
        j3, j1 = run.records
        assert j3.match_score == pytest.approx(0.7)
        assert j3.applied_boosts == {prioritizer.TRACK: 0.2}
        assert j1.match_score == pytest.approx(0.6)
        assert j1.applied_boosts == {prioritizer.EXPERIENCE_MEETS: 0.1}
        assert all(r.match_type == MatchType.EXACT for r in run.records)
        assert run.degraded is False
        assert run.stages == [
            PipelineStage.FETCHING_PROFILE,
            PipelineStage.EXACT_MATCHING,
            PipelineStage.SKIPPED,
            PipelineStage.PRIORITIZING,
            PipelineStage.RANKED,
        ]

    @pytest.mark.asyncio
    async def test_key_reasons_attached(self, make_engine):
        j3 = (await make_engine().recommend_jobs("u1"))[0]
        assert j3.key_reasons == [
            "Matches ReactJS; missing CSS",
            "Perfect alignment with your preferred career track",
            "Experience level: Junior (job requires Senior)",
        ]

    @pytest.mark.asyncio
    async def test_resources_use_interests(self, make_engine):
        records = await make_engine().recommend_resources("u1")

        assert _ids(records) == ["r1", "r3"]
        r1, r3 = records
        assert r1.match_score == 1.0
        assert r3.matched_attributes == ["Frontend Development"]
        assert r3.match_score == pytest.approx(1 / 3 + 0.1 + 0.05)
        assert set(r3.applied_boosts) == {prioritizer.FREE, prioritizer.POPULAR_PLATFORM}

    @pytest.mark.asyncio
    async def test_catalog_limit_and_top_n(self, make_engine, fake_catalog, jobs):
        catalog = fake_catalog(jobs=jobs)
        engine = make_engine(catalog=catalog, engine_config=EngineConfig(catalog_limit=7, top_n=1))
        records = await engine.recommend_jobs("u1")
        assert _ids(records) == ["j3"]
        assert catalog.limits == [7]


class TestSemanticEnhancement:
    @pytest.mark.asyncio
    async def test_hybrid_and_semantic_only(self, make_engine, fake_index):
        index = fake_index([("j1", 0.2), ("j2", 0.1)])
        run = await make_engine(similarity=index).run(ItemKind.JOB, "u1")

        assert _ids(run.records) == ["j2", "j1", "j3"]
        j2, j1, j3 = run.records
        assert j2.match_type == MatchType.SEMANTIC
        assert j2.match_score == pytest.approx(0.83)
        assert j2.matched_attributes == []
        assert j1.match_type == MatchType.HYBRID
        assert j1.match_score == pytest.approx(0.72)
        assert j3.match_type == MatchType.EXACT
        assert PipelineStage.SEMANTIC_ENHANCING in run.stages
        assert run.semantic_reason == "ok"
        assert run.degraded is False

    @pytest.mark.asyncio
    async def test_one_record_per_item(self, make_engine, fake_index):
        index = fake_index([("j1", 0.1), ("j1", 0.3), ("j3", 0.4)])
        records = await make_engine(similarity=index).recommend_jobs("u1")
        assert sorted(_ids(records)) == ["j1", "j3"]

    @pytest.mark.asyncio
    async def test_index_hits_for_unknown_items_ignored(self, make_engine, fake_index):
        records = await make_engine(similarity=fake_index([("zz", 0.0), ("j4", 0.0)])).recommend_jobs("u1")
        assert _ids(records) == ["j3", "j1"]

    @pytest.mark.asyncio
    async def test_query_uses_configured_top_k(self, make_engine, fake_index):
        index = fake_index([])
        await make_engine(similarity=index, engine_config=EngineConfig(semantic_top_k=3)).recommend_resources("u1")
        assert index.calls[0][0] == ItemKind.RESOURCE
        assert index.calls[0][2] == 3


class TestDegradation:
    @pytest.mark.asyncio
    async def test_slow_index_matches_exact_only_output(self, make_engine, fake_index):
        baseline = _dump(await make_engine().recommend_jobs("u1"))

        slow = fake_index([("j2", 0.0)], delay=2.0)
        started = time.monotonic()
        run = await make_engine(similarity=slow).run(ItemKind.JOB, "u1")
        elapsed = time.monotonic() - started

        assert elapsed < 1.0
        assert run.degraded is True
        assert run.semantic_reason == "timeout"
        assert run.stages[-1] == PipelineStage.RANKED
        assert _dump(run.records) == baseline

        # the abandoned query never lands in the returned result
        await asyncio.sleep(0.2)
        assert slow.finished is False
        assert _dump(run.records) == baseline

    @pytest.mark.asyncio
    @pytest.mark.parametrize("results, error, reason", [
        ((), "unavailable", "unavailable"),
        ([("j1", "far")], None, "malformed"),
    ])
    async def test_failed_index_degrades(self, make_engine, fake_index, index_error, results, error, reason):
        index = fake_index(results, error=index_error(error) if error else None)
        baseline = _dump(await make_engine().recommend_jobs("u1"))

        run = await make_engine(similarity=index).run(ItemKind.JOB, "u1")
        assert run.degraded is True
        assert run.semantic_reason == reason
        assert _dump(run.records) == baseline

    @pytest.mark.asyncio
    async def test_prioritize_failure_returns_exact_ranking(self, make_engine, monkeypatch):
        def broken(records, profile, config):
            raise RuntimeError("boost table corrupted")

        monkeypatch.setattr(prioritizer, "prioritize_all", broken)
        run = await make_engine().run(ItemKind.JOB, "u1")

        assert run.degraded is True
        assert run.stages[-1] == PipelineStage.DEGRADED
        assert _ids(run.records) == ["j1", "j3"]
        assert [r.match_score for r in run.records] == [pytest.approx(0.5), pytest.approx(0.5)]
        assert all(r.applied_boosts == {} for r in run.records)


class TestProperties:
    @pytest.mark.asyncio
    async def test_scores_bounded_and_attributes_ordered(self, make_engine, fake_index):
        index = fake_index([("j1", 0.0), ("j2", 0.05), ("j3", 1.5)])
        for kind in ItemKind:
            run = await make_engine(similarity=index).run(kind, "u1")
            for record in run.records:
                assert 0.0 <= record.match_score <= 1.0
                attrs = record.item.attributes
                positions = [attrs.index(a) for a in record.matched_attributes]
                assert positions == sorted(positions)
                assert set(record.matched_attributes) | set(record.missing_attributes) == set(attrs)

    @pytest.mark.asyncio
    async def test_ranking_is_monotonic(self, make_engine, fake_index):
        records = await make_engine(similarity=fake_index([("j2", 0.3), ("j1", 0.6)])).recommend_jobs("u1")
        scores = [r.match_score for r in records]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_idempotent(self, make_engine, fake_index):
        engine = make_engine(similarity=fake_index([("r2", 0.2)]))
        first = _dump(await engine.recommend_resources("u1"))
        second = _dump(await engine.recommend_resources("u1"))
        assert first == second

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_independent(self, make_engine, fake_index):
        engine = make_engine(similarity=fake_index([("j1", 0.2), ("r2", 0.2)]))
        sequential = [
            _dump(await engine.recommend_jobs("u1")),
            _dump(await engine.recommend_resources("u1")),
            _dump(await engine.recommend_jobs("u0")),
        ]
        concurrent = await asyncio.gather(
            engine.recommend_jobs("u1"),
            engine.recommend_resources("u1"),
            engine.recommend_jobs("u0"),
        )
        assert [_dump(c) for c in concurrent] == sequential


class UnboundedCatalogStore(CatalogStore):
    """Ignores ``limit`` and hands back every entry it holds."""

    def __init__(self, resources):
        self.resources = list(resources)

    async def list_catalog_items(self, kind, limit):
        return self.resources if kind == ItemKind.RESOURCE else []


class TestCatalogBound:
    @pytest.mark.asyncio
    async def test_engine_caps_oversized_catalog_slice(self, make_engine):
        resources = [
            {"id": f"r{n}", "title": f"React course {n}", "related_skills": ["React"]}
            for n in range(10)
        ]
        engine = make_engine(
            catalog=UnboundedCatalogStore(resources),
            engine_config=EngineConfig(catalog_limit=3),
        )
        records = await engine.recommend_resources("u1")
        assert _ids(records) == ["r0", "r1", "r2"]


class TestApplicationPlatforms:
    @pytest.mark.asyncio
    async def test_attached_to_jobs(self, make_engine):
        j3, j1 = await make_engine().recommend_jobs("u1")
        assert [p.name for p in j3.application_platforms] == [
            "LinkedIn", "BDjobs", "Glassdoor", "Stack Overflow Jobs", "GitHub Jobs",
        ]
        assert [p.name for p in j1.application_platforms] == ["LinkedIn", "BDjobs", "Glassdoor"]

    @pytest.mark.asyncio
    async def test_not_attached_to_resources(self, make_engine):
        records = await make_engine().recommend_resources("u1")
        assert records
        assert all(r.application_platforms == [] for r in records)
