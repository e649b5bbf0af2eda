from datetime import datetime, timezone

import pytest

from journal_brain.memory.ranking.hybrid_ranker import HybridRanker, RankingCandidate
from journal_brain.memory.ranking.profiles import CURRENT_STATE, LATEST, LIFELONG, select_profile
from journal_brain.memory.retrieval.query import RetrieveQuery
from journal_brain.memory.retrieval.results import Provenance
from tests.fakes import NOW, WORK_VECTOR, FAMILY_VECTOR, days_ago

def query(**arguments) -> RetrieveQuery:
    return RetrieveQuery.from_arguments({"scope": "chunks", **arguments})

def candidates_from(chunks) -> list[RankingCandidate]:
    return [
        RankingCandidate(
            id=c.id,
            date=c.date,
            text=c.text,
            embedding=c.embedding,
            provenance=Provenance(source="chunks", entry_id=c.entry_id, chunk_id=c.id),
        )
        for c in chunks
    ]

@pytest.mark.asyncio
async def test_scores_and_components_stay_in_unit_interval(ranker, chunks):
    ranked = await ranker.rank(
        candidates_from(chunks),
        query(filter={"similarTo": "work pressure", "keyword": "deadline"}, limit=50),
        now=NOW,
    )
    assert len(ranked) == len(chunks)
    for item in ranked:
        assert 0.0 <= item.score <= 1.0
        for value in (item.components.similarity, item.components.recency_decay, item.components.keyword_match):
            assert value is not None
            assert 0.0 <= value <= 1.0

@pytest.mark.asyncio
async def test_score_is_convex_combination_under_profile(ranker, chunks):
    q = query(filter={"similarTo": "work pressure", "keyword": "deadline"})
    ranked = await ranker.rank(candidates_from(chunks), q, weights=CURRENT_STATE, now=NOW)
    for item in ranked:
        c = item.components
        expected = (
            c.similarity * CURRENT_STATE.similarity
            + c.recency_decay * CURRENT_STATE.recency
            + c.keyword_match * CURRENT_STATE.keyword
        )
        assert item.score == pytest.approx(expected)

@pytest.mark.asyncio
async def test_ranking_is_idempotent(ranker, chunks):
    q = query(filter={"similarTo": "time with family"})
    first = await ranker.rank(candidates_from(chunks), q, now=NOW)
    second = await ranker.rank(candidates_from(chunks), q, now=NOW)
    assert [(i.id, i.score) for i in first] == [(i.id, i.score) for i in second]

@pytest.mark.asyncio
async def test_limit_one_returns_at_most_one_item(ranker, chunks):
    ranked = await ranker.rank(candidates_from(chunks), query(limit=1), now=NOW)
    assert len(ranked) == 1

@pytest.mark.asyncio
async def test_empty_candidates_skip_collaborators(ranker, embedding_client):
    assert await ranker.rank([], query(filter={"similarTo": "work pressure"}), now=NOW) == []
    assert embedding_client.calls == []

@pytest.mark.asyncio
async def test_query_is_embedded_once_as_retrieval_query(ranker, embedding_client, chunks):
    await ranker.rank(candidates_from(chunks), query(filter={"similarTo": "work pressure"}), now=NOW)
    assert embedding_client.calls == [(["work pressure"], "RETRIEVAL_QUERY")]

@pytest.mark.asyncio
async def test_latest_query_orders_newest_first(ranker, chunks):
    ranked = await ranker.rank(candidates_from(chunks), query(sort="date_desc", limit=3), now=NOW)
    assert [item.id for item in ranked] == ["c6", "c5", "c4"]
    assert ranked[0].components.similarity is None

@pytest.mark.asyncio
async def test_lifelong_query_surfaces_old_relevant_entries(ranker, chunks):
    q = query(filter={"similarTo": "work pressure", "recencyHalfLife": 9999}, limit=2)
    ranked = await ranker.rank(candidates_from(chunks), q, now=NOW)
    # the 400 day old work entry ranks with the 3 day old one, recency carries no weight
    assert {item.id for item in ranked} == {"c1", "c5"}
    assert ranked[0].score == pytest.approx(ranked[1].score)
    assert ranked[0].id == "c1" # fetch order kept on ties

@pytest.mark.asyncio
async def test_keyword_hits_score_and_misses_get_zero(ranker, chunks):
    ranked = await ranker.rank(candidates_from(chunks), query(filter={"keyword": "deadline"}, limit=10), now=NOW)
    by_id = {item.id: item for item in ranked}
    assert by_id["c1"].components.keyword_match > 0.0
    assert by_id["c3"].components.keyword_match == 0.0

@pytest.mark.asyncio
async def test_equal_scores_keep_fetch_order(ranker):
    same_day = days_ago(5)
    candidates = [
        RankingCandidate(id=name, date=same_day, provenance=Provenance(source="chunks"))
        for name in ("x", "y", "z")
    ]
    ranked = await ranker.rank(candidates, query(), now=NOW)
    assert [item.id for item in ranked] == ["x", "y", "z"]

@pytest.mark.asyncio
async def test_explicit_half_life_overrides_profile(ranker):
    candidate = RankingCandidate(id="a", date=days_ago(30), provenance=Provenance(source="chunks"))
    explicit = await ranker.rank([candidate], query(sort="date_desc", filter={"recencyHalfLife": 30}), now=NOW)
    implicit = await ranker.rank([candidate], query(sort="date_desc"), now=NOW)
    assert explicit[0].components.recency_decay == pytest.approx(0.5)
    # the latest profile's own half-life applies when none was given
    assert implicit[0].components.recency_decay == pytest.approx(0.5 ** (30 / LATEST.recency_half_life))

@pytest.mark.asyncio
async def test_magnitude_is_clamped(store, embedding_client):
    ranker = HybridRanker(embedding_client=embedding_client, store=store)
    candidate = RankingCandidate(id="m", date=days_ago(1), magnitude=1.7, provenance=Provenance(source="analytics"))
    ranked = await ranker.rank([candidate], query(), weights=LIFELONG, now=NOW)
    assert ranked[0].components.magnitude == 1.0
    assert ranked[0].score == pytest.approx(LIFELONG.magnitude)

@pytest.mark.asyncio
async def test_candidates_without_embedding_have_no_similarity(ranker):
    candidates = [
        RankingCandidate(id="with", date=days_ago(1), embedding=WORK_VECTOR, provenance=Provenance(source="chunks")),
        RankingCandidate(id="without", date=days_ago(1), provenance=Provenance(source="chunks")),
        RankingCandidate(id="other", date=days_ago(1), embedding=FAMILY_VECTOR, provenance=Provenance(source="chunks")),
    ]
    ranked = await ranker.rank(candidates, query(filter={"similarTo": "work pressure"}), now=NOW)
    by_id = {item.id: item for item in ranked}
    assert by_id["with"].components.similarity == pytest.approx(1.0)
    assert by_id["without"].components.similarity is None
    assert by_id["other"].components.similarity == pytest.approx(0.0)
    assert ranked[0].id == "with"

@pytest.mark.asyncio
async def test_latest_single_result_is_the_newest_chunk(ranker):
    older = RankingCandidate(id="jan", date=datetime(2025, 1, 1, tzinfo=timezone.utc), text="New year plans.", provenance=Provenance(source="chunks"))
    newer = RankingCandidate(id="jun", date=datetime(2025, 6, 15, tzinfo=timezone.utc), text="Mid June check-in.", provenance=Provenance(source="chunks"))
    q = query(sort="date_desc", limit=1)
    assert select_profile(q) is LATEST

    ranked = await ranker.rank([older, newer], q, now=NOW)
    assert [item.id for item in ranked] == ["jun"]
    assert ranked[0].date == datetime(2025, 6, 15, tzinfo=timezone.utc)

@pytest.mark.asyncio
async def test_lifelong_recency_contribution_is_negligible(ranker):
    recent = RankingCandidate(id="recent", date=days_ago(10), embedding=WORK_VECTOR, provenance=Provenance(source="chunks"))
    ancient = RankingCandidate(id="ancient", date=days_ago(3000), embedding=WORK_VECTOR, provenance=Provenance(source="chunks"))
    q = query(filter={"similarTo": "work pressure", "recencyHalfLife": 9999}, limit=2)
    assert select_profile(q) is LIFELONG

    ranked = await ranker.rank([recent, ancient], q, now=NOW)
    by_id = {item.id: item for item in ranked}
    recency_gap = LIFELONG.recency * abs(by_id["recent"].components.recency_decay - by_id["ancient"].components.recency_decay)
    assert recency_gap < 0.01
    assert abs(by_id["recent"].score - by_id["ancient"].score) < 0.01
