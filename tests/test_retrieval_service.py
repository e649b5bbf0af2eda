import pytest

from journal_brain.common.errors import InvalidQuery
from journal_brain.memory.ranking.hybrid_ranker import HybridRanker
from journal_brain.memory.retrieval.query import RetrieveQuery, Sentiment
from journal_brain.memory.retrieval.results import EmptyResult, RetrieveResult
from journal_brain.memory.retrieval.retrieval_service import RetrievalService, classify_sentiment
from journal_brain.memory.storage.in_memory_store import InMemoryCorpusStore
from tests.fakes import NOW

async def retrieve(service: RetrievalService, **arguments):
    return await service.retrieve(RetrieveQuery.from_arguments(arguments), now=NOW)

@pytest.mark.parametrize(
    "valence, expected",
    [(0.8, Sentiment.POSITIVE), (0.2, Sentiment.NEUTRAL), (0.0, Sentiment.NEUTRAL), (-0.2, Sentiment.NEUTRAL), (-0.5, Sentiment.NEGATIVE)],
)
def test_classify_sentiment(valence, expected):
    assert classify_sentiment(valence) == expected

# =====================================================================
# chunks / entries
# =====================================================================

@pytest.mark.asyncio
async def test_entity_filter_is_case_insensitive(retrieval_service):
    result = await retrieve(retrieval_service, scope="chunks", filter={"entities": ["SARAH"]})
    assert isinstance(result, RetrieveResult)
    assert [item.id for item in result.items] == ["c2"]
    assert result.items[0].provenance.chunk_id == "c2"
    assert result.items[0].provenance.entry_id == "e1"

@pytest.mark.asyncio
async def test_nothing_left_after_filtering_is_an_explicit_empty_result(retrieval_service):
    result = await retrieve(retrieval_service, scope="chunks", filter={"topics": ["astronomy"]})
    assert isinstance(result, EmptyResult)
    assert result.reason
    assert result.to_json() == {"empty": True, "reason": result.reason}

@pytest.mark.asyncio
async def test_date_range_limits_candidates(retrieval_service):
    result = await retrieve(retrieval_service, scope="chunks", filter={"dateFrom": "2025-06-01", "dateTo": "2025-06-15"}, sort="date_asc")
    assert {item.id for item in result.items} == {"c5", "c6"}

@pytest.mark.asyncio
async def test_ids_filter(retrieval_service):
    result = await retrieve(retrieval_service, scope="chunks", filter={"ids": ["c3", "c5", "missing"]})
    assert {item.id for item in result.items} == {"c3", "c5"}

@pytest.mark.asyncio
async def test_ids_filter_respects_date_bounds(retrieval_service):
    result = await retrieve(retrieval_service, scope="chunks", filter={"ids": ["c1", "c6"], "dateFrom": "2025-06-01"})
    assert [item.id for item in result.items] == ["c6"]

    result = await retrieve(retrieval_service, scope="chunks", filter={"ids": ["c1", "c6"], "dateTo": "2025-01-01"})
    assert [item.id for item in result.items] == ["c1"]

@pytest.mark.asyncio
async def test_ids_outside_date_range_are_an_empty_result(retrieval_service):
    result = await retrieve(retrieval_service, scope="chunks", filter={"ids": ["c1"], "dateFrom": "2025-06-01"})
    assert isinstance(result, EmptyResult)
    assert result.reason == "No chunks found matching filters"

@pytest.mark.asyncio
async def test_min_similarity_filters_after_ranking(retrieval_service):
    result = await retrieve(retrieval_service, scope="chunks", filter={"similarTo": "travel plans"})
    assert [item.id for item in result.items] == ["c4"]
    assert result.metadata.similarity_stats is not None

@pytest.mark.asyncio
async def test_everything_below_min_similarity_is_an_empty_result(retrieval_service):
    # unknown text embeds to a zero vector, so every similarity is 0
    result = await retrieve(retrieval_service, scope="chunks", filter={"similarTo": "something unrelated"})
    assert isinstance(result, EmptyResult)
    assert "similarity" in result.reason

@pytest.mark.asyncio
async def test_entries_keep_one_chunk_per_entry(retrieval_service):
    result = await retrieve(retrieval_service, scope="entries", limit=50)
    entry_ids = [item.provenance.entry_id for item in result.items]
    assert len(entry_ids) == len(set(entry_ids)) == 5

@pytest.mark.asyncio
async def test_result_json_shape(retrieval_service):
    payload = (await retrieve(retrieval_service, scope="chunks", sort="date_desc", limit=2)).to_json()
    assert payload["metadata"]["count"] == 2
    assert payload["metadata"]["confidence"] == "low"
    assert set(payload["metadata"]["dateRange"]) == {"start", "end", "spanDays"}
    item = payload["items"][0]
    assert item["id"] == "c6"
    assert item["date"] == "2025-06-14T12:00:00Z"
    assert item["provenance"] == {"source": "chunks", "entryId": "e5", "chunkId": "c6"}
    assert "recencyDecay" in item["scoreComponents"]

# =====================================================================
# memory
# =====================================================================

@pytest.mark.asyncio
async def test_memory_by_tags_is_case_insensitive_and_updates_access(retrieval_service, store):
    result = await retrieve(retrieval_service, scope="memory", filter={"topics": ["work"]})
    assert [item.id for item in result.items] == ["mem-1"]
    assert result.items[0].provenance.memory_id == "mem-1"
    memory = await store.get_memory("mem-1")
    assert memory.access_count == 1
    assert memory.last_accessed == NOW

@pytest.mark.asyncio
async def test_recent_memories_newest_first(retrieval_service):
    result = await retrieve(retrieval_service, scope="memory")
    assert [item.id for item in result.items] == ["mem-3", "mem-2", "mem-1"]

@pytest.mark.asyncio
async def test_memory_date_range(retrieval_service):
    result = await retrieve(retrieval_service, scope="memory", filter={"dateFrom": "2025-06-01", "dateTo": "2025-06-15"}, sort="date_asc")
    assert [item.id for item in result.items] == ["mem-2", "mem-3"]

class FailingAccessStore(InMemoryCorpusStore):
    async def update_memory_access(self, memory_id, accessed_at):
        raise RuntimeError("db is read-only")

@pytest.mark.asyncio
async def test_failed_access_update_does_not_block_reads(memories, embedding_client):
    store = FailingAccessStore(memories=memories)
    service = RetrievalService(store=store, ranker=HybridRanker(embedding_client=embedding_client, store=store))
    result = await retrieve(service, scope="memory")
    assert result.metadata.count == 3
    assert service.failed_access_updates == 3

# =====================================================================
# analytics / summaries
# =====================================================================

@pytest.mark.asyncio
async def test_analytics_sentiment_filter(retrieval_service):
    result = await retrieve(retrieval_service, scope="analytics", filter={"sentiment": "positive"})
    assert {item.id for item in result.items} == {"a4", "a5"}
    for item in result.items:
        assert set(item.values) == {"happiness", "valence", "arousal"}
        assert item.components.magnitude == pytest.approx(item.values["happiness"] / 100)

@pytest.mark.asyncio
async def test_analytics_without_rows_is_empty(retrieval_service):
    result = await retrieve(retrieval_service, scope="analytics", filter={"dateFrom": "2020-01-01", "dateTo": "2020-12-31"})
    assert isinstance(result, EmptyResult)

@pytest.mark.asyncio
async def test_timeline_view_is_chronological_and_ignores_limit(retrieval_service):
    result = await retrieve(retrieval_service, scope="analytics", view="timeline", limit=2)
    assert [item.id for item in result.items] == ["a1", "a2", "a3", "a4", "a5"]
    assert result.items[0].score == pytest.approx(0.4)

@pytest.mark.asyncio
async def test_stats_view_happiness(retrieval_service):
    result = await retrieve(retrieval_service, scope="analytics", view="stats")
    assert len(result.items) == 1
    item = result.items[0]
    assert item.id == "stats_analytics_happiness"
    assert item.values == {"mean": pytest.approx(63.0), "min": 40.0, "max": 85.0, "count": 5.0}

@pytest.mark.asyncio
async def test_stats_view_derived_stress(retrieval_service):
    result = await retrieve(retrieval_service, scope="analytics", view="stats", filter={"metric": "stress"})
    values = result.items[0].values
    assert values["max"] == pytest.approx(77.0)
    assert values["min"] == pytest.approx(72.5)

@pytest.mark.asyncio
async def test_histogram_view_is_explicitly_unimplemented(retrieval_service):
    result = await retrieve(retrieval_service, scope="analytics", view="histogram")
    assert isinstance(result, EmptyResult)
    assert "histogram" in result.reason

@pytest.mark.asyncio
async def test_month_summaries_timeline(retrieval_service):
    result = await retrieve(retrieval_service, scope="summaries", filter={"timeGranularity": "month"}, view="timeline")
    assert [item.id for item in result.items] == ["m-2024-01", "m-2025-05", "m-2025-06"]
    assert result.items[0].provenance.summary_id == "m-2024-01"

@pytest.mark.asyncio
async def test_year_summaries_in_range(retrieval_service):
    result = await retrieve(retrieval_service, scope="summaries", filter={"timeGranularity": "year", "dateFrom": "2024-03-01"})
    assert [item.id for item in result.items] == ["y-2024"]

@pytest.mark.asyncio
async def test_summaries_reject_derived_metrics(retrieval_service):
    with pytest.raises(InvalidQuery):
        await retrieve(retrieval_service, scope="summaries", filter={"timeGranularity": "month", "metric": "energy"})
