import pytest

from journal_brain.memory.storage.in_memory_store import InMemoryCorpusStore
from tests.fakes import days_ago, make_chunk

@pytest.mark.asyncio
async def test_two_chunk_corpus_keyword_hit():
    store = InMemoryCorpusStore(chunks=[
        make_chunk("k1", "e1", "The deadline moved to Friday.", days_ago(2)),
        make_chunk("k2", "e2", "Walked by the river after dinner.", days_ago(1)),
    ])
    hits = await store.keyword_search("deadline", 10)
    assert [chunk_id for chunk_id, _ in hits] == ["k1"]
    assert hits[0][1] < 0

@pytest.mark.asyncio
async def test_common_terms_still_match(store):
    # "work" appears in half of the seeded chunks
    hits = await store.keyword_search("work", 10)
    assert {chunk_id for chunk_id, _ in hits} == {"c1", "c2", "c5"}
    assert all(score < 0 for _, score in hits)

@pytest.mark.asyncio
async def test_keyword_results_are_best_first_and_limited(store):
    hits = await store.keyword_search("deadline work", 10)
    assert hits[0][0] == "c1" # matches both terms
    assert [score for _, score in hits] == sorted(score for _, score in hits)
    assert len(await store.keyword_search("deadline work", 2)) == 2

@pytest.mark.asyncio
async def test_keyword_misses_and_blank_queries(store):
    assert await store.keyword_search("volcano", 10) == []
    assert await store.keyword_search("?!", 10) == []
    assert await InMemoryCorpusStore().keyword_search("deadline", 10) == []

@pytest.mark.asyncio
async def test_added_chunks_are_searchable(store):
    assert await store.keyword_search("volcano", 10) == []
    store.add_chunks([make_chunk("c7", "e6", "Hiked up the old volcano.", days_ago(0))])
    assert [chunk_id for chunk_id, _ in await store.keyword_search("volcano", 10)] == ["c7"]
