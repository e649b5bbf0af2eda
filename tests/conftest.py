# shared fixtures: seeded in-memory corpus, ranker + retrieval service over it, result cache

import pytest

from journal_brain.memory.ranking.hybrid_ranker import HybridRanker
from journal_brain.memory.retrieval.retrieval_service import RetrievalService
from journal_brain.memory.result_cache import ResultCache
from journal_brain.memory.storage.in_memory_store import InMemoryCorpusStore
from journal_brain.memory.storage.records import (
    ChunkRecord,
    EntryAnalyticsRecord,
    MonthSummaryRecord,
    YearSummaryRecord,
    AgentMemoryRecord,
    MemoryKind,
)
from tests.fakes import (
    FakeEmbeddingClient,
    WORK_VECTOR,
    FAMILY_VECTOR,
    TRAVEL_VECTOR,
    days_ago,
    make_chunk,
    make_analytics,
)

@pytest.fixture
def chunks() -> list[ChunkRecord]:
    return [
        make_chunk("c1", "e1", "Started the new job today, the deadline pressure at work is intense.", days_ago(400), WORK_VECTOR),
        make_chunk("c2", "e1", "Lunch with Sarah helped me calm down after work.", days_ago(400), FAMILY_VECTOR),
        make_chunk("c3", "e2", "Family dinner with mom and dad, lots of laughter.", days_ago(60), FAMILY_VECTOR),
        make_chunk("c4", "e3", "Booked the train to Lisbon for the summer trip.", days_ago(20), TRAVEL_VECTOR),
        make_chunk("c5", "e4", "Another late night at work finishing the quarterly report.", days_ago(3), WORK_VECTOR),
        make_chunk("c6", "e5", "Quiet morning, read a book and went for a run.", days_ago(1), [0.5, 0.5, 0.0]),
    ]

@pytest.fixture
def analytics() -> list[EntryAnalyticsRecord]:
    return [
        make_analytics("a1", days_ago(40), happiness=40, valence=-0.5, anxiety=0.8, sadness=0.6, anger=0.2),
        make_analytics("a2", days_ago(12), happiness=55, valence=0.0),
        make_analytics("a3", days_ago(10), happiness=60, valence=0.1),
        make_analytics("a4", days_ago(5), happiness=75, valence=0.6, joy=0.9),
        make_analytics("a5", days_ago(2), happiness=85, valence=0.8, joy=1.0),
    ]

@pytest.fixture
def month_summaries() -> list[MonthSummaryRecord]:
    return [
        MonthSummaryRecord(id="m-2025-06", year=2025, month=6, summary_text="June has been bright. " * 20, happiness_avg=78, embedding=TRAVEL_VECTOR),
        MonthSummaryRecord(id="m-2025-05", year=2025, month=5, summary_text="May was busy with work.", happiness_avg=62, embedding=WORK_VECTOR),
        MonthSummaryRecord(id="m-2024-01", year=2024, month=1, summary_text="January felt slow.", happiness_avg=50),
    ]

@pytest.fixture
def year_summaries() -> list[YearSummaryRecord]:
    return [
        YearSummaryRecord(id="y-2024", year=2024, summary_text="A year of change.", happiness_avg=64),
        YearSummaryRecord(id="y-2023", year=2023, summary_text="A steady year.", happiness_avg=58),
    ]

@pytest.fixture
def memories() -> list[AgentMemoryRecord]:
    return [
        AgentMemoryRecord(id="mem-1", kind=MemoryKind.INSIGHT, content="Work stress peaks before quarterly reports.", tags=["Work", "stress"], created_at=days_ago(30)),
        AgentMemoryRecord(id="mem-2", kind=MemoryKind.RULE, content="Morning runs lift the whole day.", tags=["health"], created_at=days_ago(10)),
        AgentMemoryRecord(id="mem-3", kind=MemoryKind.COMMITMENT, content="Call mom every Sunday.", tags=["family"], created_at=days_ago(2)),
    ]

@pytest.fixture
def store(chunks, analytics, month_summaries, year_summaries, memories) -> InMemoryCorpusStore:
    return InMemoryCorpusStore(
        chunks=chunks,
        analytics=analytics,
        month_summaries=month_summaries,
        year_summaries=year_summaries,
        memories=memories,
    )

@pytest.fixture
def embedding_client() -> FakeEmbeddingClient:
    return FakeEmbeddingClient(
        vectors={
            "work pressure": WORK_VECTOR,
            "time with family": FAMILY_VECTOR,
            "travel plans": TRAVEL_VECTOR,
        }
    )

@pytest.fixture
def ranker(embedding_client, store) -> HybridRanker:
    return HybridRanker(embedding_client=embedding_client, store=store)

@pytest.fixture
def retrieval_service(store, ranker) -> RetrievalService:
    return RetrievalService(store=store, ranker=ranker)

@pytest.fixture
def result_cache() -> ResultCache:
    return ResultCache()
