# protocol for the durable corpus storage collaborator
# the retrieval layer only depends on this interface, see InMemoryCorpusStore and SQLCorpusStore

from datetime import datetime
from typing import Optional, Protocol

from journal_brain.memory.storage.records import (
    ChunkRecord,
    EntryAnalyticsRecord,
    MonthSummaryRecord,
    YearSummaryRecord,
    AgentMemoryRecord,
)

class CorpusStore(Protocol):
    """
    Read (and minimal write) operations the retrieval layer needs from storage.
    - All range queries are inclusive and return rows in ascending date order.
    - keyword_search returns (id, raw_score) pairs in SQLite FTS5 bm25() convention:
      scores are negative and a lower (more negative) score is a stronger match.
    """

    # chunks
    async def get_chunks_by_date_range(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[ChunkRecord]: ...
    async def get_chunks_by_ids(self, ids: list[str]) -> list[ChunkRecord]: ...
    async def get_all_chunks(self) -> list[ChunkRecord]: ...
    async def keyword_search(self, query: str, limit: int) -> list[tuple[str, float]]: ...

    # analytics + summaries
    async def get_analytics_by_date_range(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[EntryAnalyticsRecord]: ...
    async def get_month_summaries(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[MonthSummaryRecord]: ...
    async def get_year_summaries(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[YearSummaryRecord]: ...

    # agent memory
    async def save_memory(self, memory: AgentMemoryRecord) -> None: ...
    async def get_memories_by_tags(self, tags: list[str]) -> list[AgentMemoryRecord]: ...
    async def get_memories_by_date_range(self, date_from: datetime, date_to: datetime) -> list[AgentMemoryRecord]: ...
    async def get_recent_memories(self, limit: int) -> list[AgentMemoryRecord]: ...
    async def update_memory_access(self, memory_id: str, accessed_at: datetime) -> bool: ...
