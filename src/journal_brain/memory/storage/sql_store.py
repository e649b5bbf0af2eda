# CorpusStore backed by the main SQL db (SQLAlchemy async + aiosqlite)
# thin adapter over the per-table CRUD modules, keyword search uses SQLite FTS5 bm25()

from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from journal_brain.common.db.crud.corpus import (
    chunk_crud,
    analytics_crud,
    summaries_crud,
    agent_memory_crud,
)
from journal_brain.memory.storage.records import (
    ChunkRecord,
    EntryAnalyticsRecord,
    MonthSummaryRecord,
    YearSummaryRecord,
    AgentMemoryRecord,
)

class SQLCorpusStore():
    def __init__(self, main_db_engine: AsyncEngine):
        self.main_db_engine = main_db_engine

    # seeding / ingestion
    async def add_chunks(self, chunks: list[ChunkRecord]) -> None:
        await chunk_crud.save_chunks(chunks, self.main_db_engine)

    async def add_analytics(self, analytics: list[EntryAnalyticsRecord]) -> None:
        await analytics_crud.save_analytics(analytics, self.main_db_engine)

    async def add_month_summaries(self, summaries: list[MonthSummaryRecord]) -> None:
        await summaries_crud.save_month_summaries(summaries, self.main_db_engine)

    async def add_year_summaries(self, summaries: list[YearSummaryRecord]) -> None:
        await summaries_crud.save_year_summaries(summaries, self.main_db_engine)

    # chunks
    async def get_chunks_by_date_range(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[ChunkRecord]:
        return await chunk_crud.get_chunks_by_date_range(date_from, date_to, self.main_db_engine)

    async def get_chunks_by_ids(self, ids: list[str]) -> list[ChunkRecord]:
        return await chunk_crud.get_chunks_by_ids(ids, self.main_db_engine)

    async def get_all_chunks(self) -> list[ChunkRecord]:
        return await chunk_crud.get_all_chunks(self.main_db_engine)

    async def keyword_search(self, query: str, limit: int) -> list[tuple[str, float]]:
        return await chunk_crud.keyword_search_chunks(query, limit, self.main_db_engine)

    # analytics + summaries
    async def get_analytics_by_date_range(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[EntryAnalyticsRecord]:
        return await analytics_crud.get_analytics_by_date_range(date_from, date_to, self.main_db_engine)

    async def get_month_summaries(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[MonthSummaryRecord]:
        return await summaries_crud.get_month_summaries(date_from, date_to, self.main_db_engine)

    async def get_year_summaries(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[YearSummaryRecord]:
        return await summaries_crud.get_year_summaries(date_from, date_to, self.main_db_engine)

    # agent memory
    async def save_memory(self, memory: AgentMemoryRecord) -> None:
        await agent_memory_crud.save_memory(memory, self.main_db_engine)

    async def get_memory(self, memory_id: str) -> Optional[AgentMemoryRecord]:
        return await agent_memory_crud.get_memory_by_id(memory_id, self.main_db_engine)

    async def get_memories_by_tags(self, tags: list[str]) -> list[AgentMemoryRecord]:
        return await agent_memory_crud.get_memories_by_tags(tags, self.main_db_engine)

    async def get_memories_by_date_range(self, date_from: datetime, date_to: datetime) -> list[AgentMemoryRecord]:
        return await agent_memory_crud.get_memories_by_date_range(date_from, date_to, self.main_db_engine)

    async def get_recent_memories(self, limit: int) -> list[AgentMemoryRecord]:
        return await agent_memory_crud.get_recent_memories(limit, self.main_db_engine)

    async def update_memory_access(self, memory_id: str, accessed_at: datetime) -> bool:
        return await agent_memory_crud.update_memory_access(memory_id, accessed_at, self.main_db_engine)
