# in-process CorpusStore, used for tests, local experiments and seeding demos
# keyword search uses BM25+ (rank_bm25) over chunk text, scores are returned in FTS5 convention (negated)

import re
from datetime import datetime
from typing import Optional

from rank_bm25 import BM25Plus

from journal_brain.memory.storage.records import (
    ChunkRecord,
    EntryAnalyticsRecord,
    MonthSummaryRecord,
    YearSummaryRecord,
    AgentMemoryRecord,
)
from journal_brain.common.utils.time_utils import month_period, year_period
from journal_brain.common.logging.logger import logger

def tokenize(text: str) -> list[str]:
    """Lowercases and extracts alphanumeric words."""
    return re.findall(r"\w+", text.lower())

def _in_range(value: datetime, date_from: Optional[datetime], date_to: Optional[datetime]) -> bool:
    if date_from is not None and value < date_from:
        return False
    if date_to is not None and value > date_to:
        return False
    return True

def _overlaps(start: datetime, end: datetime, date_from: Optional[datetime], date_to: Optional[datetime]) -> bool:
    if date_from is not None and end < date_from:
        return False
    if date_to is not None and start > date_to:
        return False
    return True

class InMemoryCorpusStore():
    """
    Dict/list backed implementation of the CorpusStore protocol.
    - Range queries return rows sorted by date ascending (stable for equal dates).
    - The BM25 index is rebuilt lazily after chunks change.
    """

    def __init__(
        self,
        chunks: Optional[list[ChunkRecord]] = None,
        analytics: Optional[list[EntryAnalyticsRecord]] = None,
        month_summaries: Optional[list[MonthSummaryRecord]] = None,
        year_summaries: Optional[list[YearSummaryRecord]] = None,
        memories: Optional[list[AgentMemoryRecord]] = None,
    ):
        self._chunks: list[ChunkRecord] = list(chunks or [])
        self._analytics: list[EntryAnalyticsRecord] = list(analytics or [])
        self._month_summaries: list[MonthSummaryRecord] = list(month_summaries or [])
        self._year_summaries: list[YearSummaryRecord] = list(year_summaries or [])
        self._memories: dict[str, AgentMemoryRecord] = {m.id: m for m in (memories or [])}
        self._bm25: Optional[BM25Plus] = None
        self._bm25_ids: list[str] = []
        self._bm25_tokens: list[set[str]] = []

    # =====================================================================
    # Seeding
    # =====================================================================

    def add_chunks(self, chunks: list[ChunkRecord]) -> None:
        self._chunks.extend(chunks)
        self._bm25 = None # invalidate keyword index

    def add_analytics(self, analytics: list[EntryAnalyticsRecord]) -> None:
        self._analytics.extend(analytics)

    def add_month_summaries(self, summaries: list[MonthSummaryRecord]) -> None:
        self._month_summaries.extend(summaries)

    def add_year_summaries(self, summaries: list[YearSummaryRecord]) -> None:
        self._year_summaries.extend(summaries)

    # =====================================================================
    # Chunks
    # =====================================================================

    async def get_chunks_by_date_range(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[ChunkRecord]:
        matches = [c for c in self._chunks if _in_range(c.date, date_from, date_to)]
        return sorted(matches, key=lambda c: c.date)

    async def get_chunks_by_ids(self, ids: list[str]) -> list[ChunkRecord]:
        wanted = set(ids)
        return sorted((c for c in self._chunks if c.id in wanted), key=lambda c: c.date)

    async def get_all_chunks(self) -> list[ChunkRecord]:
        return sorted(self._chunks, key=lambda c: c.date)

    async def keyword_search(self, query: str, limit: int) -> list[tuple[str, float]]:
        """
        BM25+ keyword search over chunk text.
        Returns (chunk_id, -bm25) for every chunk containing a query term, best match first.
        NOTE: BM25+ keeps idf positive, so terms present in half (or most) of a small corpus still score.
        """
        query_tokens = tokenize(query)
        if not query_tokens or not self._chunks:
            return []
        if self._bm25 is None:
            self._bm25_ids = [c.id for c in self._chunks]
            self._bm25_tokens = [set(tokenize(c.text)) for c in self._chunks]
            self._bm25 = BM25Plus([tokenize(c.text) or [""] for c in self._chunks])
        scores = self._bm25.get_scores(query_tokens)
        wanted = set(query_tokens)
        hits = [
            (chunk_id, -float(score))
            for chunk_id, tokens, score in zip(self._bm25_ids, self._bm25_tokens, scores)
            if wanted & tokens
        ]
        hits.sort(key=lambda hit: hit[1])
        return hits[:limit]

    # =====================================================================
    # Analytics + summaries
    # =====================================================================

    async def get_analytics_by_date_range(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[EntryAnalyticsRecord]:
        matches = [a for a in self._analytics if _in_range(a.date, date_from, date_to)]
        return sorted(matches, key=lambda a: a.date)

    async def get_month_summaries(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[MonthSummaryRecord]:
        matches = [s for s in self._month_summaries if _overlaps(*month_period(s.year, s.month), date_from, date_to)]
        return sorted(matches, key=lambda s: (s.year, s.month))

    async def get_year_summaries(self, date_from: Optional[datetime], date_to: Optional[datetime]) -> list[YearSummaryRecord]:
        matches = [s for s in self._year_summaries if _overlaps(*year_period(s.year), date_from, date_to)]
        return sorted(matches, key=lambda s: s.year)

    # =====================================================================
    # Agent memory
    # =====================================================================

    async def save_memory(self, memory: AgentMemoryRecord) -> None:
        self._memories[memory.id] = memory
        logger.info(f"Saved memory '{memory.id}' of kind '{memory.kind.value}'")

    async def get_memories_by_tags(self, tags: list[str]) -> list[AgentMemoryRecord]:
        if not tags:
            return []
        wanted = {t.lower() for t in tags}
        return [m for m in self._memories.values() if wanted & {t.lower() for t in m.tags}]

    async def get_memories_by_date_range(self, date_from: datetime, date_to: datetime) -> list[AgentMemoryRecord]:
        return [m for m in self._memories.values() if _in_range(m.created_at, date_from, date_to)]

    async def get_recent_memories(self, limit: int) -> list[AgentMemoryRecord]:
        ordered = sorted(self._memories.values(), key=lambda m: m.created_at, reverse=True)
        return ordered[:limit]

    async def update_memory_access(self, memory_id: str, accessed_at: datetime) -> bool:
        memory = self._memories.get(memory_id)
        if memory is None:
            return False
        self._memories[memory_id] = memory.model_copy(
            update={"last_accessed": accessed_at, "access_count": memory.access_count + 1}
        )
        return True

    async def get_memory(self, memory_id: str) -> Optional[AgentMemoryRecord]:
        return self._memories.get(memory_id)
