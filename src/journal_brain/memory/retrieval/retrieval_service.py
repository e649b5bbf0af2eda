# scope dispatch for retrieve queries: fetch candidates, filter, rank, shape the result

from datetime import datetime
from typing import Optional

from journal_brain.common.errors import InvalidQuery
from journal_brain.common.utils.time_utils import utc_now
from journal_brain.memory.ranking import scoring
from journal_brain.memory.ranking.hybrid_ranker import HybridRanker, RankingCandidate
from journal_brain.memory.retrieval.query import (
    RetrieveQuery,
    Scope,
    SortOrder,
    ResultView,
    Sentiment,
    Metric,
    TimeGranularity,
)
from journal_brain.memory.retrieval.results import (
    RankedItem,
    RetrieveResult,
    EmptyResult,
    RetrieveOutcome,
    Provenance,
    ScoreComponents,
)
from journal_brain.memory.storage.protocols import CorpusStore
from journal_brain.memory.storage.records import ChunkRecord, EntryAnalyticsRecord, AgentMemoryRecord
from journal_brain.common.utils.time_utils import month_period, year_period
from journal_brain.common.logging.logger import logger

POSITIVE_VALENCE_THRESHOLD = 0.2
NEGATIVE_VALENCE_THRESHOLD = -0.2

def classify_sentiment(valence: float) -> Sentiment:
    if valence > POSITIVE_VALENCE_THRESHOLD:
        return Sentiment.POSITIVE
    if valence < NEGATIVE_VALENCE_THRESHOLD:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL

def metric_value(row: EntryAnalyticsRecord, metric: Metric) -> float:
    """Metric on a 0-100 scale, stress and energy are derived from the emotion profile."""
    if metric == Metric.STRESS:
        return scoring.derive_stress(row.emotions.anxiety, row.emotions.sadness, row.emotions.anger)
    if metric == Metric.ENERGY:
        return scoring.derive_energy(row.arousal, row.emotions.joy)
    return row.happiness_score

def within_dates(value: datetime, date_from: Optional[datetime], date_to: Optional[datetime]) -> bool:
    """Inclusive bounds, either may be open."""
    if date_from is not None and value < date_from:
        return False
    if date_to is not None and value > date_to:
        return False
    return True

def filter_by_text(chunks: list[ChunkRecord], needles: Optional[list[str]]) -> list[ChunkRecord]:
    """Keeps chunks containing any of the needles (case-insensitive substring)."""
    if not needles:
        return chunks
    lowered = [n.lower() for n in needles if n]
    return [c for c in chunks if any(n in c.text.lower() for n in lowered)]

def filter_by_min_similarity(items: list[RankedItem], min_similarity: float) -> list[RankedItem]:
    """Post-ranking filter, items without a similarity component are always kept."""
    return [
        item for item in items
        if item.components.similarity is None or item.components.similarity >= min_similarity
    ]

class RetrievalService():
    """
    Executes validated retrieve queries against the corpus store.
    - chunks / entries: text segments, hybrid ranked
    - memory: saved agent notes, newest first (access bookkeeping is best-effort)
    - analytics / summaries: scalar rows, ranked with the metric as magnitude, plus timeline/stats views
    """

    def __init__(self, store: CorpusStore, ranker: HybridRanker):
        self.store = store
        self.ranker = ranker
        # memory access updates that failed (logged, never raised)
        self.failed_access_updates = 0

    async def retrieve(self, query: RetrieveQuery, now: Optional[datetime] = None) -> RetrieveOutcome:
        now = now or utc_now()
        logger.info(f"[retrieve] scope={query.scope.value} sort={query.sort.value} limit={query.limit} view={query.view.value}")

        if query.scope == Scope.CHUNKS:
            outcome = await self._retrieve_chunks(query, now)
        elif query.scope == Scope.ENTRIES:
            outcome = await self._retrieve_entries(query, now)
        elif query.scope == Scope.MEMORY:
            outcome = await self._retrieve_memory(query, now)
        elif query.scope == Scope.ANALYTICS:
            outcome = await self._retrieve_analytics(query, now)
        else:
            outcome = await self._retrieve_summaries(query, now)

        if isinstance(outcome, RetrieveResult):
            logger.info(f"[retrieve] found {outcome.metadata.count} results (confidence: {outcome.metadata.confidence.value})")
        else:
            logger.info(f"[retrieve] empty result: {outcome.reason}")
        return outcome

    # =====================================================================
    # Text scopes
    # =====================================================================

    async def _fetch_chunk_candidates(self, query: RetrieveQuery) -> list[ChunkRecord]:
        f = query.filter
        if f.ids:
            # ids narrow the candidates, date bounds still apply
            chunks = await self.store.get_chunks_by_ids(f.ids)
            return [c for c in chunks if within_dates(c.date, f.date_from, f.date_to)]
        if f.date_from is not None or f.date_to is not None:
            return await self.store.get_chunks_by_date_range(f.date_from, f.date_to)
        return await self.store.get_all_chunks()

    async def _rank_chunks(self, query: RetrieveQuery, now: datetime) -> RetrieveOutcome:
        chunks = await self._fetch_chunk_candidates(query)
        chunks = filter_by_text(chunks, query.filter.entities)
        chunks = filter_by_text(chunks, query.filter.topics)
        if not chunks:
            return EmptyResult(reason="No chunks found matching filters")

        candidates = [
            RankingCandidate(
                id=chunk.id,
                date=chunk.date,
                text=chunk.text,
                embedding=chunk.embedding,
                provenance=Provenance(source="chunks", entry_id=chunk.entry_id, chunk_id=chunk.id),
            )
            for chunk in chunks
        ]
        ranked = await self.ranker.rank(candidates, query, now=now)
        return self._build_ranked_result(ranked, query)

    @staticmethod
    def _build_ranked_result(ranked: list[RankedItem], query: RetrieveQuery) -> RetrieveOutcome:
        items = filter_by_min_similarity(ranked, query.filter.min_similarity)
        if ranked and not items:
            return EmptyResult(reason=f"No results with similarity >= {query.filter.min_similarity}")
        return RetrieveResult.build(items)

    async def _retrieve_chunks(self, query: RetrieveQuery, now: datetime) -> RetrieveOutcome:
        return await self._rank_chunks(query, now)

    async def _retrieve_entries(self, query: RetrieveQuery, now: datetime) -> RetrieveOutcome:
        outcome = await self._rank_chunks(query, now)
        if isinstance(outcome, EmptyResult):
            return outcome
        # first-seen chunk per entry, in ranked order
        seen: set[str] = set()
        unique: list[RankedItem] = []
        for item in outcome.items:
            entry_id = item.provenance.entry_id
            if entry_id is None or entry_id in seen:
                continue
            seen.add(entry_id)
            unique.append(item)
        return RetrieveResult.build(unique)

    # =====================================================================
    # Memory
    # =====================================================================

    async def _retrieve_memory(self, query: RetrieveQuery, now: datetime) -> RetrieveOutcome:
        f = query.filter
        if f.topics:
            memories = await self.store.get_memories_by_tags(f.topics)
        elif f.date_from is not None and f.date_to is not None:
            memories = await self.store.get_memories_by_date_range(f.date_from, f.date_to)
        else:
            memories = await self.store.get_recent_memories(query.limit)

        memories = sorted(memories, key=lambda m: m.created_at, reverse=query.sort != SortOrder.DATE_ASC)
        memories = memories[:query.limit]

        for memory in memories:
            await self.record_memory_access(memory.id, now)

        return RetrieveResult.build([self._memory_item(memory) for memory in memories])

    async def record_memory_access(self, memory_id: str, accessed_at: datetime) -> bool:
        """
        Best-effort access bookkeeping: a failed write is logged and counted, never raised,
        so the read path isn't blocked by it.
        """
        try:
            updated = await self.store.update_memory_access(memory_id, accessed_at)
        except Exception as e:
            logger.warning(f"Failed to update access time for memory '{memory_id}': {e}")
            updated = False
        if not updated:
            self.failed_access_updates += 1
        return updated

    @staticmethod
    def _memory_item(memory: AgentMemoryRecord) -> RankedItem:
        return RankedItem(
            id=memory.id,
            date=memory.created_at,
            text=memory.content,
            score=1.0,
            components=ScoreComponents(),
            provenance=Provenance(source="memory", memory_id=memory.id),
        )

    # =====================================================================
    # Scalar scopes
    # =====================================================================

    async def _retrieve_analytics(self, query: RetrieveQuery, now: datetime) -> RetrieveOutcome:
        f = query.filter
        metric = f.metric or Metric.HAPPINESS
        rows = await self.store.get_analytics_by_date_range(f.date_from, f.date_to)
        if f.sentiment is not None:
            rows = [row for row in rows if classify_sentiment(row.valence) == f.sentiment]
        if not rows:
            return EmptyResult(reason="No analytics found matching filters")

        candidates = []
        for row in rows:
            value = metric_value(row, metric)
            candidates.append(RankingCandidate(
                id=row.id,
                date=row.date,
                magnitude=value / 100,
                provenance=Provenance(source="analytics", entry_id=row.entry_id, analytics_id=row.id),
                values={
                    metric.value: value,
                    "valence": row.valence,
                    "arousal": row.arousal,
                },
            ))
        return await self._apply_view(candidates, query, metric, now, source="analytics")

    async def _retrieve_summaries(self, query: RetrieveQuery, now: datetime) -> RetrieveOutcome:
        f = query.filter
        if f.metric is not None and f.metric != Metric.HAPPINESS:
            raise InvalidQuery(f"summaries only carry happiness, metric '{f.metric.value}' is not available")

        candidates: list[RankingCandidate] = []
        if f.time_granularity == TimeGranularity.MONTH:
            for summary in await self.store.get_month_summaries(f.date_from, f.date_to):
                candidates.append(RankingCandidate(
                    id=summary.id,
                    date=month_period(summary.year, summary.month)[0],
                    text=summary.summary_text,
                    embedding=summary.embedding,
                    magnitude=summary.happiness_avg / 100,
                    provenance=Provenance(source="summaries", summary_id=summary.id),
                    values={Metric.HAPPINESS.value: summary.happiness_avg},
                ))
        else:
            for summary in await self.store.get_year_summaries(f.date_from, f.date_to):
                candidates.append(RankingCandidate(
                    id=summary.id,
                    date=year_period(summary.year)[0],
                    text=summary.summary_text,
                    embedding=summary.embedding,
                    magnitude=summary.happiness_avg / 100,
                    provenance=Provenance(source="summaries", summary_id=summary.id),
                    values={Metric.HAPPINESS.value: summary.happiness_avg},
                ))

        if not candidates:
            return EmptyResult(reason=f"No {f.time_granularity.value} summaries found in range") # type: ignore[union-attr]
        return await self._apply_view(candidates, query, Metric.HAPPINESS, now, source="summaries")

    async def _apply_view(
        self,
        candidates: list[RankingCandidate],
        query: RetrieveQuery,
        metric: Metric,
        now: datetime,
        source: str,
    ) -> RetrieveOutcome:
        if query.view == ResultView.RAW:
            ranked = await self.ranker.rank(candidates, query, now=now)
            return self._build_ranked_result(ranked, query)

        if query.view == ResultView.TIMELINE:
            # every row in range, chronological, the normalized metric is the score
            ordered = sorted(candidates, key=lambda c: c.date)
            return RetrieveResult.build([
                RankedItem(
                    id=c.id,
                    date=c.date,
                    text=c.text,
                    score=c.magnitude or 0.0,
                    components=ScoreComponents(magnitude=c.magnitude),
                    provenance=c.provenance,
                    values=c.values,
                )
                for c in ordered
            ])

        if query.view == ResultView.STATS:
            values = [(c.values or {}).get(metric.value, 0.0) for c in candidates]
            latest = max(c.date for c in candidates)
            stats = {
                "mean": sum(values) / len(values),
                "min": min(values),
                "max": max(values),
                "count": float(len(values)),
            }
            item = RankedItem(
                id=f"stats_{source}_{metric.value}",
                date=latest,
                text=f"{metric.value} over {len(values)} {source} rows: mean {stats['mean']:.1f}, min {stats['min']:.1f}, max {stats['max']:.1f}",
                score=1.0,
                provenance=Provenance(source=source),
                values=stats,
            )
            return RetrieveResult.build([item])

        return EmptyResult(reason=f"{query.view.value} view is not implemented")
