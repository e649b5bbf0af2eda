# context_bundle tool: warm-start context for a new conversation
# recent mood metrics + trends, recent month summaries, recently saved memories

import math
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from journal_brain.agent_service.tools.base import AgentTool
from journal_brain.agent_service.common.tool_calling_declarations.context_bundle import context_bundle_declaration
from journal_brain.common.errors import InvalidToolArguments
from journal_brain.common.utils.time_utils import utc_now, isoformat, month_period
from journal_brain.memory.ranking import scoring
from journal_brain.memory.retrieval.retrieval_service import RetrievalService
from journal_brain.memory.storage.records import EntryAnalyticsRecord

DEFAULT_RECENT_DAYS = 60
DEFAULT_HISTORY_MONTHS = 24
RECENT_MEMORY_LIMIT = 20
TREND_WINDOW_DAYS = 7
TREND_THRESHOLD = 5.0 # points on the 0-100 scale
NARRATIVE_MAX_CHARS = 200

def _positive_int(arguments: dict[str, Any], key: str, default: int) -> int:
    value = arguments.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or int(value) != value:
        raise InvalidToolArguments(f"'{key}' must be an integer")
    if value < 1:
        raise InvalidToolArguments(f"'{key}' must be positive, got {value}")
    return int(value)

def _stress(row: EntryAnalyticsRecord) -> float:
    return scoring.derive_stress(row.emotions.anxiety, row.emotions.sadness, row.emotions.anger)

def _energy(row: EntryAnalyticsRecord) -> float:
    return scoring.derive_energy(row.arousal, row.emotions.joy)

def _happiness(row: EntryAnalyticsRecord) -> float:
    return row.happiness_score

def _average(rows: list[EntryAnalyticsRecord], metric: Callable[[EntryAnalyticsRecord], float]) -> Optional[float]:
    if not rows:
        return None
    return sum(metric(row) for row in rows) / len(rows)

def determine_trend(older: Optional[float], newer: Optional[float]) -> str:
    if older is None or newer is None:
        return "unknown"
    change = newer - older
    if change > TREND_THRESHOLD:
        return "increasing"
    if change < -TREND_THRESHOLD:
        return "decreasing"
    return "stable"

def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """(year, month) moved back by `offset` months."""
    index = year * 12 + (month - 1) - offset
    return index // 12, index % 12 + 1

class ContextBundleTool(AgentTool):
    declaration = context_bundle_declaration

    def __init__(self, retrieval_service: RetrievalService, clock: Callable[[], datetime] = utc_now):
        self.retrieval_service = retrieval_service
        self.store = retrieval_service.store
        self.clock = clock

    async def execute(self, arguments: dict[str, Any]) -> Any:
        recent_days = _positive_int(arguments, "recentDays", DEFAULT_RECENT_DAYS)
        history_months = _positive_int(arguments, "historyMonths", DEFAULT_HISTORY_MONTHS)
        include_memory = arguments.get("includeMemory", True)
        if not isinstance(include_memory, bool):
            raise InvalidToolArguments("'includeMemory' must be a boolean")

        now = self.clock()
        date_from = now - timedelta(days=recent_days)

        analytics = await self.store.get_analytics_by_date_range(date_from, now)
        summaries = await self.recent_month_summaries(now, history_months)

        memories: list[dict[str, Any]] = []
        if include_memory:
            saved = await self.store.get_recent_memories(RECENT_MEMORY_LIMIT)
            memories = [memory.to_json() for memory in saved]
            for memory in saved:
                await self.retrieval_service.record_memory_access(memory.id, now)

        return {
            "recentTimeline": {
                "days": recent_days,
                "dateRange": [isoformat(date_from), isoformat(now)],
                "analytics": self.mood_metrics(analytics, now),
                "entryCount": len(analytics),
            },
            "historicalSummaries": summaries,
            "savedMemories": memories,
            "metadata": {
                "totalAnalytics": len(analytics),
                "totalSummaries": len(summaries),
                "totalMemories": len(memories),
                "loadedAt": isoformat(now),
            },
        }

    @staticmethod
    def mood_metrics(analytics: list[EntryAnalyticsRecord], now: datetime) -> dict[str, Any]:
        """
        Averages over the whole window, trend compares the last 7 days to the 7 before.
        """
        recent_start = now - timedelta(days=TREND_WINDOW_DAYS)
        previous_start = recent_start - timedelta(days=TREND_WINDOW_DAYS)
        recent = [row for row in analytics if recent_start < row.date <= now]
        previous = [row for row in analytics if previous_start < row.date <= recent_start]

        metrics: dict[str, Any] = {}
        for name, metric in (("happiness", _happiness), ("stress", _stress), ("energy", _energy)):
            average = _average(analytics, metric)
            metrics[name] = {
                "avg": round(average, 1) if average is not None else 0,
                "trend": determine_trend(_average(previous, metric), _average(recent, metric)),
            }
        return metrics

    async def recent_month_summaries(self, now: datetime, months: int) -> list[dict[str, Any]]:
        """Summaries for the last `months` calendar months (current one included), newest first."""
        oldest_year, oldest_month = shift_month(now.year, now.month, months - 1)
        window_start, _ = month_period(oldest_year, oldest_month)
        rows = await self.store.get_month_summaries(window_start, now)
        by_month = {(row.year, row.month): row for row in rows}

        summaries: list[dict[str, Any]] = []
        for offset in range(months):
            year, month = shift_month(now.year, now.month, offset)
            row = by_month.get((year, month))
            if row is None:
                continue
            summaries.append({
                "month": f"{year}-{month:02d}",
                "happiness": row.happiness_avg,
                "narrative": row.summary_text[:NARRATIVE_MAX_CHARS] + "...",
            })
        return summaries
