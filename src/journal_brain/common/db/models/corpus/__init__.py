# corpus tables, importing this package registers them on MainDB_Base.metadata
from journal_brain.common.db.models.corpus.chunks import JournalChunk
from journal_brain.common.db.models.corpus.analytics import EntryAnalytics
from journal_brain.common.db.models.corpus.summaries import MonthSummary, YearSummary
from journal_brain.common.db.models.corpus.agent_memory import AgentMemory

__all__ = ["JournalChunk", "EntryAnalytics", "MonthSummary", "YearSummary", "AgentMemory"]
