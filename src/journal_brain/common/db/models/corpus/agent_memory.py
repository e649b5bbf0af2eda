# ORM model for notes the agent saves through memory_write
from journal_brain.common.db.models.base import MainDB_Base
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, DateTime, Integer, JSON, Index
from datetime import datetime
from typing import Optional

class AgentMemory(MainDB_Base):
    """
    Persistent agent memory (insights, decisions, rules, ...).
    - tags / related_ids are JSON arrays, tag overlap is filtered in-process.
    - last_accessed / access_count are best-effort bookkeeping, updated on reads.
    """
    __tablename__ = "agent_memory"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    kind: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    related_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    confidence: Mapped[str] = mapped_column(String, nullable=False, default="medium")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_accessed: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    access_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_agent_memory_created", "created_at"),
        Index("idx_agent_memory_kind", "kind"),
    )
