# ORM model for journal chunks + the FTS5 keyword index over their text
from journal_brain.common.db.models.base import MainDB_Base
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, DateTime, Integer, Index, JSON, DDL, event
from datetime import datetime
from typing import Optional

class JournalChunk(MainDB_Base):
    """
    A bounded text segment of a journal entry, carrying its own embedding and timestamp.

    Retrieval possibilities:
    - Temporal: range query over date (ascending)
    - Lookup: by chunk id, or by entry_id for all chunks of one entry
    - Keyword: bm25() over the chunks_fts virtual table (SQLite FTS5)
    - Similarity: embeddings are loaded with the rows and scored in-process by the ranker

    NOTE: embeddings are stored as JSON arrays, the corpus is single-user and small enough
    that candidate sets are ranked in memory.
    """
    __tablename__ = "chunks"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    entry_id: Mapped[str] = mapped_column(String, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[Optional[list[float]]] = mapped_column(JSON, nullable=True)
    start_char: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    end_char: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    token_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # stored as naive UTC
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_chunks_date", "date"),
        Index("idx_chunks_entry_id", "entry_id"),
    )

# standalone FTS5 table, rows are written alongside chunks in chunk_crud.save_chunks
CHUNKS_FTS_TABLE = "chunks_fts"

event.listen(
    JournalChunk.__table__,
    "after_create",
    DDL(f"CREATE VIRTUAL TABLE IF NOT EXISTS {CHUNKS_FTS_TABLE} USING fts5(chunk_id UNINDEXED, text)").execute_if(dialect="sqlite"),
)
