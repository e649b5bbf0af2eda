# CRUD operations for journal chunks and their FTS5 keyword index
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy import select, text
from journal_brain.common.db.models.corpus.chunks import JournalChunk, CHUNKS_FTS_TABLE
from journal_brain.common.db.session import get_async_session_maker
from journal_brain.memory.storage.records import ChunkRecord
from journal_brain.common.utils.time_utils import ensure_utc, to_naive_utc
from journal_brain.common.logging.logger import logger
from datetime import datetime
from typing import Optional
import re

def _to_record(row: JournalChunk) -> ChunkRecord:
    return ChunkRecord(
        id=row.id,
        entry_id=row.entry_id,
        text=row.text,
        embedding=row.embedding,
        date=ensure_utc(row.date),
        start_char=row.start_char,
        end_char=row.end_char,
        token_count=row.token_count,
    )

def build_match_expression(query: str) -> Optional[str]:
    """
    Turns free text into an FTS5 MATCH expression.
    Each word is quoted so FTS5 operators/punctuation in user text can't break the query,
    words are OR-ed so any term contributes to the bm25 score.
    """
    words = re.findall(r"\w+", query.lower())
    if not words:
        return None
    return " OR ".join('"' + word.replace('"', '""') + '"' for word in words)

async def save_chunks(chunks: list[ChunkRecord], main_db_engine: AsyncEngine) -> None:
    """
    Save chunks and index their text in the FTS5 table, in a single transaction.
    """
    if not chunks:
        return
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            for chunk in chunks:
                session.add(JournalChunk(
                    id=chunk.id,
                    entry_id=chunk.entry_id,
                    text=chunk.text,
                    embedding=chunk.embedding,
                    date=to_naive_utc(chunk.date),
                    start_char=chunk.start_char,
                    end_char=chunk.end_char,
                    token_count=chunk.token_count,
                ))
            await session.execute(
                text(f"INSERT INTO {CHUNKS_FTS_TABLE} (chunk_id, text) VALUES (:chunk_id, :text)"),
                [{"chunk_id": chunk.id, "text": chunk.text} for chunk in chunks],
            )
            await session.commit()
            logger.info(f"Saved {len(chunks)} chunks")
    except Exception as e:
        logger.error(f"Failed to save chunks: {e}")
        raise

async def get_chunks_by_date_range(
    date_from: Optional[datetime],
    date_to: Optional[datetime],
    main_db_engine: AsyncEngine
) -> list[ChunkRecord]:
    """
    Chunks whose date falls in [date_from, date_to], either bound may be open.
    Ordered by date ascending.
    """
    session_maker = get_async_session_maker(main_db_engine)

    stmt = select(JournalChunk)
    if date_from is not None:
        stmt = stmt.where(JournalChunk.date >= to_naive_utc(date_from))
    if date_to is not None:
        stmt = stmt.where(JournalChunk.date <= to_naive_utc(date_to))
    stmt = stmt.order_by(JournalChunk.date.asc(), JournalChunk.id.asc())

    try:
        async with session_maker() as session:
            result = await session.execute(stmt)
            return [_to_record(row) for row in result.scalars().all()]
    except Exception as e:
        logger.error(f"Failed to get chunks by date range: {e}")
        raise

async def get_chunks_by_ids(ids: list[str], main_db_engine: AsyncEngine) -> list[ChunkRecord]:
    if not ids:
        return []
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            stmt = (
                select(JournalChunk)
                .where(JournalChunk.id.in_(ids))
                .order_by(JournalChunk.date.asc(), JournalChunk.id.asc())
            )
            result = await session.execute(stmt)
            return [_to_record(row) for row in result.scalars().all()]
    except Exception as e:
        logger.error(f"Failed to get chunks by ids: {e}")
        raise

async def get_all_chunks(main_db_engine: AsyncEngine) -> list[ChunkRecord]:
    return await get_chunks_by_date_range(None, None, main_db_engine)

async def keyword_search_chunks(
    query: str,
    limit: int,
    main_db_engine: AsyncEngine
) -> list[tuple[str, float]]:
    """
    Full-text search over chunk text with FTS5 bm25().

    Returns:
        List of (chunk_id, bm25 score), best (most negative) first
    """
    match_expression = build_match_expression(query)
    if match_expression is None:
        return []
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            stmt = text(
                f"SELECT chunk_id, bm25({CHUNKS_FTS_TABLE}) AS score FROM {CHUNKS_FTS_TABLE} "
                f"WHERE {CHUNKS_FTS_TABLE} MATCH :match ORDER BY score LIMIT :limit"
            )
            result = await session.execute(stmt, {"match": match_expression, "limit": limit})
            hits = [(row[0], float(row[1])) for row in result.all()]
            logger.debug(f"Keyword search '{query}' matched {len(hits)} chunks")
            return hits
    except Exception as e:
        logger.error(f"Failed keyword search for '{query}': {e}")
        raise
