# CRUD operations for agent memory (notes saved via the memory_write tool)
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy import select
from journal_brain.common.db.models.corpus.agent_memory import AgentMemory
from journal_brain.common.db.session import get_async_session_maker
from journal_brain.memory.storage.records import AgentMemoryRecord, MemoryKind, MemoryConfidence
from journal_brain.common.utils.time_utils import ensure_utc, to_naive_utc
from journal_brain.common.logging.logger import logger
from datetime import datetime
from typing import Optional

def _to_record(row: AgentMemory) -> AgentMemoryRecord:
    return AgentMemoryRecord(
        id=row.id,
        kind=MemoryKind(row.kind),
        content=row.content,
        tags=list(row.tags or []),
        related_ids=list(row.related_ids or []),
        confidence=MemoryConfidence(row.confidence),
        created_at=ensure_utc(row.created_at),
        last_accessed=ensure_utc(row.last_accessed) if row.last_accessed else None,
        access_count=row.access_count,
    )

async def save_memory(memory: AgentMemoryRecord, main_db_engine: AsyncEngine) -> None:
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            session.add(AgentMemory(
                id=memory.id,
                kind=memory.kind.value,
                content=memory.content,
                tags=list(memory.tags),
                related_ids=list(memory.related_ids),
                confidence=memory.confidence.value,
                created_at=to_naive_utc(memory.created_at),
                last_accessed=to_naive_utc(memory.last_accessed),
                access_count=memory.access_count,
            ))
            await session.commit()
            logger.info(f"Saved memory '{memory.id}' of kind '{memory.kind.value}'")
    except Exception as e:
        logger.error(f"Failed to save memory: {e}")
        raise

async def get_memory_by_id(memory_id: str, main_db_engine: AsyncEngine) -> Optional[AgentMemoryRecord]:
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            row = await session.get(AgentMemory, memory_id)
            return _to_record(row) if row else None
    except Exception as e:
        logger.error(f"Failed to get memory by ID: {e}")
        raise

async def get_memories_by_tags(tags: list[str], main_db_engine: AsyncEngine) -> list[AgentMemoryRecord]:
    """
    Memories sharing at least one tag with `tags` (case-insensitive).
    NOTE: tags live in a JSON column, so overlap is filtered after loading.
    """
    if not tags:
        return []
    wanted = {tag.lower() for tag in tags}
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            result = await session.execute(select(AgentMemory).order_by(AgentMemory.created_at.asc()))
            rows = result.scalars().all()
            return [_to_record(row) for row in rows if wanted & {t.lower() for t in (row.tags or [])}]
    except Exception as e:
        logger.error(f"Failed to get memories by tags: {e}")
        raise

async def get_memories_by_date_range(
    date_from: datetime,
    date_to: datetime,
    main_db_engine: AsyncEngine
) -> list[AgentMemoryRecord]:
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            stmt = (
                select(AgentMemory)
                .where(AgentMemory.created_at >= to_naive_utc(date_from))
                .where(AgentMemory.created_at <= to_naive_utc(date_to))
                .order_by(AgentMemory.created_at.asc())
            )
            result = await session.execute(stmt)
            return [_to_record(row) for row in result.scalars().all()]
    except Exception as e:
        logger.error(f"Failed to get memories by date range: {e}")
        raise

async def get_recent_memories(limit: int, main_db_engine: AsyncEngine) -> list[AgentMemoryRecord]:
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            stmt = select(AgentMemory).order_by(AgentMemory.created_at.desc()).limit(limit)
            result = await session.execute(stmt)
            return [_to_record(row) for row in result.scalars().all()]
    except Exception as e:
        logger.error(f"Failed to get recent memories: {e}")
        raise

async def update_memory_access(memory_id: str, accessed_at: datetime, main_db_engine: AsyncEngine) -> bool:
    """
    Bump access_count and set last_accessed.

    Returns:
        True if updated, False if the memory doesn't exist
    """
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            row = await session.get(AgentMemory, memory_id)
            if row is None:
                logger.warning(f"No memory found with id {memory_id}")
                return False
            row.last_accessed = to_naive_utc(accessed_at)
            row.access_count = (row.access_count or 0) + 1
            await session.commit()
            return True
    except Exception as e:
        logger.error(f"Failed to update memory access: {e}")
        raise
