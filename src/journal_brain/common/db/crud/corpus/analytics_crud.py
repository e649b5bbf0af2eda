# CRUD operations for per-entry analytics
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy import select
from journal_brain.common.db.models.corpus.analytics import EntryAnalytics
from journal_brain.common.db.session import get_async_session_maker
from journal_brain.memory.storage.records import EntryAnalyticsRecord, EmotionScores
from journal_brain.common.utils.time_utils import ensure_utc, to_naive_utc
from journal_brain.common.logging.logger import logger
from datetime import datetime
from typing import Optional

def _to_record(row: EntryAnalytics) -> EntryAnalyticsRecord:
    return EntryAnalyticsRecord(
        id=row.id,
        entry_id=row.entry_id,
        date=ensure_utc(row.date),
        happiness_score=row.happiness_score,
        valence=row.valence,
        arousal=row.arousal,
        emotions=EmotionScores(
            joy=row.joy,
            sadness=row.sadness,
            anger=row.anger,
            anxiety=row.anxiety,
            gratitude=row.gratitude,
        ),
        confidence=row.confidence,
    )

async def save_analytics(analytics: list[EntryAnalyticsRecord], main_db_engine: AsyncEngine) -> None:
    if not analytics:
        return
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            for record in analytics:
                session.add(EntryAnalytics(
                    id=record.id,
                    entry_id=record.entry_id,
                    date=to_naive_utc(record.date),
                    happiness_score=record.happiness_score,
                    valence=record.valence,
                    arousal=record.arousal,
                    joy=record.emotions.joy,
                    sadness=record.emotions.sadness,
                    anger=record.emotions.anger,
                    anxiety=record.emotions.anxiety,
                    gratitude=record.emotions.gratitude,
                    confidence=record.confidence,
                ))
            await session.commit()
            logger.info(f"Saved analytics for {len(analytics)} entries")
    except Exception as e:
        logger.error(f"Failed to save analytics: {e}")
        raise

async def get_analytics_by_date_range(
    date_from: Optional[datetime],
    date_to: Optional[datetime],
    main_db_engine: AsyncEngine
) -> list[EntryAnalyticsRecord]:
    session_maker = get_async_session_maker(main_db_engine)

    stmt = select(EntryAnalytics)
    if date_from is not None:
        stmt = stmt.where(EntryAnalytics.date >= to_naive_utc(date_from))
    if date_to is not None:
        stmt = stmt.where(EntryAnalytics.date <= to_naive_utc(date_to))
    stmt = stmt.order_by(EntryAnalytics.date.asc(), EntryAnalytics.id.asc())

    try:
        async with session_maker() as session:
            result = await session.execute(stmt)
            return [_to_record(row) for row in result.scalars().all()]
    except Exception as e:
        logger.error(f"Failed to get analytics by date range: {e}")
        raise
