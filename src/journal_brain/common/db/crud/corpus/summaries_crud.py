# CRUD operations for month + year summaries
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy import select
from journal_brain.common.db.models.corpus.summaries import MonthSummary, YearSummary
from journal_brain.common.db.session import get_async_session_maker
from journal_brain.memory.storage.records import MonthSummaryRecord, YearSummaryRecord
from journal_brain.common.utils.time_utils import ensure_utc
from journal_brain.common.logging.logger import logger
from datetime import datetime
from typing import Optional

def _month_key(value: datetime) -> int:
    """year * 12 + (month - 1), lets a month-overlap test be a plain integer comparison."""
    value = ensure_utc(value)
    return value.year * 12 + value.month - 1

async def save_month_summaries(summaries: list[MonthSummaryRecord], main_db_engine: AsyncEngine) -> None:
    if not summaries:
        return
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            for summary in summaries:
                session.add(MonthSummary(**summary.model_dump()))
            await session.commit()
            logger.info(f"Saved {len(summaries)} month summaries")
    except Exception as e:
        logger.error(f"Failed to save month summaries: {e}")
        raise

async def save_year_summaries(summaries: list[YearSummaryRecord], main_db_engine: AsyncEngine) -> None:
    if not summaries:
        return
    session_maker = get_async_session_maker(main_db_engine)

    try:
        async with session_maker() as session:
            for summary in summaries:
                session.add(YearSummary(**summary.model_dump()))
            await session.commit()
            logger.info(f"Saved {len(summaries)} year summaries")
    except Exception as e:
        logger.error(f"Failed to save year summaries: {e}")
        raise

async def get_month_summaries(
    date_from: Optional[datetime],
    date_to: Optional[datetime],
    main_db_engine: AsyncEngine
) -> list[MonthSummaryRecord]:
    """
    Month summaries whose calendar month overlaps [date_from, date_to], oldest first.
    """
    session_maker = get_async_session_maker(main_db_engine)

    month_key = MonthSummary.year * 12 + MonthSummary.month - 1
    stmt = select(MonthSummary)
    if date_from is not None:
        stmt = stmt.where(month_key >= _month_key(date_from))
    if date_to is not None:
        stmt = stmt.where(month_key <= _month_key(date_to))
    stmt = stmt.order_by(MonthSummary.year.asc(), MonthSummary.month.asc())

    try:
        async with session_maker() as session:
            result = await session.execute(stmt)
            return [MonthSummaryRecord.model_validate(row, from_attributes=True) for row in result.scalars().all()]
    except Exception as e:
        logger.error(f"Failed to get month summaries: {e}")
        raise

async def get_year_summaries(
    date_from: Optional[datetime],
    date_to: Optional[datetime],
    main_db_engine: AsyncEngine
) -> list[YearSummaryRecord]:
    session_maker = get_async_session_maker(main_db_engine)

    stmt = select(YearSummary)
    if date_from is not None:
        stmt = stmt.where(YearSummary.year >= ensure_utc(date_from).year)
    if date_to is not None:
        stmt = stmt.where(YearSummary.year <= ensure_utc(date_to).year)
    stmt = stmt.order_by(YearSummary.year.asc())

    try:
        async with session_maker() as session:
            result = await session.execute(stmt)
            return [YearSummaryRecord.model_validate(row, from_attributes=True) for row in result.scalars().all()]
    except Exception as e:
        logger.error(f"Failed to get year summaries: {e}")
        raise
