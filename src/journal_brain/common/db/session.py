# async engine + session maker helpers for the main corpus db

from contextlib import asynccontextmanager
from typing import AsyncIterator
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from journal_brain.common.db.models.base import MainDB_Base
from journal_brain.common.logging.logger import logger

def get_async_session_maker(main_db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Light helper to build a session maker bound to the given engine.
    NOTE: expire_on_commit=False so ORM rows can be converted to DTOs after commit.
    """
    return async_sessionmaker(main_db_engine, expire_on_commit=False)

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

@asynccontextmanager
async def create_db_engine_context(db_url: str, echo: bool = False, create_tables: bool = True) -> AsyncIterator[AsyncEngine]:
    """
    Creates the main async engine for the app lifetime and disposes it on exit.
    Optionally creates all registered tables (plus the chunk FTS index) on start up.
    """
    engine = create_async_engine(db_url, echo=echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    try:
        if create_tables:
            await create_all_tables(engine)
        logger.info(f"Main db engine created ({engine.dialect.name}).")
        yield engine
    finally:
        await engine.dispose()
        logger.info("Main db engine disposed.")

async def create_all_tables(main_db_engine: AsyncEngine) -> None:
    """
    Creates every table registered on MainDB_Base.metadata.
    NOTE: the corpus models must be imported before this runs so they're registered.
    """
    # import for side effects: registers tables + the FTS DDL listener
    from journal_brain.common.db.models import corpus  # noqa: F401

    async with main_db_engine.begin() as conn:
        await conn.run_sync(MainDB_Base.metadata.create_all)
