import asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from journal_brain.common.db.models.base import MainDB_Base
from journal_brain.common.db.models.corpus.chunks import CHUNKS_FTS_TABLE
from journal_brain.common.db.session import create_all_tables

from dotenv import load_dotenv
import os
from pathlib import Path

async def reset_all_tables(main_db_url: str) -> None:
    engine = create_async_engine(main_db_url)
    try:
        async with engine.begin() as conn:
            # the FTS index is a virtual table outside the ORM metadata
            if engine.dialect.name == "sqlite":
                await conn.execute(text(f"DROP TABLE IF EXISTS {CHUNKS_FTS_TABLE}"))
            await conn.run_sync(MainDB_Base.metadata.drop_all)
        # recreates the ORM tables and the FTS index
        await create_all_tables(engine)
    finally:
        await engine.dispose()

# NOTE: trouble shooting: if script imports do not work, use PYTHONPATH=. to explicitly include root of project
if __name__ == "__main__":
    # one-off script to reset the corpus db, by dropping then creating all tables

    # load in the proper .env file, defaulted to .env.dev
    APP_ENV = os.getenv("APP_ENV", "dev")
    # This file is in scripts/db/, so we go up two levels to project root
    SERVICE_ROOT = Path(__file__).resolve().parents[2]
    env_file_path = SERVICE_ROOT / f".env.{APP_ENV}"

    # Load the .env file manually
    print(f"Loading env file from: {env_file_path}")
    load_dotenv(dotenv_path=env_file_path)

    MAIN_DB_URL = os.getenv("MAIN_DB_URL", "sqlite+aiosqlite:///./journal_brain.db")

    # NOTE: this drops every corpus table, including saved agent memories
    asyncio.run(reset_all_tables(MAIN_DB_URL))
    print(f"All tables reset successfully!")
