"""Async engine construction

SQLite needs two adjustments so concurrent writers behave like they do on
PostgreSQL: pysqlite's own transaction handling is switched off, and every
transaction starts with BEGIN IMMEDIATE so the write lock is taken up front
instead of failing on lock upgrade.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
import src.domain  # noqa: F401  registers every table on SQLModel.metadata


def create_store_engine(db_uri: str, busy_timeout_seconds: float = 30.0, echo: bool = False) -> AsyncEngine:
    if not db_uri.startswith("sqlite"):
        return create_async_engine(db_uri, echo=echo, future=True, pool_pre_ping=True)

    engine = create_async_engine(
        db_uri,
        echo=echo,
        future=True,
        connect_args={"timeout": busy_timeout_seconds},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
