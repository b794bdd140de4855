"""
Cyclejournal database connection
"""
from contextlib import contextmanager
from typing import Optional

import redis
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from .utils.settings import (
    CYCLEJOURNAL_DB_URI,
    CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS,
    CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS,
    CYCLEJOURNAL_DB_POOL_SIZE,
    CYCLEJOURNAL_DB_MAX_OVERFLOW,
    CYCLEJOURNAL_REDIS_URL,
    CYCLEJOURNAL_REDIS_PASSWORD,
    CYCLEJOURNAL_REDIS_TIMEOUT,
    CYCLEJOURNAL_REDIS_CONNECTIONS_PER_PROCESS,
)


def create_journal_engine(
    url: str,
    pool_size: int,
    max_overflow: int,
    statement_timeout: int,
    pool_recycle: int = CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS,
):
    # The local store is usually a SQLite file shared between the request
    # threadpool and the event loop thread.
    if url.startswith("sqlite"):
        return create_engine(url=url, connect_args={"check_same_thread": False})

    # Pooling: https://docs.sqlalchemy.org/en/14/core/pooling.html#sqlalchemy.pool.QueuePool
    # Statement timeout: https://stackoverflow.com/a/44936982
    return create_engine(
        url=url,
        pool_size=pool_size,
        pool_recycle=pool_recycle,
        max_overflow=max_overflow,
        connect_args={"options": f"-c statement_timeout={statement_timeout}"},
    )


engine = create_journal_engine(
    url=CYCLEJOURNAL_DB_URI,
    pool_size=CYCLEJOURNAL_DB_POOL_SIZE,
    max_overflow=CYCLEJOURNAL_DB_MAX_OVERFLOW,
    statement_timeout=CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS,
    pool_recycle=CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS,
)
SessionLocal = sessionmaker(bind=engine)


def yield_connection_from_env() -> Session:
    """
    Yields a database connection (created using environment variables). As per FastAPI docs:
    https://fastapi.tiangolo.com/tutorial/sql-databases/#create-a-dependency
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


yield_connection_from_env_ctx = contextmanager(yield_connection_from_env)


# Redis holds the one-way widget snapshot. It is optional: without a URL the
# widget channel is disabled.
RedisPool: Optional[redis.ConnectionPool] = None
if CYCLEJOURNAL_REDIS_URL:
    RedisPool = redis.ConnectionPool.from_url(
        f"redis://:{CYCLEJOURNAL_REDIS_PASSWORD}@{CYCLEJOURNAL_REDIS_URL}",
        max_connections=CYCLEJOURNAL_REDIS_CONNECTIONS_PER_PROCESS,
        socket_timeout=CYCLEJOURNAL_REDIS_TIMEOUT,
        health_check_interval=10,
    )


def redis_connection() -> Optional[redis.Redis]:
    if RedisPool is None:
        return None
    return redis.Redis(connection_pool=RedisPool)
