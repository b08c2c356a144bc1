# src/citybench/db/pool.py

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.pool import QueuePool

from citybench.config import Settings
from citybench.errors import PoolError

logger = logging.getLogger(__name__)


def masked_dsn_for_log(dsn: str | None) -> str:
    if not dsn:
        return "<unset>"
    try:
        return str(make_url(dsn).set(password="***"))
    except ArgumentError:
        return "<unparseable DSN>"


def create_pool(settings: Settings) -> Engine:
    """
    Build the engine whose QueuePool is the connection pool:
      - at most `pool_max_size` connections (no overflow)
      - connections older than `pool_max_lifetime` seconds are recycled
      - checkout waits up to `pool_timeout` seconds before giving up
    Nothing is connected yet; call warm_up() for the idle floor.
    """
    try:
        engine = create_engine(
            settings.database_url,
            poolclass=QueuePool,
            pool_size=settings.pool_max_size,
            max_overflow=0,
            pool_recycle=settings.pool_max_lifetime,
            pool_timeout=settings.pool_timeout,
            pool_pre_ping=True,
        )
    except (ArgumentError, ImportError, SQLAlchemyError) as e:
        raise PoolError(f"can't create connection pool: {e}") from e

    logger.debug(
        "Pool for %s: max=%d lifetime=%ds timeout=%ds",
        masked_dsn_for_log(settings.database_url),
        settings.pool_max_size,
        settings.pool_max_lifetime,
        settings.pool_timeout,
    )
    return engine


def warm_up(engine: Engine, min_idle: int) -> None:
    """Open `min_idle` connections together and hand them back to the pool."""
    opened = []
    try:
        for _ in range(min_idle):
            opened.append(engine.connect())
    except SQLAlchemyError as e:
        raise PoolError(f"can't create connection pool: {e}") from e
    finally:
        for conn in opened:
            conn.close()
    logger.debug("Pool warmed with %d idle connection(s)", len(opened))


@contextmanager
def acquire(engine: Engine) -> Iterator[Connection]:
    """Check a connection out of the pool; it goes back when the block exits."""
    try:
        conn = engine.connect()
    except SQLAlchemyError as e:
        raise PoolError(f"can't get connection: {e}") from e
    with conn:
        yield conn
