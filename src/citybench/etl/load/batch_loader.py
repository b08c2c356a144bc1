# src/citybench/etl/load/batch_loader.py

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, TypeVar

from sqlalchemy import insert
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from citybench.errors import InsertError
from citybench.etl.transform.records import NewCity
from citybench.models import City

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10000

T = TypeVar("T")


@dataclass(frozen=True)
class LoadStats:
    batches: int
    rows: int


def chunk(rows: Iterable[T], n: int) -> Iterator[List[T]]:
    """Yield lists of exactly n items, then whatever is left (if anything)."""
    if n < 1:
        raise ValueError(f"batch size must be >= 1, got {n}")
    batch: List[T] = []
    for x in rows:
        batch.append(x)
        if len(batch) == n:
            yield batch
            batch = []
    if batch:
        yield batch


def insert_cities(conn: Connection, batch: List[NewCity]) -> int:
    """
    INSERT INTO cities (country, city, accent_city, region, location)
    VALUES (...), (...), ...  as one statement, committed on its own.
    """
    stmt = insert(City.__table__).values([c.as_params() for c in batch])
    conn.execute(stmt)
    conn.commit()
    return len(batch)


def load_cities(
    conn: Connection,
    rows: Iterable[NewCity],
    batch_size: int = DEFAULT_BATCH_SIZE,
    insert_batch: Optional[Callable[[Connection, List[NewCity]], int]] = None,
) -> LoadStats:
    """
    Insert `rows` in batches of `batch_size`, one statement per batch.
    A failing batch raises InsertError; batches before it stay committed.
    Errors raised while producing rows propagate untouched.
    """
    insert_batch = insert_batch or insert_cities

    batches = 0
    total = 0
    for batch in chunk(rows, batch_size):
        batches += 1
        logger.info("inserting batch %d (%d rows)", batches, len(batch))
        try:
            insert_batch(conn, batch)
        except SQLAlchemyError as e:
            err = InsertError(batches, e)
            try:
                conn.rollback()
            except SQLAlchemyError:
                logger.warning("rollback after batch %d failed", batches, exc_info=True)
            raise err from e
        total += len(batch)

    return LoadStats(batches=batches, rows=total)
