# src/citybench/bench/nearest.py

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from citybench.errors import BenchmarkError
from citybench.models import SRID, City

logger = logging.getLogger(__name__)

# x is longitude, y is latitude
LONGITUDE_RANGE: Tuple[float, float] = (-180.0, 180.0)
LATITUDE_RANGE: Tuple[float, float] = (-90.0, 90.0)


class PointSampler:
    """
    Uniform random points, x from [x_lo, x_hi) and y from [y_lo, y_hi).
    Defaults cover the whole lon/lat domain of SRID 4326.
    """

    def __init__(
        self,
        x_range: Tuple[float, float] = LONGITUDE_RANGE,
        y_range: Tuple[float, float] = LATITUDE_RANGE,
        rng: Optional[random.Random] = None,
    ):
        for name, (lo, hi) in (("x_range", x_range), ("y_range", y_range)):
            if not lo < hi:
                raise ValueError(f"{name} must satisfy lo < hi, got ({lo}, {hi})")
        self.x_range = x_range
        self.y_range = y_range
        self.rng = rng or random.Random()

    def _draw(self, lo: float, hi: float) -> float:
        # random() is in [0, 1), so hi is never returned
        return lo + (hi - lo) * self.rng.random()

    def sample(self) -> Tuple[float, float]:
        return self._draw(*self.x_range), self._draw(*self.y_range)


def nearest_query(x: float, y: float, limit: int) -> Select:
    """SELECT ... FROM cities ORDER BY location <-> point(x, y) LIMIT n"""
    point = func.ST_SetSRID(func.ST_MakePoint(x, y), SRID)
    return (
        select(City.__table__)
        .order_by(City.location.distance_centroid(point))
        .limit(limit)
    )


@dataclass(frozen=True)
class BenchResult:
    iterations: int
    limit: int
    elapsed: float

    def __str__(self) -> str:
        return f"elapsed {self.elapsed:.6f}s"


def run_benchmark(
    conn: Connection,
    iterations: int = 500,
    limit: int = 500,
    sampler: Optional[PointSampler] = None,
    fetch: bool = False,
    clock: Callable[[], float] = time.perf_counter,
) -> BenchResult:
    """
    Run `iterations` nearest-`limit` queries from random points on one connection
    and time the whole loop. Rows are only read back when `fetch` is set.
    """
    sampler = sampler or PointSampler()

    start = clock()
    for i in range(iterations):
        x, y = sampler.sample()
        try:
            result = conn.execute(nearest_query(x, y, limit))
            if fetch:
                result.all()
        except SQLAlchemyError as e:
            raise BenchmarkError(i + 1, e) from e
    elapsed = max(0.0, clock() - start)

    # read-only, nothing to keep
    try:
        conn.rollback()
    except SQLAlchemyError:
        logger.warning("rollback after benchmark failed", exc_info=True)

    logger.debug("Benchmark: %d x nearest %d in %.3fs", iterations, limit, elapsed)
    return BenchResult(iterations=iterations, limit=limit, elapsed=elapsed)
