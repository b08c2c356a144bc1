"""
citybench command line.

Usage:
    citybench upload              # migrate, unzip ./data/cities.txt.zip, bulk insert
    citybench bench               # 500 x nearest-500 queries from random points
    citybench --env-file prod.env bench --iterations 100 --seed 7
"""

import logging
import random
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, Optional

import click
from sqlalchemy.engine import Engine

from citybench.bench.nearest import PointSampler, run_benchmark
from citybench.config import Settings
from citybench.db.migrate import build_migration_config
from citybench.db.pool import acquire, create_pool, masked_dsn_for_log, warm_up
from citybench.errors import CityBenchError
from citybench.etl.pipelines.upload import run_upload
from citybench.utils.logging_config import setup_logger

logger = logging.getLogger("citybench")


@contextmanager
def _command(ctx: click.Context, log_file: str) -> Iterator[tuple[Settings, Engine]]:
    """Settings, logging and a warmed pool; any CityBenchError ends the process."""
    engine: Optional[Engine] = None
    try:
        settings = Settings.from_env(ctx.obj.get("env_file"))
        setup_logger(log_file, settings.log_dir)
        logger.debug("Connecting to %s", masked_dsn_for_log(settings.database_url))
        engine = create_pool(settings)
        warm_up(engine, settings.pool_min_idle)
        yield settings, engine
    except CityBenchError as e:
        logger.error("%s", e)
        raise click.ClickException(str(e)) from e
    finally:
        if engine is not None:
            engine.dispose()


@click.group()
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Env file to load instead of ./.env",
)
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[str]):
    """Load world cities into PostGIS and benchmark nearest-neighbour queries."""
    ctx.ensure_object(dict)
    ctx.obj["env_file"] = env_file


@cli.command()
@click.option("--batch-size", type=click.IntRange(min=1), default=None,
              help="Rows per INSERT (default: UPLOAD_BATCH_SIZE or 10000)")
@click.pass_context
def upload(ctx: click.Context, batch_size: Optional[int]):
    """Upload data to postgres DB"""
    with _command(ctx, "upload.log") as (settings, engine):
        if batch_size is not None:
            settings = replace(settings, batch_size=batch_size)
        migrations = build_migration_config()
        stats = run_upload(engine, settings, migrations)
        click.echo(f"uploaded {stats.rows} cities in {stats.batches} batch(es)")


@cli.command()
@click.option("--iterations", type=click.IntRange(min=0), default=None,
              help="Number of queries (default: BENCH_ITERATIONS or 500)")
@click.option("--limit", type=click.IntRange(min=1), default=None,
              help="Neighbours per query (default: BENCH_LIMIT or 500)")
@click.option("--seed", type=int, default=None, help="Seed for the random points")
@click.option("--fetch/--no-fetch", default=False, show_default=True,
              help="Also read the rows back, not only execute the query")
@click.pass_context
def bench(ctx: click.Context, iterations: Optional[int], limit: Optional[int],
          seed: Optional[int], fetch: bool):
    """Execute sequentially N requests to find the nearest neighbours of random points"""
    with _command(ctx, "bench.log") as (settings, engine):
        sampler = PointSampler(rng=random.Random(seed))
        with acquire(engine) as conn:
            result = run_benchmark(
                conn,
                iterations=settings.bench_iterations if iterations is None else iterations,
                limit=settings.bench_limit if limit is None else limit,
                sampler=sampler,
                fetch=fetch,
            )
        click.echo(str(result))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
