# src/citybench/etl/pipelines/upload.py

import logging

from alembic.config import Config
from sqlalchemy.engine import Engine

from citybench.config import Settings
from citybench.db.migrate import run_migrations
from citybench.db.pool import acquire, masked_dsn_for_log
from citybench.etl.extract.archive import extract_archive
from citybench.etl.load.batch_loader import LoadStats, load_cities
from citybench.etl.transform.records import iter_city_records, iter_new_cities

logger = logging.getLogger(__name__)


def run_upload(engine: Engine, settings: Settings, migrations: Config) -> LoadStats:
    """migrate -> unzip -> parse -> batched insert, on a single pooled connection."""
    logger.info("Uploading cities to %s", masked_dsn_for_log(settings.database_url))

    with acquire(engine) as conn:
        # 0) Schema (idempotent)
        run_migrations(conn, migrations)

        # 1) Unzip the dataset
        extract_archive(settings.archive_path, settings.extract_dir)

        # 2) CSV -> CityRecord -> NewCity, lazily
        records = iter_city_records(settings.csv_path, encoding=settings.csv_encoding)

        # 3) Bulk insert
        stats = load_cities(conn, iter_new_cities(records), batch_size=settings.batch_size)

    logger.info("Finished uploading cities. Batches: %d, rows: %d", stats.batches, stats.rows)
    return stats
