# src/citybench/config.py

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from citybench.errors import ConfigError

DEFAULT_ARCHIVE = "./data/cities.txt.zip"
DEFAULT_CSV = "./data/cities.txt"


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        val = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if val < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {val}")
    return val


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_dir: str = "logs"
    archive_path: Path = Path(DEFAULT_ARCHIVE)
    extract_dir: Path = Path("./")
    csv_path: Path = Path(DEFAULT_CSV)
    csv_encoding: str = "utf-8"
    batch_size: int = 10000
    pool_max_size: int = 20
    pool_min_idle: int = 1
    pool_max_lifetime: int = 30
    pool_timeout: int = 30
    bench_iterations: int = 500
    bench_limit: int = 500

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Settings":
        """
        Read settings from the environment, after loading `.env` from the cwd
        (or `env_file` when given). Existing env variables win.
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))

        dsn = os.getenv("POSTGRES_DSN") or os.getenv("DATABASE_URL")
        if not dsn:
            raise ConfigError("DATABASE_URL not set (or POSTGRES_DSN)")

        settings = cls(
            database_url=dsn,
            log_dir=os.getenv("LOG_DIR") or "logs",
            archive_path=Path(os.getenv("CITIES_ARCHIVE", DEFAULT_ARCHIVE)),
            extract_dir=Path(os.getenv("CITIES_EXTRACT_DIR", "./")),
            csv_path=Path(os.getenv("CITIES_CSV", DEFAULT_CSV)),
            csv_encoding=os.getenv("CITIES_CSV_ENCODING", "utf-8"),
            batch_size=_env_int("UPLOAD_BATCH_SIZE", 10000),
            pool_max_size=_env_int("DB_POOL_MAX_SIZE", 20),
            pool_min_idle=_env_int("DB_POOL_MIN_IDLE", 1, minimum=0),
            pool_max_lifetime=_env_int("DB_POOL_MAX_LIFETIME_SEC", 30),
            pool_timeout=_env_int("DB_POOL_TIMEOUT_SEC", 30),
            bench_iterations=_env_int("BENCH_ITERATIONS", 500, minimum=0),
            bench_limit=_env_int("BENCH_LIMIT", 500),
        )
        if settings.pool_min_idle > settings.pool_max_size:
            raise ConfigError(
                f"DB_POOL_MIN_IDLE ({settings.pool_min_idle}) exceeds "
                f"DB_POOL_MAX_SIZE ({settings.pool_max_size})"
            )
        return settings
