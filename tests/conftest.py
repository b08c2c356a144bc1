import csv
import logging
import os
import zipfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

HEADER = ["Country", "City", "Accent City", "Region", "Population", "Latitude", "Longitude"]

ENV_VARS = [
    "DATABASE_URL",
    "POSTGRES_DSN",
    "LOG_DIR",
    "CITIES_ARCHIVE",
    "CITIES_EXTRACT_DIR",
    "CITIES_CSV",
    "CITIES_CSV_ENCODING",
    "UPLOAD_BATCH_SIZE",
    "DB_POOL_MAX_SIZE",
    "DB_POOL_MIN_IDLE",
    "DB_POOL_MAX_LIFETIME_SEC",
    "DB_POOL_TIMEOUT_SEC",
    "BENCH_ITERATIONS",
    "BENCH_LIMIT",
]


def city_rows(n):
    """n well-formed rows in HEADER order."""
    return [
        ["fr", f"city{i}", f"City {i}", "A8", "", f"{(i % 180) - 90 + 0.5}", f"{(i % 360) - 180 + 0.25}"]
        for i in range(n)
    ]


def write_csv(path: Path, rows, header=HEADER) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(header)
        w.writerows(rows)
    return path


def write_zip(archive: Path, member: str, source: Path) -> Path:
    archive.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive, "w") as zf:
        zf.write(source, arcname=member)
    return archive


@pytest.fixture(autouse=True)
def restore_logging():
    """setup_logger() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No citybench env variables and no .env file in reach."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield monkeypatch
    # load_dotenv writes to os.environ directly
    for name in ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture
def conn():
    return MagicMock(name="connection")


@pytest.fixture
def engine(conn):
    eng = MagicMock(name="engine")
    eng.connect.return_value = conn
    return eng
