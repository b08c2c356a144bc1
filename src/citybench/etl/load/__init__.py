# src/citybench/etl/load/__init__.py

from .batch_loader import (
    DEFAULT_BATCH_SIZE,
    LoadStats,
    chunk,
    insert_cities,
    load_cities,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "LoadStats",
    "chunk",
    "insert_cities",
    "load_cities",
]
