from .pool import acquire, create_pool, masked_dsn_for_log, warm_up
from .migrate import build_migration_config, current_head, run_migrations

__all__ = [
    "acquire",
    "create_pool",
    "masked_dsn_for_log",
    "warm_up",
    "build_migration_config",
    "current_head",
    "run_migrations",
]
