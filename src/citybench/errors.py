# src/citybench/errors.py


class CityBenchError(Exception):
    """Base class for every failure the CLI reports and exits on."""


class ConfigError(CityBenchError):
    pass


class PoolError(CityBenchError):
    pass


class MigrationError(CityBenchError):
    pass


class ExtractError(CityBenchError):
    pass


class RecordParseError(CityBenchError):
    """A CSV row could not be turned into a CityRecord."""

    def __init__(self, message: str, *, line: int | None = None, column: str | None = None):
        self.line = line
        self.column = column
        where = f"line {line}: " if line is not None else ""
        super().__init__(f"{where}{message}")


class InsertError(CityBenchError):
    def __init__(self, batch: int, cause: Exception):
        self.batch = batch
        super().__init__(f"can't insert cities (batch {batch}): {cause}")


class BenchmarkError(CityBenchError):
    def __init__(self, iteration: int, cause: Exception):
        self.iteration = iteration
        super().__init__(f"nearest-neighbour query failed at iteration {iteration}: {cause}")
