# src/citybench/etl/transform/records.py

import csv
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Sequence

from geoalchemy2.elements import WKTElement

from citybench.errors import ExtractError, RecordParseError
from citybench.models import SRID

logger = logging.getLogger(__name__)

# field -> header names accepted for it, matched exactly as written in the file
FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "country": ("country", "Country"),
    "city": ("city", "City"),
    "accent_city": ("accent_city", "Accent City"),
    "region": ("region", "Region"),
    "latitude": ("latitude", "Latitude"),
    "longitude": ("longitude", "Longitude"),
}
FLOAT_FIELDS = ("latitude", "longitude")


@dataclass(frozen=True)
class CityRecord:
    country: str
    city: str
    accent_city: str
    region: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class NewCity:
    """One row ready for INSERT INTO cities."""

    country: str
    city: str
    accent_city: str
    region: str
    location: WKTElement

    @classmethod
    def from_record(cls, cr: CityRecord) -> "NewCity":
        # x = longitude, y = latitude
        return cls(
            country=cr.country,
            city=cr.city,
            accent_city=cr.accent_city,
            region=cr.region,
            location=WKTElement(f"POINT({cr.longitude!r} {cr.latitude!r})", srid=SRID),
        )

    def as_params(self) -> Dict[str, Any]:
        return {
            "country": self.country,
            "city": self.city,
            "accent_city": self.accent_city,
            "region": self.region,
            "location": self.location,
        }


def resolve_columns(header: List[str]) -> Dict[str, int]:
    """Map each CityRecord field to its column index in `header`."""
    index: Dict[str, int] = {}
    for field, names in FIELD_ALIASES.items():
        for name in names:
            if name in header:
                index[field] = header.index(name)
                break
        else:
            raise RecordParseError(
                f"missing field `{field}` (expected a column named {names[-1]!r})",
                line=1,
                column=names[-1],
            )
    return index


def _parse_row(row: List[str], columns: Dict[str, int], line: int) -> CityRecord:
    values: Dict[str, Any] = {}
    for field, idx in columns.items():
        if idx >= len(row):
            raise RecordParseError(
                f"row has {len(row)} fields, `{field}` is column {idx + 1}",
                line=line,
                column=field,
            )
        raw = row[idx]
        if field in FLOAT_FIELDS:
            try:
                values[field] = float(raw)
            except ValueError:
                raise RecordParseError(
                    f"invalid float for `{field}`: {raw!r}", line=line, column=field
                ) from None
            if not math.isfinite(values[field]):
                raise RecordParseError(
                    f"non-finite value for `{field}`: {raw!r}", line=line, column=field
                )
        else:
            values[field] = raw
    return CityRecord(**values)


def iter_city_records(
    csv_path: str | Path, encoding: str = "utf-8"
) -> Iterator[CityRecord]:
    """
    Stream CityRecords from a headered CSV file, one pass.
    Stops with RecordParseError on the first row that doesn't parse.
    """
    path = Path(csv_path)
    if not path.is_file():
        raise ExtractError(f"extracted cities file not found at {csv_path}")

    with open(path, "r", encoding=encoding, newline="") as f:
        reader = csv.reader(f)
        try:
            header = next(reader)
        except StopIteration:
            raise RecordParseError("file is empty, expected a header row", line=1) from None
        columns = resolve_columns(header)
        logger.debug("CSV columns in %s: %s", path, columns)

        try:
            for row in reader:
                if not row:
                    continue
                yield _parse_row(row, columns, reader.line_num)
        except (csv.Error, UnicodeDecodeError) as e:
            raise RecordParseError(str(e), line=reader.line_num) from e


def iter_new_cities(records: Iterable[CityRecord]) -> Iterator[NewCity]:
    for cr in records:
        yield NewCity.from_record(cr)
