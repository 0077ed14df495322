'''Travel-log export ingestion.

The export is tab-separated with German column names. Two quirks of the
export tool are repaired before parsing:
- a doubled quote in front of the first header field (`""Status-ID"...`,
  or `"""Status-ID"...` when the header fields are quoted)
- a stray quote after the final newline (`..."\\n"`)

Column-count mismatches are tolerated: missing trailing fields are left
unset instead of failing the whole file.
'''

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from src.travelog.common.errors import InputError, ParseError

logger = logging.getLogger(__name__)

COL_STATUS_ID = "Status-ID"
COL_TRAIN_CATEGORY = "Zugart"
COL_TRAIN_NUMBER = "Zugnummer"
COL_ORIGIN = "Abfahrtsort"
COL_ORIGIN_COORDS = "Abfahrtskoordinaten"
COL_DEPARTURE = "Abfahrtszeit"
COL_DESTINATION = "Ankunftsort"
COL_DESTINATION_COORDS = "Ankunftskoordinaten"
COL_ARRIVAL = "Ankunftszeit"
COL_DURATION = "Reisezeit"
COL_DISTANCE = "Kilometer"
COL_POINTS = "Punkte"
COL_STATUS = "Status"
COL_STOPOVERS = "Zwischenhalte"

REQUIRED_COLUMNS = (COL_DEPARTURE, COL_DISTANCE)

_LEADING_QUOTES = re.compile(rf'^(?:"")+(?="?{re.escape(COL_STATUS_ID)})')
_TRAILING_QUOTE = '"\n"'

_DATETIME_FORMATS = (
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y",
)


@dataclass(frozen=True, slots=True)
class Trip:
    # Required: a row without these cannot be grouped.
    departure: datetime
    distance: Decimal
    # Optional: tolerated as missing.
    status_id: str | None = None
    train_category: str | None = None
    train_number: str | None = None
    origin: str | None = None
    origin_coordinates: str | None = None
    destination: str | None = None
    destination_coordinates: str | None = None
    arrival: datetime | None = None
    duration: str | None = None
    points: int | None = None
    status: str | None = None
    stopovers: str | None = None


def sanitize(raw: str) -> str:
    """Repair the known export artifacts. Idempotent."""

    csv_text = _LEADING_QUOTES.sub("", raw, count=1)

    if csv_text.endswith(_TRAILING_QUOTE):
        csv_text = csv_text[:-1]

    return csv_text


def parse_timestamp(value: str | None) -> datetime | None:
    if value is None:
        return None

    s = value.strip()
    if not s:
        return None

    try:
        return datetime.fromisoformat(s)
    except ValueError:
        pass

    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def parse_distance(value: str | None) -> Decimal | None:
    """Parse a non-negative decimal ("12.5" or "12,5")."""

    if value is None:
        return None

    s = value.strip().replace(",", ".")
    if not s:
        return None

    try:
        d = Decimal(s)
    except InvalidOperation:
        return None

    if not d.is_finite() or d < 0:
        return None
    return d


def _opt_str(value: str | None) -> str | None:
    if value is None:
        return None
    s = value.strip()
    return s or None


def _opt_int(value: str | None) -> int | None:
    s = _opt_str(value)
    if s is None:
        return None
    try:
        return int(s)
    except ValueError:
        return None


def _trip_from_record(record: dict[str, str | None]) -> Trip | None:
    departure = parse_timestamp(record.get(COL_DEPARTURE))
    distance = parse_distance(record.get(COL_DISTANCE))
    if departure is None or distance is None:
        return None

    return Trip(
        departure=departure,
        distance=distance,
        status_id=_opt_str(record.get(COL_STATUS_ID)),
        train_category=_opt_str(record.get(COL_TRAIN_CATEGORY)),
        train_number=_opt_str(record.get(COL_TRAIN_NUMBER)),
        origin=_opt_str(record.get(COL_ORIGIN)),
        origin_coordinates=_opt_str(record.get(COL_ORIGIN_COORDS)),
        destination=_opt_str(record.get(COL_DESTINATION)),
        destination_coordinates=_opt_str(record.get(COL_DESTINATION_COORDS)),
        arrival=parse_timestamp(record.get(COL_ARRIVAL)),
        duration=_opt_str(record.get(COL_DURATION)),
        points=_opt_int(record.get(COL_POINTS)),
        status=_opt_str(record.get(COL_STATUS)),
        stopovers=_opt_str(record.get(COL_STOPOVERS)),
    )


def parse(sanitized: str) -> list[Trip]:
    """Parse sanitized TSV text into trips, in file order.

    Rows shorter than the header get `None` for the missing fields. Rows
    whose departure or distance cannot be parsed are skipped with a warning.
    """

    if not sanitized.strip():
        raise ParseError("Input is empty")

    reader = csv.DictReader(io.StringIO(sanitized, newline=""), delimiter="\t", restval=None)
    header = [h.strip().strip('"') for h in (reader.fieldnames or [])]
    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        raise ParseError(f"Header is missing required columns: {', '.join(missing)}")
    reader.fieldnames = header

    trips: list[Trip] = []
    skipped = 0
    for record in reader:
        if not any((v or "").strip() for k, v in record.items() if k is not None):
            continue
        trip = _trip_from_record(record)
        if trip is None:
            skipped += 1
            logger.warning(
                f"Skipping line {reader.line_num}: unparseable "
                f"{COL_DEPARTURE}={record.get(COL_DEPARTURE)!r} or "
                f"{COL_DISTANCE}={record.get(COL_DISTANCE)!r}"
            )
            continue
        trips.append(trip)

    logger.info(f"Parsed {len(trips)} trips ({skipped} skipped)")
    return trips


def read_trips(path: str) -> list[Trip]:
    """Read, sanitize and parse an export file."""

    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            raw = f.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"Input file {path!r} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise InputError(f"Cannot read input file {path!r}: {e}") from e

    return parse(sanitize(raw))
