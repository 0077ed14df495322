"""Month grouping of trips.

The month key (e.g. "März 23") is also the remote tab title, so its format
is a stable contract: changing it makes every existing tab unmatchable and
causes duplicate tabs on the next run. Bump MONTH_KEY_FORMAT_VERSION if it
ever has to change.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from src.travelog.use_cases.trip_ingest import Trip

MONTH_KEY_FORMAT_VERSION = 1

GERMAN_MONTHS = (
    "Januar",
    "Februar",
    "März",
    "April",
    "Mai",
    "Juni",
    "Juli",
    "August",
    "September",
    "Oktober",
    "November",
    "Dezember",
)

_MONTHS = {name.lower(): i + 1 for i, name in enumerate(GERMAN_MONTHS)}

# Two-digit years: 69..99 -> 19xx, 00..68 -> 20xx.
_TWO_DIGIT_YEAR_PIVOT = 68

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class DisplayRow:
    date: str
    origin: str
    destination: str
    distance: str

    def as_values(self) -> list[str]:
        return [self.date, self.origin, self.destination, self.distance]


def month_key(when: date | datetime) -> str:
    return f"{GERMAN_MONTHS[when.month - 1]} {when.year % 100:02d}"


def parse_month_key(text: str | None) -> date | None:
    """Parse a tab title like 'März 23' into the first day of that month.

    Returns None for anything that is not a month key.
    """

    if not text:
        return None

    m = re.match(r"^\s*(\S+)\s+(\d{2}|\d{4})\s*$", text)
    if not m:
        return None

    mon = _MONTHS.get(m.group(1).lower())
    if not mon:
        return None

    year = int(m.group(2))
    if len(m.group(2)) == 2:
        year += 1900 if year > _TWO_DIGIT_YEAR_PIVOT else 2000
    return date(year, mon, 1)


def format_distance(distance: Decimal | int | float) -> str:
    """Two decimals, comma separator: 3 -> '3,00', 12.5 -> '12,50'."""

    d = Decimal(str(distance)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return f"{d:.2f}".replace(".", ",")


def to_display_row(trip: Trip) -> DisplayRow:
    return DisplayRow(
        date=trip.departure.strftime("%d.%m.%Y"),
        origin=trip.origin or "",
        destination=trip.destination or "",
        distance=format_distance(trip.distance),
    )


def group_trips(trips: Iterable[Trip]) -> dict[str, list[DisplayRow]]:
    """Bucket trips by month key; rows keep source order within a bucket."""

    groups: dict[str, list[DisplayRow]] = {}
    for trip in trips:
        groups.setdefault(month_key(trip.departure), []).append(to_display_row(trip))
    return groups


def chronological_keys(keys: Iterable[str]) -> list[str]:
    """Sort month keys ascending by the month they represent.

    Keys that do not parse sort after all parseable ones, in input order.
    """

    def _sort_key(item: tuple[int, str]) -> tuple[int, date, int]:
        pos, key = item
        d = parse_month_key(key)
        if d is None:
            return (1, date.min, pos)
        return (0, d, pos)

    return [key for _, key in sorted(enumerate(keys), key=_sort_key)]
