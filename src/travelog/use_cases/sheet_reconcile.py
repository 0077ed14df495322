"""Reconcile month groups against the remote spreadsheet.

Per month: find the tab by exact title (or create it), clear a fixed range,
then write header + rows + total in one batch. Every run is a destructive
overwrite, so rerunning on the same input converges to the same content.

There are no compensating steps. A failed call leaves the month in the
state the last successful call produced; only a rerun advances it.

Row ceiling: the clear range stops at row 5000, so at most 4999 data rows
per month are guaranteed. Longer months are still written in full, but a
later clear will not reach rows past 5000.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from src.travelog.integrations.google_sheets_client import (
    GoogleSheetsClient,
    RemoteTab,
    ValueRange,
    a1_range,
    col_to_a1,
)
from src.travelog.use_cases.trip_grouping import (
    DisplayRow,
    chronological_keys,
    parse_month_key,
)

logger = logging.getLogger(__name__)

HEADER = ("Date", "Start", "End", "Distance")
DISTANCE_COL = col_to_a1(HEADER.index("Distance"))
LAST_DATA_COL = col_to_a1(len(HEADER) - 1)

CLEAR_CELLS = "A1:F5000"
CLEAR_LAST_ROW = 5000
MAX_DATA_ROWS = CLEAR_LAST_ROW - 1
SUMMARY_CELL = "F2"

# Columns B..C (0-based, end exclusive).
WIDE_COLUMNS = (1, 3)
WIDE_COLUMN_PIXELS = 250


class MonthState(str, enum.Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    CLEARED = "cleared"
    WRITTEN = "written"


@dataclass(slots=True)
class MonthOutcome:
    title: str
    row_count: int
    state: MonthState = MonthState.PENDING
    tab: RemoteTab | None = None
    created: bool = False

    def advance(self, state: MonthState) -> None:
        logger.info(f"[{self.title}] {self.state.value} -> {state.value}")
        self.state = state


def build_write_payload(title: str, rows: Sequence[DisplayRow]) -> list[ValueRange]:
    """Header, data rows from row 2, and a SUM over the distance column."""

    last_row = len(rows) + 1
    return [
        ValueRange(
            range=a1_range(title, f"A1:{LAST_DATA_COL}1"),
            values=[list(HEADER)],
        ),
        ValueRange(
            range=a1_range(title, f"A2:{LAST_DATA_COL}{last_row}"),
            values=[r.as_values() for r in rows],
        ),
        ValueRange(
            range=a1_range(title, SUMMARY_CELL),
            values=[[f"=SUM({DISTANCE_COL}2:{DISTANCE_COL}{last_row})"]],
        ),
    ]


class SheetReconciler:
    def __init__(self, client: GoogleSheetsClient) -> None:
        self._client = client

    async def fetch_tabs(self) -> list[RemoteTab]:
        return await self._client.fetch_tabs()

    async def create_tab(self, title: str) -> RemoteTab:
        """Create a tab and size its wide columns. Both calls must succeed."""

        tab = await self._client.add_tab(title)
        start, end = WIDE_COLUMNS
        await self._client.set_column_width(
            tab_id=tab.tab_id,
            start_index=start,
            end_index=end,
            pixel_size=WIDE_COLUMN_PIXELS,
        )
        return tab

    async def clear_tab(self, tab: RemoteTab) -> None:
        await self._client.batch_clear([a1_range(tab.title, CLEAR_CELLS)])

    async def write_tab(self, tab: RemoteTab, rows: Sequence[DisplayRow]) -> None:
        await self._client.batch_write_values(build_write_payload(tab.title, rows))

    async def reconcile_month(
        self,
        title: str,
        rows: Sequence[DisplayRow],
        existing: Mapping[str, RemoteTab],
    ) -> MonthOutcome:
        outcome = MonthOutcome(title=title, row_count=len(rows))

        if len(rows) > MAX_DATA_ROWS:
            logger.warning(
                f"[{title}] {len(rows)} rows exceed the {MAX_DATA_ROWS}-row clear range; "
                f"rows past {CLEAR_LAST_ROW} will not be cleared by later runs"
            )

        tab = existing.get(title)
        if tab is None:
            tab = await self.create_tab(title)
            outcome.created = True
        outcome.tab = tab
        outcome.advance(MonthState.RESOLVED)

        await self.clear_tab(tab)
        outcome.advance(MonthState.CLEARED)

        await self.write_tab(tab, rows)
        outcome.advance(MonthState.WRITTEN)
        return outcome

    async def reconcile_all(self, groups: Mapping[str, Sequence[DisplayRow]]) -> list[MonthOutcome]:
        """Reconcile every month, oldest first, one at a time."""

        existing: dict[str, RemoteTab] = {}
        for tab in await self.fetch_tabs():
            existing.setdefault(tab.title, tab)

        outcomes: list[MonthOutcome] = []
        for title in chronological_keys(groups.keys()):
            outcome = await self.reconcile_month(title, groups[title], existing)
            if outcome.tab is not None:
                existing[title] = outcome.tab
            outcomes.append(outcome)
        return outcomes


def sorted_tab_order(tabs: Sequence[RemoteTab]) -> list[RemoteTab]:
    """Newest month first; titles that are not month keys go last, in their current order."""

    def _sort_key(tab: RemoteTab) -> tuple[int, int, int]:
        d = parse_month_key(tab.title)
        if d is None:
            return (1, 0, tab.index)
        return (0, -d.toordinal(), tab.index)

    return sorted(tabs, key=_sort_key)


@dataclass(slots=True)
class SortResult:
    order: list[str] = field(default_factory=list)
    unparsed: list[str] = field(default_factory=list)


class SheetSorter:
    def __init__(self, client: GoogleSheetsClient) -> None:
        self._client = client

    async def sort_tabs(self) -> SortResult:
        """Reorder every tab on the spreadsheet, not only the ones touched this run."""

        tabs = await self._client.fetch_tabs()
        ordered = sorted_tab_order(tabs)

        result = SortResult(
            order=[t.title for t in ordered],
            unparsed=[t.title for t in ordered if parse_month_key(t.title) is None],
        )
        if result.unparsed:
            logger.warning(f"Tabs without a month title placed last: {result.unparsed}")

        await self._client.set_tab_indices({t.tab_id: i for i, t in enumerate(ordered)})
        logger.info(f"Tab order: {result.order}")
        return result
