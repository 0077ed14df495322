"""Shared fakes for travelog tests."""

from __future__ import annotations

import re

import pytest

from src.travelog.common.errors import RemoteError
from src.travelog.integrations.google_sheets_client import RemoteTab, ValueRange

_RANGE_RE = re.compile(r"^'(?P<title>(?:[^']|'')*)'!(?P<cells>.+)$")
_CELL_RE = re.compile(r"^([A-Z]+)(\d+)$")


def _split_range(a1: str) -> tuple[str, str]:
    m = _RANGE_RE.match(a1)
    assert m, f"unexpected range {a1!r}"
    return m.group("title").replace("''", "'"), m.group("cells")


def _cell(ref: str) -> tuple[int, int]:
    m = _CELL_RE.match(ref)
    assert m, f"unexpected cell {ref!r}"
    col = 0
    for ch in m.group(1):
        col = col * 26 + (ord(ch) - ord("A") + 1)
    return int(m.group(2)) - 1, col - 1


class FakeSheetsClient:
    """In-memory spreadsheet with the GoogleSheetsClient surface.

    Cells are stored per tab as {(row, col): value}, 0-based.
    """

    def __init__(self, titles: list[str] | None = None) -> None:
        self.tabs: list[RemoteTab] = []
        self.cells: dict[int, dict[tuple[int, int], str]] = {}
        self.widths: dict[int, dict[int, int]] = {}
        self.calls: list[str] = []
        self.fail_on: str | None = None
        self._next_id = 100
        for title in titles or []:
            self._add(title)

    def _add(self, title: str) -> RemoteTab:
        tab = RemoteTab(title=title, tab_id=self._next_id, index=len(self.tabs))
        self._next_id += 1
        self.tabs.append(tab)
        self.cells[tab.tab_id] = {}
        self.widths[tab.tab_id] = {}
        return tab

    def _record(self, op: str) -> None:
        self.calls.append(op)
        if self.fail_on == op:
            raise RemoteError(op, "simulated failure", status=500)

    def _tab_by_title(self, title: str) -> RemoteTab:
        for tab in self.tabs:
            if tab.title == title:
                return tab
        raise AssertionError(f"no tab {title!r}")

    def titles_in_order(self) -> list[str]:
        return [t.title for t in sorted(self.tabs, key=lambda t: t.index)]

    def values(self, title: str) -> dict[tuple[int, int], str]:
        return dict(self.cells[self._tab_by_title(title).tab_id])

    async def fetch_tabs(self) -> list[RemoteTab]:
        self._record("get-metadata")
        return list(self.tabs)

    async def add_tab(self, title: str) -> RemoteTab:
        self._record("create-tab")
        return self._add(title)

    async def set_column_width(self, *, tab_id: int, start_index: int, end_index: int, pixel_size: int) -> None:
        self._record("set-column-width")
        for col in range(start_index, end_index):
            self.widths[tab_id][col] = pixel_size

    async def batch_clear(self, ranges: list[str]) -> None:
        self._record("batch-clear-range")
        for a1 in ranges:
            title, cells = _split_range(a1)
            start, end = cells.split(":")
            (r0, c0), (r1, c1) = _cell(start), _cell(end)
            store = self.cells[self._tab_by_title(title).tab_id]
            for key in [k for k in store if r0 <= k[0] <= r1 and c0 <= k[1] <= c1]:
                del store[key]

    async def batch_write_values(self, data: list[ValueRange]) -> dict:
        self._record("batch-write-values")
        for vr in data:
            title, cells = _split_range(vr.range)
            r0, c0 = _cell(cells.split(":")[0])
            store = self.cells[self._tab_by_title(title).tab_id]
            for i, row in enumerate(vr.values):
                for j, value in enumerate(row):
                    store[(r0 + i, c0 + j)] = value
        return {"totalUpdatedCells": sum(len(r) for vr in data for r in vr.values)}

    async def set_tab_indices(self, indices: dict[int, int]) -> None:
        self._record("set-tab-index")
        self.tabs = [
            RemoteTab(title=t.title, tab_id=t.tab_id, index=indices.get(t.tab_id, t.index))
            for t in self.tabs
        ]


@pytest.fixture
def fake_sheets():
    def _make(titles: list[str] | None = None) -> FakeSheetsClient:
        return FakeSheetsClient(titles)

    return _make
