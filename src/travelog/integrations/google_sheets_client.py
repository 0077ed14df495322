"""Google Sheets client (tab management + value writes).

Goals
- Keep all network calls here; callers get plain dataclasses back.
- Every call is awaited to completion before the next one starts. The
  blocking `googleapiclient` request runs in a worker thread.
- No retries: a rejected call raises RemoteError and the run stops.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from src.travelog.common.errors import RemoteError

logger = logging.getLogger(__name__)


def col_to_a1(col_index_zero_based: int) -> str:
    """Convert 0-based column index to A1 column letters (0->A, 25->Z, 26->AA)."""

    if col_index_zero_based < 0:
        raise ValueError("col_index_zero_based must be >= 0")

    result = ""
    n = col_index_zero_based
    while True:
        n, rem = divmod(n, 26)
        result = chr(ord("A") + rem) + result
        if n == 0:
            break
        n -= 1

    return result


def a1_range(title: str, cells: str) -> str:
    """Prefix an A1 range with a quoted tab title: 'März 23'!A1:F5000."""

    escaped = title.replace("'", "''")
    return f"'{escaped}'!{cells}"


@dataclass(frozen=True, slots=True)
class RemoteTab:
    title: str
    tab_id: int
    index: int


@dataclass(frozen=True, slots=True)
class ValueRange:
    range: str
    values: list[list[str]]

    def as_body(self) -> dict[str, Any]:
        return {"range": self.range, "values": self.values}


def _tab_from_properties(props: dict[str, Any]) -> RemoteTab:
    return RemoteTab(
        title=props.get("title", ""),
        tab_id=int(props.get("sheetId", 0)),
        index=int(props.get("index", 0)),
    )


class GoogleSheetsClient:
    def __init__(self, *, spreadsheet_id: str, service: Any) -> None:
        self._spreadsheet_id = spreadsheet_id
        self._service = service

    @classmethod
    def build(cls, *, spreadsheet_id: str, credentials: Any) -> "GoogleSheetsClient":
        from googleapiclient.discovery import build

        service = build(
            "sheets",
            "v4",
            credentials=credentials,
            cache_discovery=False,
        )
        return cls(spreadsheet_id=spreadsheet_id, service=service)

    @property
    def spreadsheet_id(self) -> str:
        return self._spreadsheet_id

    async def _execute(self, operation: str, request: Any) -> dict[str, Any]:
        logger.debug(f"Sheets call: {operation}")
        try:
            resp = await asyncio.to_thread(request.execute)
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            raise RemoteError(
                operation, str(e), status=int(status) if status is not None else None
            ) from e
        except (GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            raise RemoteError(operation, f"{type(e).__name__}: {e}") from e
        return resp or {}

    async def _batch_update(self, operation: str, requests: list[dict[str, Any]]) -> dict[str, Any]:
        request = self._service.spreadsheets().batchUpdate(
            spreadsheetId=self._spreadsheet_id,
            body={"requests": requests},
        )
        return await self._execute(operation, request)

    async def fetch_tabs(self) -> list[RemoteTab]:
        request = self._service.spreadsheets().get(
            spreadsheetId=self._spreadsheet_id,
            fields="sheets(properties(sheetId,title,index))",
        )
        meta = await self._execute("get-metadata", request)
        return [_tab_from_properties(s.get("properties", {})) for s in meta.get("sheets", [])]

    async def add_tab(self, title: str) -> RemoteTab:
        resp = await self._batch_update(
            "create-tab",
            [{"addSheet": {"properties": {"title": title, "hidden": False}}}],
        )
        replies = resp.get("replies") or []
        if not replies or "addSheet" not in replies[0]:
            raise RemoteError("create-tab", f"no addSheet reply for {title!r}")
        return _tab_from_properties(replies[0]["addSheet"].get("properties", {}))

    async def set_column_width(
        self,
        *,
        tab_id: int,
        start_index: int,
        end_index: int,
        pixel_size: int,
    ) -> None:
        await self._batch_update(
            "set-column-width",
            [
                {
                    "updateDimensionProperties": {
                        "range": {
                            "sheetId": tab_id,
                            "dimension": "COLUMNS",
                            "startIndex": start_index,
                            "endIndex": end_index,
                        },
                        "properties": {"pixelSize": pixel_size},
                        "fields": "pixelSize",
                    }
                }
            ],
        )

    async def batch_clear(self, ranges: list[str]) -> None:
        request = (
            self._service.spreadsheets()
            .values()
            .batchClear(spreadsheetId=self._spreadsheet_id, body={"ranges": ranges})
        )
        await self._execute("batch-clear-range", request)

    async def batch_write_values(self, data: list[ValueRange]) -> dict[str, Any]:
        """Write several ranges with one call (USER_ENTERED, so formulas evaluate)."""

        body: dict[str, Any] = {
            "valueInputOption": "USER_ENTERED",
            "data": [vr.as_body() for vr in data],
        }
        request = (
            self._service.spreadsheets()
            .values()
            .batchUpdate(spreadsheetId=self._spreadsheet_id, body=body)
        )
        return await self._execute("batch-write-values", request)

    async def set_tab_indices(self, indices: dict[int, int]) -> None:
        """Move tabs (tab_id -> index) with one call.

        Requests are applied in order, so they are issued by ascending target
        index; each move then lands on its final position.
        """

        if not indices:
            return

        requests = [
            {
                "updateSheetProperties": {
                    "properties": {"sheetId": tab_id, "index": index},
                    "fields": "index",
                }
            }
            for tab_id, index in sorted(indices.items(), key=lambda kv: kv[1])
        ]
        await self._batch_update("set-tab-index", requests)
