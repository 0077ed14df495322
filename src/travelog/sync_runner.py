"""End-to-end sync: export file -> month tabs on the spreadsheet.

Order of work:
1. ingest and group locally (no network)
2. authorize once
3. reconcile each month, oldest first, strictly one remote call at a time
4. sort all tabs once, newest first
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from src.travelog.common.errors import InputError
from src.travelog.config.settings import Settings
from src.travelog.integrations.google_auth import GoogleAuthorizer
from src.travelog.integrations.google_sheets_client import GoogleSheetsClient
from src.travelog.use_cases.sheet_reconcile import (
    MonthOutcome,
    SheetReconciler,
    SheetSorter,
    SortResult,
)
from src.travelog.use_cases.trip_grouping import group_trips
from src.travelog.use_cases.trip_ingest import read_trips

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SyncReport:
    trip_count: int = 0
    months: list[MonthOutcome] = field(default_factory=list)
    sort: SortResult | None = None

    @property
    def created_tabs(self) -> list[str]:
        return [m.title for m in self.months if m.created]


async def run_sync(
    input_path: str | None,
    settings: Settings,
    *,
    client: Any | None = None,
    authorizer: GoogleAuthorizer | None = None,
) -> SyncReport:
    if not input_path:
        raise InputError("Missing input file path")
    if not os.path.isfile(input_path):
        raise InputError(f"Input file not found: {input_path}")

    trips = read_trips(input_path)
    groups = group_trips(trips)
    logger.info(f"{len(trips)} trips in {len(groups)} months")

    if client is None:
        authorizer = authorizer or GoogleAuthorizer.from_settings(settings)
        credentials = authorizer.authorize()
        client = GoogleSheetsClient.build(
            spreadsheet_id=settings.spreadsheet_id,
            credentials=credentials,
        )

    report = SyncReport(trip_count=len(trips))
    report.months = await SheetReconciler(client).reconcile_all(groups)
    report.sort = await SheetSorter(client).sort_tabs()

    if report.created_tabs:
        logger.info(f"Created tabs: {report.created_tabs}")
    return report
