"""Smoke test: read-only check of Google credentials and the target spreadsheet.

Prints the tabs currently on the spreadsheet and the order the sorter would
give them. Makes no changes.

Run:
  python scripts/sheets_access_smoke.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

load_dotenv(override=False)

from src.travelog.common.errors import TravelogError
from src.travelog.config.settings import Settings
from src.travelog.integrations.google_auth import GoogleAuthorizer
from src.travelog.integrations.google_sheets_client import GoogleSheetsClient
from src.travelog.use_cases.sheet_reconcile import sorted_tab_order
from src.travelog.use_cases.trip_grouping import parse_month_key


async def _probe(settings: Settings) -> None:
    creds = GoogleAuthorizer.from_settings(settings).authorize()
    client = GoogleSheetsClient.build(spreadsheet_id=settings.spreadsheet_id, credentials=creds)

    tabs = await client.fetch_tabs()
    print(f"Spreadsheet {client.spreadsheet_id}: {len(tabs)} tabs")
    for tab in tabs:
        month = parse_month_key(tab.title)
        print(f"  [{tab.index}] {tab.title!r} (id={tab.tab_id}) month={month}")

    print("Sorted order:", [t.title for t in sorted_tab_order(tabs)])


def main() -> int:
    try:
        settings = Settings.from_env()
        asyncio.run(_probe(settings))
    except TravelogError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
