"""Sync a travel-log export into month tabs.

Run:
  python scripts/sync_travel_log.py path/to/export.tsv
"""

from __future__ import annotations

import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure `import src.*` works when running as `python scripts/...` from repo root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

load_dotenv(override=False)

from src.travelog.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
