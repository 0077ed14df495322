"""Command line entry point.

Run:
  travelog-sync path/to/export.tsv

Config comes from the environment / `.env` (see `.env.example`).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from src.travelog.common.errors import InputError, ParseError, TravelogError
from src.travelog.config.settings import Settings, log_levels_from_env
from src.travelog.sync_runner import run_sync

_GOOGLE_LOGGERS = ("googleapiclient", "google", "google_auth_httplib2")


def configure_logging(level: str, google_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for name in _GOOGLE_LOGGERS:
        logging.getLogger(name).setLevel(getattr(logging, google_level.upper(), logging.WARNING))


def _fail(msg: str, code: int) -> int:
    print(f"ERROR: {msg}", file=sys.stderr)
    return code


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="travelog-sync",
        description="Write a travel-log export into one spreadsheet tab per month.",
    )
    parser.add_argument("path", nargs="?", help="Tab-separated travel-log export")
    args = parser.parse_args(argv)

    configure_logging(*log_levels_from_env())

    try:
        if not args.path:
            raise InputError("Missing file path")
        settings = Settings.from_env()
        report = asyncio.run(run_sync(args.path, settings))
    except (InputError, ParseError) as e:
        return _fail(str(e), 2)
    except TravelogError as e:
        return _fail(str(e), 1)

    print(f"✅ Synced {report.trip_count} trips into {len(report.months)} month tabs")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
