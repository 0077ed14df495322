"""Runtime configuration for the travel-log sync.

Values come from the environment (optionally via `.env`), plus the
`spreadsheetId` side-input file that names the target spreadsheet.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import dotenv_values, load_dotenv

from src.travelog.common.errors import InputError

load_dotenv(override=False)

# Convenience: allow local runs with only `.env.example` filled.
# Blank placeholders in `.env.example` must not shadow real values.
if not os.environ.get("TRAVELOG_SPREADSHEET_ID_FILE"):
    example_path = os.path.abspath(".env.example")
    if os.path.exists(example_path):
        for k, v in (dotenv_values(example_path) or {}).items():
            if not k or not v:
                continue
            if not os.environ.get(k):
                os.environ[k] = v

DEFAULT_SPREADSHEET_ID_FILE = "spreadsheetId"
DEFAULT_SERVICE_ACCOUNT_FILE = "~/.credentials/service-account.json"
DEFAULT_AUTHORIZED_USER_FILE = "~/.credentials/sheets.googleapis.com-traewelling.json"
DEFAULT_CLIENT_ID_FILE = "client_id.json"


def read_spreadsheet_id(path: str) -> str:
    """Read the target spreadsheet id from a single-line file."""

    try:
        with open(path, "r", encoding="utf-8") as f:
            value = f.read().strip()
    except OSError as e:
        raise InputError(f"Cannot read spreadsheet id file {path!r}: {e}") from e

    if not value:
        raise InputError(f"Spreadsheet id file {path!r} is empty")
    return value


def log_levels_from_env() -> tuple[str, str]:
    """(app level, google client level); readable before the rest of the config."""

    return (
        os.environ.get("TRAVELOG_LOG_LEVEL", "INFO"),
        os.environ.get("TRAVELOG_GOOGLE_LOG_LEVEL", "WARNING"),
    )


@dataclass(frozen=True, slots=True)
class Settings:
    spreadsheet_id: str
    service_account_path: str
    authorized_user_path: str
    client_id_path: str = DEFAULT_CLIENT_ID_FILE
    log_level: str = "INFO"
    google_log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        log_level, google_log_level = log_levels_from_env()
        spreadsheet_id_file = os.environ.get(
            "TRAVELOG_SPREADSHEET_ID_FILE", DEFAULT_SPREADSHEET_ID_FILE
        )

        return cls(
            spreadsheet_id=read_spreadsheet_id(spreadsheet_id_file),
            service_account_path=os.path.expanduser(
                os.environ.get("GOOGLE_SA_FILE") or DEFAULT_SERVICE_ACCOUNT_FILE
            ),
            authorized_user_path=os.path.expanduser(
                os.environ.get("GOOGLE_AUTHORIZED_USER_FILE") or DEFAULT_AUTHORIZED_USER_FILE
            ),
            client_id_path=os.path.expanduser(
                os.environ.get("GOOGLE_CLIENT_ID_FILE") or DEFAULT_CLIENT_ID_FILE
            ),
            log_level=log_level,
            google_log_level=google_log_level,
        )
