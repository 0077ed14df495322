"""Pytest configuration.

Ensures `src.travelog.*` imports resolve during test collection.
"""

import sys
from pathlib import Path

import pytest


def _prepend_sys_path(path: Path) -> None:
    resolved = str(path.resolve())
    if resolved not in sys.path:
        sys.path.insert(0, resolved)


REPO_ROOT = Path(__file__).resolve().parent

# Allow importing `src.*` package explicitly.
_prepend_sys_path(REPO_ROOT)


@pytest.fixture
def travelog_env_vars(tmp_path):
    """Environment for Settings.from_env() pointing at temp files."""
    spreadsheet_id_file = tmp_path / "spreadsheetId"
    spreadsheet_id_file.write_text("sheet-123\n", encoding="utf-8")
    return {
        "TRAVELOG_SPREADSHEET_ID_FILE": str(spreadsheet_id_file),
        "GOOGLE_SA_FILE": str(tmp_path / "sa.json"),
        "GOOGLE_AUTHORIZED_USER_FILE": str(tmp_path / "token.json"),
        "GOOGLE_CLIENT_ID_FILE": str(tmp_path / "client_id.json"),
        "TRAVELOG_LOG_LEVEL": "DEBUG",
    }
