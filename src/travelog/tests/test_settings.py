from __future__ import annotations

import pytest

from src.travelog.common.errors import InputError
from src.travelog.config.settings import Settings, read_spreadsheet_id


def test_read_spreadsheet_id_trims(tmp_path) -> None:
    path = tmp_path / "spreadsheetId"
    path.write_text("  abc123 \n\n", encoding="utf-8")
    assert read_spreadsheet_id(str(path)) == "abc123"


def test_read_spreadsheet_id_missing_file(tmp_path) -> None:
    with pytest.raises(InputError):
        read_spreadsheet_id(str(tmp_path / "spreadsheetId"))


def test_read_spreadsheet_id_empty_file(tmp_path) -> None:
    path = tmp_path / "spreadsheetId"
    path.write_text("\n", encoding="utf-8")
    with pytest.raises(InputError):
        read_spreadsheet_id(str(path))


def test_settings_from_env(monkeypatch, travelog_env_vars) -> None:
    for k, v in travelog_env_vars.items():
        monkeypatch.setenv(k, v)
    monkeypatch.delenv("TRAVELOG_GOOGLE_LOG_LEVEL", raising=False)

    settings = Settings.from_env()

    assert settings.spreadsheet_id == "sheet-123"
    assert settings.service_account_path == travelog_env_vars["GOOGLE_SA_FILE"]
    assert settings.authorized_user_path == travelog_env_vars["GOOGLE_AUTHORIZED_USER_FILE"]
    assert settings.client_id_path == travelog_env_vars["GOOGLE_CLIENT_ID_FILE"]
    assert settings.log_level == "DEBUG"
    assert settings.google_log_level == "WARNING"
