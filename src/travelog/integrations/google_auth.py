"""Credential acquisition for the Sheets API.

The interactive consent flow and token persistence live outside this
project. This module only loads what they left behind:
- an authorized-user token file (preferred), or
- a service account key file.

Token files come in two shapes:
- google-auth's own (`client_id`, `client_secret`, `refresh_token`, `token`)
- the older consent tool's (`access_token`, `refresh_token`, `expiry_date` in
  ms), whose client id/secret live in `client_id.json` under `installed`
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

from google.oauth2 import credentials as user_credentials
from google.oauth2 import service_account

from src.travelog.common.errors import InputError
from src.travelog.config.settings import DEFAULT_CLIENT_ID_FILE, Settings

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


def _read_json(path: str, what: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InputError(f"Cannot read {what} {path}: {e}") from e

    if not isinstance(raw, dict):
        raise InputError(f"Invalid {what} {path}: expected a JSON object")
    return raw


def _expiry_from_millis(value: Any) -> datetime | None:
    # google-auth compares expiry against naive UTC.
    if value in (None, ""):
        return None
    try:
        seconds = int(value) / 1000
    except (TypeError, ValueError):
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)


class GoogleAuthorizer:
    def __init__(
        self,
        *,
        authorized_user_path: str,
        service_account_path: str,
        client_id_path: str = DEFAULT_CLIENT_ID_FILE,
        scopes: list[str] | None = None,
    ) -> None:
        self._authorized_user_path = os.path.expanduser(authorized_user_path)
        self._service_account_path = os.path.expanduser(service_account_path)
        self._client_id_path = os.path.expanduser(client_id_path)
        self._scopes = list(scopes or SCOPES)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleAuthorizer":
        return cls(
            authorized_user_path=settings.authorized_user_path,
            service_account_path=settings.service_account_path,
            client_id_path=settings.client_id_path,
        )

    def _load_installed_client(self) -> dict[str, Any]:
        raw = _read_json(self._client_id_path, "OAuth client file")
        block = raw.get("installed") or raw.get("web")
        if not isinstance(block, dict) or not block.get("client_id") or not block.get("client_secret"):
            raise InputError(
                f"OAuth client file {self._client_id_path} has no installed.client_id/client_secret"
            )
        return block

    def _load_authorized_user(self) -> Any:
        info = _read_json(self._authorized_user_path, "authorized-user token file")

        if info.get("client_id") and info.get("client_secret"):
            try:
                return user_credentials.Credentials.from_authorized_user_info(
                    info, scopes=self._scopes
                )
            except ValueError as e:
                raise InputError(
                    f"Invalid authorized-user token file {self._authorized_user_path}: {e}"
                ) from e

        access_token = info.get("access_token") or info.get("token")
        refresh_token = info.get("refresh_token")
        if not access_token and not refresh_token:
            raise InputError(
                f"Token file {self._authorized_user_path} has neither access_token nor refresh_token"
            )

        client = self._load_installed_client()
        return user_credentials.Credentials(
            token=access_token,
            refresh_token=refresh_token,
            token_uri=client.get("token_uri") or DEFAULT_TOKEN_URI,
            client_id=client["client_id"],
            client_secret=client["client_secret"],
            scopes=self._scopes,
            expiry=_expiry_from_millis(info.get("expiry_date")),
        )

    def authorize(self) -> Any:
        """Return a ready-to-use google.auth credential."""

        if os.path.exists(self._authorized_user_path):
            logger.info(f"Using authorized-user token {self._authorized_user_path}")
            return self._load_authorized_user()

        if os.path.exists(self._service_account_path):
            logger.info(f"Using service account {self._service_account_path}")
            try:
                return service_account.Credentials.from_service_account_file(
                    self._service_account_path, scopes=self._scopes
                )
            except (ValueError, json.JSONDecodeError) as e:
                raise InputError(
                    f"Invalid service account file {self._service_account_path}: {e}"
                ) from e

        raise InputError(
            "No Google credentials found. Set GOOGLE_AUTHORIZED_USER_FILE to a saved token "
            f"or GOOGLE_SA_FILE to a service account key (looked at "
            f"{self._authorized_user_path} and {self._service_account_path})."
        )
