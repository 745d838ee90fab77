"""
Google Sheets mirror for newly created records.

``SheetsAppender`` appends exactly one row per call to a configured
spreadsheet range using ``valueInputOption=RAW``, so values are stored
as typed rather than parsed as formulas or dates.  There is no retry:
a failed append is reported to the caller as ``ExternalMirrorError``
and the row is simply not recorded.

The Sheets API client is built lazily with ``googleapiclient`` from the
credentials supplied by a provider (see ``core.credentials``).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

import google.auth.exceptions
import googleapiclient.errors
import httplib2
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from user_inputs_api.app.core.config import Settings
from user_inputs_api.app.core.credentials import CachedTokenProvider, InteractiveBootstrapProvider
from user_inputs_api.app.core.errors import CredentialError, ExternalMirrorError
from user_inputs_api.app.schemas.user_input import UserInput


logger = logging.getLogger(__name__)


def build_sheets_service(credentials: Credentials) -> Any:
    return build("sheets", "v4", credentials=credentials, cache_discovery=False)


class SheetsAppender:
    """Append user input rows to one spreadsheet range."""

    def __init__(
        self,
        credentials_provider: CachedTokenProvider,
        spreadsheet_id: str,
        sheet_range: str = "Sheet1",
        service_factory: Callable[[Credentials], Any] = build_sheets_service,
    ) -> None:
        self.credentials_provider = credentials_provider
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range
        self.service_factory = service_factory
        self._service: Optional[Any] = None

    def _get_service(self) -> Any:
        if self._service is None:
            credentials = self.credentials_provider.get_credentials()
            self._service = self.service_factory(credentials)
        return self._service

    def append_user_input(self, record: UserInput) -> dict:
        """Append ``record`` as one row and return the API response.

        Raises ``ExternalMirrorError`` if the credentials cannot be
        obtained or the API call fails.
        """
        start_time = time.time()
        body = {"values": [record.as_row()]}
        try:
            service = self._get_service()
            result = (
                service.spreadsheets()
                .values()
                .append(
                    spreadsheetId=self.spreadsheet_id,
                    range=self.sheet_range,
                    valueInputOption="RAW",
                    body=body,
                )
                .execute()
            )
        except CredentialError:
            logger.error("Sheets credentials unavailable; %s was not mirrored", record.name)
            raise
        except HttpError as exc:
            error_content = exc.content.decode("utf-8") if exc.content else str(exc)
            logger.error("HttpError appending %s after %.2fs: %s", record.name, time.time() - start_time, error_content)
            raise ExternalMirrorError(error_content) from exc
        except (
            googleapiclient.errors.Error,
            httplib2.HttpLib2Error,
            google.auth.exceptions.GoogleAuthError,
            OSError,
        ) as exc:
            logger.exception("Error appending %s to Google Sheets", record.name)
            raise ExternalMirrorError(str(exc)) from exc

        logger.info(
            "Appended %s to %s in %.2fs. Updates: %s",
            record.name,
            self.sheet_range,
            time.time() - start_time,
            result.get("updates"),
        )
        return result


def create_sheets_appender(app_settings: Settings) -> Optional[SheetsAppender]:
    """Build the mirror described by ``app_settings``.

    Returns ``None`` when no spreadsheet is configured.
    """
    if not app_settings.sheets_enabled:
        logger.info("SPREADSHEET_ID is not set; Google Sheets mirror disabled")
        return None

    if app_settings.sheets_interactive_auth:
        provider: CachedTokenProvider = InteractiveBootstrapProvider(
            app_settings.client_secrets_file,
            app_settings.token_file,
            app_settings.sheets_scope,
            timeout=app_settings.oauth_request_timeout,
        )
    else:
        provider = CachedTokenProvider(
            app_settings.client_secrets_file,
            app_settings.token_file,
            app_settings.sheets_scope,
        )
    logger.info("Mirroring new records to spreadsheet %s (%s)", app_settings.spreadsheet_id, app_settings.sheet_range)
    return SheetsAppender(provider, app_settings.spreadsheet_id, app_settings.sheet_range)
