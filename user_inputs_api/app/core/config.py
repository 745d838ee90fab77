"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration at all; in that case the
Google Sheets mirror is disabled because no spreadsheet is configured.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "User Inputs API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Bind address used by ``run.py``.
    host: str = os.getenv("HOST", "localhost")
    port: int = int(os.getenv("PORT", "4000"))

    # Populate the store with the three demo records on startup.
    seed_demo_records: bool = _env_flag("SEED_DEMO_RECORDS", "true")

    # Google Sheets mirror.  An empty ``spreadsheet_id`` disables the
    # mirror entirely and new records are only kept in memory.
    spreadsheet_id: str = os.getenv("SPREADSHEET_ID", "")
    sheet_range: str = os.getenv("SHEET_RANGE", "Sheet1")
    client_secrets_file: str = os.getenv("GOOGLE_CLIENT_SECRETS_FILE", "credentials.json")
    # If you change ``sheets_scope``, delete the previously saved token file.
    token_file: str = os.getenv("GOOGLE_TOKEN_FILE", "token.json")
    sheets_scope: str = os.getenv("SHEETS_SCOPE", "https://www.googleapis.com/auth/spreadsheets")

    # When enabled, a request that finds no cached token blocks on the
    # console until an operator pastes an authorization code.  Leave this
    # off and run ``authorize_sheets.py`` once instead.
    sheets_interactive_auth: bool = _env_flag("SHEETS_INTERACTIVE_AUTH", "false")
    oauth_request_timeout: int = int(os.getenv("OAUTH_REQUEST_TIMEOUT", "30"))

    @property
    def sheets_enabled(self) -> bool:
        return bool(self.spreadsheet_id)


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
