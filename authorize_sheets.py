#!/usr/bin/env python3
"""
Authorize the User Inputs API to write to Google Sheets.

Run this once before starting the server with ``SPREADSHEET_ID`` set.
It reads the OAuth client secrets file, prints an authorization URL,
waits for you to paste the code shown after consenting, and saves the
resulting token file.  The server then reuses that token on every run.

Usage:
    python authorize_sheets.py --secrets credentials.json --token token.json

If a token file already exists it is left alone unless --force is given.
"""

import argparse
import os
import sys

from user_inputs_api.app.core.config import settings
from user_inputs_api.app.core.credentials import InteractiveBootstrapProvider
from user_inputs_api.app.core.errors import CredentialError


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Authorize Google Sheets access and cache the OAuth token.")
    ap.add_argument("--secrets", default=settings.client_secrets_file, help="OAuth client secrets JSON file")
    ap.add_argument("--token", default=settings.token_file, help="Where to save the token")
    ap.add_argument("--scope", default=settings.sheets_scope, help="OAuth scope to request")
    ap.add_argument("--force", action="store_true", help="Re-authorize even if a token file exists")
    args = ap.parse_args(argv)

    if not os.path.exists(args.secrets):
        print(f"[!] Client secrets not found: {args.secrets}", file=sys.stderr)
        return 1

    if os.path.exists(args.token) and not args.force:
        print(f"[=] Token already cached at {args.token}; use --force to replace it")
        return 0

    provider = InteractiveBootstrapProvider(args.secrets, args.token, args.scope, timeout=settings.oauth_request_timeout)
    if args.force and os.path.exists(args.token):
        os.remove(args.token)
    try:
        provider.get_credentials()
    except CredentialError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 2

    print(f"[+] Token saved to {args.token}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
