#!/usr/bin/env python3
"""
Print a bearer token for an existing channel.

Useful for scripting against the API without going through
``/api/v1/user/login``.  The token embeds the same claims a login
would and is signed with the configured SECRET_KEY.

Usage:
    SECRET_KEY=... python create_token.py --email ana@example.com --days 365
"""

import argparse
import sys

from video_hub_api.app.core.config import settings
from video_hub_api.app.core.db import get_connection
from video_hub_api.app.core.security import TokenManager, identity_claims


def main():
    ap = argparse.ArgumentParser(description="Issue a bearer token for a channel.")
    ap.add_argument("--email", required=True, help="E-mail of the channel")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    args = ap.parse_args()

    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT id, channel_name, email, phone, logo_id FROM users WHERE email = ?",
            (args.email.strip().lower(),),
        ).fetchone()
    finally:
        conn.close()
    if not row:
        print(f"[!] No channel found with email: {args.email}", file=sys.stderr)
        sys.exit(2)

    token = TokenManager(settings).create_access_token(
        identity_claims(row), expires_delta=args.days * 24 * 60 * 60
    )
    print(token)


if __name__ == "__main__":
    main()
