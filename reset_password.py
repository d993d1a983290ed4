#!/usr/bin/env python3
"""
Reset a channel's password in the Video Hub SQLite database.

This script DOES NOT read or reveal any existing passwords. It simply sets a new password
hash (PBKDF2-HMAC-SHA256, format "salthex$hashhex") for the specified channel e-mail.
Existing tokens stay valid until they expire.

Usage:
    python reset_password.py --db ./video_hub_api/video_hub.db --email ana@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from video_hub_api.app.core.security import hash_password


def main():
    ap = argparse.ArgumentParser(description="Reset a Video Hub channel password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./video_hub_api/video_hub.db)")
    ap.add_argument("--email", required=True, help="Channel e-mail to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    email = args.email.strip().lower()
    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE email = ?", (email,))
        if not cur.fetchone():
            print(f"[!] No channel found with email: {args.email}", file=sys.stderr)
            sys.exit(2)

        cur.execute(
            "UPDATE users SET password = ?, updated_at = strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now') WHERE email = ?",
            (hash_password(new_password), email),
        )
        conn.commit()
        print(f"[+] Password updated for channel: {email}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
