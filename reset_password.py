#!/usr/bin/env python3
"""
Reset a member's password directly in the SQLite database.

This script does not read or reveal existing passwords.  It stores a
new hash (same PBKDF2 format as the API) for the given email, for
support cases where the emailed reset code cannot be used.

Usage:
    python reset_password.py --db ./community_match.db --email jana@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from community_match_api.app.core.security import hash_password
from community_match_api.app.services.password_reset_service import MIN_PASSWORD_LENGTH


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset a member's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./community_match.db)")
    ap.add_argument("--email", required=True, help="Member email, matched exactly")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        print(f"[!] Password must be at least {MIN_PASSWORD_LENGTH} characters.", file=sys.stderr)
        sys.exit(1)

    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("UPDATE users SET password_hash = ? WHERE email = ?", (hash_password(new_password), args.email))
        if cur.rowcount == 0:
            print(f"[!] No user found with email: {args.email}", file=sys.stderr)
            sys.exit(2)
        conn.commit()
        print(f"[+] Password updated for user: {args.email}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
