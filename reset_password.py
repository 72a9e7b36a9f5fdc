#!/usr/bin/env python3
"""
Reset a user's password in the Support Network SQLite database.

This script does not read or reveal any existing password.  It sets a
new PBKDF2 hash for the given username, using the same format as the
API.

Usage:
    python reset_password.py --db ./support_network_api/support_network.db --username alice --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys
from typing import List, Optional

from support_network_api.app.core.security import hash_password


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Reset a Support Network user's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to the SQLite DB file")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE username = ?", (args.username,))
        if not cur.fetchone():
            print(f"[!] No user found with username: {args.username}", file=sys.stderr)
            return 2
        cur.execute(
            "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE username = ?",
            (hash_password(new_password), args.username),
        )
        conn.commit()
        print(f"[+] Password updated for user: {args.username}")
        return 0
    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(main())
