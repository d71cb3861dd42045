"""Print a long-lived bearer token for an existing member.

Usage:
    python create_token.py --user-id 1 --email jana@example.com [--days 365]

The token is signed with ``SECRET_KEY`` from the environment, so run
it with the same configuration as the server.
"""
import argparse

from community_match_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue a bearer token for a member.")
    ap.add_argument("--user-id", type=int, required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    args = ap.parse_args()
    print(create_access_token({"sub": args.email, "user_id": args.user_id}, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
