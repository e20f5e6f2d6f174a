#!/usr/bin/env python
"""
Provision an API user and print its access token.

    python -m backend.scripts.create_user alice@example.com --username alice
"""
import argparse

from backend.app.db import SessionLocal, init_db
from backend.app.services.auth_service import create_user


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("--username", default=None)
    args = parser.parse_args()

    init_db()
    db = SessionLocal()
    try:
        user, token = create_user(db, args.email, username=args.username)
    finally:
        db.close()

    print(f"User id:      {user.id}")
    print(f"Access token: {token}")
    print("Send it as 'Authorization: Bearer <token>'. It is not stored and cannot be shown again.")


if __name__ == "__main__":
    main()
