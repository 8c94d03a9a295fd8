"""Command-line entry point for administration tasks.

Administrator accounts are never created with a default password. Use this
module to provision one explicitly:

    python src/main.py init-db
    python src/main.py create-admin --username alice --email alice@school.edu
"""

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from core.logging_config import setup_logging
from core.database import SessionLocal, init_db
from core.exceptions import AdminAlreadyExistsError
from utils.admin_manager import AdminManager

logger = logging.getLogger(__name__)


def prompt_password() -> str:
    """Ask for a password twice until both entries match."""
    while True:
        password = getpass.getpass("Password: ")
        if not password:
            print("Password cannot be empty.")
            continue
        if password != getpass.getpass("Confirm password: "):
            print("Passwords do not match, try again.")
            continue
        return password


def create_admin(username: str, email: Optional[str], password: Optional[str]) -> int:
    init_db()
    db = SessionLocal()
    try:
        manager = AdminManager(db)
        manager.create_admin(username, password or prompt_password(), email)
    except AdminAlreadyExistsError as e:
        print(f"Error: {e}")
        return 1
    finally:
        db.close()
    print(f"Administrator '{username}' created.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Story service administration")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create database tables")

    create = subparsers.add_parser("create-admin", help="Create an administrator account")
    create.add_argument("--username", required=True)
    create.add_argument("--email")
    create.add_argument(
        "--password",
        help="Password (prompted for when omitted; avoid passing it on the command line)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)

    if args.command == "init-db":
        init_db()
        print("Database tables created.")
        return 0
    if args.command == "create-admin":
        return create_admin(args.username, args.email, args.password)
    return 2


if __name__ == "__main__":
    sys.exit(main())
