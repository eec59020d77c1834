"""
main.py
-------
Entry point: registers any names given on the command line, then prints
every stored user.

Usage:
    python main.py [NAME ...]

Responsibilities:
    - Resolve the backend (DB_BACKEND) and open its connection pool.
    - Build the repository, which migrates the users table.
    - Register users and print the full list.
"""

import argparse
import sys

import config
from db.connection import BackendKind, DatabaseConfig, open_pool
from repositories import build_user_repository
from services.user_service import UserService
from utils.errors import UserStoreError
from utils.logger import get_logger

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register and list users.")
    parser.add_argument("names", nargs="*", help="user names to register before listing")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Run the program; returns the process exit status."""
    args = parse_args(argv)

    # ── 1. Database setup ─────────────────────────────────
    try:
        kind = BackendKind.parse(config.DB_BACKEND)
        logger.info(f"Connecting to {kind.value}...")
        db_pool = open_pool(kind, DatabaseConfig.from_env())
    except UserStoreError as e:
        logger.error(f"Failed to connect to database: {e}")
        return 1

    try:
        # ── 2. Repository + service ───────────────────────
        try:
            repo = build_user_repository(kind, db_pool)
        except UserStoreError as e:
            logger.error(f"Failed to initialize repository: {e}")
            return 1
        user_service = UserService(repo)

        # ── 3. Registration (failures are not fatal) ──────
        for name in args.names:
            try:
                user_service.register_user(name)
            except UserStoreError as e:
                logger.warning(f"Failed to register user: {e}")

        # ── 4. Listing ────────────────────────────────────
        try:
            users = user_service.list_users()
        except UserStoreError as e:
            logger.error(f"Failed to list users: {e}")
            return 1

        print("Registered Users:", users)
        return 0
    finally:
        db_pool.closeall()


if __name__ == "__main__":
    sys.exit(main())
