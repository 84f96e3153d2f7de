"""Database management commands for the sharing domain.

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
"""

import argparse
import sys

from sharing.domain import sharing
from sharing.utils.db import drop_db, setup_db


def setup_database():
    """Create the sharing schema in the configured database."""
    print("Initializing sharing domain...")
    sharing.init()
    print("Creating sharing database schema...")
    setup_db(sharing)
    print("Done.")


def drop_database():
    """Drop the sharing schema from the configured database."""
    print("Initializing sharing domain...")
    sharing.init()
    print("Dropping sharing database schema...")
    drop_db(sharing)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Sharing database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
