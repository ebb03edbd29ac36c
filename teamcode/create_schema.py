"""Create the database tables and indexes for DATABASE_URL.

Usage:
    python -m teamcode.create_schema
"""
import sys

from sqlalchemy.exc import SQLAlchemyError

from teamcode.core import config
from teamcode.database import init_db


def main() -> None:
    try:
        init_db()
    except SQLAlchemyError as exc:
        print("Schema creation failed:", exc, file=sys.stderr)
        sys.exit(1)
    print(f"Schema ready on {config.DATABASE_URL}")


if __name__ == "__main__":
    main()
