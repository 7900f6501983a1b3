"""Database connection management and initialization."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from sqlite3 import Connection

from beartype import beartype

from market_sync.database.models import MARKET_RECORDS_INDEXES, MARKET_RECORDS_TABLE_SCHEMA
from market_sync.errors import StoreError


def _casefold(value: object) -> str | None:
    return value.casefold() if isinstance(value, str) else None


@beartype
def get_connection(db_path: Path) -> Connection:
    """
    Create and return a database connection.

    The connection may be used from a thread other than the one that
    opened it (API requests run in a worker pool).

    Args:
        db_path: Path to the SQLite database file

    Raises:
        StoreError: If the database cannot be opened
    """
    try:
        conn = sqlite3.connect(str(db_path), check_same_thread=False)
    except sqlite3.Error as e:
        raise StoreError(f"Could not open database {db_path}: {e}") from e
    conn.row_factory = sqlite3.Row
    # Unicode-aware case folding; SQLite lower() only folds ASCII
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    return conn


@beartype
def initialize_database(db_path: Path) -> None:
    """Initialize the database with required tables and indexes."""
    # Ensure database directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        cursor = conn.cursor()

        # Create market_records table
        cursor.execute(MARKET_RECORDS_TABLE_SCHEMA)

        # Create indexes
        for index_sql in MARKET_RECORDS_INDEXES:
            cursor.execute(index_sql)

        conn.commit()
    except sqlite3.Error as e:
        raise StoreError(f"Could not initialize database {db_path}: {e}") from e
    finally:
        conn.close()
