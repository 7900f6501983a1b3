"""Data access layer for market record operations."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from sqlite3 import Connection

from beartype import beartype

from market_sync.errors import StoreError
from market_sync.models import CandidateRecord, MarketRecord

_SELECT_COLUMNS = "id, event_name, event_id, market_id, title, created_at"


def _row_to_record(row: sqlite3.Row) -> MarketRecord:
    return MarketRecord(
        id=row["id"],
        event_name=row["event_name"],
        event_id=row["event_id"],
        market_id=row["market_id"],
        title=row["title"],
        created_at=str(row["created_at"]) if row["created_at"] is not None else None,
    )


@beartype
def insert_records_batch(records: Sequence[CandidateRecord], conn: Connection) -> int:
    """
    Insert multiple records in a single transaction.

    Args:
        records: Candidate records to insert
        conn: Database connection

    Returns:
        Number of records inserted

    Raises:
        StoreError: If the insert fails (nothing from the batch is kept)
    """
    if not records:
        return 0

    try:
        cursor = conn.cursor()
        cursor.executemany(
            """
            INSERT INTO market_records (event_name, event_id, market_id)
            VALUES (?, ?, ?)
            """,
            [(record.event_name, record.event_id, record.market_id) for record in records],
        )
        conn.commit()
        return cursor.rowcount
    except sqlite3.Error as e:
        conn.rollback()
        raise StoreError(f"Failed to insert {len(records)} market records: {e}") from e


@beartype
def find_records(conn: Connection, title: str | None = None) -> list[MarketRecord]:
    """
    Retrieve records, optionally filtered by title.

    The title filter is a literal, case-insensitive substring match; records
    without a title never match it.

    Args:
        conn: Database connection
        title: Optional substring to look for in the title

    Returns:
        Matching records in insertion order

    Raises:
        StoreError: If the query fails
    """
    try:
        cursor = conn.cursor()
        if title:
            cursor.execute(
                f"SELECT {_SELECT_COLUMNS} FROM market_records "
                "WHERE title IS NOT NULL AND instr(casefold(title), casefold(?)) > 0 ORDER BY id",
                (title,),
            )
        else:
            cursor.execute(f"SELECT {_SELECT_COLUMNS} FROM market_records ORDER BY id")
        return [_row_to_record(row) for row in cursor.fetchall()]
    except sqlite3.Error as e:
        raise StoreError(f"Failed to read market records: {e}") from e


@beartype
def get_record_count(conn: Connection) -> int:
    """
    Get the total number of records in the database.

    Raises:
        StoreError: If the query fails
    """
    try:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM market_records")
        result = cursor.fetchone()
        return result[0] if result else 0
    except sqlite3.Error as e:
        raise StoreError(f"Failed to count market records: {e}") from e
