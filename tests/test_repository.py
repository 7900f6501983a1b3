"""Tests for the market record repository."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from sqlite3 import Connection

import pytest

from market_sync.database.connection import get_connection, initialize_database
from market_sync.database.repository import (
    find_records,
    get_record_count,
    insert_records_batch,
)
from market_sync.errors import StoreError
from market_sync.models import CandidateRecord


def test_initialize_database_creates_file(tmp_path: Path) -> None:
    """Test initialization creates the database and its parent directory."""
    db_path = tmp_path / "nested" / "markets.db"
    assert not db_path.exists()

    initialize_database(db_path)
    initialize_database(db_path)  # idempotent

    assert db_path.exists()


def test_insert_records_batch(conn: Connection) -> None:
    """Test batch insert stores every record."""
    records = [
        CandidateRecord(event_name="A v B", event_id="e1", market_id="m1"),
        CandidateRecord(event_name="C v D", event_id="e2", market_id="m2"),
    ]

    inserted = insert_records_batch(records, conn)

    assert inserted == 2
    stored = find_records(conn)
    assert [record.market_id for record in stored] == ["m1", "m2"]
    assert stored[0].event_name == "A v B"
    assert stored[0].title is None
    assert stored[0].created_at is not None


def test_insert_records_batch_empty(conn: Connection) -> None:
    """Test an empty batch inserts nothing."""
    assert insert_records_batch([], conn) == 0
    assert get_record_count(conn) == 0


def test_market_id_is_not_unique_in_store(conn: Connection, insert_record: Callable[..., int]) -> None:
    """Test the store itself accepts repeated market IDs."""
    insert_record("A v B", "e1", "m1", conn)
    insert_record("A v B", "e1", "m1", conn)

    assert get_record_count(conn) == 2


def test_find_records_by_title_case_insensitive(conn: Connection, insert_record: Callable[..., int]) -> None:
    """Test title filter is a case-insensitive substring match."""
    insert_record("E1", "e1", "m1", conn, title="foo fighters")
    insert_record("E2", "e2", "m2", conn, title="The FOO Cup")
    insert_record("E3", "e3", "m3", conn, title="Foo")
    insert_record("E4", "e4", "m4", conn, title="bar")
    insert_record("E5", "e5", "m5", conn)

    matches = find_records(conn, title="foo")

    assert [record.market_id for record in matches] == ["m1", "m2", "m3"]


def test_find_records_by_title_non_ascii(conn: Connection, insert_record: Callable[..., int]) -> None:
    """Test case folding covers accented letters and sharp s."""
    insert_record("France v Spain", "e1", "m1", conn, title="Équipe de France")
    insert_record("Köln v Bayern", "e2", "m2", conn, title="STRASSE DERBY")
    insert_record("Other", "e3", "m3", conn, title="equipe B")

    assert [r.market_id for r in find_records(conn, title="équipe")] == ["m1"]
    assert [r.market_id for r in find_records(conn, title="ÉQUIPE")] == ["m1"]
    assert [r.market_id for r in find_records(conn, title="straße")] == ["m2"]


def test_find_records_title_is_literal(conn: Connection, insert_record: Callable[..., int]) -> None:
    """Test SQL wildcard characters in the title are matched literally."""
    insert_record("E1", "e1", "m1", conn, title="100% sure")
    insert_record("E2", "e2", "m2", conn, title="100 sure")
    insert_record("E3", "e3", "m3", conn, title="under_score")

    assert [r.market_id for r in find_records(conn, title="%")] == ["m1"]
    assert [r.market_id for r in find_records(conn, title="_")] == ["m3"]


def test_find_records_without_title_returns_all(conn: Connection, insert_record: Callable[..., int]) -> None:
    """Test omitting the title returns every record."""
    insert_record("E1", "e1", "m1", conn, title="foo")
    insert_record("E2", "e2", "m2", conn)

    assert len(find_records(conn)) == 2
    assert len(find_records(conn, title=None)) == 2


def test_find_records_on_closed_connection_raises_store_error(settings) -> None:
    """Test driver errors surface as StoreError."""
    initialize_database(settings.db_path)
    closed = get_connection(settings.db_path)
    closed.close()

    with pytest.raises(StoreError, match="Failed to read market records"):
        find_records(closed)


def test_find_records_missing_table_raises_store_error(tmp_path: Path) -> None:
    """Test querying an uninitialized database raises StoreError."""
    connection = get_connection(tmp_path / "empty.db")
    try:
        with pytest.raises(StoreError):
            find_records(connection)
        with pytest.raises(StoreError):
            insert_records_batch([CandidateRecord(event_name="E", event_id="e", market_id="m")], connection)
    finally:
        connection.close()
