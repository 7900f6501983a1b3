"""Shared fixtures for market-sync tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from sqlite3 import Connection

import pytest

from market_sync.database.connection import get_connection, initialize_database
from market_sync.utils.config import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway database and a fake upstream."""
    return Settings(
        db_path=tmp_path / "markets.db",
        log_dir=tmp_path / "logs",
        upstream_base_url="http://upstream.test",
        upstream_token="secret-token",
    )


@pytest.fixture
def conn(settings: Settings) -> Iterator[Connection]:
    """Connection to an initialized, empty record store."""
    initialize_database(settings.db_path)
    connection = get_connection(settings.db_path)
    yield connection
    connection.close()


@pytest.fixture
def insert_record() -> Callable[..., int]:
    """Seed one record directly, including a title the ingestion job never sets."""

    def _insert(
        event_name: str | None,
        event_id: str | None,
        market_id: str,
        conn: Connection,
        title: str | None = None,
    ) -> int:
        cursor = conn.execute(
            "INSERT INTO market_records (event_name, event_id, market_id, title) VALUES (?, ?, ?, ?)",
            (event_name, event_id, market_id, title),
        )
        conn.commit()
        return cursor.lastrowid

    return _insert
