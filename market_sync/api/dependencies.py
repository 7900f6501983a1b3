"""FastAPI dependencies for settings, store connections and the upstream client."""

from __future__ import annotations

from collections.abc import Iterator
from sqlite3 import Connection

from fastapi import Depends, Request

from market_sync.database.connection import get_connection
from market_sync.upstream.api_client import UpstreamAPIClient
from market_sync.utils.config import Settings


def get_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings


def get_db(settings: Settings = Depends(get_settings)) -> Iterator[Connection]:
    """Yield a store connection for the duration of one request."""
    conn = get_connection(settings.db_path)
    try:
        yield conn
    finally:
        conn.close()


def get_upstream_client(settings: Settings = Depends(get_settings)) -> Iterator[UpstreamAPIClient]:
    """Yield an upstream client for the duration of one request."""
    with UpstreamAPIClient.from_settings(settings) as client:
        yield client
