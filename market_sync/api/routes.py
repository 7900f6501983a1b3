"""HTTP routes for listing stored records and proxying market detail."""

from __future__ import annotations

from sqlite3 import Connection
from typing import Any

from fastapi import APIRouter, Depends, Query

from market_sync.api.dependencies import get_db, get_upstream_client
from market_sync.api.validators import parse_market_id, parse_title_query
from market_sync.database.repository import find_records
from market_sync.upstream.api_client import UpstreamAPIClient
from market_sync.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/tutorials", tags=["markets"])


@router.get("/")
def list_records(
    title: str | None = Query(default=None, description="Case-insensitive substring of the record title"),
    conn: Connection = Depends(get_db),
) -> list[dict[str, Any]]:
    """List stored market records, optionally filtered by title."""
    title_filter = parse_title_query(title)
    records = find_records(conn, title=title_filter)
    logger.debug("Listing %d records (title=%r)", len(records), title_filter)
    return [record.to_dict() for record in records]


@router.get("/{market_id}/")
def get_market_detail(
    market_id: str,
    client: UpstreamAPIClient = Depends(get_upstream_client),
) -> list[dict[str, Any]]:
    """Return the {mid, sid, nat} selections of one market from the upstream feed."""
    details = client.fetch_match_detail(parse_market_id(market_id))
    return [detail.to_dict() for detail in details]
