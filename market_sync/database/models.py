"""Database schema definitions for market records."""

from __future__ import annotations

# SQL schema for market_records table
# Note: market_id is not UNIQUE; the ingestion job deduplicates before inserting
MARKET_RECORDS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS market_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_name TEXT,
    event_id TEXT,
    market_id TEXT NOT NULL,
    title TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

# Index for faster dedupe lookups
MARKET_RECORDS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_market_records_market_id ON market_records(market_id)",
]
