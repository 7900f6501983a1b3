"""Scheduled fetch, dedupe and insert of upstream market records."""

from __future__ import annotations

from market_sync.ingestion.job import IngestionResult, run_configured_cycle, run_ingestion_cycle
from market_sync.ingestion.scheduler import IngestionScheduler

__all__ = ["IngestionResult", "IngestionScheduler", "run_configured_cycle", "run_ingestion_cycle"]
