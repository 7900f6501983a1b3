"""Fetch, filter, dedupe and insert cycle for upstream market records."""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from sqlite3 import Connection

from beartype import beartype

from market_sync.database.connection import get_connection, initialize_database
from market_sync.database.repository import find_records, insert_records_batch
from market_sync.errors import MarketSyncError
from market_sync.models import CandidateRecord, MarketRecord, MatchEntry
from market_sync.upstream.api_client import UpstreamAPIClient
from market_sync.utils.config import SAMPLE_RECORD, Settings
from market_sync.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_OK = "ok"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class IngestionResult:
    """Outcome of one ingestion cycle."""

    status: str
    fetched: int = 0
    candidates: int = 0
    existing: int = 0
    inserted: int = 0
    error_kind: str | None = None
    error: str | None = None
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILED

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def sample_candidate() -> CandidateRecord:
    """Return the configured sample record as a candidate."""
    return CandidateRecord(
        event_name=SAMPLE_RECORD["eventName"],
        event_id=SAMPLE_RECORD["eventId"],
        market_id=SAMPLE_RECORD["marketId"],
    )


@beartype
def select_candidates(entries: Sequence[MatchEntry], sport_ids: Iterable[str]) -> list[CandidateRecord]:
    """
    Keep allow-listed entries and project them to candidate records.

    Args:
        entries: Upstream match-list entries
        sport_ids: Allow-list of sport ids

    Returns:
        Candidates in upstream order; entries without a market id are dropped
    """
    allowed = frozenset(sport_ids)
    candidates: list[CandidateRecord] = []
    for entry in entries:
        if entry.sport_id not in allowed:
            continue
        if not entry.market_id:
            logger.warning("Dropping entry for event %s: no marketId", entry.event_id)
            continue
        candidates.append(
            CandidateRecord(
                event_name=entry.event_name,
                event_id=entry.event_id,
                market_id=entry.market_id,
            ),
        )
    return candidates


@beartype
def filter_new_records(
    candidates: Sequence[CandidateRecord],
    existing: Sequence[MarketRecord],
) -> list[CandidateRecord]:
    """
    Drop candidates whose market id is already stored.

    Market ids are compared by exact string equality. A market id repeated
    within the candidates is kept only once (first occurrence).

    Args:
        candidates: Candidate records for this cycle
        existing: Records already in the store

    Returns:
        Candidates that are safe to insert
    """
    seen = {record.market_id for record in existing}
    new_records: list[CandidateRecord] = []
    for candidate in candidates:
        if candidate.market_id in seen:
            continue
        seen.add(candidate.market_id)
        new_records.append(candidate)
    return new_records


@beartype
def run_ingestion_cycle(conn: Connection, client: UpstreamAPIClient, settings: Settings) -> IngestionResult:
    """
    Run one fetch, filter, dedupe and insert cycle.

    Typed errors from the upstream client or the store end the cycle and are
    reported in the result rather than raised. Nothing is written when the
    fetch fails or yields no candidates.

    Args:
        conn: Record store connection
        client: Upstream match-feed client
        settings: Service settings (allow-list and sample record flag)

    Returns:
        IngestionResult describing what happened
    """
    started = time.perf_counter()
    fetched = candidates_count = existing_count = 0

    try:
        entries = client.fetch_match_list()
        fetched = len(entries)
        logger.record_metric("fetched", fetched)

        candidates = select_candidates(entries, settings.sport_ids)
        if not candidates:
            logger.info("No candidate records in %d fetched entries", fetched)
            return IngestionResult(
                status=STATUS_SKIPPED,
                fetched=fetched,
                duration_seconds=time.perf_counter() - started,
            )

        if settings.include_sample_record:
            candidates.append(sample_candidate())
        candidates_count = len(candidates)
        logger.record_metric("candidates", candidates_count)

        existing = find_records(conn)
        existing_count = len(existing)
        logger.record_metric("existing", existing_count)

        new_records = filter_new_records(candidates, existing)
        inserted = insert_records_batch(new_records, conn)
        logger.record_metric("inserted", inserted)
    except MarketSyncError as e:
        logger.error("Ingestion cycle failed (%s): %s", e.kind, e)
        return IngestionResult(
            status=STATUS_FAILED,
            fetched=fetched,
            candidates=candidates_count,
            existing=existing_count,
            error_kind=e.kind,
            error=str(e),
            duration_seconds=time.perf_counter() - started,
        )
    finally:
        logger.log_summary()

    return IngestionResult(
        status=STATUS_OK,
        fetched=fetched,
        candidates=candidates_count,
        existing=existing_count,
        inserted=inserted,
        duration_seconds=time.perf_counter() - started,
    )


def run_configured_cycle(settings: Settings) -> IngestionResult:
    """
    Run one cycle with a fresh store connection and upstream client.

    Args:
        settings: Service settings

    Returns:
        IngestionResult of the cycle
    """
    try:
        initialize_database(settings.db_path)
        conn = get_connection(settings.db_path)
    except MarketSyncError as e:
        logger.error("Ingestion cycle failed (%s): %s", e.kind, e)
        return IngestionResult(status=STATUS_FAILED, error_kind=e.kind, error=str(e))

    try:
        with UpstreamAPIClient.from_settings(settings) as client:
            return run_ingestion_cycle(conn, client, settings)
    finally:
        conn.close()
