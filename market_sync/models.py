"""Data models for market records and upstream payloads."""

from __future__ import annotations

from dataclasses import dataclass

# JSON scalar as found in upstream detail payloads
Scalar = str | int | float | bool | None


@dataclass(frozen=True)
class MatchEntry:
    """One entry of the upstream match list."""

    sport_id: str | None
    event_name: str | None
    event_id: str | None
    market_id: str | None


@dataclass(frozen=True)
class CandidateRecord:
    """A record the ingestion job may insert."""

    event_name: str | None
    event_id: str | None
    market_id: str

    def to_dict(self) -> dict[str, str | None]:
        """Serialize with the upstream field names."""
        return {
            "eventName": self.event_name,
            "eventId": self.event_id,
            "marketId": self.market_id,
        }


@dataclass(frozen=True)
class MarketRecord:
    """A stored market record."""

    id: int
    event_name: str | None
    event_id: str | None
    market_id: str
    title: str | None = None
    created_at: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialize for the HTTP API."""
        return {
            "id": self.id,
            "eventName": self.event_name,
            "eventId": self.event_id,
            "marketId": self.market_id,
            "title": self.title,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class SelectionDetail:
    """The {mid, sid, nat} projection of one diamond t3 element."""

    mid: Scalar
    sid: Scalar
    nat: Scalar

    def to_dict(self) -> dict[str, Scalar]:
        """Serialize for the HTTP API."""
        return {"mid": self.mid, "sid": self.sid, "nat": self.nat}
