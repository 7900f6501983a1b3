"""Client for the third-party match feed."""

from __future__ import annotations

from market_sync.upstream.api_client import UpstreamAPIClient, parse_match_detail, parse_match_list

__all__ = ["UpstreamAPIClient", "parse_match_detail", "parse_match_list"]
