"""Upstream match-feed API client for HTTP requests."""

from __future__ import annotations

import json
from collections.abc import Mapping

from beartype import beartype
from httpx import Client, HTTPError, InvalidURL, Response

from market_sync.errors import UpstreamShapeError, UpstreamUnavailableError
from market_sync.models import MatchEntry, Scalar, SelectionDetail
from market_sync.utils.config import (
    DEFAULT_UPSTREAM_BASE_URL,
    DEFAULT_UPSTREAM_TIMEOUT,
    MATCH_DATA_ENDPOINT,
    MATCH_LIST_ENDPOINT,
    Settings,
)


def _as_text(value: object) -> str | None:
    """Normalise an identifier that upstream may send as a string or a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _as_scalar(value: object) -> Scalar:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    raise UpstreamShapeError(f"Expected a JSON scalar, got {type(value).__name__}")


@beartype
def parse_match_list(payload: object) -> list[MatchEntry]:
    """
    Parse a match-list response body.

    Args:
        payload: Decoded JSON body, expected as {"result": {"result": [...]}}

    Returns:
        List of MatchEntry objects in upstream order

    Raises:
        UpstreamShapeError: If the envelope or an entry has the wrong shape
    """
    try:
        records = payload["result"]["result"]
    except (KeyError, TypeError) as e:
        raise UpstreamShapeError(f"match-list response is missing result.result: {e!r}") from e

    if not isinstance(records, list):
        raise UpstreamShapeError(f"match-list result.result is {type(records).__name__}, expected list")

    entries: list[MatchEntry] = []
    for index, item in enumerate(records):
        if not isinstance(item, dict):
            raise UpstreamShapeError(f"match-list entry {index} is {type(item).__name__}, expected object")
        entries.append(
            MatchEntry(
                sport_id=_as_text(item.get("sportId")),
                event_name=_as_text(item.get("eventName")),
                event_id=_as_text(item.get("eventId")),
                market_id=_as_text(item.get("marketId")),
            ),
        )
    return entries


@beartype
def parse_match_detail(payload: object, market_id: str) -> list[SelectionDetail]:
    """
    Parse a match-data response body into {mid, sid, nat} projections.

    The body carries a JSON-encoded "diamond" string that must itself be
    decoded to reach data.t3.

    Args:
        payload: Decoded JSON body, expected as {"result": {<market_id>: {"diamond": "<json>"}}}
        market_id: Market ID the detail was requested for

    Returns:
        One SelectionDetail per element of data.t3

    Raises:
        UpstreamShapeError: If any level is missing or the diamond is not valid JSON
    """
    try:
        diamond = payload["result"][market_id]["diamond"]
    except (KeyError, TypeError) as e:
        raise UpstreamShapeError(f"match-data response for {market_id} is missing result.{market_id}.diamond") from e

    if not isinstance(diamond, str):
        raise UpstreamShapeError(f"diamond for {market_id} is {type(diamond).__name__}, expected JSON string")

    try:
        decoded = json.loads(diamond)
    except json.JSONDecodeError as e:
        raise UpstreamShapeError(f"diamond for {market_id} is not valid JSON: {e}") from e

    try:
        selections = decoded["data"]["t3"]
    except (KeyError, TypeError) as e:
        raise UpstreamShapeError(f"diamond for {market_id} is missing data.t3") from e

    if not isinstance(selections, list):
        raise UpstreamShapeError(f"diamond data.t3 for {market_id} is {type(selections).__name__}, expected list")

    details: list[SelectionDetail] = []
    for item in selections:
        if not isinstance(item, dict):
            raise UpstreamShapeError(f"diamond data.t3 for {market_id} contains a non-object element")
        details.append(
            SelectionDetail(
                mid=_as_scalar(item.get("mid")),
                sid=_as_scalar(item.get("sid")),
                nat=_as_scalar(item.get("nat")),
            ),
        )
    return details


class UpstreamAPIClient:
    """Client for the third-party match feed."""

    def __init__(
        self,
        base_url: str = DEFAULT_UPSTREAM_BASE_URL,
        token: str = "",
        timeout: float = DEFAULT_UPSTREAM_TIMEOUT,
        client: Client | None = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the match feed
            token: Static access token sent as the "token" query parameter
            timeout: Request timeout in seconds
            client: Optional preconfigured httpx client (owned by the caller)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.should_close_client = client is None
        self.client = client or Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> UpstreamAPIClient:
        """Build a client from service settings."""
        return cls(
            base_url=settings.upstream_base_url,
            token=settings.upstream_token,
            timeout=settings.upstream_timeout,
        )

    @beartype
    def _request(
        self,
        method: str,
        endpoint: str,
        params: Mapping[str, object] | None = None,
    ) -> Response:
        """
        Make an HTTP request to the match feed.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (relative to base_url)
            params: Extra query parameters (the token is always added)

        Returns:
            HTTP response object

        Raises:
            UpstreamUnavailableError: If the request fails or returns a non-2xx status
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        query = {"token": self.token, **(params or {})}
        try:
            response = self.client.request(method, url, params=query)
            response.raise_for_status()
        except (HTTPError, InvalidURL) as e:
            raise UpstreamUnavailableError(f"{method} {endpoint} failed: {e}") from e
        return response

    def _json(self, response: Response, endpoint: str) -> object:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamShapeError(f"{endpoint} returned a non-JSON body") from e

    def fetch_match_list(self) -> list[MatchEntry]:
        """
        Fetch the current match list.

        Returns:
            List of MatchEntry objects

        Raises:
            UpstreamUnavailableError: If the request fails
            UpstreamShapeError: If the response has the wrong shape
        """
        response = self._request("GET", MATCH_LIST_ENDPOINT)
        return parse_match_list(self._json(response, MATCH_LIST_ENDPOINT))

    @beartype
    def fetch_match_detail(self, market_id: str) -> list[SelectionDetail]:
        """
        Fetch diamond/odds detail for one market.

        Args:
            market_id: Upstream market identifier

        Returns:
            List of SelectionDetail projections

        Raises:
            UpstreamUnavailableError: If the request fails
            UpstreamShapeError: If the response or its diamond payload has the wrong shape
        """
        endpoint = MATCH_DATA_ENDPOINT.format(market_id=market_id)
        response = self._request("GET", endpoint)
        return parse_match_detail(self._json(response, endpoint), market_id)

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self.should_close_client:
            self.client.close()

    def __enter__(self) -> UpstreamAPIClient:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
