"""Error kinds raised across the market-sync layers."""

from __future__ import annotations


class MarketSyncError(Exception):
    """Base class for all market-sync errors."""

    kind = "market_sync_error"


class UpstreamUnavailableError(MarketSyncError):
    """The third-party endpoint could not be reached or returned a non-2xx status."""

    kind = "upstream_unavailable"


class UpstreamShapeError(MarketSyncError):
    """The third-party response did not have the expected structure."""

    kind = "upstream_shape"


class StoreError(MarketSyncError):
    """The record store failed to read or write."""

    kind = "store_error"


class InputValidationError(MarketSyncError):
    """A path or query parameter was malformed."""

    kind = "validation_error"


class ConfigurationError(MarketSyncError):
    """A configuration value could not be interpreted."""

    kind = "configuration_error"
