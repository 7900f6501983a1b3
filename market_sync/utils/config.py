"""Configuration for the market-sync service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from market_sync.errors import ConfigurationError

# Defaults, overridable through MARKET_SYNC_* environment variables
DEFAULT_JOB_SCHEDULE = "*/10 * * * *"  # every 10 minutes
DEFAULT_DB_PATH = Path("data") / "markets.db"
DEFAULT_UPSTREAM_BASE_URL = "http://127.0.0.1:7000"
DEFAULT_UPSTREAM_TIMEOUT = 10.0  # seconds, bounds one cycle's worst case
DEFAULT_SPORT_IDS = frozenset({"4"})
DEFAULT_LOG_DIR = Path("logs")
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8080

# Upstream endpoints (relative to the base URL)
MATCH_LIST_ENDPOINT = "match-list"
MATCH_DATA_ENDPOINT = "match-data/{market_id}"

# Record appended to every candidate batch when include_sample_record is on
SAMPLE_RECORD = {
    "eventName": "sample data",
    "eventId": "20396579",
    "marketId": "20396617",
}

ENV_PREFIX = "MARKET_SYNC_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


def parse_sport_ids(raw: str) -> frozenset[str]:
    """
    Parse a comma-separated allow-list of sport ids.

    Args:
        raw: Value such as "4" or "4, 7"

    Returns:
        Set of non-empty, stripped sport ids
    """
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Service settings loaded from environment variables with safe defaults."""

    job_schedule: str = DEFAULT_JOB_SCHEDULE
    db_path: Path = DEFAULT_DB_PATH
    upstream_base_url: str = DEFAULT_UPSTREAM_BASE_URL
    upstream_token: str = ""
    upstream_timeout: float = DEFAULT_UPSTREAM_TIMEOUT
    sport_ids: frozenset[str] = field(default_factory=lambda: DEFAULT_SPORT_IDS)
    include_sample_record: bool = False
    log_level: str = "INFO"
    log_dir: Path = DEFAULT_LOG_DIR
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> Settings:
        """
        Create Settings from the environment.

        An optional .env file is loaded first; variables already set in the
        process environment take precedence over it.

        Args:
            env_file: Path to a dotenv file (searches upwards from cwd if None)

        Returns:
            Populated Settings instance

        Raises:
            ConfigurationError: If a numeric or boolean variable is malformed
        """
        load_dotenv(dotenv_path=env_file, override=False)

        sport_ids_raw = _env("SPORT_IDS")
        sport_ids = parse_sport_ids(sport_ids_raw) if sport_ids_raw is not None else DEFAULT_SPORT_IDS

        return cls(
            job_schedule=_env("JOB_SCHEDULE", DEFAULT_JOB_SCHEDULE) or DEFAULT_JOB_SCHEDULE,
            db_path=Path(_env("DB_PATH") or DEFAULT_DB_PATH),
            upstream_base_url=(_env("UPSTREAM_BASE_URL") or DEFAULT_UPSTREAM_BASE_URL).rstrip("/"),
            upstream_token=_env("UPSTREAM_TOKEN", "") or "",
            upstream_timeout=_env_float("UPSTREAM_TIMEOUT", DEFAULT_UPSTREAM_TIMEOUT),
            sport_ids=sport_ids,
            include_sample_record=_env_bool("INCLUDE_SAMPLE_RECORD", False),
            log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
            log_dir=Path(_env("LOG_DIR") or DEFAULT_LOG_DIR),
            api_host=_env("API_HOST", DEFAULT_API_HOST) or DEFAULT_API_HOST,
            api_port=_env_int("API_PORT", DEFAULT_API_PORT),
        )
