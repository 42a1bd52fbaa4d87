"""Environment-based configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lottery_sync.errors import MissingCredentialsError


DEFAULT_API_BASE = "https://indialotteryapi.com/wp-json/klr/v1"
DEFAULT_CREDENTIALS_FILE = "credentials.json"


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def _env_positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower().strip() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class SyncConfig:
    """Settings for one sync run."""

    API_BASE: str = DEFAULT_API_BASE
    HISTORY_PAGE_SIZE: int = 20
    HISTORY_MAX_RECORDS: int = 100
    HTTP_TIMEOUT: float = 30.0
    HTTP_RETRIES: int = 0
    MONGODB_DB: str = "lottery"
    LOG_LEVEL: str = "INFO"
    STRICT_EXIT_CODES: bool = False


def get_config() -> SyncConfig:
    """Resolve configuration from the process environment."""

    return SyncConfig(
        API_BASE=os.getenv("LOTTERY_API_BASE", DEFAULT_API_BASE).rstrip("/"),
        HISTORY_PAGE_SIZE=_env_int("HISTORY_PAGE_SIZE", 20, minimum=1),
        HISTORY_MAX_RECORDS=_env_int("HISTORY_MAX_RECORDS", 100),
        HTTP_TIMEOUT=_env_positive_float("HTTP_TIMEOUT", 30.0),
        HTTP_RETRIES=_env_int("HTTP_RETRIES", 0),
        MONGODB_DB=os.getenv("MONGODB_DB", "lottery"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        STRICT_EXIT_CODES=_env_flag("STRICT_EXIT_CODES"),
    )


@dataclass(frozen=True)
class Credentials:
    """Connection details for the document store."""

    uri: str
    database: str | None = None
    source: str = "env"


def _parse_blob(raw: str, source: str) -> Credentials:
    try:
        payload: Any = json.loads(raw)
    except ValueError as exc:
        raise MissingCredentialsError(f"Credentials from {source} are not valid JSON") from exc

    if not isinstance(payload, dict) or not payload.get("uri"):
        raise MissingCredentialsError(f"Credentials from {source} have no 'uri'")

    database = payload.get("database")
    return Credentials(
        uri=str(payload["uri"]),
        database=str(database) if database else None,
        source=source,
    )


def load_credentials(path: str | os.PathLike[str] | None = None) -> Credentials:
    """Load store credentials.

    Priority:
      1) local JSON file (LOTTERY_SYNC_CREDENTIALS_FILE, default ./credentials.json)
      2) MONGODB_CONFIG env var holding the same JSON
      3) bare MONGODB_URI env var

    Raises:
        MissingCredentialsError: nothing usable was found.
    """

    local = Path(path or os.getenv("LOTTERY_SYNC_CREDENTIALS_FILE") or DEFAULT_CREDENTIALS_FILE)
    if local.is_file():
        return _parse_blob(local.read_text(encoding="utf-8"), str(local))

    blob = os.getenv("MONGODB_CONFIG")
    if blob:
        return _parse_blob(blob, "MONGODB_CONFIG")

    uri = os.getenv("MONGODB_URI")
    if uri:
        return Credentials(uri=uri, source="MONGODB_URI")

    raise MissingCredentialsError("No MongoDB credentials found")
