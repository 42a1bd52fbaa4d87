"""HTTP client for the upstream lottery results API."""

from __future__ import annotations

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from lottery_sync import __version__
from lottery_sync.errors import UpstreamError


logger = logging.getLogger(__name__)


def build_http_session(retries: int = 0, backoff_factor: float = 0.3) -> requests.Session:
    """Session for the lottery API.

    Retries default to 0: a failed request ends the backfill page or the run, and
    the next scheduled run starts over. Raise HTTP_RETRIES to opt in.
    """

    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)

    session = requests.Session()
    session.headers.update({"User-Agent": f"lottery-sync/{__version__}"})
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class LotteryApiClient:
    """Read-only access to `/history` and `/latest`."""

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or build_http_session()
        self._timeout = timeout_seconds

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self._base_url}/{path}"
        try:
            resp = self._session.get(url, params=params, timeout=self._timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.JSONDecodeError as exc:
            raise UpstreamError(f"GET {url} returned invalid JSON", details={"params": params}) from exc
        except requests.RequestException as exc:
            raise UpstreamError(f"GET {url} failed: {exc}", details={"params": params}) from exc

    def fetch_history_page(self, limit: int, offset: int) -> list[Any]:
        """One page of past draws, newest first as ordered upstream.

        A missing or null `items` list is an empty page.
        """

        payload = self._get_json("history", params={"limit": int(limit), "offset": int(offset)})
        if not isinstance(payload, dict):
            return []
        items = payload.get("items")
        if not isinstance(items, list):
            return []
        return items

    def fetch_latest(self) -> dict[str, Any] | None:
        payload = self._get_json("latest")
        if not isinstance(payload, dict):
            return None
        return payload

    def close(self) -> None:
        self._session.close()
