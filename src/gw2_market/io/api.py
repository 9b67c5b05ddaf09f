# gw2_market/io/api.py
"""Authenticated GET requests against the game API."""
from __future__ import annotations

import logging
import sys
import time
from typing import Any, Iterable, List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests
from tqdm import tqdm

from gw2_market.config import ApiConfig, MAX_IDS_PER_REQUEST
from gw2_market.parallel.chunking import chunk_ids

logger = logging.getLogger(__name__)

__all__ = [
    "FetchError",
    "Gw2Api",
    "items_endpoint",
    "prices_endpoint",
    "RATE_LIMIT_STATUS",
]

RATE_LIMIT_STATUS = 429


class FetchError(RuntimeError):
    """Raised in strict mode when a request cannot produce a JSON payload."""


def _join_ids(ids: Iterable[int]) -> str:
    return ",".join(str(i) for i in ids)


def items_endpoint(ids: Iterable[int]) -> str:
    return f"/items?ids={_join_ids(ids)}"


def prices_endpoint(ids: Iterable[int]) -> str:
    return f"/commerce/prices?ids={_join_ids(ids)}"


class Gw2Api:
    """
    Thin client for the game API.

    Rate-limited responses (HTTP 429) are retried after a fixed backoff
    with no upper bound on attempts. Transport failures, error statuses, and
    undecodable bodies are logged and replaced by the caller's fallback,
    unless the client is strict, in which case they raise FetchError.
    """

    def __init__(
            self,
            config: ApiConfig,
            *,
            session: Optional[requests.Session] = None,
            strict: bool = False,
            backoff_s: float = 1.0,
            timeout: float = 30.0,
    ):
        self.config = config
        self.strict = strict
        self.backoff_s = backoff_s
        self.timeout = timeout
        self._session = session or requests.Session()

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "Gw2Api":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def build_url(self, endpoint: str) -> str:
        """
        Resolve ``endpoint`` against the base URL and add the access token.

        Relative endpoints are appended to the base path, so a base of
        ``https://host/v2`` and ``/items?ids=1`` give ``https://host/v2/items?ids=1``.
        Absolute URLs are kept as they are.
        """
        base = urlsplit(self.config.base_url)
        target = urlsplit(endpoint)

        if target.scheme:
            scheme, netloc, path = target.scheme, target.netloc, target.path
        else:
            scheme, netloc = base.scheme, base.netloc
            path = base.path.rstrip("/") + "/" + target.path.lstrip("/")

        query = parse_qsl(target.query, keep_blank_values=True)
        query.append(("access_token", self.config.token))
        return urlunsplit((scheme, netloc, path, urlencode(query, safe=","), ""))

    def _redact(self, text: str) -> str:
        return text.replace(self.config.token, "***") if self.config.token else text

    def get(self, endpoint: str, fallback: Any = None) -> Any:
        """
        GET ``endpoint`` and return the decoded JSON body.

        Args:
            endpoint: Path relative to the base URL, with optional query string
            fallback: Value returned when the request fails

        Returns:
            Parsed JSON, or ``fallback`` on failure

        Raises:
            FetchError: On failure when the client is strict
        """
        url = self.build_url(endpoint)

        try:
            resp = self._session.get(url, timeout=self.timeout)
            while resp.status_code == RATE_LIMIT_STATUS:
                logger.debug("Rate limited on %s; retrying in %.1fs", endpoint, self.backoff_s)
                time.sleep(self.backoff_s)
                resp = self._session.get(url, timeout=self.timeout)

            resp.raise_for_status()
            return resp.json()

        except (requests.RequestException, ValueError) as exc:
            reason = self._redact(str(exc))
            logger.error("Request for %s failed: %s", endpoint, reason)
            tqdm.write(f"ERROR: request for {endpoint} failed: {reason}", file=sys.stderr)
            if self.strict:
                raise FetchError(f"Request for {endpoint} failed: {reason}") from exc
            return fallback

    def fetch_item_ids(self) -> List[int]:
        """List every item id the API knows about."""
        ids = self.get("/items", [])
        return list(ids) if isinstance(ids, list) else []

    def fetch_items(self, ids: Iterable[int]) -> List[dict]:
        """Fetch item records for up to MAX_IDS_PER_REQUEST ids."""
        items = self.get(items_endpoint(ids), [])
        return items if isinstance(items, list) else []

    def fetch_prices(self, ids: Iterable[int]) -> List[dict]:
        """Fetch trading-post prices, batching ids to the API's per-call limit."""
        prices: List[dict] = []
        for batch in chunk_ids(list(ids), MAX_IDS_PER_REQUEST):
            result = self.get(prices_endpoint(batch), [])
            if isinstance(result, list):
                prices.extend(result)
        return prices
