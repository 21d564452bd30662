"""HTTP/JSON client for the Dnaerys variant store.

The store exposes its RPC methods as ``POST {base_url}/v1/{method}`` with a
JSON request body. Unary methods answer with one JSON object; streaming
methods answer with newline delimited JSON, one response batch per line.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx

from .. import __version__
from ..constants import DEFAULT_STORE_TIMEOUT_SECONDS, STORE_API_PREFIX

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A store call failed in transport, on the server, or while decoding."""

    def __init__(self, method: str, message: str):
        super().__init__(f"{method}: {message}")
        self.method = method


@dataclass
class VariantStoreClient:
    """Blocking client for the variant store.

    One ``httpx.Client`` (and its connection pool) is created on first use and
    shared by every call, including calls from concurrent threads.
    """

    base_url: str
    api_key: str | None = None
    timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS
    _http: httpx.Client | None = field(default=None, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _client(self) -> httpx.Client:
        if self._http is None:
            with self._lock:
                if self._http is None:
                    headers = {"User-Agent": f"dnaerys-mcp/{__version__}"}
                    if self.api_key:
                        headers["Authorization"] = f"Bearer {self.api_key}"
                    self._http = httpx.Client(
                        base_url=self.base_url.rstrip("/") + STORE_API_PREFIX,
                        headers=headers,
                        timeout=self.timeout,
                    )
                    logger.info("Opened variant store connection: %s", self.base_url)
        return self._http

    def call(self, method: str, request: dict[str, Any]) -> dict[str, Any]:
        """Run a unary method and return its decoded response.

        Raises:
            StoreError: On any transport, HTTP status, or decoding failure.
        """
        logger.debug("Store call %s", method)
        try:
            resp = self._client().post(f"/{method}", json=request)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            raise StoreError(method, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise StoreError(method, f"transport error: {e}") from e
        except ValueError as e:
            raise StoreError(method, f"malformed response: {e}") from e

        if not isinstance(payload, dict):
            raise StoreError(method, "malformed response: expected a JSON object")
        return payload

    def stream(self, method: str, request: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Run a streaming method, yielding each response batch as it arrives.

        Raises:
            StoreError: On any transport, HTTP status, or decoding failure,
                including one that happens partway through the stream.
        """
        logger.debug("Store stream %s", method)
        try:
            with self._client().stream("POST", f"/{method}", json=request) as resp:
                resp.raise_for_status()
                for line in resp.iter_lines():
                    if not line.strip():
                        continue
                    batch = json.loads(line)
                    if not isinstance(batch, dict):
                        raise StoreError(method, "malformed batch: expected a JSON object")
                    yield batch
        except httpx.HTTPStatusError as e:
            raise StoreError(method, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise StoreError(method, f"transport error: {e}") from e
        except ValueError as e:
            raise StoreError(method, f"malformed batch: {e}") from e

    def close(self) -> None:
        """Release the connection pool. The next call opens a new one."""
        with self._lock:
            if self._http is not None:
                self._http.close()
                self._http = None
