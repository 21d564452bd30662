"""Shared test fixtures for dnaerys-mcp tests."""

from __future__ import annotations

from typing import Any

import pytest

from dnaerys_mcp.clients.store import StoreError
from dnaerys_mcp.config import DnaerysConfig
from dnaerys_mcp.core import tools as _tools_module
from dnaerys_mcp.core.dispatch import QueryDispatcher

STORE_URL = "http://store.test"


class FakeStore:
    """Stand-in for VariantStoreClient that records every call.

    ``replies`` maps a method name to its unary response; ``batches`` maps a
    streaming method to the list of batches it yields. A method mapped in
    ``failures`` raises StoreError instead (mid-stream for streaming methods,
    after the batches listed for it).
    """

    def __init__(self) -> None:
        self.replies: dict[str, dict[str, Any]] = {}
        self.batches: dict[str, list[dict[str, Any]]] = {}
        self.failures: dict[str, str] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def call(self, method: str, request: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((method, request))
        if method in self.failures:
            raise StoreError(method, self.failures[method])
        return self.replies.get(method, {})

    def stream(self, method: str, request: dict[str, Any]):
        self.calls.append((method, request))
        yield from self.batches.get(method, [])
        if method in self.failures:
            raise StoreError(method, self.failures[method])

    def close(self) -> None:
        self.closed = True

    @property
    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    @property
    def last_request(self) -> dict[str, Any]:
        return self.calls[-1][1]


@pytest.fixture(autouse=True)
def _reset_client_singletons():
    """Reset module-level store singletons between tests."""
    yield
    _tools_module._store_client = None
    _tools_module._dispatcher = None


@pytest.fixture
def config():
    return DnaerysConfig(store_url=STORE_URL)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def dispatcher(store):
    return QueryDispatcher(store)  # type: ignore[arg-type]


@pytest.fixture
def installed_store(store, config):
    """Install a FakeStore behind the tool handlers' singletons."""
    _tools_module._store_client = store  # type: ignore[assignment]
    _tools_module._dispatcher = QueryDispatcher.from_config(store, config)  # type: ignore[arg-type]
    return store
