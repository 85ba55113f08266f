"""
Static Resource Fetcher.

An in-memory fetcher for development and testing. Payloads and failures
are registered per address; every call is recorded so tests can assert
which addresses were requested and in which order.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from cql_pipeline.domain.errors import FetchError, ResourceNotFoundError


class StaticResourceFetcher:
    """Fake fetcher backed by a dict of address -> payload."""

    def __init__(self, payloads: Optional[Dict[str, str]] = None) -> None:
        self._payloads: Dict[str, str] = dict(payloads or {})
        self._failures: Dict[str, FetchError] = {}
        self.calls: List[str] = []
        self.timeouts: List[Optional[float]] = []

    def add(self, address: str, payload: str) -> StaticResourceFetcher:
        self._payloads[address] = payload
        return self

    def fail(self, address: str, error: FetchError) -> StaticResourceFetcher:
        """Make fetches of an address raise ``error``."""
        self._failures[address] = error
        return self

    def fetch(self, address: str, timeout_seconds: Optional[float] = None) -> str:
        self.calls.append(address)
        self.timeouts.append(timeout_seconds)
        if address in self._failures:
            raise self._failures[address]
        if address not in self._payloads:
            raise ResourceNotFoundError(address)
        return self._payloads[address]

    def call_count(self, address: Optional[str] = None) -> int:
        if address is None:
            return len(self.calls)
        return self.calls.count(address)
