"""
Resource Fetcher Protocol.

Defines the transport contract used by the orchestrator. A fetcher turns a
fully resolved address into the raw text stored there. It holds no business
logic and never retries; retry policies wrap a fetcher from the outside.

Design Notes:
    - Payloads are returned exactly as received
    - Failures are classified as NetworkError, ResourceNotFoundError or
      FetchTimeoutError
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ResourceFetcher(Protocol):
    """Abstract interface for artifact retrieval."""

    def fetch(self, address: str, timeout_seconds: Optional[float] = None) -> str:
        """
        Retrieve the payload stored at an address.

        Args:
            address: Fully resolved address of the artifact
            timeout_seconds: Deadline for this call (None = fetcher default)

        Returns:
            The raw payload text

        Raises:
            NetworkError: Transport failure
            ResourceNotFoundError: Nothing at the address
            FetchTimeoutError: Deadline exceeded
        """
        ...
