"""
HTTP Resource Fetcher.

Retrieves artifacts from a FHIR server over HTTP using a shared
requests.Session. Implements the ResourceFetcher protocol.

Error Mapping:
    - requests.Timeout           -> FetchTimeoutError
    - HTTP 404 / 410             -> ResourceNotFoundError
    - other HTTP >= 400          -> NetworkError (with status code)
    - connection/transport error -> NetworkError
    - undecodable body           -> MalformedPayloadError
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import requests

from cql_pipeline.domain.errors import (
    FetchTimeoutError,
    MalformedPayloadError,
    NetworkError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_STATUSES = (404, 410)


class HttpResourceFetcher:
    """
    requests-backed fetcher.

    Single-shot: every call issues exactly one GET. The response body is
    returned as received, decoded with the charset announced by the server
    (UTF-8 when none is given).
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        auth_token: Optional[str] = None,
        accept: str = "application/fhir+json",
        default_timeout_seconds: float = 30.0,
    ) -> None:
        """
        Initialize HTTP fetcher.

        Args:
            session: Session to reuse (a new one is created and owned if None)
            auth_token: Bearer token for the Authorization header
            accept: Accept header value
            default_timeout_seconds: Used when fetch() gets no timeout
        """
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._headers = self._build_headers(auth_token, accept)
        self.default_timeout_seconds = default_timeout_seconds

    @staticmethod
    def _build_headers(auth_token: Optional[str], accept: str) -> Dict[str, str]:
        headers = {"Accept": accept}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"
        return headers

    def fetch(self, address: str, timeout_seconds: Optional[float] = None) -> str:
        """
        GET an address and return the body text.

        Raises:
            FetchTimeoutError: Deadline exceeded
            ResourceNotFoundError: HTTP 404 or 410
            NetworkError: Transport failure or other HTTP error status
            MalformedPayloadError: Body cannot be decoded
        """
        timeout = timeout_seconds if timeout_seconds is not None else self.default_timeout_seconds
        logger.debug(f"GET {address} (timeout={timeout}s)")

        try:
            response = self._session.get(address, headers=self._headers, timeout=timeout)
        except requests.Timeout as e:
            logger.warning(f"Timeout fetching {address}: {e}")
            raise FetchTimeoutError(address, timeout) from e
        except requests.RequestException as e:
            logger.warning(f"Transport error fetching {address}: {e}")
            raise NetworkError(address, str(e)) from e

        status = response.status_code
        if status in NOT_FOUND_STATUSES:
            raise ResourceNotFoundError(address, status_code=status)
        if status >= 400:
            raise NetworkError(address, f"HTTP {status} {response.reason}", status_code=status)

        return self._decode(address, response)

    def _decode(self, address: str, response: requests.Response) -> str:
        encoding = response.encoding or "utf-8"
        try:
            return response.content.decode(encoding)
        except (LookupError, UnicodeDecodeError) as e:
            raise MalformedPayloadError(
                f"body of {address} is not valid {encoding}",
                details={"address": address},
            ) from e

    def close(self) -> None:
        """Close the session if this fetcher created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> HttpResourceFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
