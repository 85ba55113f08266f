"""
Cancellation Token.

A token is shared between the caller and one run. Setting it stops the
run before its next stage; work already in flight is not interrupted.

While a run calls its fetcher, the run's token is bound as the active
token of the current context. Fetcher wrappers that loop (such as the
retry wrapper) read it with ``active_token()`` and stop early.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_active_token: ContextVar[Optional["CancellationToken"]] = ContextVar(
    "cql_active_cancellation_token", default=None
)


class CancellationToken:
    """Thread-safe, one-way cancellation flag."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation. Subsequent calls keep the first reason."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason


def active_token() -> Optional[CancellationToken]:
    """Token of the run currently calling into a fetcher, if any."""
    return _active_token.get()


@contextmanager
def bind_token(token: CancellationToken) -> Iterator[CancellationToken]:
    """Make ``token`` the active token for the duration of the block."""
    reset = _active_token.set(token)
    try:
        yield token
    finally:
        _active_token.reset(reset)
