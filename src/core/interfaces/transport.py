"""Introspection transport contract.

Why a Protocol:
- The retry policy only needs "send this attempt, get a response or a
  classified error"; which HTTP stack does it (and how it recognizes an
  untrusted certificate) stays inside the adapter.
- Tests can script attempts without opening sockets.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx

from core.domain.models import RequestAttempt


@runtime_checkable
class IntrospectionTransport(Protocol):
    """Minimal contract for sending the introspection request.

    Rules:
    - Returns only 2xx responses.
    - Raises `TlsUntrustedError`, `NetworkError` or `HttpStatusError`.
    """

    def send(self, attempt: RequestAttempt) -> httpx.Response:
        """POST the introspection query described by `attempt`."""

        ...
