"""Validate-then-insecure fallback.

A two-step policy, not a retry loop:

    attempt 1 (TLS validated) -> success
                              -> TlsUntrustedError and not forced -> attempt 2 (insecure) -> final
                              -> anything else -> propagate
"""

from __future__ import annotations

import logging
from typing import Callable

import httpx

from core.domain.errors import TlsUntrustedError
from core.domain.models import HeaderSet, RequestAttempt
from core.interfaces.transport import IntrospectionTransport


logger = logging.getLogger(__name__)

INSECURE_RETRY_WARNING = (
    "Warning: Self-signed or invalid TLS certificate detected.\n"
    "Retrying request with certificate validation disabled..."
)


def fetch_with_tls_fallback(
    transport: IntrospectionTransport,
    url: str,
    headers: HeaderSet,
    *,
    force_tls_validation: bool = False,
    warn: Callable[[str], None] | None = None,
    on_attempt: Callable[[RequestAttempt], None] | None = None,
) -> httpx.Response:
    first = RequestAttempt(url=url, headers=headers, tls_validate=True, number=1)
    if on_attempt:
        on_attempt(first)

    try:
        return transport.send(first)
    except TlsUntrustedError:
        if force_tls_validation:
            logger.debug("Untrusted certificate and --force-tls-validation set; not retrying")
            raise

    if warn:
        warn(INSECURE_RETRY_WARNING)

    second = RequestAttempt(url=url, headers=headers, tls_validate=False, number=2)
    if on_attempt:
        on_attempt(second)
    return transport.send(second)
