"""httpx transport for the introspection request.

Why a wrapper:
- Standardizes timeout, redirect limit, compression and User-Agent.
- Owns the only transport-specific knowledge in the project: how an
  untrusted-certificate failure looks in httpx/ssl errors.
- Testable: an `httpx.MockTransport` can be injected.
"""

from __future__ import annotations

import logging
import ssl

import httpx

from core.config import AppSettings
from core.domain.errors import HttpStatusError, NetworkError, Remedy, TlsUntrustedError
from core.domain.introspection import build_payload
from core.domain.models import RequestAttempt


logger = logging.getLogger(__name__)

# OpenSSL X509_V_ERR_* codes for self-signed/untrusted chains and hostname mismatch.
UNTRUSTED_VERIFY_CODES: frozenset[int] = frozenset(
    {
        18,  # DEPTH_ZERO_SELF_SIGNED_CERT
        19,  # SELF_SIGNED_CERT_IN_CHAIN
        20,  # UNABLE_TO_GET_ISSUER_CERT_LOCALLY
        21,  # UNABLE_TO_VERIFY_LEAF_SIGNATURE
        27,  # CERT_UNTRUSTED
        62,  # HOSTNAME_MISMATCH
    }
)

UNTRUSTED_MESSAGE_MARKERS: tuple[str, ...] = (
    "self-signed certificate",
    "self signed certificate",
    "unable to verify the first certificate",
    "unable to get local issuer certificate",
    "certificate is not trusted",
    "hostname mismatch",
    "depth_zero_self_signed_cert",
    "self_signed_cert_in_chain",
    "unable_to_verify_leaf_signature",
    "cert_untrusted",
)

_NETWORK_REMEDY = Remedy(
    "Possible fixes",
    (
        "Check if the server is running and accessible",
        "Verify the URL is correct",
        "Ensure your network connection is stable",
        "Try using http:// instead of https:// for local development servers",
        "Check if the server requires specific headers or authentication",
    ),
)

_TLS_REMEDY = Remedy(
    "Possible fixes",
    (
        "Remove --force-tls-validation to retry without certificate validation",
        "Add the server's CA certificate to your trust store (or set SSL_CERT_FILE)",
        "Verify the certificate matches the hostname in the URL",
    ),
)


def _exception_chain(exc: BaseException) -> list[BaseException]:
    seen: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and current not in seen:
        seen.append(current)
        current = current.__cause__ or current.__context__
    return seen


def is_untrusted_certificate_error(exc: BaseException) -> bool:
    """True if `exc` (or anything it wraps) is a self-signed/untrusted-certificate failure."""

    for item in _exception_chain(exc):
        if isinstance(item, ssl.SSLCertVerificationError):
            if getattr(item, "verify_code", None) in UNTRUSTED_VERIFY_CODES:
                return True
        text = " ".join(
            str(part) for part in (item, getattr(item, "verify_message", None)) if part
        ).lower()
        if any(marker in text for marker in UNTRUSTED_MESSAGE_MARKERS):
            return True
    return False


def build_client(
    settings: AppSettings | None = None,
    *,
    verify: bool = True,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` for a single attempt.

    With `verify=False` any server certificate is accepted (no chain or
    hostname check); for plain http:// URLs the flag has no effect.
    """

    settings = settings or AppSettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        max_redirects=settings.max_redirects,
        verify=verify,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


class HttpxIntrospectionTransport:
    """`IntrospectionTransport` backed by httpx."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def send(self, attempt: RequestAttempt) -> httpx.Response:
        logger.debug(
            "Attempt %d: POST %s (tls_validate=%s)",
            attempt.number,
            attempt.url,
            attempt.tls_validate,
        )
        try:
            with build_client(
                self._settings,
                verify=attempt.tls_validate,
                transport=self._transport,
            ) as client:
                response = client.post(
                    attempt.url,
                    json=build_payload(),
                    headers=attempt.headers.as_dict(),
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            if is_untrusted_certificate_error(exc):
                logger.debug("Attempt %d: untrusted certificate: %s", attempt.number, exc)
                raise TlsUntrustedError(
                    f"TLS certificate verification failed: {exc}",
                    (_TLS_REMEDY,),
                ) from exc
            raise NetworkError(
                f"Network request failed: {str(exc) or type(exc).__name__}",
                (_NETWORK_REMEDY,),
            ) from exc

        logger.debug("Attempt %d: HTTP %d", attempt.number, response.status_code)
        if not response.is_success:
            raise HttpStatusError(response.status_code, attempt.url)
        return response
