import httpx
import pytest

from core.domain.errors import HttpStatusError, NetworkError, TlsUntrustedError
from core.domain.models import HeaderSet
from core.services.retry_policy import INSECURE_RETRY_WARNING, fetch_with_tls_fallback

URL = "https://self-signed.example.test/graphql"


def _ok():
    return httpx.Response(200, json={"data": {}}, request=httpx.Request("POST", URL))


def test_success_on_first_attempt_makes_one_request(scripted_transport):
    transport = scripted_transport(_ok())

    response = fetch_with_tls_fallback(transport, URL, HeaderSet())

    assert response.status_code == 200
    assert [a.tls_validate for a in transport.attempts] == [True]


def test_untrusted_certificate_retries_once_without_validation(scripted_transport):
    transport = scripted_transport(TlsUntrustedError("self-signed certificate"), _ok())
    warnings: list[str] = []

    response = fetch_with_tls_fallback(transport, URL, HeaderSet({"A": "b"}), warn=warnings.append)

    assert response.status_code == 200
    assert [(a.number, a.tls_validate) for a in transport.attempts] == [(1, True), (2, False)]
    assert transport.attempts[1].headers["A"] == "b"
    assert warnings == [INSECURE_RETRY_WARNING]


def test_second_attempt_failure_is_final(scripted_transport):
    transport = scripted_transport(
        TlsUntrustedError("self-signed certificate"),
        NetworkError("Network request failed: reset"),
    )

    with pytest.raises(NetworkError):
        fetch_with_tls_fallback(transport, URL, HeaderSet())

    assert len(transport.attempts) == 2


def test_forced_validation_never_retries(scripted_transport):
    error = TlsUntrustedError("self-signed certificate")
    transport = scripted_transport(error, _ok())
    warnings: list[str] = []

    with pytest.raises(TlsUntrustedError) as excinfo:
        fetch_with_tls_fallback(
            transport, URL, HeaderSet(), force_tls_validation=True, warn=warnings.append
        )

    assert excinfo.value is error
    assert len(transport.attempts) == 1
    assert warnings == []


@pytest.mark.parametrize(
    "error",
    [NetworkError("Network request failed: refused"), HttpStatusError(500, URL)],
)
def test_other_failures_propagate_without_retry(scripted_transport, error):
    transport = scripted_transport(error, _ok())

    with pytest.raises(type(error)):
        fetch_with_tls_fallback(transport, URL, HeaderSet())

    assert len(transport.attempts) == 1


def test_on_attempt_sees_every_attempt(scripted_transport):
    transport = scripted_transport(TlsUntrustedError("x"), _ok())
    seen = []

    fetch_with_tls_fallback(transport, URL, HeaderSet(), on_attempt=seen.append)

    assert [a.number for a in seen] == [1, 2]
