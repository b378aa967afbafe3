import pytest
from pydantic import ValidationError

from core.domain.models import HeaderSet, IntrospectionResult, OutputFormat, RequestAttempt


def test_header_set_lookup_ignores_case_but_keeps_spelling():
    headers = HeaderSet({"X-Api-Key": "k"})

    assert headers["x-api-key"] == "k"
    assert "X-API-KEY" in headers
    assert list(headers) == ["X-Api-Key"]


def test_overlay_returns_new_set():
    base = HeaderSet({"Content-Type": "application/json"})

    merged = base.overlay({"content-type": "text/plain", "Accept": "*/*"})

    assert base.as_dict() == {"Content-Type": "application/json"}
    assert merged.as_dict() == {"content-type": "text/plain", "Accept": "*/*"}


def test_request_attempt_is_frozen():
    attempt = RequestAttempt(url="https://x.test/graphql")

    with pytest.raises(ValidationError):
        attempt.tls_validate = False


def test_output_format_values():
    assert OutputFormat("graphql") is OutputFormat.SDL
    assert OutputFormat.default() is OutputFormat.SDL
    assert {f.value for f in OutputFormat} == {"graphql", "json", "markdown"}


def test_introspection_result_accepts_null_errors():
    result = IntrospectionResult.model_validate({"data": {"__schema": {}}, "errors": None})

    assert result.errors == []


def test_introspection_result_errors_default_to_empty_list():
    assert IntrospectionResult.model_validate({"data": None}).errors == []
