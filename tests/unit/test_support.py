"""
Unit tests for errors, settings, logging and response wrappers.
"""

import logging

import httpx
import pytest
import structlog

from idp_client.config import ClientSettings, get_settings
from idp_client.errors import (
    ErrorResponse,
    FetchError,
    IdTokenValidationError,
    RequestTimeoutError,
    RequiredParameterError,
    ResponseError,
)
from idp_client.logging import add_client_context, configure_logging, get_logger
from idp_client.management.errors import ManagementApiError, parse_management_error
from idp_client.runtime import (
    BlobApiResponse,
    JSONApiResponse,
    TextApiResponse,
    VoidApiResponse,
    clone_response,
)


class TestErrors:
    """Test cases for error payloads."""

    def test_to_response(self):
        response = RequiredParameterError("kid").to_response()

        assert isinstance(response, ErrorResponse)
        assert response.code == "REQUIRED_PARAMETER"
        assert response.message == "Required parameter requestParameters.kid was null or undefined."
        assert response.details == {"field": "kid"}
        assert response.trace_id is None

    def test_timeout_error_defaults(self):
        error = RequestTimeoutError(250)

        assert str(error) == "The request was timed out."
        assert error.details == {"timeout_ms": 250}

    def test_fetch_error_keeps_cause(self):
        cause = httpx.ConnectError("refused")
        error = FetchError(cause, "failed")

        assert error.cause is cause
        assert error.details["cause"] == "ConnectError: refused"

    def test_response_error_message(self):
        error = ResponseError(418, body="teapot")

        assert str(error) == "Response returned an error code: 418"
        assert error.body == "teapot"

    def test_id_token_error_without_claim(self):
        assert IdTokenValidationError("bad").details == {}


class TestParseManagementError:
    """Test cases for mapping Management API error bodies."""

    def test_json_error_body(self):
        response = httpx.Response(403, json={
            "statusCode": 403,
            "error": "Forbidden",
            "message": "Insufficient scope",
            "errorCode": "insufficient_scope",
        })

        error = parse_management_error(response)

        assert isinstance(error, ManagementApiError)
        assert isinstance(error, ResponseError)
        assert error.error == "Forbidden"
        assert error.message == "Insufficient scope"
        assert error.error_code == "insufficient_scope"

    def test_text_error_body(self):
        error = parse_management_error(httpx.Response(502, text="upstream down"))

        assert error.error == "Bad Gateway"
        assert error.message == "upstream down"
        assert error.error_code is None

    def test_empty_error_body(self):
        error = parse_management_error(httpx.Response(500))

        assert error.message == "Internal Server Error"


class TestSettings:
    """Test cases for ClientSettings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("IDP_TIMEOUT_MS", raising=False)
        settings = ClientSettings(_env_file=None)

        assert settings.timeout_ms == 10000
        assert settings.max_attempts == 3
        assert settings.id_token_signing_alg == "RS256"
        assert settings.clock_tolerance == 60

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("IDP_DOMAIN", "tenant.example.com")
        monkeypatch.setenv("IDP_TIMEOUT_MS", "2500")
        monkeypatch.setenv("IDP_RETRY_ENABLED", "false")

        settings = get_settings()

        assert settings.domain == "tenant.example.com"
        assert settings.timeout_ms == 2500
        assert settings.retry_enabled is False

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("IDP_MAX_ATTEMPTS", "5")

        assert get_settings(max_attempts=2).max_attempts == 2

    def test_max_attempts_bounds(self):
        with pytest.raises(ValueError):
            ClientSettings(max_attempts=11)


class TestLogging:
    """Test cases for logging helpers."""

    def test_component_from_logger_name(self):
        event = add_client_context(None, "info", {"logger": "idp_client.runtime", "event": "x"})

        assert event["component"] == "runtime"

    def test_top_level_logger_has_no_component(self):
        event = add_client_context(None, "info", {"logger": "idp_client", "event": "x"})

        assert "component" not in event

    def test_configure_logging_sets_level(self):
        try:
            configure_logging("idp_client", "debug")

            assert logging.getLogger("idp_client").level == logging.DEBUG
            assert get_logger("idp_client.test") is not None
        finally:
            structlog.reset_defaults()
            logging.getLogger("idp_client").setLevel(logging.NOTSET)


class TestResponses:
    """Test cases for typed response wrappers."""

    @pytest.fixture
    def raw(self):
        return httpx.Response(200, json={"id": "5"}, headers={"X-Request-Id": "abc"})

    def test_json(self, raw):
        response = JSONApiResponse.from_response(raw)

        assert response.data == {"id": "5"}
        assert response.headers["x-request-id"] == "abc"
        assert response.status_text == "OK"

    def test_text_blob_void(self, raw):
        assert TextApiResponse.from_response(raw).data == raw.text
        assert BlobApiResponse.from_response(raw).data == raw.content
        assert VoidApiResponse.from_response(raw).data is None

    def test_clone_is_independent(self, raw):
        clone = clone_response(raw)

        assert clone is not raw
        assert clone.json() == raw.json()
        assert clone.status_code == raw.status_code
