"""
Unit tests for social.graze.bsvalias.errors
"""

import pytest

from social.graze.bsvalias.errors import (
    BsvAliasClientError,
    CapabilityNotSupportedError,
    ConfigurationError,
    ConnectionTimeoutError,
    DNSSECNotEnabledError,
    DnsServerResponseError,
    ErrorKind,
    InvalidHandleError,
    ServerErrorResponse,
    UnexpectedNetworkError,
    UnexpectedServerResponseError,
)


class TestErrorKinds:
    """Test suite for the tagged error taxonomy."""

    @pytest.mark.parametrize(
        "error, kind",
        [
            (UnexpectedNetworkError("boom"), ErrorKind.unexpected_network),
            (ConnectionTimeoutError(), ErrorKind.connection_timeout),
            (DnsServerResponseError("Invalid answer"), ErrorKind.malformed_dns_response),
            (ConfigurationError("bad"), ErrorKind.configuration),
            (ServerErrorResponse(500), ErrorKind.server_error_response),
            (UnexpectedServerResponseError("bad"), ErrorKind.unexpected_server_response),
            (CapabilityNotSupportedError("pki"), ErrorKind.capability_not_supported),
            (DNSSECNotEnabledError("x"), ErrorKind.unauthenticated_indirection),
            (InvalidHandleError("x"), ErrorKind.invalid_handle),
        ],
    )
    def test_kind(self, error, kind):
        assert error.kind == kind
        assert isinstance(error, BsvAliasClientError)

    def test_message(self):
        error = DnsServerResponseError("Invalid question type")

        assert error.message == "Invalid question type"
        assert str(error) == "Invalid question type"
        assert repr(error) == (
            "DnsServerResponseError(kind=malformed_dns_response, message='Invalid question type')"
        )

    def test_server_error_response_fields(self):
        error = ServerErrorResponse(503, {"error": "unavailable"})

        assert error.status == 503
        assert error.response == {"error": "unavailable"}
        assert error.message == "BsvAlias service responded with status: 503"
