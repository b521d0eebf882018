"""bsvalias client error taxonomy.

Every error raised by the client carries an ErrorKind tag and a human readable
message. Subclasses exist so callers can catch a specific failure, while the
kind makes it easy to branch on (or report) the failure without isinstance
chains.
"""

from enum import IntEnum
from typing import Any, Optional


class ErrorKind(IntEnum):
    """Client-side failure categories.

    None of these are retried by the client.
    """

    unexpected_network = 1
    connection_timeout = 2
    malformed_dns_response = 3
    configuration = 4
    server_error_response = 5
    unexpected_server_response = 6
    capability_not_supported = 7
    unauthenticated_indirection = 8
    invalid_handle = 9


class BsvAliasClientError(Exception):
    """Base class for all client-side errors."""

    kind: ErrorKind = ErrorKind.unexpected_network

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.name}, message={self.message!r})"


class UnexpectedNetworkError(BsvAliasClientError):
    """Unexpected client-side network error."""

    kind = ErrorKind.unexpected_network


class ConnectionTimeoutError(BsvAliasClientError):
    """The connection to the server timed out."""

    kind = ErrorKind.connection_timeout

    def __init__(self, message: str = "Connection timeout") -> None:
        super().__init__(message)


class DnsServerResponseError(BsvAliasClientError):
    """The DNS server returned an error or a malformed response."""

    kind = ErrorKind.malformed_dns_response


class ConfigurationError(BsvAliasClientError):
    """Invalid configuration supplied to the client."""

    kind = ErrorKind.configuration


class ServerErrorResponse(BsvAliasClientError):
    """The bsvalias server replied with an HTTP error status."""

    kind = ErrorKind.server_error_response

    def __init__(self, status: int, response: Optional[Any] = None) -> None:
        super().__init__(f"BsvAlias service responded with status: {status}")
        self.status = status
        self.response = response


class UnexpectedServerResponseError(BsvAliasClientError):
    """The bsvalias server replied with a document we do not understand."""

    kind = ErrorKind.unexpected_server_response


class CapabilityNotSupportedError(BsvAliasClientError):
    """The requested capability is not advertised by the server."""

    kind = ErrorKind.capability_not_supported


class DNSSECNotEnabledError(BsvAliasClientError):
    """The discovery target is a third party host not vouched for by DNSSEC."""

    kind = ErrorKind.unauthenticated_indirection


class InvalidHandleError(BsvAliasClientError):
    """The value is not a valid alias@domain handle."""

    kind = ErrorKind.invalid_handle
