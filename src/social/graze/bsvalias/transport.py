"""HTTP transport used by the resolvers.

The resolvers only depend on the Transport protocol, so anything with a
compatible get/post pair can be injected. HttpTransport is the default aiohttp
backed implementation; it parses every response body as JSON and maps
transport failures onto the client error taxonomy. It does not retry.
"""

import asyncio
import json
import logging
from types import TracebackType
from typing import Any, Dict, Optional, Protocol

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout, hdrs

from social.graze.bsvalias.errors import (
    ConnectionTimeoutError,
    ServerErrorResponse,
    UnexpectedNetworkError,
    UnexpectedServerResponseError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

DEFAULT_USER_AGENT = "bsvalias-client/1.0"


class Transport(Protocol):
    """Performs HTTP requests and returns the parsed JSON body."""

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any: ...

    async def post(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Any] = None,
    ) -> Any: ...


class HttpTransport:
    def __init__(
        self,
        client_session: ClientSession | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        if client_session is not None:
            client = client_session
            closed = None
        else:
            client = ClientSession()
            closed = False

        self._client = client
        self._closed = closed
        self._timeout = ClientTimeout(total=timeout)
        self._user_agent = user_agent

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self._send_request(hdrs.METH_GET, url, headers)

    async def post(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Any] = None,
    ) -> Any:
        return await self._send_request(hdrs.METH_POST, url, headers, data)

    def _request_headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        request_headers = {
            hdrs.CONTENT_TYPE: "application/json",
            hdrs.USER_AGENT: self._user_agent,
        }
        for key, value in (headers or {}).items():
            # Header names are case-insensitive, so drop any default the caller overrides.
            for existing in [k for k in request_headers if k.lower() == key.lower()]:
                del request_headers[existing]
            request_headers[key] = value
        return request_headers

    async def _send_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Any] = None,
    ) -> Any:
        kwargs: Dict[str, Any] = {
            "headers": self._request_headers(headers),
            "timeout": self._timeout,
        }
        if data is not None:
            kwargs["json"] = data

        logger.debug("Making request: %s %s", method, url)

        try:
            if method == hdrs.METH_POST:
                request_context = self._client.post(url, **kwargs)
            else:
                request_context = self._client.get(url, **kwargs)
            async with request_context as resp:
                return await self._read_response(resp)
        except asyncio.TimeoutError as e:
            raise ConnectionTimeoutError() from e
        except ClientError as e:
            raise UnexpectedNetworkError(str(e) or type(e).__name__) from e

    async def _read_response(self, resp: ClientResponse) -> Any:
        if resp.status >= 400:
            body = await resp.text()
            try:
                body = json.loads(body)
            except (TypeError, ValueError):
                pass
            logger.debug("Request failed with status %s", resp.status)
            raise ServerErrorResponse(resp.status, body)

        try:
            return await resp.json(content_type=None)
        except ValueError as e:
            raise UnexpectedServerResponseError(
                "Response body is not valid JSON"
            ) from e

    async def close(self) -> None:
        await self._client.close()
        self._closed = True

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        # Only close sessions we created ourselves.
        if self._closed is not None:
            await self.close()

    def __del__(self) -> None:
        if getattr(self, "_closed", None) is None:
            # in case object was not initialized or the session is borrowed
            return

        if not self._closed:
            logger.warning("HttpTransport was not closed")
