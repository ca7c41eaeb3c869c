"""Outbound HTTP transport to the destination node, built on httpx."""

from __future__ import annotations

import httpx
from loguru import logger

from tronbridge.api.rpc.context_models import ForwardResult, Headers
from tronbridge.utils.exceptions import UpstreamError, UpstreamTimeoutError

# Inbound headers never copied to the destination request.
SKIPPED_REQUEST_HEADERS = frozenset({
    "content-length",
    "host",
    "connection",
    "keep-alive",
    "proxy-connection",
    "transfer-encoding",
    "te",
    "upgrade",
    "accept-encoding",
})

# Content codings httpx decodes without optional extras.
DECODED_CONTENT_ENCODINGS = frozenset({"identity", "gzip", "deflate"})
OUTBOUND_ACCEPT_ENCODING = "gzip, deflate"

# Destination headers dropped because httpx already de-chunked the body.
SKIPPED_RESPONSE_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "transfer-encoding",
})


def filter_request_headers(headers: Headers, extra: dict[str, str] | None = None) -> Headers:
    """Copy inbound headers minus framing/hop-by-hop ones, then add configured extras."""
    forwarded: Headers = []
    for name, value in headers:
        if name.lower() in SKIPPED_REQUEST_HEADERS:
            logger.debug("Skipping header: {}", name)
            continue
        forwarded.append((name, value))
    forwarded.append(("accept-encoding", OUTBOUND_ACCEPT_ENCODING))
    for name, value in (extra or {}).items():
        forwarded = [(k, v) for k, v in forwarded if k.lower() != name.lower()]
        forwarded.append((name, value))
    return forwarded


def was_decoded(content_encoding: str) -> bool:
    """True when httpx undid every coding listed in a content-encoding value."""
    codings = [c.strip().lower() for c in content_encoding.split(",") if c.strip()]
    return all(c in DECODED_CONTENT_ENCODINGS for c in codings)


def filter_response_headers(response: httpx.Response, body: bytes) -> Headers:
    """
    Destination headers as a client should see them for `body`.

    When httpx decoded a compressed body the encoding header goes and the
    declared length is replaced. Codings httpx left alone keep both headers.
    """
    headers = response.headers.multi_items()
    encodings = [value for name, value in headers if name.lower() == "content-encoding"]
    kept = [(name, value) for name, value in headers if name.lower() not in SKIPPED_RESPONSE_HEADERS]
    if encodings and all(was_decoded(value) for value in encodings):
        kept = [(name, value) for name, value in kept if name.lower() not in ("content-encoding", "content-length")]
        kept.append(("content-length", str(len(body))))
    return kept


class HttpForwarder:
    """Forwarding collaborator: one pooled AsyncClient per process."""

    def __init__(
        self,
        destination: str,
        *,
        timeout: float | None = 30.0,
        extra_headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.destination = destination
        self.timeout = timeout
        self.extra_headers = dict(extra_headers or {})
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def forward(self, rpc_method: str, body: bytes, headers: Headers) -> ForwardResult:
        """POST `body` to the destination; the status code is returned as-is, never raised."""
        logger.info("Forwarding POST request to {} (method={})", self.destination, rpc_method)
        return await self._send("POST", self.destination, body=body, headers=headers)

    async def forward_get(self, query_string: str, headers: Headers) -> ForwardResult:
        """GET the destination, appending the inbound query string when present."""
        url = f"{self.destination}?{query_string}" if query_string else self.destination
        logger.info("Forwarding GET request to {}", url)
        return await self._send("GET", url, body=None, headers=headers)

    async def _send(self, method: str, url: str, *, body: bytes | None, headers: Headers) -> ForwardResult:
        client = await self._get_client()
        try:
            response = await client.request(
                method,
                url,
                content=body,
                headers=filter_request_headers(headers, self.extra_headers),
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(self.destination, self.timeout) from e
        except httpx.RequestError as e:
            raise UpstreamError(self.destination, str(e) or type(e).__name__) from e

        content = response.content
        result = ForwardResult(
            status_code=response.status_code,
            body=content,
            headers=filter_response_headers(response, content),
        )
        logger.debug("Response headers from destination: {}", result.headers)
        return result
