"""FastAPI server: the HTTP listener in front of the transformation engine.

POST / runs the JSON-RPC engine; GET / and every other route are relayed to the
destination as plain GETs.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.responses import Response
from loguru import logger

from tronbridge import __version__
from tronbridge.api.forwarder import HttpForwarder
from tronbridge.api.rpc.context_models import ForwardResult, Headers
from tronbridge.api.rpc.engine import handle_rpc_post
from tronbridge.api.rpc.error_boundary import unhandled_exception_result, upstream_error_result
from tronbridge.config.schema import Config
from tronbridge.utils.exceptions import ConfigError, TronBridgeError

FALLBACK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def build_forwarder(config: Config) -> HttpForwarder:
    """Create the httpx forwarder from startup configuration."""
    destination = config.destination_url
    if not destination:
        raise ConfigError("destination URL is required (--dest or proxy.destination)", field="proxy.destination")
    return HttpForwarder(
        destination,
        timeout=config.proxy.timeout_seconds,
        extra_headers=config.proxy.extra_headers,
    )


def to_http_response(result: ForwardResult) -> Response:
    """Build a Starlette response that keeps repeated destination headers."""
    response = Response(content=result.body, status_code=result.status_code)
    raw_headers = [
        (name.lower().encode("latin-1", errors="replace"), value.encode("latin-1", errors="replace"))
        for name, value in result.headers
    ]
    if result.header("content-length") is None:
        raw_headers.append((b"content-length", str(len(result.body)).encode("latin-1")))
    response.raw_headers = raw_headers
    return response


async def _guarded(body: bytes, call: Callable[[], Awaitable[ForwardResult]]) -> Response:
    try:
        result = await call()
    except TronBridgeError as e:
        result = upstream_error_result(body=body, exc=e, log_error=logger.error)
    except Exception as e:
        result = unhandled_exception_result(body=body, exc=e, log_exception=logger.exception)
    return to_http_response(result)


def create_proxy_app(*, forwarder: HttpForwarder) -> FastAPI:
    """Create the gateway app around an already configured forwarder."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Proxy forwarding to {}", forwarder.destination)
        try:
            yield
        finally:
            await forwarder.close()

    app = FastAPI(title="tronbridge", version=__version__, lifespan=lifespan)
    app.state.forwarder = forwarder

    def _headers(request: Request) -> Headers:
        headers = list(request.headers.items())
        logger.debug("Request headers: {}", headers)
        return headers

    @app.post("/")
    async def rpc_entry(request: Request) -> Response:
        body = await request.body()
        headers = _headers(request)
        return await _guarded(
            body,
            lambda: handle_rpc_post(body=body, headers=headers, forward=forwarder.forward),
        )

    @app.get("/")
    async def relay_get(request: Request) -> Response:
        logger.info("Received GET request with {} query parameters", len(request.query_params))
        headers = _headers(request)
        return await _guarded(b"", lambda: forwarder.forward_get(request.url.query, headers))

    @app.api_route("/{path:path}", methods=FALLBACK_METHODS)
    async def relay_fallback(request: Request, path: str) -> Response:
        logger.info("Received fallback request: {} /{}", request.method, path)
        headers = _headers(request)
        return await _guarded(b"", lambda: forwarder.forward_get("", headers))

    return app
