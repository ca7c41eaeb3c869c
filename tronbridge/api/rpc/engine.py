"""Request/response transformation around a single forwarded call.

All work is synchronous except the awaited `forward` call; nothing here keeps
state between requests.
"""

from __future__ import annotations

from loguru import logger

from tronbridge.api.rpc.context_models import Forward, ForwardResult, Headers
from tronbridge.api.rpc.dispatch_table import MethodRoute, resolve_route
from tronbridge.api.rpc.framing import correct_content_length
from tronbridge.api.rpc.models import JsonRpcRequest, JsonRpcResponse, decode_json
from tronbridge.api.rpc.response_rewriter import ResultRewriter, rewrite_response_body

UNKNOWN_METHOD = "unknown"


def parse_rpc_request(body: bytes) -> JsonRpcRequest | None:
    """Parse an inbound body; None when it is not a single JSON-RPC request."""
    try:
        payload = decode_json(body)
    except ValueError as e:
        logger.debug("Request body is not JSON: {}", e)
        return None
    return JsonRpcRequest.from_payload(payload)


def local_response(response: JsonRpcResponse) -> ForwardResult:
    """Wrap a locally produced response with the headers a backend would send."""
    body = response.to_bytes()
    headers = [("content-type", "application/json"), ("content-length", str(len(body)))]
    return ForwardResult(status_code=200, body=body, headers=headers)


def prepare_outbound_body(request: JsonRpcRequest, body: bytes, route: MethodRoute) -> bytes:
    """Apply the route's params normalizer; the original bytes are kept when nothing changed."""
    if route.normalize_params is None:
        return body
    logger.info("Normalizing {} parameters", request.method)
    params = route.normalize_params(request.params)
    if params == request.params:
        return body
    outbound = request.with_params(params).to_bytes()
    logger.debug("Modified request body being sent to destination: {}", outbound)
    return outbound


def rewrite_forwarded_response(
    result: ForwardResult,
    *,
    method: str,
    rewrite_result: ResultRewriter | None = None,
) -> ForwardResult:
    """Apply response fixups and correct framing when the body changed."""
    new_body = rewrite_response_body(result.body, method=method, rewrite_result=rewrite_result)
    if new_body is None:
        return result
    logger.debug(
        "Setting new content-length: {} (was {})",
        len(new_body),
        result.header("content-length"),
    )
    return ForwardResult(
        status_code=result.status_code,
        body=new_body,
        headers=correct_content_length(result.headers, new_body, modified=True),
    )


async def handle_rpc_post(*, body: bytes, headers: Headers, forward: Forward) -> ForwardResult:
    """Run one inbound POST body through classification, normalization, forwarding and fixups."""
    logger.info("Received POST request, body length: {}", len(body))
    logger.debug("Request body: {!r}", body)

    request = parse_rpc_request(body)
    if request is None:
        logger.warning("Not a JSON-RPC request, forwarding as-is")
        return await forward(UNKNOWN_METHOD, body, headers)

    route = resolve_route(request.method)
    logger.info("Parsed JSON-RPC request: method={} behavior={}", request.method, route.behavior.value)

    if route.respond is not None:
        return local_response(route.respond(request))

    outbound = prepare_outbound_body(request, body, route)
    result = await forward(request.method, outbound, headers)
    logger.info(
        "Received response from destination, status: {}, body length: {}",
        result.status_code,
        len(result.body),
    )
    logger.debug("Raw response body: {!r}", result.body)
    return rewrite_forwarded_response(result, method=request.method, rewrite_result=route.rewrite_result)
