"""Error-boundary helpers mapping failures around a forwarded call to HTTP responses."""

from __future__ import annotations

from typing import Any, Callable

from tronbridge.api.rpc.context_models import ForwardResult
from tronbridge.api.rpc.engine import local_response, parse_rpc_request
from tronbridge.api.rpc.models import JsonRpcResponse
from tronbridge.utils.exceptions import (
    ErrorCategory,
    TronBridgeError,
    classify_exception,
    sanitize_error_message,
)

# JSON-RPC server error range, used for upstream failures.
UPSTREAM_ERROR_CODE = -32000
INTERNAL_ERROR_CODE = -32603


def classify_http_status(exc: Exception) -> int:
    """Map exception to the HTTP status returned to the caller."""
    if isinstance(exc, TronBridgeError):
        category = exc.category
    else:
        _, category, _ = classify_exception(exc)
    category_to_status = {
        ErrorCategory.VALIDATION: 400,
        ErrorCategory.TIMEOUT: 504,
        ErrorCategory.RETRYABLE: 502,
    }
    return category_to_status.get(category, 500)


def request_id_from_body(body: bytes) -> Any:
    """Best-effort id of the inbound request, so error envelopes can echo it."""
    request = parse_rpc_request(body)
    return request.id if request is not None else None


def upstream_error_result(
    *,
    body: bytes,
    exc: TronBridgeError,
    log_error: Callable[[str, Any, Any], None],
) -> ForwardResult:
    """Map forwarder failures (unreachable / timed out destination) to 502 / 504."""
    log_error("Failed to forward request [{}]: {}", exc.code, sanitize_error_message(exc.message))
    response = JsonRpcResponse.failure(
        request_id_from_body(body),
        UPSTREAM_ERROR_CODE,
        sanitize_error_message(exc.message),
    )
    result = local_response(response)
    result.status_code = classify_http_status(exc)
    return result


def unhandled_exception_result(
    *,
    body: bytes,
    exc: Exception,
    log_exception: Callable[[str, Any, Any], None],
) -> ForwardResult:
    """Map unexpected exceptions to a 500 with a JSON-RPC internal-error envelope."""
    code, category, _ = classify_exception(exc)
    sanitized = sanitize_error_message(str(exc))
    log_exception("Proxy request failed with [{}]: {}", code, sanitized)
    response = JsonRpcResponse.failure(
        request_id_from_body(body),
        INTERNAL_ERROR_CODE,
        sanitized or "internal error",
        {"error_code": code, "category": category.value},
    )
    result = local_response(response)
    result.status_code = 500
    return result
