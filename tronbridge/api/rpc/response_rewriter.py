"""Post-processing of destination responses: error-field omission and stateRoot repair."""

from __future__ import annotations

from typing import Any, Callable

from loguru import logger

from tronbridge.api.rpc.models import JsonRpcResponse, decode_json

# Mutates a successful object-shaped `result` in place; returns True when it changed something.
ResultRewriter = Callable[[str, dict[str, Any]], bool]

STATE_ROOT_LENGTH = 66
STATE_ROOT_PLACEHOLDER = "0x" + "01" * 32


def is_well_formed_state_root(value: Any) -> bool:
    """0x-prefixed 32-byte hex string of exactly 66 characters."""
    return isinstance(value, str) and value != "0x" and len(value) == STATE_ROOT_LENGTH


def repair_block_state_root(method: str, block: dict[str, Any]) -> bool:
    """Replace a missing or malformed stateRoot with the fixed placeholder."""
    if "stateRoot" not in block:
        logger.info("Adding missing stateRoot to {} response", method)
    elif not isinstance(block["stateRoot"], str):
        logger.info("Fixing non-string stateRoot in {} response", method)
    elif not is_well_formed_state_root(block["stateRoot"]):
        logger.info("Fixing invalid stateRoot '{}' in {} response", block["stateRoot"], method)
    else:
        return False
    block["stateRoot"] = STATE_ROOT_PLACEHOLDER
    return True


def rewrite_response_body(
    body: bytes,
    *,
    method: str,
    rewrite_result: ResultRewriter | None = None,
) -> bytes | None:
    """
    Return the re-serialized body when a fixup applied, None to forward `body` as-is.

    Bodies that are not JSON-RPC responses are never touched.
    """
    try:
        payload = decode_json(body)
    except ValueError as e:
        logger.warning("Failed to parse {} response as JSON, forwarding unchanged: {}", method, e)
        return None
    response = JsonRpcResponse.from_payload(payload)
    if response is None:
        logger.warning("{} response is not a JSON-RPC envelope, forwarding unchanged", method)
        return None

    changed = response.had_null_error
    if changed:
        logger.debug("Omitting null 'error' field from {} response", method)
    if rewrite_result is not None and response.is_success and isinstance(response.result, dict):
        changed = rewrite_result(method, response.result) or changed
    return response.to_bytes() if changed else None
