"""Responses served locally without contacting the destination node."""

from __future__ import annotations

from loguru import logger

from tronbridge.api.rpc.models import JsonRpcRequest, JsonRpcResponse

TRANSACTION_COUNT_OVERRIDE = "0x0"


def transaction_count_response(request: JsonRpcRequest) -> JsonRpcResponse:
    """eth_getTransactionCount always answers 0x0; params are ignored, the id is echoed."""
    logger.info("Overriding eth_getTransactionCount with {}", TRANSACTION_COUNT_OVERRIDE)
    return JsonRpcResponse.success(request.id, TRANSACTION_COUNT_OVERRIDE)
