"""Method dispatch table: one route per overridden JSON-RPC method."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from tronbridge.api.rpc.models import JsonRpcRequest, JsonRpcResponse
from tronbridge.api.rpc.normalizers import (
    ParamsNormalizer,
    normalize_estimate_gas_params,
    normalize_eth_call_params,
)
from tronbridge.api.rpc.response_rewriter import ResultRewriter, repair_block_state_root
from tronbridge.api.rpc.short_circuit import transaction_count_response


class Behavior(str, Enum):
    """How the engine treats one call."""
    SHORT_CIRCUIT = "short_circuit"
    NORMALIZE_AND_FORWARD = "normalize_and_forward"
    FORWARD_THEN_REWRITE_RESPONSE = "forward_then_rewrite_response"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True, slots=True)
class MethodRoute:
    """Behavior for a method plus the callable that implements it."""

    behavior: Behavior
    respond: Callable[[JsonRpcRequest], JsonRpcResponse] | None = None
    normalize_params: ParamsNormalizer | None = None
    rewrite_result: ResultRewriter | None = None


PASSTHROUGH_ROUTE = MethodRoute(Behavior.PASSTHROUGH)

METHOD_ROUTES: dict[str, MethodRoute] = {
    "eth_getTransactionCount": MethodRoute(
        Behavior.SHORT_CIRCUIT,
        respond=transaction_count_response,
    ),
    "eth_call": MethodRoute(
        Behavior.NORMALIZE_AND_FORWARD,
        normalize_params=normalize_eth_call_params,
    ),
    "eth_estimateGas": MethodRoute(
        Behavior.NORMALIZE_AND_FORWARD,
        normalize_params=normalize_estimate_gas_params,
    ),
    "eth_getBlockByNumber": MethodRoute(
        Behavior.FORWARD_THEN_REWRITE_RESPONSE,
        rewrite_result=repair_block_state_root,
    ),
    "eth_getBlockByHash": MethodRoute(
        Behavior.FORWARD_THEN_REWRITE_RESPONSE,
        rewrite_result=repair_block_state_root,
    ),
}


def resolve_route(method: str) -> MethodRoute:
    """Exact, case-sensitive lookup; unknown methods pass through."""
    return METHOD_ROUTES.get(method, PASSTHROUGH_ROUTE)
