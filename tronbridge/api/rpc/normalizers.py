"""Per-method rewrites of a JSON-RPC call's params list.

Each normalizer takes the request params and returns the params to forward.
When params[0] is not a transaction object the input is returned as-is and the
caller forwards the original request bytes.
"""

from __future__ import annotations

from typing import Any, Callable

from loguru import logger

from tronbridge.api.rpc.address import to_backend_native

ParamsNormalizer = Callable[[Any], Any]

ESTIMATE_GAS_DROPPED_FIELDS = ("chainId", "gas", "gasPrice")


def _transaction_object(params: Any) -> dict[str, Any] | None:
    if not isinstance(params, list) or not params:
        return None
    first = params[0]
    return first if isinstance(first, dict) else None


def collapse_input_field(tx: dict[str, Any]) -> None:
    """Keep `data` when both are present; otherwise rename `input` to `data`."""
    if "input" not in tx:
        return
    if "data" in tx:
        tx.pop("input")
        logger.debug("Removed 'input' field (keeping 'data')")
        return
    tx["data"] = tx.pop("input")
    logger.debug("Renamed 'input' field to 'data'")


def normalize_eth_call_params(params: Any) -> Any:
    """eth_call: input/data collapse and chainId removal on params[0]."""
    tx = _transaction_object(params)
    if tx is None:
        logger.debug("eth_call params[0] is not a transaction object, leaving params untouched")
        return params
    tx = dict(tx)
    collapse_input_field(tx)
    if tx.pop("chainId", None) is not None:
        logger.debug("Removed 'chainId' field for backend compatibility")
    return [tx, *params[1:]]


def normalize_estimate_gas_params(params: Any) -> Any:
    """
    eth_estimateGas: full field cleanup plus address conversion.

    Drops chainId/gas/gasPrice, converts `from` and a non-null `to` to the
    backend-native form, keeps `to: null` as-is and truncates params to the
    transaction object alone (the backend rejects a trailing block tag).
    """
    tx = _transaction_object(params)
    if tx is None:
        logger.debug("eth_estimateGas params[0] is not a transaction object, leaving params untouched")
        return params
    tx = dict(tx)
    collapse_input_field(tx)
    for field in ESTIMATE_GAS_DROPPED_FIELDS:
        tx.pop(field, None)
    if "from" in tx:
        tx["from"] = to_backend_native(tx["from"])
    if tx.get("to") is not None:
        tx["to"] = to_backend_native(tx["to"])
    if len(params) > 1:
        logger.debug("Truncated eth_estimateGas params from {} to 1 element", len(params))
    return [tx]
