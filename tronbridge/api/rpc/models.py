"""JSON-RPC 2.0 envelope models and their wire encoding."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"


class _Unset:
    """Marker for an absent key (`params` / `result`), distinct from an explicit null."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def encode_json(payload: Any) -> bytes:
    """Compact UTF-8 JSON, the same byte shape the gateway always emits."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def decode_json(body: bytes | str) -> Any:
    """Parse a body; raises ValueError on bad input, including nesting too deep to parse."""
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    try:
        return json.loads(body)
    except RecursionError as e:
        raise ValueError("JSON nesting too deep") from e


@dataclass(slots=True)
class JsonRpcRequest:
    """Parsed inbound call. `params` keeps whatever JSON shape the client sent."""

    method: str
    params: Any = UNSET
    id: Any = None
    jsonrpc: str = JSONRPC_VERSION

    @classmethod
    def from_payload(cls, payload: Any) -> "JsonRpcRequest | None":
        """Return a request for JSON-RPC shaped objects, None for anything else (batches included)."""
        if not isinstance(payload, dict):
            return None
        method = payload.get("method")
        version = payload.get("jsonrpc")
        if not isinstance(method, str) or not isinstance(version, str):
            return None
        return cls(
            method=method,
            params=payload.get("params", UNSET),
            id=payload.get("id"),
            jsonrpc=version,
        )

    def with_params(self, params: Any) -> "JsonRpcRequest":
        return JsonRpcRequest(method=self.method, params=params, id=self.id, jsonrpc=self.jsonrpc)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.params is not UNSET:
            payload["params"] = self.params
        payload["id"] = self.id
        return payload

    def to_bytes(self) -> bytes:
        return encode_json(self.to_dict())


@dataclass(slots=True)
class JsonRpcResponse:
    """
    Response envelope.

    `error` is either a payload or None, and None is never written out. When
    an error is present `result` is dropped, so a serialized response always
    carries exactly one of the two.
    """

    id: Any = None
    result: Any = UNSET
    error: Any = None
    jsonrpc: str = JSONRPC_VERSION
    # True when the parsed body carried an explicit "error": null.
    had_null_error: bool = field(default=False, compare=False)

    @classmethod
    def success(cls, request_id: Any, result: Any) -> "JsonRpcResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: Any, code: int, message: str, data: Any = None) -> "JsonRpcResponse":
        error: dict[str, Any] = {"code": code, "message": message}
        if data is not None:
            error["data"] = data
        return cls(id=request_id, error=error)

    @classmethod
    def from_payload(cls, payload: Any) -> "JsonRpcResponse | None":
        """Return a response for JSON-RPC shaped objects, None otherwise."""
        if not isinstance(payload, dict) or not isinstance(payload.get("jsonrpc"), str):
            return None
        if "result" not in payload and "error" not in payload:
            return None
        return cls(
            id=payload.get("id"),
            result=payload.get("result", UNSET),
            error=payload.get("error"),
            jsonrpc=payload["jsonrpc"],
            had_null_error="error" in payload and payload["error"] is None,
        )

    @property
    def is_success(self) -> bool:
        return self.error is None and self.result is not UNSET

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is not None:
            payload["error"] = self.error
        else:
            payload["result"] = None if self.result is UNSET else self.result
        payload["id"] = self.id
        return payload

    def to_bytes(self) -> bytes:
        return encode_json(self.to_dict())
