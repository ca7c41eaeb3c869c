"""Shared dataclass models passed between the engine and the forwarding collaborator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable

Headers = list[tuple[str, str]]


@dataclass(slots=True)
class ForwardResult:
    """Status, raw body and ordered headers of one HTTP exchange."""

    status_code: int
    body: bytes
    headers: Headers = field(default_factory=list)

    def header(self, name: str) -> str | None:
        """First value of a header, case-insensitive."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


# forward(rpc_method, body, inbound_headers) -> ForwardResult
Forward = Callable[[str, bytes, Headers], Awaitable[ForwardResult]]
