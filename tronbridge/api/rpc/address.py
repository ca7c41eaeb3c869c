"""Address conversion between Ethereum form (0x + 40 hex) and backend-native form (0x41 + 40 hex)."""

from __future__ import annotations

import re
from typing import Any

BACKEND_ADDRESS_PREFIX = "41"

_ETHEREUM_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")


def is_ethereum_address(value: Any) -> bool:
    """Return True for exactly 0x followed by 40 hex characters."""
    return isinstance(value, str) and _ETHEREUM_ADDRESS_RE.fullmatch(value) is not None


def to_backend_native(addr: Any) -> Any:
    """
    Insert the backend prefix after 0x for Ethereum-form addresses.

    Anything else (already native, malformed, wrong length, not a string) is
    returned unchanged, so applying this twice equals applying it once.
    """
    if not is_ethereum_address(addr):
        return addr
    return f"0x{BACKEND_ADDRESS_PREFIX}{addr[2:]}"
