"""
Exception hierarchy and error handling utilities for tronbridge.

Provides:
- Custom exception classes with error codes
- Error categorization (validation, retryable, timeout, fatal)
- Safe error message formatting (no credential leak into logs)
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    TIMEOUT = "timeout"


class TronBridgeError(Exception):
    """Base exception for all tronbridge errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigError(TronBridgeError):
    """Startup configuration is missing or unreadable."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFIG_ERROR", category=ErrorCategory.VALIDATION, details=details)


class UpstreamError(TronBridgeError):
    """The destination node could not be reached or did not answer."""

    def __init__(self, destination: str, message: str):
        super().__init__(
            f"Upstream '{destination}' error: {message}",
            code="UPSTREAM_ERROR",
            category=ErrorCategory.RETRYABLE,
            details={"destination": destination},
        )


class UpstreamTimeoutError(TronBridgeError):
    """The destination node did not answer within the forwarder timeout."""

    def __init__(self, destination: str, timeout_seconds: float | None):
        super().__init__(
            f"Upstream '{destination}' timed out after {timeout_seconds}s",
            code="UPSTREAM_TIMEOUT",
            category=ErrorCategory.TIMEOUT,
            details={"destination": destination, "timeout_seconds": timeout_seconds},
        )


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"(tron-pro-api-key)\s*[:=]\s*[a-zA-Z0-9\-]+", re.IGNORECASE),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove credentials (API keys, bearer tokens) from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception and return (error_code, category, should_retry).

    The gateway itself never retries; should_retry is informational and ends
    up in logs only.
    """
    exc_str = str(exc).lower()

    if isinstance(exc, TronBridgeError):
        return exc.code, exc.category, exc.category is ErrorCategory.RETRYABLE

    if isinstance(exc, asyncio.TimeoutError):
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if isinstance(exc, ConnectionError):
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.VALIDATION, False

    if isinstance(exc, (ValueError, KeyError, TypeError)):
        return "INVALID_VALUE", ErrorCategory.VALIDATION, False

    if "timeout" in exc_str or "timed out" in exc_str:
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if "connection" in exc_str or "network" in exc_str:
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    return "INTERNAL_ERROR", ErrorCategory.FATAL, False
