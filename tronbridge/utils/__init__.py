"""Utility functions for tronbridge."""

from tronbridge.utils.exceptions import (
    TronBridgeError,
    ConfigError,
    UpstreamError,
    UpstreamTimeoutError,
    ErrorCategory,
    classify_exception,
    sanitize_error_message,
)

__all__ = [
    "TronBridgeError",
    "ConfigError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
]
