"""Keeps the content-length header consistent with the body actually sent."""

from __future__ import annotations

from tronbridge.api.rpc.context_models import Headers

CONTENT_LENGTH = "content-length"


def correct_content_length(headers: Headers, body: bytes, *, modified: bool) -> Headers:
    """
    Return headers for `body`.

    Unmodified bodies keep the destination headers verbatim. For rewritten
    bodies every content-length is replaced by one with the new byte length;
    all other headers keep their order.
    """
    if not modified:
        return list(headers)
    corrected = [(name, value) for name, value in headers if name.lower() != CONTENT_LENGTH]
    corrected.append((CONTENT_LENGTH, str(len(body))))
    return corrected
