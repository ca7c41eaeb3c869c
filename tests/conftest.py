"""Pytest hooks and fixtures."""

import json
import os

import pytest

from tronbridge.api.rpc.context_models import ForwardResult


class RecordingForward:
    """Stand-in forwarding collaborator that records calls and replays one canned response."""

    def __init__(self, body=b'{"jsonrpc":"2.0","result":"0x1","id":1}', status_code=200, headers=None):
        if not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        self.body = body
        self.status_code = status_code
        self.headers = headers if headers is not None else [
            ("content-type", "application/json"),
            ("content-length", str(len(body))),
        ]
        self.calls = []

    async def __call__(self, rpc_method, body, headers):
        self.calls.append((rpc_method, body, headers))
        return ForwardResult(status_code=self.status_code, body=self.body, headers=list(self.headers))

    @property
    def last_payload(self):
        return json.loads(self.calls[-1][1])


@pytest.fixture
def make_forward():
    return RecordingForward


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep TRONBRIDGE_* variables from the developer shell out of config tests."""

    for key in list(os.environ):
        if key.startswith("TRONBRIDGE_"):
            monkeypatch.delenv(key, raising=False)
