import json

import httpx
import pytest

from tronbridge.api.forwarder import HttpForwarder
from tronbridge.api.rpc.context_models import ForwardResult
from tronbridge.api.rpc.response_rewriter import STATE_ROOT_PLACEHOLDER
from tronbridge.api.server import build_forwarder, create_proxy_app, to_http_response
from tronbridge.config.schema import Config, ProxyConfig
from tronbridge.utils.exceptions import ConfigError

DEST = "http://node.test/jsonrpc"


class _Backend:
    """MockTransport handler that records requests and answers with a fixed response."""

    def __init__(self, response: httpx.Response | None = None, error: Exception | None = None):
        self.response = response or httpx.Response(200, json={"jsonrpc": "2.0", "result": "0x1", "id": 1})
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def backend():
    return _Backend()


@pytest.fixture
async def client(backend):
    forwarder = HttpForwarder(DEST, transport=httpx.MockTransport(backend))
    app = create_proxy_app(forwarder=forwarder)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://proxy") as c:
        yield c
    await forwarder.close()


@pytest.mark.asyncio
async def test_transaction_count_never_reaches_backend(client, backend):
    r = await client.post(
        "/",
        content=b'{"jsonrpc":"2.0","method":"eth_getTransactionCount","params":["0xabc","latest"],"id":7}',
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 200
    assert r.content == b'{"jsonrpc":"2.0","result":"0x0","id":7}'
    assert backend.requests == []


@pytest.mark.asyncio
async def test_eth_call_is_forwarded_normalized(client, backend):
    r = await client.post(
        "/",
        json={"jsonrpc": "2.0", "method": "eth_call", "params": [{"to": "0x123", "input": "0xdead", "chainId": "0x1"}], "id": 1},
    )
    assert r.status_code == 200
    sent = json.loads(backend.requests[0].content)
    assert sent["params"] == [{"to": "0x123", "data": "0xdead"}]
    assert backend.requests[0].method == "POST"
    assert str(backend.requests[0].url) == DEST


@pytest.mark.asyncio
async def test_block_response_is_repaired_and_reframed(client, backend):
    backend.response = httpx.Response(
        200,
        json={"jsonrpc": "2.0", "error": None, "result": {"number": "0x1", "stateRoot": "0x"}, "id": 2},
        headers={"x-node": "n1"},
    )
    r = await client.post("/", json={"jsonrpc": "2.0", "method": "eth_getBlockByNumber", "params": ["latest", False], "id": 2})
    payload = r.json()
    assert payload["result"]["stateRoot"] == STATE_ROOT_PLACEHOLDER
    assert "error" not in payload
    assert r.headers["content-length"] == str(len(r.content))
    assert r.headers["x-node"] == "n1"


@pytest.mark.asyncio
async def test_backend_status_and_repeated_headers_pass_through(client, backend):
    backend.response = httpx.Response(
        429,
        content=b"slow down",
        headers=[("set-cookie", "a=1"), ("set-cookie", "b=2")],
    )
    r = await client.post("/", json={"jsonrpc": "2.0", "method": "eth_chainId", "params": [], "id": 1})
    assert r.status_code == 429
    assert r.content == b"slow down"
    assert r.headers.get_list("set-cookie") == ["a=1", "b=2"]


@pytest.mark.asyncio
async def test_unreachable_backend_yields_bad_gateway(client, backend):
    backend.error = httpx.ConnectError("connection refused")
    r = await client.post("/", json={"jsonrpc": "2.0", "method": "eth_chainId", "params": [], "id": "q"})
    assert r.status_code == 502
    payload = r.json()
    assert payload["id"] == "q"
    assert payload["error"]["code"] == -32000
    assert "result" not in payload


@pytest.mark.asyncio
async def test_get_root_forwards_query_string(client, backend):
    backend.response = httpx.Response(200, text="pong")
    r = await client.get("/?visible=true")
    assert r.status_code == 200
    assert r.text == "pong"
    assert backend.requests[0].method == "GET"
    assert str(backend.requests[0].url) == DEST + "?visible=true"


@pytest.mark.asyncio
async def test_other_paths_fall_back_to_plain_get(client, backend):
    backend.response = httpx.Response(200, text="root")
    r = await client.put("/wallet/getnowblock?x=1", content=b"ignored")
    assert r.text == "root"
    assert backend.requests[0].method == "GET"
    assert str(backend.requests[0].url) == DEST


@pytest.mark.asyncio
async def test_deeply_nested_body_is_relayed_not_failed(client, backend):
    body = b"[" * 100000
    r = await client.post("/", content=body)
    assert r.status_code == 200
    assert r.json()["result"] == "0x1"
    assert backend.requests[0].content == body


def test_to_http_response_tolerates_non_latin1_header_values():
    result = ForwardResult(status_code=200, body=b"{}", headers=[("x-node-name", "nœud-東京")])
    response = to_http_response(result)
    assert (b"x-node-name", "nœud-東京".encode("latin-1", errors="replace")) in response.raw_headers
    assert (b"content-length", b"2") in response.raw_headers


def test_build_forwarder_requires_destination():
    with pytest.raises(ConfigError):
        build_forwarder(Config())
    forwarder = build_forwarder(Config(proxy=ProxyConfig(destination=f"  {DEST} ", timeout_seconds=3.0)))
    assert forwarder.destination == DEST
    assert forwarder.timeout == 3.0
