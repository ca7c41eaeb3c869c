import json

from tronbridge.api.rpc.response_rewriter import (
    STATE_ROOT_PLACEHOLDER,
    is_well_formed_state_root,
    repair_block_state_root,
    rewrite_response_body,
)

GOOD_ROOT = "0x" + "aa" * 32


def _block_body(**block):
    return json.dumps({"jsonrpc": "2.0", "id": 1, "result": {"number": "0x10", **block}}).encode("utf-8")


def test_placeholder_is_well_formed():
    assert len(STATE_ROOT_PLACEHOLDER) == 66
    assert STATE_ROOT_PLACEHOLDER.startswith("0x")
    assert is_well_formed_state_root(STATE_ROOT_PLACEHOLDER)


def test_is_well_formed_state_root():
    assert is_well_formed_state_root(GOOD_ROOT)
    for bad in ("0x", "", "0x1234", GOOD_ROOT + "00", None, 0):
        assert not is_well_formed_state_root(bad)


def test_repair_block_state_root_cases():
    for block in ({}, {"stateRoot": "0x"}, {"stateRoot": "0xabc"}, {"stateRoot": None}, {"stateRoot": 12}):
        assert repair_block_state_root("eth_getBlockByNumber", block) is True
        assert block["stateRoot"] == STATE_ROOT_PLACEHOLDER

    block = {"stateRoot": GOOD_ROOT, "hash": "0x01"}
    assert repair_block_state_root("eth_getBlockByHash", block) is False
    assert block == {"stateRoot": GOOD_ROOT, "hash": "0x01"}


def test_rewrite_repairs_state_root_and_keeps_other_fields():
    body = _block_body(stateRoot="0x", transactions=["0xab"])
    new_body = rewrite_response_body(body, method="eth_getBlockByNumber", rewrite_result=repair_block_state_root)
    payload = json.loads(new_body)
    assert payload["result"] == {"number": "0x10", "stateRoot": STATE_ROOT_PLACEHOLDER, "transactions": ["0xab"]}
    assert payload["id"] == 1


def test_rewrite_leaves_well_formed_block_untouched():
    body = _block_body(stateRoot=GOOD_ROOT)
    assert rewrite_response_body(body, method="eth_getBlockByNumber", rewrite_result=repair_block_state_root) is None


def test_rewrite_ignores_null_and_error_results():
    not_found = b'{"jsonrpc":"2.0","result":null,"id":1}'
    assert rewrite_response_body(not_found, method="eth_getBlockByHash", rewrite_result=repair_block_state_root) is None
    failed = b'{"jsonrpc":"2.0","error":{"code":-32602,"message":"bad"},"id":1}'
    assert rewrite_response_body(failed, method="eth_getBlockByHash", rewrite_result=repair_block_state_root) is None


def test_rewrite_omits_null_error_for_any_method():
    body = b'{"jsonrpc":"2.0","error":null,"result":{"ok":true},"id":5}'
    new_body = rewrite_response_body(body, method="eth_chainId")
    assert new_body == b'{"jsonrpc":"2.0","result":{"ok":true},"id":5}'


def test_rewrite_skips_unparseable_bodies():
    assert rewrite_response_body(b"<html>bad gateway</html>", method="eth_getBlockByNumber") is None
    assert rewrite_response_body(b"", method="eth_call") is None
    assert rewrite_response_body(b'[{"jsonrpc":"2.0","result":"0x1","id":1}]', method="eth_call") is None
