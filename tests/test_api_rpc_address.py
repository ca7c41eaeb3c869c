from tronbridge.api.rpc.address import is_ethereum_address, to_backend_native

ETH_ADDR = "0x8f7dc3d0f5961df9c5ee2fcb59886b87262afad6"


def test_to_backend_native_inserts_prefix_after_0x():
    assert to_backend_native(ETH_ADDR) == "0x418f7dc3d0f5961df9c5ee2fcb59886b87262afad6"


def test_to_backend_native_keeps_trailing_hex_and_case():
    addr = "0xABCDEF0123456789abcdef0123456789ABCDEF01"
    converted = to_backend_native(addr)
    assert converted[:4] == "0x41"
    assert converted[4:] == addr[2:]


def test_to_backend_native_second_application_is_noop():
    once = to_backend_native(ETH_ADDR)
    assert to_backend_native(once) == once


def test_to_backend_native_returns_malformed_input_unchanged():
    for value in ("0x123", "", "0x", ETH_ADDR[2:], ETH_ADDR + "a", ETH_ADDR + "\n", "0x" + "g" * 40, None, 42):
        assert to_backend_native(value) == value


def test_is_ethereum_address():
    assert is_ethereum_address(ETH_ADDR)
    assert not is_ethereum_address("0x41" + ETH_ADDR[2:])
    assert not is_ethereum_address({"address": ETH_ADDR})
