import pytest

from lighter_signer.common.utils import are_keys_equal
from lighter_signer.common.utils import is_nonce_error
from lighter_signer.common.utils import parse_hex_int
from lighter_signer.common.utils import parse_scaled_int
from lighter_signer.common.utils import resolve_chain_id
from lighter_signer.common.utils import trim_exc


@pytest.mark.parametrize(
    ("value", "expected"),
    [(8, 8), ("8", 8), ("0x10", 16), (" 42 ", 42), (None, None), ("abc", None), (True, None)],
)
def test_parse_hex_int(value, expected):
    assert parse_hex_int(value) == expected


def test_are_keys_equal_ignores_prefix():
    assert are_keys_equal("0xabcd", "abcd")
    assert are_keys_equal("abcd", "0xabcd")
    assert not are_keys_equal("abcd", "abce")
    assert not are_keys_equal(None, "abcd")


def test_trim_exc_keeps_last_line():
    assert trim_exc("Traceback\n  line 1\nValueError: bad\n") == "ValueError: bad"
    assert trim_exc("single") == "single"
    assert trim_exc("") == ""


def test_resolve_chain_id():
    assert resolve_chain_id("https://mainnet.zklighter.elliot.ai") == 304
    assert resolve_chain_id("https://testnet.zklighter.elliot.ai") == 300
    assert resolve_chain_id("http://localhost:8080") == 300


def test_parse_scaled_int_drops_first_point():
    assert parse_scaled_int("3405.98") == 340598
    assert parse_scaled_int("12") == 12
    assert parse_scaled_int("0.0050") == 50


def test_is_nonce_error_prefers_code():
    assert is_nonce_error({"code": 21104, "message": "something else"})
    assert is_nonce_error({"code": 400, "message": "invalid nonce"})
    assert is_nonce_error("Bad Request: invalid nonce for api key")
    assert not is_nonce_error({"code": 21120, "message": "invalid market"})
    assert not is_nonce_error(None)
