from __future__ import annotations

from typing import Any

from lighter_signer.common.constants import LIGHTER_INVALID_NONCE_CODES
from lighter_signer.common.constants import LIGHTER_MAINNET_CHAIN_ID
from lighter_signer.common.constants import LIGHTER_MAINNET_MARKER
from lighter_signer.common.constants import LIGHTER_TESTNET_CHAIN_ID


def parse_hex_int(value: Any) -> int | None:
    """Parse an integer from int/str, supporting 0x-prefixed hex.

    Returns None on failure instead of raising.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        s = str(value).strip()
        return int(s, 16) if s.lower().startswith("0x") else int(s)
    except (TypeError, ValueError):
        return None


def strip_0x(key: str) -> str:
    return key[2:] if key.startswith("0x") else key


def are_keys_equal(key1: str | None, key2: str | None) -> bool:
    """Compare two hex keys, ignoring an optional ``0x`` prefix on either side."""
    if key1 is None or key2 is None:
        return False
    return strip_0x(key1) == strip_0x(key2)


def trim_exc(exception_body: str) -> str:
    """Reduce a (possibly multi-line) error message to its last non-empty line."""
    body = str(exception_body).strip()
    if not body:
        return body
    return body.split("\n")[-1].strip() or body


def resolve_chain_id(base_url: str) -> int:
    """Return the chain id signed into every transaction for the given base URL."""
    return LIGHTER_MAINNET_CHAIN_ID if LIGHTER_MAINNET_MARKER in base_url else LIGHTER_TESTNET_CHAIN_ID


def parse_scaled_int(value: str) -> int:
    """Parse a venue decimal string into its integer wire representation.

    The first decimal point is dropped, so ``"3405.98"`` becomes ``340598``.
    """
    return int(str(value).replace(".", "", 1))


def is_nonce_error(err: object) -> bool:
    """Detect nonce-related rejections from server responses.

    Accepts strings or dict-like payloads (with 'code'/'error'/'message' keys).
    A structured exchange error code is preferred; otherwise the textual content
    is matched against "invalid nonce".
    """
    text = None
    if isinstance(err, dict):
        code = parse_hex_int(err.get("code"))
        if code is not None and code in LIGHTER_INVALID_NONCE_CODES:
            return True
        text = err.get("error") or err.get("message") or err.get("reason")
    if text is None and err is not None:
        text = str(err)
    if not isinstance(text, str):
        return False
    lower = text.lower()
    return "invalid nonce" in lower or ("nonce" in lower and ("invalid" in lower or "mismatch" in lower))
