# -------------------------------------------------------------------------------------------------
#  Copyright (C) 2015-2025 Nautech Systems Pty Ltd.
# -------------------------------------------------------------------------------------------------

from __future__ import annotations

import os
from pathlib import Path

import msgspec

from nautilus_trader.config import NautilusConfig
from nautilus_trader.core.nautilus_pyo3 import Quota

from lighter_signer.common.enums import NonceManagerType
from lighter_signer.common.errors import LighterConfigError
from lighter_signer.common.utils import parse_hex_int


class LighterRateLimitConfig:
    """
    Optional HTTP rate limit configuration for the Lighter REST clients.

    Notes
    -----
    By default no client-side rate limiting is applied (apart from the cautious
    testnet order book quotas). Provide quotas to enable client-side throttling.
    Endpoint keys are request paths such as ``/api/v1/sendTx``.
    """

    def __init__(
        self,
        http_default_per_minute: int | None = None,
        http_endpoint_per_minute: dict[str, int] | None = None,
    ) -> None:
        self.http_default_per_minute = http_default_per_minute
        self.http_endpoint_per_minute = http_endpoint_per_minute or {}

    def quotas(self) -> tuple[list[tuple[str, Quota]], Quota | None]:
        """Return the keyed quotas and the default quota for ``HttpClient``."""
        keyed = [
            (f"lighter:{ep}", Quota.rate_per_minute(int(per_min)))
            for ep, per_min in self.http_endpoint_per_minute.items()
        ]
        default = None
        if self.http_default_per_minute:
            default = Quota.rate_per_minute(int(self.http_default_per_minute))
        return keyed, default


class SignerClientConfig(NautilusConfig, frozen=True):
    """
    Configuration for ``SignerClient`` instances.

    Parameters
    ----------
    max_api_key_index : int, default -1
        The last owned API key index; -1 means only the primary key is owned.
    private_keys : dict[int, str], optional
        Private keys of the additional API key indices (hex, 0x optional).
    nonce_management_type : NonceManagerType, default OPTIMISTIC
        The nonce issuance policy.
    ratelimit : LighterRateLimitConfig, optional
        Client-side HTTP quotas.
    http_timeout_secs : int, default 10
        The timeout for each REST request.
    """

    max_api_key_index: int = -1
    private_keys: dict[int, str] | None = None
    nonce_management_type: NonceManagerType = NonceManagerType.OPTIMISTIC
    ratelimit: LighterRateLimitConfig | None = None
    http_timeout_secs: int = 10


class LighterCredentials(msgspec.Struct, frozen=True):
    """
    Strongly-typed credentials of one Lighter API key.

    ``eth_private_key`` is the account owner's L1 key, only needed for
    ``change_api_key`` and ``transfer``.

    Notes
    -----
    Do not persist private keys in code. Prefer ``from_env`` over JSON files.
    """

    account_index: int
    api_key_index: int
    private_key: str
    eth_private_key: str | None = None

    def __repr__(self) -> str:
        return f"LighterCredentials(account_index={self.account_index}, api_key_index={self.api_key_index})"

    @classmethod
    def from_mapping(cls, doc: dict) -> LighterCredentials:
        account_index = parse_hex_int(doc.get("account_index"))
        api_key_index = parse_hex_int(doc.get("api_key_index"))
        private_key = doc.get("private_key")
        if account_index is None or api_key_index is None or not private_key:
            raise LighterConfigError("credentials need account_index, api_key_index and private_key")
        return cls(
            account_index=account_index,
            api_key_index=api_key_index,
            private_key=str(private_key).strip(),
            eth_private_key=(str(doc["eth_private_key"]).strip() if doc.get("eth_private_key") else None),
        )

    @classmethod
    def from_json_file(cls, path: str | Path) -> LighterCredentials:
        """Load credentials from a JSON document (indices as decimal or 0x-hex)."""
        try:
            doc = msgspec.json.decode(Path(path).read_bytes(), type=dict)
        except (OSError, msgspec.DecodeError) as e:
            raise LighterConfigError(f"cannot read credentials from {path}: {e}") from e
        return cls.from_mapping(doc)

    @classmethod
    def from_env(
        cls,
        account_index: int | None = None,
        api_key_index: int | None = None,
    ) -> LighterCredentials:
        """Load credentials from ``LIGHTER_*`` environment variables.

        Explicit arguments override ``LIGHTER_ACCOUNT_INDEX`` / ``LIGHTER_API_KEY_INDEX``.
        """
        return cls.from_mapping(
            {
                "account_index": account_index if account_index is not None else os.getenv("LIGHTER_ACCOUNT_INDEX"),
                "api_key_index": api_key_index if api_key_index is not None else os.getenv("LIGHTER_API_KEY_INDEX"),
                "private_key": os.getenv("LIGHTER_PRIVATE_KEY"),
                "eth_private_key": os.getenv("LIGHTER_ETH_PRIVATE_KEY"),
            },
        )
