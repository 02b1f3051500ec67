"""
Shared fakes for the Lighter signer client tests.

No test touches the network or loads the native signer library.
"""

from __future__ import annotations

from typing import Any

import msgspec
import pytest

from lighter_signer.config import SignerClientConfig
from lighter_signer.http.errors import LighterClientError
from lighter_signer.schemas.http import LighterOrderBookOrder
from lighter_signer.schemas.http import LighterOrderBookOrders
from lighter_signer.schemas.http import LighterRespSendTx
from lighter_signer.signer_client import SignerClient


TESTNET_URL = "https://testnet.zklighter.elliot.ai"
MAINNET_URL = "https://mainnet.zklighter.elliot.ai"
PRIMARY_KEY = "0x" + "11" * 40


class FakeSigner:
    """In-memory stand-in for the native signer; records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple]] = []
        self.create_client_errors: dict[int, str] = {}
        self.check_client_errors: dict[int, str] = {}
        self.switch_error: str | None = None
        self.sign_error: str | None = None
        self.sign_payload: str | None = None
        self.sign_exception: Exception | None = None
        self.active_api_key: int | None = None

    def _sign(self, name: str, *args: Any) -> tuple[str | None, str | None]:
        self.calls.append((name, args))
        if self.sign_exception is not None:
            raise self.sign_exception
        if self.sign_error is not None:
            return None, self.sign_error
        if self.sign_payload is not None:
            return self.sign_payload, None
        tx = {"Op": name, "Args": list(args[:-1]), "Nonce": args[-1], "ApiKeyIndex": self.active_api_key}
        return msgspec.json.encode(tx).decode(), None

    def last(self, name: str) -> tuple:
        return [args for n, args in self.calls if n == name][-1]

    def create_client(self, url, private_key, chain_id, api_key_index, account_index):
        self.calls.append(("create_client", (url, private_key, chain_id, api_key_index, account_index)))
        return self.create_client_errors.get(api_key_index)

    def check_client(self, api_key_index, account_index):
        self.calls.append(("check_client", (api_key_index, account_index)))
        return self.check_client_errors.get(api_key_index)

    def switch_api_key(self, api_key_index):
        self.calls.append(("switch_api_key", (api_key_index,)))
        if self.switch_error is None:
            self.active_api_key = api_key_index
        return self.switch_error

    def generate_api_key(self, seed=""):
        self.calls.append(("generate_api_key", (seed,)))
        return "priv-" + seed, "pub-" + seed, None

    def create_auth_token(self, deadline):
        self.calls.append(("create_auth_token", (deadline,)))
        return f"token-{deadline}", None

    def sign_change_pub_key(self, new_pubkey, nonce):
        self.calls.append(("sign_change_pub_key", (new_pubkey, nonce)))
        tx = {"PubKey": new_pubkey, "Nonce": nonce, "MessageToSign": f"Register {new_pubkey} nonce {nonce}"}
        return msgspec.json.encode(tx).decode(), None

    def sign_transfer(self, to_account_index, usdc_amount, fee, memo, nonce):
        self.calls.append(("sign_transfer", (to_account_index, usdc_amount, fee, memo, nonce)))
        tx = {
            "ToAccountIndex": to_account_index,
            "USDCAmount": usdc_amount,
            "Nonce": nonce,
            "MessageToSign": f"Transfer {usdc_amount} to {to_account_index}",
        }
        return msgspec.json.encode(tx).decode(), None

    def sign_create_order(self, *args):
        return self._sign("sign_create_order", *args)

    def sign_create_grouped_orders(self, grouping_type, orders, nonce):
        return self._sign("sign_create_grouped_orders", grouping_type, len(orders), nonce)

    def sign_cancel_order(self, *args):
        return self._sign("sign_cancel_order", *args)

    def sign_withdraw(self, *args):
        return self._sign("sign_withdraw", *args)

    def sign_create_sub_account(self, *args):
        return self._sign("sign_create_sub_account", *args)

    def sign_cancel_all_orders(self, *args):
        return self._sign("sign_cancel_all_orders", *args)

    def sign_modify_order(self, *args):
        return self._sign("sign_modify_order", *args)

    def sign_create_public_pool(self, *args):
        return self._sign("sign_create_public_pool", *args)

    def sign_update_public_pool(self, *args):
        return self._sign("sign_update_public_pool", *args)

    def sign_mint_shares(self, *args):
        return self._sign("sign_mint_shares", *args)

    def sign_burn_shares(self, *args):
        return self._sign("sign_burn_shares", *args)

    def sign_update_leverage(self, *args):
        return self._sign("sign_update_leverage", *args)


class FakeTransactionApi:
    """Stand-in for ``LighterTransactionHttpClient``."""

    def __init__(self, nonces: dict[int, int] | None = None) -> None:
        self.nonces: dict[int, int] = dict(nonces or {})
        self.nonce_errors: dict[int, Exception] = {}
        self.nonce_calls: list[tuple[int, int]] = []
        self.sent: list[tuple[int, str]] = []
        self.send_exception: Exception | None = None
        self.response = LighterRespSendTx(code=200, tx_hash="0xabc")

    async def next_nonce(self, account_index: int, api_key_index: int) -> int:
        self.nonce_calls.append((account_index, api_key_index))
        if api_key_index in self.nonce_errors:
            raise self.nonce_errors[api_key_index]
        return self.nonces.get(api_key_index, 0)

    async def send_tx(self, tx_type: int, tx_info: str) -> LighterRespSendTx:
        self.sent.append((int(tx_type), tx_info))
        if self.send_exception is not None:
            raise self.send_exception
        return self.response


class FakeOrderApi:
    """Stand-in for ``LighterOrderHttpClient``."""

    def __init__(self) -> None:
        self.book = LighterOrderBookOrders(code=200)
        self.calls: list[tuple[int, int]] = []
        self.exception: Exception | None = None

    def set_book(self, asks: list[tuple[str, str]] = (), bids: list[tuple[str, str]] = ()) -> None:
        self.book = LighterOrderBookOrders(
            code=200,
            asks=[LighterOrderBookOrder(price=p, remaining_base_amount=s) for p, s in asks],
            bids=[LighterOrderBookOrder(price=p, remaining_base_amount=s) for p, s in bids],
        )

    async def order_book_orders(self, market_id: int, limit: int) -> LighterOrderBookOrders:
        self.calls.append((market_id, limit))
        if self.exception is not None:
            raise self.exception
        return self.book


def invalid_nonce_error() -> LighterClientError:
    return LighterClientError(
        status=400,
        message={"code": 21104, "message": "invalid nonce"},
        headers={},
    )


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def tx_api() -> FakeTransactionApi:
    return FakeTransactionApi()


@pytest.fixture
def order_api() -> FakeOrderApi:
    return FakeOrderApi()


@pytest.fixture
def make_client(signer, tx_api, order_api):
    def _make(
        api_key_index: int = 3,
        account_index: int = 410044,
        url: str = TESTNET_URL,
        clock: Any = None,
        **config_kwargs: Any,
    ) -> SignerClient:
        return SignerClient(
            url,
            PRIMARY_KEY,
            api_key_index,
            account_index,
            SignerClientConfig(**config_kwargs),
            signer=signer,
            tx_api=tx_api,
            order_api=order_api,
            clock=clock,
        )

    return _make
