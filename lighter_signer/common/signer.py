# -------------------------------------------------------------------------------------------------
#  Copyright (C) 2015-2025 Nautech Systems Pty Ltd. All rights reserved.
#  https://nautechsystems.io
#
#  Licensed under the GNU Lesser General Public License Version 3.0 (the "License");
#  You may not use this file except in compliance with the License.
#  You may obtain a copy of the License at https://www.gnu.org/licenses/lgpl-3.0.en.html
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
# -------------------------------------------------------------------------------------------------
"""Binding to the lighter-go native signer.

The signer keeps one client context per API key in process-wide state inside
the shared library. ``LighterNativeSigner`` is the capability the
``SignerClient`` depends on; ``LighterSignerLibrary`` implements it with ctypes.
Every ``sign_*`` call returns ``(tx_info, error)``, exactly one of them set.
"""

from __future__ import annotations

import ctypes
import functools
import os
import platform
from pathlib import Path
from typing import Protocol, Sequence

from lighter_signer.common.errors import LighterSignerError
from lighter_signer.common.types import LighterApiKeyPair
from lighter_signer.common.types import LighterCreateOrderRequest
from lighter_signer.common.types import LighterResult
from lighter_signer.common.types import LighterTxErrorKind


SIGNER_PATH_ENV = "LIGHTER_SIGNER_PATH"
SIGNERS_DIR = Path(__file__).resolve().parent.parent / "signers"

SignResult = tuple[str | None, str | None]


class LighterNativeSigner(Protocol):
    """The operations consumed from the native signer."""

    def create_client(
        self,
        url: str,
        private_key: str,
        chain_id: int,
        api_key_index: int,
        account_index: int,
    ) -> str | None: ...

    def check_client(self, api_key_index: int, account_index: int) -> str | None: ...

    def switch_api_key(self, api_key_index: int) -> str | None: ...

    def generate_api_key(self, seed: str = "") -> tuple[str | None, str | None, str | None]: ...

    def create_auth_token(self, deadline: int) -> SignResult: ...

    def sign_change_pub_key(self, new_pubkey: str, nonce: int) -> SignResult: ...

    def sign_create_order(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        price: int,
        is_ask: int,
        order_type: int,
        time_in_force: int,
        reduce_only: int,
        trigger_price: int,
        order_expiry: int,
        nonce: int,
    ) -> SignResult: ...

    def sign_create_grouped_orders(
        self,
        grouping_type: int,
        orders: Sequence[LighterCreateOrderRequest],
        nonce: int,
    ) -> SignResult: ...

    def sign_cancel_order(self, market_index: int, order_index: int, nonce: int) -> SignResult: ...

    def sign_withdraw(self, usdc_amount: int, nonce: int) -> SignResult: ...

    def sign_create_sub_account(self, nonce: int) -> SignResult: ...

    def sign_cancel_all_orders(self, time_in_force: int, time: int, nonce: int) -> SignResult: ...

    def sign_modify_order(
        self,
        market_index: int,
        order_index: int,
        base_amount: int,
        price: int,
        trigger_price: int,
        nonce: int,
    ) -> SignResult: ...

    def sign_transfer(
        self,
        to_account_index: int,
        usdc_amount: int,
        fee: int,
        memo: str,
        nonce: int,
    ) -> SignResult: ...

    def sign_create_public_pool(
        self,
        operator_fee: int,
        initial_total_shares: int,
        min_operator_share_rate: int,
        nonce: int,
    ) -> SignResult: ...

    def sign_update_public_pool(
        self,
        public_pool_index: int,
        status: int,
        operator_fee: int,
        min_operator_share_rate: int,
        nonce: int,
    ) -> SignResult: ...

    def sign_mint_shares(self, public_pool_index: int, share_amount: int, nonce: int) -> SignResult: ...

    def sign_burn_shares(self, public_pool_index: int, share_amount: int, nonce: int) -> SignResult: ...

    def sign_update_leverage(
        self,
        market_index: int,
        fraction: int,
        margin_mode: int,
        nonce: int,
    ) -> SignResult: ...


class StrOrErr(ctypes.Structure):
    _fields_ = [("str", ctypes.c_char_p), ("err", ctypes.c_char_p)]


class ApiKeyResponse(ctypes.Structure):
    _fields_ = [
        ("privateKey", ctypes.c_char_p),
        ("publicKey", ctypes.c_char_p),
        ("err", ctypes.c_char_p),
    ]


class CreateOrderTxReq(ctypes.Structure):
    _fields_ = [
        ("MarketIndex", ctypes.c_uint8),
        ("ClientOrderIndex", ctypes.c_int64),
        ("BaseAmount", ctypes.c_int64),
        ("Price", ctypes.c_uint32),
        ("IsAsk", ctypes.c_uint8),
        ("Type", ctypes.c_uint8),
        ("TimeInForce", ctypes.c_uint8),
        ("ReduceOnly", ctypes.c_uint8),
        ("TriggerPrice", ctypes.c_uint32),
        ("OrderExpiry", ctypes.c_int64),
    ]


# name -> (argtypes, restype)
_PROTOTYPES: dict[str, tuple[list, type]] = {
    "GenerateAPIKey": ([ctypes.c_char_p], ApiKeyResponse),
    "CreateClient": (
        [ctypes.c_char_p, ctypes.c_char_p, ctypes.c_int, ctypes.c_int, ctypes.c_longlong],
        ctypes.c_char_p,
    ),
    "CheckClient": ([ctypes.c_int, ctypes.c_longlong], ctypes.c_char_p),
    "SwitchAPIKey": ([ctypes.c_int], ctypes.c_char_p),
    "SignChangePubKey": ([ctypes.c_char_p, ctypes.c_longlong], StrOrErr),
    "SignCreateOrder": (
        [
            ctypes.c_int,  # market_index
            ctypes.c_longlong,  # client_order_index
            ctypes.c_longlong,  # base_amount
            ctypes.c_int,  # price
            ctypes.c_int,  # is_ask
            ctypes.c_int,  # order_type
            ctypes.c_int,  # time_in_force
            ctypes.c_int,  # reduce_only
            ctypes.c_int,  # trigger_price
            ctypes.c_longlong,  # order_expiry
            ctypes.c_longlong,  # nonce
        ],
        StrOrErr,
    ),
    "SignCreateGroupedOrders": (
        [ctypes.c_uint8, ctypes.POINTER(CreateOrderTxReq), ctypes.c_int, ctypes.c_longlong],
        StrOrErr,
    ),
    "SignCancelOrder": ([ctypes.c_int, ctypes.c_longlong, ctypes.c_longlong], StrOrErr),
    "SignWithdraw": ([ctypes.c_longlong, ctypes.c_longlong], StrOrErr),
    "SignCreateSubAccount": ([ctypes.c_longlong], StrOrErr),
    "SignCancelAllOrders": ([ctypes.c_int, ctypes.c_longlong, ctypes.c_longlong], StrOrErr),
    "SignModifyOrder": ([ctypes.c_int] + [ctypes.c_longlong] * 5, StrOrErr),
    "SignTransfer": (
        [ctypes.c_longlong, ctypes.c_longlong, ctypes.c_longlong, ctypes.c_char_p, ctypes.c_longlong],
        StrOrErr,
    ),
    "SignCreatePublicPool": ([ctypes.c_longlong] * 4, StrOrErr),
    "SignUpdatePublicPool": (
        [ctypes.c_longlong, ctypes.c_int, ctypes.c_longlong, ctypes.c_longlong, ctypes.c_longlong],
        StrOrErr,
    ),
    "SignMintShares": ([ctypes.c_longlong] * 3, StrOrErr),
    "SignBurnShares": ([ctypes.c_longlong] * 3, StrOrErr),
    "SignUpdateLeverage": ([ctypes.c_int, ctypes.c_int, ctypes.c_int, ctypes.c_longlong], StrOrErr),
    "CreateAuthToken": ([ctypes.c_longlong], StrOrErr),
}


def resolve_signer_path(signers_dir: Path | None = None) -> Path:
    """Return the shared library for the current platform.

    ``LIGHTER_SIGNER_PATH`` takes precedence over the bundled ``signers`` directory.

    Raises
    ------
    LighterSignerError
        If the platform is unsupported or the library file does not exist.
    """
    override = os.getenv(SIGNER_PATH_ENV)
    if override:
        path = Path(override).expanduser().resolve()
    else:
        system = platform.system()
        machine = platform.machine().lower()
        is_x64 = machine in ("x86_64", "amd64")
        is_arm = machine in ("arm64", "aarch64")
        if system == "Darwin" and is_arm:
            filename = "signer-arm64.dylib"
        elif system == "Linux" and is_x64:
            filename = "signer-amd64.so"
        elif system == "Windows" and is_x64:
            filename = "signer-amd64.dll"
        else:
            raise LighterSignerError(
                f"Unsupported platform/architecture: {system}/{machine}. "
                "Currently supported: Linux(x86_64), macOS(arm64), and Windows(x86_64).",
            )
        path = ((signers_dir or SIGNERS_DIR) / filename).resolve()
    if not path.is_file():
        raise LighterSignerError(
            f"Signer library not found at {path}. "
            f"Place it in the 'signers' directory or set {SIGNER_PATH_ENV}.",
        )
    return path


def _decode(value: bytes | None) -> str | None:
    return value.decode("utf-8") if value else None


class LighterSignerLibrary:
    """
    ``ctypes`` implementation of ``LighterNativeSigner``.

    Parameters
    ----------
    path : str | Path, optional
        The shared library to load. Resolved for the current platform if omitted.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else resolve_signer_path()
        try:
            self._lib = ctypes.CDLL(str(self._path))
        except OSError as e:
            raise LighterSignerError(f"Failed to load signer library from {self._path}: {e}") from e
        for name, (argtypes, restype) in _PROTOTYPES.items():
            try:
                fn = getattr(self._lib, name)
            except AttributeError as e:
                raise LighterSignerError(f"Signer library {self._path} does not export {name}") from e
            fn.argtypes = argtypes
            fn.restype = restype

    @property
    def path(self) -> Path:
        return self._path

    def _str_or_err(self, result: StrOrErr) -> SignResult:
        return _decode(result.str), _decode(result.err)

    def create_client(
        self,
        url: str,
        private_key: str,
        chain_id: int,
        api_key_index: int,
        account_index: int,
    ) -> str | None:
        return _decode(
            self._lib.CreateClient(
                url.encode("utf-8"),
                private_key.encode("utf-8"),
                chain_id,
                api_key_index,
                account_index,
            ),
        )

    def check_client(self, api_key_index: int, account_index: int) -> str | None:
        return _decode(self._lib.CheckClient(api_key_index, account_index))

    def switch_api_key(self, api_key_index: int) -> str | None:
        return _decode(self._lib.SwitchAPIKey(api_key_index))

    def generate_api_key(self, seed: str = "") -> tuple[str | None, str | None, str | None]:
        result = self._lib.GenerateAPIKey(seed.encode("utf-8"))
        return _decode(result.privateKey), _decode(result.publicKey), _decode(result.err)

    def create_auth_token(self, deadline: int) -> SignResult:
        return self._str_or_err(self._lib.CreateAuthToken(deadline))

    def sign_change_pub_key(self, new_pubkey: str, nonce: int) -> SignResult:
        return self._str_or_err(self._lib.SignChangePubKey(new_pubkey.encode("utf-8"), nonce))

    def sign_create_order(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        price: int,
        is_ask: int,
        order_type: int,
        time_in_force: int,
        reduce_only: int,
        trigger_price: int,
        order_expiry: int,
        nonce: int,
    ) -> SignResult:
        return self._str_or_err(
            self._lib.SignCreateOrder(
                market_index,
                client_order_index,
                base_amount,
                price,
                int(is_ask),
                order_type,
                time_in_force,
                int(reduce_only),
                trigger_price,
                order_expiry,
                nonce,
            ),
        )

    def sign_create_grouped_orders(
        self,
        grouping_type: int,
        orders: Sequence[LighterCreateOrderRequest],
        nonce: int,
    ) -> SignResult:
        array = (CreateOrderTxReq * len(orders))(
            *(
                CreateOrderTxReq(
                    MarketIndex=o.market_index,
                    ClientOrderIndex=o.client_order_index,
                    BaseAmount=o.base_amount,
                    Price=o.price,
                    IsAsk=int(o.is_ask),
                    Type=int(o.order_type),
                    TimeInForce=int(o.time_in_force),
                    ReduceOnly=int(o.reduce_only),
                    TriggerPrice=o.trigger_price,
                    OrderExpiry=o.order_expiry,
                )
                for o in orders
            ),
        )
        return self._str_or_err(self._lib.SignCreateGroupedOrders(grouping_type, array, len(orders), nonce))

    def sign_cancel_order(self, market_index: int, order_index: int, nonce: int) -> SignResult:
        return self._str_or_err(self._lib.SignCancelOrder(market_index, order_index, nonce))

    def sign_withdraw(self, usdc_amount: int, nonce: int) -> SignResult:
        return self._str_or_err(self._lib.SignWithdraw(usdc_amount, nonce))

    def sign_create_sub_account(self, nonce: int) -> SignResult:
        return self._str_or_err(self._lib.SignCreateSubAccount(nonce))

    def sign_cancel_all_orders(self, time_in_force: int, time: int, nonce: int) -> SignResult:
        return self._str_or_err(self._lib.SignCancelAllOrders(time_in_force, time, nonce))

    def sign_modify_order(
        self,
        market_index: int,
        order_index: int,
        base_amount: int,
        price: int,
        trigger_price: int,
        nonce: int,
    ) -> SignResult:
        return self._str_or_err(
            self._lib.SignModifyOrder(market_index, order_index, base_amount, price, trigger_price, nonce),
        )

    def sign_transfer(
        self,
        to_account_index: int,
        usdc_amount: int,
        fee: int,
        memo: str,
        nonce: int,
    ) -> SignResult:
        return self._str_or_err(
            self._lib.SignTransfer(to_account_index, usdc_amount, fee, memo.encode("utf-8"), nonce),
        )

    def sign_create_public_pool(
        self,
        operator_fee: int,
        initial_total_shares: int,
        min_operator_share_rate: int,
        nonce: int,
    ) -> SignResult:
        return self._str_or_err(
            self._lib.SignCreatePublicPool(operator_fee, initial_total_shares, min_operator_share_rate, nonce),
        )

    def sign_update_public_pool(
        self,
        public_pool_index: int,
        status: int,
        operator_fee: int,
        min_operator_share_rate: int,
        nonce: int,
    ) -> SignResult:
        return self._str_or_err(
            self._lib.SignUpdatePublicPool(
                public_pool_index,
                status,
                operator_fee,
                min_operator_share_rate,
                nonce,
            ),
        )

    def sign_mint_shares(self, public_pool_index: int, share_amount: int, nonce: int) -> SignResult:
        return self._str_or_err(self._lib.SignMintShares(public_pool_index, share_amount, nonce))

    def sign_burn_shares(self, public_pool_index: int, share_amount: int, nonce: int) -> SignResult:
        return self._str_or_err(self._lib.SignBurnShares(public_pool_index, share_amount, nonce))

    def sign_update_leverage(
        self,
        market_index: int,
        fraction: int,
        margin_mode: int,
        nonce: int,
    ) -> SignResult:
        return self._str_or_err(self._lib.SignUpdateLeverage(market_index, fraction, margin_mode, nonce))


@functools.lru_cache(maxsize=None)
def load_signer_library(path: str | None = None) -> LighterSignerLibrary:
    """Return the process-wide signer for ``path`` (or the platform default)."""
    return LighterSignerLibrary(path)


def create_api_key(
    seed: str = "",
    signer: LighterNativeSigner | None = None,
) -> LighterResult[LighterApiKeyPair]:
    """Generate a new API key pair without an account context."""
    signer = signer if signer is not None else load_signer_library()
    private_key, public_key, err = signer.generate_api_key(seed)
    if err:
        return LighterResult.failure(LighterTxErrorKind.SIGNING, err)
    if not private_key or not public_key:
        return LighterResult.failure(LighterTxErrorKind.SIGNING, "signer returned an empty api key")
    return LighterResult.success(LighterApiKeyPair(private_key=private_key, public_key=public_key))
