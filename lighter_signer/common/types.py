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

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from lighter_signer.common.constants import DEFAULT_28_DAY_ORDER_EXPIRY
from lighter_signer.common.constants import NIL_TRIGGER_PRICE
from lighter_signer.common.enums import LighterOrderType
from lighter_signer.common.enums import LighterTimeInForce
from lighter_signer.common.enums import LighterTxType
from lighter_signer.schemas.http import LighterRespSendTx


T = TypeVar("T")


class LighterTxErrorKind(Enum):
    SIGNING = "signing"
    MALFORMED_PAYLOAD = "malformed_payload"
    REJECTED = "rejected"
    NONCE_MISMATCH = "nonce_mismatch"
    TRANSPORT = "transport"
    ORDER_BOOK = "order_book"
    SLIPPAGE = "slippage"


@dataclass(frozen=True, slots=True)
class LighterTxError:
    """A typed, already-normalized failure of a client operation."""

    kind: LighterTxErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class LighterResult(Generic[T]):
    """
    Outcome of a client operation.

    Exactly one of ``value`` and ``error`` is set. Expected failures (signing
    errors, venue rejections, transport errors) are reported through ``error``
    rather than raised.
    """

    value: T | None = None
    error: LighterTxError | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("exactly one of `value` and `error` must be set")

    @classmethod
    def success(cls, value: T) -> LighterResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: LighterTxErrorKind, message: str) -> LighterResult[T]:
        return cls(error=LighterTxError(kind=kind, message=message))

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising ``RuntimeError`` with the error message otherwise."""
        if self.error is not None:
            raise RuntimeError(self.error.message)
        return self.value  # type: ignore[return-value]


@dataclass(frozen=True, slots=True)
class LighterTxSubmission:
    """A signed transaction accepted by the venue."""

    tx_type: LighterTxType
    tx: dict[str, Any]
    response: LighterRespSendTx
    api_key_index: int
    nonce: int

    @property
    def tx_hash(self) -> str | None:
        return self.response.tx_hash


@dataclass(frozen=True, slots=True)
class LighterApiKeyPair:
    private_key: str
    public_key: str


@dataclass(frozen=True, slots=True)
class LighterCreateOrderRequest:
    """One order of a grouped-order transaction (``CreateOrderTxReq`` in the signer)."""

    market_index: int
    client_order_index: int
    base_amount: int
    price: int
    is_ask: bool
    order_type: LighterOrderType
    time_in_force: LighterTimeInForce
    reduce_only: bool = False
    trigger_price: int = NIL_TRIGGER_PRICE
    order_expiry: int = DEFAULT_28_DAY_ORDER_EXPIRY
