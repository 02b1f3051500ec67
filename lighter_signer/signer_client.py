from __future__ import annotations

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

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Sequence

import msgspec
from eth_account import Account
from eth_account.messages import encode_defunct

from nautilus_trader.common.component import LiveClock, Logger
from nautilus_trader.common.enums import LogColor

from lighter_signer.common.auth import LighterAuthManager
from lighter_signer.common.constants import AUTO
from lighter_signer.common.constants import CODE_OK
from lighter_signer.common.constants import DEFAULT_10_MIN_AUTH_EXPIRY
from lighter_signer.common.constants import DEFAULT_28_DAY_ORDER_EXPIRY
from lighter_signer.common.constants import DEFAULT_IOC_EXPIRY
from lighter_signer.common.constants import MARGIN_FRACTION_SCALE
from lighter_signer.common.constants import MINUTE
from lighter_signer.common.constants import NIL_TRIGGER_PRICE
from lighter_signer.common.constants import ORDER_BOOK_SLIPPAGE_LEVELS
from lighter_signer.common.constants import ORDER_BOOK_TOP_LEVELS
from lighter_signer.common.constants import USDC_TICKER_SCALE
from lighter_signer.common.enums import LighterCancelAllTif
from lighter_signer.common.enums import LighterGroupingType
from lighter_signer.common.enums import LighterMarginMode
from lighter_signer.common.enums import LighterOrderType
from lighter_signer.common.enums import LighterTimeInForce
from lighter_signer.common.enums import LighterTxType
from lighter_signer.common.enums import NonceManagerType
from lighter_signer.common.errors import LighterApiKeyError
from lighter_signer.common.errors import LighterConfigError
from lighter_signer.common.errors import LighterSignerError
from lighter_signer.common.nonce import NonceManager
from lighter_signer.common.nonce import nonce_manager_factory
from lighter_signer.common.signer import LighterNativeSigner
from lighter_signer.common.signer import SignResult
from lighter_signer.common.signer import create_api_key
from lighter_signer.common.signer import load_signer_library
from lighter_signer.common.types import LighterApiKeyPair
from lighter_signer.common.types import LighterCreateOrderRequest
from lighter_signer.common.types import LighterResult
from lighter_signer.common.types import LighterTxErrorKind
from lighter_signer.common.types import LighterTxSubmission
from lighter_signer.common.utils import are_keys_equal
from lighter_signer.common.utils import is_nonce_error
from lighter_signer.common.utils import parse_scaled_int
from lighter_signer.common.utils import resolve_chain_id
from lighter_signer.common.utils import strip_0x
from lighter_signer.common.utils import trim_exc
from lighter_signer.config import LighterCredentials
from lighter_signer.config import SignerClientConfig
from lighter_signer.http.errors import LighterClientError
from lighter_signer.http.errors import LighterHttpError
from lighter_signer.http.order import LighterOrderHttpClient
from lighter_signer.http.transaction import LighterTransactionHttpClient
from lighter_signer.schemas.http import LighterOrderBookOrders


TxResult = LighterResult[LighterTxSubmission]


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _acceptable_price(ideal_price: int, max_slippage: float, is_ask: bool) -> Decimal:
    direction = -1 if is_ask else 1
    return Decimal(ideal_price) * (1 + Decimal(str(max_slippage)) * direction)


class SignerClient:
    """
    Signs and submits the transactions of one Lighter account.

    The client owns the API keys ``[api_key_index, max_api_key_index]``. Every
    nonce-bearing operation resolves an ``(api_key_index, nonce)`` pair, switches
    the native signer to that key, signs, submits via ``sendTx`` and reconciles
    the nonce manager with the outcome:

    - accepted: nothing to do, the nonce was consumed.
    - rejected for a nonce mismatch: the key is hard refreshed from the venue.
    - any other failure: the optimistic nonce is rolled back.

    Expected failures are returned as ``LighterResult`` errors; only setup
    errors raise.

    Parameters
    ----------
    url : str
        The venue base URL, also selecting the chain id.
    private_key : str
        The private key of ``api_key_index`` (hex, 0x optional).
    api_key_index : int
        The first owned API key index.
    account_index : int
        The account all transactions are signed for.
    config : SignerClientConfig, optional
        Additional API keys, nonce policy and HTTP settings.
    signer : LighterNativeSigner, optional
        The native signer; the platform shared library is loaded if omitted.
    tx_api : LighterTransactionHttpClient, optional
        The ``nextNonce`` / ``sendTx`` client.
    order_api : LighterOrderHttpClient, optional
        The order book client used by the slippage-aware market orders.
    clock : LiveClock, optional
        The clock for auth token expiries.

    Raises
    ------
    LighterConfigError
        If the private keys do not match the owned API key range.
    LighterSignerError
        If the native signer fails to activate an owned API key.
    """

    def __init__(
        self,
        url: str,
        private_key: str,
        api_key_index: int,
        account_index: int,
        config: SignerClientConfig | None = None,
        *,
        signer: LighterNativeSigner | None = None,
        tx_api: LighterTransactionHttpClient | None = None,
        order_api: LighterOrderHttpClient | None = None,
        clock: LiveClock | None = None,
    ) -> None:
        config = config or SignerClientConfig()
        self._log = Logger(type(self).__name__)
        self._clock = clock or LiveClock()
        self._eth_private_key: str | None = None

        self.url = url.rstrip("/")
        self.chain_id = resolve_chain_id(self.url)
        self.account_index = account_index
        self.api_key_index = api_key_index
        self.end_api_key_index = api_key_index if config.max_api_key_index == AUTO else config.max_api_key_index
        if api_key_index < 0 or self.end_api_key_index < api_key_index:
            raise LighterConfigError(f"invalid api key range [{api_key_index}, {self.end_api_key_index}]")

        private_key = strip_0x(private_key)
        private_keys = dict(config.private_keys or {})
        self._validate_api_private_keys(private_key, private_keys)
        self._api_key_dict = self._build_api_key_dict(private_key, private_keys)

        if tx_api is None or order_api is None:
            quotas, default_quota = config.ratelimit.quotas() if config.ratelimit else (None, None)
        if tx_api is None:
            tx_api = LighterTransactionHttpClient(
                self.url,
                ratelimiter_quotas=quotas,
                ratelimiter_default_quota=default_quota,
                timeout_secs=config.http_timeout_secs,
            )
        if order_api is None:
            order_api = LighterOrderHttpClient(
                self.url,
                timeout_secs=config.http_timeout_secs,
                ratelimiter_quotas=quotas,
                ratelimiter_default_quota=default_quota,
            )
        self._tx_api = tx_api
        self._order_api = order_api
        self._signer = signer if signer is not None else load_signer_library()

        self._nonce_manager: NonceManager = nonce_manager_factory(
            config.nonce_management_type,
            account_index,
            self._fetch_next_nonce,
            self.api_key_index,
            self.end_api_key_index,
        )
        self._nonce_manager_type = NonceManagerType(config.nonce_management_type)
        for idx in self.api_key_indices:
            self._create_client(idx)

        self._auth = LighterAuthManager(issuer=self._issue_auth_token, time_source=self._clock.timestamp)
        self._log.info(
            f"Signer client for account {account_index} on api keys "
            f"[{self.api_key_index}, {self.end_api_key_index}], chain id {self.chain_id}, "
            f"{self._nonce_manager_type.value} nonces",
            LogColor.BLUE,
        )
        # Nonce initialization runs in the background when a loop is running
        self._nonce_manager.start()

    @classmethod
    def from_credentials(
        cls,
        url: str,
        credentials: LighterCredentials,
        config: SignerClientConfig | None = None,
        **kwargs,
    ) -> SignerClient:
        """Build a client owning the API key of ``credentials``."""
        client = cls(
            url,
            private_key=credentials.private_key,
            api_key_index=credentials.api_key_index,
            account_index=credentials.account_index,
            config=config,
            **kwargs,
        )
        client._eth_private_key = credentials.eth_private_key
        return client

    # --- Setup -------------------------------------------------------------------------

    @property
    def api_key_indices(self) -> range:
        return range(self.api_key_index, self.end_api_key_index + 1)

    @property
    def nonce_manager(self) -> NonceManager:
        return self._nonce_manager

    def _validate_api_private_keys(self, initial_private_key: str, private_keys: dict[int, str]) -> None:
        expected = self.end_api_key_index - self.api_key_index + 1
        unknown = sorted(k for k in private_keys if k not in self.api_key_indices)
        if unknown:
            raise LighterConfigError(f"unexpected private key index {unknown[0]}")
        if len(private_keys) == expected:
            if not are_keys_equal(private_keys[self.api_key_index], initial_private_key):
                raise LighterConfigError("inconsistent private keys")
            return
        if len(private_keys) != expected - 1:
            raise LighterConfigError("unexpected number of private keys")
        for api_key in range(self.api_key_index + 1, self.end_api_key_index + 1):
            if api_key not in private_keys:
                raise LighterConfigError(f"missing {api_key} private key")

    def _build_api_key_dict(self, private_key: str, private_keys: dict[int, str]) -> dict[int, str]:
        keys = {idx: strip_0x(key) for idx, key in private_keys.items()}
        keys[self.api_key_index] = private_key
        return keys

    def _create_client(self, api_key_index: int) -> None:
        err = self._signer.create_client(
            self.url,
            self._api_key_dict[api_key_index],
            self.chain_id,
            api_key_index,
            self.account_index,
        )
        if err:
            raise LighterSignerError(f"error creating client for api key {api_key_index}: {trim_exc(err)}")

    async def _fetch_next_nonce(self, api_key_index: int) -> int:
        return await self._tx_api.next_nonce(self.account_index, api_key_index)

    async def initialize(self) -> None:
        """Wait until the nonce of every owned API key is fetched."""
        await self._nonce_manager.initialize()

    async def close(self) -> None:
        """Stop background work and drop cached credentials."""
        self._nonce_manager.stop()
        self._auth.invalidate()
        self._log.debug("Closed")

    def check_client(self) -> str | None:
        """Verify the native client of every owned API key against the venue."""
        for api_key in self.api_key_indices:
            err = self._signer.check_client(api_key, self.account_index)
            if err:
                return f"{trim_exc(err)} on api key {api_key}"
        return None

    def switch_api_key(self, api_key_index: int) -> str | None:
        return self._signer.switch_api_key(api_key_index) or None

    def create_api_key(self, seed: str = "") -> LighterResult[LighterApiKeyPair]:
        return create_api_key(seed, signer=self._signer)

    # --- Auth --------------------------------------------------------------------------

    def create_auth_token_with_expiry(
        self,
        deadline: int = DEFAULT_10_MIN_AUTH_EXPIRY,
        timestamp: int | None = None,
    ) -> LighterResult[str]:
        """Create an auth token valid until ``timestamp + deadline`` (seconds).

        A ``deadline`` of -1 means 10 minutes; ``timestamp`` defaults to now.
        """
        if deadline == DEFAULT_10_MIN_AUTH_EXPIRY:
            deadline = 10 * MINUTE
        if timestamp is None:
            timestamp = int(self._clock.timestamp())
        token, err = self._signer.create_auth_token(timestamp + deadline)
        if err or not token:
            return LighterResult.failure(LighterTxErrorKind.SIGNING, trim_exc(err or "No auth token"))
        return LighterResult.success(token)

    def _issue_auth_token(self, deadline: int, timestamp: int) -> LighterResult[str]:
        return self.create_auth_token_with_expiry(deadline, timestamp)

    def auth_token(self, horizon_secs: int | None = None, force: bool = False) -> LighterResult[str]:
        """Return a cached auth token, re-signing it shortly before it expires."""
        return self._auth.token(horizon_secs=horizon_secs, force=force)

    # --- Nonces ------------------------------------------------------------------------

    async def get_api_key_nonce(self, api_key_index: int = AUTO, nonce: int = AUTO) -> tuple[int, int]:
        """Resolve the ``(api_key_index, nonce)`` pair a transaction will use."""
        api_key_index, nonce, _ = await self._resolve_api_key_nonce(api_key_index, nonce)
        return api_key_index, nonce

    async def _resolve_api_key_nonce(self, api_key_index: int, nonce: int) -> tuple[int, int, bool]:
        # Third item: whether the nonce was issued by the manager
        if api_key_index != AUTO and nonce != AUTO:
            if api_key_index not in self.api_key_indices:
                raise LighterApiKeyError(
                    f"api key {api_key_index} not in [{self.api_key_index}, {self.end_api_key_index}]",
                )
            return api_key_index, nonce, False
        if nonce != AUTO:
            if self.api_key_index != self.end_api_key_index:
                raise LighterApiKeyError("ambiguous api key")
            return self.api_key_index, nonce, False
        if api_key_index != AUTO:
            raise LighterApiKeyError("an explicit api key index requires an explicit nonce")
        api_key_index, nonce = await self._nonce_manager.next()
        return api_key_index, nonce, True

    async def _rollback(self, api_key_index: int, managed: bool) -> None:
        if managed:
            await self._nonce_manager.acknowledge_failure(api_key_index)

    # --- Submission --------------------------------------------------------------------

    async def _process_api_key_and_nonce(
        self,
        tx_type: LighterTxType,
        sign: Callable[[int], SignResult],
        api_key_index: int = AUTO,
        nonce: int = AUTO,
    ) -> TxResult:
        try:
            api_key_index, nonce, managed = await self._resolve_api_key_nonce(api_key_index, nonce)
        except LighterApiKeyError:
            raise
        except Exception as e:
            # Nothing was issued, so there is nothing to roll back
            message = trim_exc(str(e) or type(e).__name__)
            self._log.error(f"Failed to obtain a nonce for {tx_type.name}: {message}")
            return LighterResult.failure(LighterTxErrorKind.TRANSPORT, message)

        err = self._signer.switch_api_key(api_key_index)
        if err:
            await self._rollback(api_key_index, managed)
            raise LighterSignerError(f"error switching api key: {trim_exc(err)}")
        self._log.debug(f"Signing {tx_type.name} on api key {api_key_index} with nonce {nonce}")

        try:
            tx_info, err = sign(nonce)
        except Exception:
            await self._rollback(api_key_index, managed)
            raise
        if err or not tx_info:
            message = trim_exc(err or "No transaction info")
            self._log.error(f"Failed to sign {tx_type.name}: {message}")
            await self._rollback(api_key_index, managed)
            return LighterResult.failure(LighterTxErrorKind.SIGNING, message)

        if not tx_info.startswith("{"):
            await self._rollback(api_key_index, managed)
            return LighterResult.failure(LighterTxErrorKind.MALFORMED_PAYLOAD, trim_exc(tx_info))
        try:
            tx = msgspec.json.decode(tx_info, type=dict)
        except msgspec.DecodeError:
            await self._rollback(api_key_index, managed)
            return LighterResult.failure(LighterTxErrorKind.MALFORMED_PAYLOAD, trim_exc(tx_info))

        try:
            response = await self._tx_api.send_tx(tx_type, tx_info)
        except LighterHttpError as e:
            message = trim_exc(str(e))
            if isinstance(e, LighterClientError) and e.is_nonce_error():
                self._log.warning(
                    f"{tx_type.name} rejected for nonce {nonce} on api key {api_key_index}: {message}",
                    LogColor.YELLOW,
                )
                await self._nonce_manager.hard_refresh(api_key_index)
                return LighterResult.failure(LighterTxErrorKind.NONCE_MISMATCH, message)
            self._log.error(f"Failed to send {tx_type.name}: {message}")
            await self._rollback(api_key_index, managed)
            kind = LighterTxErrorKind.REJECTED if isinstance(e, LighterClientError) else LighterTxErrorKind.TRANSPORT
            return LighterResult.failure(kind, message)
        except Exception as e:
            message = trim_exc(str(e) or type(e).__name__)
            self._log.error(f"Failed to send {tx_type.name}: {message}")
            await self._rollback(api_key_index, managed)
            return LighterResult.failure(LighterTxErrorKind.TRANSPORT, message)

        if response.code != CODE_OK:
            message = trim_exc(response.message or f"code {response.code}")
            if is_nonce_error({"code": response.code, "message": response.message}):
                self._log.warning(
                    f"{tx_type.name} rejected for nonce {nonce} on api key {api_key_index}: {message}",
                    LogColor.YELLOW,
                )
                await self._nonce_manager.hard_refresh(api_key_index)
                return LighterResult.failure(LighterTxErrorKind.NONCE_MISMATCH, message)
            self._log.error(f"{tx_type.name} rejected with code {response.code}: {message}")
            await self._rollback(api_key_index, managed)
            return LighterResult.failure(LighterTxErrorKind.REJECTED, message)

        self._log.debug(f"Sent {tx_type.name}, tx_hash={response.tx_hash}")
        return LighterResult.success(
            LighterTxSubmission(
                tx_type=tx_type,
                tx=tx,
                response=response,
                api_key_index=api_key_index,
                nonce=nonce,
            ),
        )

    def _sign_l1(self, result: SignResult, eth_private_key: str) -> SignResult:
        """Replace ``MessageToSign`` with the owner's ``L1Sig`` over it."""
        tx_info, err = result
        if err or not tx_info or not tx_info.startswith("{"):
            return result
        try:
            tx = msgspec.json.decode(tx_info, type=dict)
        except msgspec.DecodeError:
            return result
        message = tx.pop("MessageToSign", None)
        if not message:
            return None, "missing MessageToSign in signed transaction"
        signed = Account.from_key(eth_private_key).sign_message(encode_defunct(text=message))
        tx["L1Sig"] = signed.signature.to_0x_hex()
        return msgspec.json.encode(tx).decode("utf-8"), None

    def _resolve_eth_key(self, eth_private_key: str | None) -> str:
        key = eth_private_key or self._eth_private_key
        if not key:
            raise LighterConfigError("an ETH (L1) private key is required")
        return key

    # --- Orders ------------------------------------------------------------------------

    async def create_order(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        price: int,
        is_ask: bool,
        order_type: LighterOrderType,
        time_in_force: LighterTimeInForce,
        reduce_only: bool = False,
        trigger_price: int = NIL_TRIGGER_PRICE,
        order_expiry: int = DEFAULT_28_DAY_ORDER_EXPIRY,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.CREATE_ORDER,
            lambda n: self._signer.sign_create_order(
                market_index,
                client_order_index,
                base_amount,
                price,
                int(is_ask),
                int(order_type),
                int(time_in_force),
                int(reduce_only),
                trigger_price,
                order_expiry,
                n,
            ),
            api_key_index,
            nonce,
        )

    async def create_grouped_orders(
        self,
        grouping_type: LighterGroupingType,
        orders: Sequence[LighterCreateOrderRequest],
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.CREATE_GROUPED_ORDERS,
            lambda n: self._signer.sign_create_grouped_orders(int(grouping_type), orders, n),
            api_key_index,
            nonce,
        )

    async def create_market_order(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        price: int,
        is_ask: bool,
        reduce_only: bool = False,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        """Create an IOC market order; ``price`` is the worst acceptable average price."""
        return await self.create_order(
            market_index,
            client_order_index,
            base_amount,
            price,
            is_ask,
            LighterOrderType.MARKET,
            LighterTimeInForce.IOC,
            reduce_only,
            NIL_TRIGGER_PRICE,
            DEFAULT_IOC_EXPIRY,
            nonce,
            api_key_index,
        )

    async def _fetch_order_book(self, market_index: int, limit: int) -> LighterResult[LighterOrderBookOrders]:
        try:
            book = await self._order_api.order_book_orders(market_index, limit)
        except Exception as e:
            message = trim_exc(str(e) or type(e).__name__)
            self._log.error(f"Failed to fetch order book of market {market_index}: {message}")
            return LighterResult.failure(LighterTxErrorKind.ORDER_BOOK, message)
        return LighterResult.success(book)

    @staticmethod
    def _best_price(book: LighterOrderBookOrders, is_ask: bool) -> int | None:
        # An ask executes against the bids
        side = book.bids if is_ask else book.asks
        if not side:
            return None
        return parse_scaled_int(side[0].price)

    async def create_market_order_limited_slippage(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        max_slippage: float,
        is_ask: bool,
        reduce_only: bool = False,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
        ideal_price: int | None = None,
    ) -> TxResult:
        """Create a market order priced at most ``max_slippage`` away from the ideal price.

        The ideal price defaults to the best opposite price of the book.
        """
        if ideal_price is None:
            fetched = await self._fetch_order_book(market_index, ORDER_BOOK_TOP_LEVELS)
            if not fetched.ok:
                return LighterResult(error=fetched.error)
            try:
                ideal_price = self._best_price(fetched.value, is_ask)
            except ValueError as e:
                return LighterResult.failure(LighterTxErrorKind.ORDER_BOOK, trim_exc(str(e)))
            if ideal_price is None:
                return LighterResult.failure(LighterTxErrorKind.ORDER_BOOK, "No price available in order book")

        acceptable = _round_half_up(_acceptable_price(ideal_price, max_slippage, is_ask))
        return await self.create_market_order(
            market_index,
            client_order_index,
            base_amount,
            acceptable,
            is_ask,
            reduce_only,
            nonce,
            api_key_index,
        )

    async def create_market_order_if_slippage(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        max_slippage: float,
        is_ask: bool,
        reduce_only: bool = False,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
        ideal_price: int | None = None,
    ) -> TxResult:
        """Create a market order only if the visible book fills it within ``max_slippage``.

        The book is walked level by level on the opposite side; nothing is
        submitted when the average fill price is too far from the ideal price or
        the visible depth cannot fill ``base_amount``.
        """
        fetched = await self._fetch_order_book(market_index, ORDER_BOOK_SLIPPAGE_LEVELS)
        if not fetched.ok:
            return LighterResult(error=fetched.error)
        book = fetched.value

        matched_usd_amount = 0
        matched_size = 0
        try:
            if ideal_price is None:
                ideal_price = self._best_price(book, is_ask)
                if ideal_price is None:
                    return LighterResult.failure(LighterTxErrorKind.ORDER_BOOK, "No price available in order book")
            for level in book.bids if is_ask else book.asks:
                if matched_size == base_amount:
                    break
                level_price = parse_scaled_int(level.price)
                level_size = parse_scaled_int(level.remaining_base_amount)
                used_size = min(base_amount - matched_size, level_size)
                matched_usd_amount += level_price * used_size
                matched_size += used_size
        except ValueError as e:
            return LighterResult.failure(LighterTxErrorKind.ORDER_BOOK, trim_exc(str(e)))

        acceptable = _acceptable_price(ideal_price, max_slippage, is_ask)
        if matched_size > 0:
            potential = Decimal(matched_usd_amount) / Decimal(matched_size)
            if (is_ask and potential < acceptable) or (not is_ask and potential > acceptable):
                return LighterResult.failure(LighterTxErrorKind.SLIPPAGE, "Excessive slippage")
        if matched_size < base_amount:
            return LighterResult.failure(
                LighterTxErrorKind.SLIPPAGE,
                "Cannot be sure slippage will be acceptable due to the high size",
            )

        return await self.create_market_order(
            market_index,
            client_order_index,
            base_amount,
            _round_half_up(acceptable),
            is_ask,
            reduce_only,
            nonce,
            api_key_index,
        )

    async def create_tp_order(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        trigger_price: int,
        price: int,
        is_ask: bool,
        reduce_only: bool = False,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self.create_order(
            market_index,
            client_order_index,
            base_amount,
            price,
            is_ask,
            LighterOrderType.TAKE_PROFIT,
            LighterTimeInForce.IOC,
            reduce_only,
            trigger_price,
            DEFAULT_28_DAY_ORDER_EXPIRY,
            nonce,
            api_key_index,
        )

    async def create_tp_limit_order(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        trigger_price: int,
        price: int,
        is_ask: bool,
        reduce_only: bool = False,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self.create_order(
            market_index,
            client_order_index,
            base_amount,
            price,
            is_ask,
            LighterOrderType.TAKE_PROFIT_LIMIT,
            LighterTimeInForce.GTT,
            reduce_only,
            trigger_price,
            DEFAULT_28_DAY_ORDER_EXPIRY,
            nonce,
            api_key_index,
        )

    async def create_sl_order(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        trigger_price: int,
        price: int,
        is_ask: bool,
        reduce_only: bool = False,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self.create_order(
            market_index,
            client_order_index,
            base_amount,
            price,
            is_ask,
            LighterOrderType.STOP_LOSS,
            LighterTimeInForce.IOC,
            reduce_only,
            trigger_price,
            DEFAULT_28_DAY_ORDER_EXPIRY,
            nonce,
            api_key_index,
        )

    async def create_sl_limit_order(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        trigger_price: int,
        price: int,
        is_ask: bool,
        reduce_only: bool = False,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self.create_order(
            market_index,
            client_order_index,
            base_amount,
            price,
            is_ask,
            LighterOrderType.STOP_LOSS_LIMIT,
            LighterTimeInForce.GTT,
            reduce_only,
            trigger_price,
            DEFAULT_28_DAY_ORDER_EXPIRY,
            nonce,
            api_key_index,
        )

    async def cancel_order(
        self,
        market_index: int,
        order_index: int,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.CANCEL_ORDER,
            lambda n: self._signer.sign_cancel_order(market_index, order_index, n),
            api_key_index,
            nonce,
        )

    async def cancel_all_orders(
        self,
        time_in_force: LighterCancelAllTif,
        time: int,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.CANCEL_ALL_ORDERS,
            lambda n: self._signer.sign_cancel_all_orders(int(time_in_force), time, n),
            api_key_index,
            nonce,
        )

    async def modify_order(
        self,
        market_index: int,
        order_index: int,
        base_amount: int,
        price: int,
        trigger_price: int = NIL_TRIGGER_PRICE,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.MODIFY_ORDER,
            lambda n: self._signer.sign_modify_order(market_index, order_index, base_amount, price, trigger_price, n),
            api_key_index,
            nonce,
        )

    # --- Account -----------------------------------------------------------------------

    async def withdraw(self, usdc_amount: float, nonce: int = AUTO, api_key_index: int = AUTO) -> TxResult:
        """Withdraw ``usdc_amount`` USDC (scaled to 1e-6 units, floored)."""
        scaled = int(Decimal(str(usdc_amount)) * USDC_TICKER_SCALE)
        return await self._process_api_key_and_nonce(
            LighterTxType.WITHDRAW,
            lambda n: self._signer.sign_withdraw(scaled, n),
            api_key_index,
            nonce,
        )

    async def transfer(
        self,
        to_account_index: int,
        usdc_amount: float,
        fee: int = 0,
        memo: str = "",
        eth_private_key: str | None = None,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        """Transfer USDC to another account; the owner's L1 key co-signs the transfer."""
        eth_key = self._resolve_eth_key(eth_private_key)
        scaled = int(Decimal(str(usdc_amount)) * USDC_TICKER_SCALE)
        return await self._process_api_key_and_nonce(
            LighterTxType.TRANSFER,
            lambda n: self._sign_l1(self._signer.sign_transfer(to_account_index, scaled, fee, memo, n), eth_key),
            api_key_index,
            nonce,
        )

    async def create_sub_account(self, nonce: int = AUTO, api_key_index: int = AUTO) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.CREATE_SUB_ACCOUNT,
            self._signer.sign_create_sub_account,
            api_key_index,
            nonce,
        )

    async def change_api_key(
        self,
        new_pubkey: str,
        eth_private_key: str | None = None,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        """Register ``new_pubkey`` on the signing API key; the owner's L1 key co-signs it."""
        eth_key = self._resolve_eth_key(eth_private_key)
        return await self._process_api_key_and_nonce(
            LighterTxType.CHANGE_PUB_KEY,
            lambda n: self._sign_l1(self._signer.sign_change_pub_key(new_pubkey, n), eth_key),
            api_key_index,
            nonce,
        )

    async def update_leverage(
        self,
        market_index: int,
        margin_mode: LighterMarginMode,
        leverage: int,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        """Set the leverage of a market, signed as an initial margin fraction."""
        if leverage <= 0:
            raise LighterConfigError(f"leverage must be positive, was {leverage}")
        imf = int(MARGIN_FRACTION_SCALE // leverage)
        return await self._process_api_key_and_nonce(
            LighterTxType.UPDATE_LEVERAGE,
            lambda n: self._signer.sign_update_leverage(market_index, imf, int(margin_mode), n),
            api_key_index,
            nonce,
        )

    # --- Public pools ------------------------------------------------------------------

    async def create_public_pool(
        self,
        operator_fee: int,
        initial_total_shares: int,
        min_operator_share_rate: int,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.CREATE_PUBLIC_POOL,
            lambda n: self._signer.sign_create_public_pool(
                operator_fee,
                initial_total_shares,
                min_operator_share_rate,
                n,
            ),
            api_key_index,
            nonce,
        )

    async def update_public_pool(
        self,
        public_pool_index: int,
        status: int,
        operator_fee: int,
        min_operator_share_rate: int,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.UPDATE_PUBLIC_POOL,
            lambda n: self._signer.sign_update_public_pool(
                public_pool_index,
                status,
                operator_fee,
                min_operator_share_rate,
                n,
            ),
            api_key_index,
            nonce,
        )

    async def mint_shares(
        self,
        public_pool_index: int,
        share_amount: int,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.MINT_SHARES,
            lambda n: self._signer.sign_mint_shares(public_pool_index, share_amount, n),
            api_key_index,
            nonce,
        )

    async def burn_shares(
        self,
        public_pool_index: int,
        share_amount: int,
        nonce: int = AUTO,
        api_key_index: int = AUTO,
    ) -> TxResult:
        return await self._process_api_key_and_nonce(
            LighterTxType.BURN_SHARES,
            lambda n: self._signer.sign_burn_shares(public_pool_index, share_amount, n),
            api_key_index,
            nonce,
        )
