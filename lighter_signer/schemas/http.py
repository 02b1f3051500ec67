from __future__ import annotations

# -------------------------------------------------------------------------------------------------
#  Copyright (C) 2015-2025 Nautech Systems Pty Ltd. All rights reserved.
# -------------------------------------------------------------------------------------------------

import msgspec


class LighterNextNonce(msgspec.Struct, frozen=True, omit_defaults=True):
    code: int | None = None
    nonce: int | str | None = None
    next_nonce: int | str | None = None


class LighterRespSendTx(msgspec.Struct, frozen=True, omit_defaults=True):
    code: int
    message: str | None = None
    tx_hash: str | None = None
    predicted_execution_time_ms: int | None = None


# Order books -------------------------------------------------------------------------------------

class LighterOrderBookSummary(msgspec.Struct, frozen=True, omit_defaults=True):
    symbol: str
    market_id: int
    status: str | None = None
    taker_fee: object | None = None
    maker_fee: object | None = None
    min_base_amount: object | None = None
    min_quote_amount: object | None = None
    supported_size_decimals: int | None = None
    supported_price_decimals: int | None = None
    supported_quote_decimals: int | None = None


class LighterOrderBooksResponse(msgspec.Struct, frozen=True, omit_defaults=True):
    code: int | None = None
    order_books: list[LighterOrderBookSummary] = []


class LighterOrderBookDetails(msgspec.Struct, frozen=True, omit_defaults=True):
    market_id: int | None = None
    symbol: str | None = None
    price_decimals: int | None = None
    size_decimals: int | None = None
    last_trade_price: object | None = None
    default_initial_margin_fraction: object | None = None
    maintenance_margin_fraction: object | None = None


class LighterOrderBookDetailsResponse(msgspec.Struct, frozen=True, omit_defaults=True):
    code: int | None = None
    order_book_details: list[LighterOrderBookDetails] = []


class LighterOrderBookOrder(msgspec.Struct, frozen=True, omit_defaults=True):
    """A resting order of the public book. Prices and sizes are venue decimal strings."""

    price: str
    remaining_base_amount: str
    order_index: int | None = None
    order_id: str | None = None
    owner_account_index: int | None = None
    initial_base_amount: str | None = None
    order_expiry: int | None = None


class LighterOrderBookOrders(msgspec.Struct, frozen=True, omit_defaults=True):
    code: int | None = None
    total_asks: int | None = None
    asks: list[LighterOrderBookOrder] = []
    total_bids: int | None = None
    bids: list[LighterOrderBookOrder] = []
