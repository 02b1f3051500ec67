"""Venue-specific enums for the Lighter signer client.

These enums mirror the transaction and order types used by the lighter-go
signing library and the venue API. Values are wire-visible and must not change.
"""

from __future__ import annotations

from enum import Enum
from enum import IntEnum


class LighterTxType(IntEnum):
    CHANGE_PUB_KEY = 8
    CREATE_SUB_ACCOUNT = 9
    CREATE_PUBLIC_POOL = 10
    UPDATE_PUBLIC_POOL = 11
    TRANSFER = 12
    WITHDRAW = 13
    CREATE_ORDER = 14
    CANCEL_ORDER = 15
    CANCEL_ALL_ORDERS = 16
    MODIFY_ORDER = 17
    MINT_SHARES = 18
    BURN_SHARES = 19
    UPDATE_LEVERAGE = 20
    CREATE_GROUPED_ORDERS = 28


class LighterOrderType(IntEnum):
    LIMIT = 0
    MARKET = 1
    STOP_LOSS = 2
    STOP_LOSS_LIMIT = 3
    TAKE_PROFIT = 4
    TAKE_PROFIT_LIMIT = 5
    TWAP = 6


class LighterTimeInForce(IntEnum):
    IOC = 0
    GTT = 1
    POST_ONLY = 2


class LighterCancelAllTif(IntEnum):
    IMMEDIATE = 0
    SCHEDULED = 1
    ABORT = 2


class LighterMarginMode(IntEnum):
    CROSS = 0
    ISOLATED = 1


class LighterGroupingType(IntEnum):
    ONE_TRIGGERS_THE_OTHER = 1
    ONE_CANCELS_THE_OTHER = 2
    ONE_TRIGGERS_A_ONE_CANCELS_THE_OTHER = 3


class NonceManagerType(str, Enum):
    """Policy used to hand out nonces across the API keys of one client.

    ``OPTIMISTIC`` increments a local counter per key and compensates on failure.
    ``PESSIMISTIC`` asks the venue for every nonce it issues.
    """

    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"
