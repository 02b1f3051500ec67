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
"""Constants for the Lighter signer client (base URLs, chain ids and sentinels)."""

from __future__ import annotations

from typing import Final


LIGHTER: Final[str] = "LIGHTER"

# Public REST base URLs (subject to change by operator)
LIGHTER_MAINNET_HTTP: Final[str] = "https://mainnet.zklighter.elliot.ai"
LIGHTER_TESTNET_HTTP: Final[str] = "https://testnet.zklighter.elliot.ai"

# Chain ids embedded in every signed transaction
LIGHTER_MAINNET_MARKER: Final[str] = "mainnet"
LIGHTER_MAINNET_CHAIN_ID: Final[int] = 304
LIGHTER_TESTNET_CHAIN_ID: Final[int] = 300

CODE_OK: Final[int] = 200

# Exchange error codes reported for a nonce the venue does not expect
LIGHTER_INVALID_NONCE_CODES: Final[frozenset[int]] = frozenset({21104})

USDC_TICKER_SCALE: Final[int] = 1_000_000

# `-1` for nonce / api_key_index means "let the client manage it"
AUTO: Final[int] = -1

NIL_TRIGGER_PRICE: Final[int] = 0
DEFAULT_28_DAY_ORDER_EXPIRY: Final[int] = -1
DEFAULT_IOC_EXPIRY: Final[int] = 0
DEFAULT_10_MIN_AUTH_EXPIRY: Final[int] = -1
MINUTE: Final[int] = 60

# Leverage is sent as an initial margin fraction in basis points
MARGIN_FRACTION_SCALE: Final[int] = 10_000

ORDER_BOOK_TOP_LEVELS: Final[int] = 1
ORDER_BOOK_SLIPPAGE_LEVELS: Final[int] = 100
