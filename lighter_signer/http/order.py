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

from typing import Any

from nautilus_trader.core.nautilus_pyo3 import HttpClient, Quota
from .base import LighterHttpBase
from lighter_signer.schemas.http import LighterOrderBookDetails
from lighter_signer.schemas.http import LighterOrderBookDetailsResponse
from lighter_signer.schemas.http import LighterOrderBookOrders
from lighter_signer.schemas.http import LighterOrderBooksResponse
from lighter_signer.schemas.http import LighterOrderBookSummary


class LighterOrderHttpClient(LighterHttpBase):
    """
    Async HTTP client for the public Lighter order book endpoints.

    Used by the slippage-aware market orders to price against the live book.
    """

    def __init__(
        self,
        base_url: str,
        timeout_secs: int = 10,
        ratelimiter_quotas: list[tuple[str, Quota]] | None = None,
        ratelimiter_default_quota: Quota | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        # Apply default cautious quotas for testnet if none provided
        if ratelimiter_quotas is None and "testnet" in base_url.lower():
            ratelimiter_quotas = [
                ("lighter:/api/v1/orderBooks", Quota.rate_per_minute(6)),
                ("lighter:/api/v1/orderBookDetails", Quota.rate_per_minute(6)),
            ]
        super().__init__(
            base_url=base_url,
            ratelimiter_quotas=ratelimiter_quotas,
            ratelimiter_default_quota=ratelimiter_default_quota,
            timeout_secs=timeout_secs,
            http_client=http_client,
        )

    async def order_books(self) -> list[LighterOrderBookSummary]:
        """
        Return the order books listing (market catalog).

        Response shape:
        {"code": 200, "order_books": [ { ... }, ... ]}
        """
        resp = await self._get_json("/api/v1/orderBooks", None, LighterOrderBooksResponse)
        return resp.order_books

    async def order_book_details(self, market_id: int) -> LighterOrderBookDetails | None:
        """Return detailed metadata for a single market ID, or None if unknown."""
        parsed = await self._get_json(
            "/api/v1/orderBookDetails",
            {"market_id": market_id},
            LighterOrderBookDetailsResponse,
        )
        return parsed.order_book_details[0] if parsed.order_book_details else None

    async def order_book_orders(self, market_id: int, limit: int) -> LighterOrderBookOrders:
        """
        Return up to ``limit`` resting orders per side for a market.

        Response shape:
        {"code":200, "total_asks":INT, "asks":[{price, remaining_base_amount, ...}], "total_bids":INT, "bids":[...]}
        """
        params: dict[str, Any] = {"market_id": market_id, "limit": limit}
        return await self._get_json("/api/v1/orderBookOrders", params, LighterOrderBookOrders)
