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

from typing import Iterable
from urllib.parse import urlencode

import msgspec

from nautilus_trader.core.nautilus_pyo3 import HttpClient, Quota
from .base import LighterHttpBase
from .errors import LighterClientError
from lighter_signer.common.utils import parse_hex_int
from lighter_signer.schemas.http import LighterNextNonce
from lighter_signer.schemas.http import LighterRespSendTx


class LighterTransactionHttpClient(LighterHttpBase):
    """REST wrapper around the Lighter ``nextNonce`` and ``sendTx`` endpoints."""

    def __init__(
        self,
        base_url: str,
        ratelimiter_quotas: list[tuple[str, Quota]] | None = None,
        ratelimiter_default_quota: Quota | None = None,
        timeout_secs: int = 10,
        http_client: HttpClient | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url,
            ratelimiter_quotas=ratelimiter_quotas,
            ratelimiter_default_quota=ratelimiter_default_quota,
            timeout_secs=timeout_secs,
            http_client=http_client,
        )
        self._send_tx_decoder = msgspec.json.Decoder(LighterRespSendTx)
        self._nonce_decoder = msgspec.json.Decoder(LighterNextNonce)

    def _encode_form(self, entries: Iterable[tuple[str, str]]) -> bytes:
        return urlencode(list(entries)).encode("utf-8")

    async def next_nonce(self, account_index: int, api_key_index: int) -> int:
        """Return the next nonce the venue expects for ``(account_index, api_key_index)``."""
        resp = await self._get_raw(
            "/api/v1/nextNonce",
            {"account_index": account_index, "api_key_index": api_key_index},
        )
        try:
            payload = self._nonce_decoder.decode(resp.body)
        except msgspec.DecodeError as e:
            raise LighterClientError(
                status=resp.status,
                message={"message": f"invalid nonce payload: {e}"},
                headers={},
            ) from e
        raw = payload.next_nonce if payload.next_nonce is not None else payload.nonce
        parsed = parse_hex_int(raw)
        if parsed is None:
            raise LighterClientError(status=resp.status, message={"message": "invalid nonce format"}, headers={})
        return parsed

    async def send_tx(self, tx_type: int, tx_info: str, auth: str | None = None) -> LighterRespSendTx:
        """Invoke ``POST /api/v1/sendTx`` with a signed transaction payload.

        The venue's business ``code`` is returned as-is; only HTTP-level
        failures raise.
        """
        form: list[tuple[str, str]] = [
            ("tx_type", str(int(tx_type))),
            ("tx_info", tx_info),
        ]
        resp = await self._post_raw(
            "/api/v1/sendTx",
            self._encode_form(form),
            auth=auth,
            content_type="application/x-www-form-urlencoded",
        )
        try:
            return self._send_tx_decoder.decode(resp.body)
        except msgspec.DecodeError as e:
            raise LighterClientError(
                status=resp.status,
                message={"message": f"invalid sendTx response: {e}"},
                headers={},
            ) from e
