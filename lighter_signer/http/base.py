from __future__ import annotations

# -------------------------------------------------------------------------------------------------
#  Copyright (C) 2015-2025 Nautech Systems Pty Ltd. All rights reserved.
#  https://nautechsystems.io
# -------------------------------------------------------------------------------------------------

from typing import Any
from urllib.parse import urlencode

import msgspec

import nautilus_trader
from nautilus_trader.core.nautilus_pyo3 import HttpClient, HttpMethod, HttpResponse, Quota

from .errors import LighterClientError, LighterServerError


class LighterHttpBase:
    """
    Shared HTTP utilities for Lighter REST clients.

    Provides a thin wrapper around the core PyO3 HttpClient with consistent
    headers, per-endpoint rate-limit keys, error handling and JSON decoding.

    Parameters
    ----------
    base_url : str
        The venue base URL (trailing slash is stripped).
    ratelimiter_quotas : list[tuple[str, Quota]], optional
        Keyed quotas, keys are ``lighter:<path>``.
    ratelimiter_default_quota : Quota, optional
        The quota for requests without a keyed quota.
    timeout_secs : int, default 10
        The request timeout.
    default_headers : dict[str, Any], optional
        Replaces the default JSON headers.
    http_client : HttpClient, optional
        An already constructed client to send requests through (shared or faked).
    """

    def __init__(
        self,
        base_url: str,
        ratelimiter_quotas: list[tuple[str, Quota]] | None = None,
        ratelimiter_default_quota: Quota | None = None,
        timeout_secs: int = 10,
        default_headers: dict[str, Any] | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        if http_client is None:
            http_client = HttpClient(
                keyed_quotas=ratelimiter_quotas or [],
                default_quota=ratelimiter_default_quota,
            )
        self._client = http_client
        self._headers: dict[str, Any] = default_headers or {
            "Content-Type": "application/json",
            "User-Agent": nautilus_trader.NAUTILUS_USER_AGENT,
        }
        self._decoder = msgspec.json.Decoder(dict)
        self._timeout_secs = timeout_secs

    def _build_headers(self, auth: str | None = None) -> dict[str, Any]:
        headers: dict[str, Any] = dict(self._headers)
        if auth:
            headers["Authorization"] = str(auth)
        return headers

    def _build_url(self, path: str, params: dict[str, Any] | None = None) -> str:
        if params:
            return f"{self._base_url}{path}?{urlencode(params)}"
        return f"{self._base_url}{path}"

    def _raise_for_status(self, response: HttpResponse) -> None:
        if response.status < 400:
            return
        # Decode error payload best-effort
        try:
            payload = self._decoder.decode(response.body) if response.body else {}
        except msgspec.DecodeError:
            payload = {"message": bytes(response.body).decode(errors="ignore")}
        headers = dict(response.headers or {})
        if response.status >= 500:
            raise LighterServerError(status=response.status, message=payload, headers=headers)
        raise LighterClientError(status=response.status, message=payload, headers=headers)

    async def _get_raw(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        auth: str | None = None,
    ) -> HttpResponse:
        response: HttpResponse = await self._client.request(
            HttpMethod.GET,
            self._build_url(path, params),
            headers=self._build_headers(auth),
            keys=[f"lighter:{path}"],
            timeout_secs=self._timeout_secs,
        )
        self._raise_for_status(response)
        return response

    async def _post_raw(
        self,
        path: str,
        body: bytes,
        auth: str | None = None,
        content_type: str | None = None,
    ) -> HttpResponse:
        headers = self._build_headers(auth)
        if content_type:
            headers["Content-Type"] = content_type
        response: HttpResponse = await self._client.request(
            HttpMethod.POST,
            f"{self._base_url}{path}",
            headers=headers,
            body=body,
            keys=[f"lighter:{path}"],
            timeout_secs=self._timeout_secs,
        )
        self._raise_for_status(response)
        return response

    async def _get_json(self, path: str, params: dict[str, Any] | None, struct_type: type[Any]) -> Any:
        resp = await self._get_raw(path, params)
        if not resp.body:
            return struct_type()
        try:
            return msgspec.json.decode(resp.body, type=struct_type)
        except msgspec.DecodeError as e:
            raise LighterClientError(
                status=resp.status,
                message={"message": f"unexpected {path} response: {e}"},
                headers={},
            ) from e

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def headers(self) -> dict[str, Any]:
        return self._headers
