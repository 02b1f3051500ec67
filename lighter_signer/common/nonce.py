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
"""Nonce management for the API keys of one Lighter account.

A manager owns a contiguous range of API key indices. It fetches the initial
value of every key via a supplied coroutine, hands out ``(api_key_index, nonce)``
pairs round-robin, and supports rollback + refresh when a submission fails.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from nautilus_trader.common.component import Logger
from nautilus_trader.common.enums import LogColor

from lighter_signer.common.enums import NonceManagerType
from lighter_signer.common.errors import LighterConfigError


NonceFetcher = Callable[[int], Awaitable[int]]


@dataclass
class _KeyState:
    """Internal state per API key (next nonce to issue + lock)."""

    value: int = 0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class NonceManager(ABC):
    """
    Base class for per-API-key nonce managers.

    Every operation on a key is serialized by that key's lock, so concurrent
    callers sharing one manager never observe the same nonce twice for a key.

    Parameters
    ----------
    account_index : int
        The account the API keys belong to.
    fetcher : Callable[[int], Awaitable[int]]
        Coroutine returning the venue's next nonce for an API key index.
    start_api_key : int
        The first API key index owned by the manager.
    end_api_key : int
        The last API key index owned by the manager (inclusive).
    """

    def __init__(
        self,
        account_index: int,
        fetcher: NonceFetcher,
        start_api_key: int,
        end_api_key: int,
    ) -> None:
        if start_api_key < 0 or end_api_key < start_api_key:
            raise LighterConfigError(f"invalid api key range [{start_api_key}, {end_api_key}]")
        self._log = Logger(type(self).__name__)
        self._account_index = account_index
        self._fetcher = fetcher
        self._start = start_api_key
        self._end = end_api_key
        self._current = start_api_key
        self._states: dict[int, _KeyState] = {
            idx: _KeyState() for idx in range(start_api_key, end_api_key + 1)
        }
        self._init_task: asyncio.Future[None] | None = None

    @property
    def start_api_key(self) -> int:
        return self._start

    @property
    def end_api_key(self) -> int:
        return self._end

    def current(self, api_key_index: int) -> int:
        """Return the nonce the next issuance on the API key would use."""
        return self._state(api_key_index).value

    def _state(self, api_key_index: int) -> _KeyState:
        st = self._states.get(api_key_index)
        if st is None:
            raise KeyError(f"api key {api_key_index} not in [{self._start}, {self._end}]")
        return st

    def _next_api_key(self) -> int:
        """Advance the round-robin cursor and return the selected API key."""
        api_key_index = self._current
        self._current = self._start if api_key_index >= self._end else api_key_index + 1
        return api_key_index

    def start(self) -> None:
        """Schedule ``initialize()`` on the running event loop, if there is one."""
        if self._init_task is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._init_task = loop.create_task(self._fetch_all())

    def stop(self) -> None:
        """Cancel a pending initialization, if any."""
        if self._init_task is not None and not self._init_task.done():
            self._init_task.cancel()
        self._init_task = None

    async def initialize(self) -> None:
        """Fetch the venue nonce of every owned API key concurrently.

        Runs once per manager; later calls wait for the same fetch. A failure
        for one key is logged and leaves that key at 0.
        """
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._fetch_all())
        await asyncio.shield(self._init_task)

    async def _fetch_all(self) -> None:
        await asyncio.gather(*(self._initialize_key(idx) for idx in self._states))

    async def _initialize_key(self, api_key_index: int) -> None:
        st = self._states[api_key_index]
        async with st.lock:
            try:
                st.value = int(await self._fetcher(api_key_index))
            except Exception as e:
                self._log.warning(
                    f"Failed to fetch initial nonce for api key {api_key_index}: {e}",
                    LogColor.YELLOW,
                )
                return
        self._log.info(f"Nonce for api key {api_key_index} initialized at {st.value}")

    @abstractmethod
    async def next(self) -> tuple[int, int]:
        """Return the ``(api_key_index, nonce)`` pair for the next transaction."""

    @abstractmethod
    async def acknowledge_failure(self, api_key_index: int) -> None:
        """Roll back a nonce that was issued but not consumed by the venue."""

    @abstractmethod
    async def hard_refresh(self, api_key_index: int) -> None:
        """Discard local state for the API key and resync it from the venue."""


class OptimisticNonceManager(NonceManager):
    """
    Issues nonces from a local counter without waiting for venue confirmation.

    The counter is advanced as soon as a nonce is handed out; callers must call
    ``acknowledge_failure`` when the nonce was not consumed, or ``hard_refresh``
    when the venue reported a nonce mismatch.
    """

    async def next(self) -> tuple[int, int]:
        await self.initialize()
        api_key_index = self._next_api_key()
        st = self._states[api_key_index]
        async with st.lock:
            nonce = st.value
            st.value += 1
        self._log.debug(f"Issued nonce {nonce} on api key {api_key_index}")
        return api_key_index, nonce

    async def acknowledge_failure(self, api_key_index: int) -> None:
        st = self._state(api_key_index)
        async with st.lock:
            if st.value > 0:
                st.value -= 1
        self._log.warning(f"Rolled back nonce on api key {api_key_index} to {st.value}", LogColor.YELLOW)

    async def hard_refresh(self, api_key_index: int) -> None:
        st = self._state(api_key_index)
        async with st.lock:
            try:
                fresh = await self._fetcher(api_key_index)
            except Exception as e:
                self._log.warning(
                    f"Failed to refresh nonce for api key {api_key_index}: {e}",
                    LogColor.YELLOW,
                )
                return
            st.value = int(fresh)
        self._log.info(f"Nonce for api key {api_key_index} refreshed to {st.value}", LogColor.BLUE)


class PessimisticNonceManager(NonceManager):
    """
    Asks the venue for every nonce it issues.

    Nothing is cached between issuances, so a failed submission needs no
    compensation. Throughput is bounded by one HTTP round trip per transaction
    and per API key.
    """

    async def _fetch_all(self) -> None:
        # Nonces are always fetched on demand
        return None

    async def next(self) -> tuple[int, int]:
        api_key_index = self._next_api_key()
        st = self._states[api_key_index]
        async with st.lock:
            nonce = int(await self._fetcher(api_key_index))
            st.value = nonce + 1
        self._log.debug(f"Fetched nonce {nonce} on api key {api_key_index}")
        return api_key_index, nonce

    async def acknowledge_failure(self, api_key_index: int) -> None:
        self._state(api_key_index)

    async def hard_refresh(self, api_key_index: int) -> None:
        self._state(api_key_index)
        self._log.debug(f"Nonce for api key {api_key_index} is fetched on demand; nothing to refresh")


def nonce_manager_factory(
    nonce_manager_type: NonceManagerType | str,
    account_index: int,
    fetcher: NonceFetcher,
    start_api_key: int,
    end_api_key: int,
) -> NonceManager:
    """Build the nonce manager for the given policy.

    Raises
    ------
    LighterConfigError
        If the nonce manager type is not supported.
    """
    try:
        kind = NonceManagerType(nonce_manager_type)
    except ValueError:
        raise LighterConfigError(f"unsupported nonce manager type: {nonce_manager_type}") from None
    if kind == NonceManagerType.OPTIMISTIC:
        return OptimisticNonceManager(account_index, fetcher, start_api_key, end_api_key)
    if kind == NonceManagerType.PESSIMISTIC:
        return PessimisticNonceManager(account_index, fetcher, start_api_key, end_api_key)
    raise LighterConfigError(f"unsupported nonce manager type: {nonce_manager_type}")
