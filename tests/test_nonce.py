import asyncio

import pytest

from lighter_signer.common.enums import NonceManagerType
from lighter_signer.common.errors import LighterConfigError
from lighter_signer.common.nonce import OptimisticNonceManager
from lighter_signer.common.nonce import PessimisticNonceManager
from lighter_signer.common.nonce import nonce_manager_factory


def _fetcher(values: dict[int, int], calls: list[int] | None = None):
    async def fetch(api_key_index: int) -> int:
        if calls is not None:
            calls.append(api_key_index)
        value = values[api_key_index]
        if isinstance(value, Exception):
            raise value
        return value

    return fetch


@pytest.mark.asyncio
async def test_initialize_fetches_every_api_key():
    calls: list[int] = []
    manager = OptimisticNonceManager(1, _fetcher({3: 10, 4: 20, 5: 30}, calls), 3, 5)

    await manager.initialize()

    assert sorted(calls) == [3, 4, 5]
    assert [manager.current(i) for i in (3, 4, 5)] == [10, 20, 30]


@pytest.mark.asyncio
async def test_initialize_failure_leaves_key_at_zero():
    manager = OptimisticNonceManager(1, _fetcher({0: 7, 1: RuntimeError("boom")}), 0, 1)

    await manager.initialize()

    assert manager.current(0) == 7
    assert manager.current(1) == 0
    assert await manager.next() == (0, 7)
    assert await manager.next() == (1, 0)


@pytest.mark.asyncio
async def test_round_robin_over_api_keys():
    manager = OptimisticNonceManager(1, _fetcher({3: 0, 4: 0, 5: 0}), 3, 5)

    keys = [(await manager.next())[0] for _ in range(6)]

    assert keys == [3, 4, 5, 3, 4, 5]


@pytest.mark.asyncio
async def test_next_waits_for_initialization_started_by_start():
    gate = asyncio.Event()

    async def slow_fetch(api_key_index: int) -> int:
        await gate.wait()
        return 8

    manager = OptimisticNonceManager(1, slow_fetch, 3, 3)
    manager.start()
    pending = asyncio.ensure_future(manager.next())
    await asyncio.sleep(0)
    assert not pending.done()

    gate.set()

    assert await pending == (3, 8)


@pytest.mark.asyncio
async def test_concurrent_next_never_duplicates():
    manager = OptimisticNonceManager(1, _fetcher({0: 100}), 0, 0)

    results = await asyncio.gather(*(manager.next() for _ in range(50)))

    nonces = [nonce for _, nonce in results]
    assert len(set(nonces)) == 50
    assert sorted(nonces) == list(range(100, 150))
    assert manager.current(0) == 150


@pytest.mark.asyncio
async def test_acknowledge_failure_restores_counter():
    manager = OptimisticNonceManager(1, _fetcher({0: 5}), 0, 0)
    await manager.initialize()

    api_key_index, nonce = await manager.next()
    await manager.acknowledge_failure(api_key_index)

    assert nonce == 5
    assert manager.current(0) == 5


@pytest.mark.asyncio
async def test_acknowledge_failure_never_goes_negative():
    manager = OptimisticNonceManager(1, _fetcher({0: 0}), 0, 0)
    await manager.initialize()

    await manager.acknowledge_failure(0)

    assert manager.current(0) == 0


@pytest.mark.asyncio
async def test_hard_refresh_overrides_local_counter():
    values = {2: 4}
    manager = OptimisticNonceManager(1, _fetcher(values), 2, 2)
    await manager.next()
    assert manager.current(2) == 5

    values[2] = 42
    await manager.hard_refresh(2)

    assert manager.current(2) == 42
    assert await manager.next() == (2, 42)


@pytest.mark.asyncio
async def test_hard_refresh_failure_keeps_counter():
    values: dict = {0: 3}
    manager = OptimisticNonceManager(1, _fetcher(values), 0, 0)
    await manager.next()

    values[0] = RuntimeError("venue down")
    await manager.hard_refresh(0)

    assert manager.current(0) == 4


@pytest.mark.asyncio
async def test_unknown_api_key_raises():
    manager = OptimisticNonceManager(1, _fetcher({0: 0}), 0, 0)

    with pytest.raises(KeyError):
        await manager.acknowledge_failure(9)


@pytest.mark.asyncio
async def test_pessimistic_fetches_every_nonce():
    calls: list[int] = []
    values = {0: 11, 1: 21}
    manager = PessimisticNonceManager(1, _fetcher(values, calls), 0, 1)

    assert await manager.next() == (0, 11)
    assert await manager.next() == (1, 21)
    values[0] = 12
    assert await manager.next() == (0, 12)
    await manager.acknowledge_failure(0)
    await manager.hard_refresh(0)

    assert calls == [0, 1, 0]


def test_invalid_range_raises():
    with pytest.raises(LighterConfigError):
        OptimisticNonceManager(1, _fetcher({}), 4, 3)


def test_factory_builds_requested_policy():
    fetch = _fetcher({0: 0})

    assert isinstance(nonce_manager_factory(NonceManagerType.OPTIMISTIC, 1, fetch, 0, 0), OptimisticNonceManager)
    assert isinstance(nonce_manager_factory("pessimistic", 1, fetch, 0, 0), PessimisticNonceManager)


def test_factory_rejects_unknown_policy():
    with pytest.raises(LighterConfigError, match="unsupported nonce manager type"):
        nonce_manager_factory("eventual", 1, _fetcher({}), 0, 0)


def test_start_without_running_loop_is_noop():
    manager = OptimisticNonceManager(1, _fetcher({0: 1}), 0, 0)

    manager.start()

    assert manager._init_task is None
