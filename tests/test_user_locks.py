import asyncio
import gc

import pytest

from trips.services.user_locks import UserLockRegistry


@pytest.mark.asyncio
async def test_same_user_shares_one_lock() -> None:
    registry = UserLockRegistry()

    assert registry.lock_for("a") is registry.lock_for("a")
    assert registry.lock_for("a") is not registry.lock_for("b")


@pytest.mark.asyncio
async def test_hold_serializes_one_user() -> None:
    registry = UserLockRegistry()
    order: list[str] = []

    async def worker(name: str) -> None:
        async with registry.hold("a"):
            order.append(f"{name}-in")
            await asyncio.sleep(0.01)
            order.append(f"{name}-out")

    await asyncio.gather(worker("first"), worker("second"))

    assert order == ["first-in", "first-out", "second-in", "second-out"]


@pytest.mark.asyncio
async def test_unused_locks_are_released() -> None:
    registry = UserLockRegistry()
    async with registry.hold("a"):
        assert len(registry) == 1

    gc.collect()
    assert len(registry) == 0
