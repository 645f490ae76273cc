import asyncio
import gc

import pytest

from feeledger.core.locks import KeyedLocks


@pytest.mark.asyncio
async def test_same_key_is_serialized() -> None:
    locks = KeyedLocks()
    events = []

    async def worker(name: str) -> None:
        async with locks.hold("student-1"):
            events.append(f"{name}-start")
            await asyncio.sleep(0.01)
            events.append(f"{name}-end")

    await asyncio.gather(worker("a"), worker("b"))
    assert events in (
        ["a-start", "a-end", "b-start", "b-end"],
        ["b-start", "b-end", "a-start", "a-end"],
    )


@pytest.mark.asyncio
async def test_different_keys_run_concurrently() -> None:
    locks = KeyedLocks()
    inside = []
    both_inside = asyncio.Event()

    async def worker(key: str) -> None:
        async with locks.hold(key):
            inside.append(key)
            if len(inside) == 2:
                both_inside.set()
            await asyncio.wait_for(both_inside.wait(), timeout=1)

    await asyncio.gather(worker("student-1"), worker("student-2"))
    assert sorted(inside) == ["student-1", "student-2"]


@pytest.mark.asyncio
async def test_unused_locks_are_released() -> None:
    locks = KeyedLocks()
    async with locks.hold("student-1"):
        assert len(locks) == 1
    gc.collect()
    assert len(locks) == 0
