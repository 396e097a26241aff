# tests/test_pubsub.py

from __future__ import annotations

import asyncio

import pytest

from horus.core.pubsub import SnapshotHub


@pytest.mark.asyncio
async def test_publish_reaches_only_matching_key() -> None:
    hub: SnapshotHub[int] = SnapshotHub("test")
    a = hub.subscribe(1, (1,))
    b = hub.subscribe(2, (2,))

    assert hub.publish(1, (1, 10)) == 1

    assert await a.get() == (1,)
    assert await a.get() == (1, 10)
    assert a.latest == (1, 10)
    assert b.latest == (2,)


@pytest.mark.asyncio
async def test_close_ends_iteration_and_unsubscribes() -> None:
    hub: SnapshotHub[str] = SnapshotHub("test")
    seen: list[tuple[str, ...]] = []

    async with hub.subscribe("k", ()) as sub:

        async def consume() -> None:
            async for snap in sub:
                seen.append(snap)

        consumer = asyncio.create_task(consume())
        hub.publish("k", ("x",))
        await asyncio.sleep(0)
        sub.close()
        await asyncio.wait_for(consumer, timeout=1)

    assert seen == [(), ("x",)]
    assert not hub.has_subscribers("k")
    assert hub.publish("k", ("y",)) == 0


@pytest.mark.asyncio
async def test_latest_only_replaces_unread_snapshot() -> None:
    hub: SnapshotHub[int] = SnapshotHub("test")
    sub = hub.subscribe("k", (0,), latest_only=True)

    for n in range(1, 50):
        hub.publish("k", tuple(range(n)))

    assert sub.pending == 1
    assert sub.latest == tuple(range(49))
    assert await sub.get() == tuple(range(49))
    assert sub.pending == 0

    sub.close()
    with pytest.raises(StopAsyncIteration):
        await sub.get()


@pytest.mark.asyncio
async def test_seed_is_skipped_after_a_publish() -> None:
    hub: SnapshotHub[str] = SnapshotHub("test")
    sub = hub.subscribe("k")

    hub.publish("k", ("fresh",))
    sub.seed(("stale",))

    assert sub.latest == ("fresh",)
    assert await sub.get() == ("fresh",)
    assert sub.pending == 0
