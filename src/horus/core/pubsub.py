# src/horus/core/pubsub.py

from __future__ import annotations

"""
Snapshot publish/subscribe.

Every delivery is a full, immutable snapshot (a tuple of frozen records),
never a diff. `latest` is updated synchronously at publish time.

A subscription either queues every snapshot for consumers that iterate, or
(latest_only) holds at most one unread snapshot, replacing it on each
publish. Render-on-demand readers that only look at `latest` use the second
mode so nothing piles up.
"""

import asyncio
import logging
from collections.abc import Hashable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CLOSED = object()


class Subscription(Generic[T]):
    """Async iterator of snapshots for one scope (a date id, or all dates)."""

    def __init__(self, hub: SnapshotHub[T], key: Hashable, *, latest_only: bool = False) -> None:
        self._hub = hub
        self._key = key
        self._latest_only = latest_only
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=1 if latest_only else 0)
        self._closed = False
        self._delivered = False
        self.latest: tuple[T, ...] = ()

    @property
    def key(self) -> Hashable:
        return self._key

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Snapshots delivered but not yet read through get()/iteration."""
        return self._queue.qsize()

    def _put(self, item: object) -> None:
        if self._latest_only and self._queue.full():
            # Replace the unread snapshot.
            self._queue.get_nowait()
        self._queue.put_nowait(item)

    def _deliver(self, snapshot: tuple[T, ...]) -> None:
        if self._closed:
            return
        self._delivered = True
        self.latest = snapshot
        self._put(snapshot)

    def seed(self, snapshot: tuple[T, ...]) -> None:
        """
        First snapshot, read after the subscription was registered.

        Skipped if a publish already got here: that one was read after a
        commit and is at least as fresh.
        """
        if self._delivered:
            return
        self._deliver(snapshot)

    async def get(self) -> tuple[T, ...]:
        """Wait for the next snapshot. Raises StopAsyncIteration once closed and drained."""
        item = await self._queue.get()
        if item is _CLOSED:
            self._put(_CLOSED)
            raise StopAsyncIteration
        return item  # type: ignore[return-value]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._hub._remove(self)
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> Subscription[T]:
        return self

    async def __anext__(self) -> tuple[T, ...]:
        return await self.get()

    async def __aenter__(self) -> Subscription[T]:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.close()


class SnapshotHub(Generic[T]):
    """Keeps subscribers per scope key and fans snapshots out to them."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._subs: dict[Hashable, list[Subscription[T]]] = {}

    def subscribe(
        self,
        key: Hashable,
        initial: tuple[T, ...] | None = None,
        *,
        latest_only: bool = False,
    ) -> Subscription[T]:
        """Register a subscriber. Without `initial`, the caller seeds it later."""
        sub = Subscription(self, key, latest_only=latest_only)
        self._subs.setdefault(key, []).append(sub)
        if initial is not None:
            sub.seed(initial)
        logger.debug("%s: subscribed key=%s (now %d)", self._name, key, len(self._subs[key]))
        return sub

    def has_subscribers(self, key: Hashable) -> bool:
        return bool(self._subs.get(key))

    def publish(self, key: Hashable, snapshot: tuple[T, ...]) -> int:
        """Deliver to every subscriber of `key`. Returns how many received it."""
        subs = list(self._subs.get(key, ()))
        for sub in subs:
            sub._deliver(snapshot)
        return len(subs)

    def close_key(self, key: Hashable) -> None:
        for sub in list(self._subs.get(key, ())):
            sub.close()

    def close_all(self) -> None:
        for key in list(self._subs):
            self.close_key(key)

    def _remove(self, sub: Subscription[T]) -> None:
        subs = self._subs.get(sub.key)
        if not subs:
            return
        try:
            subs.remove(sub)
        except ValueError:
            return
        if not subs:
            del self._subs[sub.key]
