"""Inquisitor - an answer that may still change.

A question handler returns an Inquisitor instead of a value when the real
answer arrives asynchronously, possibly more than once (a page that is still
loading, an eventually-consistent read model). The actor subscribes while
verifying and cancels the subscription when verification succeeds or times
out.

The subscribe procedure receives a notify callable and returns whatever
releases the subscription: a callable, an object with ``cancel()`` (an
asyncio task, a threading.Timer), or None when there is nothing to release.

Usage:
    def subscribe(notify):
        timer = RepeatingTimer(0.01, lambda: notify(page.status()))
        timer.start()
        return timer.cancel

    Inquisitor(subscribe)

    # Or let the inquisitor poll for you inside the event loop
    Inquisitor.polling(api.fetch_status, interval=0.05)
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from ..config import get_validated_config

logger = logging.getLogger(__name__)

Observer = Callable[[Any], Any]


class Subscription:
    """Handle for one live subscription.

    cancel() is idempotent: the underlying release runs exactly once.
    """

    def __init__(self, release: Callable[[], Any] | None = None) -> None:
        self._release = release
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        release, self._release = self._release, None
        if release is not None:
            release()


def _as_subscription(result: Any) -> Subscription:
    if isinstance(result, Subscription):
        return result
    if result is None:
        return Subscription()
    cancel = getattr(result, "cancel", None)
    if callable(cancel):
        return Subscription(cancel)
    if callable(result):
        return Subscription(result)
    raise TypeError(
        f"An inquisitor's subscribe must return an unsubscribe callable, "
        f"an object with cancel(), or None; got {result!r}"
    )


class Inquisitor:
    """Marker for a changing answer.

    Attributes:
        placeholder: Answer used until the first notification arrives
    """

    def __init__(self, subscribe: Callable[[Observer], Any], placeholder: Any = None) -> None:
        if not callable(subscribe):
            raise TypeError("An inquisitor needs a subscribe callable")
        self._subscribe = subscribe
        self.placeholder = placeholder

    def subscribe(self, observer: Observer) -> Subscription:
        """Start receiving answers; each one is passed to observer."""
        return _as_subscription(self._subscribe(observer))

    @classmethod
    def polling(
        cls,
        fetch: Callable[[], Any],
        interval: float | None = None,
        placeholder: Any = None,
    ) -> Inquisitor:
        """Inquisitor that calls fetch every interval seconds and notifies the result.

        fetch may be sync or async. Polling runs as a task on the running
        event loop; cancelling the subscription cancels the task.
        """
        if interval is None:
            interval = get_validated_config().verification.poll_interval

        def subscribe(notify: Observer) -> asyncio.Task[None]:
            return asyncio.get_running_loop().create_task(_poll(fetch, interval, notify))

        return cls(subscribe, placeholder)

    def __repr__(self) -> str:
        return f"Inquisitor(placeholder={self.placeholder!r})"


async def _poll(fetch: Callable[[], Any], interval: float, notify: Observer) -> None:
    while True:
        await asyncio.sleep(interval)
        try:
            value = fetch()
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            logger.warning(f"Polling fetch failed, retrying in {interval}s: {e}")
            continue
        notify(value)
