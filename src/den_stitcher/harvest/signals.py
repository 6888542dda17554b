"""
Single-resolution "page finished loading" signals keyed by context.

A waiter is armed before a navigation is issued so the load event can
never be missed, resolves at most once, and is always removed from the
hub afterwards, whether it resolved, timed out or was cancelled.
"""

from __future__ import annotations

import asyncio

from den_stitcher.logging_utils import logger


class ReadyWaiter:
    """One pending load signal for one browser context."""

    def __init__(self, hub: ReadySignalHub, context_id: str) -> None:
        self.context_id = context_id
        self._hub = hub
        self._future: asyncio.Future[None] = (
            asyncio.get_running_loop().create_future()
        )

    @property
    def resolved(self) -> bool:
        """True once the load signal arrived."""
        return self._future.done() and not self._future.cancelled()

    def _resolve(self) -> bool:
        if self._future.done():
            return False
        self._future.set_result(None)
        return True

    async def wait(self, timeout_s: float | None) -> None:
        """
        Block until the context signals it finished loading.

        Raises:
            TimeoutError: If no signal arrives within timeout_s.

        """
        try:
            await asyncio.wait_for(self._future, timeout_s)
        finally:
            self._hub.discard(self)

    def cancel(self) -> None:
        """Stop waiting and deregister."""
        self._future.cancel()
        self._hub.discard(self)


class ReadySignalHub:
    """Route load notifications to the waiters of the matching context."""

    def __init__(self) -> None:
        self._waiters: dict[str, list[ReadyWaiter]] = {}

    def arm(self, context_id: str) -> ReadyWaiter:
        """Register and return a waiter for the next load of context_id."""
        waiter = ReadyWaiter(self, context_id)
        self._waiters.setdefault(context_id, []).append(waiter)
        return waiter

    def notify(self, context_id: str) -> int:
        """
        Signal that context_id finished loading.

        Resolves and removes every waiter armed for that context; others
        are untouched. Returns how many waiters were resolved.
        """
        waiters = self._waiters.pop(context_id, [])
        resolved = sum(1 for w in waiters if w._resolve())  # noqa: SLF001
        if resolved:
            logger.debug("Context %s ready (%d waiter(s))",
                         context_id, resolved)
        return resolved

    def discard(self, waiter: ReadyWaiter) -> None:
        """Remove waiter if it is still registered."""
        waiters = self._waiters.get(waiter.context_id)
        if not waiters:
            return
        if waiter in waiters:
            waiters.remove(waiter)
        if not waiters:
            del self._waiters[waiter.context_id]

    def pending(self, context_id: str | None = None) -> int:
        """Count registered waiters, optionally for one context."""
        if context_id is not None:
            return len(self._waiters.get(context_id, ()))
        return sum(len(ws) for ws in self._waiters.values())
