"""Test helper utilities for pushpipe tests.

This module provides:
- Async stage factories
- A recording listener that tests can await
- Loop draining helpers
"""

import asyncio
from typing import Any, Callable, List


# ==================== Async Stage Helpers ====================

def delayed(transform: Callable[[Any], Any], seconds: float = 0.0):
    """Create an async stage that applies transform after a delay.

    Args:
        transform: Synchronous function applied to the input
        seconds: Delay before resolving

    Returns:
        Async function usable as a stage

    Example:
        stream = create(delayed(lambda n: n + 1, 0.2))
    """
    async def _delayed(value):
        await asyncio.sleep(seconds)
        return transform(value)
    return _delayed


def rejecting(exception: Exception, seconds: float = 0.0):
    """Create an async stage that raises exception after a delay."""
    async def _rejecting(value):
        await asyncio.sleep(seconds)
        raise exception
    return _rejecting


async def drain(rounds: int = 5) -> None:
    """Let the event loop run pending callbacks without sleeping for real."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ==================== Listener Helpers ====================

class Recorder:
    """Listener that records every call and can be awaited.

    Example:
        values = Recorder()
        stream.on.value(values)
        stream.push(1)
        assert await values.wait_for(1) == [1]
    """

    def __init__(self, returns: Any = None):
        self.calls: List[Any] = []
        self.returns = returns
        self._changed = asyncio.Event()

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args[0] if len(args) == 1 else args)
        self._changed.set()
        return self.returns

    @property
    def count(self) -> int:
        return len(self.calls)

    async def wait_for(self, count: int, timeout: float = 1.0) -> List[Any]:
        """Wait until at least count calls were recorded.

        Raises:
            asyncio.TimeoutError: If the calls do not arrive in time
        """
        async def _wait():
            while len(self.calls) < count:
                self._changed.clear()
                await self._changed.wait()

        await asyncio.wait_for(_wait(), timeout)
        return list(self.calls)
