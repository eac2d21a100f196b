"""Sequential runner for chains of sync and async stages.

A chain is evaluated eagerly: synchronous stages run inside the call to
run_chain() and evaluation only suspends when a stage hands back an
awaitable. The result is an asyncio.Future that:

    - resolves with the value produced by the last stage
    - fails with the first exception raised (or awaited) by a stage
    - stays pending forever when a stage returns cancel()

Usage:
    from pushpipe.pipeline.runner import run_chain, compose

    async def double_later(n):
        await asyncio.sleep(0.1)
        return n * 2

    result = await run_chain(1, [lambda n: n + 1, double_later])  # 4

    # Right to left, the last argument seeds the chain
    result = await compose(double_later, lambda n: n + 1, 1)  # 4
"""

import asyncio
import inspect
import logging
from typing import Any, Iterable, Optional

from ..signals import Signal

logger = logging.getLogger(__name__)


def run_chain(
    initial: Any,
    stages: Iterable[Any],
    *,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> asyncio.Future:
    """
    Thread a value through stages in order.

    Args:
        initial: Starting value (None is a legitimate value)
        stages: Callables or literals. A literal replaces the current value,
                a callable is called with it.
        loop: Event loop owning the result future (default: running loop)

    Returns:
        Future with the chain result. Never settles if the chain is cancelled.

    Raises:
        RuntimeError: If no loop is given and none is running
    """
    loop = loop or asyncio.get_running_loop()
    future = loop.create_future()
    pending = iter(tuple(stages))

    def advance(value: Any) -> None:
        for stage in pending:
            if future.done():
                return
            try:
                result = stage(value) if callable(stage) else stage
            except Exception as e:
                future.set_exception(_as_chain_error(e, stage))
                return

            if result is Signal.CANCEL:
                logger.debug(f"Chain cancelled by {describe_stage(stage)}")
                return

            if inspect.isawaitable(result):
                step = asyncio.ensure_future(result, loop=loop)
                step.add_done_callback(resume)
                return

            value = result

        if not future.done():
            future.set_result(value)

    def resume(step: asyncio.Future) -> None:
        if future.done():
            # Owner gave up on the chain; still consume the step's outcome
            if not step.cancelled():
                step.exception()
            return

        if step.cancelled():
            future.cancel()
            return

        error = step.exception()
        if error is not None:
            future.set_exception(error)
            return

        value = step.result()
        if value is Signal.CANCEL:
            logger.debug("Chain cancelled by an awaited stage")
            return

        advance(value)

    advance(initial)
    return future


def compose(*stages: Any, loop: Optional[asyncio.AbstractEventLoop] = None) -> asyncio.Future:
    """
    Same as run_chain() with the stages read from right to left.

    The rightmost entry runs first; when it is a literal it simply seeds
    the chain, when it is a callable it receives None.
    """
    return run_chain(None, reversed(stages), loop=loop)


def _as_chain_error(error: Exception, stage: Any) -> Exception:
    """
    Make a stage exception storable in a Future.

    Futures refuse StopIteration, so it is wrapped in a RuntimeError (the
    same conversion coroutines apply to it) with the original as __cause__.
    """
    if isinstance(error, StopIteration):
        wrapped = RuntimeError(f"Stage {describe_stage(stage)} raised StopIteration")
        wrapped.__cause__ = error
        return wrapped
    return error


def describe_stage(stage: Any) -> str:
    """Human readable stage name for log lines."""
    name = getattr(stage, "name", None)
    if isinstance(name, str):
        return name
    return getattr(stage, "__name__", repr(stage))
