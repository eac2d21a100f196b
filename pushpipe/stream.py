"""Push-based streams running values through a mutable stage pipeline.

A stream owns a Pipeline, three listener registries (value, error, end)
and a lifecycle state. Every push starts an independent chain over the
pipeline as it is at push time; when the chain settles its result goes to
the value listeners, its exception to the error listeners, and a cancelled
chain goes nowhere.

Usage:
    stream = create(lambda n: n + 1)
    stream.connect(lambda n: n * 2)

    stream.on.value(print).on.error(log_error)
    stream.push(1)      # prints 4 once the loop runs the dispatch

    fork = stream.fork()  # same stages, no listeners, independent from now on
    stream.end()          # end listeners fire, everything is released

Notes:
    - push() never raises chain errors and never blocks; it needs a running
      event loop.
    - Results of different pushes may be delivered in any order.
    - Stages must not connect() to the stream they run in.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

from .config import StreamConfig, get_config
from .errors import HandlerNotRegisteredError
from .listeners import Listener, ListenerKind, ListenerRegistry, ensure_callable
from .pipeline import Pipeline

logger = logging.getLogger(__name__)


class StreamState(Enum):
    """Stream lifecycle. ENDED is terminal."""
    ACTIVE = "active"
    ENDED = "ended"


class Step(NamedTuple):
    """Outcome of feeding one value to a stream without dispatching it."""
    result: Optional[asyncio.Future]
    done: bool


class _ListenerOps:
    """Exposes value/error/end shortcuts for subscribe or unsubscribe."""

    def __init__(self, operation: Callable[[ListenerKind, Listener], "Stream"]):
        self._operation = operation

    def value(self, callback: Listener) -> "Stream":
        return self._operation(ListenerKind.VALUE, callback)

    def error(self, callback: Listener) -> "Stream":
        return self._operation(ListenerKind.ERROR, callback)

    def end(self, callback: Listener) -> "Stream":
        return self._operation(ListenerKind.END, callback)


class Stream:
    """
    Mutable stream of values flowing through a pipeline of stages.

    All mutating methods except fork() return the stream itself so calls
    can be chained.
    """

    def __init__(self, *stages: Any, config: Optional[StreamConfig] = None):
        self._pipeline = Pipeline(stages)
        self._registries: Dict[ListenerKind, ListenerRegistry] = {
            kind: ListenerRegistry(kind) for kind in ListenerKind
        }
        self._state = StreamState.ACTIVE
        self._config = config or get_config()

        self.on = _ListenerOps(self.subscribe)
        self.off = _ListenerOps(self.unsubscribe)

    # ==================== Lifecycle ====================

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def ended(self) -> bool:
        return self._state is StreamState.ENDED

    def step(self, value: Any) -> Step:
        """
        Run value through the current pipeline without dispatching.

        Returns:
            Step with the chain future, or Step(None, True) once the stream
            has ended
        """
        if self.ended:
            logger.debug("Value ignored: stream has ended")
            return Step(result=None, done=True)

        return Step(result=self._pipeline.execute(value), done=False)

    def push(self, value: Any) -> "Stream":
        """
        Push a value into the stream.

        Synchronous stages run before this returns; the result is delivered
        to listeners later from the event loop. Pushing into an ended stream
        does nothing.
        """
        result, done = self.step(value)
        if not done:
            result.add_done_callback(self._settle)
        return self

    def end(self) -> "Stream":
        """
        End the stream.

        End listeners are called once (without arguments), then the pipeline
        and every registry are cleared. Calling end() again, including from
        inside a listener, does nothing. If an end listener raises, cleanup
        still happens and the exception propagates.
        """
        if self.ended:
            return self

        self._state = StreamState.ENDED
        try:
            self._registries[ListenerKind.END].dispatch()
        finally:
            self._pipeline.clear()
            for registry in self._registries.values():
                registry.clear()
            logger.debug("Stream ended")

        return self

    def fork(self) -> "Stream":
        """Return a new active stream starting with a copy of this pipeline and no listeners."""
        forked = Stream(config=self._config)
        forked._pipeline = self._pipeline.copy()
        logger.debug(f"Forked stream with {len(forked)} stages")
        return forked

    # ==================== Pipeline ====================

    def connect(self, stage: Any) -> "Stream":
        """Append a stage. Chains already running keep their own stage list."""
        if self.ended:
            logger.debug("connect() ignored: stream has ended")
            return self

        self._pipeline.append(stage)
        return self

    @property
    def pipeline(self) -> Tuple[Any, ...]:
        """Snapshot of the current stages."""
        return self._pipeline.snapshot()

    def __len__(self) -> int:
        return len(self._pipeline)

    # ==================== Listeners ====================

    def subscribe(self, kind: "str | ListenerKind", callback: Listener) -> "Stream":
        """
        Register a listener.

        Args:
            kind: "value", "error" or "end"
            callback: Called with the chain result (value), the exception
                      (error), or no arguments (end). Returning off() removes it.

        Raises:
            ValueError: Unknown kind
            TypeError: callback is not callable
        """
        registry = self._registries[ListenerKind.parse(kind)]
        if self.ended:
            ensure_callable(registry.kind, callback)
            logger.debug(f"{registry.kind.value} listener ignored: stream has ended")
            return self

        registry.add(callback)
        return self

    def unsubscribe(self, kind: "str | ListenerKind", callback: Listener) -> "Stream":
        """
        Remove a listener by reference.

        Raises:
            ValueError: Unknown kind
            HandlerNotRegisteredError: callback is not registered for kind
        """
        registry = self._registries[ListenerKind.parse(kind)]
        if not registry.remove(callback):
            raise HandlerNotRegisteredError(registry.kind.value, callback)
        return self

    def listener_count(self, kind: "str | ListenerKind") -> int:
        return len(self._registries[ListenerKind.parse(kind)])

    def _settle(self, future: asyncio.Future) -> None:
        """Deliver a settled chain to the matching registry."""
        if future.cancelled():
            logger.debug("Chain cancelled, nothing to dispatch")
            return

        error = future.exception()

        if self.ended:
            logger.debug("Chain settled after end(), result dropped")
            return

        if error is not None:
            errors = self._registries[ListenerKind.ERROR]
            if not errors and self._config.warn_unhandled_errors:
                logger.warning(
                    f"Stream chain failed with no error listener: {error!r}",
                    exc_info=error,
                )
            errors.dispatch(error)
            return

        self._registries[ListenerKind.VALUE].dispatch(future.result())

    def __repr__(self) -> str:
        return (
            f"Stream(state={self._state.value}, stages={len(self)}, "
            f"value={self.listener_count(ListenerKind.VALUE)}, "
            f"error={self.listener_count(ListenerKind.ERROR)}, "
            f"end={self.listener_count(ListenerKind.END)})"
        )


def create(*stages: Any) -> Stream:
    """Create an active stream pre-seeded with stages."""
    return Stream(*stages)
