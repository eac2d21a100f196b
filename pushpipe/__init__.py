"""pushpipe: push values through mutable chains of sync and async stages.

Key Modules:
    - stream: Stream engine (push, end, connect, fork, listeners)
    - pipeline: Stage base class, Pipeline and the chain runner
    - listeners: Listener registries and dispatch
    - signals: cancel() and off() markers
    - registry: Process-wide extension registry
    - config: Environment-driven settings and logging setup

Example:
    import asyncio
    from pushpipe import create, cancel

    async def main():
        stream = create(lambda n: cancel() if n < 0 else n, lambda n: n * 2)
        stream.on.value(print)
        stream.push(-1).push(21)   # prints 42
        await asyncio.sleep(0)

    asyncio.run(main())
"""

__version__ = "1.0.0"

from .config import StreamConfig, configure_logging, get_config
from .errors import (
    ExtensionCollisionError,
    ExtensionError,
    HandlerNotRegisteredError,
    InvalidExtensionError,
    PushpipeError,
)
from .listeners import ListenerKind, ListenerRegistry
from .pipeline import Pipeline, Stage, compose, run_chain
from .registry import (
    ExtensionRegistry,
    get_extension,
    get_registry,
    install,
    list_extensions,
    load_extensions,
)
from .signals import Signal, cancel, off, unsubscribe_signal
from .stream import Step, Stream, StreamState, create

__all__ = [
    # Streams
    "Stream",
    "StreamState",
    "Step",
    "create",
    # Pipeline
    "Stage",
    "Pipeline",
    "run_chain",
    "compose",
    # Listeners
    "ListenerKind",
    "ListenerRegistry",
    # Signals
    "Signal",
    "cancel",
    "off",
    "unsubscribe_signal",
    # Extensions
    "ExtensionRegistry",
    "install",
    "get_extension",
    "get_registry",
    "list_extensions",
    "load_extensions",
    # Configuration
    "StreamConfig",
    "configure_logging",
    "get_config",
    # Errors
    "PushpipeError",
    "HandlerNotRegisteredError",
    "ExtensionError",
    "ExtensionCollisionError",
    "InvalidExtensionError",
]
