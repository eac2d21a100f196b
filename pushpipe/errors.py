"""Exceptions raised synchronously by pushpipe operations."""

from typing import Any, Callable


class PushpipeError(Exception):
    """Base class for every error raised by pushpipe."""


class HandlerNotRegisteredError(PushpipeError, LookupError):
    """Raised when unsubscribing a callback that is not registered."""
    def __init__(self, kind: str, handler: Callable[..., Any]):
        name = getattr(handler, "__name__", repr(handler))
        super().__init__(f"Couldn't remove {kind} handler {name}: not registered")
        self.kind = kind
        self.handler = handler


class ExtensionError(PushpipeError):
    """Base class for extension registry failures."""


class ExtensionCollisionError(ExtensionError):
    """Raised when installing an extension under a name already in use."""
    def __init__(self, name: str):
        super().__init__(
            f"{name} is already an installed extension, please provide a different name"
        )
        self.name = name


class InvalidExtensionError(ExtensionError, ValueError):
    """Raised when an extension name or function is unusable."""
