"""Listener registries used by streams for value, error and end events."""

import logging
from enum import Enum
from types import MethodType
from typing import Any, Callable, Dict, Hashable, Iterator, List

from .signals import Signal

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class ListenerKind(str, Enum):
    """Events a stream dispatches."""
    VALUE = "value"
    ERROR = "error"
    END = "end"

    @classmethod
    def parse(cls, kind: "str | ListenerKind") -> "ListenerKind":
        """
        Normalize a kind given as string or enum member.

        Raises:
            ValueError: If kind is not one of value, error, end
        """
        try:
            return cls(kind)
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown listener kind: {kind!r} (expected one of {valid})") from None


def ensure_callable(kind: ListenerKind, callback: object) -> None:
    """
    Raises:
        TypeError: If callback cannot be used as a listener
    """
    if not callable(callback):
        raise TypeError(f"{kind.value} listener must be callable, got {type(callback).__name__}")


def listener_key(callback: Listener) -> Hashable:
    """
    Identity key of a listener.

    Bound methods are rebuilt on every attribute access, so they are keyed
    by the identity of their object and function instead.
    """
    if isinstance(callback, MethodType):
        return (id(callback.__self__), id(callback.__func__))
    return id(callback)


class ListenerRegistry:
    """
    Insertion-ordered set of callbacks.

    Callbacks are keyed by identity (see listener_key), so adding the same
    callback twice keeps a single registration at its original position,
    while distinct callbacks that compare equal stay separate. Callbacks
    do not need to be hashable.
    """

    def __init__(self, kind: ListenerKind):
        self.kind = kind
        self._callbacks: Dict[Hashable, Listener] = {}

    def add(self, callback: Listener) -> None:
        ensure_callable(self.kind, callback)
        self._callbacks.setdefault(listener_key(callback), callback)

    def remove(self, callback: Listener) -> bool:
        """Remove callback. Returns False if it was not registered."""
        return self._callbacks.pop(listener_key(callback), None) is not None

    def clear(self) -> None:
        self._callbacks.clear()

    def dispatch(self, *args: Any) -> int:
        """
        Call every registered callback with args.

        Iterates over a snapshot so callbacks may subscribe, unsubscribe or
        clear the registry while it is dispatching. Callbacks removed before
        their turn are skipped. A callback returning Signal.UNSUBSCRIBE is
        removed right after its call.

        Exceptions raised by callbacks propagate to the caller and stop the
        dispatch.

        Returns:
            Number of callbacks invoked
        """
        invoked = 0
        for key, callback in list(self._callbacks.items()):
            if self._callbacks.get(key) is not callback:
                continue
            invoked += 1
            if callback(*args) is Signal.UNSUBSCRIBE:
                if self._callbacks.get(key) is callback:
                    del self._callbacks[key]
                logger.debug(f"{self.kind.value} listener unsubscribed itself")
        return invoked

    def callbacks(self) -> List[Listener]:
        return list(self._callbacks.values())

    def __contains__(self, callback: object) -> bool:
        return listener_key(callback) in self._callbacks

    def __iter__(self) -> Iterator[Listener]:
        return iter(self.callbacks())

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"ListenerRegistry(kind={self.kind.value!r}, listeners={len(self)})"
