"""Out-of-band signals returned by stages and listeners."""

from enum import Enum


class Signal(Enum):
    """Control values that can never be mistaken for pipeline data."""
    CANCEL = "cancel"             # Stage result: drop the current chain
    UNSUBSCRIBE = "unsubscribe"   # Listener result: remove this listener

    def __repr__(self) -> str:
        return f"Signal.{self.name}"


def cancel() -> Signal:
    """
    Return the cancellation marker.

    A stage returning this value stops the chain it runs in. The push that
    started the chain produces neither a value nor an error dispatch.

    Example:
        stream = create(lambda n: cancel() if n > 50 else n)
    """
    return Signal.CANCEL


def off() -> Signal:
    """
    Return the unsubscribe marker.

    A listener returning this value is removed from the registry it was
    invoked from, right after the call.
    """
    return Signal.UNSUBSCRIBE


unsubscribe_signal = off
