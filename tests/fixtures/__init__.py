"""Shared test helpers for pushpipe tests.

This package provides:
- Listener recorders that can be awaited
- Async stage factories (delays, rejections)
"""

__all__ = [
    "test_helpers",
]
