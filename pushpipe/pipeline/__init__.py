"""Stage chains evaluated over asyncio.

This module provides:
- Stage, a base class for named stages (any callable also works)
- Pipeline, the ordered and mutable list of stages a stream applies
- run_chain/compose, the sequential sync/async chain runner
"""

from .base import Stage, Pipeline
from .runner import run_chain, compose

__all__ = [
    "Stage",
    "Pipeline",
    "run_chain",
    "compose",
]
