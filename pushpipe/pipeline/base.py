import asyncio
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from .runner import run_chain, describe_stage


class Stage(ABC):
    """Base class for named stages. Plain callables work as stages too; subclass this when a stage needs a name or state."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def process(self, value: Any) -> Any:
        """
        Transform a value.

        May return a value, an awaitable (e.g. when declared async def) or
        cancel() to drop the chain.
        """
        pass

    def __call__(self, value: Any) -> Any:
        return self.process(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class Pipeline:
    """Ordered, mutable list of stages. Pushes read a snapshot, so appending never affects a running chain."""

    def __init__(self, stages: Optional[Iterable[Any]] = None):
        self.stages: List[Any] = list(stages or [])

    def append(self, stage: Any) -> "Pipeline":
        """Append a stage in place."""
        self.stages.append(stage)
        return self

    def copy(self) -> "Pipeline":
        """Independent pipeline with the same stages (used by Stream.fork)."""
        return Pipeline(self.stages)

    def snapshot(self) -> Tuple[Any, ...]:
        return tuple(self.stages)

    def clear(self) -> None:
        self.stages.clear()

    def execute(
        self, value: Any, *, loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> asyncio.Future:
        """Run value through the current stages (see run_chain)."""
        return run_chain(value, self.snapshot(), loop=loop)

    def __len__(self) -> int:
        return len(self.stages)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        stage_names = [describe_stage(s) for s in self.stages]
        return f"Pipeline(stages={stage_names})"
