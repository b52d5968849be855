import asyncio
from typing import Any, Callable, Dict

from .errors import RunCancelled
from .run import Run


PublishSink = Callable[[Run, Dict[str, Any]], bool]


class StepEmitter:
    """Publish/suspend primitive handed to a producer for one Run.

    ``publish`` makes new views visible immediately. ``suspend`` yields to the
    event loop for one step delay and is the only place a producer observes
    cancellation.
    """

    def __init__(self, run: Run, delay: float, sink: PublishSink):
        self.run = run
        self.delay = delay
        self._sink = sink

    def publish(self, **views: Any) -> bool:
        return self._sink(self.run, views)

    def checkpoint(self) -> None:
        if self.run.cancel_requested:
            raise RunCancelled(self.run.id)

    async def suspend(self, factor: float = 1.0) -> None:
        self.checkpoint()
        await asyncio.sleep(self.delay * factor)
        self.checkpoint()

    async def emit(self, factor: float = 1.0, **views: Any) -> None:
        self.publish(**views)
        await self.suspend(factor)
