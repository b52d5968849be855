import asyncio
from contextlib import asynccontextmanager
from typing import Callable, List, Optional, Set

from .emitter import StepEmitter
from .entities import CallFrame


class CallFrameTracer:
    """Visible call stack for recursive producers.

    Frames are pushed on entry, flipped to ``completed`` on return and removed
    after a grace delay. Removals run on ``loop.call_later`` outside the
    producer's own suspend chain, so each one carries the id of the Run that
    scheduled it and is dropped if that Run is no longer current.
    """

    def __init__(self, is_current: Callable[[int], bool]):
        self._is_current = is_current
        self._frames: List[CallFrame] = []
        self._next_id = 0
        self._pending: Set[asyncio.TimerHandle] = set()
        self._step: Optional[StepEmitter] = None
        self.grace = 0.0

    @property
    def frames(self):
        return tuple(self._frames)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def bind(self, step: StepEmitter, grace: float) -> None:
        self._step = step
        self.grace = grace

    def reset(self) -> None:
        for handle in self._pending:
            handle.cancel()
        self._pending.clear()
        self._frames = []
        self._next_id = 0
        self._step = None

    def _publish(self) -> None:
        if self._step is not None:
            self._step.publish(call_stack=tuple(self._frames))

    def enter(self, function: str, params: str) -> int:
        frame = CallFrame(id=self._next_id, function=function, params=params)
        self._next_id += 1
        self._frames.append(frame)
        self._publish()
        return frame.id

    def exit(self, frame_id: int) -> None:
        self._frames = [f.with_state("completed") if f.id == frame_id else f for f in self._frames]
        self._publish()

        run_id = self._step.run.id if self._step is not None else -1
        loop = asyncio.get_running_loop()
        handle: Optional[asyncio.TimerHandle] = None

        def fire():
            self._pending.discard(handle)
            self._remove(run_id, frame_id)

        handle = loop.call_later(self.grace, fire)
        self._pending.add(handle)

    def _remove(self, run_id: int, frame_id: int) -> None:
        if not self._is_current(run_id):
            return
        self._frames = [f for f in self._frames if f.id != frame_id]
        self._publish()

    @asynccontextmanager
    async def frame(self, function: str, params: str):
        frame_id = self.enter(function, params)
        await self._step.suspend()
        yield frame_id
        self.exit(frame_id)
