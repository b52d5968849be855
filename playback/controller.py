"""
Playback controller.

Owns the lifecycle of Runs over one domain: at most one Run is live, starts
while a Run is live are dropped, cancellation is cooperative, and publishes
from any Run other than the current one never reach the head frame.
"""

import asyncio
import itertools
import sys
from typing import Any, Callable, Dict, List, Optional

from .call_frames import CallFrameTracer
from .config import PlaybackConfig
from .domain import Domain, RunContext
from .emitter import StepEmitter
from .entities import Frame
from .errors import InvalidParameterError, RunCancelled
from .run import Run, RunState


FrameListener = Callable[[Frame], None]
RunningListener = Callable[[bool], None]


class PlaybackController:

    def __init__(self, domain: Domain, config: Optional[PlaybackConfig] = None):
        self.domain = domain
        self.config = config or PlaybackConfig.from_env()
        self.speed = self.config.default_speed
        self.frames = CallFrameTracer(self._is_current)

        self._run_ids = itertools.count(1)
        self._run: Optional[Run] = None
        self._seq = 0
        self._head = Frame(run_id=0, seq=0, views=domain.initial_views())
        self._frame_listeners: List[FrameListener] = []
        self._running_listeners: List[RunningListener] = []

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def head(self) -> Frame:
        return self._head

    @property
    def run(self) -> Optional[Run]:
        return self._run

    @property
    def running(self) -> bool:
        return self._run is not None and self._run.live

    @property
    def result(self) -> Optional[str]:
        if self._run is None or self._run.state != RunState.COMPLETED:
            return None
        return self._run.outcome.summary

    def subscribe(self, on_frame: FrameListener = None, on_running: RunningListener = None) -> None:
        if on_frame is not None:
            self._frame_listeners.append(on_frame)
        if on_running is not None:
            self._running_listeners.append(on_running)

    def set_speed(self, speed: int) -> bool:
        if self.running:
            return False
        self.speed = max(1, min(100, int(speed)))
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, algorithm, params: Dict[str, Any] = None, speed: int = None) -> Optional[Run]:
        """Begin a new Run, or return None if one is already live.

        Raises InvalidParameterError (leaving all state untouched) when the
        algorithm or its parameters are refused.
        """
        if self.running:
            print(f"[controller] Run {self._run.id} is still live, start({algorithm}) ignored.")
            return None

        variant, producer, resolved = self.domain.resolve(algorithm, params)
        if speed is not None:
            self.set_speed(speed)

        self.frames.reset()
        run = Run(id=next(self._run_ids), algorithm=variant.value, params=resolved, speed=self.speed)
        self._run = run
        self._set_head(Frame(run_id=run.id, seq=0, views=self.domain.initial_views(resolved)), reset_seq=True)

        delay = self.config.delay_seconds(run.speed)
        step = StepEmitter(run, delay, self._accept)
        self.frames.bind(step, delay * self.config.grace_factor)
        ctx = RunContext(step=step, frames=self.frames, params=resolved)

        run.state = RunState.RUNNING
        run.task = asyncio.get_running_loop().create_task(self._drive(run, producer, ctx))
        self._notify_running(True)
        return run

    def cancel(self) -> bool:
        if not self.running:
            return False
        self._run.cancel_requested = True
        return True

    def reset(self) -> bool:
        if self.running:
            return False
        self.frames.reset()
        self._run = None
        self._set_head(Frame(run_id=0, seq=0, views=self.domain.initial_views()), reset_seq=True)
        return True

    def load(self, *args, **kwargs) -> bool:
        """Replace the domain structure (new array, graph or tree) while idle."""
        if self.running:
            return False
        loader = getattr(self.domain, "load", None)
        if loader is None:
            raise InvalidParameterError(f"{self.domain.name} has no loadable structure")
        loader(*args, **kwargs)
        return self.reset()

    async def wait(self) -> Optional[Run]:
        run = self._run
        if run is not None and run.task is not None:
            await asyncio.shield(run.task)
        return run

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _drive(self, run: Run, producer, ctx: RunContext) -> None:
        work = self.domain.working_copy()
        try:
            outcome = await producer(ctx, work)
            if run.cancel_requested:
                run.state = RunState.CANCELLED
            else:
                run.outcome = outcome
                self.domain.commit(work)
                run.state = RunState.COMPLETED
        except RunCancelled:
            run.state = RunState.CANCELLED
        except asyncio.CancelledError:
            run.state = RunState.CANCELLED
            raise
        except Exception as e:
            run.error = e
            run.state = RunState.FAILED
            print(f"[ERROR] Run {run.id} ({self.domain.name}/{run.algorithm}) failed: {e}", file=sys.stderr)
        finally:
            if run is self._run:
                self._notify_running(False)

    def _is_current(self, run_id: int) -> bool:
        return self._run is not None and self._run.id == run_id

    def _accept(self, run: Run, views: Dict[str, Any]) -> bool:
        if not self._is_current(run.id):
            return False
        self._seq += 1
        self._set_head(self._head.merged(self._seq, **views))
        return True

    def _set_head(self, frame: Frame, reset_seq: bool = False) -> None:
        if reset_seq:
            self._seq = 0
        self._head = frame
        for listener in self._frame_listeners:
            listener(frame)

    def _notify_running(self, running: bool) -> None:
        for listener in self._running_listeners:
            listener(running)
