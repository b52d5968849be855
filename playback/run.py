import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class Outcome:
    """What a producer hands back: a display summary plus raw results."""

    summary: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Run:
    id: int
    algorithm: str
    params: Dict[str, Any]
    speed: int
    state: RunState = RunState.IDLE
    cancel_requested: bool = False
    outcome: Optional[Outcome] = None
    error: Optional[BaseException] = None
    task: Optional["asyncio.Task"] = field(default=None, repr=False)

    @property
    def live(self) -> bool:
        return self.state in (RunState.IDLE, RunState.RUNNING)

    @property
    def finished(self) -> bool:
        return not self.live
