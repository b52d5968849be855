import os
from dataclasses import dataclass


HARD_FLOOR_MS = 0.1


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, str(default)))
    except Exception:
        return default


@dataclass(frozen=True)
class PlaybackConfig:
    """Pacing knobs shared by every Run.

    speed is a 1..100 slider value; higher speed means a shorter step delay.
    """

    default_speed: int = 50
    step_unit_ms: float = 5.0
    min_delay_ms: float = 1.0
    grace_factor: float = 0.5

    @classmethod
    def from_env(cls) -> "PlaybackConfig":
        return cls(
            default_speed=int(_env_float("ALGOPLAY_DEFAULT_SPEED", 50)),
            step_unit_ms=_env_float("ALGOPLAY_STEP_UNIT_MS", 5.0),
            min_delay_ms=_env_float("ALGOPLAY_MIN_DELAY_MS", 1.0),
            grace_factor=_env_float("ALGOPLAY_GRACE_FACTOR", 0.5),
        )

    def delay_ms(self, speed: int) -> float:
        speed = max(1, min(100, int(speed)))
        return max(self.min_delay_ms, HARD_FLOOR_MS, (101 - speed) * self.step_unit_ms)

    def delay_seconds(self, speed: int) -> float:
        return self.delay_ms(speed) / 1000.0
